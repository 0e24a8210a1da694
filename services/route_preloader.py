"""
Route Preloader - best-effort background prefetching of likely-next pages.

Work is queued as asyncio tasks owned by the preloader. Navigating away cancels
whatever is still pending, and loader failures are logged and dropped.
"""

import asyncio
import functools
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, List, Optional, Set, Tuple

logger = logging.getLogger(__name__)

Loader = Callable[[], Awaitable[object]]

HOVER_DELAY_MS = 100


@dataclass(frozen=True)
class PreloadRule:
    routes: Tuple[str, ...]
    delay_ms: int


ROUTE_PRELOAD_MAP: Dict[str, PreloadRule] = {
    "/": PreloadRule(("/dashboard/host", "/dashboard/user"), 2000),
    "/dashboard/host": PreloadRule(("/listings/create", "/admin"), 1000),
    "/dashboard/user": PreloadRule(("/accommodation", "/vehicles"), 1000),
    "/admin": PreloadRule(("/admin/analytics", "/admin/users", "/admin/listings"), 500),
}


class RoutePreloader:
    """
    Cancellable task queue for route prefetching.

    Args:
        loaders: route path -> async callable that fetches the route's bundle
        rules: current route -> routes to prefetch and the delay before doing so
    """

    def __init__(self, loaders: Dict[str, Loader], rules: Optional[Dict[str, PreloadRule]] = None):
        self.loaders = loaders
        self.rules = ROUTE_PRELOAD_MAP if rules is None else rules
        self._navigation_task: Optional[asyncio.Task] = None
        self._hover_tasks: Dict[str, asyncio.Task] = {}
        self._preloaded: Set[str] = set()

    async def preload(self, route: str) -> bool:
        """
        Load one route now. Returns False for unknown routes or failed loads.
        """
        loader = self.loaders.get(route)
        if loader is None:
            return False
        try:
            await loader()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.debug(f"Preload of {route} failed: {e}")
            return False
        self._preloaded.add(route)
        return True

    async def _run_after(self, delay_ms: int, routes: Tuple[str, ...]):
        await asyncio.sleep(delay_ms / 1000)
        for route in routes:
            await self.preload(route)

    def navigate(self, path: str) -> Optional[asyncio.Task]:
        """
        Record a navigation. Pending work for the previous route is cancelled and
        the follow-up routes for `path` are scheduled after its delay.
        """
        self.cancel_pending()
        rule = self.rules.get(path)
        if rule is None:
            return None
        self._navigation_task = asyncio.create_task(self._run_after(rule.delay_ms, rule.routes))
        return self._navigation_task

    def hover_start(self, route: str) -> Optional[asyncio.Task]:
        if route not in self.loaders:
            return None
        self.hover_end(route)
        task = asyncio.create_task(self._run_after(HOVER_DELAY_MS, (route,)))
        self._hover_tasks[route] = task
        task.add_done_callback(functools.partial(self._forget_hover, route))
        return task

    def _forget_hover(self, route: str, task: asyncio.Task):
        if self._hover_tasks.get(route) is task:
            del self._hover_tasks[route]

    def hover_end(self, route: str):
        task = self._hover_tasks.pop(route, None)
        if task is not None:
            task.cancel()

    def cancel_pending(self):
        if self._navigation_task is not None:
            self._navigation_task.cancel()
            self._navigation_task = None

    def preloaded_routes(self) -> List[str]:
        return sorted(self._preloaded)

    async def close(self):
        """Cancel all queued work and wait for it to unwind."""
        tasks = [t for t in [self._navigation_task, *self._hover_tasks.values()] if t is not None]
        self._navigation_task = None
        self._hover_tasks.clear()
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
