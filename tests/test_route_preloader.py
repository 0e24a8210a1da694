"""
Tests for the route preloading task queue
"""
import asyncio

import pytest

from services.route_preloader import PreloadRule, RoutePreloader


def _loaders(calls, failing=()):
    def make(route):
        async def load():
            calls.append(route)
            if route in failing:
                raise ImportError(f"chunk for {route} missing")
            return route
        return load
    routes = ["/dashboard/host", "/dashboard/user", "/listings/create", "/admin", "/membership"]
    return {route: make(route) for route in routes}


RULES = {
    "/": PreloadRule(("/dashboard/host", "/dashboard/user"), 10),
    "/dashboard/host": PreloadRule(("/listings/create", "/admin"), 10),
}


@pytest.mark.asyncio
async def test_navigation_preloads_follow_up_routes():
    calls = []
    preloader = RoutePreloader(_loaders(calls), RULES)

    await preloader.navigate("/")

    assert calls == ["/dashboard/host", "/dashboard/user"]
    assert preloader.preloaded_routes() == ["/dashboard/host", "/dashboard/user"]


@pytest.mark.asyncio
async def test_navigating_away_cancels_pending_work():
    calls = []
    rules = {**RULES, "/": PreloadRule(("/dashboard/host",), 5000)}
    preloader = RoutePreloader(_loaders(calls), rules)

    first = preloader.navigate("/")
    second = preloader.navigate("/dashboard/host")
    await second

    assert first.cancelled()
    assert calls == ["/listings/create", "/admin"]


@pytest.mark.asyncio
async def test_failures_are_swallowed():
    calls = []
    preloader = RoutePreloader(_loaders(calls, failing={"/dashboard/host"}), RULES)

    await preloader.navigate("/")

    assert calls == ["/dashboard/host", "/dashboard/user"]
    assert preloader.preloaded_routes() == ["/dashboard/user"]


@pytest.mark.asyncio
async def test_unknown_route_schedules_nothing():
    preloader = RoutePreloader(_loaders([]), RULES)

    assert preloader.navigate("/about") is None
    assert await preloader.preload("/nowhere") is False


@pytest.mark.asyncio
async def test_hover_preload_and_cancel():
    calls = []
    preloader = RoutePreloader(_loaders(calls), RULES)

    preloader.hover_start("/membership")
    preloader.hover_end("/membership")
    await asyncio.sleep(0.15)
    assert calls == []

    await preloader.hover_start("/membership")
    assert calls == ["/membership"]


@pytest.mark.asyncio
async def test_close_cancels_everything():
    calls = []
    rules = {"/": PreloadRule(("/dashboard/host",), 5000)}
    preloader = RoutePreloader(_loaders(calls), rules)

    task = preloader.navigate("/")
    preloader.hover_start("/membership")
    await preloader.close()

    assert task.cancelled()
    assert calls == []
