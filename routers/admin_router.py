"""
Admin Router - diagnostic probes for administrators.

Probe failures are reported inside the payload; these endpoints never fail
because one table is unreachable.
"""

import logging
from datetime import datetime
from typing import Awaitable, Callable

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from auth import require_admin
from backend.utils.responses import success_response
from crud.booking import BookingRepository
from crud.profile import ProfileRepository
from crud.results import Found
from crud.subscription import SubscriptionRepository
from database import get_db
from models.identity import Identity

logger = logging.getLogger(__name__)

admin_router = APIRouter(prefix="/api/admin", tags=["admin"])

PROBE_LIMIT = 5


async def _probe(name: str, fetch: Callable[[], Awaitable[list]], fields: tuple) -> dict:
    try:
        rows = await fetch()
    except SQLAlchemyError as e:
        logger.warning(f"Debug probe {name} failed: {e}")
        return {"status": "error", "error": str(e)}
    return {
        "status": "success",
        "count": len(rows),
        "data": [{field: getattr(row, field) for field in fields} for row in rows],
    }


@admin_router.get("/debug")
async def debug_panel(
    identity: Identity = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Caller auth info plus a small read from each core table"""
    profile = await ProfileRepository(db).get(identity.id)
    tests = {
        "profiles": await _probe(
            "profiles", lambda: ProfileRepository(db).list(PROBE_LIMIT), ("id", "email", "role")
        ),
        "subscriptions": await _probe(
            "subscriptions", lambda: SubscriptionRepository(db).list(PROBE_LIMIT), ("id", "user_id", "plan", "status")
        ),
        "bookings": await _probe(
            "bookings", lambda: BookingRepository(db).list(PROBE_LIMIT), ("id", "listing_id", "user_id", "status")
        ),
    }
    return success_response({
        "timestamp": datetime.utcnow().isoformat(),
        "auth": {
            "user": {"id": identity.id, "email": identity.email},
            "profile": (
                {"id": profile.row.id, "email": profile.row.email, "role": profile.row.role}
                if isinstance(profile, Found) else None
            ),
        },
        "tests": tests,
    })


@admin_router.get("/subscription-test")
async def subscription_test(
    identity: Identity = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Basic select and exact count against subscriptions"""
    repo = SubscriptionRepository(db)
    results = {
        "basicSelect": await _probe(
            "subscriptions", lambda: repo.list(PROBE_LIMIT), ("id", "user_id", "plan", "status")
        ),
    }
    try:
        results["countQuery"] = {"status": "success", "count": await repo.count()}
    except SQLAlchemyError as e:
        results["countQuery"] = {"status": "error", "error": str(e)}
    results["userInfo"] = {"userId": identity.id, "userEmail": identity.email, "isAdmin": True}
    return success_response(results)
