"""
Reservations Router - the caller's bookings, bookings on their listings, and plan usage
"""

import logging
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from auth import get_current_identity
from backend.utils.responses import success_response, error_response
from database import get_db
from models.identity import Identity
from services.limits_service import LimitCheckError
from services.reservations_service import ReservationsService

logger = logging.getLogger(__name__)

reservations_router = APIRouter(prefix="/api", tags=["reservations"])


@reservations_router.get("/bookings/me")
async def get_my_bookings(
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    bookings = await ReservationsService(db).user_bookings(identity.id)
    return success_response({"bookings": [b.model_dump(mode="json") for b in bookings]})


@reservations_router.get("/bookings/host")
async def get_host_bookings(
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    """Bookings guests made on the caller's listings"""
    bookings = await ReservationsService(db).host_bookings(identity.id)
    return success_response({"bookings": [b.model_dump(mode="json") for b in bookings]})


@reservations_router.get("/subscription/summary")
async def get_subscription_summary(
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    try:
        summary = await ReservationsService(db).subscription_summary(identity.id)
    except LimitCheckError as e:
        logger.error(f"Subscription summary failed for {identity.id}: {e}")
        return error_response("SUBSCRIPTION_SUMMARY_ERROR", 500, str(e))
    return success_response(summary.model_dump(mode="json"))
