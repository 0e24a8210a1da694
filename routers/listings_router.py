"""
Listings Router - listing creation behind the plan-limit policy
"""

import logging
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from auth import get_current_identity
from backend.utils.responses import success_response, error_response
from crud.listing import ListingRepository
from database import get_db
from models.identity import Identity
from models.listing import ListingCreate, ListingOut
from services.limits_service import LimitCheckError, ListingLimitService

logger = logging.getLogger(__name__)

listings_router = APIRouter(prefix="/api/listings", tags=["listings"])


@listings_router.post("")
async def create_listing(
    listing: ListingCreate,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    """
    Create a listing for the caller. The plan limit is re-evaluated here,
    whatever the client already checked.
    """
    try:
        limits = await ListingLimitService(db).check(identity.id)
    except LimitCheckError as e:
        logger.error(f"Listing limit check failed for {identity.id}: {e}")
        return error_response("LIMIT_CHECK_ERROR", 400, str(e))

    if not limits.can_create:
        return error_response("LISTING_LIMIT_REACHED", 403, limits.message, data=limits.to_response())

    created = await ListingRepository(db).create(identity.id, listing.model_dump())
    payload = ListingOut.model_validate(created).model_dump(mode="json")
    await db.commit()
    logger.info(f"Listing {payload['id']} created by host {identity.id}")
    return success_response(payload, status=201)
