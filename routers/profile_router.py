"""
Profile Router - profile sync and edits for the signed-in identity
"""

import logging
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from auth import get_current_identity
from backend.utils.responses import success_response, error_response
from crud.profile import ProfileRepository
from crud.results import Found
from database import get_db
from models.identity import Identity
from models.profile import ProfileOut, ProfileUpdate
from services.session_manager import ProfileSyncError, check_profile_completion, sync_profile

logger = logging.getLogger(__name__)

profile_router = APIRouter(prefix="/api/profile", tags=["profile"])


def _profile_payload(profile) -> dict:
    return {
        "profile": ProfileOut.model_validate(profile).model_dump(mode="json"),
        "is_profile_complete": check_profile_completion(profile),
        "is_admin": profile.role == "admin",
    }


@profile_router.get("/me")
async def get_my_profile(
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    """Sync and return the caller's profile"""
    try:
        profile = await sync_profile(ProfileRepository(db), identity)
        payload = _profile_payload(profile)
        await db.commit()
    except ProfileSyncError as e:
        logger.error(f"Error creating/updating profile: {e}")
        return error_response("PROFILE_SYNC_ERROR", 500, str(e))
    return success_response(payload)


@profile_router.patch("")
async def update_my_profile(
    updates: ProfileUpdate,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    """Partial update of the caller's profile"""
    repo = ProfileRepository(db)
    result = await repo.get(identity.id)
    if not isinstance(result, Found):
        raise HTTPException(status_code=404, detail="Profile not found")

    profile = await repo.update(result.row, updates.model_dump(exclude_unset=True))
    payload = _profile_payload(profile)
    await db.commit()
    return success_response(payload)
