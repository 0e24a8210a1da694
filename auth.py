"""
Identity dependencies for routes
"""

from typing import Optional
from fastapi import Depends, Header, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from auth_utils import bearer_token, decode_jwt
from crud.profile import ProfileRepository
from crud.results import Found
from database import get_db
from models.identity import Identity

logger = logging.getLogger(__name__)


def identity_from_token(token: Optional[str]) -> Optional[Identity]:
    """
    Resolve an access token to an Identity. Returns None for missing or invalid tokens.
    """
    if not token:
        return None
    payload = decode_jwt(token)
    if not payload or not payload.get("sub"):
        return None
    return Identity(
        id=str(payload["sub"]),
        email=payload.get("email"),
        user_metadata=payload.get("user_metadata") or {},
    )


async def get_optional_identity(
    authorization: Optional[str] = Header(None, alias="Authorization"),
) -> Optional[Identity]:
    """
    Dependency for handlers that report a missing identity themselves.
    """
    try:
        return identity_from_token(bearer_token(authorization))
    except ValueError as e:
        logger.error(f"Cannot verify access token: {e}")
        return None


async def get_current_identity(
    identity: Optional[Identity] = Depends(get_optional_identity),
) -> Identity:
    """
    Dependency for protected routes. Raises 401 without a valid bearer token.
    """
    if identity is None:
        raise HTTPException(status_code=401, detail="Invalid or missing authentication token")
    return identity


async def require_admin(
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
) -> Identity:
    """
    Dependency for admin-only routes. The role is read from the caller's profile row.
    """
    result = await ProfileRepository(db).get(identity.id)
    if not isinstance(result, Found) or result.row.role != "admin":
        raise HTTPException(status_code=403, detail="Admin role required")
    return identity
