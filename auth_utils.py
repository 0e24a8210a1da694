"""
Authentication utilities: JWT access token handling for platform-issued identities
"""

import jwt
from datetime import datetime, timedelta
from typing import Optional
from config.settings import settings

# JWT configuration
ALGORITHM = "HS256"
AUDIENCE = "authenticated"


def create_jwt(user_id: str, email: Optional[str] = None, user_metadata: Optional[dict] = None) -> str:
    """Create an access token for an identity"""
    if not settings.jwt_secret_key:
        raise ValueError("JWT_SECRET_KEY is not set. Cannot create JWT token.")

    payload = {
        "sub": user_id,
        "email": email,
        "aud": AUDIENCE,
        "user_metadata": user_metadata or {},
        "exp": datetime.utcnow() + timedelta(hours=1)
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=ALGORITHM)


def decode_jwt(token: str):
    """Decode an access token. Returns None if invalid."""
    if not settings.jwt_secret_key:
        raise ValueError("JWT_SECRET_KEY is not set. Cannot decode JWT token.")

    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[ALGORITHM],
            audience=AUDIENCE,
        )
        return payload
    except jwt.ExpiredSignatureError:
        return None
    except jwt.InvalidTokenError:
        return None


def create_expired_jwt(user_id: str, expired_seconds_ago: int = 1) -> str:
    """
    Create an expired access token for testing purposes.

    Raises:
        ValueError: If JWT_SECRET_KEY is not set
    """
    if not settings.jwt_secret_key:
        raise ValueError("JWT_SECRET_KEY is not set. Cannot create JWT token.")

    payload = {
        "sub": user_id,
        "aud": AUDIENCE,
        "exp": datetime.utcnow() - timedelta(seconds=expired_seconds_ago)
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=ALGORITHM)


def bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Extract the token from an "Authorization: Bearer ..." header value"""
    if authorization and authorization.startswith("Bearer "):
        return authorization.replace("Bearer ", "").strip() or None
    return None
