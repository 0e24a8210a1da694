"""
Identity and session models
"""
from typing import Optional
from pydantic import BaseModel, Field


class Identity(BaseModel):
    """Authenticated principal of a request"""
    id: str
    email: Optional[str] = None
    user_metadata: dict = Field(default_factory=dict)


class AuthSession(BaseModel):
    access_token: str
    user: Identity
