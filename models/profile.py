"""
Profile request/response models
"""
from datetime import datetime
from typing import Literal, Optional
from pydantic import BaseModel, ConfigDict

from models.identity import AuthSession, Identity

Role = Literal["user", "host", "admin"]


class ProfileOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    full_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    date_of_birth: Optional[str] = None
    role: Role = "user"
    profile_completed: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProfileUpdate(BaseModel):
    """Partial profile edit; only fields that are set get written"""
    full_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    date_of_birth: Optional[str] = None
    profile_completed: Optional[bool] = None


class AuthState(BaseModel):
    user: Optional[Identity] = None
    profile: Optional[ProfileOut] = None
    session: Optional[AuthSession] = None
    loading: bool = True
    error: Optional[str] = None
