"""
Booking and subscription summary views
"""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict


class BookingListing(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    location: Optional[str] = None
    type: str
    images_urls: List[str] = []
    host_id: str


class ContactOut(BaseModel):
    """Name and email of the other party of a booking"""
    model_config = ConfigDict(from_attributes=True)

    full_name: Optional[str] = None
    email: str = ""


class BookingOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    listing_id: int
    user_id: str
    start_date: str
    end_date: str
    total_price: float
    deposit_paid: bool
    status: str
    created_at: datetime


class UserBookingOut(BookingOut):
    listing: Optional[BookingListing] = None
    host_profile: Optional[ContactOut] = None


class HostBookingOut(BookingOut):
    listing: Optional[BookingListing] = None
    guest_profile: Optional[ContactOut] = None


class SubscriptionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    plan: str
    status: str
    stripe_subscription_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class SubscriptionSummary(BaseModel):
    subscription: Optional[SubscriptionOut] = None
    listings_count: int
    listings_limit: int
    is_unlimited: bool
    can_create_more: bool
    bookings_count: int
    revenue: float
