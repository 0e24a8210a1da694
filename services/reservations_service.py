"""
Reservations service - read-only booking and subscription views for guests and hosts
"""

import logging
from typing import List
from sqlalchemy.ext.asyncio import AsyncSession

from crud.booking import BookingRepository
from crud.listing import ListingRepository
from crud.profile import ProfileRepository
from crud.results import Found, StoreFailure
from crud.subscription import SubscriptionRepository
from models.booking import (
    BookingListing,
    ContactOut,
    HostBookingOut,
    SubscriptionOut,
    SubscriptionSummary,
    UserBookingOut,
)
from services.limits_service import LimitCheckError
from services.plan_limits import evaluate_listing_limits

logger = logging.getLogger(__name__)


def _contact(profile):
    return ContactOut.model_validate(profile) if profile is not None else None


def _listing(listing):
    return BookingListing.model_validate(listing) if listing is not None else None


class ReservationsService:

    def __init__(self, db: AsyncSession):
        self.db = db
        self.bookings = BookingRepository(db)
        self.listings = ListingRepository(db)
        self.profiles = ProfileRepository(db)

    async def user_bookings(self, user_id: str) -> List[UserBookingOut]:
        """
        The guest's bookings, newest first, each with its listing and the host's contact.
        Listings or host profiles that no longer exist come back as None.
        """
        bookings = await self.bookings.list_for_user(user_id)
        listings = await self.listings.get_many(b.listing_id for b in bookings)
        hosts = await self.profiles.get_many(listing.host_id for listing in listings.values())

        views = []
        for booking in bookings:
            listing = listings.get(booking.listing_id)
            view = UserBookingOut.model_validate(booking)
            view.listing = _listing(listing)
            view.host_profile = _contact(hosts.get(listing.host_id)) if listing else None
            views.append(view)
        return views

    async def host_bookings(self, host_id: str) -> List[HostBookingOut]:
        """
        Bookings made on any of the host's listings, newest first, with the guest's contact.
        """
        listing_ids = await self.listings.list_ids_for_host(host_id)
        bookings = await self.bookings.list_for_listings(listing_ids)
        listings = await self.listings.get_many(listing_ids)
        guests = await self.profiles.get_many(b.user_id for b in bookings)

        views = []
        for booking in bookings:
            view = HostBookingOut.model_validate(booking)
            view.listing = _listing(listings.get(booking.listing_id))
            view.guest_profile = _contact(guests.get(booking.user_id))
            views.append(view)
        return views

    async def subscription_summary(self, user_id: str) -> SubscriptionSummary:
        """
        Active plan, listing usage against the plan limit, and confirmed bookings with their total.
        """
        subscription = await SubscriptionRepository(self.db).get_active(user_id)
        if isinstance(subscription, StoreFailure):
            logger.error(f"Error fetching subscription: {subscription.code} {subscription.message}")
            raise LimitCheckError("Error checking subscription status")
        active = subscription.row if isinstance(subscription, Found) else None

        count = await self.listings.count_active(user_id)
        if not isinstance(count, Found):
            raise LimitCheckError("Error checking current listings")

        limits = evaluate_listing_limits(active.plan if active else None, count.row)
        confirmed = await self.bookings.list_for_user(user_id, status="confirmed")

        return SubscriptionSummary(
            subscription=SubscriptionOut.model_validate(active) if active else None,
            listings_count=count.row,
            listings_limit=limits.max_allowed,
            is_unlimited=limits.is_unlimited,
            can_create_more=limits.can_create,
            bookings_count=len(confirmed),
            revenue=sum(b.total_price or 0 for b in confirmed),
        )
