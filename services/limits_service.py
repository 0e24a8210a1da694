"""
Listing limit service - evaluates a host's listing quota against the row store
"""

import logging
from sqlalchemy.ext.asyncio import AsyncSession

from crud.listing import ListingRepository
from crud.results import Found, NoRows, StoreFailure
from crud.subscription import SubscriptionRepository
from models.billing import ListingLimits
from services.plan_limits import evaluate_listing_limits, no_subscription_limits

logger = logging.getLogger(__name__)


class LimitCheckError(Exception):
    """Raised when a listing-limit decision cannot be made"""


class ListingLimitService:
    """
    Reads the host's active subscription and active-listing count on every call.
    Decisions are never cached between requests.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def check(self, user_id: str) -> ListingLimits:
        logger.info(f"Checking listing limits for user: {user_id}")

        subscription = await SubscriptionRepository(self.db).get_active(user_id)
        if isinstance(subscription, StoreFailure):
            logger.error(f"Error fetching subscription: {subscription.code} {subscription.message}")
            raise LimitCheckError("Error checking subscription status")
        if isinstance(subscription, NoRows):
            logger.info(f"No active subscription for user: {user_id}")
            return no_subscription_limits()

        count = await ListingRepository(self.db).count_active(user_id)
        if not isinstance(count, Found):
            logger.error(f"Error counting listings: {count}")
            raise LimitCheckError("Error checking current listings")

        result = evaluate_listing_limits(subscription.row.plan, count.row)
        logger.info(
            f"Current active listings: {result.current_count}, "
            f"max allowed: {result.max_allowed}, can create: {result.can_create}"
        )
        return result
