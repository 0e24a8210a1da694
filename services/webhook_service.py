"""
Webhook Service - turns verified Stripe events into subscription and booking rows
"""

import json
import logging
from typing import Optional

import stripe
from sqlalchemy.ext.asyncio import AsyncSession

from crud.booking import BookingRepository
from crud.subscription import SubscriptionRepository

logger = logging.getLogger(__name__)

CHECKOUT_COMPLETED = "checkout.session.completed"
DEFAULT_PLAN = "básico"
BOOKING_FIELDS = ("user_id", "listing_id", "start_date", "end_date", "total_price")


class WebhookProcessingError(Exception):
    """Raised when a verified event cannot be applied"""


def verify_event(payload: bytes, signature: Optional[str], secret: Optional[str]) -> dict:
    """
    Verify a Stripe-Signature header against the raw body and decode the event.

    Raises:
        stripe.SignatureVerificationError: signature missing, malformed or wrong
        ValueError: secret not configured or body is not JSON
    """
    if not secret:
        raise ValueError("STRIPE_WEBHOOK_SECRET is not set")
    body = payload.decode("utf-8")
    if not signature:
        raise stripe.SignatureVerificationError("Missing Stripe-Signature header", signature, body)
    stripe.WebhookSignature.verify_header(
        body, signature, secret, tolerance=stripe.Webhook.DEFAULT_TOLERANCE
    )
    return json.loads(body)


class WebhookService:
    """
    Applies checkout.session.completed events. Each event causes at most one
    write: a subscription upsert or a booking insert.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def process_event(self, event: dict) -> Optional[str]:
        """
        Apply a verified event.

        Returns:
            "subscription", "booking" or None when the event was ignored
        """
        event_type = event.get("type")
        logger.info(f"Processing Stripe webhook event: {event_type} ({event.get('id')})")

        if event_type != CHECKOUT_COMPLETED:
            logger.info(f"Event type {event_type} is not {CHECKOUT_COMPLETED}, ignoring")
            return None

        session = (event.get("data") or {}).get("object") or {}
        mode = session.get("mode")
        metadata = session.get("metadata") or {}
        logger.info(f"Checkout session {session.get('id')} completed in mode {mode}")

        if mode == "subscription":
            await self._apply_subscription(session, metadata)
            return "subscription"
        if mode == "payment":
            await self._apply_booking(metadata)
            return "booking"

        logger.warning(f"Unhandled checkout session mode: {mode}")
        return None

    async def _apply_subscription(self, session: dict, metadata: dict):
        user_id = metadata.get("user_id")
        if not user_id:
            raise WebhookProcessingError("User ID not found in subscription metadata.")

        plan = (metadata.get("plan_name") or DEFAULT_PLAN).lower()
        subscription = await SubscriptionRepository(self.db).upsert(
            user_id=user_id,
            plan=plan,
            status="active",
            stripe_subscription_id=session.get("subscription"),
        )
        await self.db.commit()
        logger.info(f"Subscription upserted for user {user_id}: plan={subscription.plan}")

    async def _apply_booking(self, metadata: dict):
        missing = [field for field in BOOKING_FIELDS if not metadata.get(field)]
        if missing:
            raise WebhookProcessingError(f"Missing required booking metadata: {', '.join(missing)}")

        try:
            booking_data = {
                "listing_id": int(metadata["listing_id"]),
                "user_id": metadata["user_id"],
                "start_date": metadata["start_date"],
                "end_date": metadata["end_date"],
                "total_price": float(metadata["total_price"]),
                "deposit_paid": True,
                "status": "confirmed",
            }
        except ValueError as e:
            raise WebhookProcessingError(f"Invalid booking metadata: {e}") from e

        # No idempotency key: a redelivered event inserts a second booking
        booking = await BookingRepository(self.db).insert(booking_data)
        await self.db.commit()
        logger.info(f"Booking {booking.id} inserted for listing {booking.listing_id}")
