"""
Checkout Service - Stripe Checkout sessions for plan subscriptions and booking deposits
"""

import logging
import math
from typing import Optional

import stripe

from config.settings import settings
from models.billing import BookingCheckoutRequest, SubscriptionCheckoutRequest
from models.identity import Identity

logger = logging.getLogger(__name__)

BOOKING_CURRENCY = "eur"


class CheckoutError(Exception):
    """Raised for any checkout request that cannot be turned into a session"""


def plan_products() -> dict:
    """Plan type to Stripe product mapping, read from settings at call time"""
    return {
        "básico": settings.stripe_product_basico,
        "premium": settings.stripe_product_premium,
        "diamante": settings.stripe_product_diamante,
    }


def to_minor_units(amount: float) -> int:
    # half-up, matching how the storefront displays cents
    return int(math.floor(amount * 100 + 0.5))


def _configure_stripe():
    if not settings.stripe_secret_key:
        raise CheckoutError("STRIPE_SECRET_KEY is not set. Cannot create checkout session.")
    stripe.api_key = settings.stripe_secret_key
    stripe.api_version = settings.stripe_api_version


class CheckoutService:
    """
    Builds Stripe Checkout sessions. Metadata attached here is what the
    webhook later reads back to create subscriptions and bookings.
    """

    def __init__(self, identity: Optional[Identity]):
        self.identity = identity

    def _require_identity(self) -> Identity:
        if self.identity is None:
            raise CheckoutError("User not found.")
        return self.identity

    def create_subscription_checkout(self, request: SubscriptionCheckoutRequest) -> dict:
        """
        Create a recurring checkout session for a plan.

        Returns:
            {"sessionId": ..., "url": ...}
        """
        user = self._require_identity()

        if not request.plan_type or not request.plan_name:
            raise CheckoutError("planType and planName are required.")

        product_id = plan_products().get(request.plan_type)
        if not product_id:
            raise CheckoutError(f"Invalid plan type: {request.plan_type}")

        _configure_stripe()
        session = stripe.checkout.Session.create(
            payment_method_types=["card"],
            line_items=[{"price": product_id, "quantity": 1}],
            mode="subscription",
            success_url=f"{settings.site_url}/payment/success?type=subscription",
            cancel_url=f"{settings.site_url}/membership",
            metadata={
                "user_id": user.id,
                "plan_name": request.plan_name,
            },
        )
        logger.info(f"Subscription checkout session created: {session.id} (user {user.id}, plan {request.plan_type})")
        return {"sessionId": session.id, "url": session.url}

    def create_booking_checkout(self, request: BookingCheckoutRequest) -> dict:
        """
        Create a one-time checkout session for a booking deposit.

        Returns:
            {"url": ...}
        """
        user = self._require_identity()

        listing, date_range = request.listing, request.range
        if not listing or not date_range or not request.total_price or not request.deposit:
            raise CheckoutError("Missing required booking information.")
        if not date_range.start or not date_range.end:
            raise CheckoutError("Missing required booking information.")

        metadata = {
            "user_id": user.id,
            "listing_id": str(listing.id),
            "start_date": date_range.start,
            "end_date": date_range.end,
            "total_price": str(request.total_price),
        }
        logger.info(f"Creating booking checkout session with metadata: {metadata}")

        _configure_stripe()
        session = stripe.checkout.Session.create(
            payment_method_types=["card"],
            mode="payment",
            line_items=[
                {
                    "price_data": {
                        "currency": BOOKING_CURRENCY,
                        "product_data": {
                            "name": f"Depósito para: {listing.title}",
                            "description": f"Reserva del {date_range.start} al {date_range.end}",
                        },
                        "unit_amount": to_minor_units(request.deposit),
                    },
                    "quantity": 1,
                }
            ],
            success_url=f"{settings.site_url}/payment/success?type=booking",
            cancel_url=f"{settings.site_url}/listing/{listing.id}",
            metadata=metadata,
        )
        logger.info(f"Booking checkout session created: {session.id}")
        return {"url": session.url}
