"""
Functions Router - the platform functions called by the frontend and by Stripe.

Every route answers OPTIONS preflights and carries the same CORS headers.
Errors come back as HTTP 400 with an "error" field.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession
import stripe

from auth import get_optional_identity
from backend.utils.responses import function_error, function_response, function_text, preflight_response
from config.settings import settings
from database import get_db
from models.billing import BookingCheckoutRequest, SubscriptionCheckoutRequest
from models.identity import Identity
from services.checkout_service import CheckoutError, CheckoutService
from services.limits_service import LimitCheckError, ListingLimitService
from services.webhook_service import WebhookService, verify_event

logger = logging.getLogger(__name__)

functions_router = APIRouter(prefix="/functions/v1", tags=["functions"])

# Body sent alongside the error when the limit check itself fails
LIMITS_ERROR_BODY = {
    "canCreate": False,
    "currentCount": 0,
    "maxAllowed": 0,
    "planName": "error",
    "isUnlimited": False,
}


# WEBHOOK ENDPOINT - reads the raw body, so it must not depend on JSON parsing
@functions_router.post("/stripe-webhook")
async def stripe_webhook(request: Request, db: AsyncSession = Depends(get_db)):
    """
    Verify and apply a Stripe event.

    Returns 400 without touching the database when the signature does not
    verify, 400 when applying the event fails (Stripe redelivers), and
    200 {"received": true} otherwise, including for ignored event types.
    """
    payload = await request.body()
    signature = request.headers.get("stripe-signature")
    logger.info(f"Webhook received: {len(payload)} bytes, signature present: {bool(signature)}")

    try:
        event = verify_event(payload, signature, settings.stripe_webhook_secret)
    except (stripe.SignatureVerificationError, ValueError) as e:
        logger.error(f"Stripe webhook signature verification failed: {e}")
        return function_text(f"Webhook Error: {e}", status=400)

    try:
        await WebhookService(db).process_event(event)
    except Exception as e:
        logger.error(f"Webhook handler error: {e}", exc_info=True)
        await db.rollback()
        return function_text(f"Webhook handler error: {e}", status=400)

    return function_response({"received": True})


@functions_router.options("/{function_name}")
async def preflight(function_name: str):
    return preflight_response()


@functions_router.api_route("/check-listing-limits", methods=["GET", "POST"])
async def check_listing_limits(
    identity: Optional[Identity] = Depends(get_optional_identity),
    db: AsyncSession = Depends(get_db),
):
    """
    Decide whether the caller may create another listing.
    """
    try:
        if identity is None:
            raise LimitCheckError("Invalid authentication")
        result = await ListingLimitService(db).check(identity.id)
    except LimitCheckError as e:
        logger.error(f"Error in check-listing-limits: {e}")
        return function_error(e, **LIMITS_ERROR_BODY)
    except Exception as e:
        logger.error(f"Unexpected error in check-listing-limits: {e}", exc_info=True)
        return function_error(e, **LIMITS_ERROR_BODY)

    return function_response(result.to_response())


@functions_router.post("/create-checkout-session")
async def create_checkout_session(
    request: Request,
    identity: Optional[Identity] = Depends(get_optional_identity),
):
    """
    Create a Stripe subscription checkout for a plan.
    """
    try:
        if identity is None:
            raise CheckoutError("User not found.")
        service = CheckoutService(identity)
        body = SubscriptionCheckoutRequest.model_validate(await request.json())
        return function_response(service.create_subscription_checkout(body))
    except (CheckoutError, ValidationError, ValueError, stripe.StripeError) as e:
        logger.error(f"Error: {e}")
        return function_error(e)
    except Exception as e:
        logger.error(f"Unexpected checkout error: {e}", exc_info=True)
        return function_error(e)


@functions_router.post("/create-booking-checkout")
async def create_booking_checkout(
    request: Request,
    identity: Optional[Identity] = Depends(get_optional_identity),
):
    """
    Create a Stripe one-time checkout for a booking deposit.
    """
    try:
        if identity is None:
            raise CheckoutError("User not found.")
        service = CheckoutService(identity)
        body = BookingCheckoutRequest.model_validate(await request.json())
        return function_response(service.create_booking_checkout(body))
    except (CheckoutError, ValidationError, ValueError, stripe.StripeError) as e:
        logger.error(f"Error: {e}")
        return function_error(e)
    except Exception as e:
        logger.error(f"Unexpected checkout error: {e}", exc_info=True)
        return function_error(e)
