"""
Tests for the subscription and booking checkout functions.
Stripe is mocked; no request leaves the process.
"""
from types import SimpleNamespace
from unittest.mock import patch

import pytest

from backend.utils.responses import CORS_HEADERS
from config.settings import settings
from tests.conftest import auth_headers

USER_ID = "user-7"
FAKE_SESSION = SimpleNamespace(id="cs_test_123", url="https://checkout.stripe.com/c/pay/cs_test_123")

BOOKING_BODY = {
    "listing": {"id": 12, "title": "Apartamento Valle Gran Rey"},
    "range": {"from": "2025-08-01", "to": "2025-08-05"},
    "totalPrice": 480,
    "deposit": 96.5,
}


@pytest.fixture
def stripe_create():
    with patch("stripe.checkout.Session.create", return_value=FAKE_SESSION) as create:
        yield create


@pytest.mark.asyncio
async def test_subscription_checkout(async_client, stripe_create):
    response = await async_client.post(
        "/functions/v1/create-checkout-session",
        json={"planType": "premium", "planName": "Premium"},
        headers=auth_headers(USER_ID),
    )

    assert response.status_code == 200
    assert response.json() == {"sessionId": FAKE_SESSION.id, "url": FAKE_SESSION.url}
    kwargs = stripe_create.call_args.kwargs
    assert kwargs["mode"] == "subscription"
    assert kwargs["line_items"] == [{"price": settings.stripe_product_premium, "quantity": 1}]
    assert kwargs["metadata"] == {"user_id": USER_ID, "plan_name": "Premium"}
    assert kwargs["cancel_url"] == f"{settings.site_url}/membership"


@pytest.mark.asyncio
async def test_subscription_checkout_rejects_unknown_plan(async_client, stripe_create):
    response = await async_client.post(
        "/functions/v1/create-checkout-session",
        json={"planType": "platino", "planName": "Platino"},
        headers=auth_headers(USER_ID),
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid plan type: platino"}
    stripe_create.assert_not_called()


@pytest.mark.asyncio
async def test_subscription_checkout_requires_user(async_client, stripe_create):
    response = await async_client.post(
        "/functions/v1/create-checkout-session",
        json={"planType": "premium", "planName": "Premium"},
    )

    assert response.status_code == 400
    assert response.json() == {"error": "User not found."}
    stripe_create.assert_not_called()


@pytest.mark.asyncio
async def test_booking_checkout(async_client, stripe_create):
    response = await async_client.post(
        "/functions/v1/create-booking-checkout",
        json=BOOKING_BODY,
        headers=auth_headers(USER_ID),
    )

    assert response.status_code == 200
    assert response.json() == {"url": FAKE_SESSION.url}
    kwargs = stripe_create.call_args.kwargs
    assert kwargs["mode"] == "payment"
    line_item = kwargs["line_items"][0]
    assert line_item["price_data"]["currency"] == "eur"
    assert line_item["price_data"]["unit_amount"] == 9650
    assert line_item["price_data"]["product_data"]["name"] == "Depósito para: Apartamento Valle Gran Rey"
    assert kwargs["metadata"] == {
        "user_id": USER_ID,
        "listing_id": "12",
        "start_date": "2025-08-01",
        "end_date": "2025-08-05",
        "total_price": "480.0",
    }
    assert kwargs["cancel_url"] == f"{settings.site_url}/listing/12"


@pytest.mark.asyncio
async def test_booking_checkout_missing_deposit(async_client, stripe_create):
    body = {key: value for key, value in BOOKING_BODY.items() if key != "deposit"}

    response = await async_client.post(
        "/functions/v1/create-booking-checkout",
        json=body,
        headers=auth_headers(USER_ID),
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Missing required booking information."}
    stripe_create.assert_not_called()


@pytest.mark.asyncio
async def test_stripe_failure_is_reported(async_client):
    import stripe

    with patch("stripe.checkout.Session.create", side_effect=stripe.InvalidRequestError("No such price", "price")):
        response = await async_client.post(
            "/functions/v1/create-checkout-session",
            json={"planType": "básico", "planName": "Básico"},
            headers=auth_headers(USER_ID),
        )

    assert response.status_code == 400
    assert "No such price" in response.json()["error"]


@pytest.mark.asyncio
@pytest.mark.parametrize("function_name", [
    "check-listing-limits",
    "create-checkout-session",
    "create-booking-checkout",
])
async def test_preflight(async_client, function_name):
    response = await async_client.options(f"/functions/v1/{function_name}")

    assert response.status_code == 200
    assert response.text == "ok"
    assert response.headers["access-control-allow-origin"] == "*"
    assert "authorization" in response.headers["access-control-allow-headers"]


@pytest.mark.asyncio
@pytest.mark.parametrize("path,body", [
    ("/functions/v1/create-checkout-session", {"planType": "premium", "planName": "Premium"}),
    ("/functions/v1/create-booking-checkout", BOOKING_BODY),
])
async def test_unexpected_failure_is_reported_as_400(async_client, path, body):
    with patch("stripe.checkout.Session.create", side_effect=RuntimeError("connection reset")):
        response = await async_client.post(path, json=body, headers=auth_headers(USER_ID))

    assert response.status_code == 400
    assert response.json() == {"error": "connection reset"}
    assert response.headers["access-control-allow-origin"] == "*"


@pytest.mark.asyncio
async def test_browser_preflight_gets_function_headers(async_client):
    response = await async_client.options(
        "/functions/v1/create-checkout-session",
        headers={
            "Origin": "https://gomeraway.example",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "authorization, content-type",
        },
    )

    assert response.status_code == 200
    assert response.text == "ok"
    assert response.headers["access-control-allow-origin"] == "*"
    assert response.headers["access-control-allow-headers"] == CORS_HEADERS["Access-Control-Allow-Headers"]
    assert "access-control-max-age" not in response.headers


@pytest.mark.asyncio
async def test_api_preflight_is_answered_by_cors_middleware(async_client):
    response = await async_client.options(
        "/api/profile/me",
        headers={"Origin": "https://gomeraway.example", "Access-Control-Request-Method": "GET"},
    )

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "*"
