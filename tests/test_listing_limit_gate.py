"""
Tests for the client-side listing limit gate
"""
import httpx
import pytest

from services.limits_service import LimitCheckError
from services.listing_limit_gate import RETRY_MESSAGE, ListingLimitGate

FUNCTIONS_URL = "https://functions.example/functions/v1"


def _gate(handler) -> ListingLimitGate:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return ListingLimitGate("token-abc", functions_url=FUNCTIONS_URL, client=client)


@pytest.mark.asyncio
async def test_gate_returns_decision_and_sends_token():
    seen = {}

    def handler(request: httpx.Request):
        seen["url"] = str(request.url)
        seen["auth"] = request.headers["Authorization"]
        return httpx.Response(200, json={
            "canCreate": False,
            "currentCount": 5,
            "maxAllowed": 5,
            "planName": "premium",
            "isUnlimited": False,
            "message": "Has alcanzado el límite de 5 anuncios para tu plan premium.",
        })

    result = await _gate(handler).check_limits()

    assert seen == {"url": f"{FUNCTIONS_URL}/check-listing-limits", "auth": "Bearer token-abc"}
    assert result.can_create is False
    assert result.current_count == 5
    assert result.plan_name == "premium"


@pytest.mark.asyncio
async def test_error_response_raises_then_fails_closed():
    def handler(request):
        return httpx.Response(400, json={"error": "Invalid authentication", "canCreate": False})

    gate = _gate(handler)
    with pytest.raises(LimitCheckError, match="Invalid authentication"):
        await gate.check_limits()

    result = await gate.can_create_listing()
    assert result.can_create is False
    assert result.message == RETRY_MESSAGE


@pytest.mark.asyncio
async def test_transport_error_fails_closed():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    result = await _gate(handler).can_create_listing()

    assert result.can_create is False
    assert result.message == RETRY_MESSAGE


@pytest.mark.asyncio
async def test_malformed_body_fails_closed():
    def handler(request):
        return httpx.Response(200, text="<html>gateway</html>")

    result = await _gate(handler).can_create_listing()

    assert result.can_create is False
