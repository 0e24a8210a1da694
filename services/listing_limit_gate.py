"""
Listing Limit Gate - asks the check-listing-limits function whether the
signed-in host may create another listing.
"""

import logging
from typing import Optional

import httpx
from pydantic import ValidationError

from config.settings import settings
from models.billing import ListingLimits
from services.limits_service import LimitCheckError

logger = logging.getLogger(__name__)

LIMITS_FUNCTION = "check-listing-limits"
RETRY_MESSAGE = "Error verificando límites. Por favor intenta de nuevo."


class ListingLimitGate:
    """
    Client-side gate run before a listing form is submitted. Each call asks the
    function again; results are never reused across calls.
    """

    def __init__(
        self,
        access_token: str,
        functions_url: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 10.0,
    ):
        self.access_token = access_token
        self.functions_url = (functions_url or settings.functions_url or "").rstrip("/")
        self._client = client
        self.timeout = timeout

    async def _invoke(self) -> httpx.Response:
        url = f"{self.functions_url}/{LIMITS_FUNCTION}"
        headers = {"Authorization": f"Bearer {self.access_token}"}
        if self._client is not None:
            return await self._client.post(url, headers=headers, timeout=self.timeout)
        async with httpx.AsyncClient() as client:
            return await client.post(url, headers=headers, timeout=self.timeout)

    async def check_limits(self) -> ListingLimits:
        """
        Fetch the current limit decision.

        Raises:
            LimitCheckError: On transport errors, non-2xx answers or malformed bodies
        """
        try:
            response = await self._invoke()
        except httpx.HTTPError as e:
            raise LimitCheckError(f"Error checking listing limits: {e}") from e

        if not response.is_success:
            try:
                detail = response.json().get("error")
            except ValueError:
                detail = None
            raise LimitCheckError(detail or f"Error checking listing limits: HTTP {response.status_code}")

        try:
            return ListingLimits.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise LimitCheckError(f"Invalid listing limits response: {e}") from e

    async def can_create_listing(self) -> ListingLimits:
        """
        Fail-closed variant of check_limits: any error denies creation.
        """
        try:
            return await self.check_limits()
        except LimitCheckError as e:
            logger.error(f"Error checking if can create listing: {e}")
            return ListingLimits(can_create=False, plan_name="error", message=RETRY_MESSAGE)
