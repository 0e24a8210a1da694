"""
Checkout and listing-limit models
"""
from typing import Optional, Union
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class SubscriptionCheckoutRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    plan_type: Optional[str] = None
    plan_name: Optional[str] = None


class ListingRef(BaseModel):
    id: Union[int, str]
    title: str = ""


class DateRange(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    start: Optional[str] = Field(default=None, alias="from")
    end: Optional[str] = Field(default=None, alias="to")


class BookingCheckoutRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    listing: Optional[ListingRef] = None
    range: Optional[DateRange] = None
    total_price: Optional[float] = None
    deposit: Optional[float] = None


class ListingLimits(BaseModel):
    """Listing-limit decision as returned by the check-listing-limits function"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    can_create: bool
    current_count: int = 0
    max_allowed: int = 0
    plan_name: str = "none"
    is_unlimited: bool = False
    message: Optional[str] = None

    def to_response(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)
