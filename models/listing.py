"""
Listing request models
"""
from typing import List, Literal, Optional
from pydantic import BaseModel, ConfigDict


class ListingCreate(BaseModel):
    title: str
    description: Optional[str] = None
    type: Literal["accommodation", "vehicle"] = "accommodation"
    location: Optional[str] = None
    price_per_night_or_day: float = 0.0
    is_active: bool = True
    images_urls: List[str] = []


class ListingOut(ListingCreate):
    model_config = ConfigDict(from_attributes=True)

    id: int
    host_id: str
