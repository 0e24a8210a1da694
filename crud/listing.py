"""
ListingRepository for database operations on Listing model
"""

from typing import Dict, Iterable, List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from sqlalchemy.exc import SQLAlchemyError

from crud.results import Found, QueryResult, StoreFailure
from database_models import Listing


class ListingRepository:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def count_active(self, host_id: str) -> QueryResult[int]:
        """
        Count the host's listings that are currently active.
        """
        try:
            result = await self.db.execute(
                select(func.count())
                .select_from(Listing)
                .where(Listing.host_id == host_id)
                .where(Listing.is_active.is_(True))
            )
        except SQLAlchemyError as e:
            return StoreFailure.from_exception(e)
        return Found(result.scalar_one())

    async def create(self, host_id: str, listing_data: dict) -> Listing:
        listing = Listing(
            host_id=host_id,
            title=listing_data["title"],
            description=listing_data.get("description"),
            type=listing_data.get("type", "accommodation"),
            location=listing_data.get("location"),
            price_per_night_or_day=listing_data.get("price_per_night_or_day", 0.0),
            is_active=listing_data.get("is_active", True),
            images_urls=listing_data.get("images_urls") or [],
        )
        self.db.add(listing)
        await self.db.flush()
        await self.db.refresh(listing)
        return listing

    async def list_ids_for_host(self, host_id: str) -> List[int]:
        result = await self.db.execute(select(Listing.id).where(Listing.host_id == host_id))
        return list(result.scalars().all())

    async def get_many(self, listing_ids: Iterable[int]) -> Dict[int, Listing]:
        ids = set(listing_ids)
        if not ids:
            return {}
        result = await self.db.execute(select(Listing).where(Listing.id.in_(ids)))
        return {listing.id: listing for listing in result.scalars().all()}
