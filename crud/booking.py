"""
BookingRepository for database operations on Booking model
"""

from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func

from database_models import Booking


class BookingRepository:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def insert(self, booking_data: dict) -> Booking:
        """
        Insert a booking row. There is no natural key: every call adds a row.
        """
        booking = Booking(**booking_data)
        self.db.add(booking)
        await self.db.flush()
        await self.db.refresh(booking)
        return booking

    async def list_for_user(self, user_id: str, status: Optional[str] = None) -> List[Booking]:
        """
        The user's bookings, newest first. Pass status to keep only that status.
        """
        stmt = select(Booking).where(Booking.user_id == user_id)
        if status:
            stmt = stmt.where(Booking.status == status)
        result = await self.db.execute(stmt.order_by(Booking.created_at.desc(), Booking.id.desc()))
        return list(result.scalars().all())

    async def list_for_listings(self, listing_ids: List[int]) -> List[Booking]:
        if not listing_ids:
            return []
        result = await self.db.execute(
            select(Booking)
            .where(Booking.listing_id.in_(listing_ids))
            .order_by(Booking.created_at.desc(), Booking.id.desc())
        )
        return list(result.scalars().all())

    async def list(self, limit: int = 5) -> List[Booking]:
        result = await self.db.execute(select(Booking).order_by(Booking.id).limit(limit))
        return list(result.scalars().all())

    async def count(self) -> int:
        result = await self.db.execute(select(func.count()).select_from(Booking))
        return result.scalar_one()
