"""
SubscriptionRepository for database operations on Subscription model
"""

from datetime import datetime
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError

from crud.results import Found, NoRows, QueryResult, StoreFailure
from database_models import Subscription


class SubscriptionRepository:
    """
    Repository class for Subscription database operations.
    Rows are unique per user_id.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_active(self, user_id: str) -> QueryResult[Subscription]:
        """
        Retrieve the user's subscription when its status is "active".
        """
        try:
            result = await self.db.execute(
                select(Subscription)
                .where(Subscription.user_id == user_id)
                .where(Subscription.status == "active")
            )
        except SQLAlchemyError as e:
            return StoreFailure.from_exception(e)
        subscription = result.scalar_one_or_none()
        if subscription is None:
            return NoRows()
        return Found(subscription)

    async def get_by_user(self, user_id: str) -> Optional[Subscription]:
        result = await self.db.execute(
            select(Subscription)
            .where(Subscription.user_id == user_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def upsert(
        self,
        user_id: str,
        plan: str,
        status: str = "active",
        stripe_subscription_id: Optional[str] = None,
    ) -> Subscription:
        """
        Insert the user's subscription or replace it on user_id conflict.

        Returns:
            The stored Subscription row
        """
        values = {
            "user_id": user_id,
            "plan": plan,
            "status": status,
            "stripe_subscription_id": stripe_subscription_id,
        }
        insert = pg_insert if self.db.bind.dialect.name == "postgresql" else sqlite_insert
        stmt = insert(Subscription).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=[Subscription.user_id],
            set_={
                "plan": stmt.excluded.plan,
                "status": stmt.excluded.status,
                "stripe_subscription_id": stmt.excluded.stripe_subscription_id,
                "updated_at": datetime.utcnow(),
            },
        )
        await self.db.execute(stmt)
        return await self.get_by_user(user_id)

    async def list(self, limit: Optional[int] = None) -> List[Subscription]:
        stmt = select(Subscription).order_by(Subscription.id)
        if limit:
            stmt = stmt.limit(limit)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def count(self) -> int:
        result = await self.db.execute(select(func.count()).select_from(Subscription))
        return result.scalar_one()
