"""
ProfileRepository for database operations on Profile model
"""

from typing import Dict, Iterable, List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from crud.results import Found, NoRows, QueryResult, StoreFailure
from database_models import Profile

# Columns a user may change through a profile edit
EDITABLE_FIELDS = (
    "email",
    "full_name",
    "phone",
    "address",
    "city",
    "country",
    "date_of_birth",
    "profile_completed",
)


class ProfileRepository:
    """
    Repository class for Profile database operations.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, profile_id: str) -> QueryResult[Profile]:
        """
        Retrieve a profile by identity id.

        Returns:
            Found(profile), NoRows() or StoreFailure(code, message)
        """
        try:
            result = await self.db.execute(
                select(Profile).where(Profile.id == profile_id)
            )
        except SQLAlchemyError as e:
            return StoreFailure.from_exception(e)
        profile = result.scalar_one_or_none()
        if profile is None:
            return NoRows()
        return Found(profile)

    async def create(self, profile_data: dict) -> Profile:
        """
        Create a new profile.

        Args:
            profile_data: Must include id and email. Role defaults to "user"
                and profile_completed to False.
        """
        profile = Profile(
            id=profile_data["id"],
            email=profile_data.get("email") or "",
            full_name=profile_data.get("full_name"),
            phone=profile_data.get("phone"),
            role=profile_data.get("role", "user"),
            profile_completed=profile_data.get("profile_completed", False),
        )
        self.db.add(profile)
        await self.db.flush()
        await self.db.refresh(profile)
        return profile

    async def update(self, profile: Profile, updates: dict) -> Profile:
        """
        Apply a partial update. Unknown or non-editable keys are ignored.
        """
        for key, value in updates.items():
            if key in EDITABLE_FIELDS:
                setattr(profile, key, value)

        await self.db.flush()
        await self.db.refresh(profile)
        return profile

    async def list(self, limit: Optional[int] = None) -> List[Profile]:
        stmt = select(Profile).order_by(Profile.created_at)
        if limit:
            stmt = stmt.limit(limit)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_many(self, profile_ids: Iterable[str]) -> Dict[str, Profile]:
        ids = set(profile_ids)
        if not ids:
            return {}
        result = await self.db.execute(select(Profile).where(Profile.id.in_(ids)))
        return {profile.id: profile for profile in result.scalars().all()}
