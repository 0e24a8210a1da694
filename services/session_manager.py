"""
Session Manager - keeps the signed-in identity and its profile in sync.

SessionProvider is created once per client and handed to whatever needs the
current auth state. Consumers subscribe to state changes instead of reading a
module-level global.
"""

import logging
from typing import Callable, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from crud.profile import ProfileRepository
from crud.results import Found, NoRows, StoreFailure
from database_models import Profile
from models.identity import AuthSession, Identity
from models.profile import AuthState, ProfileOut

logger = logging.getLogger(__name__)

REQUIRED_PROFILE_FIELDS = (
    "full_name",
    "phone",
    "address",
    "city",
    "country",
    "date_of_birth",
)

Listener = Callable[[AuthState], None]


class NotAuthenticatedError(Exception):
    """Raised for profile operations attempted without a signed-in identity"""


class ProfileSyncError(Exception):
    pass


async def sync_profile(repo: ProfileRepository, identity: Identity) -> Profile:
    """
    Create the identity's profile if absent, or refresh its email if it changed.
    All other profile fields are left untouched.

    Raises:
        ProfileSyncError: If the profile lookup fails
    """
    result = await repo.get(identity.id)

    if isinstance(result, StoreFailure):
        raise ProfileSyncError(f"{result.code}: {result.message}")

    if isinstance(result, NoRows):
        metadata = identity.user_metadata or {}
        logger.info(f"Creating profile for new identity {identity.id}")
        return await repo.create({
            "id": identity.id,
            "email": identity.email or "",
            "full_name": metadata.get("full_name"),
            "phone": metadata.get("phone"),
            "role": "user",
            "profile_completed": False,
        })

    profile = result.row
    if identity.email and profile.email != identity.email:
        logger.info(f"Updating email for profile {identity.id}")
        return await repo.update(profile, {"email": identity.email})
    return profile


def check_profile_completion(profile) -> bool:
    """True when every required profile field is filled in. Client-side gate only."""
    if profile is None:
        return False
    return all(getattr(profile, field, None) not in (None, "") for field in REQUIRED_PROFILE_FIELDS)


class SessionProvider:
    """
    Holds {user, profile, session, loading, error} for one client and
    re-derives it on every auth change.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory
        self._listeners: List[Listener] = []
        self.state = AuthState()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener for state changes.

        Returns:
            A callable that unsubscribes the listener
        """
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set_state(self, state: AuthState):
        self.state = state
        for listener in list(self._listeners):
            listener(state)

    async def handle_auth_change(self, session: Optional[AuthSession]) -> AuthState:
        """
        Apply an auth event (initial load, sign in, token refresh, sign out).
        Profile sync errors are reported in `error`; user and session stay set.
        """
        if session is None:
            self._set_state(AuthState(loading=False))
            return self.state

        self._set_state(self.state.model_copy(update={"loading": True, "error": None}))

        try:
            async with self._session_factory() as db:
                profile = await sync_profile(ProfileRepository(db), session.user)
                profile_out = ProfileOut.model_validate(profile)
                await db.commit()
        except Exception as e:
            logger.error(f"Error updating auth state: {e}")
            self._set_state(AuthState(
                user=session.user,
                profile=None,
                session=session,
                loading=False,
                error=str(e) or "Error desconocido",
            ))
            return self.state

        self._set_state(AuthState(
            user=session.user,
            profile=profile_out,
            session=session,
            loading=False,
            error=None,
        ))
        return self.state

    async def update_profile(self, updates: dict) -> ProfileOut:
        """
        Explicit, user-initiated partial profile update.

        Raises:
            NotAuthenticatedError: If no identity is signed in
            ProfileSyncError: If the profile row cannot be read
        """
        if self.state.user is None:
            raise NotAuthenticatedError("No hay usuario autenticado")

        async with self._session_factory() as db:
            repo = ProfileRepository(db)
            result = await repo.get(self.state.user.id)
            if not isinstance(result, Found):
                raise ProfileSyncError(f"Profile not available for {self.state.user.id}")
            profile = await repo.update(result.row, updates)
            profile_out = ProfileOut.model_validate(profile)
            await db.commit()

        self._set_state(self.state.model_copy(update={"profile": profile_out}))
        return profile_out

    def check_profile_completion(self) -> bool:
        return check_profile_completion(self.state.profile)

    @property
    def is_profile_complete(self) -> bool:
        return self.check_profile_completion()

    @property
    def is_admin(self) -> bool:
        return self.state.profile is not None and self.state.profile.role == "admin"

    async def sign_out(self) -> AuthState:
        return await self.handle_auth_change(None)
