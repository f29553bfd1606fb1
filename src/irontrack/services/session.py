"""Session and profile context.

Holds the signed-in identity and the user's profile as an immutable
snapshot. Components receive the context explicitly and read
``snapshot``; only ``refresh`` (and the sign-in/out operations that call
it) replace the snapshot.
"""

import asyncio
import logging
from dataclasses import dataclass
from collections.abc import Callable

from ..clients.base import DataService, Filter, Session
from ..errors import AuthRequired, ValidationError
from ..models.user_profile import PROFILES_TABLE, Profile
from ..utils.records import to_models

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionSnapshot:
    """The ``{user_id, profile}`` view of the current session."""

    user_id: str | None = None
    email: str | None = None
    profile: Profile | None = None
    session: Session | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    @property
    def needs_onboarding(self) -> bool:
        return self.profile is not None and self.profile.needs_onboarding


ANONYMOUS = SessionSnapshot()


class SessionContext:
    """Explicitly passed session/profile state backed by a data service."""

    def __init__(self, service: DataService):
        self.service = service
        self._snapshot = ANONYMOUS
        self._unsubscribe: Callable[[], None] | None = None
        self._pending_refresh: asyncio.Task | None = None

    @property
    def snapshot(self) -> SessionSnapshot:
        return self._snapshot

    @property
    def user_id(self) -> str | None:
        return self._snapshot.user_id

    @property
    def profile(self) -> Profile | None:
        return self._snapshot.profile

    def require_user(self) -> str:
        """Return the signed-in user id or raise AuthRequired."""
        if self._snapshot.user_id is None:
            raise AuthRequired("You need to sign in first")
        return self._snapshot.user_id

    async def refresh(self) -> SessionSnapshot:
        """Re-read the session and profile from the service; returns the new snapshot."""
        session = await self.service.get_current_session()
        self._snapshot = await self._load(session)
        return self._snapshot

    async def _load(self, session: Session | None) -> SessionSnapshot:
        if session is None:
            return ANONYMOUS
        rows = await self.service.query_records(
            PROFILES_TABLE, [Filter.eq("id", session.user_id)]
        )
        profiles = to_models(rows, Profile.from_dict, PROFILES_TABLE)
        if not profiles:
            logger.warning("No profile row for user %s", session.user_id)
        return SessionSnapshot(
            user_id=session.user_id,
            email=session.email,
            profile=profiles[0] if profiles else None,
            session=session,
        )

    async def sign_in(self, email: str, password: str) -> SessionSnapshot:
        if not email.strip() or not password:
            raise ValidationError("Email and password are required")
        session = await self.service.sign_in(email.strip(), password)
        self._snapshot = await self._load(session)
        logger.info("Signed in as %s", session.email or session.user_id)
        return self._snapshot

    async def sign_up(self, email: str, password: str) -> SessionSnapshot | None:
        """Register; returns None when the service wants email confirmation first."""
        email = email.strip()
        if not email or "@" not in email or not password:
            raise ValidationError("A valid email and a password are required")
        username = email.split("@")[0]
        session = await self.service.sign_up(email, password, username=username)
        if session is None:
            return None
        self._snapshot = await self._load(session)
        return self._snapshot

    async def sign_out(self) -> None:
        await self.service.sign_out()
        self._snapshot = ANONYMOUS

    async def restore(self, session: Session) -> SessionSnapshot:
        """Resume a stored session; anonymous if the service no longer accepts it."""
        restored = await self.service.restore_session(session)
        self._snapshot = await self._load(restored)
        return self._snapshot

    def start(self) -> None:
        """Follow session changes made outside this context (token refresh, expiry)."""
        if self._unsubscribe is None:
            self._unsubscribe = self.service.on_session_change(self._on_session_change)

    def stop(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        if self._pending_refresh is not None:
            self._pending_refresh.cancel()
            self._pending_refresh = None

    def _on_session_change(self, session: Session | None) -> None:
        if session is None:
            self._snapshot = ANONYMOUS
            return
        if session.user_id == self._snapshot.user_id:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("Session change outside an event loop; call refresh()")
            return
        if self._pending_refresh is not None:
            self._pending_refresh.cancel()
        self._pending_refresh = loop.create_task(self.refresh())
        self._pending_refresh.add_done_callback(self._refresh_done)

    def _refresh_done(self, task: asyncio.Task) -> None:
        if task.cancelled():
            return
        if task.exception() is not None:
            logger.error("Session refresh failed: %s", task.exception())
