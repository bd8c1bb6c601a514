"""Session store owning the authenticated identity and its persisted blob."""

from __future__ import annotations

from dataclasses import replace
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from legallens.errors import NoActiveSession, TransportFailure
from legallens.metrics.observability import get_logger
from legallens.models import Session
from legallens.session.auth import AuthProvider
from legallens.session.persistence import PersistenceStore

DEFAULT_SESSION_KEY = "legal-lens-user"


class SessionRecord(BaseModel):
    """Serialized form of :class:`Session` kept under the session key."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    uid: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1)
    display_name: Optional[str] = Field(default=None, alias="displayName")

    @classmethod
    def from_session(cls, session: Session) -> "SessionRecord":
        return cls(uid=session.id, email=session.email, display_name=session.display_name)

    def to_session(self) -> Session:
        return Session(id=self.uid, email=self.email, display_name=self.display_name)


def encode_session(session: Session) -> str:
    return SessionRecord.from_session(session).model_dump_json(by_alias=True)


def decode_session(blob: str) -> Session:
    """Parse a persisted blob; raises :class:`pydantic.ValidationError` when malformed."""

    return SessionRecord.model_validate_json(blob).to_session()


class SessionStore:
    """Owns the single active :class:`Session`.

    Every mutation writes the blob before swapping the in-memory value, so a
    failed write leaves both sides on the previous session.
    """

    def __init__(
        self,
        auth: AuthProvider,
        persistence: PersistenceStore,
        *,
        key: str = DEFAULT_SESSION_KEY,
    ) -> None:
        self._auth = auth
        self._persistence = persistence
        self._key = key
        self._session: Session | None = None
        self._logger = get_logger("session")

    @property
    def current(self) -> Session | None:
        return self._session

    @property
    def is_authenticated(self) -> bool:
        return self._session is not None

    @property
    def key(self) -> str:
        return self._key

    async def login(self, email: str, password: str) -> Session:
        session = await self._auth.sign_in(email, password)
        self._set(session)
        self._logger.info("session.login", user_id=session.id)
        return session

    async def signup(self, email: str, password: str) -> Session:
        session = await self._auth.sign_up(email, password)
        self._set(session)
        self._logger.info("session.signup", user_id=session.id)
        return session

    async def logout(self) -> None:
        if self._session is not None:
            try:
                await self._auth.sign_out()
            except TransportFailure as exc:
                self._logger.warning("session.logout.remote_failed", error=str(exc))
        self._persistence.remove(self._key)
        self._session = None
        self._logger.info("session.logout")

    async def update_profile(self, *, display_name: str | None = None) -> Session:
        current = self._session
        if current is None:
            raise NoActiveSession("Cannot update profile without an active session")
        fields = {name: value for name, value in {"display_name": display_name}.items() if value is not None}
        if not fields:
            return current
        await self._auth.update_profile(current, fields)
        updated = replace(current, **fields)
        self._set(updated)
        self._logger.info("session.profile_updated", user_id=updated.id)
        return updated

    def restore(self) -> Session | None:
        """Load the persisted session; any problem yields ``None``."""

        try:
            blob = self._persistence.load(self._key)
        except (OSError, ValueError) as exc:
            self._logger.warning("session.restore.unreadable", error=str(exc))
            return None
        if blob is None:
            return None
        try:
            session = decode_session(blob)
        except ValidationError as exc:
            self._logger.warning("session.restore.malformed", errors=exc.error_count())
            return None
        self._session = session
        self._logger.info("session.restored", user_id=session.id)
        return session

    def _set(self, session: Session) -> None:
        self._persistence.save(self._key, encode_session(session))
        self._session = session
