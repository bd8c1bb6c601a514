"""Authentication providers."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Mapping, Protocol

from legallens.errors import InvalidCredentials
from legallens.metrics.observability import get_logger
from legallens.models import Session


class AuthProvider(Protocol):
    """Protocol describing the authentication service."""

    async def sign_in(self, email: str, password: str) -> Session:
        """Return the session for a valid pair or raise :class:`InvalidCredentials`."""

    async def sign_up(self, email: str, password: str) -> Session:
        """Create an account and return its session."""

    async def sign_out(self) -> None:
        """End the remote session."""

    async def update_profile(self, session: Session, fields: Mapping[str, object]) -> None:
        """Push profile changes for ``session`` to the service."""


@dataclass(frozen=True)
class DemoAuthConfig:
    """Configuration for the built-in demo account."""

    email: str = "test@example.com"
    password: str = "password"
    user_id: str = "123"
    display_name: str = "Test User"
    latency_seconds: float = 1.0
    sign_out_latency_seconds: float = 0.5


class DemoAuthProvider:
    """Accepts a single test account; sign-up always succeeds."""

    _logger = get_logger("auth")

    def __init__(self, config: DemoAuthConfig | None = None) -> None:
        self._config = config or DemoAuthConfig()

    async def sign_in(self, email: str, password: str) -> Session:
        await self._pause(self._config.latency_seconds)
        if email != self._config.email or password != self._config.password:
            self._logger.info("auth.sign_in.rejected", email=email)
            raise InvalidCredentials("Invalid credentials")
        return Session(id=self._config.user_id, email=email, display_name=self._config.display_name)

    async def sign_up(self, email: str, password: str) -> Session:  # noqa: ARG002 - no uniqueness or strength check
        await self._pause(self._config.latency_seconds)
        return Session(id=self._config.user_id, email=email, display_name=None)

    async def sign_out(self) -> None:
        await self._pause(self._config.sign_out_latency_seconds)

    async def update_profile(self, session: Session, fields: Mapping[str, object]) -> None:  # noqa: ARG002
        return None

    @staticmethod
    async def _pause(seconds: float) -> None:
        if seconds > 0:
            await asyncio.sleep(seconds)
