"""Runtime configuration for the LegalLens client."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-backed configuration model."""

    model_config = SettingsConfigDict(env_prefix="legallens_", env_file=".env", case_sensitive=False)

    environment: Literal["dev", "test", "prod"] = "dev"

    # Collaborators: "demo" uses the built-in stand-ins, "http" talks to api_url
    backend: Literal["demo", "http"] = "demo"
    api_url: str = "http://localhost:8000"
    request_timeout: float = 30.0

    # Session persistence
    storage_dir: Path = Path("./.legallens")
    session_key: str = "legal-lens-user"

    # Demo account accepted by the demo auth provider
    demo_email: str = "test@example.com"
    demo_password: str = "password"
    simulated_latency_seconds: float = 1.0

    # Upload progress ticker
    progress_interval_seconds: float = 0.3
    progress_step: int = 10
    progress_ceiling: int = 90

    # Upload validation
    allowed_content_types: tuple[str, ...] | str = ("application/pdf", "image/jpeg", "image/png", "image/jpg")
    max_upload_size_mb: int = 10

    @property
    def is_test(self) -> bool:
        return self.environment == "test"

    @property
    def allowed_content_types_tuple(self) -> tuple[str, ...]:
        value = self.allowed_content_types
        if isinstance(value, tuple):
            return value
        if isinstance(value, str):
            parts = [p.strip() for p in value.split(",") if p.strip()]
            return tuple(parts) if parts else ("application/pdf",)
        return ("application/pdf",)

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_size_mb * 1024 * 1024


@lru_cache(maxsize=1)
def _cached_settings() -> Settings:
    return Settings()


def get_settings(override: Optional[dict[str, object]] = None) -> Settings:
    """Return settings, optionally overriding values without mutating cache."""

    if override:
        return Settings(**override)
    return _cached_settings()
