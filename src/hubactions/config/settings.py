"""
Application settings using Pydantic.

Provides environment-based configuration loading with HUBACTIONS_ prefix.
CLI flags are layered on top with ``Settings.with_overrides``.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any

from pydantic import Field
from pydantic import ValidationError as PydanticValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from hubactions.core.errors import ConfigurationError


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="HUBACTIONS_",
        extra="ignore",
    )

    # Remote API
    host: str | None = None
    token: str | None = None

    # Project sync
    project_name: str | None = None
    retry_attempts: int = Field(default=3, ge=1)
    retry_delay: float = Field(default=30.0, gt=0)
    project_delay: float = Field(default=5.0, gt=0)
    parallel: bool = False

    # Polling budget (shared by project sync and approval)
    timeout: float = Field(default=300.0, gt=0)
    interval: float = Field(default=10.0, gt=0)

    # Collection approval
    namespace: str | None = None
    collection_name: str | None = None
    version: str | None = None

    # Galaxy version tooling
    galaxy_file: str = "galaxy.yml"
    timezone: str = "America/Chicago"

    # HTTP client settings
    http_timeout: float = Field(default=30.0, gt=0)
    http_max_retries: int = Field(default=3, ge=1)

    @property
    def base_url(self) -> str:
        """Host with an https:// scheme added when none was given."""
        if not self.host:
            raise ConfigurationError("Input required and not supplied: host")
        host = self.host.strip().rstrip("/")
        return host if host.startswith("http") else f"https://{host}"

    def with_overrides(self, **overrides: Any) -> Settings:
        """Return a copy with non-None overrides applied and re-validated."""
        values = self.model_dump()
        values.update({key: value for key, value in overrides.items() if value is not None})
        try:
            return type(self).model_validate(values)
        except PydanticValidationError as exc:
            fields = {
                ".".join(str(part) for part in err["loc"]): err["msg"] for err in exc.errors()
            }
            raise ConfigurationError("Invalid configuration", details=fields) from exc

    def require(self, *fields: str) -> None:
        """Raise ConfigurationError for the first required field that is blank."""
        for name in fields:
            value = getattr(self, name)
            if value is None or (isinstance(value, str) and not value.strip()):
                raise ConfigurationError(f"Input required and not supplied: {name}")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    try:
        return Settings()
    except PydanticValidationError as exc:
        fields = {".".join(str(part) for part in err["loc"]): err["msg"] for err in exc.errors()}
        raise ConfigurationError("Invalid configuration", details=fields) from exc
