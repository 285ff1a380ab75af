"""Session configuration using pydantic-settings."""

from functools import lru_cache
from typing import Literal, Self

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Session settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="PAGEBRIDGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Environment
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Literal["trace", "debug", "info", "notice", "warn", "error", "fatal"] = "info"

    # Target application
    base_url: str | None = Field(
        default=None,
        description="Page opened by Session.open() when no URL is given.",
    )
    api_prefix: str = Field(
        default="/api/",
        description="Only requests whose path starts with this prefix are captured.",
    )

    # Timing (milliseconds unless noted)
    wait_ms: int = Field(default=30_000, ge=0, description="Default element wait timeout.")
    delay_ms: int = Field(default=500, ge=0, description="Pause between session steps.")
    opdelay_ms: int = Field(default=400, ge=0, description="Pause used by Session.sleep().")
    response_timeout_ms: int | None = Field(default=None, ge=0)
    progress_interval_s: int = Field(default=5, gt=0)

    @model_validator(mode="after")
    def validate_api_prefix(self) -> Self:
        """Ensure api_prefix is an absolute path prefix ending with a slash."""
        if not (self.api_prefix.startswith("/") and self.api_prefix.endswith("/")):
            raise ValueError(
                f"API_PREFIX must start and end with '/', got {self.api_prefix!r}"
            )
        return self


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
