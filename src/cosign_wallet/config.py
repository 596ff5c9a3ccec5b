"""Application configuration using pydantic-settings.

The co-signing service endpoint is configured here and handed explicitly to
the signing client; nothing below reads these settings as hidden globals.
"""

import logging
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Wallet settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ======================
    # Co-signing service
    # ======================
    signing_service_url: str = Field(
        default="http://localhost:8000",
        description="Base URL of the two-party EdDSA co-signing service",
    )
    signing_timeout: float = Field(
        default=30.0, gt=0, description="Timeout in seconds for keygen/cosign round trips"
    )
    signing_api_token: str = Field(
        default="", description="Optional bearer token for the co-signing service"
    )

    # ======================
    # Key derivation
    # ======================
    key_derivation_timeout: float = Field(
        default=60.0,
        gt=0,
        description="Maximum time to wait for another caller deriving the same index",
    )

    # ======================
    # Environment
    # ======================
    environment: str = Field(default="development", description="Runtime environment")
    debug: bool = Field(default=False, description="Enable debug logging")
    log_level: str = Field(default="INFO", description="Log level when debug is off")

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"

    def get_safe_dict(self) -> dict:
        """Return settings dict with secrets redacted."""
        return {
            "environment": self.environment,
            "debug": self.debug,
            "log_level": self.log_level,
            "signing": {
                "url": self.signing_service_url,
                "timeout": self.signing_timeout,
                "api_token": "***" if self.signing_api_token else "(not set)",
            },
            "key_derivation_timeout": self.key_derivation_timeout,
        }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def configure_logging(settings: Settings | None = None) -> None:
    """Configure root logging from settings."""
    settings = settings or get_settings()
    if settings.debug:
        level = logging.DEBUG
    else:
        level = getattr(logging, settings.log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
