"""Runtime configuration read from environment variables.

Variables:
    ENVIRONMENT                 dev / prod (default: dev)
    DYNAMODB_TABLE_PREFIX       table name prefix (default: safari-{ENVIRONMENT})
    BOOKING_STORE               "api" or "memory" (default: memory)
    BOOKING_API_BASE_URL        booking backend base URL (required for "api")
    BOOKING_API_TOKEN           bearer token for the booking backend
    BOOKING_API_TOKEN_PARAM     SSM parameter holding the token, if no token is set
    BOOKING_API_TIMEOUT         request timeout in seconds (default: 10)
    CANCELLATION_STORE          "dynamodb" or "memory" (default: memory)
    AVAILABILITY_MAX_SCAN_DAYS  forward search bound for free dates (default: 730)
    LOG_LEVEL                   root log level (default: INFO)
"""

import os
from enum import Enum
from functools import lru_cache
from typing import Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from safari_shared.services.availability import DEFAULT_MAX_SCAN_DAYS


class StoreKind(str, Enum):
    MEMORY = "memory"
    API = "api"
    DYNAMODB = "dynamodb"


class ConfigurationError(Exception):
    """Raised when the environment holds an invalid configuration."""

    pass


class Settings(BaseModel):
    """Service settings."""

    # Values arrive as strings from the environment
    model_config = ConfigDict(strict=False, frozen=True)

    environment: str = "dev"
    dynamodb_table_prefix: str | None = None
    booking_store: StoreKind = StoreKind.MEMORY
    booking_api_base_url: str | None = None
    booking_api_token: str | None = None
    booking_api_token_param: str | None = None
    booking_api_timeout: float = Field(default=10.0, gt=0)
    cancellation_store: StoreKind = StoreKind.MEMORY
    availability_max_scan_days: int = Field(default=DEFAULT_MAX_SCAN_DAYS, ge=1)
    log_level: str = "INFO"

    @property
    def table_prefix(self) -> str:
        return self.dynamodb_table_prefix or f"safari-{self.environment}"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """Build settings from environment variables.

        Raises:
            ConfigurationError: If a variable has an invalid value
        """
        env = os.environ if environ is None else environ
        values = {
            field: env[field.upper()]
            for field in cls.model_fields
            if env.get(field.upper())
        }
        try:
            settings = cls(**values)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e

        if settings.booking_store == StoreKind.DYNAMODB:
            raise ConfigurationError("BOOKING_STORE must be 'api' or 'memory'")
        if settings.cancellation_store == StoreKind.API:
            raise ConfigurationError("CANCELLATION_STORE must be 'dynamodb' or 'memory'")
        if settings.booking_store == StoreKind.API and not settings.booking_api_base_url:
            raise ConfigurationError("BOOKING_API_BASE_URL is required when BOOKING_STORE=api")
        return settings


@lru_cache
def get_settings() -> Settings:
    """Get cached settings from the process environment."""
    return Settings.from_env()
