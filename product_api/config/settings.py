"""
==============================================================================
Application Settings Module
==============================================================================

Configuration management using Pydantic Settings.

Features:
---------
- Environment variable loading with type validation
- .env file support for local development
- Production guard: server port and API key must be set explicitly

Configuration Priority (highest to lowest):
------------------------------------------
1. Environment variables
2. .env file
3. Default values (development, staging and test only)

Security Considerations:
-----------------------
- Never commit .env files to version control
- Always set API_KEY outside of local development

==============================================================================
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from typing import List

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Module logger
logger = logging.getLogger(__name__)

DEFAULT_API_KEY = "default-secret-key-123"

# Settings that have no safe default in production.
PRODUCTION_REQUIRED = ("port", "api_key")


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        app_name: Display name for the application
        app_env: Environment mode (development/staging/production/test)
        debug: Enable debug mode for verbose logging
        host: Server bind address
        port: Server port number
        api_key: Shared secret expected in the x-api-key header
        api_prefix: Base path the products API is mounted under
        default_page_limit: Page size used when a list request gives none
        max_page_limit: Largest page size a client may request
        seed_products: Load the sample products at startup
        cors_origins: Allowed CORS origins (JSON array string)

    Example:
        >>> settings = Settings(api_key="s3cret")
        >>> settings.is_production
        False
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        validate_default=True,
    )

    # =========================================================================
    # APPLICATION SETTINGS
    # =========================================================================
    app_name: str = Field(
        default="Products API",
        description="Display name for the application"
    )

    app_env: str = Field(
        default="development",
        description="Environment mode: development, staging, production, test"
    )

    debug: bool = Field(
        default=False,
        description="Enable debug mode for verbose logging"
    )

    # =========================================================================
    # SERVER SETTINGS
    # =========================================================================
    host: str = Field(
        default="0.0.0.0",
        description="Server bind address"
    )

    port: int = Field(
        default=3000,
        ge=1,
        le=65535,
        description="Server port number"
    )

    # =========================================================================
    # API SETTINGS
    # =========================================================================
    api_key: str = Field(
        default=DEFAULT_API_KEY,
        min_length=1,
        description="Shared secret expected in the x-api-key header"
    )

    api_prefix: str = Field(
        default="/api",
        description="Base path for the products API"
    )

    default_page_limit: int = Field(
        default=10,
        ge=1,
        description="Page size used when none is requested"
    )

    max_page_limit: int = Field(
        default=100,
        ge=1,
        le=1000,
        description="Largest page size a client may request"
    )

    seed_products: bool = Field(
        default=True,
        description="Load sample products into the catalog at startup"
    )

    # =========================================================================
    # CORS SETTINGS
    # =========================================================================
    cors_origins: str = Field(
        default='["*"]',
        description="Allowed CORS origins as JSON array string"
    )

    # =========================================================================
    # VALIDATORS
    # =========================================================================
    @field_validator("app_env")
    @classmethod
    def validate_app_env(cls, value: str) -> str:
        """
        Validate and normalize application environment.

        Unknown values fall back to 'development' with a warning.
        """
        valid_envs = {"development", "staging", "production", "test"}
        normalized = value.lower().strip()

        if normalized not in valid_envs:
            logger.warning(
                f"Unknown environment '{value}', defaulting to 'development'"
            )
            return "development"

        return normalized

    @field_validator("api_prefix")
    @classmethod
    def validate_api_prefix(cls, value: str) -> str:
        """Normalize the prefix to '/segment' form ('' mounts at the root)."""
        value = value.strip().strip("/")
        return f"/{value}" if value else ""

    @model_validator(mode="after")
    def check_production_values(self) -> "Settings":
        """
        Refuse to fall back to defaults in production.

        Raises:
            ValueError: If a production-required setting was not supplied
        """
        if self.is_production:
            missing = [name for name in PRODUCTION_REQUIRED if name not in self.model_fields_set]
            if missing:
                raise ValueError(
                    "Missing required production settings: "
                    + ", ".join(name.upper() for name in missing)
                )
        if self.default_page_limit > self.max_page_limit:
            raise ValueError("DEFAULT_PAGE_LIMIT cannot exceed MAX_PAGE_LIMIT")
        return self

    # =========================================================================
    # COMPUTED PROPERTIES
    # =========================================================================
    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.app_env == "production"

    @property
    def uses_default_api_key(self) -> bool:
        """True when the built-in development key is active."""
        return self.api_key == DEFAULT_API_KEY

    @property
    def cors_origins_list(self) -> List[str]:
        """
        Parse CORS origins from JSON string to list.

        Returns:
            List of allowed origin strings
        """
        try:
            origins = json.loads(self.cors_origins)
            if isinstance(origins, list):
                return origins
            return ["*"]
        except json.JSONDecodeError:
            logger.warning(
                f"Invalid CORS origins JSON: {self.cors_origins}, "
                "defaulting to ['*']"
            )
            return ["*"]

    def __repr__(self) -> str:
        """String representation for debugging (never includes the API key)."""
        return (
            f"Settings(app_name={self.app_name!r}, "
            f"app_env={self.app_env!r}, "
            f"port={self.port}, "
            f"debug={self.debug})"
        )


# =============================================================================
# SINGLETON INSTANCE MANAGEMENT
# =============================================================================

@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get the global Settings instance (singleton pattern).

    Returns:
        Global Settings instance
    """
    settings = Settings()

    if settings.uses_default_api_key:
        logger.warning("⚠️ Using the default development API key; set API_KEY to override")

    if settings.debug:
        logger.info(f"Configuration loaded: {settings}")

    return settings
