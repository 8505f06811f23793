"""
==============================================================================
Application Settings Module
==============================================================================

Configuration management using Pydantic Settings.

A single cached Settings instance is shared by the whole application
(see get_settings()).

Configuration Priority (highest to lowest):
------------------------------------------
1. Environment variables
2. .env file
3. Default values

Environment Variables:
---------------------
- DATABASE_URL            SQLAlchemy connection string for the catalog
- PORT                    Listening port
- JWT_SECRET_KEY          Token signing secret (JWT_SECRET also accepted)
- CORS_ORIGINS            Allowed origins (ALLOWED_ORIGINS also accepted)
- INVALID_ENTRY_POLICY    "skip" or "abort" for bulk product uploads

==============================================================================
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Module logger
logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        app_name: Display name for the application
        app_env: Environment mode (development/staging/production)
        debug: Enable debug mode for verbose logging
        host: Server bind address
        port: Server port number
        api_prefix: Optional path prefix for every route
        database_url: SQLAlchemy database connection string
        jwt_secret_key: Secret key for JWT token signing
        jwt_algorithm: Algorithm for JWT signing (e.g., HS256)
        access_token_expire_minutes: Access token lifetime in minutes
        refresh_token_expire_days: Refresh token lifetime in days
        default_admin_username: Initial account username
        default_admin_password: Initial account password
        cors_origins: Allowed CORS origins (JSON array or comma separated)
        invalid_entry_policy: What bulk uploads do with invalid entries

    Example:
        >>> settings = Settings()
        >>> print(settings.app_name)
        'Perfumeria Catalog API'
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        validate_default=True,
        populate_by_name=True,
    )

    # =========================================================================
    # APPLICATION SETTINGS
    # =========================================================================
    app_name: str = Field(
        default="Perfumeria Catalog API",
        description="Display name for the application"
    )

    app_env: str = Field(
        default="development",
        description="Environment mode: development, staging, production"
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
        default=3001,
        ge=1,
        le=65535,
        description="Server port number"
    )

    api_prefix: str = Field(
        default="",
        description="Path prefix for all routes, e.g. /api/v1"
    )

    # =========================================================================
    # DATABASE SETTINGS
    # =========================================================================
    database_url: str = Field(
        default="sqlite:///./storage/db/catalog.db",
        description="SQLAlchemy database connection string"
    )

    # =========================================================================
    # JWT AUTHENTICATION SETTINGS
    # =========================================================================
    jwt_secret_key: str = Field(
        default="change-this-in-production",
        min_length=16,
        validation_alias=AliasChoices("jwt_secret_key", "jwt_secret"),
        description="Secret key for JWT token signing"
    )

    jwt_algorithm: str = Field(
        default="HS256",
        description="Algorithm for JWT signing"
    )

    access_token_expire_minutes: int = Field(
        default=60,
        ge=1,
        le=1440,  # Max 24 hours
        description="Access token lifetime in minutes"
    )

    refresh_token_expire_days: int = Field(
        default=7,
        ge=1,
        le=90,
        description="Refresh token lifetime in days"
    )

    # =========================================================================
    # DEFAULT ACCOUNT SETTINGS
    # =========================================================================
    default_admin_username: str = Field(
        default="admin",
        min_length=3,
        max_length=50,
        description="Initial account username"
    )

    default_admin_password: str = Field(
        default="admin123",
        min_length=6,
        description="Initial account password"
    )

    # =========================================================================
    # CORS SETTINGS
    # =========================================================================
    cors_origins: str = Field(
        default='["*"]',
        validation_alias=AliasChoices("cors_origins", "allowed_origins"),
        description="Allowed CORS origins as JSON array or comma separated list"
    )

    # =========================================================================
    # CATALOG SETTINGS
    # =========================================================================
    invalid_entry_policy: str = Field(
        default="skip",
        description="Bulk upload policy for invalid entries: skip or abort"
    )

    # =========================================================================
    # VALIDATORS
    # =========================================================================
    @field_validator("app_env")
    @classmethod
    def validate_app_env(cls, value: str) -> str:
        """Normalize the environment name, falling back to development."""
        valid_envs = {"development", "staging", "production"}
        normalized = value.lower().strip()

        if normalized not in valid_envs:
            logger.warning(
                f"Unknown environment '{value}', defaulting to 'development'"
            )
            return "development"

        return normalized

    @field_validator("jwt_algorithm")
    @classmethod
    def validate_jwt_algorithm(cls, value: str) -> str:
        """
        Validate JWT algorithm is supported.

        Raises:
            ValueError: If algorithm is not an HMAC algorithm
        """
        supported = {"HS256", "HS384", "HS512"}

        if value.upper() not in supported:
            raise ValueError(
                f"Unsupported JWT algorithm: {value}. "
                f"Supported: {', '.join(sorted(supported))}"
            )

        return value.upper()

    @field_validator("invalid_entry_policy")
    @classmethod
    def validate_invalid_entry_policy(cls, value: str) -> str:
        """Accept only the two known bulk upload policies."""
        normalized = value.lower().strip()

        if normalized not in {"skip", "abort"}:
            raise ValueError(
                f"Unsupported invalid entry policy: {value}. "
                "Supported: skip, abort"
            )

        return normalized

    @field_validator("api_prefix")
    @classmethod
    def validate_api_prefix(cls, value: str) -> str:
        """Normalize the prefix to '' or '/something' without trailing slash."""
        value = value.strip().rstrip("/")
        if value and not value.startswith("/"):
            value = f"/{value}"
        return value

    # =========================================================================
    # COMPUTED PROPERTIES
    # =========================================================================
    @property
    def cors_origins_list(self) -> List[str]:
        """
        Parse CORS origins to a list.

        Accepts a JSON array (``["http://a", "http://b"]``) or a plain
        comma separated string (``http://a,http://b``).

        Returns:
            List of allowed origin strings
        """
        raw = self.cors_origins.strip()

        if raw.startswith("["):
            try:
                origins = json.loads(raw)
                if isinstance(origins, list):
                    return [str(origin) for origin in origins]
            except json.JSONDecodeError:
                logger.warning(
                    f"Invalid CORS origins JSON: {self.cors_origins}, "
                    "defaulting to ['*']"
                )
            return ["*"]

        origins = [origin.strip() for origin in raw.split(",") if origin.strip()]
        return origins or ["*"]

    @property
    def access_token_expire_seconds(self) -> int:
        """Get access token expiry in seconds."""
        return self.access_token_expire_minutes * 60

    # =========================================================================
    # UTILITY METHODS
    # =========================================================================
    def get_database_path(self) -> Optional[Path]:
        """
        Extract database file path for SQLite databases.

        Returns:
            Path to database file, or None for in-memory and
            non-SQLite databases
        """
        if not self.database_url.startswith("sqlite:///"):
            return None

        db_path = self.database_url.replace("sqlite:///", "", 1)
        if not db_path or db_path == ":memory:":
            return None
        if db_path.startswith("./"):
            db_path = db_path[2:]
        return Path(db_path)

    def ensure_directories(self) -> None:
        """Create the database directory for file based SQLite URLs."""
        db_path = self.get_database_path()
        if db_path:
            db_path.parent.mkdir(parents=True, exist_ok=True)
            logger.debug(f"Database directory verified: {db_path.parent}")

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"Settings(app_name={self.app_name!r}, "
            f"app_env={self.app_env!r}, "
            f"debug={self.debug})"
        )


# =============================================================================
# SINGLETON INSTANCE MANAGEMENT
# =============================================================================

@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get the global Settings instance.

    Uses lru_cache so only one Settings instance is created per process.

    Returns:
        Global Settings instance
    """
    settings = Settings()

    settings.ensure_directories()

    if settings.debug:
        logger.info(f"Configuration loaded: {settings}")

    return settings
