"""
Centralized configuration management using Pydantic Settings.

This module provides type-safe configuration management with validation,
loading settings from environment variables and .env files.
"""

import logging

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from docdao.schemas.query import SortSpec


class Settings(BaseSettings):
    """
    Data access settings loaded from environment variables.

    All settings can be overridden via environment variables.
    Connection strings with credentials belong in the .env file (gitignored).
    """

    # Database Configuration (MongoDB)
    mongodb_url: str = Field(
        default="mongodb://localhost:27017",
        description="MongoDB connection URL (mongodb:// or mongodb+srv://)"
    )
    mongodb_database: str = Field(
        default="docdao",
        description="Default database name for repositories"
    )
    mongodb_timeout_ms: int = Field(
        default=5000,
        gt=0,
        description="Server selection timeout in milliseconds"
    )

    # Listing defaults
    default_page_size: int = Field(
        default=10,
        ge=1,
        description="Page size used by get_all when the caller passes none"
    )
    default_sort: str = Field(
        default="_id:-1",
        description="Sort applied by get_all when the caller passes none"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Root log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    log_json: bool = Field(
        default=True,
        description="Emit logs as single-line JSON objects"
    )

    # Pydantic Settings Configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra environment variables
    )

    @field_validator("mongodb_url")
    @classmethod
    def validate_mongodb_url(cls, v: str) -> str:
        """
        Validate MongoDB URL format.

        Ensures the URL is set and uses a scheme pymongo understands.
        """
        if not v or v.strip() == "":
            raise ValueError("MONGODB_URL is required and cannot be empty")

        valid_schemes = ["mongodb", "mongodb+srv"]
        if not any(v.startswith(scheme + "://") for scheme in valid_schemes):
            raise ValueError(
                f"MONGODB_URL must start with one of: "
                f"{', '.join(s + '://' for s in valid_schemes)}. "
                f"Got: {v[:20]}..."
            )

        return v

    @field_validator("mongodb_database")
    @classmethod
    def validate_mongodb_database(cls, v: str) -> str:
        """Database names cannot be blank or contain path separators."""
        if not v or v.strip() == "":
            raise ValueError("MONGODB_DATABASE is required and cannot be empty")
        if any(ch in v for ch in "/\\. \"$"):
            raise ValueError(
                f"MONGODB_DATABASE contains characters MongoDB does not allow: {v!r}"
            )
        return v

    @field_validator("default_sort")
    @classmethod
    def validate_default_sort(cls, v: str) -> str:
        """
        Validate that the default sort parses as a sort specification.

        Format: field:direction[,field:direction] where direction is
        1, -1, asc or desc.
        """
        SortSpec.parse(v)
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and validate the log level name."""
        level = v.strip().upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(
                f"LOG_LEVEL must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL. "
                f"Got: {v}"
            )
        return level


# Global settings instance
# Import this instance throughout the package
settings = Settings()
