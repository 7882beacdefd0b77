"""Configuration management for openxml-sheets.

This module provides centralized configuration using pydantic-settings.
All configuration options can be set via environment variables with the
OXS_ prefix, or via a .env file in the working directory.

Environment Variables:
    OXS_LOG_LEVEL: Logging level (default: INFO)
    OXS_DEBUG: Enable debug mode (default: false)
    OXS_MAX_PART_SIZE_MB: Maximum uncompressed size of a single part (default: 256)

Part paths inside the package are fixed by the file format and are not
configurable.
"""

import logging
from typing import Any

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Reader settings loaded from environment variables.

    Example .env file:
        OXS_LOG_LEVEL=DEBUG
        OXS_MAX_PART_SIZE_MB=64
    """

    model_config = SettingsConfigDict(
        env_prefix="OXS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # =========================================================================
    # Archive Settings
    # =========================================================================

    max_part_size_mb: int = 256
    """Maximum uncompressed size of a single part in megabytes."""

    # =========================================================================
    # Logging Settings
    # =========================================================================

    log_level: str = "INFO"
    """Logging level: DEBUG, INFO, WARNING, ERROR, or CRITICAL."""

    debug: bool = False
    """Enable debug mode with additional logging."""

    # =========================================================================
    # Validators
    # =========================================================================

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a valid Python logging level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_v = v.upper()
        if upper_v not in valid_levels:
            raise ValueError(
                f"Invalid log level: {v}. Must be one of: {', '.join(valid_levels)}"
            )
        return upper_v

    @field_validator("max_part_size_mb")
    @classmethod
    def validate_part_size(cls, v: int) -> int:
        """Validate part size limit is positive and reasonable."""
        if not 1 <= v <= 4096:
            raise ValueError(f"max_part_size_mb must be between 1 and 4096, got {v}")
        return v

    # =========================================================================
    # Computed Properties
    # =========================================================================

    @property
    def max_part_size_bytes(self) -> int:
        """Get max part size in bytes."""
        return self.max_part_size_mb * 1024 * 1024

    @property
    def log_level_int(self) -> int:
        """Get log level as integer for logging module."""
        level: int = getattr(logging, self.log_level)
        return level

    def to_safe_dict(self) -> dict[str, Any]:
        """Convert settings to a plain dictionary."""
        return {
            "max_part_size_mb": self.max_part_size_mb,
            "log_level": self.log_level,
            "debug": self.debug,
        }


# Create the global settings instance
settings = Settings()
