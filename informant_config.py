#!/usr/bin/env python3
"""
🔹 Informant Configuration Module 🔹

Centralizes the library-wide settings (default root level, console colours,
ring buffer capacity, deprecation warning interval). Every value can be
overridden from the environment so host applications never need to touch code.

Features:
- Pydantic settings model for type validation and better IDE support
- Environment-variable overrides with the INFORMANT_ prefix
- Plain module constants for cheap access from hot code paths
"""

import os
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from log_levels import parse_level

# -----------------------------------------------------------------------------
# UTILITY FUNCTIONS
# -----------------------------------------------------------------------------
def get_env_value(name: str, default: Any) -> Any:
    """Get environment variable with type conversion based on default value."""
    value = os.getenv(name)
    if value is None:
        return default

    # Try to convert to the same type as the default
    if isinstance(default, bool):
        return value.lower() in ("true", "1", "yes", "y", "t")
    elif isinstance(default, int):
        return int(value)
    elif isinstance(default, float):
        return float(value)
    else:
        return value

# -----------------------------------------------------------------------------
# SETTINGS MODEL
# -----------------------------------------------------------------------------
class InformantSettings(BaseSettings):
    """Logging library settings, read from INFORMANT_* environment variables."""

    model_config = SettingsConfigDict(env_prefix="INFORMANT_", extra="ignore")

    log_level: str = Field(default="info")
    console_colors: bool = Field(default=True)
    ring_buffer_size: int = Field(default=100, ge=1)
    deprecation_interval: float = Field(default=1.0, ge=0.0)

    @field_validator("log_level")
    @classmethod
    def normalize_level(cls, value: str) -> str:
        """Level names are matched case-insensitively and must name a level."""
        value = value.strip().lower()
        parse_level(value)
        return value

    def update_from_env(self) -> None:
        """Refresh settings from environment variables."""
        fresh = InformantSettings()
        for name in type(self).model_fields:
            setattr(self, name, getattr(fresh, name))

# Create a global settings instance
settings = InformantSettings()


def colors_enabled() -> bool:
    """Console colours are on unless disabled in settings or via NO_COLOR."""
    return settings.console_colors and not get_env_value("NO_COLOR", "")
