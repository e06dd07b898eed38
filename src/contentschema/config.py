"""
Centralized configuration for contentschema.

Uses Pydantic BaseSettings for environment variable integration
and validation. All configurable values should be defined here.

Configuration sources (in order of precedence):
1. Explicit constructor arguments
2. Environment variables (CONTENTSCHEMA_*)
3. .env file
4. Default values

Example:
    from contentschema.config import get_config

    config = get_config()
    print(config.payload_version_key)  # From CONTENTSCHEMA_PAYLOAD_VERSION_KEY or default

    # Override at runtime
    config = get_config(allow_breaking_changes=True)
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ContentSchemaConfig(BaseSettings):
    """
    Central configuration for contentschema.

    All settings can be overridden via environment variables
    prefixed with CONTENTSCHEMA_.

    Example:
        export CONTENTSCHEMA_LOG_LEVEL=debug
        export CONTENTSCHEMA_ALLOW_BREAKING_CHANGES=true
    """

    model_config = SettingsConfigDict(
        env_prefix="CONTENTSCHEMA_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging
    log_level: Literal["debug", "info", "warning", "error"] = Field(
        default="info",
        description="Logging level for the contentschema logger",
    )
    log_format: Literal["json", "text"] = Field(
        default="text",
        description="Log output format (json for log shippers, text for console)",
    )

    # Schema acceptance
    fail_on_unsupported: bool = Field(
        default=True,
        description="Reject schemas using keywords outside the supported subset",
    )
    allow_breaking_changes: bool = Field(
        default=False,
        description="Default override for breaking schema updates",
    )

    # Payload migration
    payload_version_key: str = Field(
        default="_schema",
        description="Payload key holding the schema version a record conforms to",
    )

    # Telemetry
    emit_span_events: bool = Field(
        default=True,
        description="Record schema events on the current OTel span",
    )

    @field_validator("payload_version_key")
    @classmethod
    def validate_payload_key(cls, v: str) -> str:
        """Payload version key must be a non-blank string."""
        v = v.strip()
        if not v:
            raise ValueError("payload_version_key must not be blank")
        return v


# Global singleton
_config: Optional[ContentSchemaConfig] = None


def get_config(**overrides) -> ContentSchemaConfig:
    """
    Get the global configuration instance.

    Creates a singleton on first call. Subsequent calls return
    the same instance unless overrides are provided.

    Args:
        **overrides: Override any config values

    Returns:
        ContentSchemaConfig instance
    """
    global _config

    if overrides or _config is None:
        _config = ContentSchemaConfig(**overrides)

    return _config


def reset_config() -> None:
    """Reset the global configuration (for testing)."""
    global _config
    _config = None
