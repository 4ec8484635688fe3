"""Centralized configuration management for the Gravity Forms MCP system.

This module provides a single source of truth for all configuration
including the remote site, credentials, timeouts and server settings.
"""

from __future__ import annotations

import base64
import os
from typing import Literal

from dotenv import load_dotenv
from pydantic import Field
from pydantic import field_validator
from pydantic_settings import BaseSettings

from ..exceptions import ConfigurationError

API_PATH = "/wp-json/gf/v2"


class Settings(BaseSettings):
    """Centralized settings for the Gravity Forms MCP system."""

    # === Remote Site Configuration ===
    gravity_forms_base_url: str = Field(default="", description="WordPress site URL hosting Gravity Forms")
    gravity_forms_consumer_key: str = Field(default="", description="REST API consumer key")
    gravity_forms_consumer_secret: str = Field(default="", description="REST API consumer secret")
    gravity_forms_auth_method: Literal["basic", "oauth"] = Field(
        default="basic", description="Authentication method: 'basic' or 'oauth'"
    )

    # === Timeout Configuration ===
    request_timeout: float = Field(default=30.0, description="Timeout for remote API calls in seconds")

    # === Test Environment Detection ===
    pytest_current_test: str | None = Field(default=None, description="Test mode indicator")

    # === HTTP SSE Server Configuration ===
    sse_host: str = Field(default="localhost", description="SSE server host")
    sse_port: int = Field(default=3001, description="SSE server port")

    # === Logging Configuration ===
    log_level: str = Field(default="INFO", description="Logging level")

    # === Performance Configuration ===
    enable_metrics: bool = Field(default=True, description="Enable metrics collection")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }

    def __init__(self, **kwargs):
        """Initialize settings with environment-specific adjustments."""
        super().__init__(**kwargs)
        if self.is_test_environment:
            self.request_timeout = min(self.request_timeout, 10.0)

    @field_validator("gravity_forms_base_url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.strip().rstrip("/")

    @property
    def is_test_environment(self) -> bool:
        """Check if running in test environment."""
        return "PYTEST_CURRENT_TEST" in os.environ or self.pytest_current_test is not None

    @property
    def is_configured(self) -> bool:
        """Check if the remote site and credentials are present."""
        return bool(
            self.gravity_forms_base_url
            and self.gravity_forms_consumer_key.strip()
            and self.gravity_forms_consumer_secret.strip()
        )

    @property
    def api_base_url(self) -> str:
        """Full REST API prefix, e.g. ``https://example.com/wp-json/gf/v2``."""
        return f"{self.gravity_forms_base_url}{API_PATH}"


def build_auth_headers(settings: Settings) -> dict[str, str]:
    """Build the fixed header map sent with every API call.

    Raises:
        ConfigurationError: If the auth method is unsupported or credentials are missing.
    """
    if settings.gravity_forms_auth_method != "basic":
        raise ConfigurationError(
            "OAuth authentication not implemented yet",
            setting="gravity_forms_auth_method",
        )
    if not settings.is_configured:
        raise ConfigurationError(
            "GRAVITY_FORMS_BASE_URL, GRAVITY_FORMS_CONSUMER_KEY and GRAVITY_FORMS_CONSUMER_SECRET must be set",
            setting="gravity_forms_base_url",
        )

    raw = f"{settings.gravity_forms_consumer_key}:{settings.gravity_forms_consumer_secret}"
    credentials = base64.b64encode(raw.encode("utf-8")).decode("ascii")
    return {
        "Authorization": f"Basic {credentials}",
        "Content-Type": "application/json",
    }


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the global settings instance (singleton pattern)."""
    global _settings
    if _settings is None:
        load_dotenv()
        _settings = Settings()
    return _settings


def reset_settings():
    """Reset the global settings instance (primarily for testing)."""
    global _settings
    _settings = None
