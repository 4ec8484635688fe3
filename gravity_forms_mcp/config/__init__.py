"""Configuration management for the Gravity Forms MCP system."""

from .settings import Settings
from .settings import build_auth_headers
from .settings import get_settings
from .settings import reset_settings

__all__ = ["Settings", "build_auth_headers", "get_settings", "reset_settings"]
