"""Gravity Forms MCP: Gravity Forms REST API tools for AI agents."""

__version__ = "1.0.0"
