"""Utility modules for the Gravity Forms MCP system."""
