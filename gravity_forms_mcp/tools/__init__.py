"""Tool category modules for the Gravity Forms MCP system.

This package contains MCP tools organized by functional categories:
- form_tools: Forms (get, create, validate, submit)
- entry_tools: Single entries (get/search, create, update, delete)
- bulk_tools: Bulk entry operations (preview, process)
"""

from .bulk_tools import register_bulk_tools
from .entry_tools import register_entry_tools
from .form_tools import register_form_tools

__all__ = [
    "register_form_tools",
    "register_entry_tools",
    "register_bulk_tools",
]
