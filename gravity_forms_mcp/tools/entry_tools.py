"""Entry Management Tools.

This module contains MCP tools for single entries:
- get_entries: Read one entry or search a form's entries with paging
- create_entry: Create an entry directly (bypasses form validation)
- update_entry: Update field values of one entry
- delete_entry: Trash an entry, or delete it permanently with force=True
- export_entries_formatted: Export a form's entries as CSV or JSON
"""

import json
from typing import Any
from typing import Literal

from mcp.server import FastMCP

from .. import api_client
from ..exceptions import APIRequestError
from ..exceptions import EntryNotFoundError
from ..exceptions import ValidationError
from ..exporter import export_entries
from ..helpers import TOKEN_LIMIT
from ..helpers import build_entries_query
from ..helpers import create_entry_summary
from ..helpers import entry_path
from ..helpers import estimate_entries_response_size
from ..logger_config import log_mcp_call
from ..utils.decorators import raise_tool_errors
from ..utils.decorators import require_valid
from ..utils.validation import validate_date_format
from ..utils.validation import validate_entry_id
from ..utils.validation import validate_export_filename
from ..utils.validation import validate_export_format
from ..utils.validation import validate_field_values
from ..utils.validation import validate_form_id


def format_entries(entries: list[dict[str, Any]], response_mode: str) -> str:
    """Render entries, summarizing them when requested or when too large."""
    if response_mode == "summary":
        summarize = True
    elif response_mode == "full":
        summarize = False
    else:
        summarize = estimate_entries_response_size(entries) > TOKEN_LIMIT

    if not summarize:
        return f"Entries:\n{json.dumps(entries, indent=2)}"

    noun = "entry" if len(entries) == 1 else "entries"
    summaries = [create_entry_summary(entry) for entry in entries]
    return (
        "Response summarized to prevent context overflow.\n\n"
        f"Found {len(entries)} {noun}:\n\n"
        f"{json.dumps(summaries, indent=2)}"
    )


def register_entry_tools(mcp_server: FastMCP) -> None:
    """Register all entry tools with the MCP server."""

    @mcp_server.tool()
    @log_mcp_call
    @raise_tool_errors
    async def get_entries(
        form_id: str | None = None,
        entry_id: str | None = None,
        search: dict[str, Any] | None = None,
        sorting: dict[str, Any] | None = None,
        paging: dict[str, Any] | None = None,
        response_mode: Literal["full", "summary", "auto"] = "auto",
    ) -> str:
        """Get entries from forms with filtering and pagination.

        Parameters:
            form_id (str, optional): Form ID to get entries from
            entry_id (str, optional): Specific entry ID to retrieve
            search (dict, optional): ``status``, ``field_filters`` (key/value/operator)
                and ``date_range`` (start/end) criteria
            sorting (dict, optional): ``key``, ``direction`` (ASC, DESC, RAND), ``is_numeric``
            paging (dict, optional): ``page_size``, ``current_page``, ``offset``
            response_mode (str): 'full', 'summary', or 'auto' (summarize above ~20k tokens)

        Example Usage:
            ```json
            {
                "name": "get_entries",
                "arguments": {
                    "form_id": "5",
                    "search": {"field_filters": [{"key": "52", "value": "Smith", "operator": "contains"}]},
                    "paging": {"page_size": 20}
                }
            }
            ```
        """
        if entry_id:
            require_valid(*validate_entry_id(entry_id), field="entry_id")
            endpoint = entry_path(entry_id.strip())
        elif form_id:
            require_valid(*validate_form_id(form_id), field="form_id")
            endpoint = f"/forms/{form_id.strip()}/entries"
        else:
            endpoint = "/entries"

        params = build_entries_query(search, sorting, paging)
        try:
            result = await api_client.get_api_client().request(endpoint, params=params or None)
        except APIRequestError as e:
            if entry_id and e.status_code == 404:
                raise EntryNotFoundError(entry_id.strip()) from e
            raise

        # The list endpoints wrap results as {"total_count": n, "entries": [...]}
        if isinstance(result, dict) and "entries" in result:
            entries = result["entries"]
        elif isinstance(result, list):
            entries = result
        else:
            entries = [result] if result else []

        if not entries:
            return "No entries found for the specified criteria."
        return format_entries(entries, response_mode)

    @mcp_server.tool()
    @log_mcp_call
    @raise_tool_errors
    async def create_entry(
        form_id: str,
        field_values: dict[str, Any],
        entry_meta: dict[str, Any] | None = None,
    ) -> str:
        """Create a new entry directly (bypasses form validation)."""
        require_valid(*validate_form_id(form_id), field="form_id")
        require_valid(*validate_field_values(field_values), field="field_values")

        entry = {"form_id": form_id.strip(), **field_values, **(entry_meta or {})}
        response = await api_client.get_api_client().request("/entries", "POST", entry)
        return f"Entry Created:\n{json.dumps(response, indent=2)}"

    @mcp_server.tool()
    @log_mcp_call
    @raise_tool_errors
    async def update_entry(entry_id: str, field_values: dict[str, Any]) -> str:
        """Update an existing entry.

        Also used to restore entries from the ``original_data`` captured by a
        bulk update's rollback snapshot.
        """
        require_valid(*validate_entry_id(entry_id), field="entry_id")
        require_valid(*validate_field_values(field_values), field="field_values")

        response = await api_client.get_api_client().request(
            entry_path(entry_id.strip()), "PUT", field_values
        )
        return f"Entry Updated:\n{json.dumps(response, indent=2)}"

    @mcp_server.tool()
    @log_mcp_call
    @raise_tool_errors
    async def delete_entry(entry_id: str, force: bool = False) -> str:
        """Delete an entry (moves to trash unless ``force`` is True)."""
        require_valid(*validate_entry_id(entry_id), field="entry_id")

        params = {"force": "true"} if force else None
        response = await api_client.get_api_client().request(
            entry_path(entry_id.strip()), "DELETE", params=params
        )
        label = "Permanently Deleted" if force else "Moved to Trash"
        return f"Entry {label}:\n{json.dumps(response, indent=2)}"

    @mcp_server.tool()
    @log_mcp_call
    @raise_tool_errors
    async def export_entries_formatted(
        form_id: str,
        format: str,
        search: dict[str, Any] | None = None,
        date_format: str | None = None,
        filename: str | None = None,
        include_headers: bool = True,
    ) -> str:
        """Export entries from a form in CSV or JSON format.

        Parameters:
            form_id (str): Form ID to export entries from
            format (str): 'csv' or 'json'
            search (dict, optional): Same criteria as ``get_entries``
            date_format (str, optional): One of YYYY-MM-DD, MM/DD/YYYY, DD/MM/YYYY,
                YYYY-MM-DD HH:mm:ss, MM/DD/YYYY HH:mm, DD/MM/YYYY HH:mm
            filename (str, optional): Download filename; the extension is added if missing
            include_headers (bool): Write a header row in CSV exports

        Returns the export as base64 so the host can offer it as a download.
        """
        checks = [
            validate_form_id(form_id),
            validate_export_format(format),
            validate_date_format(date_format),
            validate_export_filename(filename),
        ]
        errors = [message for is_valid, message in checks if not is_valid]
        if errors:
            raise ValidationError(", ".join(errors))

        params = build_entries_query(search, None, None)
        result = await api_client.get_api_client().request(
            f"/forms/{form_id.strip()}/entries", params=params or None
        )
        entries = result.get("entries", []) if isinstance(result, dict) else result
        if not isinstance(entries, list) or not entries:
            return "No entries found for the specified criteria."

        export = export_entries(entries, format, date_format, include_headers, filename)
        return (
            "Export completed successfully!\n\n"
            f"Format: {export.format.upper()}\n"
            f"Filename: {export.filename}\n"
            f"Records: {len(entries)}\n"
            f"File size: {len(export.data)} characters\n\n"
            "Base64 encoded data for download:\n"
            f"{export.base64_data}"
        )
