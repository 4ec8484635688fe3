"""Form Management Tools.

This module contains MCP tools for working with Gravity Forms forms:
- get_forms: List forms or read one form (large forms are summarized)
- create_form: Create a new form
- validate_form: Validate field values against a form without saving
- submit_form: Submit field values through the form's processing pipeline
"""

import json
from typing import Any

from mcp.server import FastMCP

from .. import api_client
from ..helpers import TOKEN_LIMIT
from ..helpers import create_form_summary
from ..helpers import estimate_token_count
from ..logger_config import log_mcp_call
from ..utils.decorators import raise_tool_errors
from ..utils.decorators import require_valid
from ..utils.validation import validate_field_values
from ..utils.validation import validate_form_id


def register_form_tools(mcp_server: FastMCP) -> None:
    """Register all form tools with the MCP server."""

    @mcp_server.tool()
    @log_mcp_call
    @raise_tool_errors
    async def get_forms(
        form_id: str | None = None,
        include_fields: bool = False,
        summary_mode: bool = False,
    ) -> str:
        """Get all forms or the details of a specific form.

        Parameters:
            form_id (str, optional): Form ID to read. Lists all forms when omitted.
            include_fields (bool): Include full field definitions when listing (default: False)
            summary_mode (bool): Return only essential form info. Forms estimated
                above 20k tokens are always summarized.

        Returns:
            str: JSON text of the form(s), or a summary for large forms.
        """
        client = api_client.get_api_client()

        if form_id:
            require_valid(*validate_form_id(form_id), field="form_id")
            form = await client.request(f"/forms/{form_id.strip()}")
            full_response = json.dumps(form, indent=2)
            if summary_mode or estimate_token_count(full_response) > TOKEN_LIMIT:
                return create_form_summary(form)
            return f"Form Details:\n{full_response}"

        params = [("include[]", "form_fields")] if include_fields else None
        forms = await client.request("/forms", params=params)
        return f"Forms:\n{json.dumps(forms, indent=2)}"

    @mcp_server.tool()
    @log_mcp_call
    @raise_tool_errors
    async def create_form(
        title: str,
        description: str | None = None,
        fields: list[dict[str, Any]] | None = None,
        settings: dict[str, Any] | None = None,
    ) -> str:
        """Create a new form.

        Parameters:
            title (str): Form title
            description (str, optional): Form description
            fields (list, optional): Field definitions
            settings (dict, optional): Additional form settings merged into the form object
        """
        if not title or not title.strip():
            require_valid(False, "Form title is required", field="title")

        form = {"title": title, "description": description, "fields": fields or [], **(settings or {})}
        response = await api_client.get_api_client().request("/forms", "POST", form)
        return f"Form Created:\n{json.dumps(response, indent=2)}"

    @mcp_server.tool()
    @log_mcp_call
    @raise_tool_errors
    async def validate_form(form_id: str, field_values: dict[str, Any]) -> str:
        """Validate a form submission without saving it."""
        require_valid(*validate_form_id(form_id), field="form_id")
        require_valid(*validate_field_values(field_values), field="field_values")

        response = await api_client.get_api_client().request(
            f"/forms/{form_id.strip()}/submissions/validation", "POST", field_values
        )
        return f"Validation Result:\n{json.dumps(response, indent=2)}"

    @mcp_server.tool()
    @log_mcp_call
    @raise_tool_errors
    async def submit_form(
        form_id: str,
        field_values: dict[str, Any],
        source_page: int = 1,
        target_page: int = 0,
    ) -> str:
        """Submit a form with field values (e.g. ``{"input_1": "value"}``)."""
        require_valid(*validate_form_id(form_id), field="form_id")
        require_valid(*validate_field_values(field_values), field="field_values")

        submission = {**field_values, "source_page": source_page, "target_page": target_page}
        response = await api_client.get_api_client().request(
            f"/forms/{form_id.strip()}/submissions", "POST", submission
        )
        return f"Form Submission Result:\n{json.dumps(response, indent=2)}"
