"""Bulk entry MCP tools.

This module provides the preview and execution tools for applying one
operation to many entries at once, plus the text rendering of their results.
"""

from typing import Any

from mcp.server import FastMCP

from ..bulk import BulkOperationRequest
from ..bulk import BulkOperationsManager
from ..bulk import ExecutionResult
from ..bulk import OperationPreview
from ..config import build_auth_headers
from ..config import get_settings
from ..exceptions import BulkValidationError
from ..logger_config import log_mcp_call
from ..utils.decorators import raise_tool_errors


def get_bulk_manager() -> BulkOperationsManager:
    """Build a manager from the global settings; raises ConfigurationError on bad auth config."""
    settings = get_settings()
    return BulkOperationsManager(
        settings.api_base_url,
        build_auth_headers(settings),
        timeout=settings.request_timeout,
    )


def format_preview(preview: OperationPreview) -> str:
    lines = [
        f"Bulk operation preview: {preview.operation_type.upper()}",
        preview.description,
        "",
        f"Entries requested: {preview.total_entries}",
        f"Entries found: {len(preview.entries_found)}",
    ]
    lines.extend(f"- {item.preview}" for item in preview.entries_found)

    if preview.entries_not_found:
        lines.append(f"Entries not found: {', '.join(preview.entries_not_found)}")
    if preview.warnings:
        lines.append("")
        lines.append("Warnings:")
        lines.extend(f"- {warning}" for warning in preview.warnings)

    lines.append("")
    lines.append(f"Estimated time: {preview.estimated_time_seconds}s")
    lines.append("Nothing has been changed. Call process_entries_bulk with confirm: true to proceed.")
    return "\n".join(lines)


def format_execution_result(result: ExecutionResult) -> str:
    """Render a bulk result, listing both successes and failures on partial success."""
    lines = [
        "Bulk operation completed!",
        "",
        f"Operation: {result.operation_type.upper()}",
        f"Total requested: {result.total_requested}",
        f"Successful: {result.successful}",
        f"Failed: {result.failed}",
    ]

    if result.success_ids:
        lines.append("")
        lines.append(f"Successful entries: {', '.join(result.success_ids)}")

    if result.failed_entries:
        lines.append("")
        lines.append("Failed entries:")
        for failure in result.failed_entries:
            lines.append(f"- {failure.entry_id}: {failure.error} ({failure.error_code})")

    if result.can_rollback and result.rollback_data:
        lines.append("")
        lines.append(
            f"Rollback available: {len(result.rollback_data.original_values)} entries "
            "can be restored using the original data."
        )
        lines.append(f"Rollback instructions: {result.rollback_data.rollback_instructions}")

    if result.audit_trail:
        trail = result.audit_trail
        lines.append("")
        lines.append("Audit Trail:")
        lines.append(f"- Operation ID: {trail.operation_id}")
        lines.append(f"- Started: {trail.started_at}")
        lines.append(f"- Completed: {trail.completed_at}")
        lines.append(f"- Duration: {trail.duration_ms}ms")
        lines.append(f"- User confirmation: {str(trail.user_confirmation).lower()}")

    lines.append("")
    lines.append(result.operation_summary)
    return "\n".join(lines)


def register_bulk_tools(mcp_server: FastMCP) -> None:
    """Register all bulk entry tools with the MCP server."""

    @mcp_server.tool()
    @log_mcp_call
    @raise_tool_errors
    async def preview_entries_bulk(
        entry_ids: list[str],
        operation_type: str,
        data: dict[str, Any] | None = None,
    ) -> str:
        """Preview a bulk operation without changing anything.

        Fetches every entry and describes what process_entries_bulk would do,
        listing entries that could not be found. Use it before asking for
        confirmation.

        Parameters:
            entry_ids (List[str]): Entry IDs to inspect (max 100)
            operation_type (str): "delete", "update_status" or "update_fields"
            data (Dict, optional): Update payload, used to describe the change
        """
        request = BulkOperationRequest(
            entry_ids=entry_ids, operation_type=operation_type, confirm=False, data=data
        )
        manager = get_bulk_manager()
        return format_preview(await manager.get_operation_preview(request))

    @mcp_server.tool()
    @log_mcp_call
    @raise_tool_errors
    async def process_entries_bulk(
        entry_ids: list[str],
        operation_type: str,
        confirm: bool,
        data: dict[str, Any] | None = None,
    ) -> str:
        r"""WARNING: DESTRUCTIVE OPERATION.

        Perform bulk operations on multiple entries (delete, update status,
        update fields). ALWAYS confirm operations with the 'confirm: true'
        parameter. Supports up to 100 entries per operation for safety.

        Operations:
            - delete: Permanently delete entries (CANNOT be undone)
            - update_status: Change entry status (active, spam, trash); only
              ``data.status`` is sent
            - update_fields: Update specific field values with ``data``

        Safety features: confirmation required, operation limits, per-entry
        failure isolation, rollback data for updates, audit trails.

        Example Usage:
            ```json
            {
                "name": "process_entries_bulk",
                "arguments": {
                    "entry_ids": ["123", "456"],
                    "operation_type": "update_status",
                    "confirm": true,
                    "data": {"status": "spam"}
                }
            }
            ```
        """
        request = BulkOperationRequest(
            entry_ids=entry_ids, operation_type=operation_type, confirm=confirm, data=data
        )
        manager = get_bulk_manager()

        validation = manager.validate_operation(request)
        if not validation.is_valid:
            raise BulkValidationError(validation.errors)

        result = await manager.execute_operation(request)
        return format_execution_result(result)
