"""Read-only dry run of a bulk request.

Each entry is fetched to confirm it exists and to describe what the
operation would do to it. Missing entries and transport failures are
reported as warnings, never raised.
"""

import logging
import math
from collections import Counter
from typing import Any

import httpx

from ..helpers import entry_path
from .models import BulkOperationRequest
from .models import BulkOperationType
from .models import EntryPreview
from .models import OperationPreview

logger = logging.getLogger(__name__)

# Rough per-entry cost used for the advisory time estimate.
SECONDS_PER_ENTRY = 0.5


def describe_entry(entry: dict[str, Any], operation_type: str) -> str:
    """One-line description of what will happen to a fetched entry."""
    entry_id = entry.get("id") or "Unknown"
    form_id = entry.get("form_id") or "Unknown"

    if operation_type == BulkOperationType.DELETE.value:
        return f"Entry {entry_id} (Form {form_id}) will be PERMANENTLY DELETED"
    if operation_type == BulkOperationType.UPDATE_STATUS.value:
        return f"Entry {entry_id} status will be updated"
    if operation_type == BulkOperationType.UPDATE_FIELDS.value:
        return f"Entry {entry_id} fields will be updated"
    return f"Entry {entry_id} will be processed"


def describe_operation(request: BulkOperationRequest, found_count: int) -> str:
    """Aggregate description of the whole request."""
    action = request.operation_type.upper().replace("_", " ")
    data = request.data or {}

    if request.operation_type == BulkOperationType.DELETE.value:
        return (
            f"WARNING: This will {action} {found_count} entries permanently. "
            "This action cannot be undone."
        )
    if request.operation_type == BulkOperationType.UPDATE_STATUS.value:
        status = data.get("status") or "specified status"
        return f'This will {action} to "{status}" for {found_count} entries.'
    if request.operation_type == BulkOperationType.UPDATE_FIELDS.value:
        field_list = ", ".join(f"Field {key}" for key in data)
        return f"This will {action} ({field_list}) for {found_count} entries."
    return f"This will perform {action} on {found_count} entries."


async def generate_preview(client: httpx.AsyncClient, request: BulkOperationRequest) -> OperationPreview:
    """Fetch every requested entry and describe the pending operation."""
    entries_found: list[EntryPreview] = []
    entries_not_found: list[str] = []
    warnings: list[str] = []

    for entry_id, count in Counter(request.entry_ids).items():
        if count > 1:
            warnings.append(
                f"Entry {entry_id} appears more than once and will be processed for each occurrence"
            )

    for entry_id in request.entry_ids:
        try:
            response = await client.get(entry_path(entry_id))
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning("Preview fetch failed for entry %s: %s", entry_id, e)
            entries_not_found.append(entry_id)
            warnings.append(f"Failed to fetch entry {entry_id}: {e}")
            continue

        if response.is_success:
            try:
                entry = response.json()
            except ValueError:
                entry = {}
            if not isinstance(entry, dict):
                entry = {}
            entries_found.append(
                EntryPreview(id=entry_id, preview=describe_entry(entry, request.operation_type))
            )
        else:
            entries_not_found.append(entry_id)
            warnings.append(f"Entry {entry_id} not found and will be skipped")

    return OperationPreview(
        operation_type=request.operation_type,
        total_entries=len(request.entry_ids),
        entries_found=entries_found,
        entries_not_found=entries_not_found,
        description=describe_operation(request, len(entries_found)),
        warnings=warnings,
        estimated_time_seconds=math.ceil(len(entries_found) * SECONDS_PER_ENTRY),
    )
