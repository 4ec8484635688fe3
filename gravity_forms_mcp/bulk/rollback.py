"""Best-effort capture of entry state before an update.

The snapshot is advisory: nothing here replays it. A failed fetch only
drops that entry from the snapshot.
"""

import httpx

from ..helpers import entry_path
from ..logger_config import ErrorCategory
from ..logger_config import log_structured_error
from .models import RollbackEntry
from .models import RollbackSnapshot

ROLLBACK_INSTRUCTIONS = (
    "Use the update_entry tool with the original_data values to restore previous state"
)


async def prepare_rollback(client: httpx.AsyncClient, entry_ids: list[str]) -> RollbackSnapshot:
    """Fetch the current state of each distinct entry; never raises for a single entry."""
    original_values: list[RollbackEntry] = []

    for entry_id in dict.fromkeys(entry_ids):
        try:
            response = await client.get(entry_path(entry_id))
            response.raise_for_status()
            original_values.append(RollbackEntry(entry_id=entry_id, original_data=response.json()))
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
            log_structured_error(
                category=ErrorCategory.WARNING,
                message=f"Rollback snapshot skipped entry {entry_id}",
                exception=e,
                operation="prepare_rollback",
                entry_id=entry_id,
            )

    return RollbackSnapshot(
        original_values=original_values,
        rollback_instructions=ROLLBACK_INSTRUCTIONS,
    )
