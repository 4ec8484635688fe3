"""Audit trail construction for bulk runs."""

import random
import string
from datetime import datetime
from datetime import timezone

from .models import AuditTrail
from .models import BulkOperationRequest

_ID_ALPHABET = string.digits + string.ascii_lowercase


def generate_operation_id(now_ms: int | None = None) -> str:
    """Return ``bulk_<epoch ms>_<9 base36 chars>``; unique in practice, not guaranteed."""
    if now_ms is None:
        now_ms = int(datetime.now(timezone.utc).timestamp() * 1000)
    suffix = "".join(random.choices(_ID_ALPHABET, k=9))
    return f"bulk_{now_ms}_{suffix}"


def _iso(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def summarize(operation_type: str, successful: int, failed: int) -> str:
    return f"{operation_type.upper()} operation: {successful} successful, {failed} failed"


def build_audit_trail(
    request: BulkOperationRequest,
    started_at: datetime,
    completed_at: datetime,
    success_ids: list[str],
) -> AuditTrail:
    """Build the audit record of one run from its clock readings and outcomes."""
    duration_ms = int((completed_at - started_at).total_seconds() * 1000)
    failed = len(request.entry_ids) - len(success_ids)

    return AuditTrail(
        operation_id=generate_operation_id(int(started_at.timestamp() * 1000)),
        timestamp=_iso(completed_at),
        started_at=_iso(started_at),
        completed_at=_iso(completed_at),
        duration_ms=duration_ms,
        operation_summary=summarize(request.operation_type, len(success_ids), failed),
        affected_entries=list(success_ids),
        user_confirmation=request.confirm,
    )
