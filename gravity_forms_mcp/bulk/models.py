"""Data models for bulk entry operations.

Requests are permissive: constraint violations are reported by
the validator as a complete list instead of being raised one at a time by
pydantic.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel
from pydantic import Field

from ..exceptions import UNKNOWN_ERROR


class BulkOperationType(str, Enum):
    """Mutations a bulk request may apply."""

    DELETE = "delete"
    UPDATE_STATUS = "update_status"
    UPDATE_FIELDS = "update_fields"


UPDATE_OPERATIONS = {BulkOperationType.UPDATE_STATUS.value, BulkOperationType.UPDATE_FIELDS.value}
VALID_OPERATIONS = [op.value for op in BulkOperationType]


class BulkOperationRequest(BaseModel):
    """A caller-built request to mutate a batch of entries."""

    entry_ids: list[str] = Field(default_factory=list, description="Entry IDs to process, in order")
    operation_type: str = Field(..., description="delete, update_status or update_fields")
    confirm: bool = Field(default=False, description="Must be True before anything is mutated")
    data: dict[str, Any] | None = Field(default=None, description="Payload for update operations")

    @property
    def is_delete(self) -> bool:
        return self.operation_type == BulkOperationType.DELETE.value


class ValidationResult(BaseModel):
    """Outcome of validating a bulk request."""

    is_valid: bool
    errors: list[str] = Field(default_factory=list)


class EntryPreview(BaseModel):
    id: str
    preview: str


class OperationPreview(BaseModel):
    """Read-only dry run of a bulk request."""

    operation_type: str
    total_entries: int
    entries_found: list[EntryPreview] = Field(default_factory=list)
    entries_not_found: list[str] = Field(default_factory=list)
    description: str
    warnings: list[str] = Field(default_factory=list)
    estimated_time_seconds: int = 0


class BulkOperationProgress(BaseModel):
    processed: int
    total: int
    current_entry: str


class BulkOperationFailure(BaseModel):
    """A single entry that could not be processed."""

    entry_id: str
    error: str
    error_code: str = UNKNOWN_ERROR


class RollbackEntry(BaseModel):
    entry_id: str
    original_data: Any


class RollbackSnapshot(BaseModel):
    """Pre-mutation state of entries, for manual restoration only."""

    original_values: list[RollbackEntry] = Field(default_factory=list)
    rollback_instructions: str


class AuditTrail(BaseModel):
    """Record of what a bulk run did and when."""

    operation_id: str
    timestamp: str
    started_at: str
    completed_at: str
    duration_ms: int
    operation_summary: str
    affected_entries: list[str] = Field(default_factory=list)
    user_confirmation: bool


class ExecutionResult(BaseModel):
    """Complete result of executing a bulk request."""

    operation_type: str
    total_requested: int
    successful: int
    failed: int
    success_ids: list[str] = Field(default_factory=list)
    failed_entries: list[BulkOperationFailure] = Field(default_factory=list)
    can_rollback: bool = False
    rollback_data: RollbackSnapshot | None = None
    audit_trail: AuditTrail | None = None
    operation_summary: str
