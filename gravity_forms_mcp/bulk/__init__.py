"""Bulk entry operations for Gravity Forms.

Key Components:
- validate_operation: Pre-flight checks reporting every violated constraint
- generate_preview: Read-only dry run describing what a request would do
- prepare_rollback: Best-effort snapshot of entries before an update
- build_audit_trail: Operation id, timings and summary of a run
- BulkOperationsManager: Sequential executor tying the pieces together
"""

from .audit import build_audit_trail
from .manager import BulkOperationsManager
from .models import AuditTrail
from .models import BulkOperationFailure
from .models import BulkOperationProgress
from .models import BulkOperationRequest
from .models import BulkOperationType
from .models import EntryPreview
from .models import ExecutionResult
from .models import OperationPreview
from .models import RollbackEntry
from .models import RollbackSnapshot
from .models import ValidationResult
from .preview import generate_preview
from .rollback import prepare_rollback
from .validator import MAX_ENTRY_LIMIT
from .validator import validate_operation

__all__ = [
    # Models
    "AuditTrail",
    "BulkOperationFailure",
    "BulkOperationProgress",
    "BulkOperationRequest",
    "BulkOperationType",
    "EntryPreview",
    "ExecutionResult",
    "OperationPreview",
    "RollbackEntry",
    "RollbackSnapshot",
    "ValidationResult",
    # Core Components
    "BulkOperationsManager",
    "build_audit_trail",
    "generate_preview",
    "prepare_rollback",
    "validate_operation",
    "MAX_ENTRY_LIMIT",
]
