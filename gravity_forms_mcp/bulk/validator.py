"""Pre-flight validation of bulk requests."""

from .models import UPDATE_OPERATIONS
from .models import VALID_OPERATIONS
from .models import BulkOperationRequest
from .models import ValidationResult

MAX_ENTRY_LIMIT = 100


def validate_operation(request: BulkOperationRequest) -> ValidationResult:
    """Check every constraint of a bulk request and report all violations in order."""
    errors: list[str] = []

    if not request.entry_ids:
        errors.append("At least one entry ID is required")
    elif len(request.entry_ids) > MAX_ENTRY_LIMIT:
        errors.append(f"Bulk operations limited to {MAX_ENTRY_LIMIT} entries maximum")

    if request.operation_type not in VALID_OPERATIONS:
        errors.append("Invalid operation type. Must be delete, update_status, or update_fields")

    if request.confirm is not True:
        errors.append("Bulk operations require explicit confirmation (confirm: true)")

    if request.operation_type in UPDATE_OPERATIONS and not request.data:
        errors.append("Data is required for update operations")

    return ValidationResult(is_valid=not errors, errors=errors)
