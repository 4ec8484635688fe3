"""Bulk entry operations with confirmation, failure isolation and audit trails.

The manager only holds immutable connection settings. Every public call
opens its own HTTP client, so independent calls on one manager never share
per-run state.
"""

import inspect
import logging
from collections.abc import Awaitable
from collections.abc import Callable
from datetime import datetime
from datetime import timezone
from typing import Any

import httpx

from ..exceptions import UNKNOWN_ERROR
from ..exceptions import APIRequestError
from ..exceptions import BulkValidationError
from ..helpers import entry_path
from ..logger_config import ErrorCategory
from ..logger_config import log_structured_error
from ..metrics_config import record_bulk_entry_outcome
from . import preview as preview_module
from . import rollback as rollback_module
from .audit import build_audit_trail
from .models import BulkOperationFailure
from .models import BulkOperationProgress
from .models import BulkOperationRequest
from .models import BulkOperationType
from .models import ExecutionResult
from .models import OperationPreview
from .models import RollbackSnapshot
from .models import ValidationResult
from .validator import MAX_ENTRY_LIMIT
from .validator import validate_operation

logger = logging.getLogger(__name__)

ProgressObserver = Callable[[BulkOperationProgress], Awaitable[None] | None]


class BulkOperationsManager:
    """Apply delete/update operations to a bounded batch of entries, one at a time."""

    def __init__(
        self,
        base_url: str,
        auth_headers: dict[str, str],
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the manager.

        Args:
            base_url: REST API prefix, e.g. ``https://example.com/wp-json/gf/v2``.
            auth_headers: Header map sent unchanged with every call.
            timeout: Per-request timeout in seconds.
            transport: Optional httpx transport, mainly for tests.
        """
        self._base_url = base_url.rstrip("/")
        self._auth_headers = dict(auth_headers)
        self._timeout = timeout
        self._transport = transport

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def auth_headers(self) -> dict[str, str]:
        return dict(self._auth_headers)

    @property
    def max_entry_limit(self) -> int:
        return MAX_ENTRY_LIMIT

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url,
            headers=self._auth_headers,
            timeout=self._timeout,
            transport=self._transport,
        )

    def validate_operation(self, request: BulkOperationRequest) -> ValidationResult:
        return validate_operation(request)

    async def get_operation_preview(self, request: BulkOperationRequest) -> OperationPreview:
        """Describe what ``request`` would do without mutating anything."""
        async with self._client() as client:
            return await preview_module.generate_preview(client, request)

    async def prepare_rollback(self, entry_ids: list[str]) -> RollbackSnapshot:
        async with self._client() as client:
            return await rollback_module.prepare_rollback(client, entry_ids)

    async def execute_operation(
        self,
        request: BulkOperationRequest,
        on_progress: ProgressObserver | None = None,
    ) -> ExecutionResult:
        """Validate, snapshot (updates only) and apply the operation entry by entry.

        Raises:
            BulkValidationError: If the request is invalid. No remote call is made.
        """
        validation = validate_operation(request)
        if not validation.is_valid:
            raise BulkValidationError(validation.errors)

        total = len(request.entry_ids)
        success_ids: list[str] = []
        failed_entries: list[BulkOperationFailure] = []
        rollback_data: RollbackSnapshot | None = None

        logger.info("Starting bulk %s on %d entries", request.operation_type, total)
        started_at = datetime.now(timezone.utc)

        async with self._client() as client:
            if not request.is_delete:
                try:
                    rollback_data = await rollback_module.prepare_rollback(client, request.entry_ids)
                except Exception as e:
                    log_structured_error(
                        category=ErrorCategory.WARNING,
                        message="Failed to prepare rollback data",
                        exception=e,
                        operation="execute_operation",
                        operation_type=request.operation_type,
                    )

            for processed, entry_id in enumerate(request.entry_ids, start=1):
                failure = await self._execute_for_entry(client, entry_id, request)
                if failure is None:
                    success_ids.append(entry_id)
                else:
                    failed_entries.append(failure)
                record_bulk_entry_outcome(request.operation_type, failure is None)

                if on_progress is not None:
                    notified = on_progress(
                        BulkOperationProgress(processed=processed, total=total, current_entry=entry_id)
                    )
                    if inspect.isawaitable(notified):
                        await notified

        completed_at = datetime.now(timezone.utc)

        can_rollback = (
            not request.is_delete
            and rollback_data is not None
            and len(rollback_data.original_values) > 0
        )
        summary = (
            f"{request.operation_type.upper()} operation completed: "
            f"{len(success_ids)} successful, {len(failed_entries)} failed"
        )
        logger.info(summary)

        return ExecutionResult(
            operation_type=request.operation_type,
            total_requested=total,
            successful=len(success_ids),
            failed=len(failed_entries),
            success_ids=success_ids,
            failed_entries=failed_entries,
            can_rollback=can_rollback,
            rollback_data=rollback_data if can_rollback else None,
            audit_trail=build_audit_trail(request, started_at, completed_at, success_ids),
            operation_summary=summary,
        )

    async def _execute_for_entry(
        self, client: httpx.AsyncClient, entry_id: str, request: BulkOperationRequest
    ) -> BulkOperationFailure | None:
        """Apply the operation to one entry; failures come back as data."""
        try:
            await self._send(client, entry_id, request)
        except APIRequestError as e:
            logger.warning("Bulk %s failed for entry %s: %s", request.operation_type, entry_id, e)
            return BulkOperationFailure(entry_id=entry_id, error=e.message, error_code=e.error_code)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning("Bulk %s failed for entry %s: %s", request.operation_type, entry_id, e)
            return BulkOperationFailure(
                entry_id=entry_id, error=str(e) or e.__class__.__name__, error_code=UNKNOWN_ERROR
            )
        return None

    async def _send(self, client: httpx.AsyncClient, entry_id: str, request: BulkOperationRequest) -> None:
        path = entry_path(entry_id)
        data = request.data or {}

        if request.operation_type == BulkOperationType.DELETE.value:
            response = await client.delete(path)
        elif request.operation_type == BulkOperationType.UPDATE_STATUS.value:
            # Only the status key is sent so stray keys cannot overwrite fields.
            response = await client.put(path, json={"status": data.get("status")})
        elif request.operation_type == BulkOperationType.UPDATE_FIELDS.value:
            response = await client.put(path, json=data)
        else:
            raise APIRequestError(f"Unsupported operation type: {request.operation_type}")

        if not response.is_success:
            body = _error_body(response)
            message = body.get("message") or f"HTTP {response.status_code}: {response.reason_phrase}"
            raise APIRequestError(
                str(message),
                status_code=response.status_code,
                error_code=str(body.get("code") or UNKNOWN_ERROR),
            )


def _error_body(response: httpx.Response) -> dict[str, Any]:
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}
