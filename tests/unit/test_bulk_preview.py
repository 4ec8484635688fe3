"""Unit tests for the read-only preview and the rollback snapshot."""

import httpx
import pytest

from gravity_forms_mcp.bulk import BulkOperationRequest
from gravity_forms_mcp.bulk import BulkOperationsManager
from gravity_forms_mcp.bulk.preview import describe_entry
from gravity_forms_mcp.bulk.preview import describe_operation
from gravity_forms_mcp.bulk.rollback import ROLLBACK_INSTRUCTIONS

from ..shared.fake_api import API_BASE
from ..shared.fake_api import AUTH_HEADERS


class TestDescribeEntry:
    """Per-entry preview text."""

    def test_delete(self):
        text = describe_entry({"id": "123", "form_id": "1"}, "delete")
        assert text == "Entry 123 (Form 1) will be PERMANENTLY DELETED"

    def test_delete_missing_fields(self):
        assert describe_entry({}, "delete") == "Entry Unknown (Form Unknown) will be PERMANENTLY DELETED"

    def test_update_status(self):
        assert describe_entry({"id": "9"}, "update_status") == "Entry 9 status will be updated"

    def test_update_fields(self):
        assert describe_entry({"id": "9"}, "update_fields") == "Entry 9 fields will be updated"


class TestDescribeOperation:
    """Aggregate preview text."""

    def test_delete_warns(self):
        request = BulkOperationRequest(entry_ids=["1", "2"], operation_type="delete")
        assert describe_operation(request, 2) == (
            "WARNING: This will DELETE 2 entries permanently. This action cannot be undone."
        )

    def test_update_status(self):
        request = BulkOperationRequest(entry_ids=["1"], operation_type="update_status", data={"status": "spam"})
        assert describe_operation(request, 1) == 'This will UPDATE STATUS to "spam" for 1 entries.'

    def test_update_fields_lists_fields_in_order(self):
        request = BulkOperationRequest(
            entry_ids=["1"], operation_type="update_fields", data={"1": "a", "3": "b"}
        )
        assert describe_operation(request, 3) == "This will UPDATE FIELDS (Field 1, Field 3) for 3 entries."


class TestGetOperationPreview:
    """Preview through the manager against the fake API."""

    @pytest.mark.asyncio
    async def test_preview_found_and_missing(self, manager, fake_api):
        request = BulkOperationRequest(entry_ids=["123", "999", "456"], operation_type="delete")

        preview = await manager.get_operation_preview(request)

        assert preview.total_entries == 3
        assert [e.id for e in preview.entries_found] == ["123", "456"]
        assert preview.entries_not_found == ["999"]
        assert preview.warnings == ["Entry 999 not found and will be skipped"]
        assert preview.estimated_time_seconds == 1
        assert preview.description.startswith("WARNING: This will DELETE 2 entries")

    @pytest.mark.asyncio
    async def test_preview_never_mutates(self, manager, fake_api):
        request = BulkOperationRequest(
            entry_ids=["123", "456", "789"], operation_type="update_fields", data={"1": "x"}
        )

        await manager.get_operation_preview(request)

        assert {r.method for r in fake_api.requests} == {"GET"}
        assert fake_api.entries["123"]["1"] == "Name 123"

    @pytest.mark.asyncio
    async def test_preview_ignores_confirmation(self, manager):
        request = BulkOperationRequest(entry_ids=["123"], operation_type="delete", confirm=False)
        preview = await manager.get_operation_preview(request)
        assert len(preview.entries_found) == 1

    @pytest.mark.asyncio
    async def test_estimate_rounds_up(self, manager):
        request = BulkOperationRequest(entry_ids=["123", "456", "789"], operation_type="delete")
        preview = await manager.get_operation_preview(request)
        assert preview.estimated_time_seconds == 2

    @pytest.mark.asyncio
    async def test_transport_failure_becomes_warning(self, manager, fake_api):
        fake_api.network_failures.add("456")
        request = BulkOperationRequest(entry_ids=["123", "456"], operation_type="delete")

        preview = await manager.get_operation_preview(request)

        assert preview.entries_not_found == ["456"]
        assert preview.warnings[0].startswith("Failed to fetch entry 456:")

    @pytest.mark.asyncio
    async def test_invalid_url_becomes_warning(self, manager, fake_api):
        fake_api.invalid_url_failures.add("456")
        request = BulkOperationRequest(entry_ids=["123", "456"], operation_type="delete")

        preview = await manager.get_operation_preview(request)

        assert [e.id for e in preview.entries_found] == ["123"]
        assert preview.entries_not_found == ["456"]
        assert preview.warnings[0].startswith("Failed to fetch entry 456:")

    @pytest.mark.asyncio
    async def test_odd_ids_are_fetched_as_single_entries(self, manager, fake_api):
        request = BulkOperationRequest(entry_ids=["4\n56", "../forms/3", "123"], operation_type="delete")

        preview = await manager.get_operation_preview(request)

        assert preview.entries_not_found == ["4\n56", "../forms/3"]
        assert [e.id for e in preview.entries_found] == ["123"]
        assert all(r.url.raw_path.startswith(b"/wp-json/gf/v2/entries/") for r in fake_api.requests)
        assert fake_api.requests[1].url.raw_path == b"/wp-json/gf/v2/entries/..%2Fforms%2F3"

    @pytest.mark.asyncio
    async def test_duplicate_ids_warned(self, manager):
        request = BulkOperationRequest(entry_ids=["123", "123"], operation_type="delete")

        preview = await manager.get_operation_preview(request)

        assert preview.total_entries == 2
        assert len(preview.entries_found) == 2
        assert "Entry 123 appears more than once" in preview.warnings[0]

    @pytest.mark.asyncio
    async def test_non_json_body_uses_unknown(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, text="<html>"))
        manager = BulkOperationsManager(API_BASE, AUTH_HEADERS, transport=transport)
        request = BulkOperationRequest(entry_ids=["5"], operation_type="delete")

        preview = await manager.get_operation_preview(request)

        assert preview.entries_found[0].id == "5"
        assert preview.entries_found[0].preview == "Entry Unknown (Form Unknown) will be PERMANENTLY DELETED"


class TestPrepareRollback:
    """Snapshot capture."""

    @pytest.mark.asyncio
    async def test_snapshot_skips_failures(self, manager, fake_api):
        fake_api.read_failures.add("456")
        fake_api.network_failures.add("789")
        fake_api.invalid_url_failures.add("321")

        snapshot = await manager.prepare_rollback(["123", "456", "789", "321", "999"])

        assert [o.entry_id for o in snapshot.original_values] == ["123"]
        assert snapshot.original_values[0].original_data["id"] == "123"
        assert snapshot.rollback_instructions == ROLLBACK_INSTRUCTIONS

    @pytest.mark.asyncio
    async def test_skipped_entry_logged_once(self, manager, fake_api, mocker):
        mock_log_error = mocker.patch("gravity_forms_mcp.bulk.rollback.log_structured_error")
        fake_api.network_failures.add("789")

        await manager.prepare_rollback(["123", "789"])

        mock_log_error.assert_called_once()
        kwargs = mock_log_error.call_args.kwargs
        assert kwargs["entry_id"] == "789"
        assert isinstance(kwargs["exception"], httpx.ConnectError)

    @pytest.mark.asyncio
    async def test_snapshot_fetches_each_id_once(self, manager, fake_api):
        snapshot = await manager.prepare_rollback(["123", "123", "456"])

        assert len(snapshot.original_values) == 2
        assert len(fake_api.calls("GET")) == 2
