"""Fixtures that drive the registered MCP tools against the fake API."""

import pytest

from gravity_forms_mcp.api_client import GravityFormsClient
from gravity_forms_mcp.bulk import BulkOperationsManager

from ..shared.fake_api import API_BASE
from ..shared.fake_api import AUTH_HEADERS


@pytest.fixture
def bulk_api(mocker, fake_api):
    """Route the bulk tools to the fake API."""
    mocker.patch(
        "gravity_forms_mcp.tools.bulk_tools.get_bulk_manager",
        return_value=BulkOperationsManager(API_BASE, AUTH_HEADERS, transport=fake_api.transport),
    )
    return fake_api


@pytest.fixture
def route_api(mocker):
    """Return an installer that routes the single-call tools through ``transport``."""

    def install(transport):
        mocker.patch(
            "gravity_forms_mcp.api_client.get_api_client",
            return_value=GravityFormsClient(API_BASE, AUTH_HEADERS, transport=transport),
        )

    return install
