"""The pytest configuration for Gravity Forms MCP testing.

Metrics are disabled before any package module is imported, and every test
gets fresh settings pointing at a fake site.
"""

import os

os.environ.setdefault("MCP_METRICS_ENABLED", "false")

import pytest  # noqa: E402

from gravity_forms_mcp.bulk import BulkOperationsManager  # noqa: E402
from gravity_forms_mcp.config import reset_settings  # noqa: E402

from .shared.fake_api import API_BASE  # noqa: E402
from .shared.fake_api import AUTH_HEADERS  # noqa: E402
from .shared.fake_api import FakeEntriesAPI  # noqa: E402

_SETTINGS_ENV = {
    "GRAVITY_FORMS_BASE_URL": "https://forms.example.com",
    "GRAVITY_FORMS_CONSUMER_KEY": "test",
    "GRAVITY_FORMS_CONSUMER_SECRET": "test",
    "GRAVITY_FORMS_AUTH_METHOD": "basic",
}


@pytest.fixture(autouse=True)
def gravity_forms_env(monkeypatch):
    """Point settings at the fake site and reset the settings singleton."""
    for key, value in _SETTINGS_ENV.items():
        monkeypatch.setenv(key, value)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def fake_api():
    """Fake entries API holding entries 123, 456 and 789."""
    return FakeEntriesAPI.with_entries("123", "456", "789")


@pytest.fixture
def manager(fake_api):
    """Bulk manager wired to the fake API."""
    return BulkOperationsManager(API_BASE, AUTH_HEADERS, transport=fake_api.transport)


def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "integration: drives MCP tools end to end against a faked API")
