"""Unit tests for settings and authentication headers."""

import base64

import pytest

from gravity_forms_mcp.config import Settings
from gravity_forms_mcp.config import build_auth_headers
from gravity_forms_mcp.config import get_settings
from gravity_forms_mcp.config import reset_settings
from gravity_forms_mcp.exceptions import ConfigurationError


class TestSettings:
    """Test settings loading from the environment."""

    def test_reads_environment(self):
        settings = get_settings()

        assert settings.gravity_forms_base_url == "https://forms.example.com"
        assert settings.gravity_forms_consumer_key == "test"
        assert settings.is_configured is True
        assert settings.api_base_url == "https://forms.example.com/wp-json/gf/v2"

    def test_singleton_until_reset(self):
        first = get_settings()
        assert get_settings() is first
        reset_settings()
        assert get_settings() is not first

    def test_trailing_slash_stripped(self):
        settings = Settings(gravity_forms_base_url="https://forms.example.com/")
        assert settings.api_base_url == "https://forms.example.com/wp-json/gf/v2"

    def test_timeout_capped_in_tests(self):
        assert Settings(request_timeout=60).request_timeout == 10.0

    def test_not_configured_without_secret(self, monkeypatch):
        monkeypatch.setenv("GRAVITY_FORMS_CONSUMER_SECRET", "  ")
        assert Settings().is_configured is False

    def test_defaults(self):
        settings = Settings()
        assert settings.sse_host == "localhost"
        assert settings.sse_port == 3001
        assert settings.gravity_forms_auth_method == "basic"


class TestBuildAuthHeaders:
    """Test the fixed header map."""

    def test_basic_auth(self):
        headers = build_auth_headers(Settings(gravity_forms_consumer_key="ck_1", gravity_forms_consumer_secret="cs_2"))

        expected = base64.b64encode(b"ck_1:cs_2").decode("ascii")
        assert headers == {
            "Authorization": f"Basic {expected}",
            "Content-Type": "application/json",
        }

    def test_oauth_not_supported(self):
        with pytest.raises(ConfigurationError, match="OAuth authentication not implemented yet"):
            build_auth_headers(Settings(gravity_forms_auth_method="oauth"))

    def test_missing_credentials(self, monkeypatch):
        monkeypatch.delenv("GRAVITY_FORMS_CONSUMER_KEY")
        with pytest.raises(ConfigurationError) as exc_info:
            build_auth_headers(Settings(_env_file=None))
        assert exc_info.value.error_code == "CONFIGURATION_ERROR"
