"""Async client for the Gravity Forms REST API v2."""

import logging
from typing import Any

import httpx

from .config import Settings
from .config import build_auth_headers
from .config import get_settings
from .exceptions import APIRequestError

logger = logging.getLogger(__name__)


class GravityFormsClient:
    """Thin JSON-over-HTTP wrapper used by the single-call tools."""

    def __init__(
        self,
        base_url: str,
        auth_headers: dict[str, str],
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.auth_headers = dict(auth_headers)
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings, transport: httpx.AsyncBaseTransport | None = None):
        """Build a client from settings; raises ConfigurationError on bad auth config."""
        return cls(
            settings.api_base_url,
            build_auth_headers(settings),
            timeout=settings.request_timeout,
            transport=transport,
        )

    async def request(
        self,
        endpoint: str,
        method: str = "GET",
        body: Any = None,
        params: Any = None,
    ) -> Any:
        """Call ``endpoint`` (relative to the API prefix) and return the decoded JSON.

        Raises:
            APIRequestError: On a non-2xx response or a transport failure.
        """
        async with httpx.AsyncClient(
            base_url=self.base_url,
            headers=self.auth_headers,
            timeout=self.timeout,
            transport=self._transport,
        ) as client:
            try:
                response = await client.request(method, endpoint, json=body, params=params)
            except httpx.HTTPError as e:
                logger.warning("%s %s failed: %s", method, endpoint, e)
                raise APIRequestError(f"API request failed: {e}") from e

        if not response.is_success:
            raise APIRequestError(
                f"API request failed: HTTP {response.status_code}: {response.reason_phrase}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise APIRequestError(
                f"API request failed: invalid JSON response ({e})",
                status_code=response.status_code,
            ) from e


def get_api_client() -> GravityFormsClient:
    """Build a client from the global settings at call time."""
    return GravityFormsClient.from_settings(get_settings())
