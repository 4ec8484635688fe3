"""In-memory fake of the Gravity Forms entries endpoints.

Served through ``httpx.MockTransport`` so the real client code runs
unchanged while every request is recorded for assertions.
"""

from __future__ import annotations

import json
from typing import Any

import httpx

API_BASE = "https://forms.example.com/wp-json/gf/v2"
AUTH_HEADERS = {
    "Authorization": "Basic dGVzdDp0ZXN0",
    "Content-Type": "application/json",
}


class FakeEntriesAPI:
    """Entries keyed by id, with per-id failure injection."""

    def __init__(self, entries: dict[str, dict[str, Any]] | None = None):
        self.entries: dict[str, dict[str, Any]] = entries or {}
        self.requests: list[httpx.Request] = []
        # entry_id -> (status, json body) returned for mutations of that entry
        self.mutation_failures: dict[str, tuple[int, Any]] = {}
        # entry_ids whose GET fails with a server error
        self.read_failures: set[str] = set()
        # entry_ids whose every request raises a transport error
        self.network_failures: set[str] = set()
        # entry_ids whose requests fail while the URL is being built
        self.invalid_url_failures: set[str] = set()

    @classmethod
    def with_entries(cls, *entry_ids: str, form_id: str = "1") -> FakeEntriesAPI:
        return cls({eid: {"id": eid, "form_id": form_id, "status": "active", "1": f"Name {eid}"} for eid in entry_ids})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def calls(self, method: str | None = None) -> list[httpx.Request]:
        return [r for r in self.requests if method is None or r.method == method]

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        prefix = "/wp-json/gf/v2/entries/"
        if not path.startswith(prefix):
            return httpx.Response(404, json={"code": "rest_no_route", "message": "No route was found"})

        entry_id = path[len(prefix):]
        if entry_id in self.network_failures:
            raise httpx.ConnectError("Connection refused", request=request)
        if entry_id in self.invalid_url_failures:
            raise httpx.InvalidURL("Invalid non-printable ASCII character in URL")

        if request.method == "GET":
            if entry_id in self.read_failures:
                return httpx.Response(500, json={"message": "Internal error"})
            if entry_id not in self.entries:
                return httpx.Response(404, json={"code": "not_found", "message": "Entry not found"})
            return httpx.Response(200, json=self.entries[entry_id])

        if entry_id in self.mutation_failures:
            status, body = self.mutation_failures[entry_id]
            if body is None:
                return httpx.Response(status)
            return httpx.Response(status, json=body)
        if entry_id not in self.entries:
            return httpx.Response(404, json={"code": "not_found", "message": "Entry not found"})

        if request.method == "DELETE":
            self.entries.pop(entry_id)
            return httpx.Response(200, json={"message": "Entry deleted successfully"})
        if request.method == "PUT":
            self.entries[entry_id].update(json.loads(request.content))
            return httpx.Response(200, json=self.entries[entry_id])
        return httpx.Response(405)
