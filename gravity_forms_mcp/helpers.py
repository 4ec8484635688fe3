"""Shared helper functions for the Gravity Forms MCP tools.

Response-size management keeps large forms and entry lists from
overflowing the agent's context window.
"""

import json
import math
from typing import Any
from urllib.parse import quote

# Responses above this many estimated tokens are summarized.
TOKEN_LIMIT = 20000

# Field ids that commonly hold names and emails on Gravity Forms sites.
_NAME_FIELDS = ["52", "55"]
_EMAIL_FIELDS = ["50", "54"]
_ESSENTIAL_KEYS = ["id", "form_id", "date_created", "payment_status"]


# --- Size Estimation Helpers ---


def estimate_token_count(text: str | None) -> int:
    """Rough token count: one token per four characters."""
    if not text:
        return 0
    return math.ceil(len(text) / 4)


def estimate_entries_response_size(entries: list[dict[str, Any]]) -> int:
    """Estimate the token size of an entry list by sampling the first few entries."""
    if not entries:
        return 0

    sample = entries[:3]
    sample_size = 0
    for entry in sample:
        try:
            sample_size += len(json.dumps(entry))
        except (TypeError, ValueError):
            sample_size += len(entry or {}) * 50

    estimated_total = (sample_size / len(sample)) * len(entries)
    overhead = 50 + len(entries) * 10
    return math.ceil((estimated_total + overhead) / 4)


# --- Summary Helpers ---


def create_entry_summary(entry: dict[str, Any]) -> dict[str, Any]:
    """Reduce an entry to its identifying fields plus short values when it is small."""
    summary: dict[str, Any] = {key: entry[key] for key in _ESSENTIAL_KEYS if key in entry}

    # Name sub-inputs use the ".3" (first) and ".6" (last) suffixes.
    name_fields = _NAME_FIELDS + [
        key for key in entry if "." in key and (key.endswith(".3") or key.endswith(".6"))
    ]
    for field_id in name_fields + _EMAIL_FIELDS:
        if field_id in entry:
            summary[field_id] = entry[field_id]

    try:
        entry_size = len(json.dumps(entry))
    except (TypeError, ValueError):
        entry_size = len(entry) * 100

    if entry_size < 2000:
        for key, value in entry.items():
            if key not in summary and value is not None and len(str(value)) < 200:
                summary[key] = value

    return summary


def create_form_summary(form: dict[str, Any]) -> str:
    """Summarize a form too large to return in full."""
    fields = form.get("fields") or []
    summary = {
        "id": form.get("id"),
        "title": form.get("title"),
        "description": form.get("description"),
        "is_active": form.get("is_active"),
        "is_trash": form.get("is_trash"),
        "date_created": form.get("date_created"),
        "field_count": len(fields),
        "entry_count": len(form.get("entries") or []),
        "has_conditional_logic": any(f.get("conditionalLogic") for f in fields if isinstance(f, dict)),
        "has_calculations": any(f.get("calculations") for f in fields if isinstance(f, dict)),
        "notification_count": len(form.get("notifications") or {}),
        "confirmation_count": len(form.get("confirmations") or {}),
    }
    tokens = estimate_token_count(json.dumps(form, indent=2))

    return (
        f"LARGE FORM SUMMARY ({tokens} estimated tokens):\n"
        f"{json.dumps(summary, indent=2)}\n\n"
        "This form is too large to display in full (>20k tokens).\n"
        "Use get_entries for detailed entry access."
    )


# --- Query Building Helpers ---


def entry_path(entry_id: str) -> str:
    """Endpoint for a single entry, with the id encoded as one path segment."""
    segment = quote(str(entry_id), safe="")
    # "." and ".." would otherwise be collapsed as dot segments by the URL parser
    if segment.strip(".") == "":
        segment = segment.replace(".", "%2E")
    return f"/entries/{segment}"


def build_search_object(search: dict[str, Any] | None) -> dict[str, Any]:
    """Build the ``search`` JSON object the entries endpoint expects.

    Field filters without a key or value are dropped; keys, values and
    operators are stripped, and the operator defaults to ``=``.
    """
    if not search:
        return {}

    search_object: dict[str, Any] = {}
    if search.get("status"):
        search_object["status"] = search["status"]

    field_filters = search.get("field_filters")
    if isinstance(field_filters, list):
        valid_filters = []
        for item in field_filters:
            if not isinstance(item, dict) or item.get("key") is None or item.get("value") is None:
                continue
            key = str(item["key"]).strip()
            if not key:
                continue
            operator = str(item["operator"]).strip() if item.get("operator") else "="
            valid_filters.append({"key": key, "value": str(item["value"]).strip(), "operator": operator})
        if valid_filters:
            search_object["field_filters"] = valid_filters

    date_range = search.get("date_range")
    if isinstance(date_range, dict):
        cleaned = {k: date_range[k] for k in ("start", "end") if date_range.get(k)}
        if cleaned:
            search_object["date_range"] = cleaned

    for key, value in search.items():
        if key not in ("status", "field_filters", "date_range"):
            search_object[key] = str(value)

    return search_object


def build_entries_query(
    search: dict[str, Any] | None = None,
    sorting: dict[str, Any] | None = None,
    paging: dict[str, Any] | None = None,
) -> list[tuple[str, str]]:
    """Build query parameters for the entries endpoints."""
    params: list[tuple[str, str]] = []

    search_object = build_search_object(search)
    if search_object:
        params.append(("search", json.dumps(search_object, separators=(",", ":"))))

    for key, value in (sorting or {}).items():
        params.append((f"sorting[{key}]", _query_value(value)))
    for key, value in (paging or {}).items():
        params.append((f"paging[{key}]", _query_value(value)))

    return params


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
