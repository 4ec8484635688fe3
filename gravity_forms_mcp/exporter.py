"""CSV and JSON export of Gravity Forms entries.

Exports are returned in memory, with a base64 copy the agent host can hand
to a user as a download.
"""

import base64
import csv
import json
import re
from datetime import datetime
from io import StringIO
from typing import Any
from typing import Literal

from pydantic import BaseModel

ExportFormat = Literal["csv", "json"]

EXPORT_FORMATS = ("csv", "json")
VALID_DATE_FORMATS = [
    "YYYY-MM-DD",
    "MM/DD/YYYY",
    "DD/MM/YYYY",
    "YYYY-MM-DD HH:mm:ss",
    "MM/DD/YYYY HH:mm",
    "DD/MM/YYYY HH:mm",
]

_MIME_TYPES = {"csv": "text/csv", "json": "application/json"}
_DATE_VALUE = re.compile(r"^\d{4}-\d{2}-\d{2}( \d{2}:\d{2}:\d{2})?$")
# Token -> strftime directive, applied in this order
_DATE_TOKENS = [("YYYY", "%Y"), ("MM", "%m"), ("DD", "%d"), ("HH", "%H"), ("mm", "%M"), ("ss", "%S")]


class ExportResult(BaseModel):
    """Rendered export and its download metadata."""

    data: str
    base64_data: str
    filename: str
    format: ExportFormat
    mime_type: str


def format_date(value: str, date_format: str) -> str:
    """Reformat a Gravity Forms date string; unparseable values are returned unchanged."""
    for pattern in ("%Y-%m-%d %H:%M:%S", "%Y-%m-%d"):
        try:
            parsed = datetime.strptime(value, pattern)
            break
        except ValueError:
            continue
    else:
        return value

    directive = date_format
    for token, replacement in _DATE_TOKENS:
        directive = directive.replace(token, replacement)
    return parsed.strftime(directive)


def _sanitize_entry(entry: dict[str, Any], date_format: str | None, for_csv: bool) -> dict[str, Any]:
    sanitized: dict[str, Any] = {}
    for key, value in entry.items():
        if isinstance(value, list) and for_csv:
            sanitized[key] = ",".join(str(item) for item in value)
        elif isinstance(value, str) and date_format and _DATE_VALUE.match(value):
            sanitized[key] = format_date(value, date_format)
        else:
            sanitized[key] = value
    return sanitized


def _column_order(entries: list[dict[str, Any]]) -> list[str]:
    """Every key in first-seen order, with ``id`` first."""
    columns = list(dict.fromkeys(key for entry in entries for key in entry))
    if "id" in columns:
        columns.remove("id")
        columns.insert(0, "id")
    return columns


def _csv_value(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, dict):
        return json.dumps(value)
    return value


def export_to_csv(entries: list[dict[str, Any]], date_format: str | None = None, include_headers: bool = True) -> str:
    rows = [_sanitize_entry(entry, date_format, for_csv=True) for entry in entries]
    if not rows:
        return ""

    columns = _column_order(rows)
    output = StringIO()
    writer = csv.writer(output, lineterminator="\n")
    if include_headers:
        writer.writerow(columns)
    for row in rows:
        writer.writerow([_csv_value(row.get(column)) for column in columns])
    return output.getvalue().removesuffix("\n")


def export_to_json(entries: list[dict[str, Any]], date_format: str | None = None) -> str:
    return json.dumps([_sanitize_entry(entry, date_format, for_csv=False) for entry in entries], indent=2)


def export_filename(export_format: str, filename: str | None = None) -> str:
    if filename:
        return filename if filename.endswith(f".{export_format}") else f"{filename}.{export_format}"
    return f"export_{datetime.now().strftime('%Y-%m-%d_%H%M%S')}.{export_format}"


def export_entries(
    entries: list[Any],
    export_format: str,
    date_format: str | None = None,
    include_headers: bool = True,
    filename: str | None = None,
) -> ExportResult:
    """Render ``entries`` as CSV or JSON.

    Non-object items in ``entries`` are skipped.

    Raises:
        ValueError: If ``export_format`` is not csv or json.
    """
    valid_entries = [entry for entry in entries if isinstance(entry, dict)]

    if export_format == "csv":
        data = export_to_csv(valid_entries, date_format, include_headers)
    elif export_format == "json":
        data = export_to_json(valid_entries, date_format)
    else:
        raise ValueError(f"Unsupported export format: {export_format}")

    return ExportResult(
        data=data,
        base64_data=base64.b64encode(data.encode("utf-8")).decode("ascii"),
        filename=export_filename(export_format, filename),
        format=export_format,
        mime_type=_MIME_TYPES[export_format],
    )
