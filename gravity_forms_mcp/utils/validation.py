"""Input validation for single-call tool parameters.

Each validator returns ``(is_valid, error_message)``.
"""

import re
from typing import Any

from ..exporter import EXPORT_FORMATS
from ..exporter import VALID_DATE_FORMATS

_NUMERIC_ID = re.compile(r"^\d+$")


def validate_form_id(form_id: Any) -> tuple[bool, str]:
    if form_id is None:
        return False, "Form ID is required"
    if not isinstance(form_id, str) or not form_id.strip():
        return False, "Form ID cannot be empty"
    if not _NUMERIC_ID.match(form_id.strip()):
        return False, "Form ID must be numeric"
    return True, ""


def validate_entry_id(entry_id: Any) -> tuple[bool, str]:
    if not isinstance(entry_id, str) or not entry_id.strip():
        return False, "Entry ID cannot be empty"
    if not _NUMERIC_ID.match(entry_id.strip()):
        return False, f'Entry ID "{entry_id}" must be numeric'
    return True, ""


def validate_field_values(field_values: Any) -> tuple[bool, str]:
    if not isinstance(field_values, dict):
        return False, "Field values must be an object of key-value pairs"
    if not field_values:
        return False, "At least one field value is required"
    return True, ""


_INVALID_FILENAME_PATTERNS = [
    re.compile(r"\.\."),
    re.compile(r'[<>:"|?*]'),
    re.compile(r"^[./]"),
    re.compile(r"[./]$"),
    re.compile(r"[/\\]"),
    re.compile(r"^(con|prn|aux|nul|com[1-9]|lpt[1-9])$", re.IGNORECASE),
]


def validate_export_format(export_format: Any) -> tuple[bool, str]:
    if export_format is None:
        return False, "Export format is required"
    if export_format not in EXPORT_FORMATS:
        return False, 'Export format must be "csv" or "json"'
    return True, ""


def validate_date_format(date_format: Any) -> tuple[bool, str]:
    if date_format and date_format not in VALID_DATE_FORMATS:
        return False, "Invalid date format"
    return True, ""


def validate_export_filename(filename: Any) -> tuple[bool, str]:
    if filename and any(pattern.search(filename) for pattern in _INVALID_FILENAME_PATTERNS):
        return False, "Filename contains invalid characters"
    return True, ""
