"""Unit tests for CSV and JSON entry export."""

import base64
import json
import re

import pytest

from gravity_forms_mcp.exporter import export_entries
from gravity_forms_mcp.exporter import export_filename
from gravity_forms_mcp.exporter import export_to_csv
from gravity_forms_mcp.exporter import format_date

ENTRIES = [
    {"form_id": "1", "id": "10", "date_created": "2024-01-15 10:30:00", "1": "Jane"},
    {"form_id": "1", "id": "11", "date_created": "2024-02-01 08:05:09", "2": ["a", "b"]},
]


class TestCsvExport:
    def test_id_column_first_then_first_seen_order(self):
        lines = export_to_csv(ENTRIES).split("\n")

        assert lines[0] == "id,form_id,date_created,1,2"
        assert lines[1] == "10,1,2024-01-15 10:30:00,Jane,"
        assert lines[2] == '11,1,2024-02-01 08:05:09,,"a,b"'

    def test_without_headers(self):
        assert export_to_csv(ENTRIES[:1], include_headers=False) == "10,1,2024-01-15 10:30:00,Jane"

    def test_quotes_special_characters_and_serializes_objects(self):
        data = export_to_csv([{"id": "1", "note": 'say "hi"', "address": {"city": "Oslo"}}])

        assert data.split("\n")[1] == '1,"say ""hi""","{""city"": ""Oslo""}"'

    def test_empty(self):
        assert export_to_csv([]) == ""


class TestDateFormatting:
    @pytest.mark.parametrize(
        "date_format, expected",
        [
            ("YYYY-MM-DD", "2024-01-15"),
            ("MM/DD/YYYY", "01/15/2024"),
            ("DD/MM/YYYY HH:mm", "15/01/2024 10:30"),
        ],
    )
    def test_formats(self, date_format, expected):
        assert format_date("2024-01-15 10:30:00", date_format) == expected

    def test_unparseable_value_is_unchanged(self):
        assert format_date("2024-13-45", "YYYY-MM-DD") == "2024-13-45"

    def test_applied_to_date_values_only(self):
        result = export_entries(ENTRIES[:1], "json", date_format="MM/DD/YYYY")

        exported = json.loads(result.data)[0]
        assert exported["date_created"] == "01/15/2024"
        assert exported["1"] == "Jane"


class TestExportEntries:
    def test_json_keeps_lists(self):
        result = export_entries(ENTRIES, "json", filename="contacts")

        assert json.loads(result.data)[1]["2"] == ["a", "b"]
        assert result.filename == "contacts.json"
        assert result.mime_type == "application/json"
        assert base64.b64decode(result.base64_data).decode("utf-8") == result.data

    def test_skips_non_object_items(self):
        result = export_entries([ENTRIES[0], "junk", None], "csv")

        assert len(result.data.split("\n")) == 2
        assert result.mime_type == "text/csv"

    def test_unsupported_format(self):
        with pytest.raises(ValueError, match="Unsupported export format: xml"):
            export_entries(ENTRIES, "xml")


def test_export_filename():
    assert export_filename("csv", "report.csv") == "report.csv"
    assert export_filename("csv", "report") == "report.csv"
    assert re.fullmatch(r"export_\d{4}-\d{2}-\d{2}_\d{6}\.json", export_filename("json"))
