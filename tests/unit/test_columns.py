"""Unit tests for header-to-field column detection."""

from __future__ import annotations

from billverify.ingestion.columns import (
    detect_columns,
    normalize_header,
    resolve_column,
    resolve_json_field,
)


class TestDetectColumns:
    def test_synonym_headers(self):
        mapping = detect_columns(["Entry Date", "Timekeeper", "Narrative", "Hours"])
        assert mapping == {"date": 0, "attorney": 1, "description": 2, "hours": 3}

    def test_optional_columns(self):
        mapping = detect_columns(
            ["Date", "Attorney", "Description", "Hours", "Hourly Rate", "Billed Amount", "UTBMS"]
        )
        assert mapping["rate"] == 4
        assert mapping["amount"] == 5
        assert mapping["code"] == 6

    def test_pattern_order_beats_column_order(self):
        # "attorney" is tried before "name" even though Name comes first
        assert detect_columns(["Name", "Attorney"])["attorney"] == 1

    def test_unknown_headers_absent(self):
        assert detect_columns(["Foo", "Bar"]) == {}

    def test_normalize_header(self):
        assert normalize_header(" Entry-Date ") == "entrydate"


class TestResolve:
    def test_positional_fallback(self):
        assert resolve_column({}, "description") == 2
        assert resolve_column({}, "hours") == 3
        assert resolve_column({}, "rate") is None

    def test_detected_index_wins(self):
        assert resolve_column({"hours": 5}, "hours") == 5

    def test_json_synonyms_skip_empty(self):
        assert resolve_json_field({"Hours": "", "quantity": 2}, "hours") == 2
        assert resolve_json_field({"narrative": "Draft"}, "description") == "Draft"
        assert resolve_json_field({}, "rate") is None
