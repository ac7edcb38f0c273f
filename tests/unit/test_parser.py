"""Unit tests for the low-level upload parsers."""

from __future__ import annotations

import pytest

from billverify.exceptions import IngestionError
from billverify.ingestion.parser import (
    InputFormat,
    detect_format,
    parse_delimited,
    parse_json_records,
    sniff_delimiter,
    split_plain_line,
)


class TestParseDelimited:
    """CSV/TSV parsing through pandas."""

    def test_escaped_quotes_and_embedded_comma(self):
        rows = parse_delimited('Date,Description\n2024-01-08,"say ""hello"", ok"\n')
        assert rows[1] == ["2024-01-08", 'say "hello", ok']

    def test_newline_inside_quotes(self):
        rows = parse_delimited('a,b\n1,"line one\nline two"\n')
        assert rows == [["a", "b"], ["1", "line one\nline two"]]

    @pytest.mark.parametrize("text", ["a,b\r\n1,2\r\n", "a,b\r1,2", "a,b\n1,2"])
    def test_line_endings(self, text):
        assert parse_delimited(text) == [["a", "b"], ["1", "2"]]

    def test_blank_rows_dropped(self):
        assert parse_delimited("a,b\n,\n1,2\n\n") == [["a", "b"], ["1", "2"]]

    def test_fields_trimmed(self):
        assert parse_delimited(" a , b \n") == [["a", "b"]]

    def test_tab_delimiter(self):
        assert parse_delimited("a\tb\n1\t2", "\t") == [["a", "b"], ["1", "2"]]

    def test_empty_text(self):
        assert parse_delimited("") == []

    def test_ragged_rows_match_header_width(self):
        rows = parse_delimited("Date,Hours,Rate\n2024-01-08,1.5\n2024-01-09,2,300,extra,\n")
        assert rows == [
            ["Date", "Hours", "Rate"],
            ["2024-01-08", "1.5", ""],
            ["2024-01-09", "2", "300"],
        ]

    def test_space_before_quoted_field(self):
        rows = parse_delimited('a,b\n1, "Draft, revise"\n')
        assert rows[1] == ["1", "Draft, revise"]


class TestFormatDetection:
    def test_sniff_tab(self):
        assert sniff_delimiter("Date\tHours\n2024-01-08\t1.5\n") == "\t"

    def test_sniff_ignores_quoted_tab(self):
        assert sniff_delimiter('"a\tb",c\n') == ","

    def test_sniff_only_reads_header_line(self):
        assert sniff_delimiter("Date,Hours\n2024-01-08\t1.5\n") == ","

    @pytest.mark.parametrize(
        "filename, expected",
        [
            ("entries.json", InputFormat.JSON),
            ("entries.CSV", InputFormat.DELIMITED),
            ("entries.tsv", InputFormat.DELIMITED),
            ("notes.txt", InputFormat.TEXT),
        ],
    )
    def test_by_extension(self, filename, expected):
        assert detect_format(filename, "") == expected

    def test_by_content(self):
        assert detect_format(None, '  [{"hours": 1}]') == InputFormat.JSON
        assert detect_format(None, "Date,Hours\n") == InputFormat.DELIMITED


class TestParseJsonRecords:
    def test_top_level_array(self):
        assert parse_json_records('[{"hours": 1}, {"hours": 2}]') == [{"hours": 1}, {"hours": 2}]

    @pytest.mark.parametrize("key", ["entries", "data", "timeEntries"])
    def test_container_keys(self, key):
        assert parse_json_records(f'{{"{key}": [{{"hours": 1}}]}}') == [{"hours": 1}]

    def test_non_object_items_skipped(self):
        assert parse_json_records('[{"hours": 1}, 3, "x"]') == [{"hours": 1}]

    def test_object_without_array_rejected(self):
        with pytest.raises(IngestionError, match="timeEntries"):
            parse_json_records('{"foo": 1}')

    def test_scalar_rejected(self):
        with pytest.raises(IngestionError, match="array"):
            parse_json_records("42")

    def test_invalid_json(self):
        with pytest.raises(IngestionError, match="Invalid JSON"):
            parse_json_records("{not json")


class TestSplitPlainLine:
    def test_comma_outside_quotes(self):
        parts = split_plain_line('2024-01-08,J. Smith,"Draft brief, revise",1.5')
        assert parts == ["2024-01-08", "J. Smith", "Draft brief, revise", "1.5"]

    def test_tabs(self):
        assert split_plain_line("2024-01-08\tJ. Smith\tDraft complaint\t2") == [
            "2024-01-08",
            "J. Smith",
            "Draft complaint",
            "2",
        ]
