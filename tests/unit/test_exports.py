"""Unit tests for CSV, JSON, Excel and PDF exports."""

from __future__ import annotations

import json
from datetime import datetime, timezone

import pytest
from openpyxl import load_workbook

from billverify.ingestion.parser import parse_delimited
from billverify.models import ReviewStatus, Summary, VerifierSettings
from billverify.pipeline import VerificationPipeline
from billverify.reporting.csv_export import CSV_HEADERS, export_entries_csv, iter_entries_csv
from billverify.reporting.excel_export import export_results_excel
from billverify.reporting.json_export import build_results_document, build_review_log
from billverify.reporting.pdf_export import _summary_box, generate_statement_pdf
from billverify.review import set_review_status, toggle_approval, toggle_write_off

EXPORTED_AT = datetime(2024, 2, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def result(sample_entries, settings):
    return VerificationPipeline(settings).run(sample_entries)


class TestCsvExport:
    def test_header(self, result):
        lines = export_entries_csv(result.entries).splitlines()
        assert lines[0] == ",".join(CSV_HEADERS)
        assert len(CSV_HEADERS) == 14
        assert len(lines) == 6

    def test_row_values(self, result):
        rows = parse_delimited(export_entries_csv(result.entries))
        row = dict(zip(rows[0], rows[5]))

        assert row["Date"] == "2024-01-06"
        assert row["Rounded Hours"] == "7.5"
        assert row["Adjusted Amount"] == "2250.0"
        assert row["UTBMS Code"] == "L100"
        assert row["Confidence"] == "low"
        assert row["Flags"].split("; ")[0] == "Entry exceeds 6h threshold"
        assert row["Approved"] == "No"

    def test_quoting(self, make_entry):
        text = export_entries_csv([make_entry(description='Call re "terms", settlement')])
        assert parse_delimited(text)[1][2] == 'Call re "terms", settlement'

    def test_streams_one_chunk_per_row(self, result):
        assert len(list(iter_entries_csv(result.entries))) == 6


class TestJsonExport:
    def test_results_document(self, result, settings):
        doc = build_results_document(result.entries, result.summary, settings, EXPORTED_AT)

        assert set(doc) == {"entries", "summary", "settings", "exportedAt"}
        assert doc["exportedAt"] == "2024-02-01T12:00:00+00:00"
        assert doc["entries"][1]["utbmsCode"] == "L330"
        assert doc["entries"][1]["splitSuggestion"]["entries"][0]["hours"] == 2.2
        assert doc["summary"]["lowConfidence"] == 2
        assert doc["settings"]["hourlyRate"] == 350
        json.dumps(doc)

    def test_review_log(self, result, settings):
        entries = toggle_approval(result.entries, "entry-0")
        entries = toggle_write_off(entries, "entry-4")
        entries = set_review_status(entries, "entry-1", ReviewStatus.CONFIRMED)

        log = build_review_log(entries, settings, EXPORTED_AT)

        assert log["summary"] == {"total": 5, "confirmed": 1, "writtenOff": 1, "approved": 1}
        assert log["reviewLog"][4]["writeOff"] is True
        assert log["reviewLog"][1]["reviewStatus"] == "confirmed"


class TestExcelExport:
    def test_sheets_and_flag_fill(self, result):
        wb = load_workbook(export_results_excel(result.entries, result.summary, result.daily))

        assert wb.sheetnames == ["Entries", "Daily", "Summary"]
        ws = wb["Entries"]
        assert [c.value for c in ws[1]] == CSV_HEADERS
        assert ws.max_row == 6
        # entry-0 is clean, entry-1 is flagged
        assert ws["A2"].fill.start_color.rgb != ws["A3"].fill.start_color.rgb
        assert wb["Daily"]["A2"].value == "2024-01-08"


class TestPdfExport:
    def test_statement(self, result):
        settings = VerifierSettings(
            client_name="Acme Corp",
            attorney_name="Jane Smith",
            firm_address="1 Main St\nSpringfield",
            start_date="2024-01-01",
            end_date="2024-01-31",
            retainer_balance=1000,
        )
        pdf = generate_statement_pdf(
            result.entries, result.summary, settings, statement_date=EXPORTED_AT.date()
        ).getvalue()

        assert pdf.startswith(b"%PDF")
        assert len(pdf) > 1000

    def test_empty_batch(self, settings):
        assert generate_statement_pdf([], Summary(), settings).getvalue().startswith(b"%PDF")

    def test_written_off_entry_left_out_of_total_due(self, result):
        entries = toggle_write_off(result.entries, "entry-4")
        summary = result.summary.model_copy(update={"written_off": 1})
        settings = VerifierSettings(retainer_balance=1000)

        cells = [cell for row in _summary_box(entries, summary, settings)._cellvalues for cell in row]

        assert "Total Due: $3,775.00" in cells
        assert "Written Off: $2,250.00" in cells
        assert "Balance Due: $2,775.00" in cells
        pdf = generate_statement_pdf(entries, summary, settings).getvalue()
        assert pdf.startswith(b"%PDF")

    def test_period_with_markup_characters(self, result):
        settings = VerifierSettings(start_date="<start>", end_date="2024-01-31 & after")

        pdf = generate_statement_pdf(result.entries, result.summary, settings).getvalue()

        assert pdf.startswith(b"%PDF")
