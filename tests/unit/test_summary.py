"""Unit tests for batch and daily roll-ups."""

from __future__ import annotations

import pytest

from billverify.models import VerifierSettings
from billverify.pipeline import run_pipeline
from billverify.reporting.summary import (
    compute_daily_summary,
    compute_summary,
    statement_totals,
    write_off_totals,
)
from billverify.review import toggle_approval, toggle_write_off


@pytest.fixture
def processed(sample_entries, settings):
    return run_pipeline(sample_entries, settings)


class TestComputeSummary:
    def test_counts(self, processed):
        summary = compute_summary(processed)

        assert summary.total == 5
        assert summary.total_hours == pytest.approx(20.25)
        assert summary.adjusted_hours == pytest.approx(20.3)
        assert summary.rounding_delta == pytest.approx(0.05)
        assert summary.flagged == 3
        assert summary.high_confidence == 2
        assert summary.medium_confidence == 1
        assert summary.low_confidence == 2
        assert summary.utbms_coverage == 5
        assert summary.total_amount == pytest.approx(750 + 1950 + 750 + 325 + 2250)

    def test_review_counts(self, processed):
        entries = toggle_write_off(toggle_approval(processed, "entry-0"), "entry-2")
        summary = compute_summary(entries)

        assert summary.approved == 1
        assert summary.written_off == 1

    def test_raw_entries(self, sample_entries):
        summary = compute_summary(sample_entries)
        assert summary.adjusted_hours == summary.total_hours
        assert summary.rounding_delta == 0


class TestDailySummary:
    def test_busiest_day_first(self, processed, settings):
        daily = compute_daily_summary(processed, settings)

        assert [d.date for d in daily] == ["2024-01-08", "2024-01-06", "2024-01-09"]
        assert daily[0].entries == 3
        assert daily[0].hours == pytest.approx(11.5)
        assert daily[0].over_threshold
        assert not daily[1].over_threshold

    def test_threshold_from_settings(self, processed):
        daily = compute_daily_summary(processed, VerifierSettings(day_threshold=12))
        assert not any(d.over_threshold for d in daily)


class TestWriteOffTotals:
    def test_split_amounts(self, processed):
        entries = toggle_write_off(processed, "entry-4")
        written_off, billable = write_off_totals(entries)

        assert written_off == pytest.approx(2250)
        assert billable == pytest.approx(750 + 1950 + 750 + 325)


class TestStatementTotals:
    def test_written_off_entry_excluded_from_total_due(self, processed, settings):
        entries = toggle_write_off(processed, "entry-4")
        total_due, applied, balance_due = statement_totals(entries, settings)

        assert total_due == pytest.approx(750 + 1950 + 750 + 325)
        assert applied == 0
        assert balance_due == pytest.approx(total_due)

    def test_retainer_applied_to_billable_amount(self, processed):
        entries = toggle_write_off(processed, "entry-4")
        settings = VerifierSettings(retainer_balance=1000)

        total_due, applied, balance_due = statement_totals(entries, settings)

        assert applied == 1000
        assert balance_due == pytest.approx(total_due - 1000)

    def test_retainer_capped_at_total_due(self, processed):
        entries = toggle_write_off(processed, "entry-1")
        total_due, applied, balance_due = statement_totals(
            entries, VerifierSettings(retainer_balance=100_000)
        )

        assert applied == pytest.approx(total_due)
        assert balance_due == 0
