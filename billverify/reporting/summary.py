"""Roll-up summaries over a processed entry batch.

All functions are pure reductions recomputed from the current entry state;
nothing is cached between calls.
"""

from __future__ import annotations

from collections.abc import Sequence

from billverify.models import Confidence, DailySummary, Summary, TimeEntry, VerifierSettings


def compute_daily_summary(
    entries: Sequence[TimeEntry], settings: VerifierSettings
) -> list[DailySummary]:
    """Group entries by date, busiest day first.

    Hours and amounts use the post-rounding values when the pipeline has
    populated them.
    """
    by_date: dict[str, DailySummary] = {}

    for entry in entries:
        day = by_date.setdefault(entry.date, DailySummary(date=entry.date))
        day.entries += 1
        day.hours += entry.billable_hours
        day.amount += entry.billable_amount
        day.flag_count += len(entry.flags)

    days = list(by_date.values())
    for day in days:
        day.over_threshold = day.hours > settings.day_threshold

    return sorted(days, key=lambda d: d.hours, reverse=True)


def compute_summary(entries: Sequence[TimeEntry]) -> Summary:
    """Batch totals, confidence distribution and UTBMS coverage."""
    total_hours = sum(e.hours for e in entries)
    adjusted_hours = sum(e.billable_hours for e in entries)

    return Summary(
        total=len(entries),
        total_hours=total_hours,
        total_amount=sum(e.billable_amount for e in entries),
        adjusted_hours=adjusted_hours,
        flagged=sum(1 for e in entries if e.flags),
        quality_issues=sum(1 for e in entries if e.quality_issues),
        high_confidence=sum(1 for e in entries if e.confidence == Confidence.HIGH),
        medium_confidence=sum(1 for e in entries if e.confidence == Confidence.MEDIUM),
        low_confidence=sum(1 for e in entries if e.confidence == Confidence.LOW),
        approved=sum(1 for e in entries if e.approved),
        written_off=sum(1 for e in entries if e.write_off),
        utbms_coverage=sum(1 for e in entries if e.utbms_code),
        rounding_delta=abs(adjusted_hours - total_hours),
    )


def write_off_totals(entries: Sequence[TimeEntry]) -> tuple[float, float]:
    """Return ``(written_off_amount, billable_amount)`` for the batch."""
    written_off = sum(e.billable_amount for e in entries if e.write_off)
    billable = sum(e.billable_amount for e in entries if not e.write_off)
    return written_off, billable


def statement_totals(
    entries: Sequence[TimeEntry], settings: VerifierSettings
) -> tuple[float, float, float]:
    """Return ``(total_due, retainer_applied, balance_due)`` for a statement.

    Written-off entries are excluded from the total due. The retainer is
    applied up to that total.
    """
    _, total_due = write_off_totals(entries)
    applied = min(max(settings.retainer_balance, 0.0), total_due)
    return total_due, applied, total_due - applied
