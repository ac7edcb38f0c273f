"""Anomaly flag evaluation for BillVerify.

Produces Flag models with severity + message for one time entry at a time.
Day totals and duplicate detection depend on the entries seen earlier in
the same batch, which is tracked in a ``PipelineState`` owned by the
caller and created fresh for every pipeline run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from billverify.models import Flag, FlagSeverity, FlagType, TimeEntry, VerifierSettings
from billverify.quality.checker import is_vague, word_count

# Fixed tolerance; not configurable
EXCESSIVE_ROUNDING_TOLERANCE = Decimal("0.15")

BLOCK_BILLING_MAX_WORDS = 4
BLOCK_BILLING_MIN_HOURS = 2.0
DUPLICATE_PREFIX_CHARS = 50

_DATE_FORMATS = (
    "%Y-%m-%d",
    "%m/%d/%Y",
    "%m/%d/%y",
    "%Y/%m/%d",
    "%m-%d-%Y",
    "%b %d, %Y",
    "%B %d, %Y",
    "%d %b %Y",
    "%d %B %Y",
)


@dataclass
class PipelineState:
    """Accumulators for one pipeline run.

    Attributes:
        day_totals: Running hours per (date, attorney); never reset in a run
        seen_entries: Duplicate hash -> id of the first entry that produced it
    """

    day_totals: dict[tuple[str, str], Decimal] = field(default_factory=dict)
    seen_entries: dict[str, str] = field(default_factory=dict)


def compute_flags(
    entry: TimeEntry,
    settings: VerifierSettings,
    state: PipelineState,
    rounded_hours: float,
) -> list[Flag]:
    """Evaluate anomaly flags for one entry.

    Updates ``state`` with this entry's hours and duplicate hash. Never
    raises for malformed entry data; checks that cannot be evaluated (e.g.
    weekend detection on an unparseable date) are skipped.

    Args:
        entry: Entry being checked, in batch order
        settings: Thresholds and check toggles
        state: Accumulators shared by all entries of the current run
        rounded_hours: Hours after billing-increment rounding

    Returns:
        List of Flag models (empty list if no issues detected)
    """
    flags: list[Flag] = []

    def flag(flag_type: FlagType, severity: FlagSeverity, message: str) -> None:
        flags.append(Flag(type=flag_type, severity=severity, message=message))

    if entry.hours > settings.long_threshold:
        flag(
            FlagType.LONG_ENTRY,
            FlagSeverity.WARNING,
            f"Entry exceeds {settings.long_threshold:g}h threshold",
        )

    day_key = (entry.date, entry.attorney)
    day_total = state.day_totals.get(day_key, Decimal(0)) + Decimal(str(entry.hours))
    state.day_totals[day_key] = day_total
    if day_total > Decimal(str(settings.day_threshold)):
        flag(
            FlagType.DAY_TOTAL,
            FlagSeverity.WARNING,
            f"Day total ({day_total:.1f}h) exceeds {settings.day_threshold:g}h",
        )

    if settings.minimum_entry > 0 and entry.hours < settings.minimum_entry:
        flag(
            FlagType.MINIMUM_ENTRY,
            FlagSeverity.INFO,
            f"Below minimum entry threshold of {settings.minimum_entry:g}h",
        )

    rounding_delta = abs(Decimal(str(rounded_hours)) - Decimal(str(entry.hours)))
    if rounding_delta > EXCESSIVE_ROUNDING_TOLERANCE:
        flag(
            FlagType.EXCESSIVE_ROUNDING,
            FlagSeverity.WARNING,
            f"Rounding changes hours by {rounding_delta:.2f}h",
        )

    if settings.check_block_billing and _looks_block_billed(entry):
        flag(
            FlagType.BLOCK_BILLING,
            FlagSeverity.WARNING,
            "Short description for substantial time - possible block billing",
        )

    if settings.check_duplicates:
        key = duplicate_key(entry)
        first_id = state.seen_entries.get(key)
        if first_id is not None:
            flag(
                FlagType.DUPLICATE,
                FlagSeverity.ERROR,
                f"Possible duplicate entry detected (matches {first_id})",
            )
        else:
            state.seen_entries[key] = entry.id

    if settings.check_weekend_holiday and entry.date:
        entry_date = parse_entry_date(entry.date)
        if entry_date is not None and entry_date.weekday() >= 5:
            day_name = "Saturday" if entry_date.weekday() == 5 else "Sunday"
            flag(FlagType.WEEKEND, FlagSeverity.INFO, f"Entry on {day_name}")

    if is_vague(entry.description):
        flag(
            FlagType.VAGUE,
            FlagSeverity.WARNING,
            "Description may be too vague for billing review",
        )

    return flags


def duplicate_key(entry: TimeEntry) -> str:
    """Hash key for duplicate detection: date, attorney and narrative prefix."""
    prefix = entry.description.lower()[:DUPLICATE_PREFIX_CHARS]
    return f"{entry.date}|{entry.attorney.lower()}|{prefix}"


def parse_entry_date(value: str) -> Optional[date]:
    """Parse a loosely formatted entry date, returning None if unrecognised."""
    text = value.strip()
    if not text:
        return None

    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        pass

    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue

    return None


def _looks_block_billed(entry: TimeEntry) -> bool:
    return (
        word_count(entry.description) < BLOCK_BILLING_MAX_WORDS
        and entry.hours >= BLOCK_BILLING_MIN_HOURS
    )
