"""CSV export of processed time entries.

Fixed 14-column schema; flags and quality issues are flattened to their
messages joined by ``"; "``.
"""

from __future__ import annotations

import csv
from collections.abc import Iterable, Iterator
from io import StringIO

from billverify.models import TimeEntry

CSV_HEADERS = [
    "Date",
    "Attorney",
    "Description",
    "Hours",
    "Rounded Hours",
    "Rate",
    "Amount",
    "Adjusted Amount",
    "UTBMS Code",
    "Phase",
    "Confidence",
    "Flags",
    "Quality Issues",
    "Approved",
]


def entry_to_row(entry: TimeEntry) -> list:
    """Flatten one entry to the CSV column order."""
    return [
        entry.date,
        entry.attorney,
        entry.description,
        entry.hours,
        entry.rounded_hours if entry.rounded_hours is not None else entry.hours,
        entry.rate,
        entry.amount,
        entry.billable_amount,
        entry.utbms_code or "",
        entry.utbms_phase or "",
        entry.confidence.value,
        "; ".join(f.message for f in entry.flags),
        "; ".join(q.message for q in entry.quality_issues),
        "Yes" if entry.approved else "No",
    ]


def iter_entries_csv(entries: Iterable[TimeEntry]) -> Iterator[str]:
    """Generate CSV text chunk by chunk (header first, then one row each).

    Yields:
        CSV rows as strings
    """
    output = StringIO()
    writer = csv.writer(output, lineterminator="\n")

    writer.writerow(CSV_HEADERS)
    yield output.getvalue()
    output.seek(0)
    output.truncate(0)

    for entry in entries:
        writer.writerow(entry_to_row(entry))
        yield output.getvalue()
        output.seek(0)
        output.truncate(0)


def export_entries_csv(entries: Iterable[TimeEntry]) -> str:
    return "".join(iter_entries_csv(entries))
