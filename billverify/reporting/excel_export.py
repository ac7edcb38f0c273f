"""Excel workbook export of a verification run.

Sheets: Entries (CSV schema), Daily (per-date breakdown), Summary.
"""

from __future__ import annotations

from collections.abc import Sequence
from io import BytesIO

import pandas as pd
from openpyxl.styles import Font, PatternFill
from openpyxl.utils import get_column_letter

from billverify.models import DailySummary, Summary, TimeEntry
from billverify.reporting.csv_export import CSV_HEADERS, entry_to_row

_HEADER_FONT = Font(bold=True, color="FFFFFF")
_HEADER_FILL = PatternFill(start_color="2D3748", end_color="2D3748", fill_type="solid")
_FLAGGED_FILL = PatternFill(start_color="FEF3C7", end_color="FEF3C7", fill_type="solid")


def export_results_excel(
    entries: Sequence[TimeEntry],
    summary: Summary,
    daily: Sequence[DailySummary],
) -> BytesIO:
    """Generate an Excel workbook for a processed batch."""
    entries_df = pd.DataFrame([entry_to_row(e) for e in entries], columns=CSV_HEADERS)
    daily_df = pd.DataFrame(
        [
            {
                "Date": d.date,
                "Entries": d.entries,
                "Hours": round(d.hours, 2),
                "Amount": round(d.amount, 2),
                "Flags": d.flag_count,
                "Over Threshold": "Yes" if d.over_threshold else "No",
            }
            for d in daily
        ],
        columns=["Date", "Entries", "Hours", "Amount", "Flags", "Over Threshold"],
    )
    summary_df = pd.DataFrame(
        [
            ("Total Entries", summary.total),
            ("Total Hours", round(summary.total_hours, 2)),
            ("Adjusted Hours", round(summary.adjusted_hours, 2)),
            ("Total Amount", round(summary.total_amount, 2)),
            ("Flagged Entries", summary.flagged),
            ("Entries With Quality Issues", summary.quality_issues),
            ("High Confidence", summary.high_confidence),
            ("Medium Confidence", summary.medium_confidence),
            ("Low Confidence", summary.low_confidence),
            ("UTBMS Coverage", summary.utbms_coverage),
            ("Approved", summary.approved),
            ("Written Off", summary.written_off),
            ("Rounding Delta (h)", round(summary.rounding_delta, 2)),
        ],
        columns=["Metric", "Value"],
    )

    output = BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        entries_df.to_excel(writer, sheet_name="Entries", index=False)
        daily_df.to_excel(writer, sheet_name="Daily", index=False)
        summary_df.to_excel(writer, sheet_name="Summary", index=False)

        for ws in writer.book.worksheets:
            _style_header(ws)

        entries_ws = writer.sheets["Entries"]
        for row_idx, entry in enumerate(entries, start=2):
            if entry.flags:
                for cell in entries_ws[row_idx]:
                    cell.fill = _FLAGGED_FILL

    output.seek(0)
    return output


def _style_header(ws) -> None:
    for cell in ws[1]:
        cell.font = _HEADER_FONT
        cell.fill = _HEADER_FILL

    for col_idx, column in enumerate(ws.iter_cols(min_row=1, max_row=ws.max_row), start=1):
        width = max((len(str(c.value)) for c in column if c.value is not None), default=8)
        ws.column_dimensions[get_column_letter(col_idx)].width = min(width + 2, 60)
