"""Reporting module for BillVerify.

Rounding, roll-up summaries and exports (CSV, JSON, Excel, PDF).
"""

from billverify.reporting.csv_export import export_entries_csv
from billverify.reporting.excel_export import export_results_excel
from billverify.reporting.json_export import export_results_json, export_review_log_json
from billverify.reporting.pdf_export import generate_statement_pdf
from billverify.reporting.rounding import round_hours
from billverify.reporting.summary import (
    compute_daily_summary,
    compute_summary,
    statement_totals,
    write_off_totals,
)

__all__ = [
    "compute_daily_summary",
    "compute_summary",
    "export_entries_csv",
    "export_results_excel",
    "export_results_json",
    "export_review_log_json",
    "generate_statement_pdf",
    "round_hours",
    "statement_totals",
    "write_off_totals",
]
