"""Time entry ingestion for BillVerify.

Handles CSV/TSV, JSON and plain-text uploads.
"""

from billverify.ingestion.columns import detect_columns
from billverify.ingestion.entries import ingest_file, ingest_text
from billverify.ingestion.parser import parse_delimited, parse_json_records

__all__ = [
    "detect_columns",
    "ingest_file",
    "ingest_text",
    "parse_delimited",
    "parse_json_records",
]
