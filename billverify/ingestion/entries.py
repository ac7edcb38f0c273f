"""Time entry ingestion for BillVerify.

Turns an uploaded file (CSV/TSV, JSON or plain text) into validated
``TimeEntry`` records. This is the only layer that raises on bad input;
failures surface as a single ``IngestionError`` and no partial batch.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from billverify.config import IngestionConfig, get_config
from billverify.exceptions import IngestionError
from billverify.ingestion.columns import detect_columns, resolve_column, resolve_json_field
from billverify.ingestion.parser import (
    InputFormat,
    detect_format,
    parse_delimited,
    parse_json_records,
    sniff_delimiter,
    split_plain_line,
)
from billverify.models import TimeEntry, VerifierSettings

logger = logging.getLogger(__name__)

# Leading number, ignoring currency symbols and thousands separators
_NUMBER = re.compile(r"^[-+]?(?:\d+\.?\d*|\.\d+)")

# Column order assumed for plain-text lines
_PLAIN_FIELDS = ("date", "attorney", "description", "hours", "rate", "amount")


def ingest_file(
    file_path: Path,
    settings: VerifierSettings,
    limits: IngestionConfig | None = None,
) -> list[TimeEntry]:
    """Read an upload from disk and build its time entries.

    The parser is chosen from the file suffix: ``.json``, ``.csv``/``.tsv``,
    anything else is treated as plain text.

    Raises:
        FileNotFoundError: If the file doesn't exist
        IngestionError: If the file is too large, cannot be decoded as UTF-8
            or holds no valid entries
    """
    if not file_path.exists():
        raise FileNotFoundError(f"Time entry file not found: {file_path}")

    limits = limits or get_config().ingestion
    file_size_mb = file_path.stat().st_size / (1024 * 1024)
    if file_size_mb > limits.max_file_size_mb:
        raise IngestionError(
            f"File too large ({file_size_mb:.1f}MB). Maximum allowed: {limits.max_file_size_mb}MB"
        )

    try:
        text = file_path.read_text(encoding="utf-8-sig")
    except UnicodeDecodeError as e:
        raise IngestionError(f"{file_path.name} is not valid UTF-8 (byte {e.start})") from e
    except OSError as e:
        raise IngestionError(f"Could not read {file_path.name}: {e.strerror or e}") from e
    entries = ingest_text(text, settings, filename=file_path.name, max_rows=limits.max_rows)
    logger.info(f"Ingested {len(entries)} entries from {file_path.name}")
    return entries


def ingest_text(
    text: str,
    settings: VerifierSettings,
    filename: str | None = None,
    input_format: InputFormat | None = None,
    max_rows: int | None = None,
) -> list[TimeEntry]:
    """Parse upload text into time entries.

    Entries with no description or non-positive hours are dropped; a missing
    rate falls back to ``settings.hourly_rate`` and a missing amount is
    derived as ``hours * rate``.

    Args:
        text: Complete file content
        settings: Verifier settings (supplies the default rate)
        filename: Original file name, used to pick the parser
        input_format: Explicit parser choice, overrides ``filename``
        max_rows: Optional cap on the number of data rows

    Returns:
        Entries in upload order with ids ``entry-<row index>``

    Raises:
        IngestionError: Empty input, fewer than two CSV rows, malformed JSON,
            too many rows, or no valid entries after filtering
    """
    if not text or not text.strip():
        raise IngestionError("File is empty")

    fmt = input_format or detect_format(filename, text)

    if fmt is InputFormat.JSON:
        raw_rows = [_from_json(record) for record in parse_json_records(text)]
    elif fmt is InputFormat.DELIMITED:
        rows = parse_delimited(text, sniff_delimiter(text))
        if len(rows) < 2:
            raise IngestionError("CSV file appears empty (need a header and at least one row)")
        raw_rows = _from_table(rows[0], rows[1:])
    else:
        raw_rows = [_from_plain_line(line) for line in text.splitlines() if line.strip()]

    if max_rows is not None and len(raw_rows) > max_rows:
        raise IngestionError(f"Too many rows ({len(raw_rows):,}). Maximum allowed: {max_rows:,}")

    entries = [
        entry
        for idx, raw in enumerate(raw_rows)
        if (entry := build_entry(idx, raw, settings)) is not None
    ]

    if not entries:
        raise IngestionError("No valid time entries found in file")

    skipped = len(raw_rows) - len(entries)
    if skipped:
        logger.info(f"Skipped {skipped} rows without description or positive hours")

    return entries


def build_entry(
    index: int, raw: Mapping[str, Any], settings: VerifierSettings
) -> TimeEntry | None:
    """Build one entry from a canonical-field row, or None if it is invalid."""
    description = _to_str(raw.get("description"))
    hours = _to_float(raw.get("hours"), 0.0)
    if not description or hours <= 0:
        return None

    rate = _to_float(raw.get("rate"), 0.0) or settings.hourly_rate
    amount = _to_float(raw.get("amount"), 0.0) or hours * rate

    return TimeEntry(
        id=f"entry-{index}",
        date=_to_str(raw.get("date")),
        attorney=_to_str(raw.get("attorney")),
        description=description,
        hours=hours,
        rate=rate,
        amount=amount,
        source_code=_to_str(raw.get("code")) or None,
    )


def _from_table(header: Sequence[str], rows: Sequence[Sequence[str]]) -> list[dict[str, str]]:
    columns = detect_columns(header)
    field_index = {
        name: resolve_column(columns, name)
        for name in ("date", "attorney", "description", "hours", "rate", "amount", "code")
    }

    result = []
    for row in rows:
        result.append(
            {
                name: row[idx] if idx is not None and idx < len(row) else ""
                for name, idx in field_index.items()
            }
        )
    return result


def _from_json(record: Mapping[str, Any]) -> dict[str, Any]:
    return {
        name: resolve_json_field(record, name)
        for name in ("date", "attorney", "description", "hours", "rate", "amount", "code")
    }


def _from_plain_line(line: str) -> dict[str, str]:
    parts = split_plain_line(line)
    raw = {name: parts[i] if i < len(parts) else "" for i, name in enumerate(_PLAIN_FIELDS)}
    if not raw["description"]:
        # Short line: the whole line is the narrative
        raw["description"] = line.strip()
    return raw


def _to_str(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _to_float(value: Any, default: float) -> float:
    """Lenient numeric parse: ``"$1,200.50"`` -> 1200.5, ``"2.5h"`` -> 2.5.

    NaN and infinities count as missing.
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return default
        return number if math.isfinite(number) else default

    text = str(value).strip().replace("$", "").replace(",", "")
    match = _NUMBER.match(text)
    if not match:
        return default
    try:
        number = float(match.group(0))
    except ValueError:
        return default
    return number if math.isfinite(number) else default
