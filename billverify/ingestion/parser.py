"""Low-level parsers turning raw upload text into rows of strings.

Three input shapes are supported: delimited text (CSV/TSV with quoting),
JSON documents holding a list of entry objects, and loose plain text with
one entry per line.
"""

from __future__ import annotations

import json
import re
from enum import Enum
from io import StringIO
from pathlib import PurePath
from typing import Any

import pandas as pd

from billverify.exceptions import IngestionError

_JSON_CONTAINER_KEYS = ("entries", "data", "timeEntries")

# Tab, or a comma followed by an even number of quotes (i.e. outside quotes)
_PLAIN_SPLIT = re.compile(r'\t|,(?=(?:[^"]*"[^"]*")*[^"]*$)')


class InputFormat(str, Enum):
    DELIMITED = "delimited"
    JSON = "json"
    TEXT = "text"


def detect_format(filename: str | None, text: str) -> InputFormat:
    """Pick the parser for an upload from its file name, or its content."""
    if filename:
        suffix = PurePath(filename).suffix.lower()
        if suffix == ".json":
            return InputFormat.JSON
        if suffix in (".csv", ".tsv"):
            return InputFormat.DELIMITED
        return InputFormat.TEXT

    stripped = text.lstrip()
    if stripped.startswith(("[", "{")):
        return InputFormat.JSON
    return InputFormat.DELIMITED


def sniff_delimiter(text: str) -> str:
    """Return tab if the header line has a tab outside quotes, else comma."""
    in_quotes = False
    for ch in text:
        if ch == '"':
            in_quotes = not in_quotes
        elif not in_quotes:
            if ch == "\t":
                return "\t"
            if ch in "\r\n":
                break
    return ","


def parse_delimited(text: str, delimiter: str = ",") -> list[list[str]]:
    """Parse CSV/TSV text into rows of trimmed fields.

    Handles quoted fields containing delimiters and newlines, ``""`` escapes
    inside quotes, and ``\\n``, ``\\r\\n`` or bare ``\\r`` line endings. Rows
    whose fields are all empty are dropped. Every row is as wide as the
    header row: short rows are padded with empty fields and extra trailing
    fields are discarded.

    Raises:
        IngestionError: If pandas cannot tokenise the text
    """
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    options: dict[str, Any] = {
        "sep": delimiter,
        "header": None,
        "dtype": str,
        "keep_default_na": False,
        "skip_blank_lines": True,
        "skipinitialspace": True,
        "engine": "python",
    }

    try:
        width = pd.read_csv(StringIO(text), nrows=1, **options).shape[1]
        df = pd.read_csv(StringIO(text), on_bad_lines=lambda fields: fields[:width], **options)
    except pd.errors.EmptyDataError:
        return []
    except pd.errors.ParserError as e:
        raise IngestionError(f"Could not parse delimited text: {e}") from e

    rows = [[str(cell).strip() for cell in row] for row in df.fillna("").values.tolist()]
    return [row for row in rows if any(cell != "" for cell in row)]


def parse_json_records(text: str) -> list[dict[str, Any]]:
    """Extract the list of entry objects from a JSON upload.

    Accepts a top-level array, or an object carrying the array under
    ``entries``, ``data`` or ``timeEntries`` (checked in that order).

    Raises:
        IngestionError: If the text is not JSON or has no entry array
    """
    try:
        document = json.loads(text)
    except json.JSONDecodeError as e:
        raise IngestionError(f"Invalid JSON: {e.msg} (line {e.lineno})") from e

    if isinstance(document, dict):
        for key in _JSON_CONTAINER_KEYS:
            if isinstance(document.get(key), list):
                document = document[key]
                break
        else:
            raise IngestionError(
                "JSON object has no 'entries', 'data' or 'timeEntries' array"
            )

    if not isinstance(document, list):
        raise IngestionError("JSON upload must be an array of time entries")

    return [item for item in document if isinstance(item, dict)]


def split_plain_line(line: str) -> list[str]:
    """Split one plain-text line on tabs or on commas outside quotes."""
    return [_unquote(part.strip()) for part in _PLAIN_SPLIT.split(line)]


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == '"' and value[-1] == '"':
        return value[1:-1].replace('""', '"').strip()
    return value
