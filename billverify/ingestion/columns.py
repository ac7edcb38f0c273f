"""Column-role detection for uploaded time entry tables.

Maps arbitrary header strings (``Entry Date``, ``Timekeeper``,
``Billed Amount``...) onto the canonical fields BillVerify understands.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from typing import Any

CANONICAL_FIELDS = ("date", "attorney", "description", "hours", "rate", "amount", "code")

# Ordered per field; the first pattern that matches any header wins.
COLUMN_PATTERNS: dict[str, tuple[re.Pattern[str], ...]] = {
    "date": tuple(
        re.compile(p) for p in (r"^date$", r"^entrydate$", r"^servicedate$", r"^workdate$")
    ),
    "attorney": tuple(
        re.compile(p)
        for p in (r"^attorney$", r"^timekeeper$", r"^lawyer$", r"^billedby$", r"^name$")
    ),
    "description": tuple(
        re.compile(p)
        for p in (r"^description$", r"^narrative$", r"^activity$", r"^details$", r"^memo$")
    ),
    "hours": tuple(
        re.compile(p)
        for p in (r"^hours$", r"^quantity$", r"^time$", r"^duration$", r"^units$")
    ),
    "rate": tuple(re.compile(p) for p in (r"^rate$", r"^hourlyrate$", r"^billingrate$")),
    "amount": tuple(
        re.compile(p) for p in (r"^amount$", r"^total$", r"^fee$", r"^billedamount$")
    ),
    "code": tuple(
        re.compile(p) for p in (r"^code$", r"^utbms$", r"^taskcode$", r"^activitycode$")
    ),
}

# Best-effort positions used when a header is not recognised
DEFAULT_POSITIONS: dict[str, int] = {
    "date": 0,
    "attorney": 1,
    "description": 2,
    "hours": 3,
}

# Key synonyms for JSON uploads, checked in order
JSON_FIELD_SYNONYMS: dict[str, tuple[str, ...]] = {
    "date": ("date", "Date", "entry_date", "entryDate", "serviceDate", "workDate"),
    "attorney": ("attorney", "Attorney", "timekeeper", "Timekeeper", "billedBy", "lawyer"),
    "description": (
        "description",
        "Description",
        "narrative",
        "Narrative",
        "activity",
        "details",
    ),
    "hours": ("hours", "Hours", "quantity", "Quantity", "duration"),
    "rate": ("rate", "Rate", "hourlyRate"),
    "amount": ("amount", "Amount", "total", "Total"),
    "code": ("code", "utbms", "utbmsCode", "taskCode"),
}

_NON_ALNUM = re.compile(r"[^a-z0-9]")


def normalize_header(header: str) -> str:
    """Lower-case and strip everything but letters and digits."""
    return _NON_ALNUM.sub("", header.lower())


def detect_columns(headers: Sequence[str]) -> dict[str, int]:
    """Map canonical field names to column indexes.

    Fields with no matching header are absent from the result; callers
    fall back to ``DEFAULT_POSITIONS``.

    Example:
        >>> detect_columns(["Entry Date", "Timekeeper", "Narrative", "Hours"])
        {'date': 0, 'attorney': 1, 'description': 2, 'hours': 3}
    """
    normalized = [normalize_header(h) for h in headers]
    mapping: dict[str, int] = {}

    for field_name in CANONICAL_FIELDS:
        for pattern in COLUMN_PATTERNS[field_name]:
            idx = next((i for i, h in enumerate(normalized) if pattern.match(h)), None)
            if idx is not None:
                mapping[field_name] = idx
                break

    return mapping


def resolve_column(mapping: Mapping[str, int], field_name: str) -> int | None:
    """Detected index for a field, else its positional default (or None)."""
    if field_name in mapping:
        return mapping[field_name]
    return DEFAULT_POSITIONS.get(field_name)


def resolve_json_field(record: Mapping[str, Any], field_name: str) -> Any:
    """First non-empty value among the JSON synonyms for ``field_name``."""
    for key in JSON_FIELD_SYNONYMS[field_name]:
        value = record.get(key)
        if value not in (None, ""):
            return value
    return None
