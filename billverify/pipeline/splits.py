"""Split suggestions for entries that bundle several tasks."""

from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal

from billverify.models import SplitPart, SplitSuggestion, TimeEntry

SPLIT_REASON = "Entry contains multiple distinct tasks that may be better tracked separately"

MIN_SPLIT_HOURS = 1.0
MIN_SEGMENT_CHARS = 10  # segments must be longer than this

_CONNECTORS = re.compile(
    r"\b(?:and|also|additionally|then|followed by|as well as)\b|;",
    re.IGNORECASE,
)


def split_segments(description: str) -> list[str]:
    """Task segments of a description, split on connector words and ``;``."""
    parts = (part.strip(" \t,.") for part in _CONNECTORS.split(description))
    return [part for part in parts if len(part) > MIN_SEGMENT_CHARS]


def suggest_split(entry: TimeEntry) -> SplitSuggestion | None:
    """Propose dividing an entry evenly across its task segments.

    Only entries of at least one hour with two or more substantial segments
    qualify. Each part gets ``hours / segments`` rounded to one decimal.
    """
    if entry.hours < MIN_SPLIT_HOURS:
        return None

    segments = split_segments(entry.description)
    if len(segments) < 2:
        return None

    per_part = (Decimal(str(entry.hours)) / len(segments)).quantize(
        Decimal("0.1"), rounding=ROUND_HALF_UP
    )
    return SplitSuggestion(
        entries=[SplitPart(description=s, hours=float(per_part)) for s in segments],
        reason=SPLIT_REASON,
    )
