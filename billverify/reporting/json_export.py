"""JSON exports: full results document and the review log."""

from __future__ import annotations

import json
from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Any

from billverify.models import ReviewStatus, Summary, TimeEntry, VerifierSettings


def build_results_document(
    entries: Sequence[TimeEntry],
    summary: Summary,
    settings: VerifierSettings,
    exported_at: datetime | None = None,
) -> dict[str, Any]:
    """``{entries, summary, settings, exportedAt}`` with camelCase keys."""
    return {
        "entries": [e.model_dump(mode="json", by_alias=True) for e in entries],
        "summary": summary.model_dump(mode="json", by_alias=True),
        "settings": settings.model_dump(mode="json", by_alias=True),
        "exportedAt": _timestamp(exported_at),
    }


def build_review_log(
    entries: Sequence[TimeEntry],
    settings: VerifierSettings,
    exported_at: datetime | None = None,
) -> dict[str, Any]:
    """Audit trail of review decisions per entry plus review counts."""
    return {
        "exportedAt": _timestamp(exported_at),
        "settings": settings.model_dump(mode="json", by_alias=True),
        "reviewLog": [
            {
                "id": e.id,
                "date": e.date,
                "hours": e.hours,
                "reviewStatus": e.review_status.value,
                "approved": e.approved,
                "writeOff": e.write_off,
                "notes": e.notes,
                "narrative": e.narrative or "",
            }
            for e in entries
        ],
        "summary": {
            "total": len(entries),
            "confirmed": sum(1 for e in entries if e.review_status == ReviewStatus.CONFIRMED),
            "writtenOff": sum(1 for e in entries if e.write_off),
            "approved": sum(1 for e in entries if e.approved),
        },
    }


def export_results_json(
    entries: Sequence[TimeEntry],
    summary: Summary,
    settings: VerifierSettings,
    exported_at: datetime | None = None,
) -> str:
    return json.dumps(build_results_document(entries, summary, settings, exported_at), indent=2)


def export_review_log_json(
    entries: Sequence[TimeEntry],
    settings: VerifierSettings,
    exported_at: datetime | None = None,
) -> str:
    return json.dumps(build_review_log(entries, settings, exported_at), indent=2)


def _timestamp(value: datetime | None) -> str:
    return (value or datetime.now(timezone.utc)).isoformat()
