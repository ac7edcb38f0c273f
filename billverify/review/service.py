"""Review business operations on processed entries.

Every action returns a new entry list and leaves its input untouched. The
pipeline is not re-run automatically; callers re-run explicitly when they
want fresh flags after an edit.
"""

from __future__ import annotations

from collections.abc import Sequence

from billverify.exceptions import EntryNotFoundError
from billverify.models import Confidence, ReviewStatus, TimeEntry

_CONFIDENCE_RANK = {Confidence.HIGH: 0, Confidence.MEDIUM: 1, Confidence.LOW: 2}


def toggle_approval(entries: Sequence[TimeEntry], entry_id: str) -> list[TimeEntry]:
    return _replace(entries, entry_id, lambda e: {"approved": not e.approved})


def toggle_write_off(entries: Sequence[TimeEntry], entry_id: str) -> list[TimeEntry]:
    return _replace(entries, entry_id, lambda e: {"write_off": not e.write_off})


def set_review_status(
    entries: Sequence[TimeEntry], entry_id: str, status: ReviewStatus
) -> list[TimeEntry]:
    return _replace(entries, entry_id, lambda e: {"review_status": status})


def update_entry(
    entries: Sequence[TimeEntry],
    entry_id: str,
    *,
    description: str | None = None,
    hours: float | None = None,
    rate: float | None = None,
    notes: str | None = None,
) -> list[TimeEntry]:
    """Edit an entry's raw fields and mark it ``edited``.

    Amount is recomputed as ``hours * rate`` whenever hours or rate change.

    Raises:
        EntryNotFoundError: If ``entry_id`` is not in the batch
        ValueError: If the edit leaves an empty description or hours <= 0
    """
    if description is not None and not description.strip():
        raise ValueError("description must not be empty")
    if hours is not None and hours <= 0:
        raise ValueError("hours must be positive")

    def changes(entry: TimeEntry) -> dict:
        update: dict = {"review_status": ReviewStatus.EDITED}
        if description is not None:
            update["description"] = description.strip()
        if notes is not None:
            update["notes"] = notes
        if hours is not None or rate is not None:
            new_hours = hours if hours is not None else entry.hours
            new_rate = rate if rate is not None else entry.rate
            update.update(hours=new_hours, rate=new_rate, amount=new_hours * new_rate)
        return update

    return _replace(entries, entry_id, changes)


def approve_all(
    entries: Sequence[TimeEntry], min_confidence: Confidence = Confidence.HIGH
) -> list[TimeEntry]:
    """Approve every entry at or above ``min_confidence`` that is not written off."""
    threshold = _CONFIDENCE_RANK[min_confidence]
    return [
        e.model_copy(update={"approved": True})
        if not e.write_off and _CONFIDENCE_RANK[e.confidence] <= threshold
        else e
        for e in entries
    ]


def apply_split(entries: Sequence[TimeEntry], entry_id: str) -> list[TimeEntry]:
    """Replace an entry by the parts of its split suggestion.

    Parts get ids ``<id>-1``, ``<id>-2``... and amounts at the entry's rate.
    Pipeline annotations are cleared on the new parts; re-run the pipeline
    to evaluate them.

    Raises:
        EntryNotFoundError: If ``entry_id`` is not in the batch
        ValueError: If the entry has no split suggestion
    """
    result: list[TimeEntry] = []
    found = False

    for entry in entries:
        if entry.id != entry_id:
            result.append(entry)
            continue

        found = True
        if entry.split_suggestion is None:
            raise ValueError(f"Entry {entry_id} has no split suggestion")

        for n, part in enumerate(entry.split_suggestion.entries, start=1):
            result.append(
                TimeEntry(
                    id=f"{entry.id}-{n}",
                    date=entry.date,
                    attorney=entry.attorney,
                    description=part.description,
                    hours=part.hours,
                    rate=entry.rate,
                    amount=part.hours * entry.rate,
                    source_code=entry.source_code,
                    review_status=ReviewStatus.EDITED,
                )
            )

    if not found:
        raise EntryNotFoundError(f"Entry not found: {entry_id}")
    return result


def _replace(entries: Sequence[TimeEntry], entry_id: str, changes) -> list[TimeEntry]:
    result = []
    found = False
    for entry in entries:
        if entry.id == entry_id:
            found = True
            entry = entry.model_copy(update=changes(entry))
        result.append(entry)

    if not found:
        raise EntryNotFoundError(f"Entry not found: {entry_id}")
    return result
