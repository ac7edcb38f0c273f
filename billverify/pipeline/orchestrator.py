"""Verification pipeline orchestrator.

Runs every check over a batch of time entries in one forward pass and
returns newly annotated entries; the input list and its entries are never
modified. Day totals and duplicate detection depend on batch order, so the
accumulators live in a ``PipelineState`` created per run and discarded
afterwards. Individual entries never abort the run: a check that cannot be
evaluated for an entry is skipped for that entry.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from billverify.classification.utbms import detect_utbms, lookup_code
from billverify.core.logging import get_logger
from billverify.exceptions import PipelineCancelled
from billverify.flags.confidence import score_confidence
from billverify.flags.engine import PipelineState, compute_flags
from billverify.models import (
    DailySummary,
    ReviewStatus,
    Summary,
    TimeEntry,
    VerifierSettings,
)
from billverify.pipeline.narrative import craft_narrative
from billverify.pipeline.splits import suggest_split
from billverify.quality.checker import check_quality
from billverify.reporting.rounding import compute_adjusted_amount, round_hours
from billverify.reporting.summary import compute_daily_summary, compute_summary

logger = get_logger(__name__)


def filter_by_date_range(
    entries: Sequence[TimeEntry], settings: VerifierSettings
) -> list[TimeEntry]:
    """Keep entries inside the settings' date range.

    Bounds are ISO dates compared against the first ten characters of the
    entry date. Entries without a date are always kept.
    """
    if not settings.start_date and not settings.end_date:
        return list(entries)

    kept = []
    for entry in entries:
        if entry.date:
            entry_date = entry.date[:10]
            if settings.start_date and entry_date < settings.start_date:
                continue
            if settings.end_date and entry_date > settings.end_date:
                continue
        kept.append(entry)
    return kept


def annotate_entry(
    entry: TimeEntry, settings: VerifierSettings, state: PipelineState
) -> TimeEntry:
    """Run all checks for one entry and return an annotated copy."""
    rounded = round_hours(entry.hours, settings.rounding_increment, settings.rounding_direction)
    flags = compute_flags(entry, settings, state, rounded)
    quality_issues = check_quality(entry.description, settings) if settings.check_quality else []

    utbms = None
    if settings.detect_utbms:
        utbms = detect_utbms(entry.description) or lookup_code(entry.source_code)

    split = suggest_split(entry) if settings.suggest_splits else None

    return entry.model_copy(
        update={
            "flags": flags,
            "quality_issues": quality_issues,
            "confidence": score_confidence(flags, quality_issues),
            "utbms_code": utbms.code if utbms else None,
            "utbms_phase": utbms.phase if utbms else None,
            "utbms_task": utbms.task if utbms and not utbms.is_activity else None,
            "utbms_activity": utbms.task if utbms and utbms.is_activity else None,
            "rounded_hours": rounded,
            "split_suggestion": split,
            "adjusted_hours": rounded,
            "adjusted_amount": compute_adjusted_amount(rounded, entry.rate, settings),
            "narrative": craft_narrative(entry.description, settings),
            "review_status": ReviewStatus.PENDING,
            "write_off": False,
        }
    )


def run_pipeline(
    entries: Sequence[TimeEntry],
    settings: VerifierSettings,
    cancel: Callable[[], bool] | None = None,
) -> list[TimeEntry]:
    """Annotate a batch of entries.

    Args:
        entries: Raw entries in upload order (left untouched)
        settings: Verifier settings, treated as read-only
        cancel: Optional callable checked before each entry; returning True
            aborts the run

    Returns:
        New annotated entries, date-range filtered, in input order

    Raises:
        PipelineCancelled: If ``cancel`` fired
    """
    state = PipelineState()
    annotated = []

    for entry in filter_by_date_range(entries, settings):
        if cancel is not None and cancel():
            raise PipelineCancelled(f"Pipeline cancelled after {len(annotated)} entries")
        annotated.append(annotate_entry(entry, settings, state))

    return annotated


@dataclass
class VerificationResult:
    """Annotated entries plus the roll-ups computed from them."""

    entries: list[TimeEntry]
    summary: Summary
    daily: list[DailySummary]
    duration_seconds: float = 0.0


class VerificationPipeline:
    """Runs (and re-runs) verification for one settings object."""

    def __init__(self, settings: VerifierSettings):
        self.settings = settings

    def run(
        self,
        entries: Sequence[TimeEntry],
        cancel: Callable[[], bool] | None = None,
    ) -> VerificationResult:
        """Process a batch and compute its summaries."""
        started = time.perf_counter()
        processed = run_pipeline(entries, self.settings, cancel=cancel)
        result = VerificationResult(
            entries=processed,
            summary=compute_summary(processed),
            daily=compute_daily_summary(processed, self.settings),
            duration_seconds=time.perf_counter() - started,
        )

        logger.info(
            "pipeline_completed",
            entries_in=len(entries),
            entries_out=len(processed),
            flagged=result.summary.flagged,
            low_confidence=result.summary.low_confidence,
            duration_ms=round(result.duration_seconds * 1000, 1),
        )
        return result

    def rerun(self, result: VerificationResult, raw_entries: Sequence[TimeEntry]) -> VerificationResult:
        """Re-run over the raw entries, keeping approvals made since the last run.

        Flags and quality issues are recomputed from scratch; only the
        ``approved`` and ``notes`` review fields carry over by entry id.
        """
        review = {e.id: (e.approved, e.notes) for e in result.entries}
        carried = [
            e.model_copy(update={"approved": review[e.id][0], "notes": review[e.id][1]})
            if e.id in review
            else e
            for e in raw_entries
        ]
        return self.run(carried)
