"""Confidence tiering for processed time entries."""

from __future__ import annotations

from collections.abc import Sequence

from billverify.models import Confidence, Flag, FlagSeverity, QualityIssue

LOW_CONFIDENCE_WARNINGS = 3
MEDIUM_CONFIDENCE_ISSUES = 2


def score_confidence(flags: Sequence[Flag], quality_issues: Sequence[QualityIssue]) -> Confidence:
    """Derive the review tier from an entry's findings.

    Any error flag, or three or more warnings, is ``low``. Otherwise any
    warning, or two or more quality issues, is ``medium``. Info flags alone
    never lower confidence.
    """
    errors = sum(1 for f in flags if f.severity == FlagSeverity.ERROR)
    warnings = sum(1 for f in flags if f.severity == FlagSeverity.WARNING)

    if errors > 0 or warnings >= LOW_CONFIDENCE_WARNINGS:
        return Confidence.LOW
    if warnings > 0 or len(quality_issues) >= MEDIUM_CONFIDENCE_ISSUES:
        return Confidence.MEDIUM
    return Confidence.HIGH
