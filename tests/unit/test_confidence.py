"""Unit tests for confidence tiering."""

from __future__ import annotations

from billverify.flags.confidence import score_confidence
from billverify.models import (
    Confidence,
    Flag,
    FlagSeverity,
    FlagType,
    QualityIssue,
    QualityIssueType,
)

WARNING = Flag(type=FlagType.LONG_ENTRY, severity=FlagSeverity.WARNING, message="long")
INFO = Flag(type=FlagType.WEEKEND, severity=FlagSeverity.INFO, message="weekend")
ERROR = Flag(type=FlagType.DUPLICATE, severity=FlagSeverity.ERROR, message="dup")
ISSUE = QualityIssue(type=QualityIssueType.ABBREVIATION, message="abbr")


class TestScoreConfidence:
    def test_no_findings_is_high(self):
        assert score_confidence([], []) == Confidence.HIGH

    def test_info_flags_never_lower(self):
        assert score_confidence([INFO, INFO, INFO], []) == Confidence.HIGH

    def test_single_quality_issue_is_high(self):
        assert score_confidence([], [ISSUE]) == Confidence.HIGH

    def test_one_warning_is_medium(self):
        assert score_confidence([WARNING], []) == Confidence.MEDIUM

    def test_two_quality_issues_is_medium(self):
        assert score_confidence([], [ISSUE, ISSUE]) == Confidence.MEDIUM

    def test_two_warnings_and_info_is_medium(self):
        assert score_confidence([WARNING, WARNING, INFO], []) == Confidence.MEDIUM

    def test_three_warnings_is_low(self):
        assert score_confidence([WARNING, WARNING, WARNING], []) == Confidence.LOW

    def test_any_error_is_low(self):
        assert score_confidence([ERROR], []) == Confidence.LOW
