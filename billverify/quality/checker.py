"""Description quality and compliance checks.

Scans time entry narratives for problems a billing reviewer or client
auditor would object to: vague wording, shorthand, client names or key
parties appearing in the narrative, references to privileged material and
sloppy capitalization. Each category reports at most one issue.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from billverify.models import QualityIssue, QualityIssueType, VerifierSettings

VAGUE_MAX_WORDS = 5

VAGUE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(
        r"^(review|reviewed|work on|worked on|attention to|various|misc|miscellaneous"
        r"|general|multiple|several|various items)\b",
        re.IGNORECASE,
    ),
    re.compile(
        r"^(email|emails|correspondence|call|calls|telephone|phone|conference)\b$",
        re.IGNORECASE,
    ),
    re.compile(r"^(research|analysis|draft|review)\b$", re.IGNORECASE),
)

ABBREVIATION_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(
        r"\b(?:(?:re|attn|b4|tel|conf|corresp|prep|mtg|def|plt|opp|disc)\b|w/|b/c)",
        re.IGNORECASE,
    ),
)

PRIVILEGED_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(
        r"\b(attorney[- ]client|privileged|work[- ]product|confidential communication)\b",
        re.IGNORECASE,
    ),
)


def name_patterns(names: Iterable[str]) -> list[re.Pattern[str]]:
    """Case-insensitive whole-word patterns for each non-empty name."""
    return [
        re.compile(rf"\b{re.escape(name.strip())}\b", re.IGNORECASE)
        for name in names
        if name and name.strip()
    ]


def client_name_patterns(client_name: str, aliases: Iterable[str]) -> list[re.Pattern[str]]:
    """Patterns for the client name followed by its aliases, in that order."""
    return name_patterns([client_name, *aliases])


def word_count(description: str) -> int:
    return len(description.split())


def is_vague(description: str) -> bool:
    """Generic-verb-only narrative with fewer than five words."""
    if word_count(description) >= VAGUE_MAX_WORDS:
        return False
    return any(pattern.search(description) for pattern in VAGUE_PATTERNS)


def check_quality(description: str, settings: VerifierSettings) -> list[QualityIssue]:
    """Run every quality check against one description.

    Args:
        description: Entry narrative
        settings: Supplies client name, aliases and key parties

    Returns:
        Issues in fixed category order (empty list if none)
    """
    issues: list[QualityIssue] = []

    if is_vague(description):
        issues.append(
            QualityIssue(
                type=QualityIssueType.MISSING_DETAIL,
                message="Description may be too vague",
                suggestion="Add specific details about what was reviewed, drafted, or discussed",
            )
        )

    if any(pattern.search(description) for pattern in ABBREVIATION_PATTERNS):
        issues.append(
            QualityIssue(
                type=QualityIssueType.ABBREVIATION,
                message="Contains common abbreviations",
                suggestion="Spell out abbreviations for clarity",
            )
        )

    leak = _client_leak(description, settings)
    if leak:
        issues.append(leak)

    if any(pattern.search(description) for pattern in PRIVILEGED_PATTERNS):
        issues.append(
            QualityIssue(
                type=QualityIssueType.PRIVILEGED_INFO,
                message="May reveal privileged communications",
                suggestion="Remove or rephrase references to attorney-client privilege",
            )
        )

    if description[:1].islower():
        issues.append(
            QualityIssue(
                type=QualityIssueType.CAPITALIZATION,
                message="Description starts with lowercase letter",
            )
        )

    return issues


def _client_leak(description: str, settings: VerifierSettings) -> QualityIssue | None:
    if settings.client_name:
        for pattern in client_name_patterns(settings.client_name, settings.aliases):
            if pattern.search(description):
                return QualityIssue(
                    type=QualityIssueType.CLIENT_NAME,
                    message="Description may contain client name",
                    suggestion="Replace client name with 'client' or a generic reference",
                )

    for party in settings.key_parties:
        party = party.strip()
        if party and re.search(rf"\b{re.escape(party)}\b", description, re.IGNORECASE):
            return QualityIssue(
                type=QualityIssueType.CLIENT_NAME,
                message=f"Description names key party '{party}'",
                suggestion="Refer to parties by role (e.g. 'opposing party') on the invoice",
            )

    return None
