"""Invoice narrative builder.

Condenses a raw timekeeper description into a standard task label suitable
for the client-facing statement, e.g. ``Legal research; Acme Corp``.
"""

from __future__ import annotations

import re

from billverify.models import VerifierSettings

MAX_EVIDENCE_CHARS = 80

# First match wins
TASK_LABELS: tuple[tuple[re.Pattern[str], str], ...] = tuple(
    (re.compile(pattern), label)
    for pattern, label in (
        (r"injunction|civil stalking", "Draft/revise civil stalking injunction"),
        (r"notice of appearance", "Prepare/file Notice of Appearance"),
        (
            r"return of service|proof of service|service assistance",
            "Coordinate service / prepare proof of service",
        ),
        (r"acceptance of service", "Prepare/file Acceptance of Service"),
        (r"attorney fees", "Draft/revise motion re attorney fees"),
        (r"extension of time", "Draft/revise motion re extension of time"),
        (r"meet\s*&\s*confer|meet and confer", "Meet & confer re case issues"),
        (r"research", "Legal research"),
        (r"review|analy", "Review/analyze materials"),
        (r"draft|revise|edit", "Draft/revise documents"),
        (r"email", "Email correspondence"),
        (r"call|phone|voicemail|telephone", "Telephone conference / call"),
        (r"deposition|depo", "Deposition preparation/attendance"),
        (r"hearing|court|appear", "Court appearance/hearing"),
        (r"motion", "Prepare/file motion"),
        (r"discovery|interrogat", "Discovery work"),
    )
)

DEFAULT_TASK_LABEL = "Case work (client matter)"

_WHITESPACE = re.compile(r"\s+")


def craft_narrative(description: str, settings: VerifierSettings, evidence: str = "") -> str:
    """Build the statement narrative for one entry.

    Args:
        description: Raw timekeeper description
        settings: Supplies the client name ("Client" when unset)
        evidence: Optional supporting note appended in parentheses
    """
    text = f"{description} {evidence}".lower()
    task = next((label for pattern, label in TASK_LABELS if pattern.search(text)), DEFAULT_TASK_LABEL)

    narrative = f"{task}; {settings.client_name or 'Client'}"

    evidence = evidence.strip()
    if evidence and evidence.lower() != "nan":
        condensed = _WHITESPACE.sub(" ", evidence)
        suffix = "..." if len(condensed) > MAX_EVIDENCE_CHARS else ""
        narrative += f" ({condensed[:MAX_EVIDENCE_CHARS]}{suffix})"

    return narrative
