"""UTBMS litigation code classification.

Maps free-text time entry descriptions onto Uniform Task-Based Management
System codes. Phase codes (L1xx-L5xx) describe the litigation task;
activity codes (A1xx) describe the kind of work performed.

The pattern table is evaluated top to bottom and the first match wins, so
its order is part of the contract: specific tasks (depositions, written
discovery) must precede the generic review/analysis patterns that most
descriptions also satisfy.
"""

from __future__ import annotations

import re

from billverify.models import UtbmsMatch

UTBMS_CODES: dict[str, dict[str, str]] = {
    "L100": {"phase": "Case Assessment", "description": "Case Assessment, Development, and Administration"},
    "L110": {"phase": "Case Assessment", "description": "Fact Investigation/Development"},
    "L120": {"phase": "Case Assessment", "description": "Analysis/Strategy"},
    "L130": {"phase": "Case Assessment", "description": "Experts/Consultants"},
    "L140": {"phase": "Case Assessment", "description": "Document/File Management"},
    "L150": {"phase": "Case Assessment", "description": "Budgeting"},
    "L160": {"phase": "Case Assessment", "description": "Settlement/Non-Binding ADR"},
    "L200": {"phase": "Pre-Trial", "description": "Pre-Trial Pleadings and Motions"},
    "L210": {"phase": "Pre-Trial", "description": "Pleadings"},
    "L220": {"phase": "Pre-Trial", "description": "Preliminary Injunctions/Provisional Remedies"},
    "L230": {"phase": "Pre-Trial", "description": "Court Mandated Conferences"},
    "L240": {"phase": "Pre-Trial", "description": "Dispositive Motions"},
    "L250": {"phase": "Pre-Trial", "description": "Other Motions"},
    "L300": {"phase": "Discovery", "description": "Discovery"},
    "L310": {"phase": "Discovery", "description": "Written Discovery"},
    "L320": {"phase": "Discovery", "description": "Document Production"},
    "L330": {"phase": "Discovery", "description": "Depositions"},
    "L340": {"phase": "Discovery", "description": "Expert Discovery"},
    "L400": {"phase": "Trial", "description": "Trial Preparation and Trial"},
    "L500": {"phase": "Appeal", "description": "Appeal"},
    "A101": {"phase": "Activity", "description": "Plan and Prepare For"},
    "A102": {"phase": "Activity", "description": "Research"},
    "A103": {"phase": "Activity", "description": "Draft/Revise"},
    "A104": {"phase": "Activity", "description": "Review/Analyze"},
    "A105": {"phase": "Activity", "description": "Communicate (In Firm)"},
    "A106": {"phase": "Activity", "description": "Communicate (With Client)"},
    "A107": {"phase": "Activity", "description": "Communicate (Other Outside Counsel)"},
    "A108": {"phase": "Activity", "description": "Communicate (Other External)"},
    "A109": {"phase": "Activity", "description": "Appear For/Attend"},
    "A110": {"phase": "Activity", "description": "Manage Data/Files"},
    "A111": {"phase": "Activity", "description": "Other"},
}

# Matched against the lower-cased description. Order matters (first wins).
UTBMS_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = tuple(
    (re.compile(pattern), code)
    for pattern, code in (
        (r"\bdeposition|deposed|depo\b", "L330"),
        (r"\bwritten discovery|interrogator|request for (production|admission)\b", "L310"),
        (r"\bdocument (review|production|collect)\b", "L320"),
        (r"\bmotion to dismiss|summary judgment|dispositive\b", "L240"),
        (r"\bpleading|complaint|answer|counterclaim\b", "L210"),
        (r"\binjunction|provisional|\btro\b|restraining\b", "L220"),
        (r"\bconference|hearing|status|scheduling\b", "L230"),
        (r"\bother motion|motion (for|to)\b", "L250"),
        (r"\btrial prep|trial|exhibit|jury|witness\b", "L400"),
        (r"\bappeal|appellate|brief\b", "L500"),
        (r"\bresearch|legal research|case law|statute\b", "L120"),
        (r"\bexpert|consultant\b", "L130"),
        (r"\bdocument management|file|organize|index\b", "L140"),
        (r"\bbudget|estimate|forecast\b", "L150"),
        (r"\bsettlement|mediat|negotiat|\badr\b", "L160"),
        (r"\binvestigat|fact|interview|witness\b", "L110"),
        (r"\bassess|evaluat|strateg|analys|review\b", "L100"),
        (r"\bcall|phone|conference|meet.*client|email.*client\b", "A106"),
        (r"\binternal|staff|team\b", "A105"),
        (r"\bfile|document|organize\b", "A110"),
        (r"\bdraft|revise|prepare|write\b", "A103"),
        (r"\breview|analyze|analysis\b", "A104"),
        (r"\bresearch|legal research|case law\b", "A102"),
    )
)


def detect_utbms(description: str) -> UtbmsMatch | None:
    """Classify a description, returning None when no pattern matches.

    Example:
        >>> detect_utbms("Prepare for and attend deposition; review exhibits").code
        'L330'
    """
    if not description:
        return None

    lowered = description.lower()
    for pattern, code in UTBMS_PATTERNS:
        if pattern.search(lowered) and code in UTBMS_CODES:
            info = UTBMS_CODES[code]
            return UtbmsMatch(code=code, phase=info["phase"], task=info["description"])

    return None


def lookup_code(code: str | None) -> UtbmsMatch | None:
    """Resolve a code supplied by the upload (e.g. ``l330``) to its table entry."""
    if not code:
        return None
    normalized = code.strip().upper()
    info = UTBMS_CODES.get(normalized)
    if info is None:
        return None
    return UtbmsMatch(code=normalized, phase=info["phase"], task=info["description"])


def describe_code(code: str | None) -> str:
    """Human-readable label such as ``L330 Depositions`` (empty if unknown)."""
    match = lookup_code(code)
    return f"{match.code} {match.task}" if match else ""
