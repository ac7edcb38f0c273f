"""BillVerify Pydantic models for time entries, findings and settings.

Field names are snake_case in Python; serialized output uses the camelCase
aliases of the published export format (``utbmsCode``, ``qualityIssues``...).
Models accept either spelling on input.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class FlagSeverity(str, Enum):
    """Flag severity levels."""

    ERROR = "error"  # Needs manual resolution before invoicing
    WARNING = "warning"
    INFO = "info"


class FlagType(str, Enum):
    """Anomaly flag types raised by the flag engine."""

    LONG_ENTRY = "long_entry"
    DAY_TOTAL = "day_total"
    BLOCK_BILLING = "block_billing"
    VAGUE = "vague"
    DUPLICATE = "duplicate"
    EXCESSIVE_ROUNDING = "excessive_rounding"
    WEEKEND = "weekend"
    HOLIDAY = "holiday"
    MINIMUM_ENTRY = "minimum_entry"


class QualityIssueType(str, Enum):
    """Description quality / compliance issue types."""

    ABBREVIATION = "abbreviation"
    CAPITALIZATION = "capitalization"
    PASSIVE_VOICE = "passive_voice"
    MISSING_DETAIL = "missing_detail"
    CLIENT_NAME = "client_name"
    PRIVILEGED_INFO = "privileged_info"


class Confidence(str, Enum):
    """How much manual review an entry likely needs (high = little)."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ReviewStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    EDITED = "edited"


class RoundingDirection(str, Enum):
    UP = "up"
    DOWN = "down"
    NEAREST = "nearest"


class PaymentTerms(str, Enum):
    RECEIPT = "receipt"
    NET15 = "net15"
    NET30 = "net30"
    NET60 = "net60"

    @property
    def label(self) -> str:
        return _PAYMENT_TERM_LABELS[self]


_PAYMENT_TERM_LABELS = {
    PaymentTerms.RECEIPT: "Due Upon Receipt",
    PaymentTerms.NET15: "Net 15 Days",
    PaymentTerms.NET30: "Net 30 Days",
    PaymentTerms.NET60: "Net 60 Days",
}


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class Flag(_CamelModel):
    """Anomaly detected on a single entry."""

    type: FlagType
    severity: FlagSeverity
    message: str


class QualityIssue(_CamelModel):
    """Description quality or compliance problem."""

    type: QualityIssueType
    message: str
    suggestion: str | None = None


class SplitPart(_CamelModel):
    description: str
    hours: float


class SplitSuggestion(_CamelModel):
    """Proposed break-up of a multi-task entry."""

    entries: list[SplitPart]
    reason: str


class UtbmsMatch(_CamelModel):
    """Result of classifying a description against the UTBMS tables."""

    code: str
    phase: str
    task: str

    @property
    def is_activity(self) -> bool:
        return self.code.startswith("A")


class TimeEntry(_CamelModel):
    """A single billable line item.

    Raw fields come from ingestion; everything below ``amount`` is populated
    by the pipeline or by review actions.
    """

    id: str
    date: str = ""
    attorney: str = ""
    description: str
    hours: float
    rate: float = 0.0
    amount: float = 0.0
    source_code: str | None = None  # Task code supplied by the upload, if any

    # Pipeline annotations
    utbms_code: str | None = None
    utbms_phase: str | None = None
    utbms_task: str | None = None
    utbms_activity: str | None = None
    confidence: Confidence = Confidence.HIGH
    flags: list[Flag] = Field(default_factory=list)
    quality_issues: list[QualityIssue] = Field(default_factory=list)
    rounded_hours: float | None = None
    split_suggestion: SplitSuggestion | None = None
    adjusted_hours: float | None = None
    adjusted_amount: float | None = None
    narrative: str | None = None

    # Review state
    approved: bool = False
    write_off: bool = False
    review_status: ReviewStatus = ReviewStatus.PENDING
    notes: str = ""

    @property
    def billable_hours(self) -> float:
        """Adjusted hours when the pipeline has run, raw hours otherwise."""
        return self.adjusted_hours if self.adjusted_hours is not None else self.hours

    @property
    def billable_amount(self) -> float:
        return self.adjusted_amount if self.adjusted_amount is not None else self.amount

    def has_flag(self, flag_type: FlagType) -> bool:
        return any(flag.type == flag_type for flag in self.flags)


class VerifierSettings(_CamelModel):
    """Configuration for one verification run.

    Passed explicitly into every pipeline call and never mutated by it.
    """

    hourly_rate: float = 350.0
    long_threshold: float = 6.0
    day_threshold: float = 10.0
    rounding_increment: float = 0.1
    rounding_direction: RoundingDirection = RoundingDirection.UP
    minimum_entry: float = 0.0
    travel_time_rate: float = 1.0

    # Leak detection
    client_name: str = ""
    aliases: list[str] = Field(default_factory=list)
    phones: list[str] = Field(default_factory=list)
    key_parties: list[str] = Field(default_factory=list)

    # Check toggles
    detect_utbms: bool = True
    check_quality: bool = True
    suggest_splits: bool = True
    check_block_billing: bool = True
    check_duplicates: bool = True
    check_weekend_holiday: bool = True

    # Statement metadata
    firm_name: str = "Synergy Law PLLC"
    attorney_name: str = ""
    firm_address: str = ""
    payment_terms: PaymentTerms = PaymentTerms.RECEIPT
    retainer_balance: float = 0.0

    # Date range filter (ISO yyyy-mm-dd, empty = unbounded)
    start_date: str = ""
    end_date: str = ""

    @field_validator(
        "hourly_rate",
        "long_threshold",
        "day_threshold",
        "minimum_entry",
        "travel_time_rate",
    )
    @classmethod
    def validate_non_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError("value must be non-negative")
        return v


class DailySummary(_CamelModel):
    """Aggregate of all entries sharing one date."""

    date: str
    entries: int = 0
    hours: float = 0.0
    amount: float = 0.0
    flag_count: int = 0
    over_threshold: bool = False


class Summary(_CamelModel):
    """Batch-level roll-up of a processed entry list."""

    total: int = 0
    total_hours: float = 0.0
    total_amount: float = 0.0
    adjusted_hours: float = 0.0
    flagged: int = 0
    quality_issues: int = 0
    high_confidence: int = 0
    medium_confidence: int = 0
    low_confidence: int = 0
    approved: int = 0
    written_off: int = 0
    utbms_coverage: int = 0
    rounding_delta: float = 0.0
