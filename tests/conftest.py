"""Pytest configuration and fixtures for BillVerify tests.

Provides common fixtures for testing.
"""

from __future__ import annotations

import pytest

from billverify.config import reset_config
from billverify.ingestion import ingest_text
from billverify.models import TimeEntry, VerifierSettings

_CONFIG_ENV_VARS = (
    "LOG_LEVEL",
    "JSON_LOGS",
    "BILLVERIFY_PROFILES_DIR",
    "DEFAULT_HOURLY_RATE",
    "LONG_ENTRY_THRESHOLD",
    "DAY_TOTAL_THRESHOLD",
    "ROUNDING_INCREMENT",
    "ROUNDING_DIRECTION",
    "MINIMUM_ENTRY",
    "FIRM_NAME",
    "ATTORNEY_NAME",
    "MAX_UPLOAD_SIZE_MB",
    "MAX_UPLOAD_ROWS",
)


@pytest.fixture(autouse=True)
def clean_config(monkeypatch):
    """Isolate tests from the caller's environment and the cached config."""
    for name in _CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def settings() -> VerifierSettings:
    """Default verifier settings (350/h, 6h long, 10h day, 0.1h up)."""
    return VerifierSettings()


@pytest.fixture
def make_entry():
    """Factory for raw time entries on a weekday with a specific narrative."""

    def _make(
        id: str = "entry-0",
        date: str = "2024-01-08",
        attorney: str = "J. Smith",
        description: str = "Draft motion to compel production of documents",
        hours: float = 1.0,
        rate: float = 300.0,
        **extra,
    ) -> TimeEntry:
        return TimeEntry(
            id=id,
            date=date,
            attorney=attorney,
            description=description,
            hours=hours,
            rate=rate,
            amount=hours * rate,
            **extra,
        )

    return _make


@pytest.fixture
def sample_csv() -> str:
    """Small upload: a deposition day over the daily limit, a duplicate and a weekend entry."""
    return (
        "Date,Attorney,Description,Hours,Rate\n"
        "2024-01-08,J. Smith,Draft motion to compel production of documents,2.5,300\n"
        "2024-01-08,J. Smith,Prepare for and attend deposition of plaintiff; review exhibits,6.5,300\n"
        "2024-01-08,J. Smith,Draft motion to compel production of documents,2.5,300\n"
        "2024-01-09,A. Jones,Legal research on statute of limitations defense,1.25,250\n"
        "2024-01-06,J. Smith,review documents,7.5,300\n"
    )


@pytest.fixture
def sample_entries(sample_csv: str, settings: VerifierSettings) -> list[TimeEntry]:
    return ingest_text(sample_csv, settings, filename="entries.csv")
