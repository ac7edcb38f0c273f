"""BillVerify configuration management.

Loads configuration from environment variables with sensible defaults.
Verification defaults (rate, thresholds, rounding) seed the
``VerifierSettings`` used when no profile or CLI override is given.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

from billverify.models import RoundingDirection, VerifierSettings

# Load .env file if present
load_dotenv()


@dataclass
class DefaultsConfig:
    """Default verification thresholds and billing metadata."""

    hourly_rate: float = 350.0
    long_threshold: float = 6.0
    day_threshold: float = 10.0
    rounding_increment: float = 0.1
    rounding_direction: str = "up"
    minimum_entry: float = 0.0
    firm_name: str = "Synergy Law PLLC"
    attorney_name: str = ""


@dataclass
class IngestionConfig:
    """Upload limits enforced before parsing."""

    max_file_size_mb: int = 50
    max_rows: int = 50000


@dataclass
class AppConfig:
    """Root application configuration."""

    log_level: str = "INFO"
    log_format: str = "text"  # json or text
    profiles_dir: Path = Path("profiles")

    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)
    ingestion: IngestionConfig = field(default_factory=IngestionConfig)

    @classmethod
    def from_env(cls) -> AppConfig:
        """Load configuration from environment variables.

        Optional (with defaults):
        - LOG_LEVEL, JSON_LOGS
        - BILLVERIFY_PROFILES_DIR
        - DEFAULT_HOURLY_RATE, LONG_ENTRY_THRESHOLD, DAY_TOTAL_THRESHOLD
        - ROUNDING_INCREMENT, ROUNDING_DIRECTION, MINIMUM_ENTRY
        - FIRM_NAME, ATTORNEY_NAME
        - MAX_UPLOAD_SIZE_MB, MAX_UPLOAD_ROWS

        Raises:
            ValueError: If a numeric variable cannot be parsed or the
                rounding direction is unknown
        """
        direction = os.getenv("ROUNDING_DIRECTION", "up").lower()
        if direction not in {d.value for d in RoundingDirection}:
            raise ValueError(
                f"ROUNDING_DIRECTION must be one of up/down/nearest, got '{direction}'"
            )

        return cls(
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format="json" if os.getenv("JSON_LOGS", "false").lower() == "true" else "text",
            profiles_dir=Path(os.getenv("BILLVERIFY_PROFILES_DIR", "profiles")),
            defaults=DefaultsConfig(
                hourly_rate=float(os.getenv("DEFAULT_HOURLY_RATE", "350")),
                long_threshold=float(os.getenv("LONG_ENTRY_THRESHOLD", "6")),
                day_threshold=float(os.getenv("DAY_TOTAL_THRESHOLD", "10")),
                rounding_increment=float(os.getenv("ROUNDING_INCREMENT", "0.1")),
                rounding_direction=direction,
                minimum_entry=float(os.getenv("MINIMUM_ENTRY", "0")),
                firm_name=os.getenv("FIRM_NAME", "Synergy Law PLLC"),
                attorney_name=os.getenv("ATTORNEY_NAME", ""),
            ),
            ingestion=IngestionConfig(
                max_file_size_mb=int(os.getenv("MAX_UPLOAD_SIZE_MB", "50")),
                max_rows=int(os.getenv("MAX_UPLOAD_ROWS", "50000")),
            ),
        )

    def default_settings(self) -> VerifierSettings:
        """Build verifier settings seeded from the configured defaults."""
        d = self.defaults
        return VerifierSettings(
            hourly_rate=d.hourly_rate,
            long_threshold=d.long_threshold,
            day_threshold=d.day_threshold,
            rounding_increment=d.rounding_increment,
            rounding_direction=RoundingDirection(d.rounding_direction),
            minimum_entry=d.minimum_entry,
            firm_name=d.firm_name,
            attorney_name=d.attorney_name,
        )


# Singleton instance (lazy-loaded)
_config: AppConfig | None = None


def get_config() -> AppConfig:
    """Get or create singleton AppConfig instance from environment."""
    global _config
    if _config is None:
        _config = AppConfig.from_env()
    return _config


def reset_config() -> None:
    """Drop the cached config so the next ``get_config`` re-reads the env."""
    global _config
    _config = None
