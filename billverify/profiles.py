"""Saved billing profiles.

A profile is the per-client subset of ``VerifierSettings`` (rate,
thresholds, rounding, leak-detection names) stored as one YAML file per
profile under the configured profiles directory.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

from billverify.exceptions import ProfileNotFoundError
from billverify.models import RoundingDirection, VerifierSettings

logger = logging.getLogger(__name__)

_PROFILE_FIELDS = (
    "client_name",
    "hourly_rate",
    "long_threshold",
    "day_threshold",
    "rounding_increment",
    "rounding_direction",
    "minimum_entry",
    "travel_time_rate",
    "aliases",
    "key_parties",
)


class BillingProfile(BaseModel):
    """Named, reusable billing settings for one client."""

    name: str
    client_name: str = ""
    hourly_rate: float = 350.0
    long_threshold: float = 6.0
    day_threshold: float = 10.0
    rounding_increment: float = 0.1
    rounding_direction: RoundingDirection = RoundingDirection.UP
    minimum_entry: float = 0.0
    travel_time_rate: float = 1.0
    aliases: list[str] = Field(default_factory=list)
    key_parties: list[str] = Field(default_factory=list)


def slugify(name: str) -> str:
    """``"Acme Corp."`` -> ``"acme-corp"``."""
    slug = re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")
    if not slug:
        raise ValueError(f"Profile name '{name}' has no usable characters")
    return slug


def profile_from_settings(name: str, settings: VerifierSettings) -> BillingProfile:
    return BillingProfile(name=name, **{f: getattr(settings, f) for f in _PROFILE_FIELDS})


def apply_profile(settings: VerifierSettings, profile: BillingProfile) -> VerifierSettings:
    """Return a copy of ``settings`` with the profile's fields applied."""
    return settings.model_copy(update={f: getattr(profile, f) for f in _PROFILE_FIELDS})


class ProfileStore:
    """YAML-file backed profile storage."""

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def _path(self, name: str) -> Path:
        return self.directory / f"{slugify(name)}.yaml"

    def save(self, profile: BillingProfile) -> Path:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self._path(profile.name)
        with open(path, "w") as f:
            yaml.safe_dump(profile.model_dump(mode="json"), f, sort_keys=False)
        logger.info(f"Saved profile '{profile.name}' to {path}")
        return path

    def load(self, name: str) -> BillingProfile:
        """Load a profile by name.

        Raises:
            ProfileNotFoundError: If no file exists for ``name``
        """
        path = self._path(name)
        if not path.exists():
            raise ProfileNotFoundError(f"Profile not found: {name}")

        with open(path) as f:
            data = yaml.safe_load(f) or {}
        data.setdefault("name", name)
        return BillingProfile.model_validate(data)

    def list_names(self) -> list[str]:
        if not self.directory.exists():
            return []
        names = []
        for path in sorted(self.directory.glob("*.yaml")):
            with open(path) as f:
                data = yaml.safe_load(f) or {}
            names.append(data.get("name", path.stem))
        return names

    def delete(self, name: str) -> None:
        path = self._path(name)
        if not path.exists():
            raise ProfileNotFoundError(f"Profile not found: {name}")
        path.unlink()
        logger.info(f"Deleted profile '{name}'")
