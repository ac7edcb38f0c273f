"""Unit tests for billing increment rounding."""

from __future__ import annotations

import pytest

from billverify.models import RoundingDirection, VerifierSettings
from billverify.reporting.rounding import compute_adjusted_amount, round_hours


class TestRoundHours:
    @pytest.mark.parametrize(
        "hours, increment, direction, expected",
        [
            (1.05, 0.1, "up", 1.1),
            (1.05, 0.1, "down", 1.0),
            (1.05, 0.1, "nearest", 1.1),
            (1.04, 0.1, "nearest", 1.0),
            (1.1, 0.25, RoundingDirection.UP, 1.25),
            (1.1, 0.25, RoundingDirection.DOWN, 1.0),
            (1.1, 0.25, RoundingDirection.NEAREST, 1.0),
            (7.5, 0.1, "up", 7.5),
        ],
    )
    def test_directions(self, hours, increment, direction, expected):
        assert round_hours(hours, increment, direction) == expected

    @pytest.mark.parametrize("increment", [0, -0.1])
    def test_non_positive_increment_is_identity(self, increment):
        assert round_hours(1.0, increment, "up") == 1.0
        assert round_hours(1.03, increment, "down") == 1.03

    def test_unknown_direction_is_identity(self):
        assert round_hours(1.03, 0.1, "sideways") == 1.03

    def test_idempotent(self):
        once = round_hours(2.33, 0.1, "up")
        assert round_hours(once, 0.1, "up") == once


class TestAdjustedAmount:
    def test_rate_times_rounded_hours(self, settings):
        assert compute_adjusted_amount(7.5, 300, settings) == 2250.0

    def test_missing_rate_uses_default(self, settings):
        assert compute_adjusted_amount(1.0, 0, settings) == settings.hourly_rate

    def test_quantized_to_cents(self):
        assert compute_adjusted_amount(0.1, 333.333, VerifierSettings()) == 33.33
