"""Billing increment rounding.

Arithmetic is done in Decimal so that values sitting exactly on an
increment boundary (1.05 h at 0.1 h) round the way a reviewer expects
instead of drifting on binary float error.
"""

from __future__ import annotations

from decimal import ROUND_CEILING, ROUND_FLOOR, ROUND_HALF_UP, Decimal

from billverify.models import RoundingDirection, VerifierSettings

_ROUNDING_MODES = {
    RoundingDirection.UP: ROUND_CEILING,
    RoundingDirection.DOWN: ROUND_FLOOR,
    RoundingDirection.NEAREST: ROUND_HALF_UP,
}

_CENTS = Decimal("0.01")


def round_hours(hours: float, increment: float, direction: RoundingDirection | str) -> float:
    """Round hours to a multiple of ``increment``.

    ``up`` is a ceiling, ``down`` a floor and ``nearest`` rounds half up.
    A non-positive increment (or unknown direction) returns hours unchanged.

    Example:
        >>> round_hours(1.05, 0.1, "up"), round_hours(1.05, 0.1, "down")
        (1.1, 1.0)
    """
    if increment <= 0:
        return hours

    try:
        mode = _ROUNDING_MODES[RoundingDirection(direction)]
    except ValueError:
        return hours

    step = Decimal(str(increment))
    units = (Decimal(str(hours)) / step).to_integral_value(rounding=mode)
    return float(units * step)


def compute_adjusted_amount(rounded_hours: float, rate: float, settings: VerifierSettings) -> float:
    """Rounded hours times the entry rate (or the default rate), to the cent."""
    effective_rate = rate or settings.hourly_rate
    amount = Decimal(str(rounded_hours)) * Decimal(str(effective_rate))
    return float(amount.quantize(_CENTS, rounding=ROUND_HALF_UP))
