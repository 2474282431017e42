"""Half-up rounding for displayed values.

Built-in round() uses banker's rounding (round(16.5) == 16); scores and
kcal targets are rounded half away from zero instead.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal


def round_half_up(value: float, ndigits: int = 0) -> float:
    quantum = Decimal(1).scaleb(-ndigits)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def round_int(value: float) -> int:
    return int(round_half_up(value))


def round_to_step(value: float, step: int) -> int:
    """Round to the nearest multiple of step (e.g. 50 kcal)."""
    return round_int(value / step) * step
