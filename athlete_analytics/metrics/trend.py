"""Trend smoothing (exponential moving average) over sparse daily series.

Used for the body-weight trend and as the building block of the EWMA
workload model. Gaps (None) carry the previous trend value forward.

Properties:
- Deterministic: Same input always produces same output
- Leading unknowns are skipped until the first known value seeds the EMA
"""

from __future__ import annotations

from collections.abc import Sequence

from athlete_analytics.errors import InvalidAlphaError


def _validate_alpha(alpha: float) -> None:
    if not 0 < alpha <= 1:
        raise InvalidAlphaError(f"EMA alpha must be in (0, 1], got {alpha}")


def smooth_aligned(series: Sequence[float | None], alpha: float) -> list[float | None]:
    """EMA aligned index-for-index with the input.

    Positions before the first known value are None; every later position
    holds the current trend value.

    Formula:
        ema[i] = alpha * value[i] + (1 - alpha) * ema[i-1]
        ema[i] = ema[i-1]            when value[i] is None
    """
    _validate_alpha(alpha)

    result: list[float | None] = []
    ema: float | None = None

    for value in series:
        if value is not None:
            ema = value if ema is None else alpha * value + (1 - alpha) * ema
        result.append(ema)

    return result


def smooth(series: Sequence[float | None], alpha: float) -> list[float]:
    """EMA of a sparse series, omitting the unseeded leading positions.

    Args:
        series: Chronologically ordered values, None for unknown days
        alpha: Smoothing factor in (0, 1]; higher reacts faster

    Returns:
        Trend values; shorter than the input only when it starts with None

    Example:
        >>> smooth([None, 80.0, None, 79.0], alpha=0.5)
        [80.0, 80.0, 79.5]
    """
    return [value for value in smooth_aligned(series, alpha) if value is not None]


def ewma_last(values: Sequence[float], alpha: float) -> float:
    """Final EWMA value of a dense series seeded with its first element, 0.0 if empty."""
    trend = smooth(values, alpha)
    return trend[-1] if trend else 0.0
