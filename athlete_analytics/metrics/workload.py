"""Workload aggregation and Acute:Chronic Workload Ratio (ACWR).

Sessions are converted into a dense per-day load array (zero-filled, most
recent day last) and compared over two rolling windows:

- Acute load: mean of the last 7 days
- Chronic load: mean of the full 28 days (coupled model, acute days included)
- ACWR = acute / chronic, rounded to 2 decimals

Both averages divide by the full window length, so missing days count as
rest days rather than shrinking the denominator.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Sequence
from datetime import date, tzinfo

from loguru import logger

from athlete_analytics.core.clock import local_date
from athlete_analytics.core.rounding import round_half_up
from athlete_analytics.errors import WindowLengthError
from athlete_analytics.metrics.reconciliation import daily_axis
from athlete_analytics.metrics.trend import ewma_last
from athlete_analytics.models.observations import SessionRecord
from athlete_analytics.models.results import AcwrResult, AcwrZone

ACUTE_WINDOW_DAYS = 7
CHRONIC_WINDOW_DAYS = 28

# Risk bands (inclusive optimal range)
ACWR_DETRAINING_BELOW = 0.8
ACWR_OPTIMAL_MAX = 1.3
ACWR_WARNING_MAX = 1.5

# Coupled EWMA model
EWMA_MIN_DAYS = 14
EWMA_ALPHA_ACUTE = 2 / (ACUTE_WINDOW_DAYS + 1)
EWMA_ALPHA_CHRONIC = 2 / (CHRONIC_WINDOW_DAYS + 1)


def session_load(session: SessionRecord) -> float:
    """Training stress of one session in arbitrary units.

    Explicit session load wins; otherwise sRPE = perceived exertion x minutes.
    A session missing either factor contributes 0.
    """
    if session.session_load is not None:
        return session.session_load
    if session.perceived_exertion is None or session.duration_seconds is None:
        return 0.0
    return session.perceived_exertion * (session.duration_seconds / 60)


def daily_loads(
    sessions: Iterable[SessionRecord],
    window_days: int,
    *,
    today: date,
    tz: tzinfo,
) -> list[float]:
    """Build a dense daily load array for the window ending today.

    Args:
        sessions: Completed sessions; those without completed_at are ignored
        window_days: Length of the output array
        today: Last day of the window (local calendar date)
        tz: Zone used to bucket completion instants into local dates

    Returns:
        List of length window_days, oldest day first, 0.0 for rest days.
        Multiple sessions on the same day are summed.
    """
    per_day: dict[date, float] = defaultdict(float)
    for session in sessions:
        if session.completed_at is None:
            continue
        per_day[local_date(session.completed_at, tz)] += session_load(session)

    return [per_day.get(day, 0.0) for day in daily_axis(today, window_days)]


def classify_acwr(ratio: float | None) -> AcwrZone:
    """Map a ratio to its risk band.

    Rules:
        - None → insufficient_data
        - > 1.5 → high_risk
        - (1.3, 1.5] → warning
        - < 0.8 → detraining
        - [0.8, 1.3] → optimal
    """
    if ratio is None:
        return AcwrZone.INSUFFICIENT_DATA
    if ratio > ACWR_WARNING_MAX:
        return AcwrZone.HIGH_RISK
    if ratio > ACWR_OPTIMAL_MAX:
        return AcwrZone.WARNING
    if ratio < ACWR_DETRAINING_BELOW:
        return AcwrZone.DETRAINING
    return AcwrZone.OPTIMAL


def compute_acwr(loads: Sequence[float]) -> AcwrResult:
    """Rolling-average ACWR from a 28-day dense load array.

    Args:
        loads: Daily loads, oldest first. Fewer than 28 days is treated as
               insufficient history; more than 28 is a caller error.

    Returns:
        AcwrResult with ratio None when history is short or chronic load is 0

    Raises:
        WindowLengthError: If more than 28 days are supplied
    """
    if len(loads) > CHRONIC_WINDOW_DAYS:
        raise WindowLengthError(f"ACWR expects at most {CHRONIC_WINDOW_DAYS} daily loads, got {len(loads)}")

    if len(loads) < CHRONIC_WINDOW_DAYS:
        logger.debug(f"[WORKLOAD] ACWR undefined: {len(loads)} days of history < {CHRONIC_WINDOW_DAYS}")
        return AcwrResult(ratio=None, acute_load=0.0, chronic_load=0.0, zone=AcwrZone.INSUFFICIENT_DATA)

    acute_load = sum(loads[-ACUTE_WINDOW_DAYS:]) / ACUTE_WINDOW_DAYS
    chronic_load = sum(loads) / CHRONIC_WINDOW_DAYS

    if chronic_load == 0:
        return AcwrResult(ratio=None, acute_load=acute_load, chronic_load=0.0, zone=AcwrZone.INSUFFICIENT_DATA)

    ratio = round_half_up(acute_load / chronic_load, 2)
    return AcwrResult(ratio=ratio, acute_load=acute_load, chronic_load=chronic_load, zone=classify_acwr(ratio))


def compute_ewma_acwr(loads: Sequence[float]) -> AcwrResult:
    """ACWR using exponentially weighted windows instead of plain means.

    Reacts faster to load spikes than compute_acwr(). Acute EWMA runs over
    the last 7 days (alpha = 2/8), chronic over the last 28 (alpha = 2/29).
    Requires at least 14 days of history.
    """
    if len(loads) < EWMA_MIN_DAYS:
        return AcwrResult(ratio=None, acute_load=0.0, chronic_load=0.0, zone=AcwrZone.INSUFFICIENT_DATA)

    acute_load = ewma_last(loads[-ACUTE_WINDOW_DAYS:], EWMA_ALPHA_ACUTE)
    chronic_load = ewma_last(loads[-CHRONIC_WINDOW_DAYS:], EWMA_ALPHA_CHRONIC)

    if chronic_load == 0:
        return AcwrResult(ratio=None, acute_load=acute_load, chronic_load=0.0, zone=AcwrZone.INSUFFICIENT_DATA)

    ratio = round_half_up(acute_load / chronic_load, 2)
    return AcwrResult(ratio=ratio, acute_load=acute_load, chronic_load=chronic_load, zone=classify_acwr(ratio))
