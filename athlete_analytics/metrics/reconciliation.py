"""Multi-source reconciliation onto a dense daily axis.

Weight and readiness can each be reported by two tables for the same day.
The merge happens once, here, with a fixed source priority, so consumers
only ever see a single value per date.

Rules:
- Higher-priority source always wins for a date, regardless of row order
- Within one source the last row for a date wins
- Missing values (None) never override anything
- Calories are additive: every log row for a date is summed
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Sequence
from datetime import date, timedelta
from typing import TypeVar

from athlete_analytics.errors import SeriesGapError
from athlete_analytics.models.observations import (
    DEFAULT_SOURCE_PRIORITY,
    CalorieEntry,
    DailyObservation,
    DataSource,
    SourcedValue,
    WellnessCheckin,
)


def reconcile_by_priority(
    values: Iterable[SourcedValue],
    priority: Sequence[DataSource] = DEFAULT_SOURCE_PRIORITY,
) -> dict[date, float]:
    """Merge sourced rows into one value per date.

    Args:
        values: Raw rows from any of the sources
        priority: Sources ordered highest priority first; unknown sources are dropped

    Returns:
        Mapping of date → winning value
    """
    rank = {source: index for index, source in enumerate(priority)}
    merged: dict[date, tuple[int, float]] = {}

    for row in values:
        if row.value is None or row.source not in rank:
            continue
        row_rank = rank[row.source]
        current = merged.get(row.date)
        if current is None or row_rank <= current[0]:
            merged[row.date] = (row_rank, row.value)

    return {day: value for day, (_, value) in merged.items()}


def aggregate_calories(entries: Iterable[CalorieEntry]) -> dict[date, float]:
    """Sum all logged calories per date, skipping rows without a value."""
    totals: dict[date, float] = defaultdict(float)
    for entry in entries:
        if entry.calories is None:
            continue
        totals[entry.date] += entry.calories
    return dict(totals)


def daily_axis(today: date, days: int) -> list[date]:
    """Consecutive dates ending today (inclusive), oldest first."""
    return [today - timedelta(days=offset) for offset in range(days - 1, -1, -1)]


def build_daily_observations(
    axis: Sequence[date],
    weights: Iterable[SourcedValue],
    calories: Iterable[CalorieEntry],
    priority: Sequence[DataSource] = DEFAULT_SOURCE_PRIORITY,
) -> list[DailyObservation]:
    """One observation per axis date; rows outside the axis are ignored."""
    weight_by_day = reconcile_by_priority(weights, priority)
    calories_by_day = aggregate_calories(calories)
    return [
        DailyObservation(
            date=day,
            weight=weight_by_day.get(day),
            calories_consumed=calories_by_day.get(day),
        )
        for day in axis
    ]


def ensure_consecutive(days: Sequence[date]) -> None:
    """Raise SeriesGapError unless days form an unbroken ascending axis."""
    for previous, current in zip(days, days[1:], strict=False):
        if current - previous != timedelta(days=1):
            raise SeriesGapError(
                f"Daily series must be consecutive and gap-filled: {previous.isoformat()} → {current.isoformat()}"
            )


_R = TypeVar("_R", bound=WellnessCheckin)


def latest_per_day(checkins: Iterable[_R]) -> list[_R]:
    """Collapse re-submitted check-ins so each date keeps exactly one record.

    A later submission (by submitted_at, then input order) replaces the
    earlier one for the same date. Output is ordered by date.
    """
    by_day: dict[date, _R] = {}
    for checkin in checkins:
        current = by_day.get(checkin.date)
        if current is None:
            by_day[checkin.date] = checkin
            continue
        if current.submitted_at is not None and checkin.submitted_at is not None and checkin.submitted_at < current.submitted_at:
            continue
        by_day[checkin.date] = checkin
    return [by_day[day] for day in sorted(by_day)]


def readiness_record_key(athlete_id: str, day: date) -> str:
    """Idempotency key the store must honour for one readiness record per day."""
    return f"{athlete_id}:{day.isoformat()}"
