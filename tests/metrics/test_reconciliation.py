import datetime as dt

import pytest

from athlete_analytics.errors import SeriesGapError
from athlete_analytics.metrics.reconciliation import (
    aggregate_calories,
    build_daily_observations,
    daily_axis,
    ensure_consecutive,
    latest_per_day,
    readiness_record_key,
    reconcile_by_priority,
)
from athlete_analytics.models.observations import CalorieEntry, DataSource, SourcedValue, WellnessCheckin

DAY = dt.date(2025, 1, 10)


def metrics_row(value, day=DAY) -> SourcedValue:
    return SourcedValue(date=day, source=DataSource.DAILY_METRICS, value=value)


def readiness_row(value, day=DAY) -> SourcedValue:
    return SourcedValue(date=day, source=DataSource.DAILY_READINESS, value=value)


@pytest.mark.parametrize(
    "rows",
    [
        [readiness_row(80.0), metrics_row(81.0)],
        [metrics_row(81.0), readiness_row(80.0)],
    ],
)
def test_higher_priority_source_wins_regardless_of_order(rows):
    assert reconcile_by_priority(rows) == {DAY: 81.0}


def test_missing_value_never_overrides():
    assert reconcile_by_priority([metrics_row(None), readiness_row(80.0)]) == {DAY: 80.0}


def test_last_row_wins_within_a_source():
    assert reconcile_by_priority([metrics_row(80.0), metrics_row(80.4)]) == {DAY: 80.4}


def test_sources_outside_priority_are_dropped():
    merged = reconcile_by_priority(
        [metrics_row(81.0), readiness_row(80.0)],
        priority=(DataSource.DAILY_READINESS,),
    )

    assert merged == {DAY: 80.0}


def test_calories_are_summed_per_day():
    entries = [
        CalorieEntry(date=DAY, calories=800),
        CalorieEntry(date=DAY, calories=1400),
        CalorieEntry(date=DAY, calories=None),
        CalorieEntry(date=DAY + dt.timedelta(days=1), calories=2000),
    ]

    assert aggregate_calories(entries) == {DAY: 2200.0, DAY + dt.timedelta(days=1): 2000.0}


def test_daily_axis_ends_today():
    assert daily_axis(DAY, 3) == [dt.date(2025, 1, 8), dt.date(2025, 1, 9), DAY]
    assert daily_axis(DAY, 0) == []


def test_build_daily_observations_fills_the_axis():
    axis = daily_axis(DAY, 3)
    weights = [metrics_row(80.0, day=dt.date(2025, 1, 9)), metrics_row(75.0, day=dt.date(2025, 1, 1))]
    calories = [CalorieEntry(date=DAY, calories=2100)]

    observations = build_daily_observations(axis, weights, calories)

    assert [o.date for o in observations] == axis
    assert [o.weight for o in observations] == [None, 80.0, None]
    assert [o.calories_consumed for o in observations] == [None, None, 2100.0]


def test_ensure_consecutive_accepts_dense_axis():
    ensure_consecutive(daily_axis(DAY, 14))
    ensure_consecutive([])


@pytest.mark.parametrize(
    "days",
    [
        [dt.date(2025, 1, 8), dt.date(2025, 1, 10)],
        [DAY, DAY],
        [DAY, dt.date(2025, 1, 9)],
    ],
)
def test_ensure_consecutive_rejects_gaps(days):
    with pytest.raises(SeriesGapError):
        ensure_consecutive(days)


def test_latest_submission_per_day_wins():
    later = WellnessCheckin(date=DAY, score=80, submitted_at=dt.datetime(2025, 1, 10, 20, tzinfo=dt.UTC))
    earlier = WellnessCheckin(date=DAY, score=40, submitted_at=dt.datetime(2025, 1, 10, 7, tzinfo=dt.UTC))
    previous_day = WellnessCheckin(date=dt.date(2025, 1, 9), score=55)

    collapsed = latest_per_day([later, previous_day, earlier])

    assert [c.score for c in collapsed] == [55, 80]


def test_latest_per_day_falls_back_to_input_order():
    first = WellnessCheckin(date=DAY, score=40)
    second = WellnessCheckin(date=DAY, score=60)

    assert latest_per_day([first, second]) == [second]


def test_readiness_record_key():
    assert readiness_record_key("athlete-1", dt.date(2025, 1, 5)) == "athlete-1:2025-01-05"
