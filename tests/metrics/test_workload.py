import datetime as dt

import pytest

from athlete_analytics.errors import WindowLengthError
from athlete_analytics.metrics.workload import (
    classify_acwr,
    compute_acwr,
    compute_ewma_acwr,
    daily_loads,
    session_load,
)
from athlete_analytics.models.observations import SessionRecord
from athlete_analytics.models.results import AcwrZone

TODAY = dt.date(2025, 1, 28)


def make_session(
    *,
    days_ago: int,
    rpe: float | None = 6,
    minutes: float | None = 60,
    load: float | None = None,
    hour: int = 12,
) -> SessionRecord:
    return SessionRecord(
        completed_at=dt.datetime(2025, 1, 28, hour, tzinfo=dt.UTC) - dt.timedelta(days=days_ago),
        perceived_exertion=rpe,
        duration_seconds=minutes * 60 if minutes is not None else None,
        session_load=load,
    )


def test_session_load_prefers_explicit_value():
    assert session_load(make_session(days_ago=0, load=350)) == 350


def test_session_load_falls_back_to_srpe():
    assert session_load(make_session(days_ago=0, rpe=8, minutes=60)) == 480


def test_session_load_missing_factor_is_zero():
    assert session_load(make_session(days_ago=0, rpe=None)) == 0.0
    assert session_load(make_session(days_ago=0, minutes=None)) == 0.0


def test_daily_loads_is_dense_and_sums_same_day_sessions():
    sessions = [
        make_session(days_ago=0, load=100),
        make_session(days_ago=0, load=50, hour=18),
        make_session(days_ago=2, load=80),
        make_session(days_ago=40, load=999),
        SessionRecord(completed_at=None, session_load=500),
    ]

    loads = daily_loads(sessions, 7, today=TODAY, tz=dt.UTC)

    assert loads == [0.0, 0.0, 0.0, 0.0, 80.0, 0.0, 150.0]


def test_daily_loads_buckets_by_local_date():
    eastern = dt.timezone(dt.timedelta(hours=-5))
    late_evening_local = SessionRecord(
        completed_at=dt.datetime(2025, 1, 28, 2, tzinfo=dt.UTC),
        session_load=100,
    )

    loads = daily_loads([late_evening_local], 2, today=TODAY, tz=eastern)

    assert loads == [100.0, 0.0]


def test_acwr_undefined_below_full_window():
    result = compute_acwr([100.0] * 27)

    assert result.ratio is None
    assert result.zone == AcwrZone.INSUFFICIENT_DATA


def test_acwr_undefined_for_zero_chronic_load():
    result = compute_acwr([0.0] * 28)

    assert result.ratio is None
    assert result.chronic_load == 0.0


def test_acwr_uniform_load_is_exactly_one():
    result = compute_acwr([100.0] * 28)

    assert result.ratio == 1.0
    assert result.acute_load == 100.0
    assert result.chronic_load == 100.0
    assert result.zone == AcwrZone.OPTIMAL


def test_acwr_rejects_overlong_history():
    with pytest.raises(WindowLengthError):
        compute_acwr([100.0] * 29)


@pytest.mark.parametrize(
    ("recent_load", "expected_ratio", "expected_zone"),
    [
        (200.0, 1.6, AcwrZone.HIGH_RISK),
        (160.0, 1.39, AcwrZone.WARNING),
        (50.0, 0.57, AcwrZone.DETRAINING),
    ],
)
def test_acwr_load_changes(recent_load, expected_ratio, expected_zone):
    loads = [100.0] * 21 + [recent_load] * 7

    result = compute_acwr(loads)

    assert result.ratio == expected_ratio
    assert result.zone == expected_zone


@pytest.mark.parametrize(
    ("ratio", "zone"),
    [
        (None, AcwrZone.INSUFFICIENT_DATA),
        (0.79, AcwrZone.DETRAINING),
        (0.8, AcwrZone.OPTIMAL),
        (1.3, AcwrZone.OPTIMAL),
        (1.31, AcwrZone.WARNING),
        (1.5, AcwrZone.WARNING),
        (1.51, AcwrZone.HIGH_RISK),
    ],
)
def test_classify_acwr_band_edges(ratio, zone):
    assert classify_acwr(ratio) == zone


def test_ewma_acwr_needs_two_weeks():
    assert compute_ewma_acwr([100.0] * 13).ratio is None


def test_ewma_acwr_uniform_load():
    result = compute_ewma_acwr([100.0] * 28)

    assert result.ratio == 1.0
    assert result.zone == AcwrZone.OPTIMAL


def test_ewma_acwr_reacts_to_spike():
    result = compute_ewma_acwr([100.0] * 21 + [300.0] * 7)

    assert result.ratio is not None
    assert result.ratio > 1.5
    assert result.zone == AcwrZone.HIGH_RISK
