"""Per-athlete analysis and roster triage.

Called once all raw slices for an athlete (sessions, check-ins, readiness
scores, injuries) have been fetched. Performs no I/O: every call rebuilds
its results from the supplied rows.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, tzinfo

from loguru import logger

from athlete_analytics.config.settings import settings
from athlete_analytics.core.clock import Clock, SystemClock, local_date
from athlete_analytics.core.rounding import round_int
from athlete_analytics.metrics.nutrition import estimate_tdee
from athlete_analytics.metrics.reconciliation import (
    build_daily_observations,
    daily_axis,
    latest_per_day,
    reconcile_by_priority,
)
from athlete_analytics.metrics.risk import assess_risk, triage
from athlete_analytics.metrics.workload import CHRONIC_WINDOW_DAYS, compute_acwr, daily_loads
from athlete_analytics.models.observations import (
    AthleteDataSlice,
    CalorieEntry,
    DataSource,
    Goal,
    SourcedValue,
    WellnessCheckin,
)
from athlete_analytics.models.results import AthleteRiskSummary, RosterTriage, TDEEResult


def latest_readiness(
    scores: Iterable[SourcedValue],
    checkins: Iterable[WellnessCheckin] = (),
) -> tuple[int | None, date | None]:
    """Most recent readiness score and its date.

    Check-in scores count as daily_readiness rows; for a given date the
    daily_metrics value wins.
    """
    rows = list(scores)
    rows.extend(
        SourcedValue(date=checkin.date, source=DataSource.DAILY_READINESS, value=checkin.score)
        for checkin in checkins
        if checkin.score is not None
    )
    by_day = reconcile_by_priority(rows)
    if not by_day:
        return None, None
    last_day = max(by_day)
    return round_int(by_day[last_day]), last_day


def window_slice(data: AthleteDataSlice, start: date, end: date, tz: tzinfo) -> AthleteDataSlice:
    """Drop rows dated outside [start, end] so stale signals never raise risk."""
    return data.model_copy(
        update={
            "sessions": tuple(
                s for s in data.sessions if s.completed_at is not None and start <= local_date(s.completed_at, tz) <= end
            ),
            "checkins": tuple(c for c in data.checkins if start <= c.date <= end),
            "readiness_scores": tuple(r for r in data.readiness_scores if start <= r.date <= end),
        }
    )


def has_checked_in(day: date, checkins: Iterable[WellnessCheckin], scores: Iterable[SourcedValue]) -> bool:
    """A check-in row or any stored readiness score for the day counts."""
    return any(c.date == day for c in checkins) or any(r.date == day and r.value is not None for r in scores)


def last_checkin_date(data: AthleteDataSlice, today: date) -> date | None:
    """Most recent day up to today with a check-in or readiness score, however old."""
    days = [c.date for c in data.checkins if c.date <= today]
    days.extend(r.date for r in data.readiness_scores if r.value is not None and r.date <= today)
    return max(days, default=None)


def summarize_athlete(data: AthleteDataSlice, *, clock: Clock | None = None) -> AthleteRiskSummary:
    """Build the risk summary for one athlete.

    Only rows inside the 28-day window ending today are considered.

    Args:
        data: All rows fetched for the athlete
        clock: Source of "today" and the local zone (default: system clock)

    Returns:
        AthleteRiskSummary with a 28-day load history, ACWR and ordered flags
    """
    clock = clock or SystemClock()
    today = clock.today()
    window = daily_axis(today, CHRONIC_WINDOW_DAYS)
    last_checkin = last_checkin_date(data, today)
    data = window_slice(data, window[0], today, clock.tz)

    history = daily_loads(data.sessions, CHRONIC_WINDOW_DAYS, today=today, tz=clock.tz)
    acwr = compute_acwr(history)

    checkins = latest_per_day(data.checkins)
    latest_checkin = checkins[-1] if checkins else None
    readiness, readiness_day = latest_readiness(data.readiness_scores, checkins)

    assessment = assess_risk(
        acwr.ratio,
        readiness,
        checkin=latest_checkin,
        injuries=data.injuries,
        sessions=data.sessions,
        has_checkin_today=has_checked_in(today, checkins, data.readiness_scores),
        last_checkin_date=last_checkin,
        low_readiness_threshold=settings.low_readiness_threshold,
    )

    logger.debug(
        f"[RISK] athlete_id={data.athlete_id} acwr={acwr.ratio} readiness={readiness} "
        f"risk_level={assessment.risk_level} flags={len(assessment.risk_flags)}"
    )

    return AthleteRiskSummary(
        athlete_id=data.athlete_id,
        athlete_name=data.athlete_name,
        acwr=acwr.ratio,
        acute_load=acwr.acute_load,
        chronic_load=acwr.chronic_load,
        acwr_zone=acwr.zone,
        risk_level=assessment.risk_level,
        risk_flags=assessment.risk_flags,
        primary_flag=assessment.primary_flag,
        latest_readiness=readiness,
        readiness_date=readiness_day,
        daily_load_history=tuple(history),
    )


def triage_roster(roster: Iterable[AthleteDataSlice], *, clock: Clock | None = None) -> RosterTriage:
    """Summarise every athlete on a coach's roster and rank them by risk.

    Each athlete only reads its own slice, so the order of evaluation does
    not matter; the output order is decided by triage().
    """
    clock = clock or SystemClock()
    summaries = [summarize_athlete(data, clock=clock) for data in roster]
    return triage(summaries)


def analyze_nutrition(
    weights: Iterable[SourcedValue],
    calories: Iterable[CalorieEntry],
    goal: Goal = Goal.CUT,
    *,
    clock: Clock | None = None,
) -> TDEEResult:
    """Reconcile raw weight/calorie rows over the lookback window and estimate TDEE."""
    clock = clock or SystemClock()
    axis = daily_axis(clock.today(), settings.tdee_lookback_days)
    observations = build_daily_observations(axis, weights, calories)
    return estimate_tdee(
        observations,
        goal,
        kcal_per_kg=settings.kcal_per_kg,
        alpha=settings.weight_ema_alpha,
        min_days=settings.tdee_min_days,
    )
