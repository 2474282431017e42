"""Athlete risk flagging and roster triage.

Every applicable flag is emitted independently; the overall risk level is
the most severe one. Roster triage orders athletes by that level (stable,
so equal levels keep their input order) and splits them into those who
need attention and those who do not.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date

from loguru import logger

from athlete_analytics.metrics.workload import ACWR_DETRAINING_BELOW, ACWR_OPTIMAL_MAX, ACWR_WARNING_MAX
from athlete_analytics.models.observations import InjuryRecord, SessionRecord, WellnessCheckin
from athlete_analytics.models.results import (
    AthleteRiskSummary,
    FlagSeverity,
    RiskAssessment,
    RiskFlag,
    RiskFlagType,
    RiskLevel,
    RosterTriage,
)

LOW_READINESS_THRESHOLD = 40
HIGH_STRESS_ABOVE = 7
LOW_MOOD_AT_OR_BELOW = 4
LOW_DIGESTION_AT_OR_BELOW = 4
RPE_SPIKE_ABOVE = 9

SEVERITY_RANK: dict[FlagSeverity, int] = {
    FlagSeverity.CRITICAL: 0,
    FlagSeverity.HIGH: 1,
    FlagSeverity.MODERATE: 2,
    FlagSeverity.INFO: 3,
}

RISK_LEVEL_RANK: dict[RiskLevel, int] = {
    RiskLevel.HIGH: 0,
    RiskLevel.MODERATE: 1,
    RiskLevel.LOW: 2,
    RiskLevel.OPTIMAL: 3,
}

ATTENTION_LEVELS = frozenset({RiskLevel.HIGH, RiskLevel.MODERATE})


def acwr_flags(acwr: float | None) -> list[RiskFlag]:
    if acwr is None:
        return []
    value = f"ACWR {acwr:.2f}"
    if acwr > ACWR_WARNING_MAX:
        return [
            RiskFlag(
                type=RiskFlagType.HIGH_INJURY_RISK,
                severity=FlagSeverity.HIGH,
                label="High Injury Risk",
                value=value,
                details="Acute workload significantly exceeds chronic capacity",
            )
        ]
    if acwr > ACWR_OPTIMAL_MAX:
        return [
            RiskFlag(
                type=RiskFlagType.OVERLOAD_WARNING,
                severity=FlagSeverity.MODERATE,
                label="Overload Warning",
                value=value,
                details="Approaching injury risk zone",
            )
        ]
    if acwr < ACWR_DETRAINING_BELOW:
        return [
            RiskFlag(
                type=RiskFlagType.DETRAINING_RISK,
                severity=FlagSeverity.MODERATE,
                label="Detraining Risk",
                value=value,
                details="Training load may be insufficient",
            )
        ]
    return []


def readiness_flags(readiness: int | None, threshold: int = LOW_READINESS_THRESHOLD) -> list[RiskFlag]:
    if readiness is None or readiness >= threshold:
        return []
    return [
        RiskFlag(
            type=RiskFlagType.LOW_RECOVERY,
            severity=FlagSeverity.HIGH,
            label="Low Recovery",
            value=f"Readiness {readiness}/100",
            details="Athlete reports poor recovery status",
        )
    ]


def checkin_flags(checkin: WellnessCheckin | None) -> list[RiskFlag]:
    """Pain, stress, mood and digestion signals from the latest check-in."""
    if checkin is None:
        return []

    flags: list[RiskFlag] = []
    if checkin.reports_pain:
        zones = sorted(zone for zone, level in checkin.soreness_map.items() if level > 0)
        flags.append(
            RiskFlag(
                type=RiskFlagType.PAIN_REPORTED,
                severity=FlagSeverity.HIGH,
                label="Pain Reported",
                value=", ".join(zones) if zones else "Pain",
                details=f"Reported on {checkin.date.isoformat()}",
            )
        )
    if checkin.stress_level is not None and checkin.stress_level > HIGH_STRESS_ABOVE:
        flags.append(
            RiskFlag(
                type=RiskFlagType.HIGH_STRESS,
                severity=FlagSeverity.MODERATE,
                label="High Stress",
                value=f"Stress {checkin.stress_level:g}/10",
            )
        )
    if checkin.mood is not None and checkin.mood <= LOW_MOOD_AT_OR_BELOW:
        flags.append(
            RiskFlag(
                type=RiskFlagType.LOW_MOOD,
                severity=FlagSeverity.MODERATE,
                label="Low Mood",
                value=f"Mood {checkin.mood:g}/10",
            )
        )
    if checkin.digestion is not None and checkin.digestion <= LOW_DIGESTION_AT_OR_BELOW:
        flags.append(
            RiskFlag(
                type=RiskFlagType.DIGESTION_ISSUES,
                severity=FlagSeverity.MODERATE,
                label="Digestion Issues",
                value=f"Digestion {checkin.digestion:g}/10",
            )
        )
    return flags


def injury_flags(injuries: Iterable[InjuryRecord]) -> list[RiskFlag]:
    """One flag per open injury, whatever else is going on."""
    return [
        RiskFlag(
            type=RiskFlagType.ACTIVE_INJURY,
            severity=FlagSeverity.CRITICAL if injury.status == "active" else FlagSeverity.HIGH,
            label="Active Injury",
            value=injury.body_zone,
            details=injury.description or f"{injury.status} injury",
        )
        for injury in injuries
        if injury.is_open
    ]


def rpe_spike_flags(sessions: Iterable[SessionRecord]) -> list[RiskFlag]:
    """Flag the most recent session rated above RPE 9."""
    spikes = [
        s
        for s in sessions
        if s.completed_at is not None and s.perceived_exertion is not None and s.perceived_exertion > RPE_SPIKE_ABOVE
    ]
    if not spikes:
        return []
    latest = max(spikes, key=lambda s: s.completed_at)
    return [
        RiskFlag(
            type=RiskFlagType.RPE_SPIKE,
            severity=FlagSeverity.MODERATE,
            label="RPE Spike",
            value=f"RPE {latest.perceived_exertion:g}",
            details="High intensity session - check recovery status",
        )
    ]


def no_checkin_flag(last_checkin_date: date | None) -> RiskFlag:
    return RiskFlag(
        type=RiskFlagType.NO_CHECKIN,
        severity=FlagSeverity.INFO,
        label="No Check-in",
        value="No Check-in",
        details=f"Last: {last_checkin_date.isoformat()}" if last_checkin_date else "Never checked in",
    )


def risk_level_from_flags(flags: Sequence[RiskFlag], *, has_data: bool) -> RiskLevel:
    """Overall level: the most severe flag, else optimal, else low when there is no data.

    Informational flags never raise the level.
    """
    severities = {flag.severity for flag in flags}
    if severities & {FlagSeverity.CRITICAL, FlagSeverity.HIGH}:
        return RiskLevel.HIGH
    if FlagSeverity.MODERATE in severities:
        return RiskLevel.MODERATE
    if not has_data:
        return RiskLevel.LOW
    return RiskLevel.OPTIMAL


def assess_risk(
    acwr: float | None,
    latest_readiness: int | None,
    *,
    checkin: WellnessCheckin | None = None,
    injuries: Iterable[InjuryRecord] = (),
    sessions: Iterable[SessionRecord] = (),
    has_checkin_today: bool | None = None,
    last_checkin_date: date | None = None,
    low_readiness_threshold: int = LOW_READINESS_THRESHOLD,
) -> RiskAssessment:
    """Combine every available signal into ordered flags and an overall level.

    Args:
        acwr: Rolling-average ACWR, None when undefined
        latest_readiness: Most recent readiness score, None if never recorded
        checkin: Latest check-in for pain/stress/mood/digestion signals
        injuries: Injury records; healed ones are ignored
        sessions: Sessions in the analysis window, for RPE spikes
        has_checkin_today: False adds an informational NoCheckin flag;
                           None means unknown and adds nothing
        last_checkin_date: Shown in the NoCheckin details

    Returns:
        RiskAssessment with flags ordered most severe first (stable)
    """
    flags = [
        *acwr_flags(acwr),
        *readiness_flags(latest_readiness, low_readiness_threshold),
        *checkin_flags(checkin),
        *rpe_spike_flags(sessions),
        *injury_flags(injuries),
    ]
    if has_checkin_today is False:
        flags.append(no_checkin_flag(last_checkin_date))

    ordered = tuple(sorted(flags, key=lambda flag: SEVERITY_RANK[flag.severity]))
    has_data = acwr is not None or latest_readiness is not None
    return RiskAssessment(risk_level=risk_level_from_flags(ordered, has_data=has_data), risk_flags=ordered)


def triage(summaries: Iterable[AthleteRiskSummary]) -> RosterTriage:
    """Order a roster by risk (high first, stable) and split it by attention need."""
    ordered = tuple(sorted(summaries, key=lambda summary: RISK_LEVEL_RANK[summary.risk_level]))
    needs_attention = tuple(s for s in ordered if s.risk_level in ATTENTION_LEVELS)
    healthy = tuple(s for s in ordered if s.risk_level not in ATTENTION_LEVELS)

    logger.info(f"[TRIAGE] Roster triaged: total={len(ordered)}, needs_attention={len(needs_attention)}, healthy={len(healthy)}")

    return RosterTriage(all_athletes=ordered, needs_attention=needs_attention, healthy=healthy)
