"""Output records returned by the analytics engine.

Plain, serializable snapshots with no behaviour. Values are stored
unrounded unless the field is documented as a display integer, so a JSON
round-trip preserves them exactly.
"""

from __future__ import annotations

from datetime import date
from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from athlete_analytics.models.observations import Goal

Confidence = Literal["high", "medium", "low", "insufficient"]
ReadinessBand = Literal["high", "moderate", "low"]
MetricStatus = Literal["optimal", "low", "high"]


class AcwrZone(StrEnum):
    INSUFFICIENT_DATA = "insufficient_data"
    DETRAINING = "detraining"
    OPTIMAL = "optimal"
    WARNING = "warning"
    HIGH_RISK = "high_risk"


class RiskLevel(StrEnum):
    HIGH = "high"
    MODERATE = "moderate"
    LOW = "low"
    OPTIMAL = "optimal"


class FlagSeverity(StrEnum):
    CRITICAL = "critical"
    HIGH = "high"
    MODERATE = "moderate"
    INFO = "info"


class RiskFlagType(StrEnum):
    HIGH_INJURY_RISK = "high_injury_risk"
    OVERLOAD_WARNING = "overload_warning"
    DETRAINING_RISK = "detraining_risk"
    LOW_RECOVERY = "low_recovery"
    NO_CHECKIN = "no_checkin"
    PAIN_REPORTED = "pain_reported"
    HIGH_STRESS = "high_stress"
    LOW_MOOD = "low_mood"
    DIGESTION_ISSUES = "digestion_issues"
    RPE_SPIKE = "rpe_spike"
    ACTIVE_INJURY = "active_injury"


class AcwrResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    ratio: float | None
    acute_load: float
    chronic_load: float
    zone: AcwrZone


class ReadinessResult(BaseModel):
    """A readiness score tagged with the strategy that produced it."""

    model_config = ConfigDict(frozen=True)

    strategy: Literal["mvp", "composite"]
    score: int = Field(ge=0, le=100)
    band: ReadinessBand
    components: dict[str, float] = Field(default_factory=dict)
    hrv_status: MetricStatus | None = None
    rhr_status: MetricStatus | None = None


class WeightTrendPoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    date: date
    day_index: int = Field(ge=1)
    raw_weight: float | None
    trend_weight: float


class Recommendation(BaseModel):
    model_config = ConfigDict(frozen=True)

    goal: Goal
    target_calories: int
    weekly_change: float
    message: str


class StallDetection(BaseModel):
    model_config = ConfigDict(frozen=True)

    is_stalling: bool = False
    stall_weeks: int = 0
    suggested_adjustment: int | None = None
    adjustment_message: str | None = None


class GoalCompliance(BaseModel):
    model_config = ConfigDict(frozen=True)

    is_compliant: bool
    target_calories: int
    actual_average: float
    variance: float
    message: str


class CoachingAction(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["warning", "suggestion", "info"]
    title: str
    message: str
    adjustment: int | None = None


class TDEEResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    estimated_tdee: int | None
    confidence: Confidence
    start_trend: float | None = None
    end_trend: float | None = None
    weight_change: float | None = None
    weight_change_per_week: float | None = None
    weight_change_percent: float | None = None
    average_intake: int | None = None
    actual_days: int | None = None
    total_days: int
    days_with_weight: int
    days_with_calories: int
    weight_data: tuple[WeightTrendPoint, ...] = ()
    recommendation: Recommendation | None = None
    stall_detection: StallDetection = Field(default_factory=StallDetection)
    goal_compliance: GoalCompliance | None = None
    coaching_action: CoachingAction | None = None
    trend_direction: Literal["up", "down", "stable"] = "stable"


class RiskFlag(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: RiskFlagType
    severity: FlagSeverity
    label: str
    value: str
    details: str | None = None


class RiskAssessment(BaseModel):
    model_config = ConfigDict(frozen=True)

    risk_level: RiskLevel
    risk_flags: tuple[RiskFlag, ...] = ()

    @property
    def primary_flag(self) -> RiskFlag | None:
        return self.risk_flags[0] if self.risk_flags else None


class AthleteRiskSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    athlete_id: str
    athlete_name: str | None = None
    acwr: float | None
    acute_load: float
    chronic_load: float
    acwr_zone: AcwrZone
    risk_level: RiskLevel
    risk_flags: tuple[RiskFlag, ...] = ()
    primary_flag: RiskFlag | None = None
    latest_readiness: int | None = None
    readiness_date: date | None = None
    daily_load_history: tuple[float, ...] = ()


class RosterTriage(BaseModel):
    model_config = ConfigDict(frozen=True)

    all_athletes: tuple[AthleteRiskSummary, ...] = ()
    needs_attention: tuple[AthleteRiskSummary, ...] = ()
    healthy: tuple[AthleteRiskSummary, ...] = ()
