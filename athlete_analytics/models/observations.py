"""Input records consumed by the analytics engine.

These are the shapes the surrounding application hands over after fetching
raw rows. All numeric fields are nullable: malformed values are treated as
absent rather than failing the computation.
"""

from __future__ import annotations

import math
from datetime import date, datetime
from enum import StrEnum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator

from athlete_analytics.core.rounding import round_int


def parse_optional_number(value: Any) -> float | None:
    """Coerce a raw numeric field, mapping anything unusable to None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(number):
        return None
    return number


OptionalNumber = Annotated[float | None, BeforeValidator(parse_optional_number)]

MAX_SORENESS_LEVEL = 3

SorenessLevel = Annotated[int, Field(ge=0, le=MAX_SORENESS_LEVEL)]


class DataSource(StrEnum):
    """Tables that can report the same daily value."""

    DAILY_METRICS = "daily_metrics"
    DAILY_READINESS = "daily_readiness"


# Highest priority first: a later source in this tuple never overrides an earlier one.
DEFAULT_SOURCE_PRIORITY: tuple[DataSource, ...] = (
    DataSource.DAILY_METRICS,
    DataSource.DAILY_READINESS,
)


class Goal(StrEnum):
    CUT = "cut"
    MAINTAIN = "maintain"
    BULK = "bulk"


class SourcedValue(BaseModel):
    """A single daily value (weight, readiness score) tagged with its source table."""

    model_config = ConfigDict(frozen=True)

    date: date
    source: DataSource
    value: OptionalNumber = None


class CalorieEntry(BaseModel):
    """One nutrition log row. Several rows per day are summed."""

    model_config = ConfigDict(frozen=True)

    date: date
    calories: OptionalNumber = None


class DailyObservation(BaseModel):
    """Reconciled weight and calorie intake for one calendar day."""

    model_config = ConfigDict(frozen=True)

    date: date
    weight: OptionalNumber = None
    calories_consumed: OptionalNumber = None


class SessionRecord(BaseModel):
    """A completed training session."""

    model_config = ConfigDict(frozen=True)

    completed_at: datetime | None = None
    perceived_exertion: OptionalNumber = None
    duration_seconds: OptionalNumber = None
    session_load: OptionalNumber = None


def _normalize_soreness(value: Any) -> Any:
    """Accept a list of zones, a {zone: bool} map or a {zone: level} map.

    Levels are clamped to 0..3; zones with a non-numeric level are dropped.
    """
    if value is None:
        return {}
    if isinstance(value, list | tuple | set | frozenset):
        return {str(zone): 1 for zone in value}
    if isinstance(value, dict):
        normalized: dict[str, int] = {}
        for zone, level in value.items():
            if isinstance(level, bool):
                normalized[str(zone)] = 1 if level else 0
                continue
            number = parse_optional_number(level)
            if number is None:
                continue
            normalized[str(zone)] = min(MAX_SORENESS_LEVEL, max(0, round_int(number)))
        return normalized
    return value


SorenessMap = Annotated[dict[str, SorenessLevel], BeforeValidator(_normalize_soreness)]


class ReadinessInput(BaseModel):
    """Inputs of the MVP daily check-in."""

    model_config = ConfigDict(frozen=True)

    sleep_hours: float = Field(default=7.0, ge=0, le=24)
    sleep_quality: Literal[1, 2, 3] = 2
    stress_level: float = Field(default=5, ge=0, le=10)
    has_pain: bool = False
    soreness_zones: frozenset[str] = frozenset()

    @field_validator("soreness_zones", mode="before")
    @classmethod
    def zones_from_map(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return frozenset(zone for zone, level in value.items() if level)
        return value


class CompositeReadinessInput(BaseModel):
    """Inputs of the physiological (HRV / resting HR) readiness formula.

    Subjective fields use 1-10 scales. Baseline statistics come from
    WellnessBaseline.from_history().
    """

    model_config = ConfigDict(frozen=True)

    hrv_today: OptionalNumber = None
    hrv_mean: float = 0.0
    hrv_sd: float = 0.0
    rhr_today: OptionalNumber = None
    rhr_mean: float = 0.0
    rhr_sd: float = 0.0
    energy: float = Field(default=7, ge=1, le=10)
    mood: float = Field(default=7, ge=1, le=10)
    stress: float = Field(default=3, ge=1, le=10)
    sleep_quality: float = Field(default=7, ge=1, le=10)
    has_baseline: bool = False


class WellnessCheckin(BaseModel):
    """A stored daily check-in row as read back from the data store."""

    model_config = ConfigDict(frozen=True)

    date: date
    score: OptionalNumber = None
    sleep_hours: OptionalNumber = None
    sleep_quality: OptionalNumber = None
    stress_level: OptionalNumber = None
    mood: OptionalNumber = None
    energy: OptionalNumber = None
    digestion: OptionalNumber = None
    has_pain: bool = False
    soreness_map: SorenessMap = Field(default_factory=dict)
    submitted_at: datetime | None = None

    @property
    def reports_pain(self) -> bool:
        return self.has_pain or any(level > 0 for level in self.soreness_map.values())


class InjuryRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    body_zone: str
    description: str | None = None
    status: Literal["active", "in_rehab", "healed"] = "active"

    @property
    def is_open(self) -> bool:
        return self.status != "healed"


class MacroTargets(BaseModel):
    """Partial macro targets; missing fields fall back to the plan base."""

    model_config = ConfigDict(frozen=True)

    calories: OptionalNumber = None
    protein_g: OptionalNumber = None
    carbs_g: OptionalNumber = None
    fats_g: OptionalNumber = None


class CyclingTargets(BaseModel):
    model_config = ConfigDict(frozen=True)

    on: MacroTargets = Field(default_factory=MacroTargets)
    off: MacroTargets = Field(default_factory=MacroTargets)


class NutritionPlan(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    active: bool = True
    created_at: datetime
    strategy_mode: Literal["static", "cycling_on_off"] = "static"
    strategy_type: str = "maintain"
    daily_calories: OptionalNumber = None
    protein_g: OptionalNumber = None
    carbs_g: OptionalNumber = None
    fats_g: OptionalNumber = None
    cycling_targets: CyclingTargets | None = None


class AthleteDataSlice(BaseModel):
    """Everything fetched for one athlete before an analysis call."""

    model_config = ConfigDict(frozen=True)

    athlete_id: str
    athlete_name: str | None = None
    sessions: tuple[SessionRecord, ...] = ()
    checkins: tuple[WellnessCheckin, ...] = ()
    readiness_scores: tuple[SourcedValue, ...] = ()
    injuries: tuple[InjuryRecord, ...] = ()
