from athlete_analytics.models.observations import (
    AthleteDataSlice,
    CalorieEntry,
    CompositeReadinessInput,
    DailyObservation,
    DataSource,
    Goal,
    InjuryRecord,
    NutritionPlan,
    ReadinessInput,
    SessionRecord,
    SourcedValue,
    WellnessCheckin,
)
from athlete_analytics.models.results import (
    AcwrResult,
    AcwrZone,
    AthleteRiskSummary,
    FlagSeverity,
    ReadinessResult,
    RiskAssessment,
    RiskFlag,
    RiskFlagType,
    RiskLevel,
    RosterTriage,
    TDEEResult,
    WeightTrendPoint,
)

__all__ = [
    "AcwrResult",
    "AcwrZone",
    "AthleteDataSlice",
    "AthleteRiskSummary",
    "CalorieEntry",
    "CompositeReadinessInput",
    "DailyObservation",
    "DataSource",
    "FlagSeverity",
    "Goal",
    "InjuryRecord",
    "NutritionPlan",
    "ReadinessInput",
    "ReadinessResult",
    "RiskAssessment",
    "RiskFlag",
    "RiskFlagType",
    "RiskLevel",
    "RosterTriage",
    "SessionRecord",
    "SourcedValue",
    "TDEEResult",
    "WeightTrendPoint",
    "WellnessCheckin",
]
