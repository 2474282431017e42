"""Adaptive TDEE estimation from weight trend and caloric intake.

Body weight is smoothed with an EMA (alpha 0.1) to filter water, glycogen
and gut-content noise before solving the energy balance:

    daily surplus/deficit = (start_trend - end_trend) * 7700 / actual_days
    TDEE = average_intake + daily surplus/deficit

If weight fell, the realized deficit is added back to intake; if it rose,
the stored surplus is subtracted. actual_days is the span between the
first and last *raw* weigh-in, not the calendar window.

Rules:
- < 3 distinct days of weight OR calories → confidence "insufficient",
  derived fields None, chart data still returned
- Confidence high (>= 10 days of both), medium (>= 7), else low
- Average intake is rounded to whole kcal before the energy balance;
  trend and weekly-change values stay unrounded
"""

from __future__ import annotations

from collections.abc import Sequence

from loguru import logger

from athlete_analytics.core.rounding import round_int, round_to_step
from athlete_analytics.metrics.reconciliation import ensure_consecutive
from athlete_analytics.metrics.trend import smooth_aligned
from athlete_analytics.models.observations import DailyObservation, Goal
from athlete_analytics.models.results import (
    CoachingAction,
    Confidence,
    GoalCompliance,
    Recommendation,
    StallDetection,
    TDEEResult,
    WeightTrendPoint,
)

KCAL_PER_KG = 7700.0
DEFAULT_EMA_ALPHA = 0.1
MIN_DATA_DAYS = 3
HIGH_CONFIDENCE_DAYS = 10
MEDIUM_CONFIDENCE_DAYS = 7

CUT_DEFICIT_KCAL = 550
BULK_SURPLUS_KCAL = 275
MIN_CUT_CALORIES = 1200
TARGET_ROUNDING_KCAL = 50

STALL_MIN_WEIGHT_DAYS = 10
STALL_MIN_WEEKS = 2
CUT_STALL_KG_PER_WEEK = 0.1
BULK_STALL_KG_PER_WEEK = 0.05
CUT_STALL_ADJUSTMENT = -150
BULK_STALL_ADJUSTMENT = 100

COMPLIANCE_TOLERANCE_PCT = 5.0
OFF_TARGET_PCT = 10.0
TREND_STABLE_KG = 0.1


def _confidence(days_with_weight: int, days_with_calories: int) -> Confidence:
    if days_with_weight >= HIGH_CONFIDENCE_DAYS and days_with_calories >= HIGH_CONFIDENCE_DAYS:
        return "high"
    if days_with_weight >= MEDIUM_CONFIDENCE_DAYS and days_with_calories >= MEDIUM_CONFIDENCE_DAYS:
        return "medium"
    return "low"


def build_recommendation(tdee: int, goal: Goal) -> Recommendation:
    """Goal-specific calorie target, rounded to the nearest 50 kcal.

    cut → TDEE - 550 (~0.5 kg/week loss), never below 1200
    bulk → TDEE + 275 (~0.25 kg/week gain)
    maintain → TDEE
    """
    if goal == Goal.CUT:
        target = max(round_to_step(tdee - CUT_DEFICIT_KCAL, TARGET_ROUNDING_KCAL), MIN_CUT_CALORIES)
        return Recommendation(goal=goal, target_calories=target, weekly_change=-0.5, message=f"To lose 0.5 kg/week, target {target:,} kcal")
    if goal == Goal.BULK:
        target = round_to_step(tdee + BULK_SURPLUS_KCAL, TARGET_ROUNDING_KCAL)
        return Recommendation(goal=goal, target_calories=target, weekly_change=0.25, message=f"To gain 0.25 kg/week, target {target:,} kcal")
    target = round_to_step(tdee, TARGET_ROUNDING_KCAL)
    return Recommendation(goal=goal, target_calories=target, weekly_change=0.0, message=f"To maintain, target {target:,} kcal")


def detect_stall(
    goal: Goal,
    weight_change_per_week: float | None,
    actual_days: int,
    days_with_weight: int,
) -> StallDetection:
    """Flag a multi-week plateau during a cut or bulk.

    Rules:
        - Only evaluated for cut/bulk with >= 10 days of weight data
        - At least 2 full weeks (floor(actual_days / 7)) must have elapsed
        - cut: |change| < 0.1 kg/week → suggest -150 kcal
        - bulk: |change| < 0.05 kg/week → suggest +100 kcal
    """
    if goal == Goal.MAINTAIN or weight_change_per_week is None or days_with_weight < STALL_MIN_WEIGHT_DAYS:
        return StallDetection()

    threshold = CUT_STALL_KG_PER_WEEK if goal == Goal.CUT else BULK_STALL_KG_PER_WEEK
    stall_weeks = actual_days // 7
    if abs(weight_change_per_week) >= threshold or stall_weeks < STALL_MIN_WEEKS:
        return StallDetection()

    adjustment = CUT_STALL_ADJUSTMENT if goal == Goal.CUT else BULK_STALL_ADJUSTMENT
    action = "Reduce by 150" if goal == Goal.CUT else "Add 100"
    return StallDetection(
        is_stalling=True,
        stall_weeks=stall_weeks,
        suggested_adjustment=adjustment,
        adjustment_message=f"Weight stable for {stall_weeks} weeks. {action} kcal.",
    )


def check_compliance(average_intake: float | None, target_calories: int | None) -> GoalCompliance | None:
    """Compare average intake with the target; compliant within ±5%."""
    if not target_calories or average_intake is None:
        return None

    variance = (average_intake - target_calories) / target_calories * 100
    is_compliant = abs(variance) <= COMPLIANCE_TOLERANCE_PCT
    if is_compliant:
        message = "On track!"
    else:
        direction = "Over" if variance > 0 else "Under"
        message = f"{direction} target by {round_int(abs(variance))}%"

    return GoalCompliance(
        is_compliant=is_compliant,
        target_calories=target_calories,
        actual_average=average_intake,
        variance=variance,
        message=message,
    )


def suggest_coaching_action(
    goal: Goal,
    weight_change_per_week: float | None,
    tdee: int | None,
    current_intake: float | None,
) -> CoachingAction | None:
    """Single most relevant nutrition nudge for the coach, if any.

    Rate-of-change rules come first; otherwise intake more than 10% away
    from the goal target is reported.
    """
    if weight_change_per_week is None or tdee is None:
        return None

    abs_change = abs(weight_change_per_week)

    if goal == Goal.CUT:
        if abs_change < 0.15 and weight_change_per_week >= -0.15:
            return CoachingAction(
                type="suggestion",
                title="Plateau detected",
                message=f"Weekly loss only {abs_change:.2f} kg. Reduce by 150 kcal.",
                adjustment=-150,
            )
        if weight_change_per_week < -1.0:
            return CoachingAction(
                type="warning",
                title="Losing too fast",
                message=f"Losing {abs_change:.1f} kg/week. Add 200 kcal to preserve lean mass.",
                adjustment=200,
            )

    if goal == Goal.BULK:
        if abs_change < 0.08 and weight_change_per_week <= 0.08:
            return CoachingAction(
                type="suggestion",
                title="Insufficient gain",
                message="Add 100 kcal to support muscle gain.",
                adjustment=100,
            )
        if weight_change_per_week > 0.5:
            return CoachingAction(
                type="warning",
                title="Excessive surplus",
                message=f"Gaining {weight_change_per_week:.1f} kg/week. Reduce by 150 kcal.",
                adjustment=-150,
            )

    if current_intake is not None and tdee > 0:
        targets = {Goal.CUT: tdee - CUT_DEFICIT_KCAL, Goal.MAINTAIN: tdee, Goal.BULK: tdee + BULK_SURPLUS_KCAL}
        target = targets[goal]
        variance = (current_intake - target) / target * 100 if target else 0.0
        if abs(variance) > OFF_TARGET_PCT:
            direction = "above" if variance > 0 else "below"
            return CoachingAction(
                type="info",
                title="Intake off target",
                message=f"You are {round_int(abs(variance))}% {direction} target.",
            )

    return None


def _insufficient(
    *,
    confidence: Confidence,
    total_days: int,
    days_with_weight: int,
    days_with_calories: int,
    weight_data: tuple[WeightTrendPoint, ...],
) -> TDEEResult:
    return TDEEResult(
        estimated_tdee=None,
        confidence=confidence,
        total_days=total_days,
        days_with_weight=days_with_weight,
        days_with_calories=days_with_calories,
        weight_data=weight_data,
    )


def estimate_tdee(
    observations: Sequence[DailyObservation],
    goal: Goal = Goal.CUT,
    *,
    kcal_per_kg: float = KCAL_PER_KG,
    alpha: float = DEFAULT_EMA_ALPHA,
    min_days: int = MIN_DATA_DAYS,
) -> TDEEResult:
    """Estimate maintenance calories and derived coaching outputs.

    Args:
        observations: Dense daily axis (consecutive dates, oldest first)
                      with reconciled weight and summed calories per day
        goal: Athlete goal driving target, stall and compliance checks
        kcal_per_kg: Energy density of body-mass change
        alpha: Weight trend smoothing factor
        min_days: Minimum distinct days of weight and of calories

    Returns:
        TDEEResult; an insufficient-data result is a normal outcome

    Raises:
        SeriesGapError: If observations are not a consecutive daily axis
    """
    ensure_consecutive([o.date for o in observations])

    raw_weights = [o.weight for o in observations]
    raw_calories = [o.calories_consumed for o in observations]
    trend = smooth_aligned(raw_weights, alpha)

    weight_data = tuple(
        WeightTrendPoint(date=o.date, day_index=index + 1, raw_weight=o.weight, trend_weight=trend_value)
        for index, (o, trend_value) in enumerate(zip(observations, trend, strict=True))
        if trend_value is not None
    )

    weight_indices = [i for i, w in enumerate(raw_weights) if w is not None]
    calorie_values = [c for c in raw_calories if c is not None]
    days_with_weight = len(weight_indices)
    days_with_calories = len(calorie_values)
    total_days = len(observations)

    positive_trend = [t for t in trend if t is not None and t > 0]

    if days_with_weight < min_days or days_with_calories < min_days or len(positive_trend) < 2:
        logger.debug(
            f"[TDEE] Insufficient data: days_with_weight={days_with_weight}, "
            f"days_with_calories={days_with_calories}, min_days={min_days}"
        )
        return _insufficient(
            confidence="insufficient",
            total_days=total_days,
            days_with_weight=days_with_weight,
            days_with_calories=days_with_calories,
            weight_data=weight_data,
        )

    average_intake = round_int(sum(calorie_values) / days_with_calories)

    start_trend = positive_trend[0]
    end_trend = positive_trend[-1]
    actual_days = max(1, weight_indices[-1] - weight_indices[0])

    weight_change = end_trend - start_trend
    weight_change_per_week = weight_change / actual_days * 7
    estimated_tdee = round_int(average_intake + (start_trend - end_trend) * kcal_per_kg / actual_days)

    if weight_change < -TREND_STABLE_KG:
        trend_direction = "down"
    elif weight_change > TREND_STABLE_KG:
        trend_direction = "up"
    else:
        trend_direction = "stable"

    recommendation = build_recommendation(estimated_tdee, goal)

    result = TDEEResult(
        estimated_tdee=estimated_tdee,
        confidence=_confidence(days_with_weight, days_with_calories),
        start_trend=start_trend,
        end_trend=end_trend,
        weight_change=weight_change,
        weight_change_per_week=weight_change_per_week,
        weight_change_percent=weight_change_per_week / end_trend * 100,
        average_intake=average_intake,
        actual_days=actual_days,
        total_days=total_days,
        days_with_weight=days_with_weight,
        days_with_calories=days_with_calories,
        weight_data=weight_data,
        recommendation=recommendation,
        stall_detection=detect_stall(goal, weight_change_per_week, actual_days, days_with_weight),
        goal_compliance=check_compliance(average_intake, recommendation.target_calories),
        coaching_action=suggest_coaching_action(goal, weight_change_per_week, estimated_tdee, average_intake),
        trend_direction=trend_direction,
    )

    logger.debug(
        f"[TDEE] Estimated tdee={estimated_tdee} confidence={result.confidence} "
        f"change_per_week={weight_change_per_week:.3f} goal={goal}"
    )
    return result
