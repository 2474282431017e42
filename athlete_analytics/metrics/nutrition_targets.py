"""Daily nutrition targets from the athlete's active plan.

Only one plan is in force at a time. Cycling plans switch between "on"
(training day) and "off" targets; any field a day target leaves out falls
back to the plan base value, then to the defaults.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Literal

from pydantic import BaseModel, ConfigDict

from athlete_analytics.models.observations import MacroTargets, NutritionPlan

DEFAULT_CALORIES = 2400.0
DEFAULT_PROTEIN_G = 180.0
DEFAULT_CARBS_G = 260.0
DEFAULT_FATS_G = 75.0
DEFAULT_WATER_ML = 2500.0


class DailyTargets(BaseModel):
    model_config = ConfigDict(frozen=True)

    calories: float
    protein_g: float
    carbs_g: float
    fats_g: float
    water_ml: float = DEFAULT_WATER_ML
    is_training_day: bool
    strategy_mode: Literal["static", "cycling_on_off"] = "static"
    strategy_type: str = "maintain"


def select_active_plan(plans: Iterable[NutritionPlan]) -> NutritionPlan | None:
    """Most recently created active plan, if any."""
    active = [plan for plan in plans if plan.active]
    if not active:
        return None
    return max(active, key=lambda plan: plan.created_at)


def _first_set(*values: float | None) -> float:
    # Zero is treated as unset, matching plans saved with empty numeric fields
    for value in values:
        if value:
            return value
    return values[-1] or 0.0


def resolve_daily_targets(plan: NutritionPlan | None, is_training_day: bool) -> DailyTargets:
    if plan is None:
        return DailyTargets(
            calories=DEFAULT_CALORIES,
            protein_g=DEFAULT_PROTEIN_G,
            carbs_g=DEFAULT_CARBS_G,
            fats_g=DEFAULT_FATS_G,
            is_training_day=is_training_day,
        )

    day = MacroTargets()
    if plan.strategy_mode == "cycling_on_off" and plan.cycling_targets is not None:
        day = plan.cycling_targets.on if is_training_day else plan.cycling_targets.off

    return DailyTargets(
        calories=_first_set(day.calories, plan.daily_calories, DEFAULT_CALORIES),
        protein_g=_first_set(day.protein_g, plan.protein_g, DEFAULT_PROTEIN_G),
        carbs_g=_first_set(day.carbs_g, plan.carbs_g, DEFAULT_CARBS_G),
        fats_g=_first_set(day.fats_g, plan.fats_g, DEFAULT_FATS_G),
        is_training_day=is_training_day,
        strategy_mode=plan.strategy_mode,
        strategy_type=plan.strategy_type,
    )
