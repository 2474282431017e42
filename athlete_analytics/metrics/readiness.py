"""Readiness scoring strategies.

Two formulas coexist and are surfaced on different screens, so they are
kept as separately named strategies and every result records which one
produced it:

- "mvp": sleep quality and inverted stress, 50% each. Sleep hours, pain
  and soreness are stored with the check-in but do not move this score.
- "composite": 60% HRV, 20% resting HR (both as z-scores against the
  athlete's own baseline), 20% subjective. Falls back to subjective-only
  while the athlete has no baseline yet.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from loguru import logger

from athlete_analytics.core.rounding import round_int
from athlete_analytics.models.observations import CompositeReadinessInput, ReadinessInput
from athlete_analytics.models.results import MetricStatus, ReadinessBand, ReadinessResult

SLEEP_QUALITY_SCORES: dict[int, int] = {1: 33, 2: 66, 3: 100}

HIGH_BAND_MIN = 70
MODERATE_BAND_MIN = 40

WEARABLES_BASELINE_DAYS = 14
READINESS_BASELINE_DAYS = 30

# Composite sub-score ceilings
HRV_MAX_POINTS = 60
RHR_MAX_POINTS = 20
SUBJECTIVE_MAX_POINTS = 20
Z_CLAMP = 2.0


def readiness_band(score: int) -> ReadinessBand:
    if score >= HIGH_BAND_MIN:
        return "high"
    if score >= MODERATE_BAND_MIN:
        return "moderate"
    return "low"


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


# ---------------------------------------------------------------------------
# Statistics helpers
# ---------------------------------------------------------------------------


def mean(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    return sum(values) / len(values)


def standard_deviation(values: Sequence[float]) -> float:
    """Population standard deviation (the window is treated as the population)."""
    if len(values) < 2:
        return 0.0
    avg = mean(values)
    return math.sqrt(mean([(v - avg) ** 2 for v in values]))


def z_score(current: float, avg: float, sd: float) -> float:
    """Distance from baseline in standard deviations; 0 when there is no variance."""
    if sd == 0:
        return 0.0
    return (current - avg) / sd


def metric_status_from_z(z: float) -> MetricStatus:
    if z <= -1:
        return "low"
    if z >= 1.5:
        return "high"
    return "optimal"


@dataclass(frozen=True)
class WellnessBaseline:
    """Rolling baseline of a wearable metric (HRV or resting HR)."""

    mean: float
    sd: float
    days: int

    @property
    def is_established(self) -> bool:
        return self.days >= WEARABLES_BASELINE_DAYS

    @classmethod
    def from_history(
        cls,
        values: Sequence[float | None],
        min_days: int = WEARABLES_BASELINE_DAYS,
        window_days: int = READINESS_BASELINE_DAYS,
    ) -> WellnessBaseline | None:
        """Baseline over the most recent window_days readings, None below min_days."""
        readings = [v for v in values[-window_days:] if v is not None]
        if len(readings) < min_days:
            return None
        return cls(mean=mean(readings), sd=standard_deviation(readings), days=len(readings))


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------


class ReadinessStrategy(Protocol):
    name: str

    def score(self, inputs) -> ReadinessResult: ...


class MvpReadinessStrategy:
    """Check-in formula: (sleep quality score * 0.5) + ((10 - stress) * 10 * 0.5)."""

    name = "mvp"

    def score(self, inputs: ReadinessInput) -> ReadinessResult:
        sleep_quality_score = SLEEP_QUALITY_SCORES[inputs.sleep_quality]
        stress_score = (10 - inputs.stress_level) * 10
        value = round_int(_clamp(sleep_quality_score * 0.5 + stress_score * 0.5, 0, 100))
        return ReadinessResult(
            strategy="mvp",
            score=value,
            band=readiness_band(value),
            components={"sleep_quality": sleep_quality_score * 0.5, "stress": stress_score * 0.5},
        )


def hrv_z_to_points(z: float) -> int:
    """z in [-2, 2] → [0, 60]; baseline (z = 0) is 30."""
    clamped = _clamp(z, -Z_CLAMP, Z_CLAMP)
    return round_int((clamped + Z_CLAMP) / (2 * Z_CLAMP) * HRV_MAX_POINTS)


def rhr_z_to_points(z: float) -> int:
    """Lower resting HR is better: z in [2, -2] → [0, 20]."""
    clamped = _clamp(-z, -Z_CLAMP, Z_CLAMP)
    return round_int((clamped + Z_CLAMP) / (2 * Z_CLAMP) * RHR_MAX_POINTS)


def subjective_to_points(energy: float, mood: float, stress: float, sleep_quality: float) -> int:
    """Weighted 1-10 subjective inputs → [0, 20]."""
    energy_norm = (energy - 1) / 9
    mood_norm = (mood - 1) / 9
    stress_norm = (10 - stress) / 9
    sleep_norm = (sleep_quality - 1) / 9

    weighted = energy_norm * 0.3 + mood_norm * 0.25 + stress_norm * 0.25 + sleep_norm * 0.2
    return round_int(weighted * SUBJECTIVE_MAX_POINTS)


class CompositeReadinessStrategy:
    """HRV / resting HR / subjective composite with baseline-aware fallback."""

    name = "composite"

    def score(self, inputs: CompositeReadinessInput) -> ReadinessResult:
        subjective = subjective_to_points(inputs.energy, inputs.mood, inputs.stress, inputs.sleep_quality)

        if not inputs.has_baseline:
            logger.debug("[READINESS] No HRV/RHR baseline yet, scoring subjective inputs only")
            scaled = round_int(subjective / SUBJECTIVE_MAX_POINTS * 100)
            return ReadinessResult(
                strategy="composite",
                score=scaled,
                band=readiness_band(scaled),
                components={"hrv": 0, "rhr": 0, "subjective": subjective},
                hrv_status="optimal",
                rhr_status="optimal",
            )

        hrv_points = HRV_MAX_POINTS // 2
        hrv_z = 0.0
        if inputs.hrv_today is not None and inputs.hrv_sd > 0:
            hrv_z = z_score(inputs.hrv_today, inputs.hrv_mean, inputs.hrv_sd)
            hrv_points = hrv_z_to_points(hrv_z)

        rhr_points = RHR_MAX_POINTS // 2
        rhr_z = 0.0
        if inputs.rhr_today is not None and inputs.rhr_sd > 0:
            rhr_z = z_score(inputs.rhr_today, inputs.rhr_mean, inputs.rhr_sd)
            rhr_points = rhr_z_to_points(rhr_z)

        total = int(_clamp(hrv_points + rhr_points + subjective, 0, 100))
        return ReadinessResult(
            strategy="composite",
            score=total,
            band=readiness_band(total),
            components={
                "hrv": hrv_points,
                "rhr": rhr_points,
                "subjective": subjective,
                "hrv_z": hrv_z,
                "rhr_z": rhr_z,
            },
            hrv_status=metric_status_from_z(hrv_z),
            rhr_status=metric_status_from_z(-rhr_z),
        )


def composite_input_from_history(
    *,
    hrv_history: Sequence[float | None],
    rhr_history: Sequence[float | None],
    hrv_today: float | None,
    rhr_today: float | None,
    energy: float,
    mood: float,
    stress: float,
    sleep_quality: float,
) -> CompositeReadinessInput:
    """Assemble composite inputs, deriving baselines from prior readings.

    A baseline exists once either HRV or resting HR has enough history.
    """
    hrv_baseline = WellnessBaseline.from_history(hrv_history)
    rhr_baseline = WellnessBaseline.from_history(rhr_history)
    return CompositeReadinessInput(
        hrv_today=hrv_today,
        hrv_mean=hrv_baseline.mean if hrv_baseline else 0.0,
        hrv_sd=hrv_baseline.sd if hrv_baseline else 0.0,
        rhr_today=rhr_today,
        rhr_mean=rhr_baseline.mean if rhr_baseline else 0.0,
        rhr_sd=rhr_baseline.sd if rhr_baseline else 0.0,
        energy=energy,
        mood=mood,
        stress=stress,
        sleep_quality=sleep_quality,
        has_baseline=hrv_baseline is not None or rhr_baseline is not None,
    )


MVP_STRATEGY = MvpReadinessStrategy()
COMPOSITE_STRATEGY = CompositeReadinessStrategy()


def score_readiness(inputs: ReadinessInput) -> int:
    """Daily check-in score in [0, 100] (MVP formula)."""
    return MVP_STRATEGY.score(inputs).score
