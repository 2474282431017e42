import pytest
from pydantic import ValidationError

from athlete_analytics.metrics.readiness import (
    COMPOSITE_STRATEGY,
    MVP_STRATEGY,
    WellnessBaseline,
    composite_input_from_history,
    hrv_z_to_points,
    metric_status_from_z,
    readiness_band,
    rhr_z_to_points,
    score_readiness,
    standard_deviation,
    z_score,
)
from athlete_analytics.models.observations import CompositeReadinessInput, ReadinessInput


def test_best_checkin_scores_100():
    assert score_readiness(ReadinessInput(sleep_quality=3, stress_level=0)) == 100


def test_worst_checkin_rounds_half_up():
    # 33 * 0.5 + 0 = 16.5
    assert score_readiness(ReadinessInput(sleep_quality=1, stress_level=10)) == 17


def test_average_checkin():
    assert score_readiness(ReadinessInput(sleep_quality=2, stress_level=5)) == 58


@pytest.mark.parametrize("sleep_quality", [1, 2, 3])
def test_score_is_bounded(sleep_quality):
    for step in range(21):
        score = score_readiness(ReadinessInput(sleep_quality=sleep_quality, stress_level=step / 2))
        assert 0 <= score <= 100


def test_pain_and_sleep_hours_do_not_move_mvp_score():
    baseline = ReadinessInput(sleep_quality=2, stress_level=4)
    sore = ReadinessInput(sleep_quality=2, stress_level=4, sleep_hours=4, has_pain=True, soreness_zones={"knee"})

    assert score_readiness(baseline) == score_readiness(sore)


def test_mvp_result_is_tagged():
    result = MVP_STRATEGY.score(ReadinessInput(sleep_quality=3, stress_level=2))

    assert result.strategy == "mvp"
    assert result.score == 90
    assert result.band == "high"


def test_invalid_checkin_values_are_rejected():
    with pytest.raises(ValidationError):
        ReadinessInput(sleep_quality=4, stress_level=5)
    with pytest.raises(ValidationError):
        ReadinessInput(sleep_quality=2, stress_level=11)


@pytest.mark.parametrize(("score", "band"), [(100, "high"), (70, "high"), (69, "moderate"), (40, "moderate"), (39, "low"), (0, "low")])
def test_readiness_band(score, band):
    assert readiness_band(score) == band


def test_population_standard_deviation():
    assert standard_deviation([2, 4, 4, 4, 5, 5, 7, 9]) == 2.0
    assert standard_deviation([5]) == 0.0


def test_z_score_without_variance_is_zero():
    assert z_score(60, 60, 0) == 0.0
    assert z_score(70, 60, 5) == 2.0


@pytest.mark.parametrize(("z", "status"), [(-1.0, "low"), (0.0, "optimal"), (1.49, "optimal"), (1.5, "high")])
def test_metric_status_from_z(z, status):
    assert metric_status_from_z(z) == status


def test_z_point_mappers_clamp():
    assert hrv_z_to_points(0) == 30
    assert hrv_z_to_points(2) == 60
    assert hrv_z_to_points(5) == 60
    assert hrv_z_to_points(-3) == 0
    assert rhr_z_to_points(0) == 10
    assert rhr_z_to_points(-2) == 20
    assert rhr_z_to_points(2) == 0


def test_composite_without_baseline_uses_subjective_only():
    inputs = CompositeReadinessInput(energy=10, mood=10, stress=1, sleep_quality=10)

    result = COMPOSITE_STRATEGY.score(inputs)

    assert result.strategy == "composite"
    assert result.score == 100
    assert result.components["hrv"] == 0
    assert result.hrv_status == "optimal"


def test_composite_at_baseline():
    inputs = CompositeReadinessInput(
        hrv_today=60,
        hrv_mean=60,
        hrv_sd=5,
        rhr_today=50,
        rhr_mean=50,
        rhr_sd=3,
        energy=10,
        mood=10,
        stress=1,
        sleep_quality=10,
        has_baseline=True,
    )

    result = COMPOSITE_STRATEGY.score(inputs)

    assert result.score == 60
    assert result.band == "moderate"


def test_composite_fully_recovered():
    inputs = CompositeReadinessInput(
        hrv_today=70,
        hrv_mean=60,
        hrv_sd=5,
        rhr_today=44,
        rhr_mean=50,
        rhr_sd=3,
        energy=10,
        mood=10,
        stress=1,
        sleep_quality=10,
        has_baseline=True,
    )

    result = COMPOSITE_STRATEGY.score(inputs)

    assert result.score == 100
    assert result.hrv_status == "high"
    assert result.rhr_status == "high"


def test_baseline_needs_two_weeks_of_readings():
    assert WellnessBaseline.from_history([55.0] * 13) is None

    baseline = WellnessBaseline.from_history([None] * 5 + [55.0] * 14)

    assert baseline is not None
    assert baseline.mean == 55.0
    assert baseline.days == 14
    assert baseline.is_established


def test_composite_input_from_history():
    inputs = composite_input_from_history(
        hrv_history=[60.0] * 14,
        rhr_history=[],
        hrv_today=60.0,
        rhr_today=None,
        energy=5,
        mood=5,
        stress=5,
        sleep_quality=5,
    )

    assert inputs.has_baseline
    assert inputs.hrv_mean == 60.0
    assert inputs.rhr_mean == 0.0
