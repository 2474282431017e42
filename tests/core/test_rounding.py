import pytest

from athlete_analytics.core.rounding import round_half_up, round_int, round_to_step


@pytest.mark.parametrize(("value", "expected"), [(16.5, 17), (17.5, 18), (-16.5, -17), (16.49, 16), (2792.3, 2792)])
def test_round_int_half_away_from_zero(value, expected):
    assert round_int(value) == expected


def test_round_half_up_to_decimals():
    assert round_half_up(1.125, 2) == 1.13
    assert round_half_up(2.675, 2) == 2.68


def test_round_to_step():
    assert round_to_step(2242, 50) == 2250
    assert round_to_step(2775, 50) == 2800
    assert round_to_step(2774, 50) == 2750
