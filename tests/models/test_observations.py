import datetime as dt
import math

import pytest

from athlete_analytics.models.observations import (
    AthleteDataSlice,
    InjuryRecord,
    ReadinessInput,
    SessionRecord,
    SourcedValue,
    WellnessCheckin,
    parse_optional_number,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (72.5, 72.5),
        (3, 3.0),
        (" 81.2 ", 81.2),
        ("abc", None),
        ("", None),
        (None, None),
        (True, None),
        (math.nan, None),
        (math.inf, None),
        ([80], None),
    ],
)
def test_parse_optional_number(raw, expected):
    assert parse_optional_number(raw) == expected


def test_malformed_numbers_become_absent():
    session = SessionRecord(perceived_exertion="oops", duration_seconds="3600")

    assert session.perceived_exertion is None
    assert session.duration_seconds == 3600.0


def test_soreness_list_and_bool_map_are_normalized():
    from_list = WellnessCheckin(date=dt.date(2025, 1, 1), soreness_map=["knee", "calf"])
    from_bools = WellnessCheckin(date=dt.date(2025, 1, 1), soreness_map={"knee": True, "back": False})

    assert from_list.soreness_map == {"knee": 1, "calf": 1}
    assert from_bools.soreness_map == {"knee": 1, "back": 0}
    assert from_bools.reports_pain


def test_malformed_soreness_levels_are_clamped_or_dropped():
    checkin = WellnessCheckin(
        date=dt.date(2025, 1, 1),
        soreness_map={"knee": 5, "hip": -1, "calf": "bad", "back": None, "neck": "2", "quad": 2.5},
    )

    assert checkin.soreness_map == {"knee": 3, "hip": 0, "neck": 2, "quad": 3}
    assert checkin.reports_pain


def test_checkin_without_soreness_reports_no_pain():
    checkin = WellnessCheckin(date=dt.date(2025, 1, 1), soreness_map=None)

    assert checkin.soreness_map == {}
    assert not checkin.reports_pain


def test_readiness_input_zones_from_map():
    inputs = ReadinessInput(soreness_zones={"knee": 2, "hip": 0})

    assert inputs.soreness_zones == frozenset({"knee"})


def test_injury_open_status():
    assert InjuryRecord(id="1", body_zone="knee", status="in_rehab").is_open
    assert not InjuryRecord(id="2", body_zone="knee", status="healed").is_open


def test_data_slice_round_trip():
    data = AthleteDataSlice(
        athlete_id="a1",
        athlete_name="Sam",
        sessions=[SessionRecord(completed_at=dt.datetime(2025, 1, 2, 7, 30, tzinfo=dt.UTC), session_load=310.5)],
        checkins=[WellnessCheckin(date=dt.date(2025, 1, 2), score=72, soreness_map={"quad": 1})],
        readiness_scores=[SourcedValue(date=dt.date(2025, 1, 2), source="daily_metrics", value=70)],
        injuries=[InjuryRecord(id="i1", body_zone="quad", status="in_rehab")],
    )

    assert AthleteDataSlice.model_validate_json(data.model_dump_json()) == data
