"""Tests for pydantic validation models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from crosstrain.services.load_types import ActivityInput, HRZoneConfig, HRZoneData
from crosstrain.validators import (
    ActivityLogInput,
    AthleteContextInput,
    HRZoneInput,
    PlannedWorkoutInput,
)


def test_activity_log_valid():
    log = ActivityLogInput(sport=" Padel ", duration_min=90, rpe=6, day_index=2)
    assert log.sport == "Padel"
    assert log.to_activity() == ActivityInput(sport="Padel", duration_min=90, rpe=6, day_index=2)


def test_activity_log_rpe_out_of_range():
    with pytest.raises(ValidationError):
        ActivityLogInput(sport="padel", duration_min=60, rpe=11)


def test_activity_log_negative_duration():
    with pytest.raises(ValidationError):
        ActivityLogInput(sport="padel", duration_min=-5)


def test_activity_log_blank_sport():
    with pytest.raises(ValidationError):
        ActivityLogInput(sport="   ", duration_min=30)


def test_activity_log_day_index_range():
    with pytest.raises(ValidationError):
        ActivityLogInput(sport="padel", duration_min=30, day_index=7)


def test_activity_log_zones_converted():
    log = ActivityLogInput(
        sport="cycling", duration_min=60,
        hr_zones={"zone1_min": 10, "zone2_min": 40, "zone3_min": 10},
    )
    assert log.to_activity().hr_zones == HRZoneData(10, 40, 10, 0, 0)


def test_activity_log_zones_longer_than_session():
    with pytest.raises(ValidationError):
        ActivityLogInput(sport="cycling", duration_min=30, hr_zones={"zone2_min": 45})


def test_activity_log_negative_garmin_load():
    with pytest.raises(ValidationError):
        ActivityLogInput(sport="soccer", duration_min=90, garmin_aerobic_load=-1)


def test_hr_zone_negative_minutes():
    with pytest.raises(ValidationError):
        HRZoneInput(zone3_min=-2)


def test_planned_workout_valid():
    w = PlannedWorkoutInput(id="Easy Run", day=1, type="easy", description="8km")
    assert w.status == "planned"


def test_planned_workout_invalid_status():
    with pytest.raises(ValidationError):
        PlannedWorkoutInput(id="Easy Run", day=1, type="easy", status="deleted")


def test_planned_workout_invalid_day():
    with pytest.raises(ValidationError):
        PlannedWorkoutInput(id="Easy Run", day=-1, type="easy")


def test_context_race_goal_normalised():
    ctx = AthleteContextInput(race_goal="Half Marathon").to_context()
    assert ctx.race_goal == "half"


def test_context_invalid_race_goal():
    with pytest.raises(ValidationError):
        AthleteContextInput(race_goal="Ultra")


def test_context_hr_config_built_when_complete():
    ctx = AthleteContextInput(race_goal="10K", max_hr=190, resting_hr=50).to_context()
    assert ctx.hr_zone_config == HRZoneConfig(max_hr=190, resting_hr=50)


def test_context_hr_config_omitted_when_partial():
    assert AthleteContextInput(max_hr=190).to_context().hr_zone_config is None


def test_context_resting_must_be_below_max():
    with pytest.raises(ValidationError):
        AthleteContextInput(max_hr=110, resting_hr=115)
