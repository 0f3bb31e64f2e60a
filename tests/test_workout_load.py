"""Tests for the default workout load model and description parser."""

from __future__ import annotations

import pytest

from crosstrain.services.workout_load import (
    DEFAULT_PACES,
    WorkoutLoad,
    compute_workout_load,
    load_fn_for_pace,
    pace_for_zone,
    paces_from_easy,
    parse_workout_distance,
)


def test_easy_km_load():
    # 8km x 5.5 min/km = 44 min at RPE 4 (1.5/min) = 66
    load = compute_workout_load("easy", "8km", 40)
    assert load.aerobic_load == pytest.approx(62.7)
    assert load.anaerobic_load == pytest.approx(3.3)
    assert load.total == pytest.approx(66.0)


def test_minutes_as_number():
    load = compute_workout_load("threshold", 30, 70)
    # 30 min x 3.5 = 105, split 70/30
    assert load.aerobic_load == pytest.approx(73.5)
    assert load.anaerobic_load == pytest.approx(31.5)


def test_interval_minutes():
    load = compute_workout_load("vo2", "5×3min @ 5K, 2min", 90)
    # 15 min x 5.5 = 82.5, split 50/50
    assert load.aerobic_load == pytest.approx(41.2, abs=0.1)
    assert load.anaerobic_load == pytest.approx(41.2, abs=0.1)


def test_replaced_and_zero_distance_carry_no_load():
    assert compute_workout_load("easy", "Replaced by Padel", 40) == WorkoutLoad(0.0, 0.0)
    assert compute_workout_load("easy", "0km", 40) == WorkoutLoad(0.0, 0.0)


def test_harder_category_costs_more_for_same_distance():
    easy = compute_workout_load("easy", "10km", 40)
    threshold = compute_workout_load("threshold", "10km", 70)
    assert threshold.total > easy.total
    assert threshold.anaerobic_load > easy.anaerobic_load


def test_missing_description_uses_category_default():
    load = compute_workout_load("long", "", 50)
    # 120 min x 2.0
    assert load.total == pytest.approx(240.0)


def test_paces_from_easy():
    paces = paces_from_easy(400)
    assert paces.easy == 400
    assert paces.marathon == 350
    assert paces.threshold < paces.marathon < paces.easy
    assert paces_from_easy(None) == DEFAULT_PACES


def test_pace_for_zone():
    assert pace_for_zone("threshold", DEFAULT_PACES) == 300
    assert pace_for_zone("5K", DEFAULT_PACES) == 270
    assert pace_for_zone("MP", DEFAULT_PACES) == 315
    assert pace_for_zone("whatever", DEFAULT_PACES) == 360


@pytest.mark.parametrize("description,meters", [
    ("8km", 8000),
    ("4.5km (was 6km)", 4500),
    ("20min @ threshold", 4000),
    ("8×800 @ 5K, 90s", 6400),
    ("6x1km @ threshold, 2min", 6000),
    ("3×2mi @ MP, 3min", 9654),
    ("21km: last 5 @ HM", 21000),
    ("20km @ MP", 20000),
    ("6.5@MP, 2.5@10K, 3@HM", 12000),
    ("10km with 6km @ threshold", 10000),
])
def test_parse_workout_distance(description, meters):
    assert parse_workout_distance(description) == pytest.approx(meters)


def test_parse_time_intervals():
    # 3 x 10 min at marathon pace (315 s/km)
    assert parse_workout_distance("3×10min @ MP, 3min") == pytest.approx(3 * 600 / 315 * 1000)


@pytest.mark.parametrize("description", ["", "Rest day", "Strides and drills", None])
def test_parse_unparseable_is_zero(description):
    assert parse_workout_distance(description) == 0.0


def test_load_fn_for_pace():
    assert load_fn_for_pace(None) is compute_workout_load
    assert load_fn_for_pace(0) is compute_workout_load
    # 8km x 7 min/km = 56 min at RPE 4 = 84
    assert load_fn_for_pace(420)("easy", "8km", 40).total == pytest.approx(84.0)
