"""Tests for universal load computation."""

from __future__ import annotations

import pytest

from crosstrain.services.load_types import TIER_GARMIN, TIER_HR, TIER_RPE, ActivityInput, HRZoneConfig, HRZoneData
from crosstrain.services.universal_load import (
    GarminEvidence,
    HeartRateEvidence,
    RpeEvidence,
    clamp_rpe,
    compute_universal_load,
    goal_factor,
    resolve_evidence,
    saturate_credit,
)


def test_rpe_tier_boxing_hour():
    result = compute_universal_load(ActivityInput(sport="boxing", duration_min=60, rpe=5))
    # 60 min x 2.0/min x 1.40 intensity x 0.75 active x 0.80 uncertainty
    assert result.tier == TIER_RPE
    assert result.base_load == pytest.approx(100.8)
    assert result.fatigue_cost_load == pytest.approx(121.0)
    assert result.confidence == 0.70
    assert result.equivalent_easy_km == pytest.approx(4.0, abs=0.1)


def test_garmin_tier_takes_priority():
    activity = ActivityInput(
        sport="soccer", duration_min=90, rpe=7,
        garmin_aerobic_load=150, garmin_anaerobic_load=30,
        hr_zones=HRZoneData(10, 40, 30, 10, 0),
    )
    result = compute_universal_load(activity)
    assert result.tier == TIER_GARMIN
    assert result.confidence == 0.90
    assert result.aerobic_load == 150
    assert result.anaerobic_load == 30
    assert result.base_load == 180
    assert result.fatigue_cost_load == pytest.approx(216.0)


def test_zero_garmin_falls_through():
    activity = ActivityInput(sport="tennis", duration_min=60, rpe=6, garmin_aerobic_load=0, garmin_anaerobic_load=0)
    assert isinstance(resolve_evidence(activity), RpeEvidence)


def test_hr_tier_full_coverage():
    activity = ActivityInput(sport="cycling", duration_min=60, hr_zones=HRZoneData(10, 30, 15, 5, 0))
    result = compute_universal_load(activity)
    assert result.tier == TIER_HR
    assert result.confidence == 0.85
    # Z1-Z3 weighted 1/2/3, Z4-Z5 weighted 4/5
    assert result.aerobic_load == pytest.approx(115.0)
    assert result.anaerobic_load == pytest.approx(20.0)


def test_hr_tier_partial_coverage():
    activity = ActivityInput(sport="cycling", duration_min=60, hr_zones=HRZoneData(0, 20, 0, 0, 0))
    result = compute_universal_load(activity)
    assert result.tier == TIER_HR
    assert result.confidence == 0.75


def test_hr_tier_insufficient_coverage_falls_to_rpe():
    sparse = ActivityInput(sport="cycling", duration_min=60, rpe=5, hr_zones=HRZoneData(0, 10, 0, 0, 0))
    tiny = ActivityInput(sport="cycling", duration_min=60, rpe=5, hr_zones=HRZoneData(0, 3, 0, 0, 0))
    assert compute_universal_load(sparse).tier == TIER_RPE
    assert compute_universal_load(tiny).tier == TIER_RPE


def test_average_hr_places_session_in_zone():
    activity = ActivityInput(sport="rowing", duration_min=40, avg_hr=148)
    evidence = resolve_evidence(activity, HRZoneConfig(max_hr=190, resting_hr=50))
    assert isinstance(evidence, HeartRateEvidence)
    assert evidence.from_average is True
    # (148 - 50) / 140 = 70% HRR -> Z3
    assert evidence.zones.zone3_min == 40


def test_average_hr_without_config_falls_to_rpe():
    activity = ActivityInput(sport="rowing", duration_min=40, avg_hr=148, rpe=6)
    assert isinstance(resolve_evidence(activity), RpeEvidence)


def test_average_hr_result_is_partial_confidence():
    activity = ActivityInput(sport="rowing", duration_min=40, avg_hr=170)
    result = compute_universal_load(activity, hr_zone_config=HRZoneConfig(max_hr=190, resting_hr=50))
    assert result.tier == TIER_HR
    assert result.confidence == 0.75
    assert result.anaerobic_load > 0


def test_resolve_garmin_evidence():
    activity = ActivityInput(sport="padel", duration_min=60, garmin_aerobic_load=80)
    assert resolve_evidence(activity) == GarminEvidence(aerobic_load=80.0, anaerobic_load=0.0)


def test_rpe_intensity_scales_load():
    easy = compute_universal_load(ActivityInput(sport="rugby", duration_min=60, rpe=3))
    hard = compute_universal_load(ActivityInput(sport="rugby", duration_min=60, rpe=9))
    assert hard.base_load / easy.base_load == pytest.approx(5.3 / 1.1, rel=0.01)
    assert hard.anaerobic_ratio > easy.anaerobic_ratio


@pytest.mark.parametrize("rpe,confidence", [(1, 0.55), (4, 0.55), (5, 0.70), (7, 0.70), (8, 0.55), (10, 0.55)])
def test_rpe_confidence(rpe, confidence):
    result = compute_universal_load(ActivityInput(sport="tennis", duration_min=45, rpe=rpe))
    assert result.confidence == confidence


def test_missing_rpe_defaults_to_five():
    assert clamp_rpe(None) == 5
    assert clamp_rpe(14) == 10
    assert clamp_rpe(0) == 1


def test_zero_duration_is_zero_load():
    result = compute_universal_load(ActivityInput(sport="soccer", duration_min=0, rpe=8))
    assert result.base_load == 0
    assert result.fatigue_cost_load == 0
    assert result.run_replacement_credit == 0
    assert result.equivalent_easy_km == 0


def test_unknown_sport_does_not_raise():
    result = compute_universal_load(ActivityInput(sport="sepak takraw", duration_min=60, rpe=6))
    assert result.intensity_mult == 1.0
    assert result.running_specificity == 0.35
    assert result.base_load > 0


def test_fatigue_cost_is_not_saturated():
    activity = ActivityInput(sport="rugby", duration_min=300, garmin_aerobic_load=3000, garmin_anaerobic_load=1000)
    result = compute_universal_load(activity)
    assert result.fatigue_cost_load == pytest.approx(4000 * 1.30)
    assert result.run_replacement_credit < 1500
    assert result.equivalent_easy_km == 25.0


def test_goal_factor():
    assert goal_factor(0.0, "marathon") == pytest.approx(1.05)
    assert goal_factor(1.0, "half") == pytest.approx(0.85)
    assert goal_factor(0.0, "5k") == pytest.approx(0.95)
    assert goal_factor(1.0, "10k") == pytest.approx(1.15)


def test_anaerobic_session_credits_more_for_short_goal():
    activity = ActivityInput(sport="crossfit", duration_min=45, garmin_aerobic_load=40, garmin_anaerobic_load=80)
    marathon = compute_universal_load(activity, "marathon")
    five_k = compute_universal_load(activity, "5K")
    assert five_k.run_replacement_credit > marathon.run_replacement_credit
    assert five_k.fatigue_cost_load == marathon.fatigue_cost_load


@pytest.mark.parametrize("lower,higher", [(0, 1), (10, 50), (400, 800), (1500, 3000), (5000, 6000)])
def test_saturation_is_increasing_and_bounded(lower, higher):
    assert saturate_credit(lower) < saturate_credit(higher) <= 1500.0


def test_saturation_of_non_positive_is_zero():
    assert saturate_credit(0) == 0.0
    assert saturate_credit(-20) == 0.0


def test_explanations_present():
    result = compute_universal_load(ActivityInput(sport="padel", duration_min=90, rpe=6))
    assert result.explanations
    assert any("intermittent" in e for e in result.explanations)
