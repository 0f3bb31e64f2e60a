"""Universal load currency for any logged activity.

Three data tiers, highest quality first:
- Garmin: sensor aerobic/anaerobic load used as-is
- HR: zone-weighted load from time in heart-rate zones
- RPE: duration x perceived effort x sport factors

From the tier's aerobic/anaerobic load two quantities are derived:
- fatigue cost load (FCL): base load x recovery multiplier, never saturated,
  so large sessions keep their real physiological cost
- run replacement credit (RRC): base load x running specificity x goal
  factor, passed through a saturating curve so no single session can erase
  a week of running
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Union

from crosstrain.config import Settings, get_settings
from crosstrain.logging_config import get_logger, log_context
from crosstrain.services.load_types import (
    TIER_GARMIN,
    TIER_HR,
    TIER_RPE,
    ActivityInput,
    HRZoneConfig,
    HRZoneData,
    UniversalLoadResult,
    normalize_race_goal,
)
from crosstrain.services.sports import active_fraction, get_sport_profile, normalize_sport

logger = get_logger(__name__)

TIER_GARMIN_CONFIDENCE = 0.90
TIER_HR_CONFIDENCE_FULL = 0.85
TIER_HR_CONFIDENCE_PARTIAL = 0.75
TIER_RPE_CONFIDENCE_MID = 0.70     # RPE 5-7
TIER_RPE_CONFIDENCE_EDGE = 0.55    # self-report is least reliable at the tails

HR_ZONE_WEIGHTS = (1, 2, 3, 4, 5)
HR_MIN_ZONE_MINUTES = 5.0
HR_MIN_COVERAGE = 0.25
HR_FULL_COVERAGE = 0.90

RPE_UNCERTAINTY_PENALTY = 0.80
DEFAULT_RPE = 5

LOAD_PER_MIN_BY_RPE: dict[int, float] = {
    1: 0.5, 2: 0.8, 3: 1.1, 4: 1.6, 5: 2.0,
    6: 2.7, 7: 3.5, 8: 4.5, 9: 5.3, 10: 6.0,
}

# Aerobic share of RPE-estimated load
RPE_AEROBIC_SPLIT: dict[int, float] = {
    1: 0.95, 2: 0.95, 3: 0.95, 4: 0.95,
    5: 0.85, 6: 0.85,
    7: 0.70,
    8: 0.55,
    9: 0.40, 10: 0.40,
}

EASY_LOAD_PER_KM = 12.0
MAX_EQUIVALENT_EASY_KM = 25.0


# -- Evidence: one variant per data tier, resolved once --

@dataclass(frozen=True)
class GarminEvidence:
    aerobic_load: float
    anaerobic_load: float


@dataclass(frozen=True)
class HeartRateEvidence:
    zones: HRZoneData
    from_average: bool = False     # zones synthesised from avg HR


@dataclass(frozen=True)
class RpeEvidence:
    rpe: int


Evidence = Union[GarminEvidence, HeartRateEvidence, RpeEvidence]


@dataclass(frozen=True)
class TierLoad:
    tier: str
    aerobic_load: float
    anaerobic_load: float
    confidence: float
    explanations: tuple[str, ...]


def clamp_rpe(rpe: int | float | None) -> int:
    """Clamp an RPE to 1..10, defaulting to 5 when absent."""
    if rpe is None:
        return DEFAULT_RPE
    return max(1, min(10, int(round(rpe))))


def _zone_from_average(avg_hr: int | None, duration_min: float, config: HRZoneConfig | None) -> HRZoneData | None:
    """Attribute the whole session to the Karvonen zone containing avg_hr."""
    if not avg_hr or config is None or duration_min <= 0:
        return None
    max_hr, resting_hr = config.max_hr, config.resting_hr
    if not max_hr or not resting_hr or max_hr <= resting_hr:
        return None
    hrr_fraction = (avg_hr - resting_hr) / (max_hr - resting_hr)
    # Z1 < 60% HRR, Z2 < 70%, Z3 < 80%, Z4 < 90%, Z5 above
    zone = sum(1 for edge in (0.60, 0.70, 0.80, 0.90) if hrr_fraction >= edge)
    minutes = [0.0] * 5
    minutes[zone] = float(duration_min)
    return HRZoneData(*minutes)


def resolve_evidence(activity: ActivityInput, hr_zone_config: HRZoneConfig | None = None) -> Evidence:
    """Pick the highest-quality evidence the activity actually carries.

    Missing or zero data at a tier falls through to the next one.
    """
    aerobic = activity.garmin_aerobic_load
    anaerobic = activity.garmin_anaerobic_load
    if (aerobic is not None or anaerobic is not None) and ((aerobic or 0) > 0 or (anaerobic or 0) > 0):
        return GarminEvidence(aerobic_load=float(aerobic or 0.0), anaerobic_load=float(anaerobic or 0.0))

    zones = activity.hr_zones
    if zones is not None and zones.total_min >= HR_MIN_ZONE_MINUTES:
        duration = activity.duration_min or 0
        coverage = zones.total_min / duration if duration > 0 else 1.0
        if coverage >= HR_MIN_COVERAGE:
            return HeartRateEvidence(zones=zones)

    if activity.duration_min and activity.duration_min >= HR_MIN_ZONE_MINUTES:
        synthetic = _zone_from_average(activity.avg_hr, activity.duration_min, hr_zone_config)
        if synthetic is not None:
            return HeartRateEvidence(zones=synthetic, from_average=True)

    return RpeEvidence(rpe=clamp_rpe(activity.rpe))


def _garmin_load(evidence: GarminEvidence) -> TierLoad:
    return TierLoad(
        tier=TIER_GARMIN,
        aerobic_load=evidence.aerobic_load,
        anaerobic_load=evidence.anaerobic_load,
        confidence=TIER_GARMIN_CONFIDENCE,
        explanations=("Using Garmin/Firstbeat load data (high accuracy).",),
    )


def _heart_rate_load(evidence: HeartRateEvidence, duration_min: float) -> TierLoad:
    zones = evidence.zones
    weighted = [m * w for m, w in zip(zones.minutes, HR_ZONE_WEIGHTS)]
    aerobic = sum(weighted[:3])
    anaerobic = sum(weighted[3:])

    coverage = min(1.0, zones.total_min / duration_min) if duration_min > 0 else 1.0
    full = coverage >= HR_FULL_COVERAGE and not evidence.from_average
    confidence = TIER_HR_CONFIDENCE_FULL if full else TIER_HR_CONFIDENCE_PARTIAL

    explanations = []
    if evidence.from_average:
        explanations.append("Estimated from average heart rate across the session.")
    else:
        explanations.append(
            f"Computed from HR zones: {round(zones.total_min)}min tracked ({round(coverage * 100)}% coverage)."
        )
    high_intensity = zones.zone4_min + zones.zone5_min
    if high_intensity > 30:
        explanations.append(f"High-intensity: {round(high_intensity)}min in Z4-Z5.")
    return TierLoad(TIER_HR, aerobic, anaerobic, confidence, tuple(explanations))


def _rpe_load(evidence: RpeEvidence, sport_key: str, intensity_mult: float, duration_min: float) -> TierLoad:
    rpe = evidence.rpe
    fraction = active_fraction(sport_key)
    raw = max(0.0, duration_min) * LOAD_PER_MIN_BY_RPE[rpe] * intensity_mult * fraction * RPE_UNCERTAINTY_PENALTY

    aerobic_share = RPE_AEROBIC_SPLIT[rpe]
    confidence = TIER_RPE_CONFIDENCE_MID if 5 <= rpe <= 7 else TIER_RPE_CONFIDENCE_EDGE

    explanations = [f"Estimated from {duration_min:g}min {sport_key.replace('_', ' ')} at RPE {rpe}."]
    if fraction < 0.8:
        explanations.append(f"Adjusted for intermittent nature ({round(fraction * 100)}% active time).")
    explanations.append("RPE-only estimate; for more accuracy, use a heart rate monitor.")
    return TierLoad(TIER_RPE, raw * aerobic_share, raw * (1 - aerobic_share), confidence, tuple(explanations))


def goal_factor(anaerobic_ratio: float, goal_distance: str) -> float:
    """Credit what trains the current target.

    Marathon/half: 1.05 for pure aerobic down to 0.85 for pure anaerobic.
    5k/10k: 0.95 for pure aerobic up to 1.15 for pure anaerobic.
    """
    ratio = max(0.0, min(1.0, anaerobic_ratio))
    if normalize_race_goal(goal_distance) in ("marathon", "half"):
        return 1.05 - 0.20 * ratio
    return 0.95 + 0.20 * ratio


def saturate_credit(raw_credit: float, credit_max: float = 1500.0, tau: float = 800.0) -> float:
    """credit_max x (1 - e^(-raw/tau)): strictly increasing, bounded by credit_max."""
    if raw_credit <= 0:
        return 0.0
    return credit_max * (1.0 - math.exp(-raw_credit / tau))


def compute_universal_load(
    activity: ActivityInput,
    goal_distance: str = "half",
    hr_zone_config: HRZoneConfig | None = None,
    settings: Settings | None = None,
) -> UniversalLoadResult:
    """Compute the universal load of one logged activity.

    Never raises on degraded data: an unknown sport uses the default
    profile and a zero-duration or zero-data session yields zero load.
    """
    settings = settings or get_settings()
    sport_key = normalize_sport(activity.sport)
    profile = get_sport_profile(sport_key)
    duration = float(activity.duration_min or 0)

    evidence = resolve_evidence(activity, hr_zone_config)
    if isinstance(evidence, GarminEvidence):
        tier_load = _garmin_load(evidence)
    elif isinstance(evidence, HeartRateEvidence):
        tier_load = _heart_rate_load(evidence, duration)
    else:
        tier_load = _rpe_load(evidence, sport_key, profile.intensity_mult, duration)

    aerobic = max(0.0, tier_load.aerobic_load)
    anaerobic = max(0.0, tier_load.anaerobic_load)
    base = aerobic + anaerobic

    fatigue_cost = base * profile.recovery_mult

    anaerobic_ratio = anaerobic / base if base > 1e-9 else 0.0
    factor = goal_factor(anaerobic_ratio, goal_distance)
    raw_credit = base * profile.running_specificity * factor
    credit = saturate_credit(raw_credit, settings.credit_max, settings.credit_tau)

    equivalent_km = min(MAX_EQUIVALENT_EASY_KM, round(credit / EASY_LOAD_PER_KM, 1))

    goal_key = normalize_race_goal(goal_distance)
    explanations = list(tier_load.explanations)
    if base > 0 and factor < 1.0:
        dominant = "anaerobic-heavy" if goal_key in ("marathon", "half") else "mostly aerobic"
        explanations.append(f"Adjusted for {goal_key} goal: lower credit for {dominant} session.")
    elif base > 0 and factor > 1.0 and goal_key in ("5k", "10k"):
        explanations.append(f"Bonus for {goal_key} goal: higher credit for anaerobic-heavy session.")

    logger.debug(
        "universal load computed",
        extra=log_context(
            sport=sport_key,
            tier=tier_load.tier,
            base_load=round(base, 1),
            fatigue_cost=round(fatigue_cost, 1),
            credit=round(credit, 1),
        ),
    )

    return UniversalLoadResult(
        aerobic_load=round(aerobic, 1),
        anaerobic_load=round(anaerobic, 1),
        base_load=round(base, 1),
        fatigue_cost_load=round(fatigue_cost, 1),
        run_replacement_credit=round(credit, 1),
        tier=tier_load.tier,
        confidence=round(tier_load.confidence, 2),
        sport_key=sport_key,
        intensity_mult=profile.intensity_mult,
        recovery_mult=profile.recovery_mult,
        running_specificity=profile.running_specificity,
        anaerobic_ratio=round(anaerobic_ratio, 3),
        goal_factor=round(factor, 3),
        raw_credit=round(raw_credit, 1),
        equivalent_easy_km=equivalent_km,
        explanations=tuple(explanations),
    )
