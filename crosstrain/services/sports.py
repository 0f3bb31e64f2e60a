"""Sport profile table: per-sport coefficients for cross-training load.

Each profile carries an intensity multiplier (how hard the sport is per
minute of perceived effort), a running specificity (how much of its load
transfers to running fitness), a recovery multiplier (how much fatigue it
costs regardless of transfer), and the workout categories it may never
modify. Lookups never raise: unknown sports get a conservative default.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType


@dataclass(frozen=True)
class SportProfile:
    """Static coefficients for one sport."""
    intensity_mult: float
    running_specificity: float     # 0..1
    recovery_mult: float
    untouchable_types: tuple[str, ...] = ()


DEFAULT_PROFILE = SportProfile(intensity_mult=1.0, running_specificity=0.35, recovery_mult=1.0)

SPORTS_DB = MappingProxyType({
    "soccer": SportProfile(1.35, 0.40, 1.20, ("long",)),
    "rugby": SportProfile(1.50, 0.35, 1.30, ("long",)),
    "basketball": SportProfile(1.25, 0.45, 1.15, ("long",)),
    "tennis": SportProfile(1.20, 0.50, 1.10),
    "swimming": SportProfile(0.65, 0.20, 0.90),
    "cycling": SportProfile(0.75, 0.55, 0.95, ("cycling",)),
    "strength": SportProfile(1.10, 0.30, 1.00),
    "extra_run": SportProfile(1.00, 1.00, 1.00),
    "hiking": SportProfile(0.80, 0.45, 0.95),
    "rowing": SportProfile(0.85, 0.35, 0.95),
    "yoga": SportProfile(0.40, 0.10, 0.85),
    "martial_arts": SportProfile(1.30, 0.30, 1.20, ("long",)),
    "climbing": SportProfile(0.70, 0.15, 1.00),
    "boxing": SportProfile(1.40, 0.25, 1.20, ("long",)),
    "crossfit": SportProfile(1.30, 0.40, 1.20),
    "pilates": SportProfile(0.45, 0.10, 0.85),
    "dancing": SportProfile(0.90, 0.35, 1.00),
    "skiing": SportProfile(0.90, 0.50, 1.00),
    "skating": SportProfile(0.75, 0.40, 0.95),
    "elliptical": SportProfile(0.80, 0.65, 0.90),
    "stair_climbing": SportProfile(0.85, 0.55, 0.95),
    "jump_rope": SportProfile(1.10, 0.50, 1.05),
    "walking": SportProfile(0.35, 0.30, 0.80),
    "padel": SportProfile(1.15, 0.45, 1.05),
})

SPORT_LABELS = MappingProxyType({
    "soccer": "Soccer",
    "rugby": "Rugby",
    "basketball": "Basketball",
    "tennis": "Tennis",
    "swimming": "Swimming",
    "cycling": "Cycling",
    "strength": "Strength",
    "extra_run": "Extra Run",
    "hiking": "Hiking",
    "rowing": "Rowing",
    "yoga": "Yoga",
    "martial_arts": "Martial Arts",
    "climbing": "Climbing",
    "boxing": "Boxing",
    "crossfit": "CrossFit",
    "pilates": "Pilates",
    "dancing": "Dancing",
    "skiing": "Skiing",
    "skating": "Skating",
    "elliptical": "Elliptical",
    "stair_climbing": "Stair Climbing",
    "jump_rope": "Jump Rope",
    "walking": "Walking",
    "padel": "Padel",
})

# Common name variants -> canonical sport key
SPORT_ALIASES = MappingProxyType({
    "football": "soccer",
    "touch_rugby": "rugby",
    "rugby_union": "rugby",
    "rugby_league": "rugby",
    "pickleball": "tennis",
    "weights": "strength",
    "gym": "strength",
    "lifting": "strength",
    "hike": "hiking",
    "rock_climbing": "climbing",
    "bouldering": "climbing",
    "karate": "martial_arts",
    "judo": "martial_arts",
    "bjj": "martial_arts",
    "mma": "martial_arts",
    "ice_skating": "skating",
    "roller_skating": "skating",
    "ballet": "dancing",
    "zumba": "dancing",
    "skipping": "jump_rope",
    "cross_country_skiing": "skiing",
    "stairmaster": "stair_climbing",
    "bike": "cycling",
    "swim": "swimming",
})

# Share of session time spent actually working; intermittent sports rest between points.
ACTIVE_FRACTION_BY_SPORT = MappingProxyType({
    "padel": 0.60,
    "tennis": 0.65,
    "soccer": 0.70,
    "rugby": 0.75,
    "basketball": 0.70,
    "martial_arts": 0.75,
    "boxing": 0.75,
    "crossfit": 0.75,
    "climbing": 0.55,
    "strength": 0.70,
    "dancing": 0.80,
    "walking": 0.95,
    "cycling": 0.95,
    "swimming": 0.90,
    "rowing": 0.95,
    "elliptical": 0.95,
    "hiking": 0.85,
    "skiing": 0.85,
    "skating": 0.85,
    "stair_climbing": 0.85,
    "jump_rope": 0.80,
    "yoga": 0.50,
    "pilates": 0.55,
    "extra_run": 1.00,
})
DEFAULT_ACTIVE_FRACTION = 0.75


def normalize_sport(name: str | None) -> str:
    """Normalize a raw sport name to its canonical key ('Rock Climbing' -> 'climbing')."""
    clean = (name or "").strip().lower().replace(" ", "_").replace("-", "_")
    return SPORT_ALIASES.get(clean, clean)


def get_sport_profile(name: str | None) -> SportProfile:
    """Profile for a sport name or alias; unknown sports get DEFAULT_PROFILE."""
    return SPORTS_DB.get(normalize_sport(name), DEFAULT_PROFILE)


def active_fraction(name: str | None) -> float:
    return ACTIVE_FRACTION_BY_SPORT.get(normalize_sport(name), DEFAULT_ACTIVE_FRACTION)


def sport_label(name: str | None) -> str:
    """Display name for a sport; falls back to the key with underscores spaced out."""
    key = normalize_sport(name)
    return SPORT_LABELS.get(key) or key.replace("_", " ") or "activity"


def can_touch_workout(name: str | None, workout_type: str) -> bool:
    """Whether a session of this sport may modify a workout of the given category."""
    wt = (workout_type or "").strip().lower()
    return wt not in get_sport_profile(name).untouchable_types
