"""Default workout load model and description parser.

The adjustment engine only needs two functions from the surrounding
application: one that turns a workout (category, description, intensity)
into an aerobic/anaerobic load, and one that turns a free-form description
into a distance. These defaults follow the Garmin-calibrated load scale and
can be swapped for any callable with the same signature.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import partial
from typing import Callable


@dataclass(frozen=True)
class Paces:
    """Training paces in seconds per kilometre."""
    easy: int
    marathon: int
    threshold: int
    interval: int
    repetition: int


DEFAULT_PACES = Paces(easy=360, marathon=315, threshold=300, interval=270, repetition=255)


@dataclass(frozen=True)
class WorkoutLoad:
    aerobic_load: float
    anaerobic_load: float

    @property
    def total(self) -> float:
        return round(self.aerobic_load + self.anaerobic_load, 1)


# (category, description, intensity_pct) -> load
WorkoutLoadFn = Callable[[str, str, float], WorkoutLoad]


# Aerobic/anaerobic share of the load by workout category
LOAD_PROFILES: dict[str, tuple[float, float]] = {
    "easy": (0.95, 0.05),
    "long": (0.90, 0.10),
    "threshold": (0.70, 0.30),
    "vo2": (0.50, 0.50),
    "race_pace": (0.65, 0.35),
    "marathon_pace": (0.75, 0.25),
    "intervals": (0.45, 0.55),
    "hill_repeats": (0.40, 0.60),
    "mixed": (0.60, 0.40),
    "progressive": (0.70, 0.30),
}
_DEFAULT_PROFILE = (0.80, 0.20)

# Load per minute at RPE 1..10 (Garmin scale)
LOAD_PER_MIN_BY_INTENSITY: dict[int, float] = {
    1: 0.5, 2: 0.8, 3: 1.2, 4: 1.5, 5: 2.0,
    6: 2.5, 7: 3.5, 8: 4.5, 9: 5.5, 10: 6.0,
}

# Pace relative to easy pace, per category
_PACE_FACTOR: dict[str, float] = {
    "easy": 1.0,
    "long": 1.03,
    "threshold": 0.82,
    "vo2": 0.73,
    "intervals": 0.73,
    "hill_repeats": 0.80,
    "race_pace": 0.78,
    "marathon_pace": 0.87,
    "mixed": 0.82,
    "progressive": 0.90,
}

# Fallback minutes when a description carries no duration
_DEFAULT_MINUTES = {"long": 120.0, "threshold": 45.0, "vo2": 45.0}

_KM_RE = re.compile(r"(\d+(?:\.\d+)?)\s*km", re.I)
_REPS_MIN_RE = re.compile(r"(\d+)\s*[×x]\s*(\d+(?:\.\d+)?)\s*min", re.I)
_MIN_RE = re.compile(r"(\d+(?:\.\d+)?)\s*min", re.I)


def paces_from_easy(easy_sec_per_km: int | None) -> Paces:
    """Derive a full pace set from an easy pace by fixed ratios."""
    if not easy_sec_per_km or easy_sec_per_km <= 0:
        return DEFAULT_PACES
    e = int(easy_sec_per_km)
    return Paces(
        easy=e,
        marathon=round(e * 0.875),
        threshold=round(e * 0.833),
        interval=round(e * 0.75),
        repetition=round(e * 0.708),
    )


def pace_for_zone(zone: str, paces: Paces) -> float:
    """Map a pace label from a description ('threshold', '5K', 'MP', 'HM') to sec/km.

    Unknown labels resolve to easy pace.
    """
    mapping = {
        "easy": paces.easy,
        "e": paces.easy,
        "threshold": paces.threshold,
        "tempo": paces.threshold,
        "t": paces.threshold,
        "5k": paces.interval,
        "i": paces.interval,
        "r": paces.repetition,
        "10k": paces.marathon * 0.95,
        "hm": paces.marathon * 1.05,
        "mp": paces.marathon,
        "m": paces.marathon,
    }
    return float(mapping.get((zone or "").strip().lower(), paces.easy))


def _workout_minutes(category: str, description: str, easy_pace_sec_per_km: int | None) -> float:
    base_min_per_km = easy_pace_sec_per_km / 60.0 if easy_pace_sec_per_km else 5.5
    km_match = _KM_RE.search(description)
    if km_match:
        km = float(km_match.group(1))
        return km * base_min_per_km * _PACE_FACTOR.get(category, 1.0)
    reps_match = _REPS_MIN_RE.search(description)
    if reps_match:
        return int(reps_match.group(1)) * float(reps_match.group(2))
    min_match = _MIN_RE.search(description)
    if min_match:
        return float(min_match.group(1))
    return _DEFAULT_MINUTES.get(category, 40.0)


def compute_workout_load(
    category: str,
    description: str | float,
    intensity_pct: float,
    easy_pace_sec_per_km: int | None = None,
) -> WorkoutLoad:
    """Expected aerobic/anaerobic load of a planned workout.

    ``description`` is either minutes or a free-form description ("8km",
    "3×10min @ threshold, 2min", "45min"). ``intensity_pct`` is RPE × 10.
    Replaced or zero-distance workouts carry no load.
    """
    aerobic_share, anaerobic_share = LOAD_PROFILES.get(category, _DEFAULT_PROFILE)

    if isinstance(description, (int, float)):
        minutes = float(description)
    else:
        text = description or ""
        if "replaced" in text.lower():
            return WorkoutLoad(0.0, 0.0)
        km_match = _KM_RE.search(text)
        if km_match and float(km_match.group(1)) <= 0:
            return WorkoutLoad(0.0, 0.0)
        minutes = _workout_minutes(category, text, easy_pace_sec_per_km)

    if minutes <= 0:
        return WorkoutLoad(0.0, 0.0)

    rpe = max(1, min(10, round((intensity_pct or 50) / 10)))
    total = minutes * LOAD_PER_MIN_BY_INTENSITY[rpe]
    return WorkoutLoad(
        aerobic_load=round(total * aerobic_share, 1),
        anaerobic_load=round(total * anaerobic_share, 1),
    )


def load_fn_for_pace(easy_pace_sec_per_km: int | None) -> WorkoutLoadFn:
    """compute_workout_load bound to an athlete's easy pace.

    Distance-based workouts take longer at a slower pace and so carry more
    load. Without a pace this behaves exactly like compute_workout_load.
    """
    if not easy_pace_sec_per_km or easy_pace_sec_per_km <= 0:
        return compute_workout_load
    return partial(compute_workout_load, easy_pace_sec_per_km=int(easy_pace_sec_per_km))


# -- Description parsing --

_MODIFIED_RE = re.compile(r"^(\d+(?:\.\d+)?)\s*km\s*\(was", re.I)
_SIMPLE_RE = re.compile(r"^(\d+(?:\.\d+)?)\s*km$", re.I)
_TIME_AT_PACE_RE = re.compile(r"^(\d+(?:\.\d+)?)\s*min\s*@\s*(\w+)", re.I)
_INTERVAL_DIST_RE = re.compile(r"^(\d+)\s*[×x]\s*(\d+(?:\.\d+)?)\s*(mi|km|k|m)?\s*@\s*([\w\-]+)", re.I)
_INTERVAL_TIME_RE = re.compile(r"^(\d+)\s*[×x]\s*(\d+(?:\.\d+)?)\s*min\s*@\s*(\w+)", re.I)
_PROGRESSIVE_RE = re.compile(r"^(\d+(?:\.\d+)?)\s*km:?\s*last\s*(\d+(?:\.\d+)?)\s*@\s*(\w+)", re.I)
_DIST_AT_PACE_RE = re.compile(r"^(\d+(?:\.\d+)?)\s*km\s*@\s*(\w+)", re.I)
_MIXED_SEGMENT_RE = re.compile(r"(\d+(?:\.\d+)?)@(\w+)", re.I)
_LEADING_KM_RE = re.compile(r"^(\d+(?:\.\d+)?)\s*km\b", re.I)

_UNIT_METERS = {"m": 1.0, "mi": 1609.0, "km": 1000.0, "k": 1000.0}


def parse_workout_distance(description: str, paces: Paces = DEFAULT_PACES) -> float:
    """Total distance in metres of a workout description; 0.0 when unparseable.

    Handles plain distances ("8km"), reduced workouts ("4km (was 6km)"),
    time at pace ("20min @ threshold"), distance and time intervals
    ("8×800 @ 5K, 90s", "3×10min @ MP, 3min"), fast finishes
    ("21km: last 5 @ HM"), distance at pace ("20km @ MP") and mixed
    segments ("6.5@MP, 2.5@10K, 3@HM").
    """
    text = (description or "").strip()
    if not text:
        return 0.0

    for simple in (_MODIFIED_RE, _SIMPLE_RE):
        match = simple.match(text)
        if match:
            return float(match.group(1)) * 1000.0

    match = _TIME_AT_PACE_RE.match(text)
    if match:
        seconds = float(match.group(1)) * 60.0
        return seconds / pace_for_zone(match.group(2), paces) * 1000.0

    match = _INTERVAL_TIME_RE.match(text)
    if match:
        reps = int(match.group(1))
        seconds = float(match.group(2)) * 60.0
        return reps * seconds / pace_for_zone(match.group(3), paces) * 1000.0

    match = _INTERVAL_DIST_RE.match(text)
    if match:
        reps = int(match.group(1))
        unit = (match.group(3) or "m").lower()
        return reps * float(match.group(2)) * _UNIT_METERS[unit]

    match = _PROGRESSIVE_RE.match(text)
    if match:
        return float(match.group(1)) * 1000.0

    match = _DIST_AT_PACE_RE.match(text)
    if match:
        return float(match.group(1)) * 1000.0

    segments = _MIXED_SEGMENT_RE.findall(text)
    if len(segments) > 1:
        return sum(float(dist) for dist, _zone in segments) * 1000.0

    match = _LEADING_KM_RE.match(text)
    if match:
        return float(match.group(1)) * 1000.0
    return 0.0
