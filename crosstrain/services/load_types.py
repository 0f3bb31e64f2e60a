"""Value types shared by the load, matching, and adjustment services.

Everything here is a frozen dataclass holding tuples rather than lists, so
results can be compared by value and cannot be mutated by consumers.
"""

from __future__ import annotations

from dataclasses import dataclass

# Data tiers, highest quality first
TIER_GARMIN = "garmin"
TIER_HR = "hr"
TIER_RPE = "rpe"

SEVERITY_LIGHT = "light"
SEVERITY_HEAVY = "heavy"
SEVERITY_EXTREME = "extreme"

ACTION_DOWNGRADE = "downgrade"
ACTION_REDUCE = "reduce"
ACTION_REPLACE = "replace"

CHOICE_KEEP = "keep"
CHOICE_CONSERVATIVE = "conservative"
CHOICE_RECOMMENDED = "recommended"

QUALITY_TYPES = frozenset({
    "vo2", "intervals", "hill_repeats", "threshold",
    "marathon_pace", "race_pace", "mixed", "progressive",
})

RACE_GOALS = ("5k", "10k", "half", "marathon")
_RACE_GOAL_ALIASES = {
    "5k": "5k",
    "10k": "10k",
    "half": "half",
    "half marathon": "half",
    "half_marathon": "half",
    "hm": "half",
    "marathon": "marathon",
    "full": "marathon",
}


def normalize_race_goal(goal: str | None) -> str:
    """Map '5K', 'Half Marathon', 'marathon', ... onto 5k/10k/half/marathon (default half)."""
    return _RACE_GOAL_ALIASES.get((goal or "").strip().lower(), "half")


@dataclass(frozen=True)
class HRZoneData:
    """Minutes spent in each heart-rate zone."""
    zone1_min: float = 0.0
    zone2_min: float = 0.0
    zone3_min: float = 0.0
    zone4_min: float = 0.0
    zone5_min: float = 0.0

    @property
    def minutes(self) -> tuple[float, float, float, float, float]:
        return (self.zone1_min, self.zone2_min, self.zone3_min, self.zone4_min, self.zone5_min)

    @property
    def total_min(self) -> float:
        return sum(self.minutes)

    @property
    def zone2_plus_min(self) -> float:
        return self.total_min - self.zone1_min


@dataclass(frozen=True)
class HRZoneConfig:
    """Athlete heart-rate anchors used to place an average HR in a zone."""
    max_hr: int | None = None
    resting_hr: int | None = None


@dataclass(frozen=True)
class ActivityInput:
    """One logged cross-training session."""
    sport: str
    duration_min: float
    rpe: int | None = None
    garmin_aerobic_load: float | None = None
    garmin_anaerobic_load: float | None = None
    hr_zones: HRZoneData | None = None
    avg_hr: int | None = None
    day_index: int | None = None    # 0=Mon .. 6=Sun
    activity_id: str | None = None


@dataclass(frozen=True)
class UniversalLoadResult:
    """Comparable load derived from one activity, whatever its data quality."""
    aerobic_load: float
    anaerobic_load: float
    base_load: float
    fatigue_cost_load: float        # unsaturated; drives reductions/downgrades
    run_replacement_credit: float   # saturated + goal-adjusted; drives replacements
    tier: str
    confidence: float
    sport_key: str
    intensity_mult: float
    recovery_mult: float
    running_specificity: float
    anaerobic_ratio: float
    goal_factor: float
    raw_credit: float
    equivalent_easy_km: float
    explanations: tuple[str, ...] = ()


@dataclass(frozen=True)
class PlannedRun:
    """One run slot of the current week, as seen by the matcher."""
    workout_id: str
    day_index: int
    workout_type: str
    planned_distance_km: float
    planned_aerobic: float
    planned_anaerobic: float
    status: str = "planned"     # planned | reduced | replaced | skipped
    description: str = ""

    @property
    def is_long_run(self) -> bool:
        return self.workout_type == "long"

    @property
    def is_quality(self) -> bool:
        return self.workout_type in QUALITY_TYPES


@dataclass(frozen=True)
class AthleteContext:
    race_goal: str = "half"
    injury_mode: bool = False
    easy_pace_sec_per_km: int | None = None
    hr_zone_config: HRZoneConfig | None = None


@dataclass(frozen=True)
class PlanEdit:
    """A proposed change to one planned run. Pure output; nothing is applied."""
    workout_id: str
    day_index: int
    action: str                 # downgrade | reduce | replace
    original_type: str
    new_type: str
    original_distance_km: float
    new_distance_km: float
    load_reduction: float       # load this edit spends from the outcome budget
    rationale: str

    @property
    def is_full_skip(self) -> bool:
        return self.action == ACTION_REPLACE and self.new_distance_km <= 0


@dataclass(frozen=True)
class ChoiceOutcome:
    """The edits behind one of the user-facing choices."""
    choice: str
    edits: tuple[PlanEdit, ...]
    summary: str
    budget: float = 0.0
    total_load_reduction: float = 0.0
    overflow: float = 0.0       # budget left uncredited after the allocation stopped


@dataclass(frozen=True)
class SuggestionPayload:
    """Everything shown to the athlete for one logged activity."""
    sport_name: str
    duration_min: float
    rpe: int
    equivalent_easy_km: float
    fatigue_cost_load: float
    run_replacement_credit: float
    confidence: float
    tier: str
    severity: str
    headline: str
    summary: str
    warnings: tuple[str, ...]
    keep_outcome: ChoiceOutcome
    conservative_outcome: ChoiceOutcome
    recommended_outcome: ChoiceOutcome
    is_extreme_session: bool
    weekly_run_load: float = 0.0
    can_revert: bool = True
