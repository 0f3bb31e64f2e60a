"""Candidate scoring: ranks the week's planned runs as adjustment targets.

A run scores high when it "feels like" the logged activity: similar
aerobic/anaerobic balance and similar weighted load. Same-day runs get a
bonus; long runs and the workouts most specific to the goal race are
penalised so they are touched last.
"""

from __future__ import annotations

from dataclasses import dataclass

from crosstrain.services.load_types import AthleteContext, PlannedRun, UniversalLoadResult, normalize_race_goal
from crosstrain.services.sports import can_touch_workout

ANAEROBIC_WEIGHT = 1.5      # anaerobic load counts ~1.5x for fatigue equivalence
LOAD_SMOOTHING = 30.0
RATIO_WEIGHT = 0.60
LOAD_WEIGHT = 0.40
SAME_DAY_BONUS = 0.15
LONG_RUN_PENALTY = 0.20
PROTECTION_PENALTY = 0.02
DEFAULT_PROTECTION = 5

# Per goal race: lower = more race-specific = more protected
WORKOUT_PROTECTION: dict[str, dict[str, int]] = {
    "marathon": {
        "long": 0, "marathon_pace": 1, "threshold": 2, "race_pace": 3, "progressive": 3,
        "hill_repeats": 4, "mixed": 4, "intervals": 5, "vo2": 6, "easy": 7,
    },
    "half": {
        "threshold": 0, "long": 1, "race_pace": 2, "vo2": 3, "intervals": 3,
        "progressive": 3, "mixed": 4, "hill_repeats": 4, "marathon_pace": 5, "easy": 6,
    },
    "10k": {
        "threshold": 0, "vo2": 1, "intervals": 2, "race_pace": 2, "long": 3,
        "hill_repeats": 3, "progressive": 4, "mixed": 4, "easy": 6, "marathon_pace": 7,
    },
    "5k": {
        "vo2": 0, "intervals": 0, "race_pace": 1, "hill_repeats": 2, "threshold": 3,
        "long": 4, "progressive": 4, "mixed": 4, "easy": 6, "marathon_pace": 7,
    },
}


@dataclass(frozen=True)
class ScoredCandidate:
    run: PlannedRun
    similarity: float
    run_load: float
    can_replace: bool


def weighted_load(aerobic: float, anaerobic: float) -> float:
    return aerobic + ANAEROBIC_WEIGHT * anaerobic


def anaerobic_ratio(aerobic: float, anaerobic: float) -> float:
    total = aerobic + anaerobic
    return 0.0 if total <= 1e-9 else anaerobic / total


def vibe_similarity(act_aerobic: float, act_anaerobic: float, run_aerobic: float, run_anaerobic: float) -> float:
    """0..1 interchangeability of an activity and a run (before modifiers)."""
    ratio_score = 1.0 - abs(anaerobic_ratio(act_aerobic, act_anaerobic) - anaerobic_ratio(run_aerobic, run_anaerobic))
    load_gap = abs(weighted_load(act_aerobic, act_anaerobic) - weighted_load(run_aerobic, run_anaerobic))
    load_score = 1.0 / (1.0 + load_gap / LOAD_SMOOTHING)
    return RATIO_WEIGHT * ratio_score + LOAD_WEIGHT * load_score


def workout_protection(goal: str, workout_type: str) -> int:
    return WORKOUT_PROTECTION.get(normalize_race_goal(goal), {}).get(workout_type, DEFAULT_PROTECTION)


def weekly_run_load(runs: list[PlannedRun] | tuple[PlannedRun, ...]) -> float:
    """Weighted load of the runs still in 'planned' status."""
    return sum(weighted_load(r.planned_aerobic, r.planned_anaerobic) for r in runs if r.status == "planned")


def score_candidates(
    week_runs: list[PlannedRun] | tuple[PlannedRun, ...],
    activity_load: UniversalLoadResult,
    activity_day_index: int | None,
    context: AthleteContext,
) -> tuple[ScoredCandidate, ...]:
    """Rank planned runs by suitability as adjustment targets, best first.

    Ties keep plan order. Long runs are only replaceable in injury mode, and
    categories the sport marks untouchable are never replaceable.
    """
    scored: list[ScoredCandidate] = []

    for run in week_runs:
        if run.status != "planned":
            continue

        sim = vibe_similarity(
            activity_load.aerobic_load, activity_load.anaerobic_load,
            run.planned_aerobic, run.planned_anaerobic,
        )
        if activity_day_index is not None and run.day_index == activity_day_index:
            sim += SAME_DAY_BONUS
        if run.is_long_run:
            sim -= LONG_RUN_PENALTY
        sim -= PROTECTION_PENALTY * workout_protection(context.race_goal, run.workout_type)

        can_replace = True
        if run.is_long_run and not context.injury_mode:
            can_replace = False
        if not can_touch_workout(activity_load.sport_key, run.workout_type):
            can_replace = False

        scored.append(ScoredCandidate(
            run=run,
            similarity=round(sim, 4),
            run_load=weighted_load(run.planned_aerobic, run.planned_anaerobic),
            can_replace=can_replace,
        ))

    return tuple(sorted(scored, key=lambda c: c.similarity, reverse=True))
