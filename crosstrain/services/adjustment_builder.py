"""Budgeted adjustment builder: greedy, budget-constrained plan edits.

Walks the ranked candidates once, choosing for each run a downgrade, a
reduction, or a replacement, and charging the load that edit absorbs
against the outcome's budget. Stops when the budget is spent, when the
severity's edit cap is reached, or when nothing worthwhile remains.

Guarantees, by construction:
- total load_reduction never exceeds the budget (plus rounding tolerance)
- at least preserve_min planned runs are never replaced
- long runs are only replaced in injury mode, and reductions respect both
  an absolute and a relative floor
- downgrades keep the distance and change only the category
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from crosstrain.config import Settings, get_settings
from crosstrain.logging_config import get_logger, log_context
from crosstrain.services.candidates import ScoredCandidate, weighted_load
from crosstrain.services.load_types import (
    ACTION_DOWNGRADE,
    ACTION_REDUCE,
    ACTION_REPLACE,
    SEVERITY_EXTREME,
    SEVERITY_HEAVY,
    SEVERITY_LIGHT,
    PlanEdit,
    PlannedRun,
    UniversalLoadResult,
)
from crosstrain.services.workout_load import WorkoutLoadFn, compute_workout_load

logger = get_logger(__name__)

MIN_WORTHWHILE_LOAD = 10.0
BUDGET_TOLERANCE = 0.5

EASY_MIN_KM = 4.0
EASY_MAX_CUT = 0.40
MIN_REDUCE_CUT = 0.10

LONG_MIN_KM = 10.0
LONG_MIN_FRAC = 0.65
LONG_MAX_CUT = 0.25

SHAKEOUT_KM = 4.0

MAX_EDITS_BY_SEVERITY = {SEVERITY_LIGHT: 1, SEVERITY_HEAVY: 2, SEVERITY_EXTREME: 3}

# One rung easier on the intensity ladder
DOWNGRADE_LADDER: dict[str, str] = {
    "vo2": "threshold",
    "intervals": "threshold",
    "hill_repeats": "threshold",
    "threshold": "marathon_pace",
    "race_pace": "marathon_pace",
    "mixed": "marathon_pace",
    "progressive": "marathon_pace",
    "marathon_pace": "easy",
}

# Typical RPE per category, used to price a workout with the load model
CATEGORY_RPE: dict[str, int] = {
    "vo2": 9,
    "intervals": 9,
    "hill_repeats": 8,
    "race_pace": 8,
    "mixed": 8,
    "threshold": 7,
    "progressive": 7,
    "marathon_pace": 6,
    "long": 5,
    "easy": 4,
}


@dataclass(frozen=True)
class OutcomeRules:
    """What one outcome is allowed to do."""
    allow_replace: bool
    severity: str
    confidence: float
    preserve_min: int
    planned_count: int


@dataclass(frozen=True)
class AllocationResult:
    edits: tuple[PlanEdit, ...]
    budget: float
    spent: float

    @property
    def overflow(self) -> float:
        return round(max(0.0, self.budget - self.spent), 1)


def max_edits(severity: str) -> int:
    return MAX_EDITS_BY_SEVERITY.get(severity, 1)


def preserve_run_count_min(planned_count: int, settings: Settings | None = None) -> int:
    """Runs that must survive without replacement: max(2, ceil(planned x 0.55))."""
    settings = settings or get_settings()
    return max(settings.min_preserved_runs, math.ceil(planned_count * settings.preserve_run_fraction))


def _ceil_km(km: float) -> float:
    # Round up so the realised cut never exceeds the budgeted one
    return math.ceil(round(km * 10, 6)) / 10


def _priced_load(load_fn: WorkoutLoadFn, category: str, run: PlannedRun) -> float:
    description = f"{run.planned_distance_km:g}km" if run.planned_distance_km > 0 else run.description
    load = load_fn(category, description, CATEGORY_RPE.get(category, 5) * 10)
    return weighted_load(load.aerobic_load, load.anaerobic_load)


def _downgrade(run: PlannedRun, remaining: float, load_fn: WorkoutLoadFn) -> PlanEdit | None:
    new_type = DOWNGRADE_LADDER.get(run.workout_type)
    if new_type is None:
        return None
    delta = max(0.0, _priced_load(load_fn, run.workout_type, run) - _priced_load(load_fn, new_type, run))
    if delta <= 0 or delta > remaining:
        return None
    return PlanEdit(
        workout_id=run.workout_id,
        day_index=run.day_index,
        action=ACTION_DOWNGRADE,
        original_type=run.workout_type,
        new_type=new_type,
        original_distance_km=run.planned_distance_km,
        new_distance_km=run.planned_distance_km,
        load_reduction=round(delta, 1),
        rationale=f"Downgrade {run.workout_type.replace('_', ' ')} to {new_type.replace('_', ' ')} to manage fatigue.",
    )


def _reduce(
    run: PlannedRun,
    run_load: float,
    remaining: float,
    max_cut: float,
    floor_km: float,
    label: str,
) -> PlanEdit | None:
    original = run.planned_distance_km
    if original <= floor_km:
        return None
    cut = min(remaining / run_load, max_cut)
    new_km = max(floor_km, _ceil_km(original * (1 - cut)))
    realised_cut = (original - new_km) / original
    if realised_cut < MIN_REDUCE_CUT:
        return None
    return PlanEdit(
        workout_id=run.workout_id,
        day_index=run.day_index,
        action=ACTION_REDUCE,
        original_type=run.workout_type,
        new_type=run.workout_type,
        original_distance_km=original,
        new_distance_km=new_km,
        load_reduction=round(run_load * realised_cut, 1),
        rationale=f"Reduce {label} from {original:g}km to {new_km:g}km.",
    )


def _full_replace(run: PlannedRun, run_load: float, remaining: float, sport_label: str) -> PlanEdit:
    return PlanEdit(
        workout_id=run.workout_id,
        day_index=run.day_index,
        action=ACTION_REPLACE,
        original_type=run.workout_type,
        new_type=run.workout_type,
        original_distance_km=run.planned_distance_km,
        new_distance_km=0.0,
        load_reduction=round(min(run_load, remaining), 1),
        rationale=f"Replace {run.planned_distance_km:g}km {run.workout_type.replace('_', ' ')} run (covered by {sport_label}).",
    )


def _shakeout(run: PlannedRun, run_load: float, fraction: float) -> PlanEdit:
    return PlanEdit(
        workout_id=run.workout_id,
        day_index=run.day_index,
        action=ACTION_REPLACE,
        original_type=run.workout_type,
        new_type="easy",
        original_distance_km=run.planned_distance_km,
        new_distance_km=SHAKEOUT_KM,
        load_reduction=round(run_load * fraction, 1),
        rationale=f"Replace {run.workout_type.replace('_', ' ')} with {SHAKEOUT_KM:g}km shakeout.",
    )


def allocate_edits(
    candidates: tuple[ScoredCandidate, ...] | list[ScoredCandidate],
    budget: float,
    rules: OutcomeRules,
    sport_label: str = "cross-training",
    settings: Settings | None = None,
    load_fn: WorkoutLoadFn = compute_workout_load,
) -> AllocationResult:
    """Greedy allocation of ``budget`` over candidates already sorted best-first."""
    settings = settings or get_settings()
    remaining = max(0.0, float(budget))
    untouched = rules.planned_count
    cap = max_edits(rules.severity)
    edits: list[PlanEdit] = []

    for cand in candidates:
        if len(edits) >= cap:
            break
        if remaining <= MIN_WORTHWHILE_LOAD:
            break

        run, run_load = cand.run, cand.run_load
        if run_load <= 0:
            continue

        replace_ok = (
            rules.allow_replace
            and cand.can_replace
            and rules.confidence >= settings.conf_replace_min
            and untouched > rules.preserve_min
        )
        covers_run = remaining >= settings.replace_threshold * run_load

        edit: PlanEdit | None
        if run.is_quality:
            if (
                replace_ok
                and rules.severity == SEVERITY_EXTREME
                and remaining >= settings.quality_replace_fraction * run_load
                and run.planned_distance_km > SHAKEOUT_KM
            ):
                edit = _shakeout(run, run_load, settings.quality_replace_fraction)
            else:
                edit = _downgrade(run, remaining, load_fn)
        elif run.is_long_run:
            if replace_ok and covers_run:
                edit = _full_replace(run, run_load, remaining, sport_label)
            elif rules.severity != SEVERITY_LIGHT:
                floor_km = max(LONG_MIN_KM, run.planned_distance_km * LONG_MIN_FRAC)
                edit = _reduce(run, run_load, remaining, LONG_MAX_CUT, floor_km, "long run")
            else:
                edit = None
        elif replace_ok and covers_run:
            edit = _full_replace(run, run_load, remaining, sport_label)
        else:
            edit = _reduce(run, run_load, remaining, EASY_MAX_CUT, EASY_MIN_KM, f"{run.workout_type.replace('_', ' ')} run")

        if edit is None:
            continue

        edits.append(edit)
        remaining -= edit.load_reduction
        if edit.action == ACTION_REPLACE:
            untouched -= 1

        logger.debug(
            "plan edit proposed",
            extra=log_context(
                workout_id=edit.workout_id,
                action=edit.action,
                load_reduction=edit.load_reduction,
                remaining=round(remaining, 1),
            ),
        )

    spent = round(sum(e.load_reduction for e in edits), 1)
    return AllocationResult(edits=tuple(edits), budget=round(float(budget), 1), spent=spent)


def build_conservative_edits(
    candidates: tuple[ScoredCandidate, ...],
    activity_load: UniversalLoadResult,
    severity: str,
    planned_count: int,
    sport_label: str = "cross-training",
    settings: Settings | None = None,
    load_fn: WorkoutLoadFn = compute_workout_load,
) -> AllocationResult:
    """Reduce/downgrade only, spending the (unsaturated) fatigue cost load."""
    settings = settings or get_settings()
    rules = OutcomeRules(
        allow_replace=False,
        severity=severity,
        confidence=activity_load.confidence,
        preserve_min=preserve_run_count_min(planned_count, settings),
        planned_count=planned_count,
    )
    return allocate_edits(candidates, activity_load.fatigue_cost_load, rules, sport_label, settings, load_fn)


def build_recommended_edits(
    candidates: tuple[ScoredCandidate, ...],
    activity_load: UniversalLoadResult,
    severity: str,
    planned_count: int,
    sport_label: str = "cross-training",
    settings: Settings | None = None,
    load_fn: WorkoutLoadFn = compute_workout_load,
) -> AllocationResult:
    """Replace-capable chain, spending the saturated run replacement credit."""
    settings = settings or get_settings()
    rules = OutcomeRules(
        allow_replace=True,
        severity=severity,
        confidence=activity_load.confidence,
        preserve_min=preserve_run_count_min(planned_count, settings),
        planned_count=planned_count,
    )
    return allocate_edits(candidates, activity_load.run_replacement_credit, rules, sport_label, settings, load_fn)
