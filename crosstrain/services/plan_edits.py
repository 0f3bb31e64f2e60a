"""Edit application: the only step that changes a plan.

A plan is a list of workout dicts as stored by the surrounding app:
    {"id", "day", "type", "description", "status", "rpe",
     "aerobic_load", "anaerobic_load", ...}

apply_edits works on a deep copy and returns it; the caller's plan is
never touched. Workouts are matched on (id, day) since the same workout
name can appear on several days. A workout without a day sits on the day
given by its position in the plan.
"""

from __future__ import annotations

import copy
from typing import Any, Iterable

from crosstrain.logging_config import get_logger, log_context
from crosstrain.services.adjustment_builder import CATEGORY_RPE
from crosstrain.services.load_types import ACTION_DOWNGRADE, ACTION_REPLACE, PlanEdit, PlannedRun
from crosstrain.services.workout_load import (
    WorkoutLoadFn,
    load_fn_for_pace,
    paces_from_easy,
    parse_workout_distance,
)

logger = get_logger(__name__)

# Cycling is a run slot; sports marks it untouchable for cycling sessions
NON_RUN_TYPES = frozenset({"cross", "strength", "rest", "test_run"})
AEROBIC_LOAD_PER_KM = 35.0

STATUS_SKIPPED = "skipped"
STATUS_REPLACED = "replaced"
STATUS_REDUCED = "reduced"


class DuplicateWorkoutError(ValueError):
    """Plan holds two workouts with the same (id, day); edits would be ambiguous."""


def _day_index(workout: dict[str, Any], position: int) -> int:
    day = workout.get("day")
    return position if day is None else int(day)


def _workout_key(workout: dict[str, Any], position: int) -> tuple[str, int]:
    return (str(workout.get("id")), _day_index(workout, position))


def _check_unique(plan: Iterable[dict[str, Any]]) -> None:
    seen: set[tuple[str, int]] = set()
    for position, workout in enumerate(plan):
        if workout.get("id") is None:
            continue
        key = _workout_key(workout, position)
        if key in seen:
            raise DuplicateWorkoutError(f"Duplicate workout {key[0]!r} on day {key[1]!r}")
        seen.add(key)


def _workout_rpe(workout: dict[str, Any]) -> int:
    rpe = workout.get("rpe")
    if rpe is None:
        return CATEGORY_RPE.get(workout.get("type", ""), 5)
    return int(rpe)


def workouts_to_planned_runs(
    plan: list[dict[str, Any]],
    easy_pace_sec_per_km: int | None = None,
    load_fn: WorkoutLoadFn | None = None,
) -> tuple[PlannedRun, ...]:
    """Project a plan onto the run slots the matcher works with.

    Non-run sessions are skipped. Time-based descriptions are converted to
    distance at paces derived from ``easy_pace_sec_per_km``. When the
    description cannot be parsed the distance is estimated from aerobic
    load, or left at 0.
    """
    paces = paces_from_easy(easy_pace_sec_per_km)
    load_fn = load_fn or load_fn_for_pace(easy_pace_sec_per_km)
    runs: list[PlannedRun] = []
    for position, workout in enumerate(plan):
        category = workout.get("type", "easy")
        if category in NON_RUN_TYPES:
            continue
        description = workout.get("description", "") or ""

        aerobic = workout.get("aerobic_load")
        anaerobic = workout.get("anaerobic_load")
        if aerobic is None or anaerobic is None:
            load = load_fn(category, description, _workout_rpe(workout) * 10)
            aerobic, anaerobic = load.aerobic_load, load.anaerobic_load

        meters = parse_workout_distance(description, paces)
        distance_km = meters / 1000.0 if meters > 0 else (aerobic or 0.0) / AEROBIC_LOAD_PER_KM

        runs.append(PlannedRun(
            workout_id=str(workout.get("id", "")),
            day_index=_day_index(workout, position),
            workout_type=category,
            planned_distance_km=round(distance_km, 1),
            planned_aerobic=float(aerobic or 0.0),
            planned_anaerobic=float(anaerobic or 0.0),
            status=workout.get("status", "planned"),
            description=description,
        ))
    return tuple(runs)


def _apply_one(workout: dict[str, Any], edit: PlanEdit, sport_label: str, load_fn: WorkoutLoadFn) -> None:
    workout.setdefault("original_description", workout.get("description", ""))
    workout["mod_reason"] = edit.rationale

    if edit.is_full_skip:
        workout["status"] = STATUS_SKIPPED
        workout["description"] = f"Replaced by {sport_label}"
        workout["completed_by_sport"] = sport_label
        workout["aerobic_load"] = 0.0
        workout["anaerobic_load"] = 0.0
        return

    if edit.action == ACTION_REPLACE:
        # Shakeout: still a run to complete and rate
        workout["status"] = STATUS_REPLACED
        workout["description"] = f"{edit.new_distance_km:g}km"
    elif edit.action == ACTION_DOWNGRADE:
        workout["status"] = STATUS_REDUCED
    else:
        workout["status"] = STATUS_REDUCED
        workout["description"] = f"{edit.new_distance_km:g}km (was {edit.original_distance_km:g}km)"

    if edit.new_type != workout.get("type"):
        workout["rpe"] = CATEGORY_RPE.get(edit.new_type, _workout_rpe(workout))
    workout["type"] = edit.new_type

    load = load_fn(edit.new_type, workout["description"], _workout_rpe(workout) * 10)
    workout["aerobic_load"] = load.aerobic_load
    workout["anaerobic_load"] = load.anaerobic_load


def apply_edits(
    plan: list[dict[str, Any]],
    edits: Iterable[PlanEdit],
    sport_label: str,
    easy_pace_sec_per_km: int | None = None,
    load_fn: WorkoutLoadFn | None = None,
) -> list[dict[str, Any]]:
    """Return a new plan with ``edits`` applied; ``plan`` is left unchanged.

    Edited workouts are re-priced at ``easy_pace_sec_per_km``. Raises
    DuplicateWorkoutError when (id, day) does not identify a single
    workout. Edits whose workout is no longer in the plan are ignored.
    """
    _check_unique(plan)
    load_fn = load_fn or load_fn_for_pace(easy_pace_sec_per_km)
    updated = copy.deepcopy(plan)
    by_key = {
        _workout_key(w, position): w
        for position, w in enumerate(updated)
        if w.get("id") is not None
    }

    applied = 0
    for edit in edits:
        workout = by_key.get((edit.workout_id, edit.day_index))
        if workout is None:
            logger.warning(
                "edit target not found in plan",
                extra=log_context(workout_id=edit.workout_id, day=edit.day_index),
            )
            continue
        _apply_one(workout, edit, sport_label, load_fn)
        applied += 1

    logger.info("plan edits applied", extra=log_context(sport=sport_label, applied=applied))
    return updated
