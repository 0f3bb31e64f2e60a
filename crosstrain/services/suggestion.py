"""Suggestion assembly: one decision payload per logged activity.

Combines load computation, candidate scoring, and the adjustment builder
into three alternatives the athlete chooses from:
- keep: leave the plan unchanged
- conservative: reduce/downgrade only, budgeted by fatigue cost
- recommended: replace-capable chain, budgeted by replacement credit

Nothing here mutates its inputs; applying a choice is a separate step
(see plan_edits.apply_edits).
"""

from __future__ import annotations

from datetime import datetime, time, timedelta
from typing import Sequence

from crosstrain.config import Settings, get_settings
from crosstrain.logging_config import get_logger, log_context
from crosstrain.services.adjustment_builder import (
    AllocationResult,
    build_conservative_edits,
    build_recommended_edits,
    preserve_run_count_min,
)
from crosstrain.services.candidates import score_candidates, weekly_run_load
from crosstrain.services.load_types import (
    CHOICE_CONSERVATIVE,
    CHOICE_KEEP,
    CHOICE_RECOMMENDED,
    SEVERITY_EXTREME,
    SEVERITY_HEAVY,
    SEVERITY_LIGHT,
    TIER_HR,
    TIER_RPE,
    ActivityInput,
    AthleteContext,
    ChoiceOutcome,
    PlannedRun,
    SuggestionPayload,
    UniversalLoadResult,
)
from crosstrain.services.sports import sport_label
from crosstrain.services.universal_load import clamp_rpe, compute_universal_load
from crosstrain.services.workout_load import WorkoutLoadFn, load_fn_for_pace

logger = get_logger(__name__)

EXTREME_WEEK_PCT = 0.55
HEAVY_WEEK_PCT = 0.25
EXTREME_HR_ZONE2_PLUS_MIN = 150
EXTREME_RPE_DURATION_MIN = 120
EXTREME_RPE_LEVEL = 7
HEAVY_RPE_DURATION_MIN = 90
HEAVY_RPE_LEVEL = 6

KEEP_SUMMARY = "Keep your running plan unchanged. Be mindful of accumulated fatigue."
NO_CHANGES_SUMMARY = "No adjustments needed."

_HEADLINES = {
    SEVERITY_EXTREME: "Very heavy training load",
    SEVERITY_HEAVY: "Heavy training load",
    SEVERITY_LIGHT: "Sport session logged",
}


def classify_severity(
    activity_load: UniversalLoadResult,
    activity: ActivityInput,
    weekly_load: float,
) -> str:
    """Light / heavy / extreme impact of the activity on this week.

    Primary rule is fatigue cost relative to the week's planned running
    load. Without sensor data, long hard sessions are still escalated on
    duration and RPE alone; HR-only sessions escalate on long Z2+ time.
    """
    relative = activity_load.fatigue_cost_load / weekly_load if weekly_load > 0 else 0.0
    duration = activity.duration_min or 0
    rpe = clamp_rpe(activity.rpe)
    rpe_only = activity_load.tier == TIER_RPE

    if relative >= EXTREME_WEEK_PCT:
        return SEVERITY_EXTREME
    if rpe_only and duration >= EXTREME_RPE_DURATION_MIN and rpe >= EXTREME_RPE_LEVEL:
        return SEVERITY_EXTREME
    if (
        activity_load.tier == TIER_HR
        and activity.hr_zones is not None
        and activity.hr_zones.zone2_plus_min >= EXTREME_HR_ZONE2_PLUS_MIN
    ):
        return SEVERITY_EXTREME

    if relative >= HEAVY_WEEK_PCT:
        return SEVERITY_HEAVY
    if rpe_only and duration >= HEAVY_RPE_DURATION_MIN and rpe >= HEAVY_RPE_LEVEL:
        return SEVERITY_HEAVY
    return SEVERITY_LIGHT


def _outcome(choice: str, allocation: AllocationResult) -> ChoiceOutcome:
    summary = " ".join(e.rationale for e in allocation.edits) if allocation.edits else NO_CHANGES_SUMMARY
    return ChoiceOutcome(
        choice=choice,
        edits=allocation.edits,
        summary=summary,
        budget=allocation.budget,
        total_load_reduction=allocation.spent,
        overflow=allocation.overflow,
    )


def _summary(activity: ActivityInput, activity_load: UniversalLoadResult, label: str, severity: str) -> str:
    tier_note = {TIER_RPE: " (estimated from RPE)", TIER_HR: " (computed from HR)"}.get(activity_load.tier, "")
    lead = (
        f"Your {activity.duration_min or 0:g} min {label.lower()} session{tier_note} is estimated "
        f"to be ~{activity_load.equivalent_easy_km:g}km easy-run equivalent. "
    )
    if severity == SEVERITY_LIGHT:
        return lead + "Your weekly load looks balanced."
    return lead + "Consider adjusting your running plan to avoid overtraining."


def _warnings(
    activity_load: UniversalLoadResult,
    planned_count: int,
    preserve_min: int,
    settings: Settings,
) -> tuple[str, ...]:
    warnings: list[str] = []
    if 0 < planned_count <= 2:
        warnings.append(f"Only {planned_count} run{'s' if planned_count != 1 else ''} planned this week. We recommend reduce/downgrade only.")
    if activity_load.tier == TIER_RPE:
        warnings.append(
            "Load estimated from RPE only; we're being conservative. Connect a fitness watch for more accuracy."
        )
    if planned_count > 0 and preserve_min >= planned_count:
        warnings.append("Minimum runs preserved to maintain training stimulus.")
    if activity_load.base_load > 0 and activity_load.confidence < settings.conf_replace_min:
        warnings.append(f"Low confidence ({round(activity_load.confidence * 100)}%); replacements disabled.")
    return tuple(warnings)


def build_suggestion(
    week_runs: Sequence[PlannedRun],
    activity: ActivityInput,
    athlete_context: AthleteContext,
    settings: Settings | None = None,
    load_fn: WorkoutLoadFn | None = None,
) -> SuggestionPayload:
    """Build the keep / conservative / recommended payload for one activity.

    Pure and safe to call repeatedly (e.g. every time a preview opens):
    identical inputs give equal payloads and no input is modified.
    Planned workouts are priced at the athlete's easy pace unless a
    custom ``load_fn`` is given.
    """
    settings = settings or get_settings()
    runs = tuple(week_runs)
    load_fn = load_fn or load_fn_for_pace(athlete_context.easy_pace_sec_per_km)

    activity_load = compute_universal_load(
        activity, athlete_context.race_goal, athlete_context.hr_zone_config, settings
    )
    label = sport_label(activity_load.sport_key)

    planned_count = sum(1 for r in runs if r.status == "planned")
    preserve_min = preserve_run_count_min(planned_count, settings)
    weekly_load = weekly_run_load(runs)
    severity = classify_severity(activity_load, activity, weekly_load)

    candidates = score_candidates(runs, activity_load, activity.day_index, athlete_context)
    conservative = build_conservative_edits(
        candidates, activity_load, severity, planned_count, label, settings, load_fn
    )
    recommended = build_recommended_edits(
        candidates, activity_load, severity, planned_count, label, settings, load_fn
    )

    logger.info(
        "cross-training suggestion built",
        extra=log_context(
            sport=activity_load.sport_key,
            severity=severity,
            tier=activity_load.tier,
            conservative_edits=len(conservative.edits),
            recommended_edits=len(recommended.edits),
        ),
    )

    return SuggestionPayload(
        sport_name=label,
        duration_min=activity.duration_min or 0,
        rpe=clamp_rpe(activity.rpe),
        equivalent_easy_km=activity_load.equivalent_easy_km,
        fatigue_cost_load=activity_load.fatigue_cost_load,
        run_replacement_credit=activity_load.run_replacement_credit,
        confidence=activity_load.confidence,
        tier=activity_load.tier,
        severity=severity,
        headline=_HEADLINES[severity],
        summary=_summary(activity, activity_load, label, severity),
        warnings=_warnings(activity_load, planned_count, preserve_min, settings),
        keep_outcome=ChoiceOutcome(choice=CHOICE_KEEP, edits=(), summary=KEEP_SUMMARY),
        conservative_outcome=_outcome(CHOICE_CONSERVATIVE, conservative),
        recommended_outcome=_outcome(CHOICE_RECOMMENDED, recommended),
        is_extreme_session=severity == SEVERITY_EXTREME,
        weekly_run_load=round(weekly_load, 1),
    )


def outcome_for(payload: SuggestionPayload, choice: str) -> ChoiceOutcome:
    """Select the outcome behind a user choice; unknown choices keep the plan."""
    return {
        CHOICE_CONSERVATIVE: payload.conservative_outcome,
        CHOICE_RECOMMENDED: payload.recommended_outcome,
    }.get(choice, payload.keep_outcome)


def reversion_deadline(now: datetime) -> datetime:
    """Last moment an applied choice may be reverted: Sunday 23:59:59 of now's week."""
    sunday = now.date() + timedelta(days=6 - now.weekday())
    return datetime.combine(sunday, time(23, 59, 59), tzinfo=now.tzinfo)
