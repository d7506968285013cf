"""Host-side aggregation: snapshots, exercise histories, XP replay and reports.

The engine modules never read a training log. This module plays the caller:
it dedupes dates, assembles snapshots before and after the latest workout,
and turns engine results into report payloads.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple

from lift_cli.core.achievements import (
    achievement_xp,
    check_new_achievements,
    get_achievement_stats,
    get_next_achievements,
    get_unlocked_achievements,
)
from lift_cli.core.constants import DEFAULT_ALLOWED_REST_DAYS, DEFAULT_REPS_MAX, DEFAULT_REPS_MIN
from lift_cli.core.formulas import calculate_workout_volume, is_working_set
from lift_cli.core.leveling import (
    LEVEL_TABLE,
    calculate_workout_xp,
    check_level_up,
    get_level_for_xp,
    level_progress,
    xp_to_next_level,
)
from lift_cli.core.models import (
    ExerciseHistoryEntry,
    LevelInfo,
    LoggedWorkout,
    PreviousBest,
    TrainingLog,
    UserProgressSnapshot,
    WorkoutSet,
    XPBreakdown,
    to_jsonable,
)
from lift_cli.core.overload import get_progressive_overload_suggestion
from lift_cli.core.records import detect_personal_records, merge_bests, session_bests
from lift_cli.core.streaks import calculate_streak

logger = logging.getLogger(__name__)


def _sort_key(indexed: Tuple[int, LoggedWorkout]) -> Tuple[date, datetime, int]:
    index, workout = indexed
    completed = workout.completed_at.replace(tzinfo=None) if workout.completed_at else datetime.min
    return workout.workout_date, completed, index


def ordered_workouts(log: TrainingLog) -> List[LoggedWorkout]:
    """Workouts oldest first; same-day ties keep completion time, then file order."""
    return [workout for _, workout in sorted(enumerate(log.workouts), key=_sort_key)]


def without_latest(log: TrainingLog) -> TrainingLog:
    """The log as it was before its most recent workout."""
    ordered = ordered_workouts(log)
    return TrainingLog(workouts=tuple(ordered[:-1]), bonus_xp=log.bonus_xp)


def workout_dates(log: TrainingLog) -> List[date]:
    """Unique workout dates; the streak calculator expects one entry per day."""
    return sorted({workout.workout_date for workout in log.workouts})


def workout_sets(workout: LoggedWorkout) -> List[WorkoutSet]:
    return [workout_set for exercise in workout.exercises for workout_set in exercise.sets]


def workout_volume(workout: LoggedWorkout) -> float:
    return calculate_workout_volume(workout_sets(workout))


def exercise_ids(log: TrainingLog) -> List[str]:
    seen: Dict[str, None] = {}
    for workout in ordered_workouts(log):
        for exercise in workout.exercises:
            seen.setdefault(exercise.exercise_id, None)
    return list(seen)


def exercise_name(log: TrainingLog, exercise_id: str) -> str:
    for workout in log.workouts:
        for exercise in workout.exercises:
            if exercise.exercise_id == exercise_id and exercise.name:
                return exercise.name
    return exercise_id


def exercise_history(log: TrainingLog, exercise_id: str) -> List[ExerciseHistoryEntry]:
    """Sessions of one exercise, most recent first.

    An exercise logged twice in one workout becomes a single session.
    """
    entries: List[ExerciseHistoryEntry] = []
    for workout in reversed(ordered_workouts(log)):
        sets = [
            workout_set
            for exercise in workout.exercises
            if exercise.exercise_id == exercise_id
            for workout_set in exercise.sets
        ]
        if any(exercise.exercise_id == exercise_id for exercise in workout.exercises):
            entries.append(
                ExerciseHistoryEntry(
                    sets=tuple(sets),
                    workout_date=workout.workout_date,
                    completed_at=workout.completed_at,
                )
            )
    return entries


def previous_best_from_history(entries: Sequence[ExerciseHistoryEntry]) -> PreviousBest:
    """Fold sessions into a record book."""
    best = PreviousBest()
    for entry in entries:
        best = merge_bests(best, session_bests(entry.sets))
    return best


def count_personal_records(log: TrainingLog) -> int:
    """Replay every exercise chronologically and count record events.

    The first session of an exercise sets the baseline and counts nothing.
    """
    total = 0
    for exercise_id in exercise_ids(log):
        chronological = list(reversed(exercise_history(log, exercise_id)))
        if not chronological:
            continue
        best = session_bests(chronological[0].sets)
        for entry in chronological[1:]:
            total += len(detect_personal_records(entry.sets, best))
            best = merge_bests(best, session_bests(entry.sets))
    return total


def build_snapshot(
    log: TrainingLog,
    allowed_rest_days: int = DEFAULT_ALLOWED_REST_DAYS,
    today: Optional[date] = None,
) -> UserProgressSnapshot:
    """Assemble the cumulative statistics the achievement engine reads."""
    ordered = ordered_workouts(log)
    streak = calculate_streak(workout_dates(log), allowed_rest_days=allowed_rest_days, today=today)
    return UserProgressSnapshot(
        total_workouts=len(ordered),
        current_streak=streak.current_streak,
        longest_streak=streak.longest_streak,
        total_prs=count_personal_records(log),
        total_volume=sum(workout_volume(workout) for workout in ordered),
        latest_workout_volume=workout_volume(ordered[-1]) if ordered else None,
    )


def _completed_set_count(sets: Sequence[WorkoutSet]) -> int:
    return sum(
        1
        for workout_set in sets
        if workout_set.completed is True or (workout_set.completed is None and is_working_set(workout_set))
    )


def workout_xp_breakdowns(
    log: TrainingLog,
    allowed_rest_days: int = DEFAULT_ALLOWED_REST_DAYS,
) -> List[Tuple[LoggedWorkout, XPBreakdown]]:
    """XP per workout, using the streak as of that workout's date."""
    results: List[Tuple[LoggedWorkout, XPBreakdown]] = []
    seen_dates = set()
    for workout in ordered_workouts(log):
        seen_dates.add(workout.workout_date)
        streak = calculate_streak(seen_dates, allowed_rest_days=allowed_rest_days, today=workout.workout_date)
        sets = workout_sets(workout)
        breakdown = calculate_workout_xp(
            completed_sets=_completed_set_count(sets),
            total_sets=len(sets),
            current_streak=streak.current_streak,
        )
        results.append((workout, breakdown))
    return results


def accumulate_xp(
    log: TrainingLog,
    allowed_rest_days: int = DEFAULT_ALLOWED_REST_DAYS,
    today: Optional[date] = None,
) -> int:
    """Workout XP plus achievement rewards plus any bonus XP in the log."""
    workout_xp = sum(item.total for _, item in workout_xp_breakdowns(log, allowed_rest_days))
    snapshot = build_snapshot(log, allowed_rest_days=allowed_rest_days, today=today)
    return workout_xp + achievement_xp(get_unlocked_achievements(snapshot)) + log.bonus_xp


def _level_payload(xp: int, table: Sequence[LevelInfo]) -> Dict[str, Any]:
    return {
        "total": xp,
        "level": to_jsonable(get_level_for_xp(xp, table)),
        "progress_pct": level_progress(xp, table),
        "xp_to_next_level": xp_to_next_level(xp, table),
    }


def build_exercise_report(
    log: TrainingLog,
    exercise_id: str,
    reps_min: int = DEFAULT_REPS_MIN,
    reps_max: int = DEFAULT_REPS_MAX,
) -> Dict[str, Any]:
    """Latest-session records and overload advice for one exercise."""
    history = exercise_history(log, exercise_id)
    latest = history[0] if history else None
    prior_best = previous_best_from_history(history[1:])
    records = detect_personal_records(latest.sets, prior_best) if latest and len(history) > 1 else []
    suggestion = get_progressive_overload_suggestion(history, reps_min=reps_min, reps_max=reps_max)
    return {
        "exercise_id": exercise_id,
        "name": exercise_name(log, exercise_id),
        "sessions": len(history),
        "last_date": latest.workout_date.isoformat() if latest else None,
        "baseline": len(history) <= 1,
        "previous_best": to_jsonable(prior_best),
        "records": to_jsonable(records),
        "all_time_best": to_jsonable(previous_best_from_history(history)),
        "suggestion": to_jsonable(suggestion),
    }


def build_progress_report(
    log: TrainingLog,
    allowed_rest_days: int = DEFAULT_ALLOWED_REST_DAYS,
    reps_min: int = DEFAULT_REPS_MIN,
    reps_max: int = DEFAULT_REPS_MAX,
    today: Optional[date] = None,
    level_table: Sequence[LevelInfo] = LEVEL_TABLE,
) -> Dict[str, Any]:
    """Full progress report payload for a training log."""
    now = today or date.today()
    ordered = ordered_workouts(log)
    previous_log = without_latest(log)
    previous_today = ordered[-1].workout_date if ordered else now

    streak = calculate_streak(workout_dates(log), allowed_rest_days=allowed_rest_days, today=now)
    snapshot = build_snapshot(log, allowed_rest_days=allowed_rest_days, today=now)
    previous_snapshot = build_snapshot(previous_log, allowed_rest_days=allowed_rest_days, today=previous_today)

    xp = accumulate_xp(log, allowed_rest_days=allowed_rest_days, today=now)
    previous_xp = accumulate_xp(previous_log, allowed_rest_days=allowed_rest_days, today=previous_today)
    level_up = check_level_up(previous_xp, xp, level_table)
    logger.debug("Report for %d workouts: %d XP (previously %d)", len(ordered), xp, previous_xp)

    unlocked = get_unlocked_achievements(snapshot)
    new = check_new_achievements(previous_snapshot, snapshot)
    upcoming = get_next_achievements(snapshot)

    return {
        "generated_for": now.isoformat(),
        "period": {
            "start": ordered[0].workout_date.isoformat() if ordered else None,
            "end": ordered[-1].workout_date.isoformat() if ordered else None,
        },
        "streak": to_jsonable(streak),
        "snapshot": to_jsonable(snapshot),
        "xp": {**_level_payload(xp, level_table), "level_up": to_jsonable(level_up)},
        "achievements": {
            "unlocked": to_jsonable(unlocked),
            "new": to_jsonable(new),
            "new_xp": achievement_xp(new),
            "next": [
                {**to_jsonable(item.achievement), "progress": item.progress} for item in upcoming
            ],
            "stats": to_jsonable(get_achievement_stats(snapshot)),
        },
        "exercises": [
            build_exercise_report(log, exercise_id, reps_min=reps_min, reps_max=reps_max)
            for exercise_id in exercise_ids(log)
        ],
    }
