"""Progressive-overload advice from recent exercise history.

The advisor is a prioritized rule list. Each rule receives the same
:class:`OverloadContext` and either returns a suggestion or ``None``; the
first suggestion wins, so rule order is the branch priority.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Tuple

from lift_cli.core.constants import (
    DECREASE_FACTOR,
    DEFAULT_REPS_MAX,
    DEFAULT_REPS_MIN,
    DELOAD_FACTOR,
    HEAVY_INCREMENT,
    HEAVY_WEIGHT_THRESHOLD,
    HIGH_RPE,
    LIGHT_INCREMENT,
    LOW_RPE,
    OVERLOAD_WINDOW,
    PLATEAU_WINDOW,
    STRUGGLE_MARGIN,
)
from lift_cli.core.formulas import average, working_sets
from lift_cli.core.models import ExerciseHistoryEntry, OverloadSuggestion, WorkoutSet

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OverloadContext:
    """Derived metrics shared by every rule."""

    history: Tuple[ExerciseHistoryEntry, ...]
    reps_min: int
    reps_max: int
    last_weight: float
    avg_reps: float
    max_reps: int
    avg_rpe: Optional[float]
    recent_count: int
    hit_target_consistently: bool
    struggling_recently: bool


Rule = Callable[[OverloadContext], Optional[OverloadSuggestion]]


def weight_increment(weight: float) -> float:
    return HEAVY_INCREMENT if weight >= HEAVY_WEIGHT_THRESHOLD else LIGHT_INCREMENT


def top_working_weight(entry: ExerciseHistoryEntry) -> Optional[float]:
    """Heaviest working-set weight of a session, or None without working sets."""
    sets = working_sets(entry.sets)
    if not sets:
        return None
    return max(float(s.weight or 0.0) for s in sets)


def _reps(workout_set: WorkoutSet) -> int:
    return int(workout_set.reps or 0)


def build_context(
    history: Sequence[ExerciseHistoryEntry],
    reps_min: int,
    reps_max: int,
    latest_working: Sequence[WorkoutSet],
) -> OverloadContext:
    recent = list(history[:OVERLOAD_WINDOW])
    groups = [working_sets(entry.sets) for entry in recent]
    rpes = [float(s.rpe) for s in latest_working if s.rpe is not None]

    hit_target = all(
        group and all(_reps(s) >= reps_min for s in group) for group in groups
    )
    struggling = any(_reps(s) < reps_min - STRUGGLE_MARGIN for group in groups for s in group)

    return OverloadContext(
        history=tuple(history),
        reps_min=reps_min,
        reps_max=reps_max,
        last_weight=max(float(s.weight or 0.0) for s in latest_working),
        avg_reps=sum(_reps(s) for s in latest_working) / len(latest_working),
        max_reps=max(_reps(s) for s in latest_working),
        avg_rpe=average(rpes),
        recent_count=len(recent),
        hit_target_consistently=bool(hit_target),
        struggling_recently=struggling,
    )


def _increase_weight_on_target(ctx: OverloadContext) -> Optional[OverloadSuggestion]:
    if not (ctx.hit_target_consistently and ctx.avg_reps >= ctx.reps_max):
        return None
    return OverloadSuggestion(
        type="increase_weight",
        suggestion=f"you've been hitting {math.floor(ctx.avg_reps + 0.5)} reps consistently. time to add weight!",
        recommended_weight=ctx.last_weight + weight_increment(ctx.last_weight),
        reason=f"hitting {ctx.reps_max}+ reps for {ctx.recent_count} workouts",
    )


def _increase_weight_on_low_rpe(ctx: OverloadContext) -> Optional[OverloadSuggestion]:
    if ctx.avg_rpe is None or ctx.avg_rpe >= LOW_RPE or ctx.avg_reps < ctx.reps_min:
        return None
    return OverloadSuggestion(
        type="increase_weight",
        suggestion=f"rpe of {ctx.avg_rpe:.1f} is low. you can handle more weight",
        recommended_weight=ctx.last_weight + weight_increment(ctx.last_weight),
        reason="low rpe indicates room for progression",
    )


def _decrease_weight(ctx: OverloadContext) -> Optional[OverloadSuggestion]:
    high_rpe = ctx.avg_rpe is not None and ctx.avg_rpe > HIGH_RPE
    if not (ctx.struggling_recently or high_rpe):
        return None
    reason = "struggling with current weight" if ctx.struggling_recently else "high rpe"
    return OverloadSuggestion(
        type="decrease_weight",
        suggestion="reduce weight slightly to focus on form and recovery",
        recommended_weight=ctx.last_weight * DECREASE_FACTOR,
        reason=reason,
    )


def _increase_reps(ctx: OverloadContext) -> Optional[OverloadSuggestion]:
    if not (ctx.reps_min <= ctx.avg_reps < ctx.reps_max):
        return None
    return OverloadSuggestion(
        type="increase_reps",
        suggestion=f"aim for {ctx.reps_max} reps before adding weight",
        recommended_reps=min(ctx.reps_max, math.ceil(ctx.avg_reps) + 1),
        reason="progress reps within target range first",
    )


def _deload_on_plateau(ctx: OverloadContext) -> Optional[OverloadSuggestion]:
    if len(ctx.history) < PLATEAU_WINDOW:
        return None
    weights = [top_working_weight(entry) for entry in ctx.history[:PLATEAU_WINDOW]]
    if weights[0] is None or any(weight != weights[0] for weight in weights):
        return None
    return OverloadSuggestion(
        type="deload",
        suggestion="plateau detected. consider a deload week or changing rep ranges",
        recommended_weight=ctx.last_weight * DELOAD_FACTOR,
        reason=f"same weight for {PLATEAU_WINDOW}+ workouts indicates plateau",
    )


def _maintain(ctx: OverloadContext) -> Optional[OverloadSuggestion]:
    return OverloadSuggestion(
        type="maintain",
        suggestion="keep current weight and aim for consistent reps",
        recommended_weight=ctx.last_weight,
        reason="progressing steadily",
    )


RULES: Tuple[Tuple[str, Rule], ...] = (
    ("increase_weight_on_target", _increase_weight_on_target),
    ("increase_weight_on_low_rpe", _increase_weight_on_low_rpe),
    ("decrease_weight", _decrease_weight),
    ("increase_reps", _increase_reps),
    ("deload_on_plateau", _deload_on_plateau),
    ("maintain", _maintain),
)


def get_progressive_overload_suggestion(
    history: Sequence[ExerciseHistoryEntry],
    reps_min: int = DEFAULT_REPS_MIN,
    reps_max: int = DEFAULT_REPS_MAX,
) -> OverloadSuggestion:
    """Recommend the next training adjustment for one exercise.

    ``history`` is ordered most-recent-first. Only the three latest sessions
    feed the decision tree; plateau detection looks at four.
    """
    if reps_min < 0 or reps_max < reps_min:
        raise ValueError(f"Invalid rep range: {reps_min}-{reps_max}")

    if not history:
        return OverloadSuggestion(
            type="maintain",
            suggestion="start with a comfortable weight",
            reason="no previous data",
        )

    latest = history[0]
    if not latest.sets:
        return OverloadSuggestion(
            type="maintain",
            suggestion="continue with previous weight",
            reason="incomplete data",
        )

    latest_working = working_sets(latest.sets)
    if not latest_working:
        return OverloadSuggestion(
            type="maintain",
            suggestion="continue with previous weight",
            reason="no working sets found",
        )

    ctx = build_context(history, reps_min, reps_max, latest_working)
    for name, rule in RULES:
        outcome = rule(ctx)
        if outcome is not None:
            logger.debug("Overload rule %s matched: %s", name, outcome.reason)
            return outcome

    raise AssertionError("maintain rule always matches")
