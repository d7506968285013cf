"""Strength-training formulas: 1RM estimation, working sets, and volume."""

from __future__ import annotations

import math
from typing import Iterable, List, Optional, Sequence

from lift_cli.core.constants import EPLEY_DIVISOR, EPLEY_MAX_REPS
from lift_cli.core.models import WorkoutSet


def _reps(workout_set: WorkoutSet) -> int:
    return int(workout_set.reps or 0)


def _weight(workout_set: WorkoutSet) -> float:
    return float(workout_set.weight or 0.0)


def round_weight(value: float, places: int = 1) -> float:
    """Round half-up to ``places`` decimals (``round`` uses banker's rounding)."""
    factor = 10**places
    return math.floor(value * factor + 0.5) / factor


def average(values: Iterable[float]) -> Optional[float]:
    """Arithmetic mean, or None for no values."""
    data = list(values)
    if not data:
        return None
    return sum(data) / len(data)


def estimated_1rm(weight: Optional[float], reps: Optional[int]) -> Optional[float]:
    """Return the Epley one-rep max estimate.

    A single rep is the weight itself. Between 2 and 12 reps the estimate is
    ``weight * (1 + reps / 30)``. Above 12 reps the formula is unreliable and
    ``None`` is returned so callers cannot mistake it for a real estimate.
    Missing or non-positive inputs yield ``0.0``.
    """
    reps_value = int(reps or 0)
    weight_value = float(weight or 0.0)
    if reps_value > EPLEY_MAX_REPS:
        return None
    if reps_value <= 0 or weight_value <= 0:
        return 0.0
    if reps_value == 1:
        return weight_value
    return weight_value * (1 + reps_value / EPLEY_DIVISOR)


def is_working_set(workout_set: WorkoutSet) -> bool:
    """Warm-ups have zero reps and carry neither a completion nor an RPE marker."""
    return workout_set.completed is True or workout_set.rpe is not None or _reps(workout_set) > 0


def working_sets(sets: Iterable[WorkoutSet]) -> List[WorkoutSet]:
    """Filter out warm-up sets."""
    return [workout_set for workout_set in sets if is_working_set(workout_set)]


def calculate_workout_volume(sets: Iterable[WorkoutSet]) -> float:
    """Gross load: sum of reps times weight over every supplied set."""
    return sum(_reps(workout_set) * _weight(workout_set) for workout_set in sets)


def set_score(workout_set: WorkoutSet) -> float:
    """1RM-proxy score used to pick the representative set."""
    return _weight(workout_set) * (1 + _reps(workout_set) / EPLEY_DIVISOR)


def best_set_by_score(sets: Sequence[WorkoutSet]) -> Optional[WorkoutSet]:
    """Return the highest-scoring set eligible for a 1RM estimate.

    Sets outside 1..12 reps are never candidates. Ties keep the first set.
    """
    best: Optional[WorkoutSet] = None
    best_score = 0.0
    for workout_set in sets:
        reps = _reps(workout_set)
        if reps < 1 or reps > EPLEY_MAX_REPS:
            continue
        score = set_score(workout_set)
        if best is None or score > best_score:
            best = workout_set
            best_score = score
    return best
