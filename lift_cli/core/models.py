"""Lightweight data models used across the engine and commands."""

from __future__ import annotations

from dataclasses import dataclass, field, fields, is_dataclass
from datetime import date, datetime
from typing import Any, Optional, Tuple


@dataclass(frozen=True)
class WorkoutSet:
    """One performed set. Missing values count as zero in arithmetic."""

    set_number: Optional[int] = None
    reps: Optional[int] = None
    weight: Optional[float] = None
    rpe: Optional[float] = None
    completed: Optional[bool] = None


@dataclass(frozen=True)
class ExerciseHistoryEntry:
    """One past session of a single exercise."""

    sets: Tuple[WorkoutSet, ...]
    workout_date: date
    completed_at: Optional[datetime] = None


@dataclass(frozen=True)
class PreviousBest:
    """Record book for one exercise."""

    max_weight: Optional[float] = None
    max_reps: Optional[int] = None
    max_volume: Optional[float] = None
    estimated_1rm: Optional[float] = None


@dataclass(frozen=True)
class PersonalRecordEvent:
    type: str
    value: float
    unit: str


@dataclass(frozen=True)
class StreakState:
    current_streak: int = 0
    longest_streak: int = 0
    streak_start_date: Optional[date] = None


@dataclass(frozen=True)
class AchievementRequirement:
    type: str
    value: float
    exercise_id: Optional[str] = None


@dataclass(frozen=True)
class Achievement:
    """Catalog entry for an unlockable achievement."""

    id: str
    name: str
    description: str
    icon: str
    category: str
    requirement: AchievementRequirement
    xp_reward: int


@dataclass(frozen=True)
class AchievementProgress:
    achievement: Achievement
    progress: int


@dataclass(frozen=True)
class AchievementStats:
    unlocked: int
    total: int
    xp_earned: int
    xp_potential: int


@dataclass(frozen=True)
class UserProgressSnapshot:
    """Point-in-time cumulative statistics assembled by the caller."""

    total_workouts: int = 0
    current_streak: int = 0
    longest_streak: int = 0
    total_prs: int = 0
    total_volume: float = 0.0
    latest_workout_volume: Optional[float] = None


@dataclass(frozen=True)
class LevelInfo:
    level: int
    title: str
    xp_floor: int
    xp_ceiling: Optional[int] = None


@dataclass(frozen=True)
class LevelUpResult:
    did_level_up: bool
    previous_level: int
    new_level: int
    levels_gained: int = 0


@dataclass(frozen=True)
class OverloadSuggestion:
    """Training adjustment produced by the overload advisor."""

    type: str
    suggestion: str
    reason: str
    recommended_weight: Optional[float] = None
    recommended_reps: Optional[int] = None


@dataclass(frozen=True)
class XPBreakdown:
    base_xp: int
    streak_bonus: int
    perfect_bonus: int
    challenge_bonus: int
    total: int


@dataclass(frozen=True)
class LoggedExercise:
    exercise_id: str
    sets: Tuple[WorkoutSet, ...]
    name: Optional[str] = None


@dataclass(frozen=True)
class LoggedWorkout:
    """One workout from a training log file."""

    workout_date: date
    exercises: Tuple[LoggedExercise, ...] = field(default_factory=tuple)
    completed_at: Optional[datetime] = None
    title: Optional[str] = None


@dataclass(frozen=True)
class TrainingLog:
    workouts: Tuple[LoggedWorkout, ...] = field(default_factory=tuple)
    bonus_xp: int = 0


def to_jsonable(value: Any) -> Any:
    """Convert models (and containers of them) into JSON-ready structures."""
    if is_dataclass(value) and not isinstance(value, type):
        return {item.name: to_jsonable(getattr(value, item.name)) for item in fields(value)}
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(key): to_jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(item) for item in value]
    return value
