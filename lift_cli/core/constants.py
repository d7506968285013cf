"""Static constants and mappings for the progression engine."""

from __future__ import annotations

# Epley formula is only trusted for low-to-moderate rep ranges.
EPLEY_DIVISOR = 30.0
EPLEY_MAX_REPS = 12

DEFAULT_ALLOWED_REST_DAYS = 1
STREAK_MILESTONES = (3, 7, 14, 30, 60)

DEFAULT_REPS_MIN = 8
DEFAULT_REPS_MAX = 12
OVERLOAD_WINDOW = 3
PLATEAU_WINDOW = 4
HEAVY_WEIGHT_THRESHOLD = 100.0
LIGHT_INCREMENT = 2.5
HEAVY_INCREMENT = 5.0
DECREASE_FACTOR = 0.9
DELOAD_FACTOR = 0.85
LOW_RPE = 7.0
HIGH_RPE = 9.0
STRUGGLE_MARGIN = 2

PR_TYPES = ("max_weight", "max_reps", "max_volume", "1rm")
PR_UNITS = {"max_weight": "kg", "max_reps": "reps", "max_volume": "kg", "1rm": "kg"}
PR_LABELS = {
    "max_weight": "Max Weight",
    "max_reps": "Max Reps",
    "max_volume": "Max Volume",
    "1rm": "Estimated 1RM",
}

SUGGESTION_TYPES = ("increase_weight", "increase_reps", "decrease_weight", "maintain", "deload")
SUGGESTION_LABELS = {
    "increase_weight": "Increase Weight",
    "increase_reps": "Increase Reps",
    "decrease_weight": "Decrease Weight",
    "maintain": "Maintain",
    "deload": "Deload",
}

REQUIREMENT_TYPES = (
    "workout_count",
    "streak_days",
    "pr_count",
    "total_volume",
    "single_workout_volume",
)
ACHIEVEMENT_CATEGORIES = ("workout", "streak", "strength", "milestone")
NEXT_ACHIEVEMENTS_LIMIT = 3
MAX_LOCKED_PROGRESS = 99

XP_VALUES = {
    "base_workout_completion": 50,
    "perfect_workout_bonus": 50,
    "max_streak_multiplier": 2.0,
    "streak_bonus_per_day": 0.1,
    "max_streak_days_for_bonus": 10,
}

# (level, xp_floor, title); ceilings derive from the next floor.
DEFAULT_LEVEL_THRESHOLDS = (
    (1, 0, "Beginner"),
    (2, 500, "Novice"),
    (3, 1200, "Apprentice"),
    (4, 2100, "Practitioner"),
    (5, 3200, "Dedicated"),
    (6, 4500, "Committed"),
    (7, 6100, "Consistent"),
    (8, 8000, "Expert"),
    (9, 10200, "Master"),
    (10, 12700, "Grandmaster"),
    (11, 15500, "Legend"),
    (12, 18600, "Champion"),
    (13, 22000, "Mythic"),
    (14, 25700, "Transcendent"),
    (15, 29700, "Iron Deity"),
)
