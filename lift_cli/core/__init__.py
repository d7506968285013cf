"""Pure progression and gamification engine."""

from lift_cli.core.achievements import (
    ACHIEVEMENTS,
    check_new_achievements,
    get_next_achievements,
    get_unlocked_achievements,
)
from lift_cli.core.formulas import calculate_workout_volume, estimated_1rm
from lift_cli.core.leveling import check_level_up, get_level_for_xp
from lift_cli.core.overload import get_progressive_overload_suggestion
from lift_cli.core.records import detect_personal_records
from lift_cli.core.streaks import calculate_streak

__all__ = [
    "ACHIEVEMENTS",
    "calculate_streak",
    "calculate_workout_volume",
    "check_level_up",
    "check_new_achievements",
    "detect_personal_records",
    "estimated_1rm",
    "get_level_for_xp",
    "get_next_achievements",
    "get_progressive_overload_suggestion",
    "get_unlocked_achievements",
]
