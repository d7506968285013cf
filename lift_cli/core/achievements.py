"""Achievement catalog and unlock decisions.

Unlocks are re-derived from a snapshot on every call; there is no "already
awarded" bookkeeping here. Hosts diff two snapshots with
:func:`check_new_achievements` to notify exactly once.
"""

from __future__ import annotations

import logging
import math
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from lift_cli.core.constants import (
    ACHIEVEMENT_CATEGORIES,
    MAX_LOCKED_PROGRESS,
    NEXT_ACHIEVEMENTS_LIMIT,
    REQUIREMENT_TYPES,
)
from lift_cli.core.models import (
    Achievement,
    AchievementProgress,
    AchievementRequirement,
    AchievementStats,
    UserProgressSnapshot,
)

logger = logging.getLogger(__name__)


class AchievementCatalogError(ValueError):
    """Raised when an achievement catalog fails validation."""


def _achievement(
    achievement_id: str,
    name: str,
    description: str,
    icon: str,
    category: str,
    requirement_type: str,
    value: float,
    xp_reward: int,
) -> Achievement:
    return Achievement(
        id=achievement_id,
        name=name,
        description=description,
        icon=icon,
        category=category,
        requirement=AchievementRequirement(type=requirement_type, value=value),
        xp_reward=xp_reward,
    )


_CATALOG: Tuple[Achievement, ...] = (
    # Workout count
    _achievement("first_workout", "First Steps", "Complete your first workout", "🎯", "workout", "workout_count", 1, 25),
    _achievement("workout_10", "Getting Serious", "Complete 10 workouts", "💪", "workout", "workout_count", 10, 100),
    _achievement("workout_25", "Dedicated", "Complete 25 workouts", "🔥", "workout", "workout_count", 25, 150),
    _achievement("workout_50", "Half Century", "Complete 50 workouts", "⭐", "workout", "workout_count", 50, 250),
    _achievement("workout_100", "Century Club", "Complete 100 workouts", "🏆", "workout", "workout_count", 100, 500),
    # Streaks
    _achievement("streak_3", "Consistency", "Maintain a 3-day workout streak", "📅", "streak", "streak_days", 3, 50),
    _achievement("streak_7", "Week Warrior", "Maintain a 7-day workout streak", "🗓️", "streak", "streak_days", 7, 150),
    _achievement("streak_14", "Two Week Titan", "Maintain a 14-day workout streak", "💎", "streak", "streak_days", 14, 300),
    _achievement("streak_30", "Monthly Master", "Maintain a 30-day workout streak", "👑", "streak", "streak_days", 30, 500),
    _achievement("streak_60", "Unstoppable", "Maintain a 60-day workout streak", "🚀", "streak", "streak_days", 60, 1000),
    # Personal records
    _achievement("first_pr", "Personal Best", "Set your first personal record", "🥇", "strength", "pr_count", 1, 50),
    _achievement("pr_10", "Record Breaker", "Set 10 personal records", "🏅", "strength", "pr_count", 10, 150),
    _achievement("pr_25", "Limit Pusher", "Set 25 personal records", "🎖️", "strength", "pr_count", 25, 300),
    # Cumulative volume
    _achievement("volume_10k", "Heavy Lifter", "Lift 10,000 kg total volume", "🏋️", "milestone", "total_volume", 10000, 100),
    _achievement("volume_50k", "Iron Will", "Lift 50,000 kg total volume", "⚡", "milestone", "total_volume", 50000, 250),
    _achievement("volume_100k", "Centurion", "Lift 100,000 kg total volume", "🦁", "milestone", "total_volume", 100000, 500),
    # Single session volume
    _achievement("single_workout_5k", "Big Session", "Lift 5,000 kg in a single workout", "💥", "milestone", "single_workout_volume", 5000, 100),
    _achievement("single_workout_10k", "Monster Workout", "Lift 10,000 kg in a single workout", "🦍", "milestone", "single_workout_volume", 10000, 250),
)


def validate_catalog(catalog: Sequence[Achievement]) -> Tuple[Achievement, ...]:
    """Check ids, requirement types, categories and values; return the catalog as a tuple."""
    seen = set()
    for achievement in catalog:
        if achievement.id in seen:
            raise AchievementCatalogError(f"Duplicate achievement id: {achievement.id}")
        seen.add(achievement.id)
        if achievement.requirement.type not in REQUIREMENT_TYPES:
            raise AchievementCatalogError(
                f"Unknown requirement type {achievement.requirement.type!r} for {achievement.id}"
            )
        if achievement.category not in ACHIEVEMENT_CATEGORIES:
            raise AchievementCatalogError(f"Unknown category {achievement.category!r} for {achievement.id}")
        if achievement.requirement.value <= 0:
            raise AchievementCatalogError(f"Requirement value must be positive for {achievement.id}")
    return tuple(catalog)


ACHIEVEMENTS: Tuple[Achievement, ...] = validate_catalog(_CATALOG)


def _measure(requirement: AchievementRequirement, snapshot: UserProgressSnapshot) -> float:
    if requirement.type == "workout_count":
        return snapshot.total_workouts
    if requirement.type == "streak_days":
        return max(snapshot.current_streak, snapshot.longest_streak)
    if requirement.type == "pr_count":
        return snapshot.total_prs
    if requirement.type == "total_volume":
        return snapshot.total_volume
    if requirement.type == "single_workout_volume":
        return snapshot.latest_workout_volume or 0
    return 0


def is_unlocked(achievement: Achievement, snapshot: UserProgressSnapshot) -> bool:
    return _measure(achievement.requirement, snapshot) >= achievement.requirement.value


def achievement_progress(achievement: Achievement, snapshot: UserProgressSnapshot) -> float:
    """Raw completion percentage, uncapped."""
    return _measure(achievement.requirement, snapshot) / achievement.requirement.value * 100


def get_unlocked_achievements(
    snapshot: UserProgressSnapshot,
    catalog: Sequence[Achievement] = ACHIEVEMENTS,
) -> List[Achievement]:
    """Every achievement whose requirement holds for ``snapshot``, in catalog order."""
    return [achievement for achievement in catalog if is_unlocked(achievement, snapshot)]


def check_new_achievements(
    previous: UserProgressSnapshot,
    current: UserProgressSnapshot,
    catalog: Sequence[Achievement] = ACHIEVEMENTS,
) -> List[Achievement]:
    """Achievements unlocked by ``current`` but not by ``previous``."""
    previous_ids = {achievement.id for achievement in get_unlocked_achievements(previous, catalog)}
    new = [a for a in get_unlocked_achievements(current, catalog) if a.id not in previous_ids]
    if new:
        logger.debug("Newly unlocked achievements: %s", [a.id for a in new])
    return new


def get_next_achievements(
    snapshot: UserProgressSnapshot,
    limit: int = NEXT_ACHIEVEMENTS_LIMIT,
    catalog: Sequence[Achievement] = ACHIEVEMENTS,
) -> List[AchievementProgress]:
    """Locked achievements closest to completion.

    Progress is rounded half-up and capped at 99 so a locked item never reads
    as done. Equal progress keeps catalog order.
    """
    locked = [
        AchievementProgress(
            achievement=achievement,
            progress=min(MAX_LOCKED_PROGRESS, math.floor(achievement_progress(achievement, snapshot) + 0.5)),
        )
        for achievement in catalog
        if not is_unlocked(achievement, snapshot)
    ]
    locked.sort(key=lambda item: item.progress, reverse=True)
    return locked[:limit]


def get_achievement_by_id(
    achievement_id: str,
    catalog: Sequence[Achievement] = ACHIEVEMENTS,
) -> Optional[Achievement]:
    for achievement in catalog:
        if achievement.id == achievement_id:
            return achievement
    return None


def get_achievements_by_category(
    category: str,
    catalog: Sequence[Achievement] = ACHIEVEMENTS,
) -> List[Achievement]:
    return [achievement for achievement in catalog if achievement.category == category]


def group_by_category(catalog: Sequence[Achievement] = ACHIEVEMENTS) -> Dict[str, List[Achievement]]:
    groups: Dict[str, List[Achievement]] = {category: [] for category in ACHIEVEMENT_CATEGORIES}
    for achievement in catalog:
        groups[achievement.category].append(achievement)
    return groups


def achievement_xp(achievements: Iterable[Achievement]) -> int:
    """XP payout for a set of unlocks."""
    return sum(achievement.xp_reward for achievement in achievements)


def total_achievement_xp(catalog: Sequence[Achievement] = ACHIEVEMENTS) -> int:
    return achievement_xp(catalog)


def get_achievement_stats(
    snapshot: UserProgressSnapshot,
    catalog: Sequence[Achievement] = ACHIEVEMENTS,
) -> AchievementStats:
    unlocked = get_unlocked_achievements(snapshot, catalog)
    return AchievementStats(
        unlocked=len(unlocked),
        total=len(catalog),
        xp_earned=achievement_xp(unlocked),
        xp_potential=total_achievement_xp(catalog),
    )
