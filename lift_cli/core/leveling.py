"""XP levels, level-up detection and per-workout XP rules."""

from __future__ import annotations

import math
from typing import Iterable, Optional, Sequence, Tuple

from lift_cli.core.constants import DEFAULT_LEVEL_THRESHOLDS, XP_VALUES
from lift_cli.core.models import LevelInfo, LevelUpResult, XPBreakdown


class LevelTableError(ValueError):
    """Raised when a level table is empty or not strictly increasing."""


def build_level_table(thresholds: Iterable[Tuple[int, int, str]]) -> Tuple[LevelInfo, ...]:
    """Turn ``(level, xp_floor, title)`` rows into LevelInfo with derived ceilings."""
    rows = list(thresholds)
    table = []
    for index, (level, floor, title) in enumerate(rows):
        ceiling: Optional[int] = None
        if index + 1 < len(rows):
            ceiling = int(rows[index + 1][1]) - 1
        table.append(LevelInfo(level=int(level), title=str(title), xp_floor=int(floor), xp_ceiling=ceiling))
    return tuple(table)


LEVEL_TABLE: Tuple[LevelInfo, ...] = build_level_table(DEFAULT_LEVEL_THRESHOLDS)


def validate_level_table(table: Sequence[LevelInfo]) -> None:
    """Startup check for callers; lookups assume a valid table and do not re-check."""
    if not table:
        raise LevelTableError("Level table must contain at least one level")
    for previous, current in zip(table, table[1:]):
        if current.xp_floor <= previous.xp_floor:
            raise LevelTableError(
                f"XP floors must increase: level {current.level} floor {current.xp_floor} "
                f"<= level {previous.level} floor {previous.xp_floor}"
            )
        if current.level <= previous.level:
            raise LevelTableError(f"Levels must increase: {current.level} after {previous.level}")


def get_level_for_xp(xp: float, table: Sequence[LevelInfo] = LEVEL_TABLE) -> LevelInfo:
    """Highest level whose XP floor is at or below ``xp``."""
    found = table[0]
    for info in table:
        if info.xp_floor <= xp:
            found = info
        else:
            break
    return found


def check_level_up(
    previous_xp: float,
    new_xp: float,
    table: Sequence[LevelInfo] = LEVEL_TABLE,
) -> LevelUpResult:
    """Compare levels before and after an XP change. XP drops never report a level-down."""
    previous_level = get_level_for_xp(previous_xp, table).level
    new_level = get_level_for_xp(new_xp, table).level
    return LevelUpResult(
        did_level_up=new_level > previous_level,
        previous_level=previous_level,
        new_level=new_level,
        levels_gained=max(0, new_level - previous_level),
    )


def level_progress(xp: float, table: Sequence[LevelInfo] = LEVEL_TABLE) -> int:
    """Percent progress through the current level; 100 at the top level."""
    info = get_level_for_xp(xp, table)
    if info.xp_ceiling is None:
        return 100
    span = info.xp_ceiling - info.xp_floor + 1
    return min(100, math.floor((xp - info.xp_floor) / span * 100 + 0.5))


def xp_to_next_level(xp: float, table: Sequence[LevelInfo] = LEVEL_TABLE) -> int:
    info = get_level_for_xp(xp, table)
    if info.xp_ceiling is None:
        return 0
    return int(info.xp_ceiling - xp + 1)


def streak_multiplier(current_streak: int) -> float:
    """1.0 plus 10% per streak day, capped at 2.0."""
    capped = min(max(current_streak, 0), XP_VALUES["max_streak_days_for_bonus"])
    bonus = capped * XP_VALUES["streak_bonus_per_day"]
    return 1 + min(bonus, XP_VALUES["max_streak_multiplier"] - 1)


def streak_bonus_xp(base_xp: int, current_streak: int) -> int:
    return math.floor(base_xp * (streak_multiplier(current_streak) - 1) + 0.5)


def calculate_workout_xp(
    completed_sets: int,
    total_sets: int,
    current_streak: int,
    challenge_bonus: int = 0,
) -> XPBreakdown:
    """XP earned for one finished workout."""
    base_xp = int(XP_VALUES["base_workout_completion"])
    perfect = total_sets > 0 and completed_sets >= total_sets
    perfect_bonus = int(XP_VALUES["perfect_workout_bonus"]) if perfect else 0
    streak_bonus = streak_bonus_xp(base_xp, current_streak)
    return XPBreakdown(
        base_xp=base_xp,
        streak_bonus=streak_bonus,
        perfect_bonus=perfect_bonus,
        challenge_bonus=challenge_bonus,
        total=base_xp + perfect_bonus + streak_bonus + challenge_bonus,
    )
