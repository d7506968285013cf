"""Continuity streaks over workout dates with a rest-day tolerance."""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Iterable, List, Optional, Union

from lift_cli.core.constants import DEFAULT_ALLOWED_REST_DAYS, STREAK_MILESTONES
from lift_cli.core.models import StreakState

logger = logging.getLogger(__name__)

DateLike = Union[date, datetime]


def _to_date(value: DateLike) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def calculate_streak(
    dates: Iterable[DateLike],
    allowed_rest_days: int = DEFAULT_ALLOWED_REST_DAYS,
    today: Optional[DateLike] = None,
) -> StreakState:
    """Derive current and longest streaks from workout dates.

    Two dates are adjacent when they are at most ``allowed_rest_days + 1``
    days apart, so with the default one missed day keeps the streak alive and
    two consecutive missed days break it. Same-day duplicates are counted as
    given; callers dedupe before calling.
    """
    ordered: List[date] = sorted((_to_date(value) for value in dates), reverse=True)
    if not ordered:
        return StreakState(current_streak=0, longest_streak=0, streak_start_date=None)

    now = _to_date(today) if today is not None else date.today()
    max_gap = allowed_rest_days + 1

    current = 0
    start_date: Optional[date] = None
    days_since_last = (now - ordered[0]).days
    if days_since_last <= max_gap:
        previous = ordered[0]
        for workout_day in ordered:
            if (previous - workout_day).days > max_gap:
                break
            current += 1
            start_date = workout_day
            previous = workout_day
    else:
        logger.debug("Streak broken: %s days since last workout", days_since_last)

    longest = 1
    run = 1
    chronological = list(reversed(ordered))
    for earlier, later in zip(chronological, chronological[1:]):
        if (later - earlier).days <= max_gap:
            run += 1
        else:
            longest = max(longest, run)
            run = 1
    longest = max(longest, run)

    return StreakState(current_streak=current, longest_streak=longest, streak_start_date=start_date)


def is_streak_active(state: StreakState) -> bool:
    return state.current_streak > 0


def streak_milestone(streak: int) -> Optional[int]:
    """Highest milestone reached by ``streak``, if any."""
    reached = [milestone for milestone in STREAK_MILESTONES if streak >= milestone]
    return reached[-1] if reached else None
