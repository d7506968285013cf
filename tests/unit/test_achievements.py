from dataclasses import replace

import pytest

from lift_cli.core.achievements import (
    ACHIEVEMENTS,
    AchievementCatalogError,
    achievement_progress,
    check_new_achievements,
    get_achievement_by_id,
    get_achievement_stats,
    get_achievements_by_category,
    get_next_achievements,
    get_unlocked_achievements,
    group_by_category,
    validate_catalog,
)
from lift_cli.core.models import UserProgressSnapshot


def _ids(achievements):
    return [achievement.id for achievement in achievements]


def test_catalog_is_valid_and_unique() -> None:
    ids = _ids(ACHIEVEMENTS)
    assert len(ids) == len(set(ids)) == 18
    assert all(achievement.xp_reward > 0 for achievement in ACHIEVEMENTS)


def test_validate_catalog_rejects_duplicates() -> None:
    with pytest.raises(AchievementCatalogError):
        validate_catalog([ACHIEVEMENTS[0], ACHIEVEMENTS[0]])


def test_validate_catalog_rejects_unknown_requirement_type() -> None:
    broken = replace(ACHIEVEMENTS[0], requirement=replace(ACHIEVEMENTS[0].requirement, type="bench_press_kg"))
    with pytest.raises(AchievementCatalogError, match="Unknown requirement type"):
        validate_catalog([broken])


def test_validate_catalog_rejects_non_positive_value() -> None:
    broken = replace(ACHIEVEMENTS[0], requirement=replace(ACHIEVEMENTS[0].requirement, value=0))
    with pytest.raises(AchievementCatalogError):
        validate_catalog([broken])


def test_empty_snapshot_unlocks_nothing() -> None:
    assert get_unlocked_achievements(UserProgressSnapshot()) == []


def test_ten_workouts_with_week_streak() -> None:
    snapshot = UserProgressSnapshot(total_workouts=10, current_streak=7, longest_streak=7)
    assert set(_ids(get_unlocked_achievements(snapshot))) == {
        "first_workout",
        "workout_10",
        "streak_3",
        "streak_7",
    }


@pytest.mark.parametrize(
    "field,step",
    [("total_workouts", 40), ("current_streak", 25), ("total_prs", 30), ("total_volume", 150000.0)],
)
def test_raising_a_counter_never_locks_an_achievement(field, step) -> None:
    snapshot = UserProgressSnapshot(
        total_workouts=10, current_streak=7, longest_streak=7, total_prs=3, total_volume=12000.0, latest_workout_volume=4000.0
    )
    before = set(_ids(get_unlocked_achievements(snapshot)))
    for multiplier in (1, 2, 5):
        bigger = replace(snapshot, **{field: getattr(snapshot, field) + step * multiplier})
        assert before <= set(_ids(get_unlocked_achievements(bigger)))


def test_streak_uses_longest_when_current_is_broken() -> None:
    snapshot = UserProgressSnapshot(total_workouts=20, current_streak=0, longest_streak=14)
    unlocked = _ids(get_unlocked_achievements(snapshot))
    assert "streak_14" in unlocked
    assert "streak_30" not in unlocked


def test_volume_and_record_requirements() -> None:
    snapshot = UserProgressSnapshot(
        total_workouts=1,
        total_prs=10,
        total_volume=50000,
        latest_workout_volume=5000,
    )
    unlocked = _ids(get_unlocked_achievements(snapshot))
    for achievement_id in ("first_pr", "pr_10", "volume_10k", "volume_50k", "single_workout_5k"):
        assert achievement_id in unlocked
    assert "single_workout_10k" not in unlocked


def test_unlocked_keeps_catalog_order() -> None:
    snapshot = UserProgressSnapshot(total_workouts=30, longest_streak=3, total_prs=1)
    assert _ids(get_unlocked_achievements(snapshot)) == [
        "first_workout",
        "workout_10",
        "workout_25",
        "streak_3",
        "first_pr",
    ]


def test_check_new_achievements_diffs_snapshots() -> None:
    previous = UserProgressSnapshot(total_workouts=9, current_streak=2, longest_streak=2)
    current = UserProgressSnapshot(total_workouts=10, current_streak=3, longest_streak=3)
    assert _ids(check_new_achievements(previous, current)) == ["workout_10", "streak_3"]
    assert check_new_achievements(current, current) == []


def test_next_achievements_for_new_user_follow_catalog_order() -> None:
    upcoming = get_next_achievements(UserProgressSnapshot())
    assert [item.achievement.id for item in upcoming] == ["first_workout", "workout_10", "workout_25"]
    assert all(item.progress == 0 for item in upcoming)


def test_next_achievements_sorted_by_progress() -> None:
    snapshot = UserProgressSnapshot(total_workouts=8, current_streak=5, longest_streak=5, total_prs=0)
    upcoming = get_next_achievements(snapshot)
    assert [(item.achievement.id, item.progress) for item in upcoming] == [
        ("workout_10", 80),
        ("streak_7", 71),
        ("streak_14", 36),
    ]


def test_next_achievements_never_show_complete() -> None:
    snapshot = UserProgressSnapshot(total_workouts=1, latest_workout_volume=4990)
    upcoming = get_next_achievements(snapshot, limit=1)
    assert upcoming[0].achievement.id == "single_workout_5k"
    assert upcoming[0].progress == 99
    assert achievement_progress(upcoming[0].achievement, snapshot) == pytest.approx(99.8)


def test_next_achievements_limit() -> None:
    assert len(get_next_achievements(UserProgressSnapshot(), limit=5)) == 5
    assert get_next_achievements(UserProgressSnapshot(), limit=0) == []


def test_lookup_helpers() -> None:
    assert get_achievement_by_id("streak_7").name == "Week Warrior"
    assert get_achievement_by_id("missing") is None
    assert _ids(get_achievements_by_category("strength")) == ["first_pr", "pr_10", "pr_25"]
    groups = group_by_category()
    assert list(groups) == ["workout", "streak", "strength", "milestone"]
    assert sum(len(items) for items in groups.values()) == len(ACHIEVEMENTS)


def test_stats_with_custom_catalog() -> None:
    catalog = get_achievements_by_category("workout")
    snapshot = UserProgressSnapshot(total_workouts=10)
    stats = get_achievement_stats(snapshot, catalog)
    assert stats.unlocked == 2
    assert stats.total == 5
    assert stats.xp_earned == 125
    assert stats.xp_potential == 1025
