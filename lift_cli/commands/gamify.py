"""Achievement and level commands."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.table import Table

from lift_cli.commands.common import get_state, load_log, print_json_payload, print_key_values
from lift_cli.core.achievements import (
    ACHIEVEMENTS,
    achievement_xp,
    check_new_achievements,
    get_achievement_stats,
    get_achievements_by_category,
    get_next_achievements,
    get_unlocked_achievements,
)
from lift_cli.core.analysis import build_snapshot, ordered_workouts, without_latest
from lift_cli.core.constants import ACHIEVEMENT_CATEGORIES
from lift_cli.core.leveling import check_level_up, get_level_for_xp, level_progress, xp_to_next_level
from lift_cli.core.models import to_jsonable
from lift_cli.utils.date_ranges import resolve_today, validate_date
from lift_cli.utils.formatting import format_xp


def achievements_command(
    ctx: typer.Context,
    log_file: Path = typer.Argument(..., help="Training log (JSON/YAML)"),
    category: Optional[str] = typer.Option(None, help="Only show one category: workout|streak|strength|milestone"),
    today: Optional[str] = typer.Option(None, help="Evaluate as of YYYY-MM-DD", callback=validate_date),
) -> None:
    """Unlocked achievements, new unlocks from the latest workout, and what is next."""
    if category is not None and category not in ACHIEVEMENT_CATEGORIES:
        raise typer.BadParameter(f"category must be one of {'|'.join(ACHIEVEMENT_CATEGORIES)}")

    state = get_state(ctx)
    log = load_log(log_file)
    now = resolve_today(today)
    catalog = get_achievements_by_category(category) if category else list(ACHIEVEMENTS)

    ordered = ordered_workouts(log)
    snapshot = build_snapshot(log, allowed_rest_days=state.allowed_rest_days, today=now)
    previous_today = ordered[-1].workout_date if ordered else now
    previous = build_snapshot(without_latest(log), allowed_rest_days=state.allowed_rest_days, today=previous_today)

    unlocked = get_unlocked_achievements(snapshot, catalog)
    new = check_new_achievements(previous, snapshot, catalog)
    upcoming = get_next_achievements(snapshot, catalog=catalog)
    stats = get_achievement_stats(snapshot, catalog)

    if state.json_output:
        print_json_payload(
            state,
            {
                "snapshot": snapshot,
                "unlocked": unlocked,
                "new": new,
                "new_xp": achievement_xp(new),
                "next": upcoming,
                "stats": stats,
            },
        )
        return

    if state.plain_output:
        new_ids = {achievement.id for achievement in new}
        for achievement in unlocked:
            status = "new" if achievement.id in new_ids else "unlocked"
            typer.echo(f"{status}\t{achievement.id}\t{achievement.xp_reward}")
        for item in upcoming:
            typer.echo(f"next\t{item.achievement.id}\t{item.progress}")
        return

    state.console.print(
        f"Achievements: {stats.unlocked}/{stats.total} unlocked "
        f"({format_xp(stats.xp_earned)}/{format_xp(stats.xp_potential)} XP)"
    )
    if new:
        state.console.print(f"New this workout (+{achievement_xp(new)} XP): " + ", ".join(a.name for a in new))

    table = Table(title="Unlocked")
    table.add_column("")
    table.add_column("Achievement")
    table.add_column("Category")
    table.add_column("XP")
    for achievement in unlocked:
        table.add_row(achievement.icon, achievement.name, achievement.category, str(achievement.xp_reward))
    state.console.print(table)

    if upcoming:
        table = Table(title="Up next")
        table.add_column("")
        table.add_column("Achievement")
        table.add_column("Goal")
        table.add_column("Progress")
        for item in upcoming:
            achievement = item.achievement
            table.add_row(achievement.icon, achievement.name, achievement.description, f"{item.progress}%")
        state.console.print(table)


def level_command(
    ctx: typer.Context,
    xp: int = typer.Argument(..., min=0, help="Total experience points"),
    previous_xp: Optional[int] = typer.Option(None, "--previous-xp", min=0, help="XP before the latest gain"),
) -> None:
    """Resolve a level from XP and report level-ups."""
    state = get_state(ctx)
    table = state.level_table
    info = get_level_for_xp(xp, table)
    payload = {
        "xp": xp,
        "level": to_jsonable(info),
        "progress_pct": level_progress(xp, table),
        "xp_to_next_level": xp_to_next_level(xp, table),
        "level_up": to_jsonable(check_level_up(previous_xp, xp, table)) if previous_xp is not None else None,
    }

    if state.json_output:
        print_json_payload(state, payload)
        return

    rows = [
        ("level", info.level),
        ("title", info.title),
        ("xp", xp),
        ("progress_pct", payload["progress_pct"]),
        ("xp_to_next_level", payload["xp_to_next_level"]),
    ]
    level_up = payload["level_up"]
    if level_up is not None:
        rows.append(("levels_gained", level_up["levels_gained"]))

    if state.plain_output:
        print_key_values(state, "", rows)
        return

    if level_up is not None and level_up["did_level_up"]:
        state.console.print(
            f"[bold]Level up![/bold] {level_up['previous_level']} -> {level_up['new_level']}"
        )
    print_key_values(state, f"Level {info.level}: {info.title}", rows)
