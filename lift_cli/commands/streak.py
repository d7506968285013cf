"""Training streak command."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from lift_cli.commands.common import get_state, load_log, print_json_payload
from lift_cli.core.analysis import workout_dates
from lift_cli.core.models import to_jsonable
from lift_cli.core.streaks import calculate_streak, is_streak_active, streak_milestone
from lift_cli.utils.date_ranges import resolve_today, validate_date
from lift_cli.utils.formatting import streak_emoji, streak_message


def streak_command(
    ctx: typer.Context,
    log_file: Path = typer.Argument(..., help="Training log (JSON/YAML)"),
    rest_days: Optional[int] = typer.Option(
        None,
        "--rest-days",
        min=0,
        help="Rest days allowed between workouts (default from config)",
    ),
    today: Optional[str] = typer.Option(None, help="Evaluate as of YYYY-MM-DD", callback=validate_date),
) -> None:
    """Show current and longest training streaks."""
    state = get_state(ctx)
    log = load_log(log_file)

    allowed = state.allowed_rest_days if rest_days is None else rest_days
    result = calculate_streak(workout_dates(log), allowed_rest_days=allowed, today=resolve_today(today))
    payload = {
        **to_jsonable(result),
        "allowed_rest_days": allowed,
        "active": is_streak_active(result),
        "milestone": streak_milestone(result.current_streak),
        "message": streak_message(result.current_streak),
    }

    if state.json_output:
        print_json_payload(state, payload)
        return

    if state.plain_output:
        for key in ("current_streak", "longest_streak", "streak_start_date", "allowed_rest_days"):
            typer.echo(f"{key}\t{payload[key] if payload[key] is not None else ''}")
        return

    emoji = streak_emoji(result.current_streak)
    state.console.print(f"{payload['message']} {emoji}".rstrip())
    state.console.print(f"Longest streak: {result.longest_streak} days")
    if result.streak_start_date:
        state.console.print(f"Started: {result.streak_start_date.isoformat()}")
    if payload["milestone"]:
        state.console.print(f"Milestone reached: {payload['milestone']} days")
