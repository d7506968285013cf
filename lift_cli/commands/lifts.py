"""Per-exercise commands: personal records, overload advice and 1RM estimates."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.table import Table

from lift_cli.commands.common import get_state, load_log, print_json_payload, print_key_values
from lift_cli.core.analysis import build_exercise_report, exercise_ids
from lift_cli.core.constants import PR_LABELS
from lift_cli.core.formulas import estimated_1rm, round_weight
from lift_cli.core.models import TrainingLog
from lift_cli.utils.formatting import format_suggestion, format_weight

_BEST_FIELDS = {"max_weight": "max_weight", "max_reps": "max_reps", "max_volume": "max_volume", "1rm": "estimated_1rm"}


def _metric(value, unit: str) -> str:
    if unit == "kg":
        return format_weight(value)
    return f"{value or 0} {unit}"


def _exercise_report(log: TrainingLog, exercise_id: str, reps_min: int, reps_max: int):
    if exercise_id not in exercise_ids(log):
        known = ", ".join(exercise_ids(log)) or "none"
        typer.echo(f"Exercise '{exercise_id}' not found in training log (known: {known})")
        raise typer.Exit(code=2)
    return build_exercise_report(log, exercise_id, reps_min=reps_min, reps_max=reps_max)


def records_command(
    ctx: typer.Context,
    log_file: Path = typer.Argument(..., help="Training log (JSON/YAML)"),
    exercise_id: str = typer.Argument(..., help="Exercise identifier"),
) -> None:
    """Personal records set in the latest session of an exercise."""
    state = get_state(ctx)
    log = load_log(log_file)
    report = _exercise_report(log, exercise_id, state.reps_min, state.reps_max)
    payload = {key: report[key] for key in ("exercise_id", "name", "last_date", "baseline", "previous_best", "records")}

    if state.json_output:
        print_json_payload(state, payload)
        return

    if state.plain_output:
        typer.echo(f"exercise\t{report['exercise_id']}")
        typer.echo(f"last_date\t{report['last_date']}")
        for record in report["records"]:
            typer.echo(f"{record['type']}\t{record['value']}\t{record['unit']}")
        return

    if report["baseline"]:
        state.console.print(f"{report['name']}: first session on record, no comparison yet")
        return
    if not report["records"]:
        state.console.print(f"{report['name']}: no new records on {report['last_date']}")
        return

    table = Table(title=f"New records: {report['name']} ({report['last_date']})")
    table.add_column("Record")
    table.add_column("Previous")
    table.add_column("New")
    previous = report["previous_best"]
    for record in report["records"]:
        before = previous.get(_BEST_FIELDS[record["type"]])
        table.add_row(PR_LABELS[record["type"]], _metric(before, record["unit"]), _metric(record["value"], record["unit"]))
    state.console.print(table)


def advise_command(
    ctx: typer.Context,
    log_file: Path = typer.Argument(..., help="Training log (JSON/YAML)"),
    exercise_id: str = typer.Argument(..., help="Exercise identifier"),
    reps_min: Optional[int] = typer.Option(None, "--reps-min", min=0, help="Bottom of target rep range"),
    reps_max: Optional[int] = typer.Option(None, "--reps-max", min=0, help="Top of target rep range"),
) -> None:
    """Recommend the next progressive-overload step for an exercise."""
    state = get_state(ctx)
    low = state.reps_min if reps_min is None else reps_min
    high = state.reps_max if reps_max is None else reps_max
    if high < low:
        raise typer.BadParameter(f"--reps-max ({high}) must be at least --reps-min ({low})")

    log = load_log(log_file)
    report = _exercise_report(log, exercise_id, low, high)
    suggestion = report["suggestion"]

    if state.json_output:
        print_json_payload(
            state,
            {"exercise_id": exercise_id, "name": report["name"], "rep_range": [low, high], "suggestion": suggestion},
        )
        return

    rows = [
        ("exercise", report["name"]),
        ("sessions", report["sessions"]),
        ("type", suggestion["type"]),
        ("suggestion", suggestion["suggestion"]),
        ("reason", suggestion["reason"]),
    ]
    if suggestion["recommended_weight"] is not None:
        rows.append(("recommended_weight", suggestion["recommended_weight"]))
    if suggestion["recommended_reps"] is not None:
        rows.append(("recommended_reps", suggestion["recommended_reps"]))

    if state.plain_output:
        print_key_values(state, "", rows)
        return

    state.console.print(f"[bold]{format_suggestion(suggestion)}[/bold]")
    print_key_values(state, f"Next session: {report['name']}", rows)


def onerm_command(
    ctx: typer.Context,
    weight: float = typer.Argument(..., help="Weight lifted (kg)"),
    reps: int = typer.Argument(..., help="Repetitions performed"),
) -> None:
    """Estimate a one-rep max with the Epley formula."""
    state = get_state(ctx)
    estimate = estimated_1rm(weight, reps)
    payload = {
        "weight": weight,
        "reps": reps,
        "estimated_1rm": round_weight(estimate) if estimate is not None else None,
        "reliable": estimate is not None,
    }

    if state.json_output:
        print_json_payload(state, payload)
        return

    if state.plain_output:
        typer.echo(f"estimated_1rm\t{payload['estimated_1rm'] if estimate is not None else ''}")
        return

    if estimate is None:
        state.console.print(f"{reps} reps is above the reliable range for a 1RM estimate")
        return
    state.console.print(f"Estimated 1RM: {format_weight(payload['estimated_1rm'])}")
