"""Shared command helpers."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable, Tuple

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from lift_cli.core.models import TrainingLog, to_jsonable
from lift_cli.core.state import CLIState
from lift_cli.utils.parsing import TrainingLogError, load_training_log

logger = logging.getLogger(__name__)


def get_state(ctx: typer.Context) -> CLIState:
    """Extract validated CLI state from Typer context."""
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=2)
    return state


def configure_logging(state: CLIState) -> None:
    """Route library logging to stderr through rich; DEBUG only with --verbose."""
    level = logging.DEBUG if state.verbose and not state.quiet else logging.WARNING
    handler = RichHandler(
        console=Console(stderr=True, quiet=state.quiet, no_color=state.plain_output),
        show_time=False,
        show_path=False,
        rich_tracebacks=state.verbose,
    )
    logging.basicConfig(level=level, format="%(message)s", handlers=[handler], force=True)


def load_log(path: Path) -> TrainingLog:
    """Load a training log or exit with code 2 on a bad file."""
    try:
        log = load_training_log(path)
    except TrainingLogError as exc:
        typer.echo(f"Training log error: {exc}")
        raise typer.Exit(code=2)
    logger.debug("Loaded %d workouts from %s", len(log.workouts), path)
    return log


def print_json_payload(state: CLIState, payload: Any) -> None:
    """Print JSON payload with plain-mode fallback for piping."""
    data = to_jsonable(payload)
    if state.plain_output:
        typer.echo(json.dumps(data, separators=(",", ":")))
        return
    state.console.print_json(data=data)


def print_key_values(state: CLIState, title: str, rows: Iterable[Tuple[str, Any]]) -> None:
    """Render (field, value) rows as a two-column table or tab-separated lines."""
    if state.plain_output:
        for key, value in rows:
            typer.echo(f"{key}\t{value}")
        return

    table = Table(title=title)
    table.add_column("Field")
    table.add_column("Value")
    for key, value in rows:
        table.add_row(str(key), str(value))
    state.console.print(table)
