"""Entry point for lift-cli."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from lift_cli import __version__
from lift_cli.commands import config as config_commands
from lift_cli.commands.common import configure_logging
from lift_cli.commands.gamify import achievements_command, level_command
from lift_cli.commands.lifts import advise_command, onerm_command, records_command
from lift_cli.commands.report import report_command
from lift_cli.commands.streak import streak_command
from lift_cli.core.config import (
    ConfigError,
    default_config_path,
    load_config,
    resolve_allowed_rest_days,
    resolve_level_table,
    resolve_rep_range,
)
from lift_cli.core.state import CLIState

app = typer.Typer(
    add_completion=False,
    help="Strength-training progression and gamification from a local training log",
    invoke_without_command=True,
)


@app.callback()
def main_callback(
    ctx: typer.Context,
    json_output: bool = typer.Option(False, "--json", help="Output JSON where available"),
    plain_output: bool = typer.Option(
        False,
        "--plain",
        help="Output plain text (no rich formatting/tables)",
    ),
    config: Optional[Path] = typer.Option(None, "--config", help="Path to config file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Quiet output"),
    version: bool = typer.Option(False, "--version", help="Show version and exit"),
) -> None:
    """Initialize global CLI state."""
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=0)

    if json_output and plain_output:
        typer.echo("Options --json and --plain are mutually exclusive.")
        raise typer.Exit(code=2)

    cfg_path = (config or default_config_path()).expanduser().resolve()
    try:
        cfg = load_config(cfg_path)
        allowed_rest_days = resolve_allowed_rest_days(cfg)
        reps_min, reps_max = resolve_rep_range(cfg)
        level_table = resolve_level_table(cfg)
    except ConfigError as exc:
        typer.echo(f"Config error: {exc}")
        raise typer.Exit(code=2)

    console = Console(
        quiet=quiet,
        no_color=plain_output,
        log_time=False,
        log_path=False,
    )
    ctx.obj = CLIState(
        json_output=(json_output and not plain_output),
        plain_output=plain_output,
        verbose=verbose,
        quiet=quiet,
        config_path=cfg_path,
        config=cfg,
        console=console,
        allowed_rest_days=allowed_rest_days,
        reps_min=reps_min,
        reps_max=reps_max,
        level_table=level_table,
    )
    configure_logging(ctx.obj)

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(code=0)


# Top-level commands
app.command("streak")(streak_command)
app.command("records")(records_command)
app.command("advise")(advise_command)
app.command("onerm")(onerm_command)
app.command("achievements")(achievements_command)
app.command("level")(level_command)
app.command("report")(report_command)
app.add_typer(config_commands.app, name="config")


def main() -> None:
    """Console script entrypoint."""
    app()


if __name__ == "__main__":
    main()
