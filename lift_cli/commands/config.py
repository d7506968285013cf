"""Configuration commands."""

from __future__ import annotations

import typer

from lift_cli.commands.common import get_state, print_json_payload
from lift_cli.core.config import DEFAULT_CONFIG, config_to_toml, save_config

app = typer.Typer(help="Show or create the configuration file")


@app.command("show")
def show_command(ctx: typer.Context) -> None:
    """Print the effective configuration (defaults merged with the file)."""
    state = get_state(ctx)
    payload = {
        "config_path": str(state.config_path),
        "exists": state.config_path.exists(),
        "config": state.config,
    }

    if state.json_output:
        print_json_payload(state, payload)
        return

    if state.plain_output:
        typer.echo(f"config_path\t{payload['config_path']}")
        typer.echo(f"exists\t{str(payload['exists']).lower()}")
        typer.echo(config_to_toml(state.config).strip())
        return

    source = "" if payload["exists"] else " (not found, using defaults)"
    state.console.print(f"Config: {state.config_path}{source}")
    state.console.print(config_to_toml(state.config).strip(), markup=False, highlight=False)


@app.command("init")
def init_command(
    ctx: typer.Context,
    force: bool = typer.Option(False, "--force", help="Overwrite an existing config file"),
) -> None:
    """Write a config file populated with the defaults."""
    state = get_state(ctx)
    if state.config_path.exists() and not force:
        typer.echo(f"Config file already exists: {state.config_path} (use --force to overwrite)")
        raise typer.Exit(code=1)

    path = save_config(DEFAULT_CONFIG, state.config_path)

    if state.json_output:
        print_json_payload(state, {"status": "created", "config_path": str(path)})
        return

    if state.plain_output:
        typer.echo("status\tcreated")
        typer.echo(f"config_path\t{path}")
        return

    state.console.print(f"Wrote default config to {path}")
