"""Progress report command."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from lift_cli.commands.common import get_state, load_log, print_json_payload
from lift_cli.core.analysis import build_progress_report
from lift_cli.core.config import resolve_report_dir
from lift_cli.exporters.json_export import write_json
from lift_cli.exporters.markdown import report_to_markdown, write_report_markdown
from lift_cli.utils.date_ranges import resolve_today, validate_date
from lift_cli.utils.formatting import slugify


REPORT_FORMATS = ("markdown", "json")


def report_filename(log_file: Path, generated_for: str, output_format: str) -> str:
    suffix = "json" if output_format == "json" else "md"
    return f"{slugify(log_file.stem)}-{generated_for}.{suffix}"


def report_command(
    ctx: typer.Context,
    log_file: Path = typer.Argument(..., help="Training log (JSON/YAML)"),
    output_file: Optional[Path] = typer.Option(None, help="Write result to file"),
    save: bool = typer.Option(False, "--save", help="Write result into the configured report directory"),
    output_format: Optional[str] = typer.Option(None, "--format", help="Output format: markdown|json"),
    today: Optional[str] = typer.Option(None, help="Evaluate as of YYYY-MM-DD", callback=validate_date),
) -> None:
    """Generate a progress report: streaks, levels, achievements and per-exercise advice."""
    state = get_state(ctx)
    fmt = output_format or str(state.config.get("report", {}).get("default_format", "markdown"))
    if fmt not in REPORT_FORMATS:
        raise typer.BadParameter("format must be markdown or json")

    log = load_log(log_file)
    report = build_progress_report(
        log,
        allowed_rest_days=state.allowed_rest_days,
        reps_min=state.reps_min,
        reps_max=state.reps_max,
        today=resolve_today(today),
        level_table=state.level_table,
    )

    target = output_file
    if target is None and save:
        target = resolve_report_dir(state.config) / report_filename(log_file, report["generated_for"], fmt)

    if state.json_output or fmt == "json":
        if target:
            write_json(target, report)
        print_json_payload(state, report)
        return

    if target:
        write_report_markdown(target, report)
    markdown = report_to_markdown(report)
    if state.plain_output:
        typer.echo(markdown, nl=False)
    else:
        state.console.print(markdown)
    if target and not state.quiet:
        typer.echo(f"Saved to: {target}", err=True)
