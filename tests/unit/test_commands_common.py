from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Any

import pytest
import typer
from rich.console import Console

from lift_cli.commands.common import configure_logging, get_state, load_log, print_json_payload
from lift_cli.core.leveling import LEVEL_TABLE
from lift_cli.core.models import StreakState
from lift_cli.core.state import CLIState


@dataclass
class FakeContext:
    obj: Any


def _state(plain: bool = True, verbose: bool = False) -> CLIState:
    return CLIState(
        json_output=not plain,
        plain_output=plain,
        verbose=verbose,
        quiet=False,
        config_path=Path("/tmp/config.toml"),
        config={},
        console=Console(record=True),
        allowed_rest_days=1,
        reps_min=8,
        reps_max=12,
        level_table=LEVEL_TABLE,
    )


def test_get_state_returns_cli_state() -> None:
    state = _state()
    assert get_state(FakeContext(obj=state)) is state


def test_get_state_raises_on_invalid_obj() -> None:
    with pytest.raises(typer.Exit):
        get_state(FakeContext(obj={"not": "state"}))


def test_print_json_payload_plain_converts_models(capsys: pytest.CaptureFixture[str]) -> None:
    payload = StreakState(current_streak=3, longest_streak=5, streak_start_date=date(2026, 10, 16))
    print_json_payload(_state(plain=True), payload)
    out = capsys.readouterr().out.strip()
    assert json.loads(out) == {"current_streak": 3, "longest_streak": 5, "streak_start_date": "2026-10-16"}
    assert " " not in out


def test_print_json_payload_rich_console() -> None:
    state = _state(plain=False)
    print_json_payload(state, {"xp": 675})
    assert '"xp": 675' in state.console.export_text()


def test_load_log_reads_file(sample_log_file: Path) -> None:
    assert len(load_log(sample_log_file).workouts) == 4


def test_load_log_exits_on_bad_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{broken")
    with pytest.raises(typer.Exit) as exc_info:
        load_log(path)
    assert exc_info.value.exit_code == 2
    assert "Training log error" in capsys.readouterr().out


def test_configure_logging_levels() -> None:
    configure_logging(_state(verbose=True))
    assert logging.getLogger().level == logging.DEBUG
    configure_logging(_state(verbose=False))
    assert logging.getLogger().level == logging.WARNING
