from __future__ import annotations

import json
from datetime import date
from pathlib import Path
from typing import Any, Dict, List

import pytest
import yaml
from typer.testing import CliRunner

from lift_cli.core.models import TrainingLog
from lift_cli.utils.parsing import parse_training_log

SAMPLE_TODAY = date(2026, 10, 18)


def _sets(reps: List[int], weight: float, rpe: float | None = None) -> List[Dict[str, Any]]:
    rows = []
    for index, count in enumerate(reps, start=1):
        row: Dict[str, Any] = {"set_number": index, "reps": count, "weight": weight}
        if rpe is not None:
            row["rpe"] = rpe
        rows.append(row)
    return rows


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def sample_today() -> date:
    return SAMPLE_TODAY


@pytest.fixture()
def sample_log_payload() -> Dict[str, Any]:
    """Four workouts two days apart; the last one sets a bench weight PR."""
    return {
        "bonus_xp": 0,
        "workouts": [
            {
                "date": "2026-10-12",
                "title": "Full body",
                "exercises": [
                    {"exercise_id": "bench_press", "name": "Bench Press", "sets": _sets([10, 10, 9], 60)},
                    {"exercise_id": "squat", "name": "Back Squat", "sets": _sets([8, 8, 8], 100)},
                ],
            },
            {
                "date": "2026-10-14",
                "exercises": [
                    {"exercise_id": "bench_press", "sets": _sets([10, 10, 10], 60)},
                ],
            },
            {
                "date": "2026-10-16",
                "exercises": [
                    {"exercise_id": "bench_press", "sets": _sets([12, 12, 12], 60)},
                ],
            },
            {
                "date": "2026-10-18",
                "completed_at": "2026-10-18T18:30:00",
                "title": "Push and legs",
                "exercises": [
                    {"exercise_id": "bench_press", "sets": _sets([10, 10, 9], 62.5, rpe=8)},
                    {"exercise_id": "squat", "sets": _sets([8, 8, 8], 100)},
                ],
            },
        ],
    }


@pytest.fixture()
def sample_log(sample_log_payload: Dict[str, Any]) -> TrainingLog:
    return parse_training_log(sample_log_payload)


@pytest.fixture()
def write_temp_json(tmp_path: Path):
    def _write(name: str, payload: Any) -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(payload, indent=2) + "\n")
        return path

    return _write


@pytest.fixture()
def write_temp_yaml(tmp_path: Path):
    def _write(name: str, payload: Any) -> Path:
        path = tmp_path / name
        path.write_text(yaml.safe_dump(payload, sort_keys=False))
        return path

    return _write


@pytest.fixture()
def write_temp_toml(tmp_path: Path):
    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.write_text(content.strip() + "\n")
        return path

    return _write


@pytest.fixture()
def sample_log_file(write_temp_yaml, sample_log_payload: Dict[str, Any]) -> Path:
    return write_temp_yaml("training.yaml", sample_log_payload)


@pytest.fixture()
def isolated_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """Point the default config path at an empty temp location."""
    path = tmp_path / "lift" / "config.toml"
    monkeypatch.setenv("LIFT_CONFIG_FILE", str(path))
    return path
