"""Parsing helpers for training-log files."""

from __future__ import annotations

import json
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from lift_cli.core.models import LoggedExercise, LoggedWorkout, TrainingLog, WorkoutSet


class TrainingLogError(ValueError):
    """Raised when a training log cannot be read or converted."""


def parse_log_date(value: Any) -> date:
    """Parse a workout date from YYYY-MM-DD, an ISO timestamp, or a YAML date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value:
        raise TrainingLogError("Workout is missing a date")
    raw = str(value).strip()
    try:
        return datetime.strptime(raw[:10], "%Y-%m-%d").date()
    except ValueError as exc:
        raise TrainingLogError(f"Invalid workout date '{raw}'. Expected YYYY-MM-DD") from exc


def parse_timestamp(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    raw = str(value).strip().replace("Z", "+00:00")
    try:
        return datetime.fromisoformat(raw)
    except ValueError as exc:
        raise TrainingLogError(f"Invalid timestamp '{raw}'") from exc


def _number(raw: Dict[str, Any], key: str, cast, context: str):
    value = raw.get(key)
    if value is None or value == "":
        return None
    try:
        return cast(value)
    except (TypeError, ValueError) as exc:
        raise TrainingLogError(f"{context}: field '{key}' is not a number ({value!r})") from exc


def _flag(value: Any) -> Optional[bool]:
    if value is None:
        return None
    if isinstance(value, str):
        return value.strip().lower() in {"true", "yes", "1", "y"}
    return bool(value)


def parse_set(raw: Dict[str, Any], context: str = "set") -> WorkoutSet:
    """Convert one set payload; missing values stay None."""
    return WorkoutSet(
        set_number=_number(raw, "set_number", int, context),
        reps=_number(raw, "reps", int, context),
        weight=_number(raw, "weight", float, context),
        rpe=_number(raw, "rpe", float, context),
        completed=_flag(raw.get("completed")),
    )


def parse_workout(raw: Dict[str, Any]) -> LoggedWorkout:
    workout_date = parse_log_date(raw.get("date") or raw.get("workout_date"))
    context = f"workout {workout_date.isoformat()}"

    exercises: List[LoggedExercise] = []
    for item in raw.get("exercises") or []:
        if not isinstance(item, dict):
            raise TrainingLogError(f"{context}: exercises must be objects")
        exercise_id = item.get("exercise_id") or item.get("id")
        if not exercise_id:
            raise TrainingLogError(f"{context}: exercise is missing an exercise_id")
        sets = tuple(
            parse_set(set_raw, context=f"{context} {exercise_id}")
            for set_raw in item.get("sets") or []
            if isinstance(set_raw, dict)
        )
        exercises.append(LoggedExercise(exercise_id=str(exercise_id), sets=sets, name=item.get("name")))

    return LoggedWorkout(
        workout_date=workout_date,
        exercises=tuple(exercises),
        completed_at=parse_timestamp(raw.get("completed_at")),
        title=raw.get("title"),
    )


def parse_training_log(raw_data: Any) -> TrainingLog:
    """Build a TrainingLog from decoded JSON/YAML data.

    A bare list is read as the workouts list.
    """
    if raw_data is None:
        return TrainingLog()
    if isinstance(raw_data, list):
        raw_data = {"workouts": raw_data}
    if not isinstance(raw_data, dict):
        raise TrainingLogError("Training log must contain an object or a list of workouts")

    workouts = []
    for item in raw_data.get("workouts") or []:
        if not isinstance(item, dict):
            raise TrainingLogError("Each workout must be an object")
        workouts.append(parse_workout(item))

    try:
        bonus_xp = int(raw_data.get("bonus_xp") or 0)
    except (TypeError, ValueError) as exc:
        raise TrainingLogError(f"bonus_xp is not a number ({raw_data.get('bonus_xp')!r})") from exc
    return TrainingLog(workouts=tuple(workouts), bonus_xp=bonus_xp)


def load_training_log_text(text: str, fmt: str = "auto") -> TrainingLog:
    """Decode training-log text as JSON or YAML.

    ``auto`` tries JSON first and falls back to YAML.
    """
    stripped = text.strip()
    if not stripped:
        return TrainingLog()
    try:
        if fmt == "yaml":
            raw_data = yaml.safe_load(stripped)
        elif fmt == "json":
            raw_data = json.loads(stripped)
        else:
            try:
                raw_data = json.loads(stripped)
            except json.JSONDecodeError:
                raw_data = yaml.safe_load(stripped)
    except json.JSONDecodeError as exc:
        raise TrainingLogError(f"Invalid JSON in training log: {exc}") from exc
    except yaml.YAMLError as exc:
        raise TrainingLogError(f"Invalid YAML in training log: {exc}") from exc
    return parse_training_log(raw_data)


def load_training_log(path: Path) -> TrainingLog:
    """Load a training log file; the suffix selects YAML or JSON."""
    try:
        text = path.read_text()
    except OSError as exc:
        raise TrainingLogError(f"Cannot read training log {path}: {exc.strerror or exc}") from exc
    suffix = path.suffix.lower()
    if suffix in {".yaml", ".yml"}:
        fmt = "yaml"
    elif suffix == ".json":
        fmt = "json"
    else:
        fmt = "auto"
    return load_training_log_text(text, fmt=fmt)
