import json
from datetime import date, datetime
from pathlib import Path

import pytest

from lift_cli.utils.parsing import (
    TrainingLogError,
    load_training_log,
    load_training_log_text,
    parse_log_date,
    parse_set,
    parse_timestamp,
    parse_training_log,
)


def test_parse_log_date_variants() -> None:
    assert parse_log_date("2026-10-18") == date(2026, 10, 18)
    assert parse_log_date("2026-10-18T06:45:00Z") == date(2026, 10, 18)
    assert parse_log_date(date(2026, 10, 18)) == date(2026, 10, 18)
    assert parse_log_date(datetime(2026, 10, 18, 6, 45)) == date(2026, 10, 18)


def test_parse_log_date_invalid() -> None:
    with pytest.raises(TrainingLogError, match="YYYY-MM-DD"):
        parse_log_date("18/10/2026")
    with pytest.raises(TrainingLogError, match="missing a date"):
        parse_log_date(None)


def test_parse_timestamp() -> None:
    assert parse_timestamp(None) is None
    assert parse_timestamp("2026-10-18T18:30:00").hour == 18
    assert parse_timestamp("2026-10-18T18:30:00Z").tzinfo is not None


def test_parse_set_keeps_missing_values_none() -> None:
    parsed = parse_set({"reps": "8", "weight": 60})
    assert parsed.reps == 8
    assert parsed.weight == 60.0
    assert parsed.rpe is None
    assert parsed.completed is None


def test_parse_set_completed_flag_strings() -> None:
    assert parse_set({"completed": "yes"}).completed is True
    assert parse_set({"completed": "no"}).completed is False
    assert parse_set({"completed": True}).completed is True


def test_malformed_number_names_the_workout() -> None:
    raw = {"workouts": [{"date": "2026-10-18", "exercises": [{"exercise_id": "bench", "sets": [{"reps": "ten"}]}]}]}
    with pytest.raises(TrainingLogError, match="workout 2026-10-18 bench: field 'reps'"):
        parse_training_log(raw)


def test_parse_training_log_alternate_keys() -> None:
    log = parse_training_log(
        {
            "bonus_xp": "40",
            "workouts": [
                {
                    "workout_date": "2026-10-18",
                    "exercises": [{"id": "row", "name": "Barbell Row", "sets": [{"reps": 10, "weight": 50}]}],
                }
            ],
        }
    )
    assert log.bonus_xp == 40
    assert log.workouts[0].workout_date == date(2026, 10, 18)
    exercise = log.workouts[0].exercises[0]
    assert exercise.exercise_id == "row"
    assert exercise.name == "Barbell Row"


def test_parse_training_log_bare_list_and_empty() -> None:
    log = parse_training_log([{"date": "2026-10-18", "exercises": []}])
    assert len(log.workouts) == 1
    assert parse_training_log(None).workouts == ()


def test_parse_training_log_rejects_bad_shapes() -> None:
    with pytest.raises(TrainingLogError):
        parse_training_log("not a log")
    with pytest.raises(TrainingLogError):
        parse_training_log({"workouts": ["2026-10-18"]})
    with pytest.raises(TrainingLogError, match="exercise_id"):
        parse_training_log({"workouts": [{"date": "2026-10-18", "exercises": [{"sets": []}]}]})
    with pytest.raises(TrainingLogError, match="bonus_xp"):
        parse_training_log({"bonus_xp": "lots"})


def test_load_training_log_text_yaml_and_json() -> None:
    yaml_text = """
workouts:
  - date: 2026-10-18
    exercises:
      - exercise_id: squat
        sets:
          - {reps: 5, weight: 100}
"""
    from_yaml = load_training_log_text(yaml_text, fmt="yaml")
    from_auto = load_training_log_text(yaml_text)
    assert from_yaml == from_auto
    assert from_yaml.workouts[0].exercises[0].sets[0].weight == 100.0

    json_text = json.dumps({"workouts": [{"date": "2026-10-18", "exercises": []}]})
    assert load_training_log_text(json_text, fmt="json").workouts[0].workout_date == date(2026, 10, 18)
    assert load_training_log_text("   ").workouts == ()


def test_load_training_log_text_invalid() -> None:
    with pytest.raises(TrainingLogError, match="Invalid JSON"):
        load_training_log_text("{broken", fmt="json")
    with pytest.raises(TrainingLogError, match="Invalid YAML"):
        load_training_log_text("workouts: [unclosed", fmt="yaml")


def test_load_training_log_from_files(write_temp_json, write_temp_yaml, sample_log_payload) -> None:
    from_json = load_training_log(write_temp_json("log.json", sample_log_payload))
    from_yaml = load_training_log(write_temp_yaml("log.yml", sample_log_payload))
    assert len(from_json.workouts) == 4
    assert from_json == from_yaml


def test_load_training_log_missing_file(tmp_path: Path) -> None:
    with pytest.raises(TrainingLogError, match="Cannot read training log"):
        load_training_log(tmp_path / "missing.yaml")
