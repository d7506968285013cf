import json
from pathlib import Path

from lift_cli.core.analysis import build_progress_report
from lift_cli.core.models import TrainingLog
from lift_cli.exporters.json_export import write_json
from lift_cli.exporters.markdown import report_to_markdown, write_report_markdown
from lift_cli.utils.parsing import parse_training_log


def test_report_to_markdown_sections(sample_log, sample_today) -> None:
    markdown = report_to_markdown(build_progress_report(sample_log, today=sample_today))

    assert markdown.startswith("# Training Progress Report")
    assert "_Workouts from 2026-10-12 to 2026-10-18_" in markdown
    assert "- **Current:** 4 days ✨" in markdown
    assert "- **Level 2:** Novice" in markdown
    assert "Leveled up from 1 to 2" in markdown
    assert "**Unlocked:** 4/18 (225/4725 XP)" in markdown
    assert "### New (100 XP)" in markdown
    assert "**Heavy Lifter**" in markdown
    assert "### Bench Press" in markdown
    assert "- **New records:** Max Weight: 62.5 kg" in markdown
    assert "- **Next session:** Increase Reps -> 11 reps" in markdown


def test_report_to_markdown_empty_log(sample_today) -> None:
    markdown = report_to_markdown(build_progress_report(TrainingLog(), today=sample_today))
    assert "Start your streak today!" in markdown
    assert "No exercises logged" in markdown
    assert "_Workouts from" not in markdown


def test_report_to_markdown_single_session_is_baseline(sample_log_payload, sample_today) -> None:
    payload = {"workouts": sample_log_payload["workouts"][:1]}
    markdown = report_to_markdown(build_progress_report(parse_training_log(payload), today=sample_today))
    assert "- **New records:** baseline session" in markdown


def test_write_helpers(tmp_path: Path, sample_log, sample_today) -> None:
    report = build_progress_report(sample_log, today=sample_today)
    md_path = write_report_markdown(tmp_path / "out" / "report.md", report)
    json_path = write_json(tmp_path / "out" / "report.json", report)
    assert md_path.read_text() == report_to_markdown(report)
    assert json.loads(json_path.read_text())["xp"]["total"] == 675
