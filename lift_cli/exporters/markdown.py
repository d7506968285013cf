"""Markdown progress report rendering."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List

from lift_cli.utils.formatting import (
    format_record,
    format_suggestion,
    format_volume,
    format_weight,
    format_xp,
    streak_emoji,
    streak_message,
)


def _achievement_line(item: Dict[str, Any]) -> str:
    line = f"- {item.get('icon', '')} **{item['name']}** ({item['xp_reward']} XP): {item['description']}"
    if "progress" in item:
        line += f" ({item['progress']}%)"
    return line


def report_to_markdown(report: Dict[str, Any]) -> str:
    """Render a progress report payload to markdown."""
    streak = report["streak"]
    snapshot = report["snapshot"]
    xp = report["xp"]
    level = xp["level"]
    achievements = report["achievements"]
    period = report.get("period", {})

    lines: List[str] = ["# Training Progress Report", ""]
    lines.append(f"_Generated for {report['generated_for']}_")
    if period.get("start"):
        lines.append(f"_Workouts from {period['start']} to {period['end']}_")
    lines.append("")

    lines.extend(["## Streak", ""])
    emoji = streak_emoji(streak["current_streak"])
    lines.append(f"- **Current:** {streak['current_streak']} days {emoji}".rstrip())
    lines.append(f"- **Longest:** {streak['longest_streak']} days")
    lines.append(f"- **Started:** {streak['streak_start_date'] or 'N/A'}")
    lines.append(f"- {streak_message(streak['current_streak'])}")
    lines.append("")

    lines.extend(["## Totals", ""])
    lines.append(f"- **Workouts:** {snapshot['total_workouts']}")
    lines.append(f"- **Personal records:** {snapshot['total_prs']}")
    lines.append(f"- **Total volume:** {format_volume(snapshot['total_volume'])}")
    lines.append(f"- **Latest workout volume:** {format_volume(snapshot['latest_workout_volume'])}")
    lines.append("")

    lines.extend(["## Level", ""])
    lines.append(f"- **Level {level['level']}:** {level['title']}")
    lines.append(f"- **XP:** {format_xp(xp['total'])} ({xp['progress_pct']}% through level)")
    if level.get("xp_ceiling") is not None:
        lines.append(f"- **To next level:** {xp['xp_to_next_level']} XP")
    else:
        lines.append("- **Max level reached**")
    if xp["level_up"]["did_level_up"]:
        lines.append(
            f"- Leveled up from {xp['level_up']['previous_level']} to {xp['level_up']['new_level']} "
            f"with the latest workout!"
        )
    lines.append("")

    stats = achievements["stats"]
    lines.extend(["## Achievements", ""])
    lines.append(
        f"**Unlocked:** {stats['unlocked']}/{stats['total']} "
        f"({stats['xp_earned']}/{stats['xp_potential']} XP)"
    )
    lines.append("")
    if achievements["new"]:
        lines.append(f"### New ({achievements['new_xp']} XP)")
        lines.extend(_achievement_line(item) for item in achievements["new"])
        lines.append("")
    if achievements["unlocked"]:
        lines.append("### Unlocked")
        lines.extend(_achievement_line(item) for item in achievements["unlocked"])
        lines.append("")
    if achievements["next"]:
        lines.append("### Up Next")
        lines.extend(_achievement_line(item) for item in achievements["next"])
        lines.append("")

    lines.extend(["## Exercises", ""])
    if not report["exercises"]:
        lines.extend(["No exercises logged", ""])
    for exercise in report["exercises"]:
        best = exercise["all_time_best"]
        lines.append(f"### {exercise['name']}")
        lines.append("")
        lines.append(f"- **Sessions:** {exercise['sessions']} (last {exercise['last_date'] or 'N/A'})")
        lines.append(
            f"- **Bests:** {format_weight(best['max_weight'])} top set, "
            f"{best['max_reps'] or 0} reps, est. 1RM {format_weight(best['estimated_1rm'])}"
        )
        if exercise["records"]:
            lines.append("- **New records:** " + "; ".join(format_record(r) for r in exercise["records"]))
        elif exercise["baseline"]:
            lines.append("- **New records:** baseline session")
        suggestion = exercise["suggestion"]
        lines.append(f"- **Next session:** {format_suggestion(suggestion)}")
        lines.append(f"  - {suggestion['suggestion']} ({suggestion['reason']})")
        lines.append("")

    return "\n".join(lines).rstrip() + "\n"


def write_report_markdown(path: Path, report: Dict[str, Any]) -> Path:
    """Write the markdown report and return its path."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(report_to_markdown(report))
    return path
