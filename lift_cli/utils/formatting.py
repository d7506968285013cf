"""Formatting helpers used by exports and console output."""

from __future__ import annotations

import re
from typing import Any, Dict, Optional

from lift_cli.core.constants import PR_LABELS, SUGGESTION_LABELS


def format_weight(kg: Optional[float]) -> str:
    """Format kilograms, dropping a trailing .0."""
    if kg is None:
        return "N/A"
    value = float(kg)
    text = f"{value:.1f}".rstrip("0").rstrip(".") if value != int(value) else str(int(value))
    return f"{text} kg"


def format_volume(kg: Optional[float]) -> str:
    """Format training volume with thousands separators."""
    if not kg:
        return "0 kg"
    return f"{float(kg):,.0f} kg"


def format_xp(xp: float) -> str:
    """Compact XP display, e.g. 1200 -> 1.2K."""
    if xp >= 1000:
        compact = f"{xp / 1000:.1f}"
        if compact.endswith(".0"):
            compact = compact[:-2]
        return f"{compact}K"
    return str(int(xp))


def format_record(record: Dict[str, Any]) -> str:
    """Format a personal-record payload as 'Label: value unit'."""
    label = PR_LABELS.get(record.get("type", ""), str(record.get("type")))
    value = record.get("value")
    unit = record.get("unit", "")
    if unit == "kg":
        return f"{label}: {format_weight(value)}"
    return f"{label}: {value} {unit}".strip()


def format_suggestion(suggestion: Dict[str, Any]) -> str:
    """One-line summary of an overload suggestion payload."""
    label = SUGGESTION_LABELS.get(suggestion.get("type", ""), str(suggestion.get("type")))
    parts = [label]
    if suggestion.get("recommended_weight") is not None:
        parts.append(f"-> {format_weight(suggestion['recommended_weight'])}")
    if suggestion.get("recommended_reps") is not None:
        parts.append(f"-> {suggestion['recommended_reps']} reps")
    return " ".join(parts)


def streak_emoji(streak: int) -> str:
    if streak >= 30:
        return "🔥"
    if streak >= 14:
        return "🌟"
    if streak >= 7:
        return "⭐"
    if streak >= 3:
        return "✨"
    return ""


def streak_message(streak: int) -> str:
    """Encouragement line for a streak length."""
    if streak == 0:
        return "Start your streak today!"
    if streak == 1:
        return "1 day streak! Keep going!"
    if streak < 7:
        return f"{streak} day streak!"
    if streak < 14:
        return f"{streak} day streak! On fire!"
    if streak < 30:
        return f"{streak} day streak! Incredible!"
    return f"{streak} day streak! You're unstoppable!"


def slugify(value: str, max_len: int = 50) -> str:
    """Filesystem-safe stem for saved reports."""
    words = re.findall(r"[a-z0-9]+", value.lower())
    return "-".join(words)[:max_len].rstrip("-") or "training-log"
