"""Configuration loading and persistence."""

from __future__ import annotations

import copy
import json
import os
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

try:  # Python 3.11+
    import tomllib  # type: ignore[attr-defined]
except ModuleNotFoundError:  # Python 3.9-3.10
    import tomli as tomllib  # type: ignore[no-redef]

from lift_cli.core.constants import DEFAULT_ALLOWED_REST_DAYS, DEFAULT_REPS_MAX, DEFAULT_REPS_MIN
from lift_cli.core.leveling import LEVEL_TABLE, LevelTableError, build_level_table, validate_level_table
from lift_cli.core.models import LevelInfo


class ConfigError(RuntimeError):
    """Raised when config file parsing fails."""


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def expand_path(path_str: str) -> Path:
    """Expand user/env vars and return absolute path."""
    return Path(os.path.expandvars(path_str)).expanduser().resolve()


def default_config_path() -> Path:
    """Get default config file path."""
    raw = os.getenv("LIFT_CONFIG_FILE", "~/.config/lift/config.toml")
    return expand_path(raw)


def _default_config() -> Dict[str, Any]:
    return {
        "streaks": {
            "allowed_rest_days": DEFAULT_ALLOWED_REST_DAYS,
        },
        "overload": {
            "reps_min": DEFAULT_REPS_MIN,
            "reps_max": DEFAULT_REPS_MAX,
        },
        "report": {
            "default_format": "markdown",
            "default_directory": "./reports",
        },
        "leveling": {
            "thresholds": [],
        },
    }


DEFAULT_CONFIG: Dict[str, Any] = _default_config()


def _read_config(path: Path) -> Dict[str, Any]:
    suffix = path.suffix.lower()
    text = path.read_text()
    try:
        if suffix in {".toml", ""}:
            loaded = tomllib.loads(text)
        else:
            loaded = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON in config file {path}: {exc}") from exc
    except Exception as exc:
        if suffix in {".toml", ""}:
            raise ConfigError(f"Invalid TOML in config file {path}: {exc}") from exc
        raise ConfigError(f"Failed to parse config file {path}: {exc}") from exc

    if not isinstance(loaded, dict):
        raise ConfigError(f"Config file {path} must contain an object/table at the root")
    return loaded


def load_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """Load configuration from disk, merged with defaults."""
    cfg_path = path or default_config_path()
    cfg = _default_config()
    if cfg_path.exists():
        cfg = _deep_merge(cfg, _read_config(cfg_path))
    return cfg


def _toml_literal(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        escaped = value.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    if isinstance(value, list):
        items = ", ".join(_toml_literal(item) for item in value if item is not None)
        return f"[{items}]"
    if isinstance(value, dict):
        items = ", ".join(f"{key} = {_toml_literal(item)}" for key, item in value.items() if item is not None)
        return f"{{ {items} }}"
    raise TypeError(f"Unsupported TOML value type: {type(value)!r}")


def _dict_to_toml(data: Dict[str, Any], prefix: Optional[str] = None) -> str:
    lines = []
    plain_keys = []
    nested_keys = []

    for key, value in data.items():
        if value is None:
            continue
        if isinstance(value, dict):
            nested_keys.append((key, value))
        else:
            plain_keys.append((key, value))

    if prefix is not None:
        lines.append(f"[{prefix}]")

    for key, value in plain_keys:
        lines.append(f"{key} = {_toml_literal(value)}")

    if plain_keys and nested_keys:
        lines.append("")

    for index, (key, value) in enumerate(nested_keys):
        table_name = key if prefix is None else f"{prefix}.{key}"
        lines.append(_dict_to_toml(value, prefix=table_name))
        if index != len(nested_keys) - 1:
            lines.append("")

    return "\n".join(lines)


def config_to_toml(config: Dict[str, Any]) -> str:
    """Render a config mapping as TOML text."""
    return _dict_to_toml(config).strip() + "\n"


def save_config(config: Dict[str, Any], path: Optional[Path] = None) -> Path:
    """Save configuration to disk as TOML (default) or JSON."""
    cfg_path = path or default_config_path()
    cfg_path.parent.mkdir(parents=True, exist_ok=True)

    if cfg_path.suffix.lower() == ".json":
        cfg_path.write_text(json.dumps(config, indent=2) + "\n")
        return cfg_path

    cfg_path.write_text(config_to_toml(config))
    return cfg_path


def resolve_report_dir(config: Dict[str, Any], explicit: Optional[Path] = None) -> Path:
    """Resolve report directory with CLI override first."""
    if explicit is not None:
        return explicit.expanduser().resolve()
    raw = os.getenv("LIFT_REPORT_DIR") or config.get("report", {}).get(
        "default_directory",
        "./reports",
    )
    return expand_path(raw)


def _int_setting(config: Dict[str, Any], section: str, key: str, default: int) -> int:
    value = config.get(section, {}).get(key, default)
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{section}.{key} must be an integer, got {value!r}") from exc


def resolve_allowed_rest_days(config: Dict[str, Any]) -> int:
    value = _int_setting(config, "streaks", "allowed_rest_days", DEFAULT_ALLOWED_REST_DAYS)
    if value < 0:
        raise ConfigError("streaks.allowed_rest_days must not be negative")
    return value


def resolve_rep_range(config: Dict[str, Any]) -> Tuple[int, int]:
    reps_min = _int_setting(config, "overload", "reps_min", DEFAULT_REPS_MIN)
    reps_max = _int_setting(config, "overload", "reps_max", DEFAULT_REPS_MAX)
    if reps_min < 0 or reps_max < reps_min:
        raise ConfigError(f"overload rep range is invalid: {reps_min}-{reps_max}")
    return reps_min, reps_max


def _threshold_row(row: Any, index: int) -> Tuple[int, int, str]:
    if isinstance(row, dict):
        return int(row["level"]), int(row["xp_floor"]), str(row.get("title") or f"Level {row['level']}")
    if isinstance(row, (list, tuple)) and len(row) >= 2:
        title = str(row[2]) if len(row) > 2 else f"Level {row[0]}"
        return int(row[0]), int(row[1]), title
    raise ConfigError(f"leveling.thresholds[{index}] must be a table or [level, xp_floor, title]")


def resolve_level_table(config: Dict[str, Any]) -> Tuple[LevelInfo, ...]:
    """Build and validate the level table once at startup."""
    rows = config.get("leveling", {}).get("thresholds") or []
    if not rows:
        return LEVEL_TABLE
    try:
        table = build_level_table(_threshold_row(row, index) for index, row in enumerate(rows))
        validate_level_table(table)
    except LevelTableError as exc:
        raise ConfigError(f"Invalid leveling.thresholds: {exc}") from exc
    except (KeyError, TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid leveling.thresholds entry: {exc}") from exc
    return table
