"""Runtime state container for CLI context."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Tuple

from rich.console import Console

from lift_cli.core.models import LevelInfo


@dataclass
class CLIState:
    """CLI runtime options and loaded configuration."""

    json_output: bool
    plain_output: bool
    verbose: bool
    quiet: bool
    config_path: Path
    config: Dict[str, Any]
    console: Console
    allowed_rest_days: int
    reps_min: int
    reps_max: int
    level_table: Tuple[LevelInfo, ...]
