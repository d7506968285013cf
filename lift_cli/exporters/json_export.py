"""JSON export helpers."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from lift_cli.core.models import to_jsonable


def write_json(path: Path, payload: Any) -> Path:
    """Write payload as pretty JSON and return path."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(to_jsonable(payload), indent=2, ensure_ascii=False) + "\n")
    return path
