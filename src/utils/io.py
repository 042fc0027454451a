"""I/O helpers for reports."""

import json
from pathlib import Path
from typing import Any


def save_json(path: Path, payload: Any) -> None:
    """Write JSON to disk, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, ensure_ascii=False)
