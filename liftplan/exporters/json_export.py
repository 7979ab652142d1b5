"""Plan document writers."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml


def write_json(path: Path, payload: Any) -> Path:
    """Write payload as pretty JSON and return path."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2) + "\n")
    return path


def write_document(path: Path, payload: Any) -> Path:
    """Write YAML for .yaml/.yml targets, JSON otherwise."""
    if path.suffix.lower() not in {".yaml", ".yml"}:
        return write_json(path, payload)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(payload, sort_keys=False, allow_unicode=True))
    return path
