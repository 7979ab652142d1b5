"""Reading plan, catalog and set-log documents from disk or stdin."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, List, Optional

import yaml

from liftplan.core.models import CatalogExercise, PerformanceSet
from liftplan.core.schema import catalog_from_records, performance_sets_from_records


class InputError(ValueError):
    """Raised when an input document cannot be decoded."""


def parse_document(text: str, suffix: str = "") -> Any:
    """Decode JSON or YAML text; YAML is tried when JSON fails and no suffix decides."""
    try:
        if suffix.lower() in {".yaml", ".yml"}:
            return yaml.safe_load(text)
        if suffix.lower() == ".json":
            return json.loads(text)
        try:
            return json.loads(text)
        except json.JSONDecodeError:
            return yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise InputError(f"Could not parse document: {exc}") from exc


def load_document(file_path: Optional[Path], read_stdin: bool = False, stdin_text: str = "") -> Any:
    """Load one JSON/YAML document from a file, or from stdin text."""
    if file_path:
        try:
            text = file_path.read_text()
        except OSError as exc:
            raise InputError(f"Could not read {file_path}: {exc}") from exc
        return parse_document(text, file_path.suffix)
    if read_stdin:
        text = stdin_text.strip()
        return parse_document(text) if text else None
    return None


def load_catalog(path: Path) -> List[CatalogExercise]:
    """Exercise catalog from a list, or a mapping with an ``exercises`` key."""
    return catalog_from_records(load_document(path))


def load_performance_sets(path: Path) -> List[PerformanceSet]:
    """Logged sets from a list, or a mapping with a ``sets`` key, oldest first."""
    return performance_sets_from_records(load_document(path))
