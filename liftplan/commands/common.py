"""Shared command helpers."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, List, Optional

import typer

from liftplan.core.config import resolve_catalog_path
from liftplan.core.migration import MigrationService
from liftplan.core.models import CatalogExercise
from liftplan.core.state import CLIState
from liftplan.core.storage import StoreError, store_from_config
from liftplan.utils.parsing import InputError, load_catalog, load_document


def get_state(ctx: typer.Context) -> CLIState:
    """Extract validated CLI state from Typer context."""
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=2)
    return state


def print_json_payload(state: CLIState, payload: Any) -> None:
    """Print JSON payload with plain-mode fallback for piping."""
    if state.plain_output:
        typer.echo(json.dumps(payload, separators=(",", ":")))
        return
    state.console.print_json(data=payload)


def read_input(file: Optional[Path], stdin: bool) -> Any:
    """Load a JSON/YAML document from a file argument or --stdin."""
    if file is None and not stdin:
        raise typer.BadParameter("Provide a FILE argument or --stdin")
    try:
        return load_document(file, read_stdin=stdin, stdin_text=sys.stdin.read() if stdin else "")
    except InputError as exc:
        raise typer.BadParameter(str(exc)) from exc


def read_catalog(state: CLIState, explicit: Optional[Path]) -> List[CatalogExercise]:
    """Load the exercise catalog from --catalog or config."""
    path = resolve_catalog_path(state.config, explicit)
    if path is None:
        raise typer.BadParameter("Provide --catalog or set catalog.path in config")
    try:
        catalog = load_catalog(path)
    except InputError as exc:
        raise typer.BadParameter(str(exc)) from exc
    if not catalog:
        raise typer.BadParameter(f"No exercises found in catalog {path}")
    return catalog


def migration_service(state: CLIState) -> MigrationService:
    """Build a migration service over the configured store."""
    try:
        return MigrationService(store_from_config(state.config))
    except StoreError as exc:
        typer.echo(f"Store error: {exc}")
        raise typer.Exit(code=2)


def report_errors(state: CLIState, title: str, errors: List[str]) -> None:
    if state.plain_output:
        for error in errors:
            typer.echo(f"error\t{error}")
        return
    state.console.print(f"[bold red]{title}[/bold red]")
    for error in errors:
        state.console.print(f"- {error}", markup=False)
