"""Plan document commands: validate, convert, stats, resolve, fallback."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import typer
from rich.table import Table

from liftplan.commands.common import (
    get_state,
    print_json_payload,
    read_catalog,
    read_input,
    report_errors,
)
from liftplan.core.convert import convert_to_legacy, convert_to_modular, create_fallback_plan
from liftplan.core.models import WorkoutPlan
from liftplan.core.resolver import resolve_exercises
from liftplan.core.schema import PlanFormatError, parse_plan
from liftplan.core.state import CLIState
from liftplan.core.stats import compute_stats
from liftplan.core.validation import validate
from liftplan.exporters.json_export import write_document
from liftplan.utils.formatting import format_duration_minutes


def _parse_or_exit(state: CLIState, record: Any) -> WorkoutPlan:
    try:
        return parse_plan(record)
    except PlanFormatError as exc:
        if state.json_output:
            print_json_payload(state, {"is_valid": False, "errors": exc.errors})
        else:
            report_errors(state, "Invalid workout plan", exc.errors)
        raise typer.Exit(code=1)


def _emit_plan(state: CLIState, plan: WorkoutPlan, output: Optional[Path], label: str) -> None:
    payload = plan.to_dict()
    if output:
        write_document(output, payload)
        if state.json_output:
            print_json_payload(state, {"status": label, "output": str(output)})
        elif state.plain_output:
            typer.echo(f"{label}\t{output}")
        else:
            state.console.print(f"{label.capitalize()} plan written to: {output}")
        return
    print_json_payload(state, payload)


def validate_command(
    ctx: typer.Context,
    file: Optional[Path] = typer.Argument(None, help="JSON/YAML plan file"),
    stdin: bool = typer.Option(False, "--stdin", help="Read plan from stdin"),
) -> None:
    """Validate a plan in either format."""
    state = get_state(ctx)
    result = validate(read_input(file, stdin))

    if state.json_output:
        print_json_payload(state, result.to_dict())
    elif result.is_valid:
        if state.plain_output:
            typer.echo("valid\ttrue")
        else:
            state.console.print("[green]Plan is valid[/green]")
    else:
        report_errors(state, f"Plan has {len(result.errors)} problem(s)", result.errors)

    if not result.is_valid:
        raise typer.Exit(code=1)


def convert_command(
    ctx: typer.Context,
    file: Optional[Path] = typer.Argument(None, help="JSON/YAML plan file"),
    stdin: bool = typer.Option(False, "--stdin", help="Read plan from stdin"),
    target: str = typer.Option("modular", "--to", help="Target format: modular|legacy"),
    output: Optional[Path] = typer.Option(None, help="Write converted plan to file"),
) -> None:
    """Convert a plan between legacy and modular format."""
    if target not in {"modular", "legacy"}:
        raise typer.BadParameter("--to must be modular or legacy")
    state = get_state(ctx)
    plan = _parse_or_exit(state, read_input(file, stdin))

    converted = convert_to_modular(plan) if target == "modular" else convert_to_legacy(plan)
    _emit_plan(state, converted, output, "converted")


def stats_command(
    ctx: typer.Context,
    file: Optional[Path] = typer.Argument(None, help="JSON/YAML plan file"),
    stdin: bool = typer.Option(False, "--stdin", help="Read plan from stdin"),
) -> None:
    """Summarize exercises, modules, durations and muscle groups."""
    state = get_state(ctx)
    stats = compute_stats(_parse_or_exit(state, read_input(file, stdin)))

    if state.json_output:
        print_json_payload(state, stats.to_dict())
        return

    if state.plain_output:
        for key, value in stats.to_dict().items():
            if isinstance(value, list):
                value = ",".join(value)
            typer.echo(f"{key}\t{value}")
        return

    table = Table(title=f"Plan stats ({stats.format.value})")
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    table.add_row("Exercises", str(stats.total_exercises))
    table.add_row("Modules", str(stats.total_modules))
    table.add_row("Average day", format_duration_minutes(stats.average_duration))
    table.add_row("Muscle groups", str(stats.unique_muscle_groups))
    state.console.print(table)
    if stats.muscle_groups:
        state.console.print(", ".join(stats.muscle_groups), markup=False)


def resolve_command(
    ctx: typer.Context,
    file: Optional[Path] = typer.Argument(None, help="JSON/YAML plan file"),
    stdin: bool = typer.Option(False, "--stdin", help="Read plan from stdin"),
    catalog: Optional[Path] = typer.Option(None, help="Exercise catalog JSON/YAML"),
    output: Optional[Path] = typer.Option(None, help="Write resolved plan to file"),
) -> None:
    """Reconcile plan exercises with the exercise catalog."""
    state = get_state(ctx)
    plan = _parse_or_exit(state, read_input(file, stdin))
    resolved = resolve_exercises(plan, read_catalog(state, catalog))
    _emit_plan(state, resolved, output, "resolved")


def fallback_command(
    ctx: typer.Context,
    catalog: Optional[Path] = typer.Option(None, help="Exercise catalog JSON/YAML"),
    output: Optional[Path] = typer.Option(None, help="Write plan to file"),
) -> None:
    """Build a basic full-body plan from the catalog."""
    state = get_state(ctx)
    plan = create_fallback_plan(read_catalog(state, catalog))
    _emit_plan(state, plan, output, "fallback")
