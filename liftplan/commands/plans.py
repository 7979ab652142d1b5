"""Stored plan commands."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional

import typer

from liftplan.commands.common import (
    get_state,
    migration_service,
    print_json_payload,
    read_input,
    report_errors,
)

app = typer.Typer(help="Stored plan commands")


@app.command("save")
def save_command(
    ctx: typer.Context,
    file: Optional[Path] = typer.Argument(None, help="JSON/YAML plan file"),
    stdin: bool = typer.Option(False, "--stdin", help="Read plan from stdin"),
) -> None:
    """Validate and persist a new plan."""
    state = get_state(ctx)
    result = migration_service(state).save_plan(read_input(file, stdin))

    if state.json_output:
        print_json_payload(state, result.to_dict())
    elif result.success:
        if state.plain_output:
            typer.echo(f"saved\t{result.plan_id}")
        else:
            state.console.print(f"Saved plan {result.plan_id}")
    else:
        report_errors(state, "Plan was not saved", result.errors)

    if not result.success:
        raise typer.Exit(code=1)


@app.command("show")
def show_command(
    ctx: typer.Context,
    plan_id: str = typer.Argument(..., help="Plan ID"),
) -> None:
    """Print a stored plan; validation problems are reported as warnings."""
    state = get_state(ctx)
    result = migration_service(state).load_plan(plan_id)

    if result.record is None:
        report_errors(state, "Plan could not be loaded", result.errors)
        raise typer.Exit(code=1)

    if state.json_output:
        print_json_payload(
            state,
            {"plan": result.record, "format": result.plan_format.value, "warnings": result.errors},
        )
        return

    print_json_payload(state, result.record)
    if result.errors and not state.plain_output:
        report_errors(state, "Validation warnings", result.errors)


@app.command("migrate")
def migrate_command(
    ctx: typer.Context,
    plan_ids: List[str] = typer.Argument(..., help="Plan ID(s) to migrate"),
) -> None:
    """Upgrade stored legacy plans to modular format."""
    state = get_state(ctx)
    results = migration_service(state).migrate_many(plan_ids)
    rows: List[Dict[str, Any]] = [{"plan_id": plan_id, **result.to_dict()} for plan_id, result in results.items()]

    if state.json_output:
        print_json_payload(state, {"results": rows})
    elif state.plain_output:
        for row in rows:
            status = "migrated" if row["migrated"] else ("unchanged" if row["success"] else "failed")
            typer.echo(f"{row['plan_id']}\t{status}\t{'; '.join(row['errors'])}".rstrip())
    else:
        for row in rows:
            if row["migrated"]:
                state.console.print(f"[green]{row['plan_id']}[/green]: migrated to modular")
            elif row["success"]:
                state.console.print(f"{row['plan_id']}: already modular")
            else:
                report_errors(state, f"{row['plan_id']}: migration failed", row["errors"])

    if any(not row["success"] for row in rows):
        raise typer.Exit(code=1)
