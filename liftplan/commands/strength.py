"""Strength estimation and load prescription commands."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer

from liftplan.commands.common import get_state, print_json_payload
from liftplan.core.config import load_settings
from liftplan.core.load import suggest_progression, suggest_weight
from liftplan.core.models import PerformanceSet
from liftplan.core.strength import best_one_rep_max, estimate_one_rep_max
from liftplan.utils.formatting import format_weight
from liftplan.utils.parsing import InputError, load_performance_sets

app = typer.Typer(help="Strength estimation and load prescription")


def _sets_from_file(file: Path) -> List[PerformanceSet]:
    try:
        return load_performance_sets(file)
    except InputError as exc:
        raise typer.BadParameter(str(exc)) from exc


@app.command("estimate")
def estimate_command(
    ctx: typer.Context,
    weight: float = typer.Option(..., min=0, help="Weight lifted"),
    reps: int = typer.Option(..., min=0, help="Reps performed"),
    rir: Optional[int] = typer.Option(None, min=0, max=10, help="Reps in reserve"),
) -> None:
    """Estimate a one-rep max from a single set."""
    state = get_state(ctx)
    result = estimate_one_rep_max(PerformanceSet(weight=weight, reps=reps, rir=rir))

    if state.json_output:
        print_json_payload(state, result.to_dict())
    elif state.plain_output:
        typer.echo(f"{result.estimate}\t{result.formula}\t{result.confidence.value}")
    else:
        state.console.print(
            f"Estimated 1RM: [bold]{result.estimate}[/bold] ({result.formula}, {result.confidence.value} confidence)"
        )


@app.command("best")
def best_command(
    ctx: typer.Context,
    file: Path = typer.Argument(..., help="JSON/YAML list of logged sets"),
) -> None:
    """Pick the most reliable one-rep max across logged sets."""
    state = get_state(ctx)
    result = best_one_rep_max(_sets_from_file(file))

    if state.json_output:
        print_json_payload(state, result.to_dict() if result else None)
    elif result is None:
        typer.echo("No usable sets (weight and reps must be positive)")
    elif state.plain_output:
        typer.echo(f"{result.estimate}\t{result.formula}\t{result.confidence.value}")
    else:
        state.console.print(
            f"Best 1RM: [bold]{result.estimate}[/bold] ({result.formula}, {result.confidence.value} confidence)"
        )

    if result is None:
        raise typer.Exit(code=1)


@app.command("suggest")
def suggest_command(
    ctx: typer.Context,
    one_rm: float = typer.Option(..., "--one-rm", min=0, help="Current 1RM"),
    reps: str = typer.Option(..., help="Target reps, e.g. 5 or 8-12"),
    rir: Optional[int] = typer.Option(None, min=0, max=10, help="Target reps in reserve (default: config, 2)"),
    increment: Optional[float] = typer.Option(None, help="Rounding increment (default: config, 2.5)"),
) -> None:
    """Suggest a working weight for a rep target."""
    state = get_state(ctx)
    settings = load_settings(state.config, default_target_rir=rir, rounding_increment=increment)
    weight = suggest_weight(
        one_rm,
        int(reps) if reps.isdigit() else reps,
        target_rir=int(settings["default_target_rir"]),
        increment=float(settings["rounding_increment"]),
    )

    if state.json_output:
        print_json_payload(state, {"weight": weight, "units": settings["units"]})
    elif state.plain_output:
        typer.echo(str(weight))
    else:
        state.console.print(f"Suggested weight: [bold]{format_weight(weight, str(settings['units']))}[/bold]")


@app.command("progress")
def progress_command(
    ctx: typer.Context,
    file: Path = typer.Argument(..., help="JSON/YAML list of recent sets, oldest first"),
    current: float = typer.Option(..., min=0, help="Current suggested weight"),
    reps: str = typer.Option(..., help="Target reps, e.g. 8 or 8-12"),
) -> None:
    """Adjust a suggestion from recent performance."""
    state = get_state(ctx)
    settings = load_settings(state.config)
    result = suggest_progression(
        _sets_from_file(file),
        current,
        int(reps) if reps.isdigit() else reps,
        settings=settings,
    )

    if state.json_output:
        print_json_payload(state, result.to_dict())
    elif state.plain_output:
        typer.echo(f"{result.weight}\t{result.note}")
    else:
        state.console.print(
            f"Next weight: [bold]{format_weight(result.weight, str(settings['units']))}[/bold] ({result.note})"
        )
