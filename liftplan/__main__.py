"""Entry point for liftplan."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from liftplan import __version__
from liftplan.commands import plans as plans_commands
from liftplan.commands import strength as strength_commands
from liftplan.commands.plan import (
    convert_command,
    fallback_command,
    resolve_command,
    stats_command,
    validate_command,
)
from liftplan.core.config import ConfigError, default_config_path, load_config
from liftplan.core.state import CLIState

app = typer.Typer(
    add_completion=False,
    help="Workout plan validation, migration and load progression",
    invoke_without_command=True,
)


def configure_logging(verbose: bool, quiet: bool) -> None:
    level = logging.DEBUG if verbose else logging.ERROR if quiet else logging.WARNING
    handler = RichHandler(
        console=Console(stderr=True),
        show_time=False,
        show_path=verbose,
    )
    logging.basicConfig(level=level, format="%(message)s", handlers=[handler], force=True)


@app.callback()
def main_callback(
    ctx: typer.Context,
    json_output: bool = typer.Option(False, "--json", help="Output JSON where available"),
    plain_output: bool = typer.Option(
        False,
        "--plain",
        help="Output plain text (no rich formatting/tables)",
    ),
    config: Optional[Path] = typer.Option(None, "--config", help="Path to config file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Quiet output"),
    version: bool = typer.Option(False, "--version", help="Show version and exit"),
) -> None:
    """Initialize global CLI state."""
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=0)

    if json_output and plain_output:
        typer.echo("Options --json and --plain are mutually exclusive.")
        raise typer.Exit(code=2)

    cfg_path = (config or default_config_path()).expanduser().resolve()
    try:
        cfg = load_config(cfg_path)
    except ConfigError as exc:
        typer.echo(f"Config error: {exc}")
        raise typer.Exit(code=2)

    configure_logging(verbose=verbose, quiet=quiet)
    console = Console(
        quiet=quiet,
        no_color=plain_output,
        log_time=False,
        log_path=False,
    )
    ctx.obj = CLIState(
        json_output=(json_output and not plain_output),
        plain_output=plain_output,
        verbose=verbose,
        quiet=quiet,
        config_path=cfg_path,
        config=cfg,
        console=console,
    )

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(code=0)


# Top-level commands
app.command("validate")(validate_command)
app.command("convert")(convert_command)
app.command("stats")(stats_command)
app.command("resolve")(resolve_command)
app.command("fallback")(fallback_command)
app.add_typer(plans_commands.app, name="plans")
app.add_typer(strength_commands.app, name="strength")


def main() -> None:
    """Console script entrypoint."""
    app()


if __name__ == "__main__":
    main()
