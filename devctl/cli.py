"""Typer entry point for devctl."""

from __future__ import annotations

import logging

import typer
from rich.console import Console

from . import __version__
from .commands import COMMANDS
from .config import load_config
from .exceptions import DevctlError
from .router import CommandRouter

# Global options count only before the command name; every later token
# belongs to the router, including --help.
ROUTER_CONTEXT = {
    "allow_extra_args": True,
    "allow_interspersed_args": False,
    "ignore_unknown_options": True,
    "help_option_names": [],
}

app = typer.Typer(add_completion=False, help="Short, splattable flags for docker compose and git.")


def configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"devctl {__version__}")
        raise typer.Exit()


@app.command(context_settings=ROUTER_CONTEXT)
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging."),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print external commands instead of running them."),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the devctl version and exit.",
    ),
) -> None:
    """Run COMMAND with short flags expanded, e.g. `devctl up -bd`."""

    _ = version  # handled via callback
    configure_logging(verbose)
    try:
        config = load_config(dry_run=dry_run, verbose=verbose)
    except DevctlError as exc:
        _fail(str(exc), exc.exit_code)
    router = CommandRouter(COMMANDS, config)
    raise typer.Exit(router.dispatch(ctx.args))


def _fail(message: str, code: int = 1) -> None:
    Console(stderr=True).print(f"[red]Error:[/red] {message}")
    raise typer.Exit(code)


if __name__ == "__main__":
    app()
