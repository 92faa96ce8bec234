"""CLI entry point for logtint."""

from __future__ import annotations

import logging
from pathlib import Path  # noqa: TC003 - typer needs this at runtime for option parsing
from typing import Annotated

import typer
from rich.logging import RichHandler

from logtint.commands.quick import quick_app
from logtint.commands.sets import sets_app
from logtint.commands.show import show

app = typer.Typer(add_completion=False)
app.command()(show)
app.add_typer(sets_app, name="sets")
app.add_typer(quick_app, name="quick")


@app.callback()
def _options(
    ctx: typer.Context,
    settings: Annotated[
        Path | None, typer.Option("--settings", help="Settings file (default: highlighters.toml in the config dir)")
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log debug output to stderr")] = False,
) -> None:
    """Highlight log lines with user-defined pattern rules."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(message)s", handlers=[RichHandler(show_path=False)])
    ctx.obj = settings


def main() -> None:
    """Entry point for the CLI."""
    app()
