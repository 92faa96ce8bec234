"""Show command - print a log with the active highlighter sets applied."""

from __future__ import annotations

import sys
from pathlib import Path  # noqa: TC003 - typer needs this at runtime for argument parsing
from typing import TYPE_CHECKING, Annotated

import typer
from rich.console import Console

from logtint.commands.sets import resolve_set
from logtint.render import render_line
from logtint.storage import load_collection, open_settings

if TYPE_CHECKING:
    from collections.abc import Iterable

    from logtint.highlighter import HighlighterSet


def _print_lines(lines: Iterable[str], active: HighlighterSet, console: Console) -> None:
    for raw in lines:
        console.print(render_line(raw.rstrip("\n"), active), soft_wrap=True)


def show(
    ctx: typer.Context,
    file: Annotated[Path | None, typer.Argument(help="Log file to show (default: stdin)")] = None,
    sets: Annotated[
        list[str] | None, typer.Option("--set", "-s", help="Use this set (name or id) instead of the active ones")
    ] = None,
) -> None:
    """Print a log file with highlighting applied."""
    collection = load_collection(open_settings(ctx.obj))
    if sets:
        collection.set_active_set_ids([resolve_set(collection, ref).id for ref in sets])
    active = collection.current_active_set()
    console = Console(highlight=False)

    if file is None:
        _print_lines(sys.stdin, active, console)
        return
    if not file.exists():
        typer.echo(f"Error: file not found: {file}")
        raise typer.Exit(1)
    with file.open(errors="replace") as f:
        _print_lines(f, active, console)
