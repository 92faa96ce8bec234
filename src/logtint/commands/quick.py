"""Quick highlighter subcommands for logtint."""

from __future__ import annotations

import typer
from rich.console import Console
from rich.table import Table
from rich.text import Text

from logtint.colors import match_style
from logtint.storage import load_collection, open_settings

quick_app = typer.Typer(name="quick", help="Quick highlighter color presets")


@quick_app.command("list")
def list_quick(ctx: typer.Context) -> None:
    """List quick highlighters in cycle order."""
    collection = load_collection(open_settings(ctx.obj))
    table = Table("#", "Name", "Sample", "In cycle")
    for index, quick in enumerate(collection.quick_highlighters()):
        sample = Text(f" {quick.name} ", style=match_style(quick.color.fore_color, quick.color.back_color))
        table.add_row(str(index), quick.name, sample, "yes" if quick.use_in_cycle else "no")
    Console().print(table)
