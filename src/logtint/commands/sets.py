"""Highlighter set subcommands for logtint."""

from __future__ import annotations

from typing import TYPE_CHECKING, Annotated

import typer
from rich.console import Console
from rich.table import Table
from rich.text import Text

from logtint.colors import match_style
from logtint.highlighter import Highlighter, HighlighterSet
from logtint.models import DEFAULT_BACK_COLOR, DEFAULT_COLOR_VARIANCE, DEFAULT_FORE_COLOR
from logtint.storage import load_collection, open_settings, save_collection

if TYPE_CHECKING:
    from logtint.collection import HighlighterSetCollection
    from logtint.storage import SettingsStore

sets_app = typer.Typer(name="sets", help="Manage highlighter sets")

_SetRef = Annotated[str, typer.Argument(help="Set name or id")]


def resolve_set(collection: HighlighterSetCollection, ref: str) -> HighlighterSet:
    """Find a set by id, then by name; exit with an error if neither matches."""
    found = collection.get_set(ref)
    if found is None:
        found = collection.find_set_by_name(ref)
    if found is None:
        typer.echo(f"Error: no highlighter set named or with id '{ref}'")
        raise typer.Exit(1)
    return found


def _open_for_update(ctx: typer.Context) -> tuple[SettingsStore, HighlighterSetCollection]:
    """Load settings that a command will write back; exit if the file could not be read."""
    store = open_settings(ctx.obj)
    if not store.is_writable:
        typer.echo(f"Error: cannot read settings file {store.path}; fix or remove it first")
        raise typer.Exit(1)
    return store, load_collection(store)


@sets_app.command("list")
def list_sets(ctx: typer.Context) -> None:
    """List highlighter sets, active ones first in activation order."""
    collection = load_collection(open_settings(ctx.obj))
    active_ids = collection.active_set_ids()
    inactive = [s for s in collection.highlighter_sets() if s.id not in active_ids]

    table = Table("Active", "Name", "Id", "Rules")
    for position, set_id in enumerate(active_ids, start=1):
        active = collection.get_set(set_id)
        if active is not None:
            table.add_row(str(position), Text(active.name), active.id, str(len(active)))
    for highlighter_set in inactive:
        table.add_row("", Text(highlighter_set.name), highlighter_set.id, str(len(highlighter_set)))
    Console().print(table)


@sets_app.command("rules")
def list_rules(ctx: typer.Context, ref: _SetRef) -> None:
    """List the rules of a set in evaluation order."""
    collection = load_collection(open_settings(ctx.obj))
    highlighter_set = resolve_set(collection, ref)

    table = Table("#", "Pattern", "Scope", "Regex", "Case", "Colors", "Variance")
    for index, rule in enumerate(highlighter_set.highlighters()):
        table.add_row(
            str(index),
            Text(rule.pattern),
            "match" if rule.highlight_only_match else "line",
            "yes" if rule.use_regex else "no",
            "ignore" if rule.ignore_case else "match",
            Text(f"{rule.fore_color}/{rule.back_color}", style=match_style(rule.fore_color, rule.back_color)),
            str(rule.color_variance) if rule.variate_colors else "-",
        )
    Console().print(table)


@sets_app.command("create")
def create_set(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Name of the new set")],
    activate: Annotated[bool, typer.Option("--activate", help="Activate the new set")] = False,
) -> None:
    """Create an empty highlighter set."""
    store, collection = _open_for_update(ctx)
    if collection.has_set_by_name(name):
        typer.echo(f"Error: a highlighter set named '{name}' already exists")
        raise typer.Exit(1)

    highlighter_set = HighlighterSet.create_new_set(name)
    collection.add_set(highlighter_set)
    if activate:
        collection.activate_set(highlighter_set.id)
    save_collection(collection, store)
    typer.echo(highlighter_set.id)


@sets_app.command("add-rule")
def add_rule(  # noqa: PLR0913
    ctx: typer.Context,
    ref: _SetRef,
    pattern: Annotated[str, typer.Argument(help="Pattern to match")],
    fore: Annotated[str, typer.Option("--fore", "-f", help="Foreground color")] = DEFAULT_FORE_COLOR,
    back: Annotated[str, typer.Option("--back", "-b", help="Background color")] = DEFAULT_BACK_COLOR,
    only_match: Annotated[bool, typer.Option("--only-match", "-m", help="Color only the matched text")] = False,
    ignore_case: Annotated[bool, typer.Option("--ignore-case", "-i", help="Case-insensitive match")] = False,
    literal: Annotated[bool, typer.Option("--literal", "-l", help="Match the pattern as plain text")] = False,
    variate: Annotated[bool, typer.Option("--variate", help="Vary colors per matched text")] = False,
    variance: Annotated[int, typer.Option("--variance", help="Color variance, 0-100")] = DEFAULT_COLOR_VARIANCE,
) -> None:
    """Append a rule to a set."""
    store, collection = _open_for_update(ctx)
    highlighter_set = resolve_set(collection, ref)
    try:
        rule = Highlighter(
            pattern,
            ignore_case=ignore_case,
            highlight_only_match=only_match,
            fore_color=fore,
            back_color=back,
            use_regex=not literal,
            variate_colors=variate,
            color_variance=variance,
        )
    except ValueError as e:
        typer.echo(f"Error: {e}")
        raise typer.Exit(1)  # noqa: B904

    if not rule.compile().is_valid:
        typer.echo(f"Warning: pattern '{pattern}' is not a valid regular expression and will never match")
    highlighter_set.add_highlighter(rule)
    collection.update_set(highlighter_set)
    save_collection(collection, store)


@sets_app.command("remove-rule")
def remove_rule(
    ctx: typer.Context,
    ref: _SetRef,
    index: Annotated[int, typer.Argument(help="Rule number as shown by 'sets rules'")],
) -> None:
    """Remove a rule from a set."""
    store, collection = _open_for_update(ctx)
    highlighter_set = resolve_set(collection, ref)
    if not 0 <= index < len(highlighter_set):
        typer.echo(f"Error: set '{highlighter_set.name}' has no rule {index}")
        raise typer.Exit(1)
    highlighter_set.remove_highlighter(index)
    collection.update_set(highlighter_set)
    save_collection(collection, store)


@sets_app.command("activate")
def activate_set(ctx: typer.Context, ref: _SetRef) -> None:
    """Activate a set; it is evaluated after the sets already active."""
    store, collection = _open_for_update(ctx)
    collection.activate_set(resolve_set(collection, ref).id)
    save_collection(collection, store)


@sets_app.command("deactivate")
def deactivate_set(
    ctx: typer.Context,
    ref: Annotated[str | None, typer.Argument(help="Set name or id")] = None,
    all_sets: Annotated[bool, typer.Option("--all", help="Deactivate every set")] = False,
) -> None:
    """Deactivate a set, or all of them."""
    store, collection = _open_for_update(ctx)
    if all_sets:
        collection.deactivate_all()
    elif ref is not None:
        collection.deactivate_set(resolve_set(collection, ref).id)
    else:
        typer.echo("Error: give a set name or id, or --all")
        raise typer.Exit(1)
    save_collection(collection, store)


@sets_app.command("remove")
def remove_set(ctx: typer.Context, ref: _SetRef) -> None:
    """Delete a set."""
    store, collection = _open_for_update(ctx)
    collection.remove_set(resolve_set(collection, ref).id)
    save_collection(collection, store)
