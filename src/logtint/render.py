"""Turn match results into rich text for display."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.text import Text

from logtint.colors import match_style

if TYPE_CHECKING:
    from logtint.highlighter import HighlighterSet
    from logtint.models import MatchResult


def highlight_line(line: str, result: MatchResult) -> Text:
    """Apply the result's colored ranges to the line."""
    text = Text(line)
    for match in result.ranges:
        text.stylize(match_style(match.fore_color, match.back_color), match.start, match.end)
    return text


def render_line(line: str, highlighter_set: HighlighterSet) -> Text:
    """Evaluate the line against the set and render it, skipping work for an empty set."""
    if highlighter_set.is_empty():
        return Text(line)
    return highlight_line(line, highlighter_set.match_line(line))
