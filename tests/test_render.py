"""Tests for rendering match results as rich text."""

from __future__ import annotations

from rich.style import Style

from logtint.highlighter import HighlighterSet
from logtint.models import NO_MATCH
from logtint.render import highlight_line, render_line


class TestHighlightLine:
    def test_no_match_plain(self) -> None:
        text = highlight_line("INFO: ok", NO_MATCH)
        assert text.plain == "INFO: ok"
        assert text.spans == []

    def test_line_match_spans_line(self, error_warn_set: HighlighterSet) -> None:
        line = "2024 ERROR disk full"
        text = highlight_line(line, error_warn_set.match_line(line))
        assert [(s.start, s.end) for s in text.spans] == [(0, len(line))]
        assert text.spans[0].style == Style(color="#ff0000", bgcolor="#ffffff")

    def test_word_match_spans_word(self, error_warn_set: HighlighterSet) -> None:
        line = "WARN: low memory, WARN again"
        text = highlight_line(line, error_warn_set.match_line(line))
        assert [(s.start, s.end) for s in text.spans] == [(0, 4), (18, 22)]


class TestRenderLine:
    def test_empty_set_skips_matching(self) -> None:
        text = render_line("ERROR", HighlighterSet())
        assert text.plain == "ERROR"
        assert text.spans == []

    def test_renders_with_set(self, error_warn_set: HighlighterSet) -> None:
        assert render_line("ERROR", error_warn_set).spans
