"""Shared test fixtures."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from logtint.highlighter import Highlighter, HighlighterSet

if TYPE_CHECKING:
    from pathlib import Path

RED = "#ff0000"
WHITE = "#ffffff"
YELLOW = "#ffff00"
BLACK = "#000000"

SAMPLE_LINES = [
    "2024-01-15 ERROR: Connection failed",
    "2024-01-15 INFO: Server started",
    "2024-01-15 DEBUG: Processing request from 10.0.0.1",
    "2024-01-15 ERROR: Timeout occurred",
    "2024-01-15 WARN: High memory usage",
]


@pytest.fixture
def error_warn_set() -> HighlighterSet:
    """ERROR highlights the whole line red on white, WARN only the word in yellow on black."""
    highlighter_set = HighlighterSet.create_new_set("severities")
    highlighter_set.set_highlighters(
        [
            Highlighter("ERROR", fore_color=RED, back_color=WHITE),
            Highlighter("WARN", highlight_only_match=True, fore_color=YELLOW, back_color=BLACK),
        ]
    )
    return highlighter_set


@pytest.fixture
def sample_log_file(tmp_path: Path) -> Path:
    """Create a temporary log file with sample content."""
    log_file = tmp_path / "test.log"
    log_file.write_text("\n".join(SAMPLE_LINES) + "\n")
    return log_file
