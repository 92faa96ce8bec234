"""Pydantic records and value types for logtint."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, field_validator

from logtint.colors import normalize_color

HIGHLIGHTER_SET_VERSION = 3
HIGHLIGHTER_SET_COLLECTION_VERSION = 2

DEFAULT_FORE_COLOR = "#000000"
DEFAULT_BACK_COLOR = "#ffff00"
DEFAULT_COLOR_VARIANCE = 15
MAX_COLOR_VARIANCE = 100


def clamp_variance(value: int) -> int:
    """Clamp a color variance into [0, MAX_COLOR_VARIANCE]."""
    return max(0, min(MAX_COLOR_VARIANCE, value))


class MatchType(StrEnum):
    """Outcome of evaluating a highlighter set against one line."""

    NO_MATCH = "no_match"
    WORD_MATCH = "word_match"
    LINE_MATCH = "line_match"


@dataclass(frozen=True, slots=True)
class ExpressionPattern:
    """Everything that determines how a rule's pattern is compiled."""

    pattern: str
    ignore_case: bool = False
    use_regex: bool = True


@dataclass(frozen=True, slots=True)
class HighlightedMatch:
    """A colored range of a line: [start, start + length)."""

    start: int
    length: int
    fore_color: str
    back_color: str

    @property
    def end(self) -> int:
        return self.start + self.length


@dataclass(frozen=True, slots=True)
class NoMatch:
    """No rule matched the line."""

    match_type: ClassVar[MatchType] = MatchType.NO_MATCH

    @property
    def ranges(self) -> tuple[HighlightedMatch, ...]:
        return ()


@dataclass(frozen=True, slots=True)
class WordMatch:
    """A matched-text-only rule won; only the matched substrings are colored."""

    match_type: ClassVar[MatchType] = MatchType.WORD_MATCH
    ranges: tuple[HighlightedMatch, ...]


@dataclass(frozen=True, slots=True)
class LineMatch:
    """A whole-line rule won; the single span covers the entire line."""

    match_type: ClassVar[MatchType] = MatchType.LINE_MATCH
    span: HighlightedMatch

    @property
    def ranges(self) -> tuple[HighlightedMatch, ...]:
        return (self.span,)


MatchResult = NoMatch | WordMatch | LineMatch

NO_MATCH = NoMatch()


class HighlightColor(BaseModel):
    """A foreground/background color pair, stored as #rrggbb."""

    model_config = ConfigDict(frozen=True)

    fore_color: str = DEFAULT_FORE_COLOR
    back_color: str = DEFAULT_BACK_COLOR

    @field_validator("fore_color", "back_color")
    @classmethod
    def normalize_colors(cls, v: str) -> str:
        return normalize_color(v)


class QuickHighlighter(BaseModel):
    """A named color preset the user can cycle through; never matched against lines."""

    name: str
    color: HighlightColor = HighlightColor()
    use_in_cycle: bool = True


class HighlighterRecord(BaseModel):
    """Persisted shape of a single rule.

    Every field has a default so records written by older versions, which lack
    newer properties, still validate. Unknown keys are ignored.
    """

    pattern: str = ""
    use_regex: bool = True
    ignore_case: bool = False
    highlight_only_match: bool = False
    variate_colors: bool = False
    color_variance: int = DEFAULT_COLOR_VARIANCE
    fore_color: str = DEFAULT_FORE_COLOR
    back_color: str = DEFAULT_BACK_COLOR

    @field_validator("fore_color", "back_color")
    @classmethod
    def normalize_colors(cls, v: str) -> str:
        return normalize_color(v)

    @field_validator("color_variance")
    @classmethod
    def clamp_color_variance(cls, v: int) -> int:
        return clamp_variance(v)


class HighlighterSetRecord(BaseModel):
    """Persisted shape of a highlighter set.

    Rules are kept as raw entries so one bad rule, or one that is not a mapping
    at all, can be skipped without rejecting the whole set.
    """

    version: int = 0
    name: str = ""
    id: str = ""
    highlighters: list[Any] = []


class HighlighterSetCollectionRecord(BaseModel):
    """Persisted shape of the whole collection.

    Entries stay raw for the same reason as in ``HighlighterSetRecord``.
    """

    version: int = 0
    highlighter_sets: list[Any] = []
    active_sets: list[Any] = []
    quick_highlighters: list[Any] = []
