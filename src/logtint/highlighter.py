"""Highlighting rules and ordered rule sets."""

from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from logtint.colors import normalize_color, variate_colors
from logtint.models import (
    DEFAULT_BACK_COLOR,
    DEFAULT_COLOR_VARIANCE,
    DEFAULT_FORE_COLOR,
    HIGHLIGHTER_SET_VERSION,
    NO_MATCH,
    ExpressionPattern,
    HighlightedMatch,
    HighlighterRecord,
    HighlighterSetRecord,
    LineMatch,
    MatchResult,
    WordMatch,
    clamp_variance,
)
from logtint.patterns import CombinedPatternMatcher, PatternMatcher

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, MutableMapping

logger = logging.getLogger(__name__)


class Highlighter:
    """A single rule: a pattern and the colors matching lines or text render in.

    The compiled matcher is a cache. Changing the pattern, its case sensitivity
    or its syntax drops it, and the next match compiles again.
    """

    def __init__(
        self,
        pattern: str = "",
        *,
        ignore_case: bool = False,
        highlight_only_match: bool = False,
        fore_color: str = DEFAULT_FORE_COLOR,
        back_color: str = DEFAULT_BACK_COLOR,
        use_regex: bool = True,
        variate_colors: bool = False,
        color_variance: int = DEFAULT_COLOR_VARIANCE,
    ) -> None:
        self._pattern = pattern
        self._ignore_case = ignore_case
        self._use_regex = use_regex
        self._highlight_only_match = highlight_only_match
        self._variate_colors = variate_colors
        self._color_variance = clamp_variance(color_variance)
        self._fore_color = normalize_color(fore_color)
        self._back_color = normalize_color(back_color)
        self._matcher: PatternMatcher | None = None

    @property
    def pattern(self) -> str:
        return self._pattern

    @pattern.setter
    def pattern(self, value: str) -> None:
        self._pattern = value
        self._matcher = None

    @property
    def ignore_case(self) -> bool:
        return self._ignore_case

    @ignore_case.setter
    def ignore_case(self, value: bool) -> None:
        self._ignore_case = value
        self._matcher = None

    @property
    def use_regex(self) -> bool:
        return self._use_regex

    @use_regex.setter
    def use_regex(self, value: bool) -> None:
        self._use_regex = value
        self._matcher = None

    @property
    def highlight_only_match(self) -> bool:
        return self._highlight_only_match

    @highlight_only_match.setter
    def highlight_only_match(self, value: bool) -> None:
        self._highlight_only_match = value

    @property
    def variate_colors(self) -> bool:
        return self._variate_colors

    @variate_colors.setter
    def variate_colors(self, value: bool) -> None:
        self._variate_colors = value

    @property
    def color_variance(self) -> int:
        return self._color_variance

    @color_variance.setter
    def color_variance(self, value: int) -> None:
        self._color_variance = clamp_variance(value)

    @property
    def fore_color(self) -> str:
        return self._fore_color

    @fore_color.setter
    def fore_color(self, value: str) -> None:
        self._fore_color = normalize_color(value)

    @property
    def back_color(self) -> str:
        return self._back_color

    @back_color.setter
    def back_color(self, value: str) -> None:
        self._back_color = normalize_color(value)

    @property
    def is_compiled(self) -> bool:
        return self._matcher is not None

    def expression_pattern(self) -> ExpressionPattern:
        return ExpressionPattern(self._pattern, self._ignore_case, self._use_regex)

    def compile(self) -> PatternMatcher:
        """Build the cached matcher. An invalid pattern yields a matcher that never matches."""
        matcher = self._matcher
        if matcher is None:
            matcher = PatternMatcher(self.expression_pattern())
            self._matcher = matcher
        return matcher

    def match_line(self, line: str) -> list[HighlightedMatch]:
        """Return the colored ranges this rule produces for the line, empty if it does not match."""
        matcher = self._matcher or self.compile()
        if not self._highlight_only_match:
            if not matcher.search(line):
                return []
            return [HighlightedMatch(0, len(line), self._fore_color, self._back_color)]

        matches: list[HighlightedMatch] = []
        for start, end, text in matcher.spans(line):
            if self._variate_colors:
                fore, back = variate_colors(self._fore_color, self._back_color, text, self._color_variance)
            else:
                fore, back = self._fore_color, self._back_color
            matches.append(HighlightedMatch(start, end - start, fore, back))
        return matches

    def copy(self) -> Highlighter:
        """Copy the configuration; the compiled matcher is immutable and shared."""
        other = Highlighter.__new__(Highlighter)
        other.__dict__.update(self.__dict__)
        return other

    def to_record(self) -> dict[str, Any]:
        return HighlighterRecord(
            pattern=self._pattern,
            use_regex=self._use_regex,
            ignore_case=self._ignore_case,
            highlight_only_match=self._highlight_only_match,
            variate_colors=self._variate_colors,
            color_variance=self._color_variance,
            fore_color=self._fore_color,
            back_color=self._back_color,
        ).model_dump()

    @classmethod
    def from_record(cls, data: Mapping[str, Any]) -> Highlighter:
        """Build a rule from a stored record. Raises ValidationError for malformed records."""
        record = HighlighterRecord.model_validate(data)
        return cls(
            record.pattern,
            ignore_case=record.ignore_case,
            highlight_only_match=record.highlight_only_match,
            fore_color=record.fore_color,
            back_color=record.back_color,
            use_regex=record.use_regex,
            variate_colors=record.variate_colors,
            color_variance=record.color_variance,
        )

    def _config(self) -> tuple[object, ...]:
        return (
            self._pattern,
            self._ignore_case,
            self._use_regex,
            self._highlight_only_match,
            self._variate_colors,
            self._color_variance,
            self._fore_color,
            self._back_color,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Highlighter):
            return NotImplemented
        return self._config() == other._config()

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        scope = "match" if self._highlight_only_match else "line"
        return f"Highlighter({self._pattern!r}, {scope}, {self._fore_color}/{self._back_color})"


class HighlighterSet:
    """An ordered, named and identified list of rules.

    The first rule matching a line decides the result for the whole set. The set
    owns its rules: they are copied on the way in and out, and every mutation
    goes through the methods below so the fast-reject union stays in sync.
    """

    PERSISTABLE_NAME = "HighlighterSet"

    def __init__(self, name: str = "", set_id: str = "", highlighters: Iterable[Highlighter] = ()) -> None:
        self._name = name
        self._id = set_id
        self._highlighters = [h.copy() for h in highlighters]
        self._combined: CombinedPatternMatcher | None = None

    @classmethod
    def create_new_set(cls, name: str) -> HighlighterSet:
        """Create an empty set with a freshly generated id."""
        return cls(name, str(uuid.uuid4()))

    @property
    def name(self) -> str:
        return self._name

    @property
    def id(self) -> str:
        return self._id

    def rename(self, name: str) -> None:
        self._name = name

    def clone(self) -> HighlighterSet:
        """Duplicate the set under a new id."""
        return HighlighterSet(self._name, str(uuid.uuid4()), self._highlighters)

    def copy(self) -> HighlighterSet:
        """Duplicate the set keeping its id; edits to the copy leave this set alone."""
        duplicate = HighlighterSet(self._name, self._id, self._highlighters)
        duplicate._combined = self._combined
        return duplicate

    def __len__(self) -> int:
        return len(self._highlighters)

    def is_empty(self) -> bool:
        return not self._highlighters

    def highlighters(self) -> list[Highlighter]:
        return [h.copy() for h in self._highlighters]

    def highlighter_at(self, index: int) -> Highlighter:
        return self._highlighters[index].copy()

    def set_highlighters(self, highlighters: Iterable[Highlighter]) -> None:
        self._highlighters = [h.copy() for h in highlighters]
        self._combined = None

    def add_highlighter(self, highlighter: Highlighter) -> None:
        self._highlighters.append(highlighter.copy())
        self._combined = None

    def update_highlighter(self, index: int, highlighter: Highlighter) -> None:
        self._highlighters[index] = highlighter.copy()
        self._combined = None

    def remove_highlighter(self, index: int) -> None:
        del self._highlighters[index]
        self._combined = None

    def move_highlighter(self, source: int, destination: int) -> None:
        highlighter = self._highlighters.pop(source)
        self._highlighters.insert(destination, highlighter)

    def compile(self) -> None:
        """Compile every rule and the union used to reject non-matching lines."""
        for highlighter in self._highlighters:
            highlighter.compile()
        self._combined = CombinedPatternMatcher(h.expression_pattern() for h in self._highlighters)

    def match_line(self, line: str) -> MatchResult:
        """Evaluate the rules in order; the first one that matches decides."""
        if not self._highlighters:
            return NO_MATCH
        combined = self._combined
        if combined is None:
            self.compile()
            combined = self._combined
        if combined is not None and not combined.may_match(line):
            return NO_MATCH

        for highlighter in self._highlighters:
            matches = highlighter.match_line(line)
            if not matches:
                continue
            if highlighter.highlight_only_match:
                return WordMatch(tuple(matches))
            return LineMatch(matches[0])
        return NO_MATCH

    def to_record(self) -> dict[str, Any]:
        return {
            "version": HIGHLIGHTER_SET_VERSION,
            "name": self._name,
            "id": self._id,
            "highlighters": [h.to_record() for h in self._highlighters],
        }

    @classmethod
    def from_record(cls, data: Mapping[str, Any]) -> HighlighterSet:
        """Build a set from a stored record, keeping its id.

        Records from older versions get defaults for missing properties, records
        from newer versions load whatever fields are known. Rules that fail
        validation are skipped. Raises ValidationError only when the set record
        itself is malformed.
        """
        record = HighlighterSetRecord.model_validate(data)
        if record.version > HIGHLIGHTER_SET_VERSION:
            logger.info(
                "Highlighter set %r has version %d, newer than %d; unknown fields ignored",
                record.name,
                record.version,
                HIGHLIGHTER_SET_VERSION,
            )

        highlighters: list[Highlighter] = []
        for index, rule in enumerate(record.highlighters):
            try:
                # A non-mapping entry fails validation like any other bad rule.
                highlighters.append(Highlighter.from_record(rule))
            except ValidationError as e:
                logger.warning("Skipping highlighter %d of set %r: %s", index, record.name, e)

        set_id = record.id or str(uuid.uuid4())
        result = cls(record.name, set_id)
        result._highlighters = highlighters
        return result

    def save_to_storage(self, settings: MutableMapping[str, Any]) -> None:
        settings[self.PERSISTABLE_NAME] = self.to_record()

    def retrieve_from_storage(self, settings: Mapping[str, Any]) -> None:
        """Replace this set's name, id and rules with the stored ones, if any."""
        data = settings.get(self.PERSISTABLE_NAME)
        if data is None:
            return
        try:
            loaded = HighlighterSet.from_record(data)
        except ValidationError as e:
            logger.warning("Ignoring stored highlighter set: %s", e)
            return
        self._name = loaded._name
        self._id = loaded._id
        self._highlighters = loaded._highlighters
        self._combined = None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HighlighterSet):
            return NotImplemented
        return (self._name, self._id, self._highlighters) == (other._name, other._id, other._highlighters)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"HighlighterSet({self._name!r}, id={self._id!r}, rules={len(self._highlighters)})"
