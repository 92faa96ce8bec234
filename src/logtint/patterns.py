"""Compiled pattern matchers for highlighting rules."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from logtint.models import ExpressionPattern

logger = logging.getLogger(__name__)

# Backreferences and conditionals refer to groups by number or name, which
# breaks once patterns are merged into a single alternation.
_GROUP_REFERENCE_RE = re.compile(r"\\[1-9]|\(\?P=|\(\?\(|\\g<")


def expression_source(expression: ExpressionPattern) -> str:
    """Regex source for a pattern; literal patterns are escaped."""
    return expression.pattern if expression.use_regex else re.escape(expression.pattern)


def compile_expression(expression: ExpressionPattern) -> re.Pattern[str] | None:
    """Compile a pattern, returning None when it is empty or not a valid regex."""
    if not expression.pattern:
        return None
    flags = re.IGNORECASE if expression.ignore_case else 0
    try:
        return re.compile(expression_source(expression), flags)
    except re.error as e:
        logger.debug("Invalid highlighter pattern %r: %s", expression.pattern, e)
        return None


class PatternMatcher:
    """One compiled pattern exposing the spans it matches in a line."""

    def __init__(self, expression: ExpressionPattern) -> None:
        self._expression = expression
        self._regex = compile_expression(expression)

    @property
    def expression(self) -> ExpressionPattern:
        return self._expression

    @property
    def is_valid(self) -> bool:
        return self._regex is not None

    def search(self, line: str) -> bool:
        """Whether the pattern occurs anywhere in the line."""
        return self._regex is not None and self._regex.search(line) is not None

    def spans(self, line: str) -> Iterator[tuple[int, int, str]]:
        """Yield (start, end, text) for every non-empty match in the line.

        When the pattern has capture groups, each participating group is
        yielded instead of the whole match.
        """
        regex = self._regex
        if regex is None:
            return
        groups = range(1, regex.groups + 1) if regex.groups else (0,)
        for match in regex.finditer(line):
            for group in groups:
                start, end = match.span(group)
                if start < end:
                    yield start, end, line[start:end]


class CombinedPatternMatcher:
    """Union of several patterns, used to reject lines that no rule can match.

    ``may_match`` returning True only means a full evaluation is needed.
    """

    def __init__(self, expressions: Iterable[ExpressionPattern]) -> None:
        sources: list[str] = []
        self._regex: re.Pattern[str] | None = None
        self._can_reject = True

        for expression in expressions:
            if compile_expression(expression) is None:
                continue
            source = expression_source(expression)
            if expression.use_regex and _GROUP_REFERENCE_RE.search(source):
                self._can_reject = False
                return
            sources.append(f"(?i:{source})" if expression.ignore_case else f"(?:{source})")

        if not sources:
            return
        try:
            self._regex = re.compile("|".join(sources))
        except re.error as e:
            logger.debug("Cannot combine %d patterns, fast rejection disabled: %s", len(sources), e)
            self._can_reject = False

    @property
    def can_reject(self) -> bool:
        return self._can_reject

    def may_match(self, line: str) -> bool:
        if not self._can_reject:
            return True
        # A rejecting matcher without a regex has no valid pattern at all.
        return self._regex is not None and self._regex.search(line) is not None
