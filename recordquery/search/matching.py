"""Layered free-text matching.

A term is tried against a field value with progressively more expensive
strategies, stopping at the first one that succeeds:

1. exact: the raw term occurs verbatim (case-sensitive) in the raw value
2. normalized: normalized value equals normalized term
3. prefix: normalized value starts with normalized term
4. suffix: normalized value ends with normalized term
5. substring: normalized value contains normalized term
6. fuzzy-whole: similarity of the whole normalized strings clears the threshold
7. fuzzy-word: similarity of some normalized word (long enough) clears it

Edit distance is only computed when none of the containment checks worked.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Sequence
from enum import Enum
from typing import Any

import msgspec

from recordquery.core.records import Record, get_field, to_text
from recordquery.search.normalize import normalize
from recordquery.search.similarity import similarity

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD = 0.85
DEFAULT_MIN_WORD_LENGTH = 3

_WORD = re.compile(r"\S+")


class MatchStrategy(str, Enum):
    """Strategy that produced a match."""

    EMPTY = "empty"
    EXACT = "exact"
    NORMALIZED = "normalized"
    PREFIX = "prefix"
    SUFFIX = "suffix"
    SUBSTRING = "substring"
    FUZZY_WHOLE = "fuzzy-whole"
    FUZZY_WORD = "fuzzy-word"

    @property
    def is_fuzzy(self) -> bool:
        return self in (MatchStrategy.FUZZY_WHOLE, MatchStrategy.FUZZY_WORD)


class Span(msgspec.Struct, frozen=True):
    """Half-open character range."""

    start: int
    end: int


class MatchResult(msgspec.Struct, frozen=True, kw_only=True):
    """Outcome of matching one term against one field value.

    ``span`` is expressed in the raw value for ``exact`` matches and in the
    normalized value for every other strategy.
    """

    matched: bool
    strategy: MatchStrategy | None = None
    span: Span | None = None
    score: float = 1.0

    def __bool__(self) -> bool:
        return self.matched


NO_MATCH = MatchResult(matched=False, score=0.0)


class MatchEvaluator:
    """Evaluates search terms against field values."""

    def __init__(
        self,
        threshold: float = DEFAULT_THRESHOLD,
        min_word_length: int = DEFAULT_MIN_WORD_LENGTH,
    ):
        """Initialize evaluator.

        Args:
            threshold: Minimum similarity accepted as a fuzzy match
            min_word_length: Shortest word considered by the per-word fallback
        """
        self.threshold = threshold
        self.min_word_length = min_word_length

    def matches_term(self, field_value: Any, raw_term: str | None) -> MatchResult:
        """Match a raw search term against a field value."""
        term = (raw_term or "").strip()
        if not term:
            return MatchResult(matched=True, strategy=MatchStrategy.EMPTY)

        text = to_text(field_value)
        if not text:
            return NO_MATCH

        position = text.find(term)
        if position != -1:
            return MatchResult(
                matched=True,
                strategy=MatchStrategy.EXACT,
                span=Span(position, position + len(term)),
            )

        norm_term = normalize(term)
        norm_text = normalize(text)
        if not norm_term or not norm_text:
            return NO_MATCH

        if norm_text == norm_term:
            return MatchResult(
                matched=True,
                strategy=MatchStrategy.NORMALIZED,
                span=Span(0, len(norm_text)),
            )
        if norm_text.startswith(norm_term):
            return MatchResult(
                matched=True,
                strategy=MatchStrategy.PREFIX,
                span=Span(0, len(norm_term)),
            )
        if norm_text.endswith(norm_term):
            return MatchResult(
                matched=True,
                strategy=MatchStrategy.SUFFIX,
                span=Span(len(norm_text) - len(norm_term), len(norm_text)),
            )
        position = norm_text.find(norm_term)
        if position != -1:
            return MatchResult(
                matched=True,
                strategy=MatchStrategy.SUBSTRING,
                span=Span(position, position + len(norm_term)),
            )

        return self._fuzzy(norm_text, norm_term)

    def _fuzzy(self, norm_text: str, norm_term: str) -> MatchResult:
        score = similarity(norm_text, norm_term)
        if score >= self.threshold:
            return MatchResult(
                matched=True,
                strategy=MatchStrategy.FUZZY_WHOLE,
                span=Span(0, len(norm_text)),
                score=score,
            )

        for word in _WORD.finditer(norm_text):
            if len(word.group()) < self.min_word_length:
                continue
            score = similarity(word.group(), norm_term)
            if score >= self.threshold:
                return MatchResult(
                    matched=True,
                    strategy=MatchStrategy.FUZZY_WORD,
                    span=Span(word.start(), word.end()),
                    score=score,
                )

        return NO_MATCH

    def match_record(
        self,
        record: Record,
        raw_term: str | None,
        fields: Sequence[str],
        getter: Callable[[Record, str], Any] = get_field,
    ) -> tuple[str, MatchResult] | None:
        """Find the first field of a record that matches the term.

        Args:
            record: Record to test
            raw_term: Search term as typed
            fields: Fields to try, in order
            getter: Field accessor (a profile's ``resolve`` for computed fields)

        Returns:
            ``(field, result)`` for the first matching field, or ``None``.
            A blank term matches on the first field (or ``""`` without fields).
        """
        if not (raw_term or "").strip():
            return (fields[0] if fields else "", self.matches_term("", raw_term))

        for name in fields:
            result = self.matches_term(getter(record, name), raw_term)
            if result.matched:
                if result.strategy is not None and result.strategy.is_fuzzy:
                    logger.debug(
                        f"Fuzzy {result.strategy.value} match on {name!r} "
                        f"(score {result.score:.2f})"
                    )
                return (name, result)
        return None

    def record_matches(
        self,
        record: Record,
        raw_term: str | None,
        fields: Sequence[str],
        getter: Callable[[Record, str], Any] = get_field,
    ) -> bool:
        """Check whether any of the fields matches the term."""
        return self.match_record(record, raw_term, fields, getter) is not None


_default_evaluator = MatchEvaluator()


def matches_term(field_value: Any, raw_term: str | None) -> MatchResult:
    """Match with the default threshold and word length."""
    return _default_evaluator.matches_term(field_value, raw_term)
