"""Match highlighting over the original (non-normalized) text."""

from __future__ import annotations

import html
import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from recordquery.core.records import Record, get_field, to_text
from recordquery.search.normalize import normalize, normalize_with_offsets


@dataclass(frozen=True)
class Segment:
    """A run of text, flagged when it is part of a match."""

    text: str
    matched: bool = False


def _literal_segments(text: str, term: str) -> list[Segment] | None:
    pattern = re.compile(re.escape(term), re.IGNORECASE)
    segments: list[Segment] = []
    position = 0

    for match in pattern.finditer(text):
        if match.start() > position:
            segments.append(Segment(text[position : match.start()]))
        segments.append(Segment(match.group(), matched=True))
        position = match.end()

    if not segments:
        return None

    if position < len(text):
        segments.append(Segment(text[position:]))
    return segments


def _normalized_segments(text: str, term: str) -> list[Segment] | None:
    norm_term = normalize(term)
    if not norm_term:
        return None

    norm_text, offsets = normalize_with_offsets(text)
    index = norm_text.find(norm_term)
    if index == -1:
        return None

    start = offsets[index]
    end = offsets[index + len(norm_term) - 1] + 1

    segments = []
    if start > 0:
        segments.append(Segment(text[:start]))
    segments.append(Segment(text[start:end], matched=True))
    if end < len(text):
        segments.append(Segment(text[end:]))
    return segments


def highlight(original_text: str | None, raw_term: str | None) -> list[Segment]:
    """Split text into matched and unmatched segments for a search term.

    Every case-insensitive literal occurrence of the term is marked. When
    there is none (the match only exists after removing accents or
    punctuation) the first normalized occurrence is mapped back onto the
    original characters and marked instead. Text that cannot be explained is
    returned as a single unmatched segment.

    Args:
        original_text: Text as displayed
        raw_term: Search term as typed

    Returns:
        Segments whose texts concatenate back to ``original_text``
    """
    text = original_text or ""
    term = (raw_term or "").strip()

    if not text:
        return []
    if not term:
        return [Segment(text)]

    return (
        _literal_segments(text, term)
        or _normalized_segments(text, term)
        or [Segment(text)]
    )


def has_match(segments: Sequence[Segment]) -> bool:
    """Check whether any segment is marked."""
    return any(segment.matched for segment in segments)


class Highlighter:
    """Generates highlight segments and markup for records."""

    def __init__(self, highlight_tag: str = "mark"):
        """Initialize highlighter.

        Args:
            highlight_tag: HTML tag wrapped around matched segments
        """
        self.highlight_tag = highlight_tag

    def highlight_text(self, text: str | None, raw_term: str | None) -> list[Segment]:
        return highlight(text, raw_term)

    def highlight_record(
        self,
        record: Record,
        raw_term: str | None,
        fields: Sequence[str],
        getter: Callable[[Record, str], Any] = get_field,
    ) -> dict[str, list[Segment]]:
        """Highlight several fields of a record.

        Returns:
            Mapping of field name to its segments, for every listed field
        """
        return {
            name: highlight(to_text(getter(record, name)), raw_term) for name in fields
        }

    def to_markup(self, segments: Sequence[Segment], tag: str | None = None) -> str:
        """Render segments as escaped HTML with matches wrapped in a tag."""
        if tag is None:
            tag = self.highlight_tag

        parts = []
        for segment in segments:
            escaped = html.escape(segment.text)
            if segment.matched:
                parts.append(f"<{tag}>{escaped}</{tag}>")
            else:
                parts.append(escaped)
        return "".join(parts)
