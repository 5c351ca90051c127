"""Free-text search: normalization, similarity, matching and highlighting."""

from .highlighting import Highlighter, Segment, has_match, highlight
from .history import RecentSearch, SearchHistory
from .matching import (
    DEFAULT_MIN_WORD_LENGTH,
    DEFAULT_THRESHOLD,
    NO_MATCH,
    MatchEvaluator,
    MatchResult,
    MatchStrategy,
    Span,
    matches_term,
)
from .normalize import normalize, normalize_with_offsets
from .similarity import edit_distance, similarity

__all__ = [
    "DEFAULT_MIN_WORD_LENGTH",
    "DEFAULT_THRESHOLD",
    "NO_MATCH",
    "Highlighter",
    "MatchEvaluator",
    "MatchResult",
    "MatchStrategy",
    "RecentSearch",
    "SearchHistory",
    "Segment",
    "Span",
    "edit_distance",
    "has_match",
    "highlight",
    "matches_term",
    "normalize",
    "normalize_with_offsets",
    "similarity",
]
