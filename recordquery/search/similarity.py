"""Edit-distance based string similarity."""

from rapidfuzz.distance import Levenshtein


def edit_distance(a: str, b: str) -> int:
    """Levenshtein distance with unit cost insertions, deletions and substitutions."""
    return Levenshtein.distance(a, b)


def similarity(a: str, b: str) -> float:
    """Similarity in ``[0, 1]`` derived from edit distance.

    Computed as ``1 - distance / max(len(a), len(b))``. Two empty strings are
    identical (1.0); an empty string against a non-empty one scores 0.0.
    """
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    if not a or not b:
        return 0.0
    return 1.0 - edit_distance(a, b) / longest
