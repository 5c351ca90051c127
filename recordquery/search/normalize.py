"""Text normalization for accent- and punctuation-insensitive matching.

Text is NFD-decomposed, combining marks are dropped, the result is
lowercased, everything outside ``[a-z0-9]`` and whitespace is removed, and
whitespace runs collapse to one space with the ends trimmed.
"""

import unicodedata


def _keep(char: str) -> bool:
    return ("a" <= char <= "z") or ("0" <= char <= "9")


def normalize_with_offsets(text: str | None) -> tuple[str, list[int]]:
    """Normalize text and remember where each output character came from.

    Args:
        text: Original text

    Returns:
        Tuple of the normalized text and, for each of its characters, the
        index of the originating character in ``text``. Collapsed whitespace
        maps to the first whitespace character of its run.
    """
    if not text:
        return "", []

    chars: list[str] = []
    offsets: list[int] = []
    pending_space: int | None = None

    for index, original in enumerate(text):
        for char in unicodedata.normalize("NFD", original):
            if unicodedata.category(char) == "Mn":
                continue
            for lowered in char.lower():
                if lowered.isspace():
                    if chars and pending_space is None:
                        pending_space = index
                    continue
                if not _keep(lowered):
                    continue
                if pending_space is not None:
                    chars.append(" ")
                    offsets.append(pending_space)
                    pending_space = None
                chars.append(lowered)
                offsets.append(index)

    return "".join(chars), offsets


def normalize(text: str | None) -> str:
    """Normalize text for comparison.

    >>> normalize("  Nuevo León, N.L. ")
    'nuevo leon nl'
    """
    return normalize_with_offsets(text)[0]
