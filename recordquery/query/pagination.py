"""Page slicing."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Page(Generic[T]):
    """One page of a result set."""

    items: list[T]
    page: int
    page_size: int
    total_count: int
    total_pages: int

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def start_index(self) -> int:
        """1-based position of the first item, 0 for an empty page."""
        if not self.items:
            return 0
        return (self.page - 1) * self.page_size + 1

    @property
    def end_index(self) -> int:
        """1-based position of the last item, 0 for an empty page."""
        if not self.items:
            return 0
        return self.start_index + len(self.items) - 1


def total_pages(total_count: int, page_size: int) -> int:
    """Number of pages needed, never less than one."""
    page_size = max(1, page_size)
    return max(1, math.ceil(max(0, total_count) / page_size))


def paginate(records: Sequence[T], page: int, page_size: int) -> Page[T]:
    """Slice a result set into a page.

    Args:
        records: Full filtered and sorted result set
        page: 1-based page number; values below 1 are treated as 1
        page_size: Items per page; values below 1 are treated as 1

    Returns:
        The page. A page past the end has no items but is not an error;
        callers reset to page 1 when the query changes.
    """
    page = max(1, page)
    page_size = max(1, page_size)
    start = (page - 1) * page_size

    return Page(
        items=list(records[start : start + page_size]),
        page=page,
        page_size=page_size,
        total_count=len(records),
        total_pages=total_pages(len(records), page_size),
    )
