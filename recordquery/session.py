"""Caller-side query state for one list screen.

A session owns the current descriptor and replaces it on every
interaction. Changing the search, filters, sort or page size resets to
page 1.

Each submitted descriptor gets a sequence number. A result is accepted only
if it belongs to the latest submission.
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Sequence
from typing import Any

from recordquery.config import EngineConfig
from recordquery.query.filters import FieldFilter, MultiSelect
from recordquery.query.models import QueryDescriptor, ViewResult
from recordquery.query.sorting import UNSORTED, SortSpec

logger = logging.getLogger(__name__)


class QuerySession:
    """Builds successive query descriptors for one screen."""

    def __init__(
        self,
        config: EngineConfig | None = None,
        search_fields: Sequence[str] = (),
        filters: Sequence[FieldFilter] = (),
        sort: SortSpec | None = None,
    ):
        """Initialize session.

        Args:
            config: Engine settings, used for the default page size
            search_fields: Fields the free-text search covers
            filters: Initial filters (e.g. a default status selection)
            sort: Initial sort
        """
        self.config = config or EngineConfig()
        self._initial_filters = tuple(filters)
        self.descriptor = QueryDescriptor(
            search_fields=tuple(search_fields),
            filters=self._initial_filters,
            sort=sort,
            page=1,
            page_size=self.config.default_page_size,
        )
        self._counter = itertools.count(1)
        self._latest_seq = 0
        self.view: ViewResult | None = None

    def _update(self, reset_page: bool = True, **changes: Any) -> QueryDescriptor:
        if reset_page:
            changes["page"] = 1
        self.descriptor = self.descriptor.replace(**changes)
        return self.descriptor

    @property
    def sort(self) -> SortSpec:
        return self.descriptor.sort or UNSORTED

    def set_search(self, term: str) -> QueryDescriptor:
        """Change the free-text search term."""
        return self._update(search_term=term)

    def get_filter(self, field: str) -> FieldFilter | None:
        """Get the active filter for a field."""
        for flt in self.descriptor.filters:
            if flt.field == field:
                return flt
        return None

    def set_filter(self, flt: FieldFilter) -> QueryDescriptor:
        """Add a filter, replacing any filter on the same field."""
        others = tuple(f for f in self.descriptor.filters if f.field != flt.field)
        return self._update(filters=others + (flt,))

    def remove_filter(self, field: str) -> QueryDescriptor:
        """Drop the filter on a field."""
        remaining = tuple(f for f in self.descriptor.filters if f.field != field)
        return self._update(filters=remaining)

    def toggle_value(self, field: str, value: Any) -> QueryDescriptor:
        """Toggle one option of a multi-select filter."""
        current = self.get_filter(field)
        values = set(current.values) if isinstance(current, MultiSelect) else set()
        values.symmetric_difference_update({value})
        return self.set_filter(MultiSelect(field, frozenset(values)))

    def clear_filters(self) -> QueryDescriptor:
        """Clear the search and restore the initial filters."""
        return self._update(search_term="", filters=self._initial_filters)

    def toggle_sort(self, key: str) -> QueryDescriptor:
        """Handle a click on a sortable column header."""
        return self._update(sort=self.sort.toggle(key))

    def set_page(self, page: int) -> QueryDescriptor:
        """Jump to a page, clamped to the last known page count."""
        page = max(1, page)
        if self.view is not None:
            page = min(page, self.view.total_pages)
        return self._update(reset_page=False, page=page)

    def next_page(self) -> QueryDescriptor:
        return self.set_page(self.descriptor.page + 1)

    def previous_page(self) -> QueryDescriptor:
        return self.set_page(self.descriptor.page - 1)

    def set_page_size(self, page_size: int) -> QueryDescriptor:
        """Change the page size.

        Sizes below one, or missing from the configured page size options,
        fall back to the default. An empty options list allows any size.
        """
        options = self.config.page_size_options
        if page_size < 1 or (options and page_size not in options):
            logger.debug(f"Page size {page_size} not offered, using default")
            page_size = self.config.default_page_size
        return self._update(page_size=page_size)

    def submit(self) -> tuple[int, QueryDescriptor]:
        """Hand the current descriptor to the engine.

        Returns:
            Sequence number to pass back to ``accept`` and the descriptor
        """
        seq = next(self._counter)
        self._latest_seq = seq
        return seq, self.descriptor

    def accept(self, seq: int, view: ViewResult) -> bool:
        """Record a result if it answers the latest submission.

        Returns:
            True if the view was kept, False if it was stale
        """
        if seq != self._latest_seq:
            logger.debug(f"Discarding stale result {seq} (latest {self._latest_seq})")
            return False
        self.view = view
        return True

    @property
    def latest(self) -> int:
        """Sequence number of the most recent submission."""
        return self._latest_seq
