"""Query descriptor and view result types."""

from __future__ import annotations

from typing import Any

import msgspec

from recordquery.query.filters import FieldFilter
from recordquery.query.sorting import SortSpec


class QueryDescriptor(msgspec.Struct, frozen=True, kw_only=True):
    """One query intent: search, filters, sort and page.

    A new descriptor replaces the previous one on every interaction
    (keystroke, filter toggle, sort click, page change); descriptors are
    never mutated. Fields that do not exist on the records degrade to
    no-ops.
    """

    search_term: str = ""
    search_fields: tuple[str, ...] = ()
    filters: tuple[FieldFilter, ...] = ()
    sort: SortSpec | None = None
    page: int = 1
    page_size: int = 20

    def replace(self, **changes: Any) -> QueryDescriptor:
        """Copy with some attributes changed."""
        return msgspec.structs.replace(self, **changes)


class ViewResult(msgspec.Struct, frozen=True, kw_only=True):
    """Page of records produced for one descriptor.

    ``start_index`` and ``end_index`` are the 1-based positions of the first
    and last item in the whole result, 0 for an empty page.
    """

    items: list[Any]
    total_count: int
    page: int
    total_pages: int
    page_size: int
    start_index: int = 0
    end_index: int = 0

    @property
    def is_empty(self) -> bool:
        return self.total_count == 0


def descriptor_from_builtins(data: dict[str, Any]) -> QueryDescriptor:
    """Convert decoded JSON/YAML data into a descriptor.

    Raises:
        msgspec.ValidationError: If the data does not describe a query
    """
    return msgspec.convert(data, QueryDescriptor, strict=False)


def descriptor_from_json(data: bytes | str) -> QueryDescriptor:
    """Decode a JSON document into a descriptor."""
    return msgspec.json.decode(data, type=QueryDescriptor)
