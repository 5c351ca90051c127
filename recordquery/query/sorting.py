"""Stable single-key sorting with a tri-state column toggle."""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Sequence
from datetime import date, datetime
from enum import Enum
from numbers import Number
from typing import Any

import msgspec

from recordquery.core.records import MISSING, Record, get_field, parse_datetime, to_text

Getter = Callable[[Record, str], Any]

ISO_DATE = re.compile(r"\d{4}-\d{2}-\d{2}")


class SortDirection(str, Enum):
    """Sort direction; ``NONE`` keeps the incoming order."""

    ASC = "asc"
    DESC = "desc"
    NONE = "none"


class SortSpec(msgspec.Struct, frozen=True):
    """Active sort column and direction."""

    key: str | None = None
    direction: SortDirection = SortDirection.ASC

    @property
    def is_active(self) -> bool:
        return bool(self.key) and self.direction != SortDirection.NONE

    def toggle(self, key: str) -> SortSpec:
        """Advance the sort after a click on a column header.

        Clicking the active column cycles ascending, descending, unsorted and
        back to ascending. Clicking any other column starts ascending on it.
        """
        if key != self.key or not self.is_active:
            return SortSpec(key=key, direction=SortDirection.ASC)
        if self.direction == SortDirection.ASC:
            return SortSpec(key=key, direction=SortDirection.DESC)
        return SortSpec(key=None, direction=SortDirection.NONE)


UNSORTED = SortSpec(key=None, direction=SortDirection.NONE)


def looks_temporal(values: Sequence[Any]) -> bool:
    """Check whether present values are all instants or ISO-8601 date strings."""
    strings = [value for value in values if isinstance(value, str)]
    if not strings:
        return False
    for value in values:
        if isinstance(value, datetime | date):
            continue
        if not isinstance(value, str) or not ISO_DATE.match(value.strip()):
            return False
        if parse_datetime(value) is None:
            return False
    return True


def sort_value(value: Any, temporal: bool = False) -> tuple[int, Any]:
    """Build a comparison key that never mixes incomparable types.

    Values are grouped by family (numbers, instants, text, anything else)
    and compared within the family by their natural ordering.
    """
    if temporal or isinstance(value, datetime | date):
        instant = parse_datetime(value)
        if instant is not None:
            return (1, instant)
    if isinstance(value, Enum):
        return sort_value(value.value, temporal)
    if isinstance(value, Number) and not isinstance(value, complex):
        return (0, value)
    if isinstance(value, str):
        return (2, value)
    return (3, to_text(value))


def apply_sort(
    records: Iterable[Record],
    key: str | None,
    direction: SortDirection | str,
    getter: Getter = get_field,
    temporal: bool | None = None,
) -> list[Record]:
    """Sort records by one field.

    Records lacking the field (or holding ``None``) keep their relative
    order after all others in both directions. Unsorted direction, an empty
    key, or a key no record has returns the input order.

    Args:
        records: Records in filter-stage order
        key: Field to sort on
        direction: Sort direction
        getter: Field accessor (a profile's ``resolve`` for computed fields)
        temporal: Parse string values as timestamps; ``None`` decides from
            the values, treating the key as temporal when every present
            value is an instant or an ISO-8601 date string

    Returns:
        New list; equal keys keep their input order
    """
    items = list(records)
    try:
        direction = SortDirection(direction)
    except ValueError:
        return items
    if not key or direction == SortDirection.NONE:
        return items

    present = []
    absent = []
    for record in items:
        value = getter(record, key)
        if value is MISSING or value is None:
            absent.append(record)
        else:
            present.append((value, record))

    if not present:
        return items

    if temporal is None:
        temporal = looks_temporal([value for value, _ in present])
    keyed = [(sort_value(value, temporal), record) for value, record in present]
    keyed.sort(key=lambda pair: pair[0], reverse=direction == SortDirection.DESC)
    return [record for _, record in keyed] + absent
