"""Structured field filters.

Filters are combined with AND; a ``MultiSelect`` is an OR over its own
values. A filter with nothing selected is a no-op.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from datetime import date, datetime, time
from typing import Any, Union

import msgspec

from recordquery.core.records import MISSING, Record, get_field, parse_datetime, to_text
from recordquery.search.normalize import normalize

logger = logging.getLogger(__name__)

Getter = Callable[[Record, str], Any]


class ExactMatch(msgspec.Struct, frozen=True, tag="exact", tag_field="kind"):
    """Field equals a single value. ``value=None`` means no constraint."""

    field: str
    value: Any = None

    @property
    def is_empty(self) -> bool:
        return self.value is None or self.value == ""


class MultiSelect(msgspec.Struct, frozen=True, tag="multi", tag_field="kind"):
    """Field is one of several values. No values means no constraint."""

    field: str
    values: frozenset[Any] = msgspec.field(default_factory=frozenset)

    @property
    def is_empty(self) -> bool:
        return not self.values


class DateRange(msgspec.Struct, frozen=True, tag="date_range", tag_field="kind"):
    """Field falls on or between two calendar days (both inclusive)."""

    field: str
    start: date | None = msgspec.field(default=None, name="from")
    end: date | None = msgspec.field(default=None, name="to")

    @property
    def is_empty(self) -> bool:
        return self.start is None and self.end is None

    def bounds(self) -> tuple[datetime | None, datetime | None]:
        """Get the local instants delimiting the range."""
        lower = upper = None
        if self.start is not None:
            lower = datetime.combine(_as_date(self.start), time.min)
        if self.end is not None:
            upper = datetime.combine(_as_date(self.end), time.max)
        return lower, upper


class TextContains(msgspec.Struct, frozen=True, tag="contains", tag_field="kind"):
    """Field contains a term, ignoring case, accents and punctuation."""

    field: str
    term: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.term.strip()


FieldFilter = Union[ExactMatch, MultiSelect, DateRange, TextContains]


def _as_date(value: date) -> date:
    return value.date() if isinstance(value, datetime) else value


def _equals(actual: Any, expected: Any) -> bool:
    if actual == expected:
        return True
    if hasattr(actual, "value") and actual.value == expected:
        return True
    if isinstance(expected, str) and not isinstance(actual, str):
        return to_text(actual) == expected
    return False


def _is_member(actual: Any, values: Iterable[Any]) -> bool:
    try:
        if actual in values:
            return True
    except TypeError:
        pass
    return any(_equals(actual, value) for value in values)


def filter_matches(record: Record, flt: FieldFilter, getter: Getter = get_field) -> bool:
    """Check one record against one filter."""
    if getattr(flt, "is_empty", False):
        return True

    actual = getter(record, getattr(flt, "field", ""))

    if isinstance(flt, ExactMatch):
        return actual is not MISSING and _equals(actual, flt.value)

    if isinstance(flt, MultiSelect):
        return actual is not MISSING and _is_member(actual, flt.values)

    if isinstance(flt, DateRange):
        instant = parse_datetime(actual)
        if instant is None:
            return False
        lower, upper = flt.bounds()
        if lower is not None and instant < lower:
            return False
        if upper is not None and instant > upper:
            return False
        return True

    if isinstance(flt, TextContains):
        if actual is MISSING:
            return False
        text = to_text(actual)
        term = normalize(flt.term)
        if not term:
            return flt.term.strip().casefold() in text.casefold()
        return term in normalize(text)

    logger.warning(f"Ignoring unsupported filter: {flt!r}")
    return True


def apply_filters(
    records: Iterable[Record],
    filters: Sequence[FieldFilter],
    getter: Getter = get_field,
) -> list[Record]:
    """Keep records that pass every filter, preserving input order."""
    active = [flt for flt in filters if not getattr(flt, "is_empty", False)]
    if not active:
        return list(records)

    return [
        record
        for record in records
        if all(filter_matches(record, flt, getter) for flt in active)
    ]
