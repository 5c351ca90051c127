"""Named-field access over heterogeneous record shapes.

Records are plain mappings (decoded JSON/YAML rows) or attribute objects
(dataclasses, msgspec structs). Every query stage goes through ``get_field``
so an unknown field is always reported as ``MISSING`` and never raises.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from datetime import date, datetime, time
from typing import Any

from recordquery.exceptions import SchemaError

logger = logging.getLogger(__name__)

Record = Mapping[str, Any] | Any


class _Missing:
    """Sentinel for a field the record does not have."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


def _lookup(obj: Any, name: str) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(name, MISSING)
    if name.startswith("_"):
        return MISSING
    return getattr(obj, name, MISSING)


def get_field(record: Record, name: str) -> Any:
    """Get a field value from a record.

    Dotted names (``driver.name``) walk nested mappings or objects when the
    record has no field with the literal dotted name.

    Returns:
        The value, or ``MISSING`` when the record has no such field.
    """
    if not name:
        return MISSING

    value = _lookup(record, name)
    if value is not MISSING or "." not in name:
        return value

    current = record
    for part in name.split("."):
        current = _lookup(current, part)
        if current is MISSING:
            return MISSING
    return current


def field_names(record: Record) -> list[str]:
    """List top-level field names of a record."""
    if isinstance(record, Mapping):
        return [str(k) for k in record.keys()]

    struct_fields = getattr(record, "__struct_fields__", None)
    if struct_fields is not None:
        return list(struct_fields)

    dataclass_fields = getattr(record, "__dataclass_fields__", None)
    if dataclass_fields is not None:
        return list(dataclass_fields)

    return [k for k in vars(record) if not k.startswith("_")]


def validate_records(records: Iterable[Record]) -> list[Record]:
    """Check that every record shares the first record's field set.

    Args:
        records: Record collection about to be queried

    Returns:
        The records as a list

    Raises:
        SchemaError: If any record has missing or extra fields
    """
    items = list(records)
    if not items:
        return items

    expected = set(field_names(items[0]))
    for index, record in enumerate(items[1:], start=1):
        actual = set(field_names(record))
        if actual != expected:
            raise SchemaError(index, expected - actual, actual - expected)

    logger.debug(f"Validated {len(items)} records with {len(expected)} fields")
    return items


def parse_datetime(value: Any) -> datetime | None:
    """Interpret a field value as a naive local ``datetime``.

    Accepts ``datetime``, ``date`` (local midnight) and ISO-8601 strings.
    Aware datetimes are converted to local time before dropping the zone.
    Anything else gives ``None``.
    """
    if value is None or value is MISSING:
        return None

    if isinstance(value, datetime):
        result = value
    elif isinstance(value, date):
        result = datetime.combine(value, time.min)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            result = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None

    if result.tzinfo is not None:
        result = result.astimezone().replace(tzinfo=None)
    return result


def to_text(value: Any) -> str:
    """Render a field value as searchable text."""
    if value is None or value is MISSING:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime | date):
        return value.isoformat()
    if isinstance(value, bytes | bytearray):
        return bytes(value).decode("utf-8", errors="replace")
    if isinstance(value, Sequence | set | frozenset):
        return " ".join(to_text(v) for v in value)
    if hasattr(value, "value") and not callable(value.value):
        return str(value.value)
    return str(value)
