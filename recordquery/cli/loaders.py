"""Record and descriptor loading for the CLI."""

from __future__ import annotations

import logging
from datetime import date
from pathlib import Path
from typing import Any

import click
import msgspec
import yaml

from recordquery.core.profiles import EntityProfile
from recordquery.core.records import validate_records
from recordquery.exceptions import RecordLoadError
from recordquery.query.filters import (
    DateRange,
    ExactMatch,
    FieldFilter,
    MultiSelect,
    TextContains,
)
from recordquery.query.models import (
    QueryDescriptor,
    descriptor_from_builtins,
    descriptor_from_json,
)
from recordquery.query.sorting import SortDirection, SortSpec

logger = logging.getLogger(__name__)

YAML_SUFFIXES = {".yaml", ".yml"}


def _read_document(path: Path) -> Any:
    try:
        raw = path.read_bytes()
    except OSError as e:
        raise RecordLoadError(f"Cannot read {path}: {e}") from e

    try:
        if path.suffix.lower() in YAML_SUFFIXES:
            return yaml.safe_load(raw)
        return msgspec.json.decode(raw)
    except (yaml.YAMLError, msgspec.DecodeError) as e:
        raise RecordLoadError(f"Cannot parse {path}: {e}") from e


def load_records(path: Path, profile: EntityProfile | None = None) -> list[dict[str, Any]]:
    """Load a record collection from a JSON or YAML file.

    The document is either a list of records or a mapping with a
    ``records`` list. Temporal fields declared by the profile are parsed.

    Raises:
        RecordLoadError: If the file is unreadable or not a list of mappings
        SchemaError: If records do not share the same fields
    """
    data = _read_document(path)
    if isinstance(data, dict) and "records" in data:
        data = data["records"]

    if not isinstance(data, list):
        raise RecordLoadError(f"{path} must contain a list of records")
    for index, item in enumerate(data):
        if not isinstance(item, dict):
            raise RecordLoadError(f"Record {index} in {path} is not a mapping")

    records = validate_records(data)
    if profile is not None:
        records = [profile.coerce(record) for record in records]

    logger.info(f"Loaded {len(records)} records from {path}")
    return records


def load_descriptor(path: Path) -> QueryDescriptor:
    """Load a query descriptor from a JSON or YAML file.

    Raises:
        RecordLoadError: If the file is unreadable or not a valid descriptor
    """
    try:
        if path.suffix.lower() in YAML_SUFFIXES:
            return descriptor_from_builtins(_read_document(path) or {})
        return descriptor_from_json(path.read_bytes())
    except msgspec.ValidationError as e:
        raise RecordLoadError(f"Invalid descriptor in {path}: {e}") from e
    except msgspec.DecodeError as e:
        raise RecordLoadError(f"Cannot parse {path}: {e}") from e
    except OSError as e:
        raise RecordLoadError(f"Cannot read {path}: {e}") from e


def _split_assignment(option: str, text: str) -> tuple[str, str]:
    field, sep, value = text.partition("=")
    if not sep or not field.strip():
        raise click.BadParameter(f"expected FIELD=VALUE, got {text!r}", param_hint=option)
    return field.strip(), value.strip()


def _parse_day(option: str, text: str) -> date | None:
    if not text:
        return None
    try:
        return date.fromisoformat(text)
    except ValueError:
        raise click.BadParameter(f"invalid date {text!r}", param_hint=option) from None


def parse_filters(
    where: tuple[str, ...] = (),
    any_of: tuple[str, ...] = (),
    between: tuple[str, ...] = (),
    contains: tuple[str, ...] = (),
) -> list[FieldFilter]:
    """Turn CLI filter options into field filters.

    ``--where status=Active``, ``--any state=Coahuila,Durango``,
    ``--between updated_at=2024-01-01..2024-01-31`` (either end may be
    empty) and ``--contains id=0001``.
    """
    filters: list[FieldFilter] = []

    for text in where:
        field, value = _split_assignment("--where", text)
        filters.append(ExactMatch(field, value))

    for text in any_of:
        field, value = _split_assignment("--any", text)
        values = frozenset(v.strip() for v in value.split(",") if v.strip())
        filters.append(MultiSelect(field, values))

    for text in between:
        field, value = _split_assignment("--between", text)
        start, sep, end = value.partition("..")
        if not sep:
            raise click.BadParameter(
                f"expected FROM..TO, got {value!r}", param_hint="--between"
            )
        filters.append(
            DateRange(
                field,
                _parse_day("--between", start.strip()),
                _parse_day("--between", end.strip()),
            )
        )

    for text in contains:
        field, value = _split_assignment("--contains", text)
        filters.append(TextContains(field, value))

    return filters


def build_descriptor(
    base: QueryDescriptor | None = None,
    search: str | None = None,
    fields: tuple[str, ...] = (),
    filters: list[FieldFilter] | None = None,
    sort_key: str | None = None,
    descending: bool = False,
    page: int | None = None,
    page_size: int | None = None,
) -> QueryDescriptor:
    """Combine a descriptor file with command-line overrides."""
    descriptor = base or QueryDescriptor()
    changes: dict[str, Any] = {}

    if search is not None:
        changes["search_term"] = search
    if fields:
        changes["search_fields"] = tuple(fields)
    if filters:
        changes["filters"] = tuple(descriptor.filters) + tuple(filters)
    if sort_key:
        direction = SortDirection.DESC if descending else SortDirection.ASC
        changes["sort"] = SortSpec(key=sort_key, direction=direction)
    if page is not None:
        changes["page"] = page
    if page_size is not None:
        changes["page_size"] = page_size

    return descriptor.replace(**changes) if changes else descriptor
