"""Delimited-text export.

Serializes exactly the records it is handed; choosing between the current
page and the full result set is the caller's decision.
"""

from __future__ import annotations

import csv
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from io import StringIO
from typing import Any

from recordquery.core.records import MISSING, Record, get_field


class ExportScope(str, Enum):
    """Which slice of a query result to export."""

    PAGE = "page"
    ALL = "all"


@dataclass(frozen=True)
class ExportColumn:
    """One exported column."""

    field: str
    label: str
    formatter: Callable[[Any], str] | None = None


ColumnLike = ExportColumn | tuple[str, str] | str


def as_columns(fields: Iterable[ColumnLike]) -> list[ExportColumn]:
    """Accept field names, ``(field, label)`` pairs or columns."""
    columns = []
    for item in fields:
        if isinstance(item, ExportColumn):
            columns.append(item)
        elif isinstance(item, str):
            columns.append(ExportColumn(item, item))
        else:
            name, label = item
            columns.append(ExportColumn(name, label))
    return columns


def format_value(value: Any, date_format: str = "%Y-%m-%d") -> str:
    """Render one value as cell text."""
    if value is None or value is MISSING:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime | date):
        return value.strftime(date_format)
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, list | tuple | set | frozenset):
        return "; ".join(format_value(v, date_format) for v in value)
    return str(value)


def to_delimited(
    records: Iterable[Record],
    fields: Sequence[ColumnLike],
    delimiter: str = ",",
    getter: Callable[[Record, str], Any] = get_field,
    date_format: str = "%Y-%m-%d",
) -> str:
    """Serialize records as delimited text.

    Cells holding the delimiter, a double quote or a line break are wrapped
    in double quotes with inner quotes doubled.

    Args:
        records: Records to write, in order
        fields: Columns to write
        delimiter: Cell separator (``","`` for CSV, ``"\\t"`` for TSV)
        getter: Field accessor (a profile's ``resolve`` for computed fields)
        date_format: ``strftime`` format for dates

    Returns:
        Header row plus one row per record, ``\\n`` terminated
    """
    columns = as_columns(fields)

    output = StringIO()
    writer = csv.writer(
        output,
        delimiter=delimiter,
        quotechar='"',
        quoting=csv.QUOTE_MINIMAL,
        lineterminator="\n",
    )

    writer.writerow([column.label for column in columns])

    for record in records:
        row = []
        for column in columns:
            value = getter(record, column.field)
            if column.formatter is not None and value is not MISSING:
                row.append(column.formatter(value))
            else:
                row.append(format_value(value, date_format))
        writer.writerow(row)

    return output.getvalue()


def export_filename(prefix: str, delimiter: str = ",", now: datetime | None = None) -> str:
    """Suggest a download name such as ``drivers_1718000000000.csv``."""
    now = now or datetime.now()
    extension = "tsv" if delimiter == "\t" else "csv"
    return f"{prefix}_{int(now.timestamp() * 1000)}.{extension}"
