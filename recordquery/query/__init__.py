"""Structured query stages and the engine that chains them."""

from .engine import QueryEngine, run_query
from .export import (
    ExportColumn,
    ExportScope,
    as_columns,
    export_filename,
    format_value,
    to_delimited,
)
from .filters import (
    DateRange,
    ExactMatch,
    FieldFilter,
    MultiSelect,
    TextContains,
    apply_filters,
    filter_matches,
)
from .models import (
    QueryDescriptor,
    ViewResult,
    descriptor_from_builtins,
    descriptor_from_json,
)
from .pagination import Page, paginate, total_pages
from .sorting import UNSORTED, SortDirection, SortSpec, apply_sort, sort_value

__all__ = [
    "UNSORTED",
    "DateRange",
    "ExactMatch",
    "ExportColumn",
    "ExportScope",
    "FieldFilter",
    "MultiSelect",
    "Page",
    "QueryDescriptor",
    "QueryEngine",
    "SortDirection",
    "SortSpec",
    "TextContains",
    "ViewResult",
    "apply_filters",
    "apply_sort",
    "as_columns",
    "descriptor_from_builtins",
    "descriptor_from_json",
    "export_filename",
    "filter_matches",
    "format_value",
    "paginate",
    "run_query",
    "sort_value",
    "to_delimited",
    "total_pages",
]
