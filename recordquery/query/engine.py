"""Query pipeline: filter, search, sort, paginate, export.

The engine is stateless. Every call takes a record snapshot and a
descriptor and returns fresh results, so calls may interleave freely;
discarding results of superseded descriptors is the caller's job (see
``recordquery.session``).
"""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from typing import Any

from recordquery.config import EngineConfig
from recordquery.core.profiles import EntityProfile
from recordquery.core.records import Record, field_names, get_field
from recordquery.query.export import ColumnLike, ExportScope, to_delimited
from recordquery.query.filters import FieldFilter, apply_filters
from recordquery.query.models import QueryDescriptor, ViewResult
from recordquery.query.pagination import paginate
from recordquery.query.sorting import apply_sort
from recordquery.search.highlighting import Highlighter, Segment
from recordquery.search.matching import MatchEvaluator

logger = logging.getLogger(__name__)


class QueryEngine:
    """Runs query descriptors against in-memory record collections."""

    def __init__(
        self,
        config: EngineConfig | None = None,
        profile: EntityProfile | None = None,
    ):
        """Initialize engine.

        Args:
            config: Engine settings (defaults when omitted)
            profile: Field mapping for the records being queried; provides
                computed fields, default search fields, temporal fields and
                export labels
        """
        self.config = config or EngineConfig()
        self.profile = profile
        self.evaluator = MatchEvaluator(
            threshold=self.config.fuzzy_threshold,
            min_word_length=self.config.min_word_length,
        )
        self.highlighter = Highlighter()

    def get(self, record: Record, name: str) -> Any:
        """Read a field, resolving computed fields through the profile."""
        if self.profile is not None:
            return self.profile.resolve(record, name)
        return get_field(record, name)

    def search_fields(
        self, records: Sequence[Record], descriptor: QueryDescriptor
    ) -> list[str]:
        """Fields the free-text search looks at.

        Explicit descriptor fields win, then the profile's searchable
        fields, then every field of the first record.
        """
        if descriptor.search_fields:
            return list(descriptor.search_fields)
        if self.profile is not None and self.profile.searchable_fields():
            return self.profile.searchable_fields()
        if records:
            return field_names(records[0])
        return []

    def search(
        self, records: Sequence[Record], term: str, fields: Sequence[str]
    ) -> list[Record]:
        """Keep records where any of the fields matches the term."""
        if not term.strip():
            return list(records)
        return [
            record
            for record in records
            if self.evaluator.record_matches(record, term, fields, self.get)
        ]

    def select(
        self, records: Sequence[Record], descriptor: QueryDescriptor
    ) -> list[Record]:
        """Filter, search and sort without paginating.

        With a profile, filters on fields it marks as not filterable and
        sorts on fields it marks as not sortable are ignored.
        """
        filtered = apply_filters(records, self._usable_filters(descriptor), self.get)
        fields = self.search_fields(records, descriptor)
        matched = self.search(filtered, descriptor.search_term, fields)

        sort = descriptor.sort
        if sort is None or not sort.is_active or not self._sortable(sort.key):
            return matched

        temporal = None
        if self.profile is not None and self.profile.is_temporal(sort.key):
            temporal = True
        return apply_sort(matched, sort.key, sort.direction, self.get, temporal)

    def run(self, records: Sequence[Record], descriptor: QueryDescriptor) -> ViewResult:
        """Produce the requested page of results."""
        started = time.perf_counter()
        selected = self.select(records, descriptor)
        page = paginate(selected, descriptor.page, self._page_size(descriptor))

        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.debug(
            f"Query matched {page.total_count}/{len(records)} records, "
            f"page {page.page}/{page.total_pages} in {elapsed_ms:.1f}ms"
        )

        return ViewResult(
            items=page.items,
            total_count=page.total_count,
            page=page.page,
            total_pages=page.total_pages,
            page_size=page.page_size,
            start_index=page.start_index,
            end_index=page.end_index,
        )

    def export(
        self,
        records: Sequence[Record],
        descriptor: QueryDescriptor,
        scope: ExportScope | str = ExportScope.PAGE,
        columns: Sequence[ColumnLike] | None = None,
        delimiter: str | None = None,
    ) -> str:
        """Export the current page or the whole result set as delimited text.

        Args:
            records: Record collection
            descriptor: Query to export
            scope: ``page`` for the descriptor's page, ``all`` for every match
            columns: Columns to write (profile columns, else record fields)
            delimiter: Cell separator (configured default when omitted)
        """
        rows = self.export_rows(records, descriptor, scope)
        if columns is None:
            columns = self.export_columns(records)
        return self.write_rows(rows, columns, delimiter)

    def export_rows(
        self,
        records: Sequence[Record],
        descriptor: QueryDescriptor,
        scope: ExportScope | str = ExportScope.PAGE,
    ) -> list[Record]:
        """Pick the records an export of the given scope covers."""
        if ExportScope(scope) == ExportScope.ALL:
            rows = self.select(records, descriptor)
        else:
            rows = self.run(records, descriptor).items
        logger.info(f"Exporting {len(rows)} records ({ExportScope(scope).value})")
        return rows

    def export_columns(self, records: Sequence[Record]) -> list[ColumnLike]:
        """Profile columns, else the fields of the first record."""
        if self.profile is not None:
            return list(self.profile.export_columns())
        if records:
            return list(field_names(records[0]))
        return []

    def write_rows(
        self,
        rows: Sequence[Record],
        columns: Sequence[ColumnLike],
        delimiter: str | None = None,
    ) -> str:
        """Serialize already selected rows with the configured formatting."""
        return to_delimited(
            rows,
            columns,
            delimiter=delimiter or self.config.export_delimiter,
            getter=self.get,
            date_format=self.config.date_format,
        )

    def highlight(
        self,
        record: Record,
        descriptor: QueryDescriptor,
        fields: Sequence[str] | None = None,
    ) -> dict[str, list[Segment]]:
        """Highlight the descriptor's search term in a record's fields."""
        if fields is None:
            fields = self.search_fields([record], descriptor)
        return self.highlighter.highlight_record(
            record, descriptor.search_term, fields, self.get
        )

    def _usable_filters(self, descriptor: QueryDescriptor) -> list[FieldFilter]:
        if self.profile is None:
            return list(descriptor.filters)
        usable = []
        for flt in descriptor.filters:
            spec = self.profile.get(flt.field)
            if spec is not None and not spec.filterable:
                logger.debug(f"Ignoring filter on {flt.field}: not filterable")
                continue
            usable.append(flt)
        return usable

    def _sortable(self, key: str | None) -> bool:
        if self.profile is None or key is None:
            return True
        spec = self.profile.get(key)
        if spec is not None and not spec.sortable:
            logger.debug(f"Ignoring sort on {key}: not sortable")
            return False
        return True

    def _page_size(self, descriptor: QueryDescriptor) -> int:
        if descriptor.page_size >= 1:
            return descriptor.page_size
        return self.config.default_page_size


def run_query(
    records: Sequence[Record],
    descriptor: QueryDescriptor,
    profile: EntityProfile | None = None,
) -> ViewResult:
    """Run a descriptor with default settings."""
    return QueryEngine(profile=profile).run(records, descriptor)

