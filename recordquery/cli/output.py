"""Rich rendering of query views."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from rich.console import Console
from rich.table import Table
from rich.text import Text

from recordquery.query.engine import QueryEngine
from recordquery.query.export import format_value
from recordquery.query.models import QueryDescriptor, ViewResult
from recordquery.search.highlighting import Segment

MATCH_STYLE = "bold black on yellow"


def segments_to_text(segments: Sequence[Segment], style: str = MATCH_STYLE) -> Text:
    """Build a Rich ``Text`` with matched segments styled."""
    text = Text()
    for segment in segments:
        text.append(segment.text, style=style if segment.matched else None)
    return text


def render_view(
    console: Console,
    engine: QueryEngine,
    view: ViewResult,
    descriptor: QueryDescriptor,
    columns: Sequence[tuple[str, str]],
    highlight: bool = True,
    title: str | None = None,
) -> None:
    """Print a page of results as a table.

    Search fields are highlighted when the descriptor has a search term.
    """
    table = Table(title=title, show_lines=False)
    for _, label in columns:
        table.add_column(label)

    highlighted: set[str] = set()
    if highlight and descriptor.search_term.strip() and view.items:
        highlighted = set(engine.search_fields(view.items, descriptor))

    date_format = engine.config.date_format
    for record in view.items:
        cells: list[Any] = []
        for field, _ in columns:
            value = format_value(engine.get(record, field), date_format)
            if field in highlighted:
                segments = engine.highlighter.highlight_text(
                    value, descriptor.search_term
                )
                cells.append(segments_to_text(segments))
            else:
                cells.append(value)
        table.add_row(*cells)

    console.print(table)

    if view.is_empty:
        console.print("[yellow]No records match the current query[/yellow]")
    else:
        position = f"{view.start_index}-{view.end_index}" if view.items else "none"
        console.print(
            f"Page {view.page} of {view.total_pages} · "
            f"showing {position} of {view.total_count} records"
        )
