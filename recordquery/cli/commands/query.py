"""Query and export commands."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import click
import msgspec
from rich.markup import escape

from recordquery.cli.loaders import (
    build_descriptor,
    load_descriptor,
    load_records,
    parse_filters,
)
from recordquery.cli.output import render_view
from recordquery.core.profiles import PROFILES, get_profile
from recordquery.core.records import field_names
from recordquery.query.engine import QueryEngine
from recordquery.query.export import ExportScope, export_filename
from recordquery.search.history import SearchHistory


def query_options(func: Callable) -> Callable:
    """Attach the options shared by ``query`` and ``export``."""
    options = [
        click.argument(
            "records_file", type=click.Path(exists=True, dir_okay=False, path_type=Path)
        ),
        click.option(
            "--profile",
            "-p",
            type=click.Choice(sorted(PROFILES)),
            help="Entity profile describing the records",
        ),
        click.option("--search", "-s", help="Free-text search term"),
        click.option(
            "--field", "-f", "fields", multiple=True, help="Field to search (repeatable)"
        ),
        click.option("--where", multiple=True, help="Exact match: FIELD=VALUE"),
        click.option(
            "--any", "any_of", multiple=True, help="Any of several values: FIELD=V1,V2"
        ),
        click.option(
            "--between", multiple=True, help="Date range: FIELD=YYYY-MM-DD..YYYY-MM-DD"
        ),
        click.option("--contains", multiple=True, help="Substring: FIELD=TERM"),
        click.option("--sort", "sort_key", help="Field to sort by"),
        click.option("--desc", is_flag=True, help="Sort descending"),
        click.option("--page", type=int, help="Page number (1-based)"),
        click.option("--page-size", type=int, help="Records per page"),
        click.option(
            "--descriptor",
            type=click.Path(exists=True, dir_okay=False, path_type=Path),
            help="JSON or YAML query descriptor to start from",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _prepare(ctx: click.Context, kwargs: dict):
    config = ctx.obj.config
    profile = get_profile(kwargs["profile"]) if kwargs["profile"] else None
    records = load_records(kwargs["records_file"], profile)

    base = load_descriptor(kwargs["descriptor"]) if kwargs["descriptor"] else None
    filters = parse_filters(
        kwargs["where"], kwargs["any_of"], kwargs["between"], kwargs["contains"]
    )
    page_size = kwargs["page_size"]
    if page_size is None and base is None:
        page_size = config.default_page_size

    descriptor = build_descriptor(
        base,
        search=kwargs["search"],
        fields=kwargs["fields"],
        filters=filters,
        sort_key=kwargs["sort_key"],
        descending=kwargs["desc"],
        page=kwargs["page"],
        page_size=page_size,
    )

    if descriptor.search_term.strip():
        scope = profile.name if profile else "default"
        SearchHistory(
            ctx.obj.history_dir,
            scope=scope,
            max_entries=config.history_size,
            min_length=config.history_min_length,
        ).add(descriptor.search_term)

    return QueryEngine(config, profile), records, descriptor


@click.command()
@query_options
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json", "csv"]),
    default="table",
    help="Output format",
)
@click.option("--no-highlight", is_flag=True, help="Disable match highlighting")
@click.pass_context
def query(ctx: click.Context, output_format: str, no_highlight: bool, **kwargs) -> None:
    """Show one page of records matching a query."""
    console = ctx.obj.console
    engine, records, descriptor = _prepare(ctx, kwargs)

    if output_format == "csv":
        click.echo(engine.export(records, descriptor, ExportScope.PAGE), nl=False)
        return

    view = engine.run(records, descriptor)

    if output_format == "json":
        click.echo(msgspec.json.format(msgspec.json.encode(view), indent=2).decode())
        return

    if engine.profile is not None:
        columns = engine.profile.export_columns()
    elif records:
        columns = [(name, name) for name in field_names(records[0])]
    else:
        columns = []

    render_view(
        console,
        engine,
        view,
        descriptor,
        columns,
        highlight=not no_highlight,
        title=engine.profile.description if engine.profile else None,
    )


@click.command()
@query_options
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, allow_dash=True, path_type=Path),
    help="Destination file ('-' for stdout; default: generated name)",
)
@click.option(
    "--scope",
    type=click.Choice([scope.value for scope in ExportScope]),
    default=ExportScope.ALL.value,
    help="Export the current page or every matching record",
)
@click.option("--delimiter", help="Cell delimiter (use 'tab' for TSV)")
@click.pass_context
def export(
    ctx: click.Context,
    output: Path | None,
    scope: str,
    delimiter: str | None,
    **kwargs,
) -> None:
    """Export matching records as CSV or TSV."""
    console = ctx.obj.console
    engine, records, descriptor = _prepare(ctx, kwargs)

    if delimiter == "tab":
        delimiter = "\t"
    if delimiter is not None and len(delimiter) != 1:
        raise click.BadParameter("must be a single character or 'tab'", param_hint="--delimiter")

    rows = engine.export_rows(records, descriptor, ExportScope(scope))
    content = engine.write_rows(rows, engine.export_columns(records), delimiter)

    if output is not None and str(output) == "-":
        click.echo(content, nl=False)
        return

    if output is None:
        prefix = engine.profile.name if engine.profile else "records"
        output = Path(export_filename(prefix, delimiter or engine.config.export_delimiter))

    output.write_text(content, encoding="utf-8")
    console.print(f"[green]✓[/green] Exported {len(rows)} records to {escape(str(output))}")
