"""Search history command."""

import click
from rich.markup import escape

from recordquery.search.history import SearchHistory


@click.command()
@click.option("--profile", "-p", "scope", default="default", help="History scope")
@click.option("--clear", is_flag=True, help="Forget remembered searches")
@click.pass_context
def history(ctx: click.Context, scope: str, clear: bool) -> None:
    """Show recently searched terms."""
    console = ctx.obj.console
    config = ctx.obj.config
    recent = SearchHistory(
        ctx.obj.history_dir,
        scope=scope,
        max_entries=config.history_size,
        min_length=config.history_min_length,
    )

    if clear:
        recent.clear()
        console.print(f"[green]✓[/green] Cleared search history for {escape(scope)}")
        return

    if not len(recent):
        console.print(f"[dim]No recent searches for {escape(scope)}[/dim]")
        return

    for index, entry in enumerate(recent.entries, start=1):
        console.print(
            f"{index}. [cyan]{escape(entry.term)}[/cyan] "
            f"[dim]{entry.timestamp:%Y-%m-%d %H:%M}[/dim]"
        )
