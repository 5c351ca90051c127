"""Profile listing command."""

import click
from rich.table import Table

from recordquery.core.profiles import PROFILES, get_profile


def _flag(value: bool) -> str:
    return "✓" if value else ""


@click.command()
@click.argument("name", required=False)
@click.pass_context
def profiles(ctx: click.Context, name: str | None) -> None:
    """List entity profiles, or the fields of one profile."""
    console = ctx.obj.console

    if name is None:
        table = Table(title="Entity profiles")
        table.add_column("Name", style="cyan")
        table.add_column("Description")
        table.add_column("Search fields")
        for profile in PROFILES.values():
            table.add_row(
                profile.name,
                profile.description,
                ", ".join(profile.searchable_fields()),
            )
        console.print(table)
        return

    profile = get_profile(name)
    table = Table(title=f"Fields of {profile.name}")
    table.add_column("Field", style="cyan")
    table.add_column("Label")
    table.add_column("Kind")
    table.add_column("Search", justify="center")
    table.add_column("Sort", justify="center")
    table.add_column("Filter", justify="center")
    for spec in profile.fields:
        table.add_row(
            spec.name,
            spec.label,
            spec.kind.value + (" (computed)" if spec.compute else ""),
            _flag(spec.searchable),
            _flag(spec.sortable),
            _flag(spec.filterable),
        )
    console.print(table)
