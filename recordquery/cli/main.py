"""Main CLI entry point and application setup."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

import click
from click.exceptions import Exit
from rich.console import Console
from rich.markup import escape
from rich.text import Text

from recordquery import __version__
from recordquery.cli.commands import history, profiles, query
from recordquery.config import EngineConfig, load_config
from recordquery.exceptions import ConfigError, RecordQueryError

logger = logging.getLogger(__name__)


@dataclass
class Context:
    """CLI context that holds shared resources."""

    console: Console
    config: EngineConfig
    history_dir: Path
    debug: bool = False


def setup_logging(
    verbose: bool = False, quiet: bool = False, debug: bool = False
) -> None:
    """Configure logging based on CLI flags."""
    if quiet:
        level = logging.WARNING
    elif verbose or debug:
        level = logging.DEBUG
    else:
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s"
        if not debug
        else "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def create_console(no_color: bool = False, width: int | None = None) -> Console:
    """Create Rich console with appropriate settings."""
    return Console(
        no_color=no_color,
        width=width or 120,
        highlight=not no_color,
        color_system=None if no_color else "auto",
    )


def get_history_dir() -> Path:
    """Get the directory holding remembered searches."""
    if env_dir := os.environ.get("RECORDQUERY_HISTORY_DIR"):
        return Path(env_dir)

    xdg_cache_home = Path(os.environ.get("XDG_CACHE_HOME", Path.home() / ".cache"))
    return xdg_cache_home / "recordquery" / "history"


class RecordQueryGroup(click.Group):
    """Custom group that reports errors without tracebacks."""

    def invoke(self, ctx):
        try:
            return super().invoke(ctx)
        except KeyboardInterrupt:
            self._report(ctx, "[yellow]Interrupted[/yellow]")
            ctx.exit(130)
        except (click.ClickException, click.Abort, Exit, SystemExit):
            raise
        except RecordQueryError as e:
            if getattr(ctx.obj, "debug", False):
                raise
            self._report(ctx, f"[red]Error:[/red] {escape(str(e))}")
            ctx.exit(1)
        except Exception as e:
            if getattr(ctx.obj, "debug", False):
                raise
            logger.debug("Unhandled error", exc_info=True)
            self._report(ctx, f"[red]Unexpected error:[/red] {escape(str(e))}")
            ctx.exit(1)

    @staticmethod
    def _report(ctx: click.Context, message: str) -> None:
        console = getattr(ctx.obj, "console", None)
        if console is not None:
            console.print(message, markup=True, highlight=False)
        else:
            click.echo(Text.from_markup(message).plain, err=True)


@click.group(cls=RecordQueryGroup)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-error output")
@click.option("--no-color", is_flag=True, help="Disable colored output")
@click.option("--debug", is_flag=True, help="Enable debug mode with full tracebacks")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration file",
)
@click.version_option(
    version=__version__,
    prog_name="recordquery",
    message="recordquery version %(version)s",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    no_color: bool,
    debug: bool,
    config: Path | None,
) -> None:
    """Query tabular record collections.

    Filter, fuzzy-search, sort, paginate and export JSON or YAML record
    files the way the dashboard list screens do.
    """
    setup_logging(verbose=verbose, quiet=quiet, debug=debug)
    console = create_console(no_color=no_color)

    try:
        engine_config = load_config(config)
    except ConfigError as e:
        if debug:
            raise
        console.print(f"[red]Error loading configuration:[/red] {escape(str(e))}")
        ctx.exit(1)

    ctx.obj = Context(
        console=console,
        config=engine_config,
        history_dir=get_history_dir(),
        debug=debug,
    )


cli.add_command(query.query)
cli.add_command(query.export)
cli.add_command(profiles.profiles)
cli.add_command(history.history)


def main() -> None:
    """Console script entry point."""
    cli()
