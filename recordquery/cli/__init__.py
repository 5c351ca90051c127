"""Command-line interface for recordquery.

Built with Click and Rich.
"""

from recordquery.cli.main import cli

__all__ = ["cli"]
