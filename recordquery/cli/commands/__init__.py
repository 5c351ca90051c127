"""CLI commands module."""

from . import history, profiles, query

__all__ = ["history", "profiles", "query"]
