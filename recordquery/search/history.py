"""Recent search terms, most recent first.

Each screen keeps its own short list of distinct terms the user searched
for. Lists can live in memory only or be persisted as JSON, one file per
scope.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


@dataclass
class RecentSearch:
    """A remembered search term."""

    term: str
    timestamp: datetime

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {"term": self.term, "timestamp": self.timestamp.isoformat()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RecentSearch:
        """Create from dictionary."""
        return cls(
            term=data["term"],
            timestamp=datetime.fromisoformat(data["timestamp"]),
        )


class SearchHistory:
    """Keeps the last few distinct search terms for one scope."""

    def __init__(
        self,
        data_dir: Path | None = None,
        scope: str = "default",
        max_entries: int = 5,
        min_length: int = 2,
    ):
        """Initialize history.

        Args:
            data_dir: Directory for the JSON file; ``None`` keeps history in memory
            scope: Name of the list (usually the entity profile)
            max_entries: How many distinct terms to keep
            min_length: Shortest term worth remembering
        """
        self.scope = scope
        self.max_entries = max(1, max_entries)
        self.min_length = min_length
        self.history_file: Path | None = None

        if data_dir is not None:
            data_dir.mkdir(parents=True, exist_ok=True)
            self.history_file = data_dir / f"{scope}.json"

        self.entries = self._load()

    def _load(self) -> list[RecentSearch]:
        if self.history_file is None or not self.history_file.exists():
            return []

        try:
            with open(self.history_file, "r") as f:
                data = json.load(f)
            return [RecentSearch.from_dict(item) for item in data][: self.max_entries]
        except (json.JSONDecodeError, KeyError, TypeError, ValueError):
            logger.warning(f"Ignoring unreadable search history: {self.history_file}")
            return []

    def _save(self) -> None:
        if self.history_file is None:
            return

        with open(self.history_file, "w") as f:
            json.dump([entry.to_dict() for entry in self.entries], f, indent=2)

    def add(self, term: str, timestamp: datetime | None = None) -> bool:
        """Remember a search term.

        A term already present moves to the front instead of repeating.

        Returns:
            True if the term was recorded, False if it was too short
        """
        term = term.strip()
        if len(term) < self.min_length:
            return False

        self.entries = [entry for entry in self.entries if entry.term != term]
        self.entries.insert(0, RecentSearch(term, timestamp or datetime.now()))
        del self.entries[self.max_entries :]
        self._save()
        return True

    def terms(self) -> list[str]:
        """Get remembered terms, most recent first."""
        return [entry.term for entry in self.entries]

    def suggestions(self, prefix: str = "") -> list[str]:
        """Get remembered terms starting with a prefix (case-insensitive)."""
        prefix = prefix.strip().lower()
        return [term for term in self.terms() if term.lower().startswith(prefix)]

    def clear(self) -> None:
        """Forget every term in this scope."""
        self.entries = []
        self._save()

    def __len__(self) -> int:
        return len(self.entries)
