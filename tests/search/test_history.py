"""Tests for recent search history."""

import json
from datetime import datetime

from recordquery.search.history import RecentSearch, SearchHistory


class TestRecentSearch:
    """Test the history entry model."""

    def test_round_trip(self):
        """Entries serialize to plain dictionaries."""
        entry = RecentSearch("monterrey", datetime(2024, 1, 10, 8, 30))

        data = entry.to_dict()

        assert data == {"term": "monterrey", "timestamp": "2024-01-10T08:30:00"}
        assert RecentSearch.from_dict(data) == entry


class TestSearchHistory:
    """Test remembered search terms."""

    def test_most_recent_first(self):
        """Terms are listed newest first."""
        history = SearchHistory()
        history.add("rosa")
        history.add("durango")

        assert history.terms() == ["durango", "rosa"]

    def test_duplicates_move_to_front(self):
        """Repeating a term does not duplicate it."""
        history = SearchHistory()
        for term in ["rosa", "durango", "rosa"]:
            history.add(term)

        assert history.terms() == ["rosa", "durango"]

    def test_keeps_last_entries(self):
        """Only the configured number of distinct terms is kept."""
        history = SearchHistory()
        for term in ["aa", "bb", "cc", "dd", "ee", "ff"]:
            history.add(term)

        assert history.terms() == ["ff", "ee", "dd", "cc", "bb"]
        assert len(history) == 5

    def test_short_terms_ignored(self):
        """Terms below the minimum length are not remembered."""
        history = SearchHistory(min_length=3)

        assert not history.add("ab")
        assert not history.add("   ")
        assert history.add(" abc ")
        assert history.terms() == ["abc"]

    def test_suggestions(self):
        """Suggestions are remembered terms with a matching prefix."""
        history = SearchHistory()
        for term in ["Monterrey", "monclova", "Durango"]:
            history.add(term)

        assert history.suggestions("mon") == ["monclova", "Monterrey"]
        assert history.suggestions() == ["Durango", "monclova", "Monterrey"]

    def test_persistence(self, tmp_path):
        """History survives reopening the same scope."""
        history = SearchHistory(tmp_path, scope="drivers")
        history.add("rosa")
        history.add("saltillo")

        reopened = SearchHistory(tmp_path, scope="drivers")

        assert reopened.terms() == ["saltillo", "rosa"]
        assert (tmp_path / "drivers.json").exists()

    def test_scopes_are_separate(self, tmp_path):
        """Each scope has its own list."""
        SearchHistory(tmp_path, scope="drivers").add("rosa")

        assert SearchHistory(tmp_path, scope="complaints").terms() == []

    def test_clear(self, tmp_path):
        """Clearing forgets every term, on disk too."""
        history = SearchHistory(tmp_path, scope="drivers")
        history.add("rosa")
        history.clear()

        assert len(history) == 0
        assert SearchHistory(tmp_path, scope="drivers").terms() == []

    def test_corrupted_file(self, tmp_path):
        """An unreadable file is treated as empty."""
        (tmp_path / "drivers.json").write_text("{not json")

        history = SearchHistory(tmp_path, scope="drivers")

        assert history.terms() == []
        history.add("rosa")
        assert json.loads((tmp_path / "drivers.json").read_text())[0]["term"] == "rosa"
