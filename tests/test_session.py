"""Tests for caller-side query sessions."""

import logging

from recordquery.config import EngineConfig
from recordquery.query.engine import QueryEngine
from recordquery.query.filters import ExactMatch, MultiSelect
from recordquery.query.models import ViewResult
from recordquery.query.sorting import SortDirection, SortSpec
from recordquery.session import QuerySession


def view(total_pages=5, page=1):
    return ViewResult(
        items=[], total_count=total_pages * 20, page=page, total_pages=total_pages, page_size=20
    )


class TestQuerySession:
    """Test descriptor updates."""

    def test_initial_descriptor(self):
        """A new session starts on page one with the default size."""
        session = QuerySession(EngineConfig(default_page_size=50), search_fields=("name",))

        assert session.descriptor.page == 1
        assert session.descriptor.page_size == 50
        assert session.descriptor.search_fields == ("name",)
        assert not session.sort.is_active

    def test_changes_reset_page(self):
        """Search, filter, sort and size changes go back to page one."""
        session = QuerySession()
        session.set_page(3)
        assert session.descriptor.page == 3

        for change in (
            lambda: session.set_search("rosa"),
            lambda: session.set_filter(ExactMatch("status", "Active")),
            lambda: session.toggle_sort("name"),
            lambda: session.set_page_size(50),
            lambda: session.remove_filter("status"),
        ):
            session.set_page(3)
            change()
            assert session.descriptor.page == 1

    def test_descriptors_are_replaced(self):
        """Each change builds a new descriptor."""
        session = QuerySession()
        before = session.descriptor

        after = session.set_search("rosa")

        assert after is session.descriptor
        assert before is not after
        assert before.search_term == ""

    def test_set_filter_replaces_same_field(self):
        """Only one filter per field is kept."""
        session = QuerySession()
        session.set_filter(ExactMatch("status", "Active"))
        session.set_filter(ExactMatch("state", "Durango"))
        session.set_filter(ExactMatch("status", "Inactive"))

        assert session.descriptor.filters == (
            ExactMatch("state", "Durango"),
            ExactMatch("status", "Inactive"),
        )
        assert session.get_filter("status") == ExactMatch("status", "Inactive")
        assert session.get_filter("nope") is None

    def test_toggle_value(self):
        """Multi-select options toggle on and off."""
        session = QuerySession()
        session.toggle_value("state", "Durango")
        session.toggle_value("state", "Coahuila")
        session.toggle_value("state", "Durango")

        assert session.get_filter("state") == MultiSelect("state", frozenset({"Coahuila"}))

    def test_clear_filters(self):
        """Clearing restores the initial filters and drops the search."""
        default = MultiSelect("status", frozenset({"Active"}))
        session = QuerySession(filters=[default])
        session.set_search("rosa")
        session.set_filter(ExactMatch("state", "Durango"))

        session.clear_filters()

        assert session.descriptor.search_term == ""
        assert session.descriptor.filters == (default,)

    def test_toggle_sort_cycle(self):
        """Sort clicks cycle through the three states."""
        session = QuerySession()

        session.toggle_sort("name")
        assert session.sort == SortSpec("name", SortDirection.ASC)
        session.toggle_sort("name")
        assert session.sort == SortSpec("name", SortDirection.DESC)
        session.toggle_sort("name")
        assert not session.sort.is_active

    def test_page_navigation_clamped(self):
        """Pages stay between one and the last known page."""
        session = QuerySession()
        seq, _ = session.submit()
        session.accept(seq, view(total_pages=2))

        session.previous_page()
        assert session.descriptor.page == 1
        session.next_page()
        session.next_page()
        assert session.descriptor.page == 2
        session.set_page(10)
        assert session.descriptor.page == 2

    def test_invalid_page_size(self):
        """Page sizes below one fall back to the default."""
        session = QuerySession()
        session.set_page_size(0)

        assert session.descriptor.page_size == 20

    def test_page_size_options(self):
        """Only offered page sizes are accepted."""
        session = QuerySession(EngineConfig(page_size_options=(10, 25)))

        session.set_page_size(25)
        assert session.descriptor.page_size == 25

        session.set_page_size(30)
        assert session.descriptor.page_size == 20

    def test_no_page_size_options(self):
        """Without options any positive size is accepted."""
        session = QuerySession(EngineConfig(page_size_options=()))

        session.set_page_size(7)

        assert session.descriptor.page_size == 7


class TestSubmission:
    """Test that only the latest result is kept."""

    def test_latest_result_wins(self, caplog):
        """A slower, older result cannot replace a newer one."""
        session = QuerySession()
        first, _ = session.submit()
        session.set_search("rosa")
        second, descriptor = session.submit()

        assert descriptor.search_term == "rosa"
        assert session.latest == second

        newer = view(total_pages=1)
        assert session.accept(second, newer)
        with caplog.at_level(logging.DEBUG, logger="recordquery.session"):
            assert not session.accept(first, view(total_pages=9))

        assert session.view is newer
        assert "Discarding stale result" in caplog.text

    def test_round_trip_with_engine(self, driver_records):
        """Submitted descriptors run on the engine."""
        session = QuerySession(search_fields=("curp",))
        engine = QueryEngine()
        session.set_search("masr")

        seq, descriptor = session.submit()
        assert session.accept(seq, engine.run(driver_records, descriptor))

        assert [r["id"] for r in session.view.items] == ["DRV-0001"]
