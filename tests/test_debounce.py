"""Tests for DebouncedQuery."""

import pytest

from seedbed.core.debounce import DebouncedQuery


@pytest.fixture
def query(qapp, scheduler) -> DebouncedQuery:
    """Create a DebouncedQuery on the manual clock."""
    return DebouncedQuery(scheduler, interval_ms=300)


@pytest.fixture
def emitted(query: DebouncedQuery) -> list[str]:
    values: list[str] = []
    query.value_changed.connect(lambda v: values.append(v))
    return values


class TestDebouncedQuery:
    """Tests for the quiet-interval behaviour."""

    def test_initial_state(self, query: DebouncedQuery) -> None:
        """Test that nothing is pending before input."""
        assert query.text == ""
        assert query.value == ""
        assert query.pending is False

    def test_emits_only_final_value(self, query, scheduler, emitted) -> None:
        """Test that rapid keystrokes collapse into the last value."""
        for text in ("i", "in", "inf", "infr", "infra"):
            query.set_text(text)
            scheduler.advance(100)

        assert emitted == []

        scheduler.advance(300)

        assert emitted == ["infra"]
        assert query.value == "infra"

    def test_each_keystroke_restarts_interval(self, query, scheduler, emitted) -> None:
        """Test that the interval is measured from the last change."""
        query.set_text("a")
        scheduler.advance(299)
        query.set_text("ab")
        scheduler.advance(299)

        assert emitted == []

        scheduler.advance(1)
        assert emitted == ["ab"]

    def test_clearing_emits_empty_string(self, query, scheduler, emitted) -> None:
        """Test that an empty query is emitted as "no filter"."""
        query.set_text("infra")
        scheduler.advance(300)
        query.set_text("")
        scheduler.advance(300)

        assert emitted == ["infra", ""]

    def test_unchanged_value_not_reemitted(self, query, scheduler, emitted) -> None:
        """Test that returning to the same value emits nothing."""
        query.set_text("x")
        scheduler.advance(300)
        query.set_text("xy")
        query.set_text("x")
        scheduler.advance(300)

        assert emitted == ["x"]

    def test_cancel_drops_pending(self, query, scheduler, emitted) -> None:
        """Test that cancel prevents the scheduled emission."""
        query.set_text("abc")
        query.cancel()
        scheduler.advance(1000)

        assert emitted == []
        assert query.pending is False

    def test_flush_emits_immediately(self, query, scheduler, emitted) -> None:
        """Test that flush settles a pending value."""
        query.set_text("abc")
        query.flush()

        assert emitted == ["abc"]
        assert scheduler.active_timers == []
