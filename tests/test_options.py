"""
Tests for debounced criteria updates.

Debounce contract:
- N updates inside the quiet period commit exactly once, with the last value
- schedule() cancels the previous timer handle
- context hints are applied immediately
"""

import asyncio
import unittest

from coursefinder.model import SearchContext, SearchCriteria
from coursefinder.options import Debouncer, OptionStore

from fakes import ManualClock


class TestDebouncer(unittest.TestCase):
    def test_schedule_cancels_previous_handle(self) -> None:
        clock = ManualClock()
        fired: list[int] = []
        debouncer = Debouncer(fired.append, delay=0.3, call_later=clock.call_later)

        first = debouncer.schedule(1)
        second = debouncer.schedule(2)

        self.assertTrue(first.cancelled)
        self.assertFalse(second.cancelled)
        clock.advance(0.31)
        self.assertEqual(fired, [2])
        self.assertFalse(debouncer.pending)

    def test_cancel_drops_pending_value(self) -> None:
        clock = ManualClock()
        fired: list[int] = []
        debouncer = Debouncer(fired.append, delay=0.3, call_later=clock.call_later)

        debouncer.schedule(1)
        debouncer.cancel()
        clock.advance(1)

        self.assertEqual(fired, [])


class TestOptionStore(unittest.TestCase):
    def setUp(self) -> None:
        self.clock = ManualClock()
        self.store = OptionStore(delay=0.3, call_later=self.clock.call_later)
        self.commits: list[SearchCriteria] = []
        self.store.on_commit(self.commits.append)

    def test_burst_commits_once_with_last_value(self) -> None:
        for text in ("i", "in", "int", "intr", "intro"):
            self.store.update("query", text)
            self.clock.advance(0.05)

        self.assertEqual(self.commits, [])
        self.clock.advance(0.2)
        self.assertEqual(self.commits, [])
        self.clock.advance(0.1)

        self.assertEqual(len(self.commits), 1)
        self.assertEqual(self.store.criteria.query, "intro")

    def test_last_call_wins_across_fields(self) -> None:
        self.store.update("query", "intro")
        self.store.update("grades", ["2"])
        self.clock.advance(0.5)

        self.assertEqual(len(self.commits), 1)
        self.assertEqual(self.store.criteria.query, "")
        self.assertEqual(self.store.criteria.grades, frozenset({2}))

    def test_separate_quiet_periods_commit_separately(self) -> None:
        self.store.update("query", "a")
        self.clock.advance(0.5)
        self.store.update("credits", "3")
        self.clock.advance(0.5)

        self.assertEqual(len(self.commits), 2)
        self.assertEqual(self.store.criteria.query, "a")
        self.assertEqual(self.store.criteria.credits, 3)

    def test_unknown_field_raises_immediately(self) -> None:
        with self.assertRaises(ValueError):
            self.store.update("room", "A")
        self.assertFalse(self.store.pending)

    def test_invalid_value_is_logged_not_committed(self) -> None:
        self.store.update("credits", "three")
        with self.assertLogs("coursefinder.options", level="WARNING"):
            self.clock.advance(0.5)
        self.assertEqual(self.commits, [])
        self.assertIsNone(self.store.criteria.credits)

    def test_context_is_applied_immediately(self) -> None:
        self.store.update("query", "x")
        self.store.apply_context(SearchContext("table-1", day="화", time=5))

        self.assertEqual(self.store.criteria.days, frozenset({"화"}))
        self.assertEqual(self.store.criteria.times, frozenset({5}))
        self.assertEqual(len(self.commits), 1)

        self.store.apply_context(SearchContext("table-1"))
        self.assertEqual(self.store.criteria.days, frozenset())
        self.assertEqual(self.store.criteria.times, frozenset())


class TestDebouncerOnEventLoop(unittest.IsolatedAsyncioTestCase):
    async def test_default_timer_uses_running_loop(self) -> None:
        fired: list[str] = []
        debouncer = Debouncer(fired.append, delay=0.01)

        for value in ("a", "b", "c"):
            debouncer.schedule(value)
        await asyncio.sleep(0.1)

        self.assertEqual(fired, ["c"])


if __name__ == "__main__":
    unittest.main()
