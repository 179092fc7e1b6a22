"""Tests for the debounced background status fetch scheduler."""

from __future__ import annotations

import threading
import time
import unittest

from gitf.git_status import GitStatusError, StatusData
from gitf.picker.events import DebounceElapsed
from gitf.picker.fetcher import StatusFetchScheduler
from gitf.picker.model import SelectionModel, StatusFetchCallbacks
from gitf.scanner import Repository


class _FakeClock:
    def __init__(self, now: float = 100.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def _wait_for_results(
    scheduler: StatusFetchScheduler,
    *,
    expected_count: int,
    timeout_seconds: float = 1.0,
) -> list:
    deadline = time.monotonic() + timeout_seconds
    out: list = []
    while time.monotonic() < deadline:
        out.extend(scheduler.drain_results())
        if len(out) >= expected_count:
            break
        time.sleep(0.01)
    return out


class DebounceTimerTests(unittest.TestCase):
    def test_timer_fires_only_after_delay(self) -> None:
        clock = _FakeClock()
        scheduler = StatusFetchScheduler(lambda _path: StatusData(branch="main"), debounce_seconds=0.2, clock=clock)

        scheduler.schedule_debounced_fetch("/a")

        self.assertEqual(scheduler.due_events(), [])
        self.assertAlmostEqual(scheduler.seconds_until_next_timer(), 0.2)
        clock.now += 0.19
        self.assertEqual(scheduler.due_events(), [])
        clock.now += 0.02
        self.assertEqual(scheduler.due_events(), [DebounceElapsed(path="/a")])
        self.assertEqual(scheduler.pending_timers, 0)
        self.assertIsNone(scheduler.seconds_until_next_timer())

    def test_rearming_replaces_the_pending_timer(self) -> None:
        clock = _FakeClock()
        scheduler = StatusFetchScheduler(lambda _path: StatusData(branch="main"), debounce_seconds=0.2, clock=clock)
        for path in ("/a", "/b", "/c"):
            scheduler.schedule_debounced_fetch(path)
            clock.now += 0.05

        self.assertEqual(scheduler.pending_timers, 1)
        self.assertAlmostEqual(scheduler.seconds_until_next_timer(), 0.15)
        events = scheduler.due_events(now=clock.now + 1.0)

        self.assertEqual(events, [DebounceElapsed(path="/c")])
        self.assertEqual(scheduler.pending_timers, 0)


class BackgroundFetchTests(unittest.TestCase):
    def test_fetch_result_is_tagged_with_its_path(self) -> None:
        scheduler = StatusFetchScheduler(lambda path: StatusData(branch=f"branch-of-{path}"))

        worker = scheduler.start_fetch("/a")
        results = _wait_for_results(scheduler, expected_count=1)
        worker.join(timeout=1.0)

        self.assertEqual(len(results), 1)
        self.assertEqual(results[0].path, "/a")
        self.assertEqual(results[0].data, StatusData(branch="branch-of-/a"))
        self.assertIsNone(results[0].error)
        self.assertEqual(scheduler.in_flight, 0)
        self.assertTrue(worker.daemon)

    def test_provider_errors_become_error_results(self) -> None:
        def provider(path: str) -> StatusData:
            if path == "/bad":
                raise GitStatusError("failed to get current branch: not a git repository")
            raise RuntimeError("unexpected")

        scheduler = StatusFetchScheduler(provider)
        scheduler.start_fetch("/bad")
        scheduler.start_fetch("/worse")

        results = {result.path: result for result in _wait_for_results(scheduler, expected_count=2)}

        self.assertIsNone(results["/bad"].data)
        self.assertIn("not a git repository", results["/bad"].error)
        self.assertEqual(results["/worse"].error, "unexpected")

    def test_fetches_run_concurrently_and_do_not_block_caller(self) -> None:
        release = threading.Event()
        started: list[str] = []
        lock = threading.Lock()

        def provider(path: str) -> StatusData:
            with lock:
                started.append(path)
            release.wait(timeout=1.0)
            return StatusData(branch=path)

        scheduler = StatusFetchScheduler(provider)
        began = time.monotonic()
        scheduler.start_fetch("/slow-a")
        scheduler.start_fetch("/slow-b")
        self.assertLess(time.monotonic() - began, 0.5)
        self.assertEqual(scheduler.drain_results(), [])

        release.set()
        results = _wait_for_results(scheduler, expected_count=2)

        self.assertEqual(sorted(result.path for result in results), ["/slow-a", "/slow-b"])
        self.assertEqual(sorted(started), ["/slow-a", "/slow-b"])


class SchedulerWithModelTests(unittest.TestCase):
    def test_rapid_moves_fetch_only_final_item(self) -> None:
        clock = _FakeClock()
        fetched: list[str] = []

        def provider(path: str) -> StatusData:
            fetched.append(path)
            return StatusData(branch="main")

        scheduler = StatusFetchScheduler(provider, debounce_seconds=0.2, clock=clock)
        repos = [Repository(name, f"/{name}") for name in ("a", "b", "c", "d")]
        model = SelectionModel(
            repos,
            StatusFetchCallbacks(
                schedule_debounced_fetch=scheduler.schedule_debounced_fetch,
                start_fetch=scheduler.start_fetch,
            ),
        )

        for _ in range(3):
            model.move_highlight(1)
            clock.now += 0.05
        clock.now += 0.2
        for event in scheduler.due_events():
            model.handle_event(event)

        results = _wait_for_results(scheduler, expected_count=1)
        for result in results:
            model.handle_event(result)

        self.assertEqual(fetched, ["/d"])
        self.assertEqual(model.state.status_data, StatusData(branch="main"))
        self.assertFalse(model.state.status_loading)

    def _wired_model(self, names: tuple[str, ...]) -> tuple[SelectionModel, StatusFetchScheduler, _FakeClock, list[str]]:
        clock = _FakeClock()
        started: list[str] = []
        scheduler = StatusFetchScheduler(lambda _path: StatusData(branch="main"), debounce_seconds=0.2, clock=clock)
        model = SelectionModel(
            [Repository(name, f"/{name}") for name in names],
            StatusFetchCallbacks(
                schedule_debounced_fetch=scheduler.schedule_debounced_fetch,
                start_fetch=started.append,
            ),
        )
        return model, scheduler, clock, started

    def test_returning_to_an_item_within_the_delay_fetches_once(self) -> None:
        model, scheduler, clock, started = self._wired_model(("a", "b", "c"))

        for step in (1, -1, 1):
            model.move_highlight(step)
            clock.now += 0.05
        clock.now += 1.0
        for event in scheduler.due_events():
            model.handle_event(event)

        self.assertEqual(started, ["/b"])
        self.assertEqual(model.state.fetch_epoch, "/b")

    def test_typing_with_a_stable_top_match_fetches_once(self) -> None:
        model, scheduler, clock, started = self._wired_model(("alpha", "beta", "gamma"))

        for ch in "gam":
            model.append_query_char(ch)
            clock.now += 0.03
        self.assertEqual(scheduler.due_events(), [])
        clock.now += 1.0
        for event in scheduler.due_events():
            model.handle_event(event)

        self.assertEqual(started, ["/gamma"])


if __name__ == "__main__":
    unittest.main()
