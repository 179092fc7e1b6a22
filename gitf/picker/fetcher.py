"""Debounce timers and background workers for git status fetches.

Timers are plain deadlines polled by the event loop, so they fire on the loop
thread as ``DebounceElapsed`` events. Each fetch runs the status provider on
its own daemon thread and posts a ``StatusFetched`` result to a queue that the
loop drains; workers never touch picker state.
"""

from __future__ import annotations

import heapq
import itertools
import logging
import threading
import time
from collections.abc import Callable
from queue import Empty, Queue

from ..git_status import GitStatusError, StatusData
from .events import DebounceElapsed, StatusFetched

LOGGER = logging.getLogger(__name__)

DEBOUNCE_SECONDS = 0.2

StatusProvider = Callable[[str], StatusData]


class StatusFetchScheduler:
    """Latest-highlight-wins status fetching for the picker loop."""

    def __init__(
        self,
        provider: StatusProvider,
        *,
        debounce_seconds: float = DEBOUNCE_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._provider = provider
        self._debounce_seconds = max(0.0, debounce_seconds)
        self._clock = clock
        self._timers: list[tuple[float, int, str]] = []
        self._sequence = itertools.count()
        self._armed_seq = -1
        self._results: Queue[StatusFetched] = Queue()
        self._lock = threading.Lock()
        self._in_flight = 0

    @property
    def in_flight(self) -> int:
        with self._lock:
            return self._in_flight

    @property
    def pending_timers(self) -> int:
        return len(self._timers)

    def schedule_debounced_fetch(self, path: str) -> None:
        """Arm a timer that reports ``path`` after the debounce delay.

        Re-arming replaces every timer still pending, so a burst of highlight
        changes produces at most one ``DebounceElapsed``.
        """
        deadline = self._clock() + self._debounce_seconds
        seq = next(self._sequence)
        self._armed_seq = seq
        heapq.heappush(self._timers, (deadline, seq, path))
        self._drop_replaced_timers()

    def _drop_replaced_timers(self) -> None:
        while self._timers and self._timers[0][1] != self._armed_seq:
            heapq.heappop(self._timers)

    def due_events(self, now: float | None = None) -> list[DebounceElapsed]:
        """Pop the armed timer if its deadline has passed."""
        current = self._clock() if now is None else now
        out: list[DebounceElapsed] = []
        self._drop_replaced_timers()
        if self._timers and self._timers[0][0] <= current:
            _deadline, _seq, path = heapq.heappop(self._timers)
            out.append(DebounceElapsed(path=path))
            self._timers.clear()
        return out

    def seconds_until_next_timer(self, now: float | None = None) -> float | None:
        self._drop_replaced_timers()
        if not self._timers:
            return None
        current = self._clock() if now is None else now
        return max(0.0, self._timers[0][0] - current)

    def start_fetch(self, path: str) -> threading.Thread:
        """Run the status provider for ``path`` on a daemon thread."""
        with self._lock:
            self._in_flight += 1
        worker = threading.Thread(
            target=self._worker,
            args=(path,),
            name="gitf-status-fetch",
            daemon=True,
        )
        worker.start()
        return worker

    def _worker(self, path: str) -> None:
        try:
            data = self._provider(path)
        except GitStatusError as exc:
            LOGGER.debug("status fetch failed for %s: %s", path, exc)
            result = StatusFetched(path=path, error=str(exc))
        except Exception as exc:
            LOGGER.debug("status provider crashed for %s", path, exc_info=True)
            result = StatusFetched(path=path, error=str(exc) or exc.__class__.__name__)
        else:
            result = StatusFetched(path=path, data=data)
        self._results.put(result)
        with self._lock:
            self._in_flight -= 1

    def drain_results(self) -> list[StatusFetched]:
        """Drain all completed fetch results in completion order."""
        out: list[StatusFetched] = []
        while True:
            try:
                out.append(self._results.get_nowait())
            except Empty:
                break
        return out
