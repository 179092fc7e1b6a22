"""Selection model: query filtering, highlight navigation, and status freshness.

All transitions run on the event-loop thread. Status fetches are requested
through injected callbacks and come back as ``DebounceElapsed`` and
``StatusFetched`` events; a result is applied only while its path is still
the highlighted one.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from ..fuzzy import fuzzy_match_labels
from ..git_status import StatusData
from ..scanner import Repository
from .events import DebounceElapsed, PickerEvent, Resized, StatusFetched
from .layout import MAX_LIST_ROWS, follow_selection, list_window_rows, max_status_scroll
from .state import PickerState

LOGGER = logging.getLogger(__name__)

MatchLabels = Callable[[str, list[str]], list[tuple[int, int]]]


@dataclass(frozen=True)
class StatusFetchCallbacks:
    """Hooks the model uses to request status work from the scheduler."""

    schedule_debounced_fetch: Callable[[str], None]
    start_fetch: Callable[[str], None]


class SelectionModel:
    """Owns ``PickerState`` and implements every state transition.

    Transition methods return whether visible state changed and also set
    ``state.dirty`` so the loop knows to redraw.
    """

    def __init__(
        self,
        repositories: Sequence[Repository],
        callbacks: StatusFetchCallbacks,
        *,
        match_labels: MatchLabels = fuzzy_match_labels,
        width: int = 80,
        height: int = 24,
        max_list_rows: int = MAX_LIST_ROWS,
    ) -> None:
        repos = tuple(repositories)
        self.state = PickerState(
            repositories=repos,
            filtered=list(repos),
            width=width,
            height=height,
            max_list_rows=max(1, max_list_rows),
        )
        self._callbacks = callbacks
        self._match_labels = match_labels
        self._labels = [repo.name for repo in repos]

    @property
    def highlighted(self) -> Repository | None:
        return self.state.highlighted

    def list_window_rows(self) -> int:
        return list_window_rows(self.state.height, len(self.state.filtered), self.state.max_list_rows)

    def start(self) -> None:
        """Fetch status for the first item right away; there is nothing to debounce."""
        path = self.state.highlighted_path
        if path is None:
            return
        self._fetch_now(path)

    # Query editing

    def append_query_char(self, ch: str) -> bool:
        if not ch:
            return False
        return self._set_query(self.state.query + ch)

    def delete_query_char(self) -> bool:
        if not self.state.query:
            return False
        return self._set_query(self.state.query[:-1])

    def _set_query(self, query: str) -> bool:
        previous_path = self.state.highlighted_path
        self.state.query = query
        self.state.filtered = self._filter(query)
        self.state.selected_idx = 0
        self.state.list_offset = 0
        self.state.status_offset = 0
        self._highlight_changed(previous_path)
        self.state.dirty = True
        return True

    def _filter(self, query: str) -> list[Repository]:
        repos = self.state.repositories
        if not query:
            return list(repos)
        return [repos[idx] for idx, _score in self._match_labels(query, self._labels)]

    # Navigation and scrolling

    def move_highlight(self, delta: int) -> bool:
        """Move the highlight by ``delta`` rows without wrapping.

        Returns ``False`` and leaves state untouched at either boundary or when
        there are no results.
        """
        total = len(self.state.filtered)
        if total == 0:
            return False
        target = max(0, min(total - 1, self.state.selected_idx + delta))
        if target == self.state.selected_idx:
            return False
        previous_path = self.state.highlighted_path
        self.state.selected_idx = target
        self.state.list_offset = follow_selection(self.state.list_offset, target, self.list_window_rows())
        self.state.status_offset = 0
        self._highlight_changed(previous_path)
        self.state.dirty = True
        return True

    def scroll_status(self, delta: int) -> bool:
        data = self.state.status_data
        if data is None:
            return False
        limit = max_status_scroll(len(data.files), self.state.height)
        target = max(0, min(limit, self.state.status_offset + delta))
        if target == self.state.status_offset:
            return False
        self.state.status_offset = target
        self.state.dirty = True
        return True

    def resize(self, width: int, height: int) -> bool:
        """Store new terminal dimensions and re-clamp both scroll offsets."""
        if (width, height) == (self.state.width, self.state.height):
            return False
        self.state.width = width
        self.state.height = height
        total = len(self.state.filtered)
        window = self.list_window_rows()
        if total:
            offset = max(0, min(self.state.list_offset, total - window))
            self.state.list_offset = follow_selection(offset, self.state.selected_idx, window)
        else:
            self.state.list_offset = 0
        if self.state.status_data is not None:
            limit = max_status_scroll(len(self.state.status_data.files), height)
            self.state.status_offset = min(self.state.status_offset, limit)
        self.state.dirty = True
        return True

    # Status fetching

    def refresh_status(self) -> bool:
        """Fetch status for the highlighted item now, skipping the debounce delay."""
        path = self.state.highlighted_path
        if path is None:
            return False
        self._fetch_now(path)
        self.state.dirty = True
        return True

    def on_debounce_elapsed(self, path: str) -> bool:
        if path != self.state.highlighted_path:
            LOGGER.debug("debounce for %s superseded", path)
            return False
        self._fetch_now(path)
        self.state.dirty = True
        return True

    def on_status_fetched(self, path: str, data: StatusData | None, error: str | None) -> bool:
        """Apply a finished fetch if ``path`` is still highlighted, else drop it."""
        if path != self.state.highlighted_path:
            LOGGER.debug("discarding stale status for %s", path)
            return False
        self.state.status_loading = False
        if error is not None or data is None:
            self.state.status_error = error or "unknown error"
            self.state.status_data = None
        else:
            self.state.status_data = data
            self.state.status_error = None
        self.state.status_offset = 0
        self.state.dirty = True
        return True

    def handle_event(self, event: PickerEvent) -> bool:
        """Apply a non-key event. Key presses go through ``PickerKeyHandler``."""
        if isinstance(event, DebounceElapsed):
            return self.on_debounce_elapsed(event.path)
        if isinstance(event, StatusFetched):
            return self.on_status_fetched(event.path, event.data, event.error)
        if isinstance(event, Resized):
            return self.resize(event.width, event.height)
        return False

    def _fetch_now(self, path: str) -> None:
        self.state.fetch_epoch = path
        self.state.status_loading = True
        self._callbacks.start_fetch(path)

    def _highlight_changed(self, previous_path: str | None) -> None:
        path = self.state.highlighted_path
        if path is None:
            self.state.status_data = None
            self.state.status_error = None
            self.state.status_loading = False
            self.state.fetch_epoch = None
            return
        if path != previous_path:
            self.state.status_data = None
            self.state.status_error = None
            self.state.status_loading = False
        self.state.fetch_epoch = path
        self._callbacks.schedule_debounced_fetch(path)
