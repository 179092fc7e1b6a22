"""Pane sizing, scroll math, and frame projection for the picker.

``project_frame`` turns picker state into a layout-agnostic description of
what to draw: the result list pane, the git status pane, and the footer.
It only reads state; persistent clamping happens in ``SelectionModel``.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..git_status import FileStatus, StatusData

if TYPE_CHECKING:
    from .state import PickerState

MAX_LIST_ROWS = 10
MAX_STATUS_ROWS = 15
FOOTER_HEIGHT = 1
PANEL_CHROME_COLS = 4
PANEL_CHROME_ROWS = 4
PANE_GAP_COLS = 1
MIN_TOTAL_CONTENT_WIDTH = 40
LEFT_PANE_RATIO = 0.55
# Footer, pane chrome, search label, three-row search box, blank line, pagination.
LIST_CHROME_ROWS = FOOTER_HEIGHT + PANEL_CHROME_ROWS + 6
# Footer, pane chrome, title block, branch block, stats block, files title, scroll hint.
STATUS_CHROME_ROWS = FOOTER_HEIGHT + PANEL_CHROME_ROWS + 11
MIN_FILENAME_WIDTH = 20
FILE_ROW_PREFIX_COLS = 12
SEARCH_BOX_MAX_WIDTH = 50
ELLIPSIS = "…"
FOOTER_TEXT = (
    "↑/↓: nav repos | Shift+↑/↓: scroll status | Enter: open | "
    "^O: files | ^T: term | ^B: remote | ^G: refresh | Esc: exit"
)


def pane_content_widths(width: int) -> tuple[int, int]:
    """Split terminal ``width`` into list-pane and status-pane content widths.

    Both panes lose ``PANEL_CHROME_COLS`` to border and padding, plus one gap
    column between them. The remaining width never drops below
    ``MIN_TOTAL_CONTENT_WIDTH`` and is divided 55/45.
    """
    total_chrome = PANEL_CHROME_COLS * 2 + PANE_GAP_COLS
    total_content = max(MIN_TOTAL_CONTENT_WIDTH, width - total_chrome)
    left = int(total_content * LEFT_PANE_RATIO)
    return left, total_content - left


def list_window_rows(height: int, item_count: int, max_rows: int = MAX_LIST_ROWS) -> int:
    """Return how many result rows fit, or 0 when there are no results."""
    if item_count <= 0:
        return 0
    available = max(1, height - LIST_CHROME_ROWS)
    return max(1, min(item_count, max_rows, available))


def status_window_rows(height: int) -> int:
    return max(1, min(height - STATUS_CHROME_ROWS, MAX_STATUS_ROWS))


def max_status_scroll(file_count: int, height: int) -> int:
    return max(0, file_count - status_window_rows(height))


def follow_selection(offset: int, selected: int, window: int) -> int:
    """Apply scroll-follows-selection to ``offset`` for a ``window``-row view.

    Snaps to the top when the selection is above the window and to the bottom
    when it is below; otherwise the offset is kept.
    """
    if window <= 0:
        return 0
    if selected < offset:
        return selected
    if selected >= offset + window:
        return selected - window + 1
    return offset


def truncate_path_left(path: str, max_width: int) -> str:
    """Shorten ``path`` from the left so it fits in ``max_width`` columns.

    Keeps the trailing segments and prefers to cut at a ``/``, e.g.
    ``src/components/dialogs/file.vue`` becomes ``…/dialogs/file.vue``.
    """
    if len(path) <= max_width:
        return path
    if max_width < 5:
        return path[:max_width]

    truncated = path[len(path) - (max_width - 1):]
    slash = truncated.find("/")
    if slash != -1 and slash < len(truncated) - 1:
        truncated = truncated[slash:]
    return ELLIPSIS + truncated


def format_repo_path(path: str, home: str | None = None) -> str:
    """Show ``path`` relative to the home directory when it lives below it."""
    home_dir = home if home is not None else os.path.expanduser("~")
    prefix = home_dir.rstrip("/") + "/"
    if home_dir and path.startswith(prefix):
        return path[len(prefix):]
    return path


def pagination_text(total: int, visible: int, max_rows: int = MAX_LIST_ROWS) -> str:
    if total <= 0:
        return ""
    if total <= max_rows:
        return f"({total} results)"
    return f"Showing {visible} of {total}"


@dataclass(frozen=True)
class ListRow:
    index: int
    name: str
    display_path: str
    highlighted: bool


@dataclass(frozen=True)
class ListPaneView:
    content_width: int
    query: str
    rows: tuple[ListRow, ...]
    pagination: str
    empty_message: str = ""


@dataclass(frozen=True)
class StatusPaneView:
    """What the status pane shows.

    ``mode`` is one of ``empty``, ``loading``, ``error``, ``record`` or ``idle``.
    """

    content_width: int
    mode: str
    message: str = ""
    status: StatusData | None = None
    file_rows: tuple[FileStatus, ...] = ()
    scroll_indicator: str = ""


@dataclass(frozen=True)
class FrameDescription:
    width: int
    height: int
    list_pane: ListPaneView
    status_pane: StatusPaneView
    footer: str


def _project_list_pane(state: PickerState, content_width: int, height: int, home: str | None) -> ListPaneView:
    total = len(state.filtered)
    if total == 0:
        return ListPaneView(
            content_width=content_width,
            query=state.query,
            rows=(),
            pagination="",
            empty_message="No repositories found",
        )

    window = list_window_rows(height, total, state.max_list_rows)
    selected = max(0, min(state.selected_idx, total - 1))
    start = max(0, min(state.list_offset, total - window))
    start = follow_selection(start, selected, window)
    rows = tuple(
        ListRow(
            index=idx,
            name=state.filtered[idx].name,
            display_path=format_repo_path(state.filtered[idx].path, home),
            highlighted=idx == selected,
        )
        for idx in range(start, min(total, start + window))
    )
    return ListPaneView(
        content_width=content_width,
        query=state.query,
        rows=rows,
        pagination=pagination_text(total, len(rows), state.max_list_rows),
    )


def _project_status_pane(state: PickerState, content_width: int, height: int) -> StatusPaneView:
    if not state.filtered:
        return StatusPaneView(content_width=content_width, mode="empty", message="No repository selected")
    if state.status_loading or state.status_pending:
        return StatusPaneView(content_width=content_width, mode="loading", message="Loading git status...")
    if state.status_error is not None:
        return StatusPaneView(content_width=content_width, mode="error", message=state.status_error)
    data = state.status_data
    if data is None:
        return StatusPaneView(
            content_width=content_width,
            mode="idle",
            message="Select a repository to view status",
        )

    window = status_window_rows(height)
    total_files = len(data.files)
    start = max(0, min(state.status_offset, max_status_scroll(total_files, height)))
    filename_width = max(MIN_FILENAME_WIDTH, content_width - FILE_ROW_PREFIX_COLS)
    file_rows = tuple(
        FileStatus(change_kind=entry.change_kind, filename=truncate_path_left(entry.filename, filename_width))
        for entry in data.files[start:start + window]
    )
    indicator = ""
    if total_files > window:
        last = min(start + window, total_files)
        indicator = f"(Shift+↑/↓ to scroll: {start + 1}-{last} of {total_files})"
    return StatusPaneView(
        content_width=content_width,
        mode="record",
        status=data,
        file_rows=file_rows,
        scroll_indicator=indicator,
    )


def project_frame(
    state: PickerState,
    width: int | None = None,
    height: int | None = None,
    *,
    home: str | None = None,
) -> FrameDescription:
    """Describe the frame for ``state`` at ``width`` x ``height`` cells.

    Dimensions default to the ones stored on ``state``. Scroll offsets are
    clamped for display only; ``state`` is never modified.
    """
    frame_width = state.width if width is None else width
    frame_height = state.height if height is None else height
    left_width, right_width = pane_content_widths(frame_width)
    return FrameDescription(
        width=frame_width,
        height=frame_height,
        list_pane=_project_list_pane(state, left_width, frame_height, home),
        status_pane=_project_status_pane(state, right_width, frame_height),
        footer=FOOTER_TEXT,
    )
