"""Tests for ANSI frame composition of the picker panes."""

from __future__ import annotations

import os
import unittest

from gitf.ansi import display_width
from gitf.git_status import FileStatus, StatusData
from gitf.picker.layout import StatusPaneView, project_frame
from gitf.picker.render import render_frame, status_pane_lines, write_frame
from gitf.picker.state import PickerState
from gitf.scanner import Repository
from gitf.ui_theme import DEFAULT_THEME, PLAIN_THEME


def _state(names: list[str], **kwargs) -> PickerState:
    repos = tuple(Repository(name, f"/home/dev/{name}") for name in names)
    return PickerState(repositories=repos, filtered=list(repos), **kwargs)


class RenderFrameTests(unittest.TestCase):
    def test_frame_fills_terminal_exactly(self) -> None:
        state = _state(["alpha", "beta"], width=100, height=30)
        rows = render_frame(project_frame(state, home="/home/dev"), PLAIN_THEME)

        self.assertEqual(len(rows), 30)
        for row in rows[:-1]:
            self.assertEqual(display_width(row), 100)
        self.assertIn("Enter: open", rows[-1])

    def test_list_pane_shows_query_highlight_and_pagination(self) -> None:
        state = _state(["alpha", "beta"], query="a", width=100, height=30)
        text = "\n".join(render_frame(project_frame(state, home="/home/dev"), PLAIN_THEME))

        self.assertIn("Search:", text)
        self.assertIn("│ a ", text)
        self.assertIn("▶ alpha (alpha)", text)
        self.assertIn("  beta (beta)", text)
        self.assertIn("(2 results)", text)

    def test_empty_view_messages(self) -> None:
        state = _state([], width=100, height=30)
        text = "\n".join(render_frame(project_frame(state), PLAIN_THEME))
        self.assertIn("No repositories found", text)
        self.assertIn("No repository selected", text)

    def test_status_record_content(self) -> None:
        state = _state(["alpha"], width=120, height=40)
        state.status_data = StatusData(
            branch="main",
            tracking_branch="origin/main",
            ahead_count=2,
            behind_count=1,
            stash_count=3,
            files=(FileStatus("M", "src/app.py"), FileStatus("??", "notes.md")),
        )
        text = "\n".join(render_frame(project_frame(state), PLAIN_THEME))

        self.assertIn("Git Status", text)
        self.assertIn("* main", text)
        self.assertIn("└─ tracking: origin/main", text)
        self.assertIn("↑ 2", text)
        self.assertIn("↓ 1", text)
        self.assertIn("stash 3", text)
        self.assertIn("2 files changed (~1 ?1)", text)
        self.assertIn("M   src/app.py", text)
        self.assertIn("??  notes.md", text)

    def test_renames_and_copies_are_summarised(self) -> None:
        status = StatusData(branch="main", files=(FileStatus("R", "new.py"), FileStatus("C", "copy.py")))
        pane = StatusPaneView(content_width=40, mode="record", status=status)
        lines = status_pane_lines(pane, PLAIN_THEME)
        self.assertIn("2 files changed (R1 C1)", lines)

    def test_clean_working_tree(self) -> None:
        pane = StatusPaneView(content_width=40, mode="record", status=StatusData(branch="main"))
        lines = status_pane_lines(pane, PLAIN_THEME)
        self.assertIn("✓ Working tree clean", lines)
        self.assertFalse(any("changed" in line for line in lines))

    def test_error_mode(self) -> None:
        pane = StatusPaneView(content_width=40, mode="error", message="failed to get current branch: boom")
        lines = status_pane_lines(pane, PLAIN_THEME)
        self.assertEqual(lines[2:], ["Error:", "", "failed to get current branch: boom"])

    def test_loading_mode(self) -> None:
        pane = StatusPaneView(content_width=40, mode="loading", message="Loading git status...")
        self.assertIn("Loading git status...", status_pane_lines(pane, PLAIN_THEME))

    def test_colored_theme_keeps_row_widths(self) -> None:
        state = _state(["alpha", "beta"], width=90, height=26)
        state.status_data = StatusData(branch="main", files=(FileStatus("D", "gone.py"),))
        rows = render_frame(project_frame(state), DEFAULT_THEME)
        self.assertEqual(len(rows), 26)
        for row in rows[:-1]:
            self.assertEqual(display_width(row), 90)
        self.assertIn("\033[", rows[0])

    def test_plain_theme_emits_no_escapes(self) -> None:
        state = _state(["alpha"], width=90, height=26)
        rows = render_frame(project_frame(state), PLAIN_THEME)
        self.assertFalse(any("\033" in row for row in rows))


class WriteFrameTests(unittest.TestCase):
    def test_writes_cleared_screen_with_crlf_rows(self) -> None:
        read_fd, write_fd = os.pipe()
        try:
            write_frame(["one", "\033[1mtwo"], write_fd)
            payload = os.read(read_fd, 4096).decode("utf-8")
        finally:
            os.close(read_fd)
            os.close(write_fd)

        self.assertEqual(payload, "\033[H\033[Jone\r\n\033[1mtwo\033[0m")


if __name__ == "__main__":
    unittest.main()
