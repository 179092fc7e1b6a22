"""ANSI frame composition for the two-pane picker.

Turns a ``FrameDescription`` into styled terminal rows: bordered list and
status panes side by side, followed by the key-help footer.
"""

from __future__ import annotations

import os
import sys

from ..ansi import clip_ansi_line, display_width, fit_ansi_line
from ..git_status import StatusData
from ..ui_theme import UITheme
from .layout import (
    FOOTER_HEIGHT,
    PANEL_CHROME_ROWS,
    SEARCH_BOX_MAX_WIDTH,
    FrameDescription,
    ListPaneView,
    StatusPaneView,
)


def _box(lines: list[str], content_width: int, height: int, theme: UITheme) -> list[str]:
    """Wrap ``lines`` in a rounded border with one cell of padding."""
    inner_rows = max(1, height - PANEL_CHROME_ROWS)
    horizontal = "─" * (content_width + 2)
    side = theme.paint(theme.border, "│")
    blank = f"{side}{' ' * (content_width + 2)}{side}"
    out = [theme.paint(theme.border, f"╭{horizontal}╮"), blank]
    for row in range(inner_rows):
        text = lines[row] if row < len(lines) else ""
        out.append(f"{side} {fit_ansi_line(text, content_width)} {side}")
    out.append(blank)
    out.append(theme.paint(theme.border, f"╰{horizontal}╯"))
    return out


def list_pane_lines(pane: ListPaneView, theme: UITheme) -> list[str]:
    box_width = max(1, min(pane.content_width - 4, SEARCH_BOX_MAX_WIDTH))
    lines = [
        theme.paint(theme.dim, "Search:"),
        theme.paint(theme.accent, f"╭{'─' * (box_width + 2)}╮"),
        f"{theme.paint(theme.accent, '│')} {fit_ansi_line(pane.query, box_width)} {theme.paint(theme.accent, '│')}",
        theme.paint(theme.accent, f"╰{'─' * (box_width + 2)}╯"),
        "",
    ]
    if not pane.rows:
        lines.append(theme.paint(theme.dim, pane.empty_message))
        return lines

    for row in pane.rows:
        label = f"{row.name} ({row.display_path})"
        if row.highlighted:
            lines.append(theme.paint(theme.selected, f"▶ {label}"))
        else:
            lines.append(f"  {label}")
    lines.append(theme.paint(theme.dim, pane.pagination))
    return lines


def _stats_lines(data: StatusData, theme: UITheme) -> list[str]:
    lines: list[str] = []
    ahead_behind: list[str] = []
    if data.ahead_count > 0:
        ahead_behind.append(theme.paint(theme.ahead, f"↑ {data.ahead_count}"))
    if data.behind_count > 0:
        ahead_behind.append(theme.paint(theme.behind, f"↓ {data.behind_count}"))
    if data.stash_count > 0:
        ahead_behind.append(f"stash {data.stash_count}")
    if ahead_behind:
        lines.append("  ".join(ahead_behind))

    changed = data.changed_file_count
    if changed > 0:
        summary = f"{changed} file{'' if changed == 1 else 's'} changed"
        breakdown = [
            theme.paint(style, f"{sign}{count}")
            for sign, count, style in (
                ("+", data.added_count, theme.kind_added),
                ("~", data.modified_count, theme.kind_modified),
                ("-", data.deleted_count, theme.kind_deleted),
                ("R", data.renamed_count, theme.kind_renamed),
                ("C", data.copied_count, theme.kind_copied),
                ("?", data.untracked_count, theme.kind_untracked),
            )
            if count > 0
        ]
        lines.append(f"{summary} ({' '.join(breakdown)})")
    return lines


def status_pane_lines(pane: StatusPaneView, theme: UITheme) -> list[str]:
    lines = [theme.paint(theme.accent, "Git Status"), ""]
    if pane.mode == "error":
        lines.append(theme.paint(theme.error, "Error:"))
        lines.append("")
        lines.extend(theme.paint(theme.error, part) for part in pane.message.splitlines() or [""])
        return lines
    if pane.mode != "record" or pane.status is None:
        lines.append(theme.paint(theme.dim, pane.message))
        return lines

    data = pane.status
    lines.append(theme.paint(theme.branch, f"* {data.branch}"))
    if data.tracking_branch:
        lines.append(theme.paint(theme.dim, f"└─ tracking: {data.tracking_branch}"))
    lines.append("")
    stats = _stats_lines(data, theme)
    if stats:
        lines.extend(stats)
        lines.append("")
    lines.append(theme.paint(theme.accent, "Files"))
    if not data.files:
        lines.append(theme.paint(theme.dim, "✓ Working tree clean"))
    for entry in pane.file_rows:
        lines.append(theme.paint(theme.change_kind_style(entry.change_kind), f"{entry.change_kind:<2}  {entry.filename}"))
    if pane.scroll_indicator:
        lines.append("")
        lines.append(theme.paint(theme.dim, pane.scroll_indicator))
    return lines


def _center(text: str, width: int) -> str:
    text = clip_ansi_line(text, width)
    pad = max(0, (width - display_width(text)) // 2)
    return " " * pad + text


def render_frame(frame: FrameDescription, theme: UITheme) -> list[str]:
    """Compose the full screen as a list of styled rows."""
    pane_height = max(PANEL_CHROME_ROWS + 1, frame.height - FOOTER_HEIGHT)
    left = _box(list_pane_lines(frame.list_pane, theme), frame.list_pane.content_width, pane_height, theme)
    right = _box(status_pane_lines(frame.status_pane, theme), frame.status_pane.content_width, pane_height, theme)
    width = max(1, frame.width)
    rows = [clip_ansi_line(f"{left_row} {right_row}", width) for left_row, right_row in zip(left, right)]
    rows.append(theme.paint(theme.dim, _center(frame.footer, width - 1)))
    return rows[: max(1, frame.height)]


def write_frame(rows: list[str], fd: int | None = None) -> None:
    """Clear the screen and write ``rows`` in one ``os.write`` call."""
    out: list[str] = ["\033[H\033[J"]
    for idx, row in enumerate(rows):
        if idx:
            out.append("\r\n")
        out.append(row)
        if "\033" in row:
            out.append("\033[0m")
    target = sys.stdout.fileno() if fd is None else fd
    os.write(target, "".join(out).encode("utf-8", errors="replace"))
