"""Interactive event loop for the repository picker.

Each iteration feeds elapsed debounce timers, finished status fetches, and
terminal resizes into the model, redraws when state is dirty, then waits for
one key. Everything that mutates picker state happens on this thread.
"""

from __future__ import annotations

import os
import shutil
import sys
import termios
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from functools import partial

from .. import launchers
from ..config import GitfConfig
from ..git_status import get_detailed_status
from ..input import EOF_KEY, read_key
from ..scanner import Repository
from ..terminal import TerminalController
from ..ui_theme import DEFAULT_THEME, UITheme
from .events import KeyPressed, Resized
from .fetcher import DEBOUNCE_SECONDS, StatusFetchScheduler, StatusProvider
from .keys import PickerKeyActions, PickerKeyHandler, dispatch_event
from .layout import project_frame
from .model import SelectionModel, StatusFetchCallbacks
from .render import render_frame, write_frame


class PickerError(RuntimeError):
    """The interactive session could not be started."""


@dataclass(frozen=True)
class PickerLoopTiming:
    """Timing constants controlling interactive loop behavior."""

    debounce_seconds: float = DEBOUNCE_SECONDS
    idle_poll_ms: int = 120


def _read_timeout_ms(scheduler: StatusFetchScheduler, timing: PickerLoopTiming) -> int:
    """Wake up in time for the next debounce timer, else poll at the idle rate."""
    remaining = scheduler.seconds_until_next_timer()
    if remaining is None:
        return timing.idle_poll_ms
    return max(0, min(timing.idle_poll_ms, int(remaining * 1000) + 1))


def run_event_loop(
    model: SelectionModel,
    scheduler: StatusFetchScheduler,
    key_handler: PickerKeyHandler,
    *,
    read_key_fn: Callable[[int], str],
    terminal_size: Callable[[], tuple[int, int]],
    draw: Callable[[SelectionModel], None],
    timing: PickerLoopTiming = PickerLoopTiming(),
) -> Repository | None:
    """Run until a quit or confirm key and return the confirmed repository.

    ``read_key_fn`` receives a timeout in milliseconds and returns ``""`` when
    nothing was typed. ``EOF_KEY`` ends the session without a selection.
    """
    model.start()
    while True:
        width, height = terminal_size()
        if (width, height) != (model.state.width, model.state.height):
            dispatch_event(Resized(width=width, height=height), model, key_handler)
        for event in scheduler.due_events():
            dispatch_event(event, model, key_handler)
        for result in scheduler.drain_results():
            dispatch_event(result, model, key_handler)

        if model.state.dirty:
            draw(model)
            model.state.dirty = False

        key = read_key_fn(_read_timeout_ms(scheduler, timing))
        if key == "":
            continue
        if key == EOF_KEY:
            return None
        outcome = dispatch_event(KeyPressed(key=key), model, key_handler)
        if outcome is not None:
            return outcome.selection


def build_key_actions(config: GitfConfig) -> PickerKeyActions:
    """Wire launch keys to detached background launches."""

    def open_file_manager(repo: Repository) -> None:
        launchers.run_in_background(
            launchers.open_file_manager, config.file_manager_command(), repo.path, name="gitf-file-manager"
        )

    def open_terminal(repo: Repository) -> None:
        launchers.run_in_background(
            launchers.open_terminal, config.terminal_command(), repo.path, name="gitf-terminal"
        )

    def open_in_browser(repo: Repository) -> None:
        launchers.run_in_background(launchers.open_in_browser, repo.path, name="gitf-browser")

    return PickerKeyActions(
        open_file_manager=open_file_manager,
        open_terminal=open_terminal,
        open_in_browser=open_in_browser,
    )


def _terminal_size() -> tuple[int, int]:
    term = shutil.get_terminal_size((80, 24))
    return term.columns, term.lines


def run_picker(
    repositories: Sequence[Repository],
    config: GitfConfig,
    *,
    theme: UITheme = DEFAULT_THEME,
    provider: StatusProvider = get_detailed_status,
    timing: PickerLoopTiming = PickerLoopTiming(),
) -> Repository | None:
    """Show the picker on the controlling terminal and return the chosen repository.

    Returns ``None`` when the user cancels. Raises ``PickerError`` when stdin
    is not a terminal or raw mode cannot be entered.
    """
    stdin_fd = sys.stdin.fileno()
    stdout_fd = sys.stdout.fileno()
    if not os.isatty(stdin_fd):
        raise PickerError("gitf needs an interactive terminal")
    try:
        terminal = TerminalController(stdin_fd, stdout_fd)
    except termios.error as exc:
        raise PickerError(f"cannot control terminal: {exc}") from exc

    scheduler = StatusFetchScheduler(provider, debounce_seconds=timing.debounce_seconds)
    width, height = _terminal_size()
    model = SelectionModel(
        repositories,
        StatusFetchCallbacks(
            schedule_debounced_fetch=scheduler.schedule_debounced_fetch,
            start_fetch=scheduler.start_fetch,
        ),
        width=width,
        height=height,
    )
    key_handler = PickerKeyHandler(model, build_key_actions(config))

    def draw(current: SelectionModel) -> None:
        write_frame(render_frame(project_frame(current.state), theme), stdout_fd)

    try:
        with terminal.raw_mode():
            return run_event_loop(
                model,
                scheduler,
                key_handler,
                read_key_fn=partial(read_key, stdin_fd),
                terminal_size=_terminal_size,
                draw=draw,
                timing=timing,
            )
    except termios.error as exc:
        raise PickerError(f"cannot control terminal: {exc}") from exc
