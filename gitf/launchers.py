"""External program launchers: editor, file manager, terminal, browser.

Detection follows the host platform. Convenience launches are fire-and-forget:
they run on a daemon thread, never block the picker, and only log failures.
"""

from __future__ import annotations

import logging
import os
import shlex
import shutil
import subprocess
import sys
import threading
from collections.abc import Callable

LOGGER = logging.getLogger(__name__)

LINUX_FILE_MANAGERS: tuple[str, ...] = ("nautilus", "dolphin", "thunar", "nemo", "caja")
LINUX_TERMINALS: tuple[str, ...] = ("xdg-terminal-exec", "x-terminal-emulator")
WINDOWS_TERMINALS: tuple[str, ...] = ("powershell", "wsl", "cmd")


def _first_available(candidates: tuple[str, ...]) -> str:
    for candidate in candidates:
        if shutil.which(candidate) is not None:
            return candidate
    return ""


def detect_file_manager() -> str:
    """Return the default file manager command for this platform, or ``""``."""
    if sys.platform == "darwin":
        return "open"
    if os.name == "nt":
        return "explorer"
    if sys.platform.startswith("linux"):
        return _first_available(LINUX_FILE_MANAGERS) or _first_available(("xdg-open",))
    return ""


def detect_terminal() -> str:
    """Return the default terminal emulator command for this platform, or ``""``."""
    if sys.platform == "darwin":
        return "open -a Terminal"
    if os.name == "nt":
        return _first_available(WINDOWS_TERMINALS)
    if sys.platform.startswith("linux"):
        return _first_available(LINUX_TERMINALS)
    return ""


def browser_command(url: str) -> list[str] | None:
    if sys.platform == "darwin":
        return ["open", url]
    if os.name == "nt":
        return ["cmd", "/c", "start", url]
    if sys.platform.startswith("linux"):
        return ["xdg-open", url]
    return None


def launch_detached(argv: list[str], cwd: str | None = None) -> bool:
    """Start ``argv`` without waiting for it and with stdio detached from the TUI."""
    if not argv:
        return False
    try:
        subprocess.Popen(
            argv,
            cwd=cwd,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=os.name != "nt",
        )
    except Exception as exc:
        LOGGER.debug("failed to launch %s: %s", argv[0], exc)
        return False
    return True


def run_in_background(action: Callable[..., object], *args: object, name: str = "gitf-launcher") -> threading.Thread:
    """Run ``action`` on a daemon thread and discard its result and errors."""

    def _target() -> None:
        try:
            action(*args)
        except Exception:
            LOGGER.debug("background action %s failed", name, exc_info=True)

    worker = threading.Thread(target=_target, name=name, daemon=True)
    worker.start()
    return worker


def open_file_manager(command: str, repo_path: str) -> bool:
    if not command:
        return False
    return launch_detached([command, repo_path])


def open_terminal(command: str, repo_path: str) -> bool:
    parts = shlex.split(command) if command else []
    if not parts:
        return False
    return launch_detached([*parts, repo_path], cwd=repo_path)


def open_in_browser(repo_path: str) -> bool:
    """Open the repository's ``origin`` remote in the default browser.

    Missing remotes and unsupported URL formats are silently ignored.
    """
    from .git_status import GitStatusError, convert_to_https, get_remote_url

    try:
        url = convert_to_https(get_remote_url(repo_path))
    except GitStatusError as exc:
        LOGGER.debug("no browsable remote for %s: %s", repo_path, exc)
        return False
    argv = browser_command(url)
    if argv is None:
        return False
    return launch_detached(argv)


def open_in_editor(editor: str, repo_path: str) -> str | None:
    """Run ``editor`` on ``repo_path`` in the foreground.

    Returns an error message string instead of raising for CLI-friendly handling.
    """
    cmd = shlex.split(editor) if editor else []
    if not cmd:
        return "Cannot open repository: no editor configured."
    try:
        subprocess.run([*cmd, repo_path], check=False)
    except Exception as exc:
        return f"Failed to launch editor: {exc}"
    return None
