"""First-run configuration prompts.

Asks for the editor command and the directories to scan, offering current
values as defaults. Runs on the plain terminal before any raw-mode session.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Callable
from typing import TextIO

from .config import GitfConfig, default_config


class SetupCancelled(Exception):
    """The user aborted the setup prompts."""


def parse_search_paths(raw: str) -> list[str]:
    """Split a comma-separated path list, expanding ``~`` and dropping blanks."""
    paths: list[str] = []
    for part in raw.split(","):
        value = part.strip()
        if not value:
            continue
        expanded = os.path.expanduser(value)
        if expanded not in paths:
            paths.append(expanded)
    return paths


def _collapse_home(path: str) -> str:
    home = os.path.expanduser("~")
    if path == home or path.startswith(home.rstrip("/") + "/"):
        return "~" + path[len(home):]
    return path


def _ask(prompt: str, default: str, input_fn: Callable[[str], str]) -> str:
    suffix = f" [{default}]" if default else ""
    try:
        answer = input_fn(f"{prompt}{suffix}: ")
    except (EOFError, KeyboardInterrupt) as exc:
        raise SetupCancelled("setup cancelled") from exc
    return answer.strip() or default


def run_setup(
    current: GitfConfig | None = None,
    *,
    input_fn: Callable[[str], str] = input,
    output: TextIO | None = None,
) -> GitfConfig:
    """Prompt for editor and search paths and return the resulting config.

    Launcher overrides and theme are carried over from ``current``.
    """
    out = output if output is not None else sys.stdout
    base = current if current is not None else default_config()

    out.write("gitf setup\n\n")
    editor = _ask("Editor command (e.g. vim, nvim, code, zed)", base.editor, input_fn)
    default_paths = ", ".join(_collapse_home(path) for path in base.search_paths)
    while True:
        raw_paths = _ask("Directories to scan, comma separated", default_paths, input_fn)
        search_paths = parse_search_paths(raw_paths)
        if search_paths:
            break
        out.write("Please enter at least one directory.\n")

    return GitfConfig(
        editor=editor,
        search_paths=search_paths,
        file_manager=base.file_manager,
        terminal=base.terminal,
        theme=base.theme,
    )
