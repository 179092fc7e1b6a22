"""Discovery of git repositories below configured search paths."""

from __future__ import annotations

import os
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .history import RecentHistory

IGNORED_DIRS = frozenset(
    {
        "node_modules",
        "vendor",
        ".git",
        ".idea",
        ".config",
        ".cache",
        ".vscode",
        "venv",
        "venv3",
        ".venv",
        ".venv3",
        "target",
    }
)


@dataclass(frozen=True)
class Repository:
    """One selectable repository: display name plus absolute path."""

    name: str
    path: str


def is_git_repository(path: Path) -> bool:
    return (path / ".git").is_dir()


def _walk_repositories(root: Path) -> Iterable[Path]:
    for dirpath, dirnames, _filenames in os.walk(root, onerror=lambda _exc: None):
        base = Path(dirpath)
        if is_git_repository(base):
            dirnames[:] = []
            yield base
            continue
        dirnames[:] = sorted(name for name in dirnames if name not in IGNORED_DIRS)


def scan(search_paths: Iterable[str | Path]) -> list[Repository]:
    """Return repositories found under ``search_paths`` sorted by name.

    Missing or non-directory search paths are skipped. A repository directory
    is not descended into, so nested repositories are not reported. Results are
    de-duplicated by absolute path.
    """
    repos: list[Repository] = []
    seen: set[str] = set()

    for search_path in search_paths:
        root = Path(search_path).expanduser()
        if not root.is_dir():
            continue
        root = root.absolute()
        if root.name in IGNORED_DIRS:
            continue
        for repo_path in _walk_repositories(root):
            key = str(repo_path)
            if key in seen:
                continue
            seen.add(key)
            repos.append(Repository(name=repo_path.name, path=key))

    repos.sort(key=lambda repo: repo.name)
    return repos


def reorder_by_recent(repos: list[Repository], history: RecentHistory) -> list[Repository]:
    """Move recently opened repositories to the front in recency order.

    Everything else keeps name order behind them.
    """
    rank = {path: idx for idx, path in enumerate(history.paths)}
    missing = len(rank)
    return sorted(repos, key=lambda repo: (rank.get(repo.path, missing), repo.name))
