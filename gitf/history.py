"""Most-recently-opened repository list.

Kept as a small JSON file next to the config. Reads and writes never raise;
a damaged file simply behaves like an empty history.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path

from platformdirs import user_config_dir

from .config import APP_NAME

MAX_RECENT = 10
RECENT_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / "recent.json"


@dataclass
class RecentHistory:
    paths: list[str] = field(default_factory=list)

    def add(self, repo_path: str) -> None:
        """Move ``repo_path`` to the front, keeping at most ``MAX_RECENT`` entries."""
        remaining = [path for path in self.paths if path != repo_path]
        self.paths = [repo_path, *remaining][:MAX_RECENT]


def load_recent(path: Path | None = None) -> RecentHistory:
    recent_path = path if path is not None else RECENT_PATH
    try:
        data = json.loads(recent_path.read_text(encoding="utf-8"))
    except Exception:
        return RecentHistory()
    if not isinstance(data, dict):
        return RecentHistory()
    raw_paths = data.get("repositories")
    if not isinstance(raw_paths, list):
        return RecentHistory()
    paths = [value for value in raw_paths if isinstance(value, str) and value]
    return RecentHistory(paths=paths[:MAX_RECENT])


def save_recent(history: RecentHistory, path: Path | None = None) -> bool:
    recent_path = path if path is not None else RECENT_PATH
    try:
        recent_path.parent.mkdir(parents=True, exist_ok=True)
        recent_path.write_text(
            json.dumps({"repositories": history.paths}, indent=2) + "\n",
            encoding="utf-8",
        )
    except Exception:
        return False
    return True


def record_selection(repo_path: str, path: Path | None = None) -> bool:
    """Load history, push ``repo_path`` to the front, and persist it."""
    history = load_recent(path)
    history.add(repo_path)
    return save_recent(history, path)
