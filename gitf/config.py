"""Persistent JSON config helpers.

Stores the editor command, repository search paths, and optional file
manager/terminal overrides. A missing file means first run; invalid fields
fall back to defaults.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from pathlib import Path

from platformdirs import user_config_dir

from .launchers import detect_file_manager, detect_terminal

APP_NAME = "gitf"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
DEFAULT_EDITOR = "nvim"
DEFAULT_SEARCH_DIRS: tuple[str, ...] = ("dev", "projects", "repos", "workspaces")


def default_search_paths() -> list[str]:
    home = Path.home()
    return [str(home / name) for name in DEFAULT_SEARCH_DIRS]


@dataclass
class GitfConfig:
    """User preferences read from and written to ``config.json``."""

    editor: str = DEFAULT_EDITOR
    search_paths: list[str] = field(default_factory=default_search_paths)
    file_manager: str = ""
    terminal: str = ""
    theme: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> GitfConfig:
        """Build a config from decoded JSON, dropping invalid fields.

        Each field is validated on its own; a wrong type keeps the default
        for that field only.
        """
        config = cls()
        editor = data.get("editor")
        if isinstance(editor, str) and editor.strip():
            config.editor = editor.strip()
        search_paths = data.get("search_paths")
        if isinstance(search_paths, list):
            config.search_paths = [path for path in search_paths if isinstance(path, str) and path]
        for key in ("file_manager", "terminal"):
            value = data.get(key)
            if isinstance(value, str):
                setattr(config, key, value.strip())
        theme = data.get("theme")
        if isinstance(theme, str) and theme.strip():
            config.theme = theme.strip()
        return config

    def to_dict(self) -> dict[str, object]:
        data = asdict(self)
        if not self.file_manager:
            data.pop("file_manager")
        if not self.terminal:
            data.pop("terminal")
        if self.theme is None:
            data.pop("theme")
        return data

    def file_manager_command(self) -> str:
        """Return the configured file manager, auto-detecting when unset."""
        return self.file_manager or detect_file_manager()

    def terminal_command(self) -> str:
        """Return the configured terminal command, auto-detecting when unset."""
        return self.terminal or detect_terminal()


def default_config() -> GitfConfig:
    return GitfConfig(file_manager=detect_file_manager(), terminal=detect_terminal())


class ConfigError(Exception):
    """Raised when an existing config file cannot be read or decoded."""


def load_config(path: Path | None = None) -> GitfConfig | None:
    """Load the persisted config.

    Returns ``None`` only when the file does not exist, so callers can run
    first-time setup. An unreadable file, malformed JSON, or a top-level value
    that is not an object raises ``ConfigError`` and leaves the file alone.
    """
    config_path = path if path is not None else CONFIG_PATH
    try:
        text = config_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"failed to read config file: {exc}") from exc
    try:
        data = json.loads(text)
    except ValueError as exc:
        raise ConfigError(f"failed to parse config file: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"config file is not a JSON object: {config_path}")
    return GitfConfig.from_dict(data)


def save_config(config: GitfConfig, path: Path | None = None) -> bool:
    """Persist ``config`` as pretty-printed JSON, returning whether it was written."""
    config_path = path if path is not None else CONFIG_PATH
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(json.dumps(config.to_dict(), indent=2) + "\n", encoding="utf-8")
    except Exception:
        return False
    return True
