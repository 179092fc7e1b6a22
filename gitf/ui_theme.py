"""UI theme definitions and selection helpers.

Themes are ANSI palettes for pane chrome, the result list, and git status
colors. The ``plain`` theme emits no escape sequences at all.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by the frame renderer."""

    name: str
    reset: str
    border: str
    accent: str
    dim: str
    selected: str
    error: str
    branch: str
    ahead: str
    behind: str
    kind_modified: str
    kind_added: str
    kind_deleted: str
    kind_renamed: str
    kind_copied: str
    kind_untracked: str

    def paint(self, style: str, text: str) -> str:
        if not style or not text:
            return text
        return f"{style}{text}{self.reset}"

    def change_kind_style(self, change_kind: str) -> str:
        code = change_kind.strip()
        if code == "??":
            return self.kind_untracked
        for letter, style in (
            ("M", self.kind_modified),
            ("A", self.kind_added),
            ("D", self.kind_deleted),
            ("R", self.kind_renamed),
            ("C", self.kind_copied),
        ):
            if letter in code:
                return style
        return ""


DEFAULT_THEME = UITheme(
    name="default",
    reset="\033[0m",
    border="\033[38;5;240m",
    accent="\033[1;38;5;205m",
    dim="\033[3;38;5;240m",
    selected="\033[1;38;5;46m",
    error="\033[38;5;196m",
    branch="\033[1;38;5;46m",
    ahead="\033[38;5;46m",
    behind="\033[38;5;196m",
    kind_modified="\033[38;5;220m",
    kind_added="\033[38;5;46m",
    kind_deleted="\033[38;5;196m",
    kind_renamed="\033[38;5;171m",
    kind_copied="\033[38;5;51m",
    kind_untracked="\033[38;5;33m",
)

OCEAN_THEME = UITheme(
    name="ocean",
    reset="\033[0m",
    border="\033[2;38;5;31m",
    accent="\033[1;38;5;45m",
    dim="\033[2;38;5;110m",
    selected="\033[1;38;5;81m",
    error="\033[38;5;203m",
    branch="\033[1;38;5;117m",
    ahead="\033[38;5;79m",
    behind="\033[38;5;203m",
    kind_modified="\033[38;5;180m",
    kind_added="\033[38;5;79m",
    kind_deleted="\033[38;5;203m",
    kind_renamed="\033[38;5;141m",
    kind_copied="\033[38;5;87m",
    kind_untracked="\033[38;5;39m",
)

PLAIN_THEME = UITheme(
    name="plain",
    reset="",
    border="",
    accent="",
    dim="",
    selected="",
    error="",
    branch="",
    ahead="",
    behind="",
    kind_modified="",
    kind_added="",
    kind_deleted="",
    kind_renamed="",
    kind_copied="",
    kind_untracked="",
)

_THEMES = {theme.name: theme for theme in (DEFAULT_THEME, OCEAN_THEME, PLAIN_THEME)}


def available_theme_names() -> tuple[str, ...]:
    return tuple(_THEMES)


def get_theme(name: str | None) -> UITheme:
    """Return the named theme, falling back to the default palette."""
    if not name:
        return DEFAULT_THEME
    return _THEMES.get(name.strip().lower(), DEFAULT_THEME)
