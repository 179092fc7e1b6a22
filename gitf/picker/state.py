from __future__ import annotations

from dataclasses import dataclass

from ..git_status import StatusData
from ..scanner import Repository
from .layout import MAX_LIST_ROWS


@dataclass
class PickerState:
    repositories: tuple[Repository, ...]
    filtered: list[Repository]
    query: str = ""
    selected_idx: int = 0
    list_offset: int = 0
    status_offset: int = 0
    width: int = 80
    height: int = 24
    max_list_rows: int = MAX_LIST_ROWS
    status_data: StatusData | None = None
    status_error: str | None = None
    status_loading: bool = False
    # Path targeted by the most recently scheduled fetch.
    fetch_epoch: str | None = None
    dirty: bool = True

    @property
    def highlighted(self) -> Repository | None:
        if not self.filtered:
            return None
        return self.filtered[self.selected_idx]

    @property
    def highlighted_path(self) -> str | None:
        repo = self.highlighted
        return repo.path if repo is not None else None

    @property
    def status_pending(self) -> bool:
        """Whether a fetch is scheduled for the highlight but nothing is shown yet."""
        return (
            self.fetch_epoch is not None
            and self.fetch_epoch == self.highlighted_path
            and self.status_data is None
            and self.status_error is None
        )
