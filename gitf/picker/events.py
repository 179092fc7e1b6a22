"""Events consumed by the picker event loop.

Key presses, terminal resizes, elapsed debounce timers, and finished status
fetches all flow through the same single-consumer dispatch.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from ..git_status import StatusData


@dataclass(frozen=True)
class KeyPressed:
    key: str


@dataclass(frozen=True)
class Resized:
    width: int
    height: int


@dataclass(frozen=True)
class DebounceElapsed:
    """A debounce timer scheduled for ``path`` has fired."""

    path: str


@dataclass(frozen=True)
class StatusFetched:
    """Result of one background status fetch, tagged with the path it was for.

    Exactly one of ``data`` and ``error`` is set.
    """

    path: str
    data: StatusData | None = None
    error: str | None = None


PickerEvent = Union[KeyPressed, Resized, DebounceElapsed, StatusFetched]
