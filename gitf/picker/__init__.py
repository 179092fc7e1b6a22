"""Interactive repository picker.

This package groups the selection model, status fetch scheduling, frame
projection, key dispatch, and the terminal event loop (`run_picker`).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .loop import PickerError, PickerLoopTiming


def run_picker(*args, **kwargs):
    """Lazily import the loop to keep ``import gitf.picker`` free of tty modules."""
    from .loop import run_picker as _run_picker

    return _run_picker(*args, **kwargs)


def __getattr__(name: str):
    if name in {"PickerError", "PickerLoopTiming"}:
        from . import loop as _loop

        return getattr(_loop, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "PickerError",
    "PickerLoopTiming",
    "run_picker",
]
