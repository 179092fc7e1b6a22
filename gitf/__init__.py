"""Public package surface for gitf.

Exports ``main`` so the picker can be started from Python code.
Most implementation lives in submodules under ``gitf``.
"""

from __future__ import annotations

__version__ = "0.3.0"


def main(*args, **kwargs):
    """Run the gitf CLI; the import is deferred so ``import gitf`` stays cheap."""
    from .cli import main as _main

    return _main(*args, **kwargs)


__all__ = ["__version__", "main"]
