"""Module entrypoint for ``python -m gitf``.

This keeps module-mode execution behavior identical to the console script.
All argument parsing and session setup happen in ``gitf.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
