"""Command-line front door for gitf.

Loads (or creates) the config, scans for repositories, runs the picker, and
opens the chosen repository in the configured editor.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from . import __version__
from .config import ConfigError, GitfConfig, load_config, save_config
from .history import load_recent, record_selection
from .launchers import open_in_editor
from .logs import setup_logging
from .picker import PickerError, run_picker
from .scanner import reorder_by_recent, scan
from .setup_wizard import SetupCancelled, run_setup
from .ui_theme import PLAIN_THEME, available_theme_names, get_theme

LOGGER = logging.getLogger(__name__)

LOG_LEVELS: tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gitf",
        description=(
            "Interactive git repository finder. Scans configured directories, "
            "lets you fuzzy-search them, and opens the selection in your editor."
        ),
    )
    parser.add_argument("--version", action="version", version=f"gitf {__version__}")
    parser.add_argument("-s", "--setup", action="store_true", help="Run the configuration wizard and exit.")
    parser.add_argument(
        "--path",
        dest="paths",
        action="append",
        metavar="DIR",
        help="Directory to scan instead of the configured search paths (repeatable).",
    )
    parser.add_argument(
        "--print",
        dest="print_path",
        action="store_true",
        help="Print the selected repository path instead of opening the editor.",
    )
    parser.add_argument(
        "--theme",
        default=None,
        help=f"UI theme name ({', '.join(available_theme_names())}).",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable color output.")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        type=str.upper,
        choices=LOG_LEVELS,
        help="Log level for the gitf log file (default: WARNING).",
    )
    return parser


def _run_setup_and_save(current: GitfConfig | None = None) -> GitfConfig:
    try:
        config = run_setup(current)
    except SetupCancelled as exc:
        raise SystemExit("Setup cancelled.") from exc
    if not save_config(config):
        raise SystemExit("Failed to save configuration.")
    return config


def _load_config_or_exit() -> GitfConfig | None:
    try:
        return load_config()
    except ConfigError as exc:
        raise SystemExit(f"failed to load config: {exc}") from exc


def handle_setup() -> None:
    current = _load_config_or_exit()
    if current is not None:
        sys.stdout.write("\nCurrent configuration:\n")
        sys.stdout.write(f"  Editor: {current.editor}\n")
        sys.stdout.write(f"  Search Paths: {', '.join(current.search_paths)}\n\n")
    _run_setup_and_save(current)
    sys.stdout.write("\nConfiguration saved.\n")


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and run one picker session."""
    args = build_parser().parse_args(argv)
    setup_logging(getattr(logging, args.log_level))

    if args.setup:
        handle_setup()
        return

    config = _load_config_or_exit()
    if config is None:
        config = _run_setup_and_save()

    search_paths = [str(Path(path).expanduser()) for path in args.paths] if args.paths else config.search_paths
    repos = reorder_by_recent(scan(search_paths), load_recent())
    LOGGER.info("found %d repositories in %d search paths", len(repos), len(search_paths))
    if not repos:
        raise SystemExit("No repositories found in search paths.")

    theme = PLAIN_THEME if args.no_color else get_theme(args.theme or config.theme)
    try:
        selected = run_picker(repos, config, theme=theme)
    except PickerError as exc:
        raise SystemExit(f"TUI error: {exc}") from exc

    if selected is None:
        return

    if args.print_path:
        sys.stdout.write(f"{selected.path}\n")
        record_selection(selected.path)
        return

    error = open_in_editor(config.editor, selected.path)
    if error is not None:
        raise SystemExit(error)
    record_selection(selected.path)


if __name__ == "__main__":
    main()
