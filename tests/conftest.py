"""Pytest bootstrap for local source imports.

The ``pytest`` console script can run with a sys.path that excludes the
repository root. Ensure ``import gitf`` resolves to the local package, and
keep config, history, and log files of test runs out of the user's home.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest


PROJECT_ROOT = Path(__file__).resolve().parent.parent
PROJECT_ROOT_STR = str(PROJECT_ROOT)

if PROJECT_ROOT_STR not in sys.path:
    sys.path.insert(0, PROJECT_ROOT_STR)


@pytest.fixture(autouse=True)
def _isolate_user_files(tmp_path, monkeypatch):
    monkeypatch.setenv("GITF_LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.setattr("gitf.config.CONFIG_PATH", tmp_path / "config" / "config.json")
    monkeypatch.setattr("gitf.history.RECENT_PATH", tmp_path / "config" / "recent.json")
