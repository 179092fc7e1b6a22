"""Per-repository git status collection and remote URL helpers.

Shells out to ``git`` and parses its plain/porcelain output into an immutable
``StatusData`` record. Every call is independent, so several fetches for
different repositories may safely run at the same time.
"""

from __future__ import annotations

import logging
import re
import subprocess
from dataclasses import dataclass, field

LOGGER = logging.getLogger(__name__)

_SCP_LIKE_RE = re.compile(r"^git@([^:]+):(.+?)(?:\.git)?$")
_SSH_URL_RE = re.compile(r"^ssh://git@([^/]+)/(.+?)(?:\.git)?$")


class GitStatusError(Exception):
    """Raised when git cannot describe a repository."""


@dataclass(frozen=True)
class FileStatus:
    """One changed path as reported by ``git status``."""

    change_kind: str
    filename: str


@dataclass(frozen=True)
class StatusData:
    """Snapshot of branch, tracking, stash, and working-tree state."""

    branch: str
    tracking_branch: str | None = None
    ahead_count: int = 0
    behind_count: int = 0
    stash_count: int = 0
    files: tuple[FileStatus, ...] = field(default_factory=tuple)

    @property
    def modified_count(self) -> int:
        return self._count_kind("M")

    @property
    def added_count(self) -> int:
        return self._count_kind("A")

    @property
    def deleted_count(self) -> int:
        return self._count_kind("D")

    @property
    def renamed_count(self) -> int:
        return self._count_kind("R")

    @property
    def copied_count(self) -> int:
        return self._count_kind("C")

    @property
    def untracked_count(self) -> int:
        return self._count_kind("??")

    @property
    def changed_file_count(self) -> int:
        return (
            self.modified_count
            + self.added_count
            + self.deleted_count
            + self.renamed_count
            + self.copied_count
            + self.untracked_count
        )

    def _count_kind(self, kind: str) -> int:
        return sum(1 for entry in self.files if summary_kind(entry.change_kind) == kind)


def summary_kind(change_kind: str) -> str | None:
    """Bucket a two-letter status code into one summary category.

    The first matching letter in ``M, A, D, R, C`` wins, so ``AM`` counts as
    modified. Untracked entries keep their ``??`` code.
    """
    code = change_kind.strip()
    if code == "??":
        return "??"
    for letter in ("M", "A", "D", "R", "C"):
        if letter in code:
            return letter
    return None


def _run_git(repo_path: str, args: list[str], timeout_seconds: float | None) -> subprocess.CompletedProcess[str]:
    try:
        return subprocess.run(
            ["git", "-C", repo_path, *args],
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
            timeout=timeout_seconds,
        )
    except FileNotFoundError as exc:
        raise GitStatusError("git executable not found") from exc
    except subprocess.TimeoutExpired as exc:
        raise GitStatusError(f"git {args[0]} timed out") from exc
    except OSError as exc:
        raise GitStatusError(f"git {args[0]} failed: {exc}") from exc


def _stderr_message(proc: subprocess.CompletedProcess[str]) -> str:
    message = (proc.stderr or "").strip()
    return message or f"exit status {proc.returncode}"


def parse_porcelain_status(output: str) -> tuple[FileStatus, ...]:
    """Parse ``git status --porcelain=v1 -z`` output into file entries.

    Renamed and copied entries carry an extra NUL-separated token holding the
    source path; only the destination path is kept.
    """
    entries: list[FileStatus] = []
    tokens = output.split("\0")
    index = 0
    while index < len(tokens):
        token = tokens[index]
        index += 1
        if not token:
            continue
        if len(token) < 4 or token[2] != " ":
            continue

        status = token[:2]
        entries.append(FileStatus(change_kind=status.strip(), filename=token[3:]))

        if "R" in status or "C" in status:
            index += 1

    return tuple(entries)


def parse_ahead_behind(output: str) -> tuple[int, int]:
    """Parse ``rev-list --count --left-right upstream...HEAD`` into ``(ahead, behind)``."""
    parts = output.split()
    if len(parts) != 2:
        return 0, 0
    try:
        behind = int(parts[0])
        ahead = int(parts[1])
    except ValueError:
        return 0, 0
    return ahead, behind


def get_detailed_status(repo_path: str, timeout_seconds: float | None = None) -> StatusData:
    """Collect a full ``StatusData`` record for ``repo_path``.

    Branch and file-status lookups are mandatory and raise ``GitStatusError``
    on failure. Tracking, ahead/behind, and stash lookups are best effort.
    """
    branch_proc = _run_git(repo_path, ["rev-parse", "--abbrev-ref", "HEAD"], timeout_seconds)
    if branch_proc.returncode != 0:
        raise GitStatusError(f"failed to get current branch: {_stderr_message(branch_proc)}")
    branch = branch_proc.stdout.strip()

    tracking_branch: str | None = None
    tracking_proc = _run_git(
        repo_path,
        ["rev-parse", "--abbrev-ref", "--symbolic-full-name", "@{u}"],
        timeout_seconds,
    )
    if tracking_proc.returncode == 0:
        tracking = tracking_proc.stdout.strip()
        if tracking and tracking != "@{u}":
            tracking_branch = tracking

    ahead_count = 0
    behind_count = 0
    if tracking_branch is not None:
        counts_proc = _run_git(
            repo_path,
            ["rev-list", "--count", "--left-right", f"{tracking_branch}...HEAD"],
            timeout_seconds,
        )
        if counts_proc.returncode == 0:
            ahead_count, behind_count = parse_ahead_behind(counts_proc.stdout)
        else:
            LOGGER.debug("ahead/behind lookup failed for %s: %s", repo_path, _stderr_message(counts_proc))

    stash_count = 0
    stash_proc = _run_git(repo_path, ["stash", "list"], timeout_seconds)
    if stash_proc.returncode == 0:
        stash_count = sum(1 for line in stash_proc.stdout.splitlines() if line.strip())

    status_proc = _run_git(
        repo_path,
        ["status", "--porcelain=v1", "-z", "--untracked-files=normal"],
        timeout_seconds,
    )
    if status_proc.returncode != 0:
        raise GitStatusError(f"failed to get file status: {_stderr_message(status_proc)}")

    return StatusData(
        branch=branch,
        tracking_branch=tracking_branch,
        ahead_count=ahead_count,
        behind_count=behind_count,
        stash_count=stash_count,
        files=parse_porcelain_status(status_proc.stdout),
    )


def get_remote_url(repo_path: str, timeout_seconds: float | None = 5.0) -> str:
    """Return the ``origin`` remote URL, raising ``GitStatusError`` if unset."""
    proc = _run_git(repo_path, ["config", "--get", "remote.origin.url"], timeout_seconds)
    url = proc.stdout.strip() if proc.returncode == 0 else ""
    if not url:
        raise GitStatusError("no remote configured")
    return url


def convert_to_https(git_url: str) -> str:
    """Turn an SSH or HTTPS remote URL into a browsable ``https://`` URL.

    Supports ``git@host:owner/repo.git``, ``ssh://git@host/owner/repo.git``
    and plain HTTPS remotes; a trailing ``.git`` is dropped.
    """
    git_url = git_url.strip()

    if git_url.startswith("https://"):
        return git_url.removesuffix(".git")

    match = _SCP_LIKE_RE.match(git_url)
    if match:
        return f"https://{match.group(1)}/{match.group(2)}"

    match = _SSH_URL_RE.match(git_url)
    if match:
        return f"https://{match.group(1)}/{match.group(2)}"

    raise GitStatusError(f"unsupported git URL format: {git_url}")
