"""Worktree listing and management through the worktrunk (``wt``) command."""

from __future__ import annotations

import json
import subprocess
import time
from dataclasses import dataclass
from typing import Any

_NO_AGE = "\u2014"
# Largest second count a timestamp may hold (end of year 9999, UTC).
_MAX_TIMESTAMP = 253_402_300_799


class WorktrunkError(Exception):
    """Raised when worktrunk fails or its output cannot be understood."""


@dataclass
class WtCommit:
    """The commit a worktree points at."""

    sha: str
    short_sha: str
    message: str = ""
    timestamp: int = 0


@dataclass
class WtDiff:
    """Line counts of uncommitted changes."""

    added: int = 0
    deleted: int = 0


@dataclass
class WtWorkingTree:
    """State of a worktree's working directory."""

    staged: bool = False
    modified: bool = False
    untracked: bool = False
    renamed: bool = False
    deleted: bool = False
    diff: WtDiff | None = None


@dataclass
class WtMain:
    """How far a branch is ahead of and behind the main branch."""

    ahead: int = 0
    behind: int = 0


@dataclass
class WtRemote:
    """The upstream a branch tracks and how far it has diverged."""

    name: str = ""
    branch: str = ""
    ahead: int = 0
    behind: int = 0


@dataclass
class WtWorktreeState:
    """Extra state of the worktree itself."""

    state: str | None = None
    detached: bool = False


def _optional(data: dict, key: str, build):
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, dict):
        raise WorktrunkError(f"field {key!r} must be an object")
    return build(value)


def _commit(data: dict) -> WtCommit:
    try:
        return WtCommit(
            sha=str(data["sha"]),
            short_sha=str(data["short_sha"]),
            message=data.get("message") or "",
            timestamp=int(data.get("timestamp") or 0),
        )
    except KeyError as exc:
        raise WorktrunkError(f"commit is missing field {exc.args[0]!r}") from exc


def _diff(data: dict) -> WtDiff:
    return WtDiff(added=int(data.get("added", 0)), deleted=int(data.get("deleted", 0)))


def _working_tree(data: dict) -> WtWorkingTree:
    return WtWorkingTree(
        staged=bool(data.get("staged", False)),
        modified=bool(data.get("modified", False)),
        untracked=bool(data.get("untracked", False)),
        renamed=bool(data.get("renamed", False)),
        deleted=bool(data.get("deleted", False)),
        diff=_optional(data, "diff", _diff),
    )


def _main(data: dict) -> WtMain:
    return WtMain(ahead=int(data.get("ahead", 0)), behind=int(data.get("behind", 0)))


def _remote(data: dict) -> WtRemote:
    return WtRemote(
        name=data.get("name") or "",
        branch=data.get("branch") or "",
        ahead=int(data.get("ahead", 0)),
        behind=int(data.get("behind", 0)),
    )


def _worktree_state(data: dict) -> WtWorktreeState:
    return WtWorktreeState(state=data.get("state"), detached=bool(data.get("detached", False)))


@dataclass
class WtWorktree:
    """One entry of ``wt list --format=json``."""

    branch: str | None
    kind: str
    commit: WtCommit
    path: str | None = None
    working_tree: WtWorkingTree | None = None
    main_state: str | None = None
    main: WtMain | None = None
    remote: WtRemote | None = None
    worktree: WtWorktreeState | None = None
    is_main: bool = False
    is_current: bool = False
    is_previous: bool = False
    symbols: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> WtWorktree:
        """Build an entry from decoded JSON; unknown fields are ignored."""
        if not isinstance(data, dict):
            raise WorktrunkError("worktree entry must be an object")
        if "kind" not in data:
            raise WorktrunkError("worktree entry is missing field 'kind'")
        if not isinstance(data.get("commit"), dict):
            raise WorktrunkError("worktree entry is missing field 'commit'")
        return cls(
            branch=data.get("branch"),
            kind=str(data["kind"]),
            commit=_commit(data["commit"]),
            path=data.get("path"),
            working_tree=_optional(data, "working_tree", _working_tree),
            main_state=data.get("main_state"),
            main=_optional(data, "main", _main),
            remote=_optional(data, "remote", _remote),
            worktree=_optional(data, "worktree", _worktree_state),
            is_main=bool(data.get("is_main", False)),
            is_current=bool(data.get("is_current", False)),
            is_previous=bool(data.get("is_previous", False)),
            symbols=data.get("symbols"),
        )


def parse_worktrees(text: str) -> list[WtWorktree]:
    """Parse ``wt list --format=json`` output, keeping only real worktrees."""
    if not text.strip():
        return []
    try:
        entries = json.loads(text)
    except json.JSONDecodeError as exc:
        raise WorktrunkError(f"invalid worktrunk output: {exc}") from exc
    if not isinstance(entries, list):
        raise WorktrunkError("worktrunk output must be a JSON array")
    parsed = (WtWorktree.from_dict(entry) for entry in entries)
    return [wt for wt in parsed if wt.kind == "worktree"]


def _run_wt(args: list[str]) -> subprocess.CompletedProcess:
    return subprocess.run(["wt", *args], capture_output=True)


def _run_checked(args: list[str]) -> None:
    try:
        result = _run_wt(args)
    except OSError as exc:
        raise WorktrunkError(str(exc)) from exc
    if result.returncode != 0:
        raise WorktrunkError(result.stderr.decode("utf-8", errors="replace").strip())


def fetch_worktrees(local_path: str) -> list[WtWorktree]:
    """List worktrees of a repository; empty if worktrunk is missing or fails."""
    try:
        result = _run_wt(["-C", local_path, "list", "--format=json"])
    except FileNotFoundError:
        return []
    except OSError as exc:
        raise WorktrunkError(str(exc)) from exc
    if result.returncode != 0:
        return []
    return parse_worktrees(result.stdout.decode("utf-8", errors="replace"))


def create_worktree(local_path: str, branch: str) -> str:
    """Create a new worktree on a new branch."""
    _run_checked(
        ["-C", local_path, "switch", "--create", branch, "--no-cd", "-y", "--no-verify"]
    )
    return f"Created worktree: {branch}"


def remove_worktree(local_path: str, branch: str) -> str:
    """Remove the worktree of a branch."""
    _run_checked(
        ["-C", local_path, "remove", branch, "-y", "-f", "--foreground", "--no-verify"]
    )
    return f"Removed worktree: {branch}"


def merge_worktree(worktree_path: str) -> str:
    """Merge a worktree into the default branch and clean it up."""
    _run_checked(["-C", worktree_path, "merge", "-y", "--no-verify"])
    return "Merged and cleaned up"


def format_age(timestamp: int, now: int | None = None) -> str:
    """Relative age of a Unix timestamp in seconds, such as ``5m ago``."""
    if timestamp <= 0 or timestamp > _MAX_TIMESTAMP:
        return _NO_AGE
    if now is None:
        now = int(time.time())
    delta = max(now - timestamp, 0)
    if delta < 60:
        return "just now"
    if delta < 3600:
        return f"{delta // 60}m ago"
    if delta < 86400:
        return f"{delta // 3600}h ago"
    return f"{delta // 86400}d ago"