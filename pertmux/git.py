"""Discovery of git worktrees via the git command line."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path


class GitError(Exception):
    """Raised when git cannot list worktrees."""


@dataclass
class WorktreeInfo:
    """A git worktree as reported by git."""

    path: str
    branch: str | None
    head_commit: str
    is_main: bool
    is_bare: bool


def _canonical(path: str) -> str:
    try:
        return str(Path(path).resolve(strict=True))
    except (OSError, RuntimeError):
        return path


def parse_worktree_output(output: str) -> list[WorktreeInfo]:
    """Parse the output of ``git worktree list --porcelain``."""
    worktrees: list[WorktreeInfo] = []
    for index, raw_block in enumerate(output.split("\n\n")):
        block = raw_block.strip()
        if not block:
            continue
        path: str | None = None
        head_commit = ""
        branch: str | None = None
        is_bare = False
        for line in block.splitlines():
            if line.startswith("worktree "):
                path = _canonical(line[len("worktree "):])
            elif line.startswith("HEAD "):
                head_commit = line[len("HEAD "):]
            elif line.startswith("branch "):
                ref = line[len("branch "):]
                branch = ref[len("refs/heads/"):] if ref.startswith("refs/heads/") else None
            elif line == "bare":
                is_bare = True
        if path is not None:
            worktrees.append(
                WorktreeInfo(
                    path=path,
                    branch=branch,
                    head_commit=head_commit,
                    is_main=index == 0,
                    is_bare=is_bare,
                )
            )
    return worktrees


def discover_worktrees(repo_path: str) -> list[WorktreeInfo]:
    """List all worktrees of the repository at ``repo_path``."""
    try:
        result = subprocess.run(
            ["git", "-C", repo_path, "worktree", "list", "--porcelain"],
            capture_output=True,
        )
    except OSError as exc:
        raise GitError(f"Failed to run git worktree list: {exc}") from exc
    if result.returncode != 0:
        stderr = result.stderr.decode("utf-8", errors="replace").strip()
        raise GitError(f"git worktree list failed: {stderr}")
    return parse_worktree_output(result.stdout.decode("utf-8", errors="replace"))