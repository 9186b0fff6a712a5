"""Linking merge requests to local worktrees and the tmux panes working in them."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable

from pertmux.git import WorktreeInfo
from pertmux.read_state import ReadStateDb
from pertmux.types import AgentPane


@dataclass
class LinkedMergeRequest:
    """A merge request with the worktree and pane that belong to it, if any."""

    mr: Any
    worktree: WorktreeInfo | None
    tmux_pane: AgentPane | None
    has_new_activity: bool


@dataclass
class DashboardState:
    """Everything the dashboard shows about one project's merge requests."""

    linked_mrs: list[LinkedMergeRequest] = field(default_factory=list)


def _canonical(path: str) -> Path | None:
    try:
        return Path(path).resolve(strict=True)
    except (OSError, RuntimeError):
        return None


def link_all(
    mrs: Iterable[Any],
    worktrees: Iterable[WorktreeInfo],
    panes: Iterable[AgentPane],
    read_state: ReadStateDb,
    project: str,
) -> DashboardState:
    """Match each merge request to a worktree by branch and to a pane by path.

    Merge requests need ``iid``, ``source_branch`` and ``user_notes_count``.
    """
    worktree_by_branch = {wt.branch: wt for wt in worktrees if wt.branch is not None}

    pane_by_path: dict[Path, AgentPane] = {}
    for pane in panes:
        canonical = _canonical(pane.pane_path)
        if canonical is not None:
            pane_by_path[canonical] = pane

    linked: list[LinkedMergeRequest] = []
    for mr in mrs:
        worktree = worktree_by_branch.get(mr.source_branch)
        pane = None
        if worktree is not None:
            canonical = _canonical(worktree.path)
            if canonical is not None:
                pane = pane_by_path.get(canonical)
        linked.append(
            LinkedMergeRequest(
                mr=mr,
                worktree=worktree,
                tmux_pane=pane,
                has_new_activity=read_state.has_new_activity(
                    project, mr.iid, mr.user_notes_count
                ),
            )
        )
    return DashboardState(linked_mrs=linked)