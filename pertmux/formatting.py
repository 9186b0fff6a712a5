"""Formatting helpers for paths, token counts, times and merge status."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Sequence

from pertmux.types import AgentPane, SessionDetail

RED = "red"
GREEN = "green"
YELLOW = "yellow"
ACCENT = "accent"
DARK_GRAY = "dark_gray"

_CI_RUNNING = ("\u29d7", "CI running", ACCENT)

_MERGE_STATUS = {
    "mergeable": ("\u2713", "mergeable", GREEN),
    "not_approved": ("\u25cb", "not approved", YELLOW),
    "checking": ("\u29d7", "checking", ACCENT),
    "ci_must_pass": _CI_RUNNING,
    "ci_still_running": _CI_RUNNING,
    "broken_status": ("\u2717", "broken", RED),
    "need_rebase": ("\u21bb", "needs rebase", YELLOW),
    "blocked_status": ("\u2298", "blocked", RED),
    "discussions_not_resolved": ("\u25ce", "discussions open", YELLOW),
    "draft_status": ("\u25c7", "draft", DARK_GRAY),
    "not_open": ("\u2500", "closed", DARK_GRAY),
}


def _seconds(ts: datetime) -> int:
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return int(ts.timestamp() // 1)


def _trunc_div(a: int, b: int) -> int:
    q = abs(a) // b
    return -q if a < 0 else q


def _trunc_rem(a: int, b: int) -> int:
    r = abs(a) % b
    return -r if a < 0 else r


def shorten_path(path: str) -> str:
    """Replace the home directory prefix with ``~``."""
    home = str(Path.home())
    if path.startswith(home):
        return "~" + path[len(home):]
    return path


def format_tokens(tokens: int) -> str:
    """Compact token count such as ``1.5k`` or ``2.0M``."""
    if tokens >= 1_000_000:
        return f"{tokens / 1_000_000:.1f}M"
    if tokens >= 1_000:
        return f"{tokens / 1_000:.1f}k"
    return str(tokens)


def format_timestamp(ts: datetime) -> str:
    """UTC time of day as ``HH:MM``."""
    secs = _seconds(ts)
    hours = _trunc_div(_trunc_rem(secs, 86400), 3600)
    mins = _trunc_div(_trunc_rem(secs, 3600), 60)
    return f"{hours:02d}:{mins:02d}"


def session_duration(detail: SessionDetail) -> str | None:
    """Length of a session from creation to last update, or None if unknown."""
    if detail.session_created is None or detail.session_updated is None:
        return None
    elapsed = _seconds(detail.session_updated) - _seconds(detail.session_created)
    if elapsed < 60:
        return f"{elapsed}s"
    if elapsed < 3600:
        return f"{elapsed // 60}m"
    if elapsed < 86400:
        return f"{elapsed // 3600}h {(elapsed % 3600) // 60}m"
    return f"{elapsed // 86400}d {(elapsed % 86400) // 3600}h"


def format_date(ts: datetime) -> str:
    """UTC calendar date as ``YYYY-MM-DD``."""
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc).strftime("%Y-%m-%d")


def truncate(s: str, max_len: int) -> str:
    """Shorten ``s`` to ``max_len`` characters, ending in ``...`` where room allows."""
    if len(s) <= max_len:
        return s
    if max_len > 3:
        return s[: max_len - 3] + "..."
    return s[:max_len]


def format_elapsed(ts: datetime, now: datetime | None = None) -> str:
    """Relative age of ``ts`` such as ``3h ago``; future times count as now."""
    if now is None:
        now = datetime.now(timezone.utc)
    delta = max(_seconds(now) - _seconds(ts), 0)
    if delta < 60:
        return "just now"
    if delta < 3600:
        return f"{delta // 60}m ago"
    if delta < 86400:
        return f"{delta // 3600}h ago"
    if delta < 604800:
        return f"{delta // 86400}d ago"
    return f"{delta // 604800}w ago"


def merge_status_display(status: str | None, has_conflicts: bool | None) -> tuple[str, str, str]:
    """Icon, label and colour name for a detailed merge status."""
    if has_conflicts is True:
        return ("\u2717", "conflicts", RED)
    if status is None:
        return ("\u2500", "unknown", DARK_GRAY)
    return _MERGE_STATUS.get(status, ("?", status, DARK_GRAY))


def compute_scroll(
    line_count: int,
    selected: int,
    groups: Iterable[tuple[str, Sequence[int]]],
    panes: Sequence[AgentPane],
    visible_height: int,
) -> int:
    """Scroll offset that keeps the selected pane of a grouped list in view."""
    line_idx = 0
    flat = 0
    for _, pane_indices in groups:
        line_idx += 1
        for idx in pane_indices:
            if flat == selected:
                if line_idx + 3 > visible_height:
                    return max(line_idx - visible_height // 2, 0)
                return 0
            line_idx += 3 if panes[idx].last_response is not None else 2
            flat += 1
        line_idx += 1
    return max(line_count - visible_height, 0)