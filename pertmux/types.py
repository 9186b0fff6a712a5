"""Core data types describing agent panes and session details."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime, timezone

_TITLE_PREFIX = "OC | "


class PaneStatusKind(enum.Enum):
    """The kinds of state a coding-agent pane can be in."""

    IDLE = "idle"
    BUSY = "busy"
    RETRY = "retry"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class PaneStatus:
    """Status of an agent pane; retries carry an attempt count and message."""

    kind: PaneStatusKind
    attempt: int | None = None
    message: str | None = None

    @classmethod
    def idle(cls) -> PaneStatus:
        return cls(PaneStatusKind.IDLE)

    @classmethod
    def busy(cls) -> PaneStatus:
        return cls(PaneStatusKind.BUSY)

    @classmethod
    def unknown(cls) -> PaneStatus:
        return cls(PaneStatusKind.UNKNOWN)

    @classmethod
    def retry(cls, attempt: int, message: str) -> PaneStatus:
        return cls(PaneStatusKind.RETRY, attempt, message)


def _epoch_seconds(ts: datetime) -> int:
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return int(ts.timestamp() // 1)


@dataclass
class AgentPane:
    """A tmux pane running a coding agent, plus what is known of its session."""

    pane_id: str
    session_name: str
    window_index: int
    pane_index: int
    pane_title: str
    pane_path: str
    pane_pid: int
    pane_command: str
    status: PaneStatus = field(default_factory=PaneStatus.unknown)
    db_session_title: str | None = None
    agent: str | None = None
    model: str | None = None
    last_activity: datetime | None = None
    db_session_id: str | None = None
    last_response: str | None = None

    def display_title(self) -> str:
        """Session title if known, else the pane title without the agent prefix."""
        if self.db_session_title is not None:
            return self.db_session_title
        if self.pane_title.startswith(_TITLE_PREFIX):
            return self.pane_title[len(_TITLE_PREFIX):]
        return self.pane_title

    def display_model(self) -> str:
        return self.model if self.model is not None else "unknown"

    def display_agent(self) -> str:
        return self.agent if self.agent is not None else "unknown"

    def time_ago(self, now: datetime | None = None) -> str | None:
        """Human-readable age of the last activity, or None if unknown or in the future."""
        if self.last_activity is None:
            return None
        if now is None:
            now = datetime.now(timezone.utc)
        elapsed = _epoch_seconds(now) - _epoch_seconds(self.last_activity)
        if elapsed < 0:
            return None
        if elapsed < 60:
            return f"{elapsed}s ago"
        if elapsed < 3600:
            return f"{elapsed // 60}m ago"
        if elapsed < 86400:
            return f"{elapsed // 3600}h ago"
        return f"{elapsed // 86400}d ago"


@dataclass
class MessageSummary:
    """A single message turn for the timeline."""

    role: str
    timestamp: datetime
    agent: str | None = None
    model: str | None = None
    output_tokens: int = 0
    text_preview: str | None = None


@dataclass
class TodoItem:
    """A todo item from the session."""

    content: str
    status: str
    priority: str


@dataclass
class SessionDetail:
    """Detailed information about a session, shown in the detail panel."""

    session_id: str = ""
    title: str = ""
    directory: str = ""
    message_count: int = 0
    input_tokens: int = 0
    output_tokens: int = 0
    session_created: datetime | None = None
    session_updated: datetime | None = None
    summary_files: int | None = None
    summary_additions: int | None = None
    summary_deletions: int | None = None
    messages: list[MessageSummary] = field(default_factory=list)
    todos: list[TodoItem] = field(default_factory=list)