"""Link merge requests, git worktrees and coding-agent tmux panes."""

__version__ = "0.1.0"

__all__ = [
    "formatting",
    "git",
    "linking",
    "mr_changes",
    "read_state",
    "tmux",
    "types",
    "worktrunk",
]