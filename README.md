# pertmux

A library of building blocks for a dashboard that brings together three
things you juggle while working with coding agents:

- **merge requests** on your forge,
- **git worktrees** on disk (from `git worktree list` or the `wt` worktrunk tool),
- **tmux panes** running an agent such as `opencode`.

## Installation

```
pip install .
```

Running the tests needs the `test` extra:

```
pip install ".[test]"
pytest
```

## Modules

| Module | Contents |
| --- | --- |
| `pertmux.types` | `AgentPane`, `PaneStatus` (with `PaneStatusKind`), `SessionDetail`, `MessageSummary`, `TodoItem` |
| `pertmux.mr_changes` | `MrChange` and `MrChangeType`; `str(change)` gives notices such as `group/app !42: 3 new discussions` |
| `pertmux.git` | `discover_worktrees()` runs `git worktree list --porcelain`; `parse_worktree_output()` parses that text into `WorktreeInfo` objects |
| `pertmux.worktrunk` | `fetch_worktrees()`, `create_worktree()`, `remove_worktree()`, `merge_worktree()` around `wt`; `parse_worktrees()` for `wt list --format=json` output; `format_age()` |
| `pertmux.tmux` | `list_agent_panes()`, `parse_pane_listing()`, `find_or_create_pane()`, `switch_to_pane()` |
| `pertmux.read_state` | `ReadStateDb`, a small SQLite store of seen notes and last-viewed note counts; `default_db_path()` |
| `pertmux.linking` | `link_all()`, joining merge requests to worktrees (by branch) and panes (by canonical path), returning a `DashboardState` of `LinkedMergeRequest` items |
| `pertmux.formatting` | display helpers: `shorten_path`, `format_tokens`, `format_timestamp`, `format_date`, `session_duration`, `truncate`, `format_elapsed`, `merge_status_display`, `compute_scroll` |

## Example

```python
from dataclasses import dataclass

from pertmux.git import discover_worktrees
from pertmux.linking import link_all
from pertmux.read_state import ReadStateDb
from pertmux.tmux import list_agent_panes


@dataclass
class MergeRequest:
    iid: int
    title: str
    source_branch: str
    user_notes_count: int


merge_requests = [MergeRequest(42, "Add login", "feat/login", 3)]

worktrees = discover_worktrees("/path/to/repo")
panes = list_agent_panes(["opencode"])

with ReadStateDb(None) as read_state:   # None: the per-user data directory
    state = link_all(merge_requests, worktrees, panes, read_state, "group/project")

for linked in state.linked_mrs:
    where = linked.tmux_pane.pane_id if linked.tmux_pane else "no pane"
    print(linked.mr.iid, linked.mr.title, where,
          "new activity" if linked.has_new_activity else "")
```

`link_all()` accepts any objects with `iid`, `source_branch` and
`user_notes_count` attributes as merge requests.

## Behaviour worth knowing

- `ReadStateDb(None)` stores its database as `read_state.db` in the
  `pertmux` user data directory chosen by `platformdirs`; pass a path (or
  `":memory:"`) to use another. `has_new_activity()` is `False` for a merge
  request that has never been marked viewed.
- Failures of `git`, `tmux` and `wt` raise `GitError`, `TmuxError` and
  `WorktrunkError`. A tmux that reports no running server yields an empty
  pane list, and a missing `wt` binary or a failing `wt list` yields an
  empty worktree list.
- `parse_worktrees()` and `fetch_worktrees()` keep only entries whose
  `kind` is `"worktree"` and ignore unknown fields.
- `format_age()` takes Unix seconds and returns `—` for non-positive
  timestamps; `format_age()`, `format_elapsed()` and `AgentPane.time_ago()`
  take an optional `now` for reproducible output.
- `merge_status_display()` returns an icon, a label and a colour name
  (`"red"`, `"green"`, `"yellow"`, `"accent"` or `"dark_gray"`).

## What it does not do

This package is a library only. It has no command-line entry point, no
background service, no terminal interface and no client for any forge's
API: fetching merge requests, pipelines and discussions, and drawing the
dashboard, are left to the code that uses it.