import json
import subprocess
import time
from unittest import mock

import pytest

from pertmux.worktrunk import (
    WorktrunkError,
    WtWorktree,
    create_worktree,
    fetch_worktrees,
    format_age,
    merge_worktree,
    parse_worktrees,
    remove_worktree,
)


def _clean_tree():
    return {
        "staged": False,
        "modified": False,
        "untracked": False,
        "renamed": False,
        "deleted": False,
        "diff": {"added": 0, "deleted": 0},
    }


def _remote(branch):
    return {"name": "origin", "branch": branch, "ahead": 0, "behind": 0}


FULL_LISTING = [
    {
        "branch": "trunk",
        "path": "/home/example/repo",
        "kind": "worktree",
        "commit": {
            "sha": "1111111111111111111111111111111111111111",
            "short_sha": "1111111",
            "message": "Merge feature into trunk",
            "timestamp": 1700000000,
        },
        "working_tree": _clean_tree(),
        "main_state": "is_main",
        "remote": _remote("trunk"),
        "worktree": {"detached": False},
        "is_main": True,
        "is_current": True,
        "is_previous": False,
        "statusline": "trunk ^|",
        "symbols": "^|",
    },
    {
        "branch": "feature/cleanup",
        "path": "/home/example/repo-worktrees/cleanup",
        "kind": "worktree",
        "commit": {
            "sha": "2222222222222222222222222222222222222222",
            "short_sha": "2222222",
            "message": "Tidy up handlers",
            "timestamp": 1700000900,
        },
        "working_tree": _clean_tree(),
        "main_state": "diverged",
        "main": {"ahead": 2, "behind": 12},
        "remote": _remote("feature/cleanup"),
        "worktree": {"state": "branch_worktree_mismatch", "detached": False},
        "is_main": False,
        "is_current": False,
        "is_previous": False,
        "statusline": "feature/cleanup x|",
        "symbols": "x|",
    },
]

FULL_JSON = json.dumps(FULL_LISTING)

NOW = 1_772_700_000


def _completed(returncode=0, stdout=b"", stderr=b""):
    return subprocess.CompletedProcess(["wt"], returncode, stdout=stdout, stderr=stderr)


def _entry(**fields):
    base = {
        "kind": "worktree",
        "commit": {"sha": "c0", "short_sha": "c0"},
        "is_main": False,
        "is_current": False,
        "is_previous": False,
    }
    base.update(fields)
    return base


def test_parse_full_listing():
    worktrees = parse_worktrees(FULL_JSON)
    assert len(worktrees) == 2

    main = worktrees[0]
    assert main.branch == "trunk"
    assert main.path == "/home/example/repo"
    assert main.kind == "worktree"
    assert main.is_main
    assert main.is_current
    assert main.commit.short_sha == "1111111"
    assert main.main_state == "is_main"
    assert main.main is None
    assert main.symbols == "^|"
    assert main.remote.name == "origin"
    assert main.working_tree.diff.added == 0

    wt = worktrees[1]
    assert wt.branch == "feature/cleanup"
    assert not wt.is_main
    assert wt.main.ahead == 2
    assert wt.main.behind == 12
    assert wt.worktree.state == "branch_worktree_mismatch"
    assert wt.commit.timestamp == 1700000900


def test_parse_minimal_entry():
    worktrees = parse_worktrees(json.dumps([_entry(branch=None)]))
    assert len(worktrees) == 1
    wt = worktrees[0]
    assert wt.branch is None
    assert wt.path is None
    assert wt.working_tree is None
    assert wt.main is None
    assert wt.remote is None
    assert wt.symbols is None
    assert wt.commit.message == ""
    assert wt.commit.timestamp == 0


def test_parse_unknown_fields_ignored():
    entry = _entry(
        branch="feat/test",
        path="/tmp/test",
        new_future_field=True,
        another_field={"nested": 42},
    )
    worktrees = parse_worktrees(json.dumps([entry]))
    assert len(worktrees) == 1
    assert worktrees[0].branch == "feat/test"


def test_filter_kind_worktree_only():
    listing = [
        _entry(branch="main", path="/tmp", is_main=True),
        _entry(branch="feat/old", kind="branch"),
    ]
    filtered = parse_worktrees(json.dumps(listing))
    assert len(filtered) == 1
    assert filtered[0].branch == "main"


def test_parse_empty_text_is_empty():
    assert parse_worktrees("   \n") == []


def test_parse_invalid_json_raises():
    with pytest.raises(WorktrunkError):
        parse_worktrees("{not json")


def test_from_dict_missing_commit_raises():
    with pytest.raises(WorktrunkError):
        WtWorktree.from_dict({"branch": "x", "kind": "worktree"})


def test_from_dict_missing_sha_raises():
    with pytest.raises(WorktrunkError):
        WtWorktree.from_dict({"kind": "worktree", "commit": {"short_sha": "a"}})


def test_format_age_just_now():
    assert format_age(NOW, NOW) == "just now"
    assert format_age(NOW - 30, NOW) == "just now"


def test_format_age_minutes():
    assert format_age(NOW - 300, NOW) == "5m ago"
    assert format_age(NOW - 3540, NOW) == "59m ago"


def test_format_age_hours():
    assert format_age(NOW - 3600, NOW) == "1h ago"
    assert format_age(NOW - 7200, NOW) == "2h ago"


def test_format_age_days():
    assert format_age(NOW - 86400, NOW) == "1d ago"
    assert format_age(NOW - 172800, NOW) == "2d ago"


def test_format_age_zero_timestamp():
    assert format_age(0) == "\u2014"
    assert format_age(-1) == "\u2014"


def test_format_age_future_is_just_now():
    assert format_age(NOW + 500, NOW) == "just now"


def test_format_age_default_now():
    assert format_age(int(time.time()) - 300) == "5m ago"


@mock.patch("pertmux.worktrunk.subprocess.run", side_effect=FileNotFoundError("wt"))
def test_fetch_worktrees_missing_binary(_run):
    assert fetch_worktrees("/tmp") == []


@mock.patch("pertmux.worktrunk.subprocess.run")
def test_fetch_worktrees_failure_is_empty(run):
    run.return_value = _completed(returncode=1, stderr=b"boom")
    assert fetch_worktrees("/tmp") == []


@mock.patch("pertmux.worktrunk.subprocess.run")
def test_fetch_worktrees_parses_output(run):
    run.return_value = _completed(stdout=FULL_JSON.encode())
    worktrees = fetch_worktrees("/repo")
    assert [wt.branch for wt in worktrees] == ["trunk", "feature/cleanup"]
    assert run.call_args.args[0] == ["wt", "-C", "/repo", "list", "--format=json"]


@mock.patch("pertmux.worktrunk.subprocess.run")
def test_create_worktree_success(run):
    run.return_value = _completed()
    assert create_worktree("/repo", "feat/x") == "Created worktree: feat/x"
    assert run.call_args.args[0] == [
        "wt", "-C", "/repo", "switch", "--create", "feat/x", "--no-cd", "-y", "--no-verify",
    ]


@mock.patch("pertmux.worktrunk.subprocess.run")
def test_create_worktree_failure_raises_stderr(run):
    run.return_value = _completed(returncode=1, stderr=b"  branch exists\n")
    with pytest.raises(WorktrunkError, match="^branch exists$"):
        create_worktree("/repo", "feat/x")


@mock.patch("pertmux.worktrunk.subprocess.run")
def test_remove_worktree_success(run):
    run.return_value = _completed()
    assert remove_worktree("/repo", "feat/x") == "Removed worktree: feat/x"


@mock.patch("pertmux.worktrunk.subprocess.run")
def test_merge_worktree(run):
    run.return_value = _completed()
    assert merge_worktree("/repo/wt") == "Merged and cleaned up"
    run.return_value = _completed(returncode=2, stderr=b"conflict")
    with pytest.raises(WorktrunkError, match="conflict"):
        merge_worktree("/repo/wt")