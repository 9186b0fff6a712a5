import pytest

from pertmux.git import GitError, discover_worktrees, parse_worktree_output


def test_parse_single_worktree():
    output = "worktree /home/user/project\nHEAD abc123\nbranch refs/heads/main\n\n"
    result = parse_worktree_output(output)
    assert len(result) == 1
    assert result[0].branch == "main"
    assert result[0].head_commit == "abc123"
    assert result[0].is_main
    assert not result[0].is_bare


def test_parse_multiple_worktrees():
    output = (
        "worktree /home/user/project\n"
        "HEAD abc123\n"
        "branch refs/heads/main\n"
        "\n"
        "worktree /home/user/feature-branch\n"
        "HEAD def456\n"
        "branch refs/heads/feat/login\n"
        "\n"
    )
    result = parse_worktree_output(output)
    assert len(result) == 2
    assert result[0].is_main
    assert not result[1].is_main
    assert result[1].branch == "feat/login"


def test_parse_detached_head():
    output = "worktree /home/user/detached\nHEAD abc123\ndetached\n\n"
    result = parse_worktree_output(output)
    assert len(result) == 1
    assert result[0].branch is None


def test_parse_bare_repo():
    output = "worktree /home/user/project.git\nHEAD abc123\nbranch refs/heads/main\nbare\n\n"
    result = parse_worktree_output(output)
    assert len(result) == 1
    assert result[0].is_bare


def test_parse_empty_output():
    assert parse_worktree_output("") == []


def test_nonexistent_path_kept_verbatim():
    output = "worktree /nonexistent/path/xyz\nHEAD abc\n\n"
    assert parse_worktree_output(output)[0].path == "/nonexistent/path/xyz"


def test_existing_path_canonicalized(tmp_path):
    target = tmp_path / "real"
    target.mkdir()
    link = tmp_path / "link"
    link.symlink_to(target)
    result = parse_worktree_output(f"worktree {link}\nHEAD abc\n\n")
    assert result[0].path == str(target.resolve())


def test_non_git_dir_returns_error(tmp_path):
    with pytest.raises(GitError) as info:
        discover_worktrees(str(tmp_path))
    message = str(info.value)
    assert "git worktree list failed" in message or "Failed to run git" in message