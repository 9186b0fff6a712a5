"""Finding agent panes in tmux and switching between them."""

from __future__ import annotations

import subprocess
from pathlib import Path

from pertmux.types import AgentPane, PaneStatus

_PANE_FORMAT = (
    "#{pane_id}\t#{session_name}\t#{window_index}\t#{pane_index}\t#{pane_title}"
    "\t#{pane_current_path}\t#{pane_pid}\t#{pane_current_command}"
)
_U32_MAX = 2**32 - 1


class TmuxError(Exception):
    """Raised when a tmux command fails."""


def _tmux(*args: str) -> tuple[bool, str, str]:
    """Run tmux; return success, stdout and stderr. OSError propagates."""
    result = subprocess.run(["tmux", *args], capture_output=True)
    return (
        result.returncode == 0,
        result.stdout.decode("utf-8", errors="replace"),
        result.stderr.decode("utf-8", errors="replace"),
    )


def _tmux_checked(*args: str) -> tuple[bool, str, str]:
    try:
        return _tmux(*args)
    except OSError as exc:
        raise TmuxError(f"failed to run tmux: {exc}") from exc


def _tmux_optional(*args: str) -> tuple[bool, str, str] | None:
    try:
        return _tmux(*args)
    except OSError:
        return None


def _parse_u32(text: str) -> int:
    digits = text[1:] if text.startswith("+") else text
    if not digits or not digits.isascii() or not digits.isdigit():
        return 0
    value = int(digits)
    return value if value <= _U32_MAX else 0


def _canonical(path: str) -> Path:
    try:
        return Path(path).resolve(strict=True)
    except (OSError, RuntimeError):
        return Path(path)


def parse_pane_listing(output: str, process_names) -> list[AgentPane]:
    """Parse tab-separated pane rows, keeping panes running one of ``process_names``."""
    names = set(process_names)
    panes: list[AgentPane] = []
    for line in output.splitlines():
        fields = line.split("\t")
        if len(fields) < 8:
            continue
        if fields[7] not in names:
            continue
        panes.append(
            AgentPane(
                pane_id=fields[0],
                session_name=fields[1],
                window_index=_parse_u32(fields[2]),
                pane_index=_parse_u32(fields[3]),
                pane_title=fields[4],
                pane_path=fields[5],
                pane_pid=_parse_u32(fields[6]),
                pane_command=fields[7],
                status=PaneStatus.unknown(),
            )
        )
    return panes


def list_agent_panes(process_names) -> list[AgentPane]:
    """All tmux panes whose current command is one of ``process_names``."""
    ok, stdout, stderr = _tmux_checked("list-panes", "-a", "-F", _PANE_FORMAT)
    if not ok:
        if "no server running" in stderr or "no current client" in stderr:
            return []
        raise TmuxError(f"tmux list-panes failed: {stderr}")
    return parse_pane_listing(stdout, process_names)


def _find_pane_by_path(target: Path) -> str | None:
    ok, stdout, _ = _tmux_checked("list-panes", "-a", "-F", "#{pane_id}\t#{pane_current_path}")
    if not ok:
        return None
    for line in stdout.splitlines():
        parts = line.split("\t")
        if len(parts) < 2:
            continue
        if _canonical(parts[1]) == target:
            return parts[0]
    return None


def _session_name(*target: str) -> str | None:
    result = _tmux_optional("display-message", *target, "-p", "#{session_name}")
    if result is None or not result[0]:
        return None
    return result[1].strip()


def _own_session() -> str | None:
    return _session_name()


def _session_for_client(client_tty: str) -> str | None:
    return _session_name("-t", client_tty)


def _find_session_by_name(name: str) -> str | None:
    result = _tmux_optional("list-sessions", "-F", "#{session_name}")
    if result is None or not result[0]:
        return None
    wanted = name.lower()
    return next((s for s in result[1].splitlines() if s.lower() == wanted), None)


def _find_other_client(our_session: str) -> str | None:
    result = _tmux_optional("list-clients", "-F", "#{client_tty}\t#{session_name}")
    if result is None or not result[0]:
        return None
    for line in result[1].splitlines():
        parts = line.split("\t")
        if len(parts) >= 2 and parts[1] != our_session:
            return parts[0]
    return None


def switch_to_pane(pane_id: str) -> None:
    """Bring a pane into view, on another attached client if there is one."""
    our_session = _own_session() or ""
    other_tty = _find_other_client(our_session)
    if other_tty is not None:
        _tmux_checked("switch-client", "-c", other_tty, "-t", pane_id)
    else:
        _tmux_checked("switch-client", "-t", pane_id)
    _tmux_checked("select-window", "-t", pane_id)
    _tmux_checked("select-pane", "-t", pane_id)


def find_or_create_pane(path: str, project_name: str, agent_command: str | None = None) -> None:
    """Switch to a pane working in ``path``, opening a new window there if none exists."""
    existing = _find_pane_by_path(_canonical(path))
    if existing is not None:
        switch_to_pane(existing)
        return

    our_session = _own_session() or ""
    target_session = _find_session_by_name(project_name)
    if target_session is None:
        other_tty = _find_other_client(our_session)
        if other_tty is not None:
            target_session = _session_for_client(other_tty) or our_session
        else:
            target_session = our_session

    window_name = Path(path).name or project_name

    ok, stdout, stderr = _tmux_checked(
        "new-window", "-a", "-t", target_session, "-n", window_name,
        "-c", path, "-P", "-F", "#{pane_id}",
    )
    if not ok:
        raise TmuxError(f"tmux new-window failed: {stderr.strip()}")

    new_pane_id = stdout.strip()
    if not new_pane_id:
        return

    if agent_command is not None:
        ok, _, stderr = _tmux_checked(
            "split-window", "-h", "-t", new_pane_id, "-c", path, "-P", "-F", "#{pane_id}",
        )
        if not ok:
            raise TmuxError(f"tmux split-window failed: {stderr.strip()}")
        _tmux_checked("send-keys", "-t", new_pane_id, agent_command, "Enter")

    switch_to_pane(new_pane_id)