"""Persistent record of which merge-request notes have been seen."""

from __future__ import annotations

import sqlite3
from pathlib import Path

from platformdirs import user_data_dir

_SCHEMA = """
CREATE TABLE IF NOT EXISTS seen_notes (
    note_id   INTEGER NOT NULL,
    mr_iid    INTEGER NOT NULL,
    project   TEXT    NOT NULL,
    seen_at   TEXT    NOT NULL DEFAULT (datetime('now')),
    PRIMARY KEY (note_id, mr_iid, project)
);
CREATE TABLE IF NOT EXISTS mr_last_viewed (
    mr_iid          INTEGER NOT NULL,
    project         TEXT    NOT NULL,
    last_viewed_at  TEXT    NOT NULL DEFAULT (datetime('now')),
    last_note_count INTEGER NOT NULL DEFAULT 0,
    PRIMARY KEY (mr_iid, project)
);
"""


def default_db_path() -> Path:
    """Location of the read-state database, creating its directory."""
    directory = Path(user_data_dir("pertmux"))
    directory.mkdir(parents=True, exist_ok=True)
    return directory / "read_state.db"


class ReadStateDb:
    """SQLite-backed store of seen notes and last-viewed note counts."""

    def __init__(self, path: str | Path | None = None) -> None:
        db_path = default_db_path() if path is None else path
        self._conn = sqlite3.connect(str(db_path), isolation_level=None)
        self._conn.executescript(_SCHEMA)

    def close(self) -> None:
        self._conn.close()

    def __enter__(self) -> ReadStateDb:
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def mark_notes_seen(self, project: str, mr_iid: int, note_ids) -> None:
        """Mark the given note IDs as seen for a merge request."""
        self._conn.executemany(
            "INSERT OR IGNORE INTO seen_notes (note_id, mr_iid, project) VALUES (?, ?, ?)",
            [(note_id, mr_iid, project) for note_id in note_ids],
        )

    def get_unseen_note_count(self, project: str, mr_iid: int, all_note_ids) -> int:
        """Count how many of ``all_note_ids`` have not been seen yet."""
        unseen = 0
        for note_id in all_note_ids:
            row = self._conn.execute(
                "SELECT 1 FROM seen_notes WHERE note_id = ? AND mr_iid = ? AND project = ?",
                (note_id, mr_iid, project),
            ).fetchone()
            if row is None:
                unseen += 1
        return unseen

    def mark_mr_viewed(self, project: str, mr_iid: int, note_count: int) -> None:
        """Record that a merge request was viewed with the given note count."""
        self._conn.execute(
            "INSERT INTO mr_last_viewed (mr_iid, project, last_viewed_at, last_note_count) "
            "VALUES (?1, ?2, datetime('now'), ?3) "
            "ON CONFLICT(mr_iid, project) DO UPDATE SET "
            "last_viewed_at = datetime('now'), last_note_count = ?3",
            (mr_iid, project, note_count),
        )

    def has_new_activity(self, project: str, mr_iid: int, current_note_count: int) -> bool:
        """True if the note count grew since the last view; False with no prior view."""
        row = self._conn.execute(
            "SELECT last_note_count FROM mr_last_viewed WHERE mr_iid = ? AND project = ?",
            (mr_iid, project),
        ).fetchone()
        if row is None:
            return False
        return current_note_count > row[0]