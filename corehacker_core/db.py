from __future__ import annotations

import os
import sqlite3
from datetime import datetime, timezone
from typing import Optional

PROGRESS_KEY = 'core_hacker_progress'


def _connect(db_path: str) -> sqlite3.Connection:
    directory = os.path.dirname(db_path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    conn = sqlite3.connect(db_path)
    _ensure_db(conn)
    return conn


def _ensure_db(conn: sqlite3.Connection) -> None:
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS progress (
            key TEXT PRIMARY KEY,
            level_index INTEGER NOT NULL,
            updated_at TEXT NOT NULL
        )
        """
    )
    conn.commit()


def load_progress(db_path: str, key: str = PROGRESS_KEY) -> Optional[int]:
    """Returns the saved level index, or None if nothing was saved under key."""
    conn = _connect(db_path)
    try:
        row = conn.execute("SELECT level_index FROM progress WHERE key = ?", (key,)).fetchone()
        if not row:
            return None
        return max(0, int(row[0]))
    finally:
        conn.close()


def save_progress(db_path: str, level_index: int, key: str = PROGRESS_KEY) -> None:
    conn = _connect(db_path)
    try:
        conn.execute(
            "INSERT OR REPLACE INTO progress (key, level_index, updated_at) VALUES (?, ?, ?)",
            (key, int(level_index), datetime.now(timezone.utc).isoformat(timespec='seconds')),
        )
        conn.commit()
    finally:
        conn.close()


class ProgressStore:
    """Opaque load/save of the current level index, keyed so several players can share one file."""

    def __init__(self, db_path: str, key: str = PROGRESS_KEY) -> None:
        self.db_path = db_path
        self.key = key

    def load(self) -> Optional[int]:
        return load_progress(self.db_path, self.key)

    def save(self, level_index: int) -> None:
        save_progress(self.db_path, level_index, self.key)
