"""SQLite-backed keyring.

Items are stored unencrypted; protecting the database file is left to
filesystem permissions.
"""

from __future__ import annotations

import sqlite3
import threading
from pathlib import Path
from typing import Sequence

from aws_session_cache.utils.time import utc_now_iso
from aws_session_cache.vault.backend import KeyNotFoundError, KeyringError, KeyringItem

_SqlValue = str | bytes | int | float | None


class SqliteKeyring:
    def __init__(self, path: str, wal: bool = True) -> None:
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._lock = threading.Lock()
        self._closed = False
        if wal:
            self._conn.execute("PRAGMA journal_mode=WAL")
        self._init_schema()

    def _init_schema(self) -> None:
        self._conn.executescript(
            """
            CREATE TABLE IF NOT EXISTS keyring_items (
                item_key TEXT PRIMARY KEY,
                label TEXT NOT NULL,
                description TEXT NOT NULL,
                data BLOB NOT NULL,
                updated_at TEXT NOT NULL
            );
            """
        )
        self._conn.commit()

    def _execute(self, query: str, params: Sequence[_SqlValue]) -> sqlite3.Cursor:
        with self._lock:
            try:
                cursor = self._conn.execute(query, params)
                self._conn.commit()
            except sqlite3.Error as exc:
                raise KeyringError(f"Keyring query failed: {exc}") from exc
            return cursor

    def _fetch_all(self, query: str, params: Sequence[_SqlValue]) -> list[sqlite3.Row]:
        with self._lock:
            try:
                return self._conn.execute(query, params).fetchall()
            except sqlite3.Error as exc:
                raise KeyringError(f"Keyring query failed: {exc}") from exc

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._conn.close()
            self._closed = True

    def list_keys(self) -> list[str]:
        rows = self._fetch_all("SELECT item_key FROM keyring_items ORDER BY rowid", ())
        return [row["item_key"] for row in rows]

    def get(self, key: str) -> KeyringItem:
        rows = self._fetch_all(
            "SELECT item_key, label, description, data FROM keyring_items WHERE item_key = ?",
            (key,),
        )
        if not rows:
            raise KeyNotFoundError(key)
        row = rows[0]
        return KeyringItem(
            key=row["item_key"],
            data=bytes(row["data"]),
            label=row["label"],
            description=row["description"],
        )

    def set(self, item: KeyringItem) -> None:
        self._execute(
            """
            INSERT INTO keyring_items (item_key, label, description, data, updated_at)
            VALUES (?, ?, ?, ?, ?)
            ON CONFLICT(item_key) DO UPDATE SET
                label = excluded.label,
                description = excluded.description,
                data = excluded.data,
                updated_at = excluded.updated_at
            """,
            (item.key, item.label, item.description, item.data, utc_now_iso()),
        )

    def remove(self, key: str) -> None:
        cursor = self._execute("DELETE FROM keyring_items WHERE item_key = ?", (key,))
        if cursor.rowcount == 0:
            raise KeyNotFoundError(key)
