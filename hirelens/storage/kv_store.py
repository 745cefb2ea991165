from __future__ import annotations

import json
import logging
import os
import sqlite3
import threading
from datetime import datetime, timezone
from typing import Any

logger = logging.getLogger(__name__)


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class KeyValueStore:
    """JSON values keyed by name in a single SQLite table.

    Writes replace the whole value; the last write wins.
    """

    def __init__(self, db_path: str):
        self._db_path = db_path
        self._conn: sqlite3.Connection | None = None
        self._lock = threading.Lock()

    @property
    def db_path(self) -> str:
        return self._db_path

    def _get_connection(self) -> sqlite3.Connection:
        if self._conn is not None:
            return self._conn

        directory = os.path.dirname(self._db_path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        conn = sqlite3.connect(
            self._db_path,
            check_same_thread=False,
            timeout=5,
            isolation_level=None,
        )
        conn.execute("PRAGMA journal_mode=WAL;")
        conn.execute("PRAGMA synchronous=NORMAL;")
        conn.execute("PRAGMA busy_timeout=5000;")
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS kv_entries (
                key TEXT PRIMARY KEY,
                value_json TEXT NOT NULL,
                updated_at TEXT NOT NULL
            );
            """
        )
        self._conn = conn
        return conn

    def _read(self, key: str) -> Any:
        row = self._get_connection().execute(
            "SELECT value_json FROM kv_entries WHERE key = ?",
            (key,),
        ).fetchone()
        if row is None:
            return None
        try:
            return json.loads(row[0])
        except json.JSONDecodeError:
            logger.warning("kv_store_corrupt_value key=%s", key)
            return None

    def _write(self, key: str, value: Any) -> None:
        self._get_connection().execute(
            """
            INSERT INTO kv_entries (key, value_json, updated_at)
            VALUES (?, ?, ?)
            ON CONFLICT(key) DO UPDATE SET
                value_json = excluded.value_json,
                updated_at = excluded.updated_at
            """,
            (key, json.dumps(value, ensure_ascii=False), utc_now_iso()),
        )

    def load(self, key: str, default: Any = None) -> Any:
        with self._lock:
            value = self._read(key)
        return default if value is None else value

    def save(self, key: str, value: Any) -> None:
        with self._lock:
            self._write(key, value)

    def get(self, key: str) -> list[Any]:
        with self._lock:
            value = self._read(key)
        if value is None:
            return []
        if not isinstance(value, list):
            logger.warning("kv_store_unexpected_type key=%s type=%s", key, type(value).__name__)
            return []
        return value

    def set(self, key: str, items: list[Any]) -> None:
        with self._lock:
            self._write(key, list(items))

    def append(self, key: str, item: Any, *, keep_last: int | None = None) -> list[Any]:
        with self._lock:
            current = self._read(key)
            items = current if isinstance(current, list) else []
            items.append(item)
            if keep_last is not None:
                items = items[-keep_last:]
            self._write(key, items)
        return items

    def prepend(self, key: str, item: Any, *, keep_first: int | None = None) -> list[Any]:
        with self._lock:
            current = self._read(key)
            items = current if isinstance(current, list) else []
            items.insert(0, item)
            if keep_first is not None:
                items = items[:keep_first]
            self._write(key, items)
        return items

    def delete(self, key: str) -> None:
        with self._lock:
            self._get_connection().execute("DELETE FROM kv_entries WHERE key = ?", (key,))

    def clear(self) -> None:
        with self._lock:
            self._get_connection().execute("DELETE FROM kv_entries")

    def close(self) -> None:
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None
