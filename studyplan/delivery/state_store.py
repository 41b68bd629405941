"""
Key-value state stores for the study planner.

The planning core never touches storage directly. Review history, the
metric log and generated schedules are handed to a store as
JSON-serializable blobs under a fixed key:

- MemoryStore: in-process dict (tests, embedding in other apps)
- JsonFileStore: one <key>.json file per key in a directory
- SqliteStore: single kv table in a SQLite database

Default location: ~/.studyplan/
"""

from __future__ import annotations

import json
import os
import sqlite3
import tempfile
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from loguru import logger

# =============================================================================
# Protocol
# =============================================================================


class StoreError(RuntimeError):
    """Raised when a store cannot load or save a blob."""


@runtime_checkable
class KeyValueStore(Protocol):
    """Minimal persistence contract used by the tracker and optimizer."""

    def load(self, key: str) -> Any | None:
        """Return the blob stored under key, or None if absent."""
        ...

    def save(self, key: str, blob: Any) -> None:
        """Store a JSON-serializable blob under key."""
        ...


# =============================================================================
# Implementations
# =============================================================================


class MemoryStore:
    """Dict-backed store. Blobs are round-tripped through JSON on save."""

    def __init__(self):
        self._data: dict[str, str] = {}

    def load(self, key: str) -> Any | None:
        raw = self._data.get(key)
        return None if raw is None else json.loads(raw)

    def save(self, key: str, blob: Any) -> None:
        try:
            self._data[key] = json.dumps(blob)
        except (TypeError, ValueError) as e:
            raise StoreError(f"Blob for '{key}' is not JSON-serializable: {e}") from e

    def keys(self) -> list[str]:
        return sorted(self._data)


class JsonFileStore:
    """
    Directory of JSON files, one per key.

    Writes go to a temporary file that replaces the target, so a failed
    write never leaves a truncated file behind.
    """

    DEFAULT_DIR = Path.home() / ".studyplan"

    def __init__(self, directory: Path | None = None):
        """
        Initialize the store.

        Args:
            directory: Custom directory (defaults to ~/.studyplan)
        """
        self.directory = Path(directory or self.DEFAULT_DIR)
        self.directory.mkdir(parents=True, exist_ok=True)
        logger.info(f"JsonFileStore initialized at {self.directory}")

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def load(self, key: str) -> Any | None:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            with open(path, encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StoreError(f"Failed to read {path}: {e}") from e

    def save(self, key: str, blob: Any) -> None:
        path = self._path(key)
        try:
            payload = json.dumps(blob, indent=2)
        except (TypeError, ValueError) as e:
            raise StoreError(f"Blob for '{key}' is not JSON-serializable: {e}") from e

        tmp_name = None
        try:
            fd, tmp_name = tempfile.mkstemp(dir=self.directory, suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp_name, path)
        except OSError as e:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StoreError(f"Failed to write {path}: {e}") from e

        logger.debug(f"Saved '{key}' to {path}")


class SqliteStore:
    """SQLite-backed store with a single key/value table."""

    DEFAULT_DB_PATH = Path.home() / ".studyplan" / "state.db"

    def __init__(self, db_path: Path | None = None):
        """
        Initialize the store.

        Args:
            db_path: Custom database path (defaults to ~/.studyplan/state.db)
        """
        self.db_path = Path(db_path or self.DEFAULT_DB_PATH)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        self._conn: sqlite3.Connection | None = None
        self._init_schema()

        logger.info(f"SqliteStore initialized at {self.db_path}")

    @property
    def conn(self) -> sqlite3.Connection:
        """Get or create database connection."""
        if self._conn is None:
            self._conn = sqlite3.connect(str(self.db_path))
            self._conn.row_factory = sqlite3.Row
        return self._conn

    def _init_schema(self) -> None:
        cursor = self.conn.cursor()
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS kv (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)
        self.conn.commit()

    def load(self, key: str) -> Any | None:
        try:
            cursor = self.conn.cursor()
            cursor.execute("SELECT value FROM kv WHERE key = ?", (key,))
            row = cursor.fetchone()
        except sqlite3.Error as e:
            raise StoreError(f"Failed to read '{key}': {e}") from e

        if row is None:
            return None
        try:
            return json.loads(row["value"])
        except json.JSONDecodeError as e:
            raise StoreError(f"Corrupt value for '{key}': {e}") from e

    def save(self, key: str, blob: Any) -> None:
        try:
            payload = json.dumps(blob)
        except (TypeError, ValueError) as e:
            raise StoreError(f"Blob for '{key}' is not JSON-serializable: {e}") from e

        try:
            cursor = self.conn.cursor()
            cursor.execute(
                """
                INSERT INTO kv (key, value, updated_at)
                VALUES (?, ?, CURRENT_TIMESTAMP)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = excluded.updated_at
            """,
                (key, payload),
            )
            self.conn.commit()
        except sqlite3.Error as e:
            self.conn.rollback()
            raise StoreError(f"Failed to write '{key}': {e}") from e

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None
