"""Durable key/value record store.

PersistentStore is the only component that touches disk. Each record is a
row in a SQLite table, and blocking SQLite calls run in a worker thread via
asyncio.to_thread so the event loop stays responsive.

Guarantees:
- write() has committed with synchronous=FULL before it returns.
- Writes to the same key are serialized by a per-key asyncio.Lock.
- Writes to different keys are independent; there are no multi-key
  transactions.
"""

from __future__ import annotations

import asyncio
import logging
import sqlite3
import threading
from pathlib import Path

from stocktake.core.datetime_utils import utc_now_iso
from stocktake.exceptions import StorageFailure
from stocktake.store.connection import (
    execute_with_retry,
    get_connection,
    get_default_db_path,
)
from stocktake.store.schema import create_schema

logger = logging.getLogger(__name__)


class PersistentStore:
    """SQLite-backed store of opaque byte values keyed by record name."""

    def __init__(self, db_path: Path | None = None, *, timeout: float = 30.0) -> None:
        """Initialize the store.

        Args:
            db_path: Database file. Defaults to ~/.stocktake/stocktake.db.
            timeout: Seconds to wait for SQLite locks.
        """
        self.db_path = db_path if db_path is not None else get_default_db_path()
        self._timeout = timeout
        self._key_locks: dict[str, asyncio.Lock] = {}
        self._schema_ready = False
        self._schema_lock = threading.Lock()

    def _lock_for(self, key: str) -> asyncio.Lock:
        """Return the lock that serializes writes to one key."""
        lock = self._key_locks.get(key)
        if lock is None:
            lock = self._key_locks[key] = asyncio.Lock()
        return lock

    def _ensure_schema(self, conn: sqlite3.Connection) -> None:
        """Create the schema once per store instance."""
        with self._schema_lock:
            if not self._schema_ready:
                create_schema(conn)
                self._schema_ready = True

    async def write(self, key: str, data: bytes) -> None:
        """Durably store a value under a key, replacing any previous value.

        Args:
            key: Record name.
            data: Serialized value.

        Raises:
            StorageFailure: If the value could not be committed.
        """
        if not isinstance(data, (bytes, bytearray)):
            raise TypeError(f"Record value must be bytes, got {type(data).__name__}")

        async with self._lock_for(key):
            try:
                await asyncio.to_thread(self._write_sync, key, bytes(data))
            except (sqlite3.Error, OSError) as e:
                logger.error("Failed to write record %s: %s", key, e)
                raise StorageFailure(key, "write", str(e)) from e

        logger.debug("Wrote record %s (%d bytes)", key, len(data))

    async def read(self, key: str) -> bytes | None:
        """Return the stored value for a key, or None if absent.

        Raises:
            StorageFailure: If the store cannot be read.
        """
        try:
            return await asyncio.to_thread(self._read_sync, key)
        except (sqlite3.Error, OSError) as e:
            logger.error("Failed to read record %s: %s", key, e)
            raise StorageFailure(key, "read", str(e)) from e

    async def delete(self, key: str) -> None:
        """Remove a record. Deleting an absent key is not an error.

        Raises:
            StorageFailure: If the deletion could not be committed.
        """
        async with self._lock_for(key):
            try:
                await asyncio.to_thread(self._delete_sync, key)
            except (sqlite3.Error, OSError) as e:
                logger.error("Failed to delete record %s: %s", key, e)
                raise StorageFailure(key, "delete", str(e)) from e

    async def keys(self, prefix: str = "") -> list[str]:
        """Return all record keys starting with prefix, sorted.

        Raises:
            StorageFailure: If the store cannot be read.
        """
        try:
            return await asyncio.to_thread(self._keys_sync, prefix)
        except (sqlite3.Error, OSError) as e:
            logger.error("Failed to list records: %s", e)
            raise StorageFailure(None, "list", str(e)) from e

    async def clear_all(self) -> None:
        """Delete every record in the store.

        Raises:
            StorageFailure: If the deletion could not be committed.
        """
        try:
            await asyncio.to_thread(self._clear_sync)
        except (sqlite3.Error, OSError) as e:
            logger.error("Failed to clear record store: %s", e)
            raise StorageFailure(None, "clear", str(e)) from e
        logger.info("Cleared all records from %s", self.db_path)

    def _write_sync(self, key: str, data: bytes) -> None:
        with get_connection(self.db_path, self._timeout) as conn:
            self._ensure_schema(conn)

            def do_write() -> None:
                conn.execute("BEGIN IMMEDIATE")
                try:
                    conn.execute(
                        """
                        INSERT INTO records (key, value, updated_at)
                        VALUES (?, ?, ?)
                        ON CONFLICT(key) DO UPDATE SET
                            value = excluded.value,
                            updated_at = excluded.updated_at
                        """,
                        (key, data, utc_now_iso()),
                    )
                    conn.commit()
                except Exception:
                    conn.rollback()
                    raise

            execute_with_retry(do_write)

    def _read_sync(self, key: str) -> bytes | None:
        with get_connection(self.db_path, self._timeout) as conn:
            self._ensure_schema(conn)
            row = conn.execute(
                "SELECT value FROM records WHERE key = ?", (key,)
            ).fetchone()
            if row is None:
                return None
            value = row["value"]
            if isinstance(value, str):
                return value.encode("utf-8")
            return bytes(value)

    def _delete_sync(self, key: str) -> None:
        with get_connection(self.db_path, self._timeout) as conn:
            self._ensure_schema(conn)

            def do_delete() -> None:
                conn.execute("BEGIN IMMEDIATE")
                try:
                    conn.execute("DELETE FROM records WHERE key = ?", (key,))
                    conn.commit()
                except Exception:
                    conn.rollback()
                    raise

            execute_with_retry(do_delete)

    def _keys_sync(self, prefix: str) -> list[str]:
        with get_connection(self.db_path, self._timeout) as conn:
            self._ensure_schema(conn)
            rows = conn.execute(
                "SELECT key FROM records WHERE substr(key, 1, ?) = ? ORDER BY key",
                (len(prefix), prefix),
            ).fetchall()
            return [row["key"] for row in rows]

    def _clear_sync(self) -> None:
        with get_connection(self.db_path, self._timeout) as conn:
            self._ensure_schema(conn)

            def do_clear() -> None:
                conn.execute("BEGIN IMMEDIATE")
                try:
                    conn.execute("DELETE FROM records")
                    conn.commit()
                except Exception:
                    conn.rollback()
                    raise

            execute_with_retry(do_clear)
