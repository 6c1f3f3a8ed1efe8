"""SQLite-backed key-value cache with an exclusive, time-bounded file lock.

Each :class:`SqliteCache` is one transaction: opening runs
``BEGIN EXCLUSIVE`` with SQLite's busy timeout set to the configured lock
timeout, and :meth:`SqliteCache.close` commits and releases the lock.
Keys are ordered per bucket.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import Any, Final, TypeVar

from konfigstore.domain.errors import LockTimeoutError, NotFoundError, StoreError
from konfigstore.domain.models import CacheOptions

from .codec import decode_value, encode_value

logger = logging.getLogger(__name__)

T = TypeVar("T")

_CREATE_TABLE_SQL: Final[str] = """
CREATE TABLE IF NOT EXISTS kv_store (
    bucket TEXT NOT NULL,
    key TEXT NOT NULL,
    value BLOB NOT NULL,
    PRIMARY KEY (bucket, key)
) WITHOUT ROWID
"""
_SELECT_SQL: Final[str] = "SELECT value FROM kv_store WHERE bucket = ? AND key = ?"
_UPSERT_SQL: Final[str] = (
    "INSERT INTO kv_store (bucket, key, value) VALUES (?, ?, ?) "
    "ON CONFLICT (bucket, key) DO UPDATE SET value = excluded.value"
)
_LOCKED_MARKERS: Final[tuple[str, ...]] = ("database is locked", "database is busy")


def _is_lock_timeout(exc: sqlite3.Error) -> bool:
    message = str(exc).lower()
    return any(marker in message for marker in _LOCKED_MARKERS)


class SqliteCache:
    """Open a cache file and hold its exclusive lock until :meth:`close`.

    Raises:
        LockTimeoutError: If another holder keeps the lock past ``options.timeout``.
        StoreError: If the file cannot be opened or is not a cache database.

    Example:
        >>> import tempfile
        >>> from pathlib import Path
        >>> tmp = Path(tempfile.mkdtemp())
        >>> cache = SqliteCache(CacheOptions(file=tmp / "app.bolt", bucket="app"))
        >>> cache.set_value("greeting", {"text": "hi"})
        >>> cache.get_value("greeting", dict)
        {'text': 'hi'}
        >>> cache.close()
    """

    def __init__(self, options: CacheOptions) -> None:
        self.options = options
        self._closed = False
        try:
            options.file.parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(str(options.file), timeout=options.timeout, isolation_level=None)
        except (OSError, sqlite3.Error) as exc:
            raise StoreError(f"unable to open cache {options.file}: {exc}") from exc

        try:
            self._conn.execute("BEGIN EXCLUSIVE")
            self._conn.execute(_CREATE_TABLE_SQL)
        except sqlite3.Error as exc:
            self._conn.close()
            self._closed = True
            if _is_lock_timeout(exc):
                raise LockTimeoutError(
                    f"unable to lock {options.file} within {options.timeout:g}s: {exc}"
                ) from exc
            raise StoreError(f"unable to open cache {options.file}: {exc}") from exc
        logger.debug("Opened cache %s (bucket %s)", options.file, options.bucket)

    def _ensure_open(self) -> None:
        if self._closed:
            raise StoreError(f"cache {self.options.file} is closed")

    def get_value(self, key: str, kind: type[T]) -> T:
        """Return the value stored under ``key`` decoded as ``kind``.

        Raises:
            NotFoundError: If ``key`` is absent from the bucket.
            StoreError: If the read fails or the stored value is corrupted.
        """
        self._ensure_open()
        try:
            row = self._conn.execute(_SELECT_SQL, (self.options.bucket, key)).fetchone()
        except sqlite3.Error as exc:
            raise StoreError(f"unable to read {key!r} from {self.options.file}: {exc}") from exc
        if row is None:
            raise NotFoundError(f"key {key!r} not found in bucket {self.options.bucket!r}")
        return decode_value(key, bytes(row[0]), kind)

    def set_value(self, key: str, value: Any) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""
        self._ensure_open()
        payload = encode_value(key, value)
        try:
            self._conn.execute(_UPSERT_SQL, (self.options.bucket, key, payload))
        except sqlite3.Error as exc:
            raise StoreError(f"unable to write {key!r} to {self.options.file}: {exc}") from exc

    def close(self) -> None:
        """Commit pending writes and release the lock. Safe to call twice."""
        if self._closed:
            return
        self._closed = True
        try:
            self._conn.execute("COMMIT")
        except sqlite3.Error as exc:
            raise StoreError(f"unable to commit cache {self.options.file}: {exc}") from exc
        finally:
            self._conn.close()


def open_sqlite_cache(options: CacheOptions) -> SqliteCache:
    """Open a :class:`SqliteCache`; satisfies the ``OpenCache`` port."""
    return SqliteCache(options)


__all__ = ["SqliteCache", "open_sqlite_cache"]
