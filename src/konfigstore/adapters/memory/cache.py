"""In-memory cache adapters for testing.

Provides a cache factory that satisfies the ``OpenCache`` port without
touching the filesystem. Values go through the same codec as the SQLite
adapter and writes only become visible after ``close()``, mirroring a
committed transaction.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, TypeVar

from konfigstore.domain.errors import NotFoundError, StoreError
from konfigstore.domain.models import CacheFileReport, CacheOptions

from ..cache.codec import decode_value, encode_value

T = TypeVar("T")

_Bucket = dict[str, bytes]


class MemoryCache:
    """One open transaction against a :class:`MemoryCacheFactory` bucket."""

    def __init__(self, factory: MemoryCacheFactory, options: CacheOptions) -> None:
        self._factory = factory
        self._options = options
        self._pending: _Bucket = dict(factory.bucket(options))
        self._closed = False

    def get_value(self, key: str, kind: type[T]) -> T:
        if self._closed:
            raise StoreError("cache is closed")
        if key in self._factory.fail_reads:
            raise StoreError(f"injected read failure for {key!r}")
        if key not in self._pending:
            raise NotFoundError(f"key {key!r} not found in bucket {self._options.bucket!r}")
        return decode_value(key, self._pending[key], kind)

    def set_value(self, key: str, value: Any) -> None:
        if self._closed:
            raise StoreError("cache is closed")
        if key in self._factory.fail_writes:
            raise StoreError(f"injected write failure for {key!r}")
        self._pending[key] = encode_value(key, value)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._factory.closes += 1
        self._factory.buckets[(self._options.file, self._options.bucket)] = self._pending
        if self._factory.fail_close is not None:
            raise self._factory.fail_close


@dataclass
class MemoryCacheFactory:
    """Opens :class:`MemoryCache` transactions over shared in-memory buckets.

    Attributes:
        buckets: Committed values per ``(file, bucket)``.
        opens: Number of transactions opened.
        closes: Number of transactions closed.
        fail_open: When set, opening raises this exception.
        fail_close: When set, closing raises this exception after committing.
        fail_reads: Keys whose reads raise :class:`StoreError`.
        fail_writes: Keys whose writes raise :class:`StoreError`.

    Example:
        >>> from pathlib import Path
        >>> factory = MemoryCacheFactory()
        >>> options = CacheOptions(file=Path("konfig.bolt"), bucket="konfig")
        >>> factory.seed(options, "konfigs.used", {"id": "abc"})
        >>> cache = factory(options)
        >>> cache.get_value("konfigs.used", dict)
        {'id': 'abc'}
        >>> cache.close()
    """

    buckets: dict[tuple[Path, str], _Bucket] = field(default_factory=dict)
    opens: int = 0
    closes: int = 0
    fail_open: Exception | None = None
    fail_close: Exception | None = None
    fail_reads: set[str] = field(default_factory=set)
    fail_writes: set[str] = field(default_factory=set)

    def __call__(self, options: CacheOptions) -> MemoryCache:
        if self.fail_open is not None:
            raise self.fail_open
        self.opens += 1
        return MemoryCache(self, options)

    def bucket(self, options: CacheOptions) -> _Bucket:
        return self.buckets.get((options.file, options.bucket), {})

    def seed(self, options: CacheOptions, key: str, value: Any) -> None:
        """Store ``value`` under ``key`` as if a previous transaction committed it."""
        self.buckets.setdefault((options.file, options.bucket), {})[key] = encode_value(key, value)

    def stored(self, options: CacheOptions, key: str, kind: type[T]) -> T:
        """Decode the committed value of ``key``; raises NotFoundError when absent."""
        bucket = self.bucket(options)
        if key not in bucket:
            raise NotFoundError(key)
        return decode_value(key, bucket[key], kind)


def prepare_cache_file_in_memory(legacy_file: Path, file: Path, *, dir_mode: int) -> CacheFileReport:
    """No filesystem changes -- reports that nothing was relocated."""
    return CacheFileReport(file=file, legacy_file=legacy_file)


__all__ = [
    "MemoryCache",
    "MemoryCacheFactory",
    "prepare_cache_file_in_memory",
]
