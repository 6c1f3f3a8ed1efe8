"""Domain-specific exceptions for typed error handling at boundaries."""

from __future__ import annotations


class KonfigStoreError(Exception):
    """Base class for every error raised by the konfig store.

    Example:
        >>> from konfigstore.domain.errors import KonfigStoreError, StoreError
        >>> issubclass(StoreError, KonfigStoreError)
        True
    """


class NotFoundError(KonfigStoreError):
    """A key is absent from the cache, or a reference points nowhere.

    Read-only paths (listing, migration, merge-on-read) treat this as an
    empty default. ``used()`` surfaces it when the used reference dangles.

    Example:
        >>> from konfigstore.domain.errors import NotFoundError
        >>> str(NotFoundError("config not found - use one that exists"))
        'config not found - use one that exists'
    """


class NotUsedError(NotFoundError):
    """No konfig has been marked as used yet."""


class ValidationError(KonfigStoreError, ValueError):
    """A konfig failed the validity predicate.

    Raised before any write happens. Inherits from ValueError so generic
    ``except ValueError`` handlers at CLI boundaries keep catching it.

    Example:
        >>> from konfigstore.domain.errors import ValidationError
        >>> isinstance(ValidationError("endpoints are missing"), ValueError)
        True
    """


class MergeError(KonfigStoreError):
    """Combining an override konfig with its base failed to (de)serialize."""


class StoreError(KonfigStoreError):
    """Reading from or writing to the cache failed.

    Covers corrupted values, unusable cache files and lock acquisition
    failures. Aborts the surrounding transaction.
    """


class LockTimeoutError(StoreError):
    """The cache file lock was not acquired within the configured timeout.

    Example:
        >>> from konfigstore.domain.errors import LockTimeoutError, StoreError
        >>> isinstance(LockTimeoutError("timeout"), StoreError)
        True
    """


__all__ = [
    "KonfigStoreError",
    "LockTimeoutError",
    "MergeError",
    "NotFoundError",
    "NotUsedError",
    "StoreError",
    "ValidationError",
]
