"""Public package surface for the konfig store.

Routes imports through the architectural layers:
- Domain exports: Konfig entities, merge and the error taxonomy
- Application exports: the :class:`KonfigStore` client
- Composition exports: wired store construction
- Boundary convenience functions backed by a process-wide default store

Callers that can pass a store around should build one with
:func:`build_store` instead of using the module-level functions.
"""

from __future__ import annotations

# Metadata
from .__init__conf__ import print_info

# Application exports
from .application.store import KonfigStore

# Composition exports (wired adapters)
from .composition import build_store, default_store

# Domain exports
from .domain import (
    CacheFileReport,
    CacheOptions,
    Endpoints,
    Environments,
    Konfig,
    Konfigs,
    KonfigStoreError,
    LockTimeoutError,
    MergeError,
    NotFoundError,
    NotUsedError,
    StoreError,
    ValidationError,
    merge_in,
    new_konfig,
)


def list_konfigs() -> Konfigs:
    """Return every konfig in the default store."""
    return default_store().list()


def read(environments: Environments) -> Konfig:
    """Return the default konfig for ``environments`` merged with the legacy konfig."""
    return default_store().read(environments)


def use(konfig: Konfig) -> None:
    """Store ``konfig`` in the default store and mark it as used."""
    default_store().use(konfig)


def used() -> Konfig:
    """Return the konfig in use in the default store."""
    return default_store().used()


def cache_options(app: str) -> CacheOptions:
    """Return the cache options for ``app`` from the default store."""
    return default_store().cache_options(app)


__all__ = [
    # Boundary API
    "cache_options",
    "list_konfigs",
    "read",
    "use",
    "used",
    # Store
    "KonfigStore",
    "build_store",
    "default_store",
    # Domain
    "CacheFileReport",
    "CacheOptions",
    "Endpoints",
    "Environments",
    "Konfig",
    "Konfigs",
    "merge_in",
    "new_konfig",
    # Errors
    "KonfigStoreError",
    "LockTimeoutError",
    "MergeError",
    "NotFoundError",
    "NotUsedError",
    "StoreError",
    "ValidationError",
    # Metadata
    "print_info",
]
