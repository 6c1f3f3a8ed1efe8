"""Application ports: Protocol definitions for adapter implementations.

Callable protocols define a ``__call__`` whose signature matches the
corresponding adapter function, so module-level functions and classes
satisfy them via structural subtyping (PEP 544).

System Role:
    Sits between domain and adapters. Infrastructure types (``Config``,
    ``KonfigStore``) are imported under ``TYPE_CHECKING`` only so that
    import-linter layer contracts remain satisfied at runtime.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol, TypeVar

from ..domain.models import CacheFileReport, CacheOptions, Environments, Konfig

if TYPE_CHECKING:
    from lib_layered_config import Config

    from .store import KonfigStore

T = TypeVar("T")


class KeyValueCache(Protocol):
    """An open, exclusively locked key-value cache scoped to one bucket.

    ``get_value`` raises :class:`~konfigstore.domain.errors.NotFoundError`
    for absent keys and :class:`~konfigstore.domain.errors.StoreError` for
    anything else. ``close`` commits and releases the lock.
    """

    def get_value(self, key: str, kind: type[T]) -> T: ...

    def set_value(self, key: str, value: Any) -> None: ...

    def close(self) -> None: ...


class OpenCache(Protocol):
    """Open a cache file, acquiring its lock within ``options.timeout``."""

    def __call__(self, options: CacheOptions) -> KeyValueCache: ...


class NewKonfig(Protocol):
    """Construct the default konfig for an environment descriptor."""

    def __call__(self, environments: Environments) -> Konfig: ...


class PrepareCacheFile(Protocol):
    """Relocate a legacy cache file and prepare its directory, best-effort."""

    def __call__(self, legacy_file: Path, file: Path, *, dir_mode: int) -> CacheFileReport: ...


class GetConfig(Protocol):
    """Load layered configuration with application defaults."""

    def __call__(self, *, start_dir: str | None = ...) -> Config: ...


class InitLogging(Protocol):
    """Initialize lib_log_rich runtime with the provided configuration."""

    def __call__(self, config: Config) -> None: ...


class BuildStore(Protocol):
    """Build a konfig store client from layered configuration."""

    def __call__(self, config: Config) -> KonfigStore: ...


__all__ = [
    "BuildStore",
    "GetConfig",
    "InitLogging",
    "KeyValueCache",
    "NewKonfig",
    "OpenCache",
    "PrepareCacheFile",
]
