"""Composition root wiring adapters to application ports."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import TYPE_CHECKING

from lib_layered_config import Config

from ..adapters.cache import open_sqlite_cache, prepare_cache_file
from ..adapters.config.loader import get_config
from ..adapters.config.settings import load_store_settings
from ..adapters.logging.setup import init_logging
from ..application.store import KonfigStore
from ..domain.environments import new_konfig
from ..domain.models import CacheOptions

# Static conformance assertions: pyright verifies that each adapter function
# structurally satisfies its corresponding Protocol at type-check time.
if TYPE_CHECKING:
    from ..adapters.memory import MemoryCacheFactory
    from ..application.ports import (
        BuildStore,
        GetConfig,
        InitLogging,
        NewKonfig,
        OpenCache,
        PrepareCacheFile,
    )

    _assert_get_config: GetConfig = get_config
    _assert_init_logging: InitLogging = init_logging
    _assert_open_cache: OpenCache = open_sqlite_cache
    _assert_new_konfig: NewKonfig = new_konfig
    _assert_prepare_cache_file: PrepareCacheFile = prepare_cache_file


def build_store(config: Config) -> KonfigStore:
    """Build a SQLite-backed store client from the ``[konfig_store]`` settings."""
    settings = load_store_settings(config)
    return KonfigStore(
        settings.cache_options(),
        home=settings.home_path(),
        open_cache=open_sqlite_cache,
        new_konfig=new_konfig,
        prepare_cache_file=prepare_cache_file,
        dir_mode=settings.dir_mode(),
    )


@dataclass(frozen=True, slots=True)
class AppServices:
    """Frozen container holding all application port implementations."""

    get_config: GetConfig
    init_logging: InitLogging
    build_store: BuildStore


def build_production() -> AppServices:
    """Wire production adapters into an AppServices container."""
    return AppServices(
        get_config=get_config,
        init_logging=init_logging,
        build_store=build_store,
    )


def build_testing(*, cache: MemoryCacheFactory | None = None, home: Path | None = None) -> AppServices:
    """Wire in-memory adapters into an AppServices container.

    Args:
        cache: Optional MemoryCacheFactory shared with the test so it can seed
            and inspect stored values. When None, a fresh factory is created.
        home: Directory cache files resolve under. Defaults to a synthetic path.

    Returns:
        AppServices container with in-memory adapters.
    """
    from ..adapters.memory import (
        MemoryCacheFactory,
        get_config_in_memory,
        init_logging_in_memory,
        prepare_cache_file_in_memory,
    )

    factory = cache if cache is not None else MemoryCacheFactory()
    store_home = home if home is not None else Path("konfig-home")

    def _build_store_in_memory(config: Config) -> KonfigStore:
        settings = load_store_settings(config)
        return KonfigStore(
            CacheOptions(file=store_home / settings.file, bucket=settings.bucket, timeout=settings.lock_timeout),
            home=store_home,
            open_cache=factory,
            new_konfig=new_konfig,
            prepare_cache_file=prepare_cache_file_in_memory,
            dir_mode=settings.dir_mode(),
        )

    return AppServices(
        get_config=get_config_in_memory,
        init_logging=init_logging_in_memory,
        build_store=_build_store_in_memory,
    )


@lru_cache(maxsize=1)
def default_store() -> KonfigStore:
    """Return the process-wide store built from the layered configuration.

    Only the boundary convenience functions in :mod:`konfigstore` use this;
    everything else receives an explicitly constructed :class:`KonfigStore`.
    """
    return build_store(get_config())


__all__ = [
    "AppServices",
    "build_production",
    "build_store",
    "build_testing",
    "default_store",
]
