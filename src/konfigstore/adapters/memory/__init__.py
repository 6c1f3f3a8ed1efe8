"""In-memory adapter implementations for testing.

Provides lightweight implementations of all application ports that operate
entirely in memory -- no filesystem, no SQLite, no logging framework.

Contents:
    * :mod:`.cache` - In-memory cache factory and cache file preparation
    * :mod:`.config` - In-memory configuration adapter
    * :mod:`.logging` - In-memory logging adapter
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .cache import MemoryCache, MemoryCacheFactory, prepare_cache_file_in_memory
from .config import get_config_in_memory
from .logging import init_logging_in_memory

# Static conformance assertions
if TYPE_CHECKING:
    from konfigstore.application.ports import (
        GetConfig,
        InitLogging,
        OpenCache,
        PrepareCacheFile,
    )

    _assert_get_config: GetConfig = get_config_in_memory
    _assert_init_logging: InitLogging = init_logging_in_memory
    _assert_open_cache: OpenCache = MemoryCacheFactory()
    _assert_prepare_cache_file: PrepareCacheFile = prepare_cache_file_in_memory

__all__ = [
    "MemoryCache",
    "MemoryCacheFactory",
    "get_config_in_memory",
    "init_logging_in_memory",
    "prepare_cache_file_in_memory",
]
