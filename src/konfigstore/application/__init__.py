"""Application layer - use cases and port definitions.

Contains the konfig store client that orchestrates domain logic and the
port protocols that define the interfaces for adapter implementations.

Contents:
    * :mod:`.store` - The konfig store client
    * :mod:`.ports` - Protocol definitions for adapters
"""

from __future__ import annotations

from .ports import (
    BuildStore,
    GetConfig,
    InitLogging,
    KeyValueCache,
    NewKonfig,
    OpenCache,
    PrepareCacheFile,
)
from .store import KonfigStore

__all__ = [
    "BuildStore",
    "GetConfig",
    "InitLogging",
    "KeyValueCache",
    "KonfigStore",
    "NewKonfig",
    "OpenCache",
    "PrepareCacheFile",
]
