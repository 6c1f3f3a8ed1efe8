"""Domain layer - pure business logic with no I/O or framework dependencies.

Contains the konfig entities, the override merge and default konfig
construction.

Contents:
    * :mod:`.models` - Konfig, Endpoints, UsedKonfig, Environments, cache value objects
    * :mod:`.merge` - Field-by-field override merge
    * :mod:`.environments` - Builtin environments and default konfigs
    * :mod:`.enums` - Domain enumerations (OutputFormat, RelocationAction)
    * :mod:`.errors` - Domain exception types
"""

from __future__ import annotations

from .enums import OutputFormat, RelocationAction
from .environments import builtin_environments, new_konfig
from .errors import (
    KonfigStoreError,
    LockTimeoutError,
    MergeError,
    NotFoundError,
    NotUsedError,
    StoreError,
    ValidationError,
)
from .merge import merge_in
from .models import (
    DEFAULT_LOCK_TIMEOUT,
    CacheFileReport,
    CacheOptions,
    Endpoints,
    Environments,
    Konfig,
    Konfigs,
    UsedKonfig,
    konfig_id,
)

__all__ = [
    # Models
    "DEFAULT_LOCK_TIMEOUT",
    "CacheFileReport",
    "CacheOptions",
    "Endpoints",
    "Environments",
    "Konfig",
    "Konfigs",
    "UsedKonfig",
    "konfig_id",
    # Behaviors
    "builtin_environments",
    "merge_in",
    "new_konfig",
    # Enums
    "OutputFormat",
    "RelocationAction",
    # Errors
    "KonfigStoreError",
    "LockTimeoutError",
    "MergeError",
    "NotFoundError",
    "NotUsedError",
    "StoreError",
    "ValidationError",
]
