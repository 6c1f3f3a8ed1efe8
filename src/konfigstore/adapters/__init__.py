"""Adapters layer - infrastructure and framework integrations.

Contains adapter implementations that connect the application to external
systems and frameworks (key-value cache, configuration, logging, CLI).

Contents:
    * :mod:`.cache` - SQLite cache transactions and cache file preparation
    * :mod:`.config` - Layered settings loading
    * :mod:`.logging` - Logging setup with lib_log_rich
    * :mod:`.memory` - In-memory adapters for tests
    * :mod:`.cli` - Click CLI framework integration
"""

from __future__ import annotations

__all__: list[str] = []
