"""Configuration adapter - layered settings for the konfig store.

Provides adapters for configuration management using lib_layered_config.

Contents:
    * :mod:`.loader` - Configuration loading with caching
    * :mod:`.settings` - ``[konfig_store]`` section parsing
"""

from __future__ import annotations

from .loader import get_config, get_default_config_path
from .settings import StoreSettings, default_home, load_store_settings, parse_mode

__all__ = [
    "StoreSettings",
    "default_home",
    "get_config",
    "get_default_config_path",
    "load_store_settings",
    "parse_mode",
]
