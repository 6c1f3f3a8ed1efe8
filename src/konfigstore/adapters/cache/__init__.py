"""Cache adapter - SQLite key-value cache and cache file preparation.

Contents:
    * :mod:`.sqlite` - Exclusive-lock SQLite cache transactions
    * :mod:`.codec` - orjson/pydantic value encoding
    * :mod:`.files` - Legacy file relocation, mkdir and chown
"""

from __future__ import annotations

from .codec import decode_value, encode_value
from .files import chown_to_invoking_user, prepare_cache_file, relocate_legacy_file
from .sqlite import SqliteCache, open_sqlite_cache

__all__ = [
    "SqliteCache",
    "chown_to_invoking_user",
    "decode_value",
    "encode_value",
    "open_sqlite_cache",
    "prepare_cache_file",
    "relocate_legacy_file",
]
