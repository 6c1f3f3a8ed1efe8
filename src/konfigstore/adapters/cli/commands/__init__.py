"""CLI command implementations.

Collects all subcommand functions and re-exports them for registration
with the root CLI group.

Contents:
    * Info command from :mod:`.info`
    * Konfig store commands from :mod:`.store`
"""

from __future__ import annotations

from .info import cli_info
from .store import cli_cache_options, cli_list, cli_read, cli_use, cli_used

__all__ = [
    "cli_cache_options",
    "cli_info",
    "cli_list",
    "cli_read",
    "cli_use",
    "cli_used",
]
