"""In-memory configuration adapter for testing.

Provides a configuration loader that satisfies the same Protocol as the
production adapter but operates entirely in memory -- no filesystem, no
layered discovery.
"""

from __future__ import annotations

from lib_layered_config import Config


def get_config_in_memory(*, start_dir: str | None = None) -> Config:
    """Return an empty in-memory Config."""
    return Config({}, {})


__all__ = ["get_config_in_memory"]
