"""Type-safe domain enums for output formats and cache-file relocation outcomes."""

from __future__ import annotations

from enum import Enum


class OutputFormat(str, Enum):
    """Output format options for konfig display.

    Inherits from str to allow direct string comparison and Click integration.

    Attributes:
        HUMAN: Human-readable ``key = value`` output.
        JSON: Machine-readable JSON output, camelCase keys as stored.

    Example:
        >>> OutputFormat.JSON == "json"
        True
    """

    HUMAN = "human"
    JSON = "json"


class RelocationAction(str, Enum):
    """Outcome of moving a legacy unscoped cache file to its scoped path.

    Inherits from str to allow direct string comparison and JSON output.

    Attributes:
        NONE: Nothing to relocate (no legacy file, or target already exists).
        RENAMED: Legacy file was renamed to the scoped path.
        SYMLINKED: Rename failed; scoped path now links to the legacy file.
        FAILED: Both rename and symlink failed; legacy file left in place.

    Example:
        >>> RelocationAction.RENAMED.value
        'renamed'
        >>> RelocationAction.FAILED == "failed"
        True
    """

    NONE = "none"
    RENAMED = "renamed"
    SYMLINKED = "symlinked"
    FAILED = "failed"


__all__ = [
    "OutputFormat",
    "RelocationAction",
]
