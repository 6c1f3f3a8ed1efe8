"""POSIX-conventional exit codes for CLI error paths.

Signal codes (130, 141, 143) are informational constants only; the
application never raises ``SystemExit`` with these values and
``lib_cli_exit_tools`` handles signal-to-exit-code translation.

Contents:
    * :class:`ExitCode` - IntEnum of all exit codes used by this application.
    * :func:`exit_code_for` - Map a store error to its exit code.
"""

from __future__ import annotations

from enum import IntEnum

from konfigstore.domain.errors import (
    KonfigStoreError,
    LockTimeoutError,
    NotFoundError,
    ValidationError,
)


class ExitCode(IntEnum):
    """POSIX-conventional exit codes for CLI error paths.

    * 0–1: generic success / failure
    * 2: ENOENT (konfig or reference not found)
    * 22: EINVAL (konfig failed validation)
    * 78: EX_CONFIG (invalid [konfig_store] or logging configuration)
    * 110: ETIMEDOUT (cache lock not acquired)
    * 128+N: signal N (informational only)

    Example:
        >>> ExitCode.SUCCESS
        <ExitCode.SUCCESS: 0>
        >>> int(ExitCode.TIMEOUT)
        110
    """

    SUCCESS = 0
    GENERAL_ERROR = 1
    NOT_FOUND = 2
    INVALID_ARGUMENT = 22
    CONFIG_ERROR = 78
    TIMEOUT = 110
    SIGNAL_INT = 130
    BROKEN_PIPE = 141
    SIGNAL_TERM = 143


def exit_code_for(exc: KonfigStoreError) -> ExitCode:
    """Return the exit code reported for a store error.

    Example:
        >>> exit_code_for(NotFoundError("gone"))
        <ExitCode.NOT_FOUND: 2>
    """
    if isinstance(exc, NotFoundError):
        return ExitCode.NOT_FOUND
    if isinstance(exc, ValidationError):
        return ExitCode.INVALID_ARGUMENT
    if isinstance(exc, LockTimeoutError):
        return ExitCode.TIMEOUT
    return ExitCode.GENERAL_ERROR


__all__ = ["ExitCode", "exit_code_for"]
