"""Shared helpers for CLI command modules.

Internal module (underscore prefix) providing common patterns used across
command implementations.

Contents:
    * :func:`command_scope` - Bind lib_log_rich context for a command.
    * :func:`render_konfig` - Format a konfig for output.
    * :func:`fail_with` - Report a store error and exit with its code.
"""

from __future__ import annotations

import contextlib
from collections.abc import Iterator
from typing import Any, NoReturn

import lib_log_rich.runtime
import orjson
import rich_click as click
from pydantic_core import to_jsonable_python

from konfigstore.domain.enums import OutputFormat
from konfigstore.domain.errors import KonfigStoreError
from konfigstore.domain.models import Konfig

from ..exit_codes import exit_code_for


@contextlib.contextmanager
def command_scope(command: str, **extra: Any) -> Iterator[None]:
    """Bind logging context for ``command`` when the runtime is initialised."""
    if not lib_log_rich.runtime.is_initialised():
        yield
        return
    with lib_log_rich.runtime.bind(job_id=f"cli-{command}", extra={"command": command, **extra}):
        yield


def to_json(value: Any) -> str:
    """Render ``value`` as indented JSON with camelCase konfig keys."""
    plain = to_jsonable_python(value, by_alias=True, exclude_none=True)
    return orjson.dumps(plain, option=orjson.OPT_INDENT_2 | orjson.OPT_SORT_KEYS).decode("utf-8")


def _flatten(prefix: str, value: Any) -> Iterator[tuple[str, Any]]:
    if isinstance(value, dict):
        for key, inner in value.items():
            yield from _flatten(f"{prefix}.{key}" if prefix else str(key), inner)
    else:
        yield prefix, value


def render_konfig(konfig: Konfig, output_format: OutputFormat) -> str:
    """Format a konfig for display.

    Example:
        >>> from konfigstore.domain.models import Endpoints
        >>> k = Konfig(endpoints=Endpoints(koding="https://koding.com"), debug=False)
        >>> print(render_konfig(k, OutputFormat.HUMAN))  # doctest: +ELLIPSIS
        id = ...
        endpoints.koding = https://koding.com
        debug = False
    """
    if output_format is OutputFormat.JSON:
        return to_json(konfig)
    lines = [f"id = {konfig.id()}"]
    lines.extend(f"{key} = {value}" for key, value in _flatten("", konfig.model_dump(exclude_none=True)))
    return "\n".join(lines)


def fail_with(exc: KonfigStoreError) -> NoReturn:
    """Print ``exc`` to stderr and exit with its mapped exit code."""
    click.echo(f"Error: {exc}", err=True)
    raise SystemExit(exit_code_for(exc)) from exc


__all__ = [
    "command_scope",
    "fail_with",
    "render_konfig",
    "to_json",
]
