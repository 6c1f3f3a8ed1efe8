"""Konfig store CLI commands.

Contents:
    * :func:`cli_list` - List stored konfigs, marking the one in use.
    * :func:`cli_used` - Show the konfig in use.
    * :func:`cli_use` - Select a stored konfig or import one from a JSON file.
    * :func:`cli_read` - Show the default konfig merged with the legacy konfig.
    * :func:`cli_cache_options` - Resolve an application's cache file.
"""

from __future__ import annotations

import logging
from pathlib import Path

import orjson
import rich_click as click
from pydantic import ValidationError as PydanticValidationError

from konfigstore.domain.environments import builtin_environments
from konfigstore.domain.enums import OutputFormat
from konfigstore.domain.errors import KonfigStoreError, NotFoundError
from konfigstore.domain.models import Environments, Konfig

from ..constants import CLICK_CONTEXT_SETTINGS
from ..context import get_cli_context
from ._shared import command_scope, fail_with, render_konfig, to_json

logger = logging.getLogger(__name__)

_FORMAT_OPTION = click.option(
    "--format",
    "output_format",
    type=click.Choice([f.value for f in OutputFormat], case_sensitive=False),
    default=OutputFormat.HUMAN.value,
    help="Output format (human-readable or JSON)",
)


@click.command("list", context_settings=CLICK_CONTEXT_SETTINGS)
@_FORMAT_OPTION
@click.pass_context
def cli_list(ctx: click.Context, output_format: str) -> None:
    """List stored konfigs; the one in use is marked with ``*``."""
    store = get_cli_context(ctx).store
    fmt = OutputFormat(output_format.lower())
    with command_scope("list", format=fmt.value):
        konfigs = store.list()
        if fmt is OutputFormat.JSON:
            click.echo(to_json(konfigs))
            return
        if not konfigs:
            click.echo("No konfigs stored.")
            return
        try:
            used_id = store.used().id()
        except KonfigStoreError:
            used_id = None
        for konfig_id, konfig in sorted(konfigs.items()):
            marker = "*" if konfig_id == used_id else " "
            click.echo(f"{marker} {konfig_id}  {konfig.koding_url()}")


@click.command("used", context_settings=CLICK_CONTEXT_SETTINGS)
@_FORMAT_OPTION
@click.pass_context
def cli_used(ctx: click.Context, output_format: str) -> None:
    """Show the konfig currently in use."""
    store = get_cli_context(ctx).store
    fmt = OutputFormat(output_format.lower())
    with command_scope("used", format=fmt.value):
        try:
            konfig = store.used()
        except KonfigStoreError as exc:
            fail_with(exc)
        click.echo(render_konfig(konfig, fmt))


def _load_konfig_file(path: Path) -> Konfig:
    try:
        return Konfig.model_validate(orjson.loads(path.read_bytes()))
    except (OSError, orjson.JSONDecodeError, PydanticValidationError) as exc:
        raise click.BadParameter(f"unable to load konfig from {path}: {exc}", param_hint="--file") from exc


@click.command("use", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("konfig_id", required=False)
@click.option(
    "--file",
    "file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Import the konfig from a JSON file instead of selecting a stored one",
)
@click.pass_context
def cli_use(ctx: click.Context, konfig_id: str | None, file: Path | None) -> None:
    """Mark a konfig as used, selecting it by KONFIG_ID or importing it with --file."""
    if (konfig_id is None) == (file is None):
        raise click.UsageError("Pass either KONFIG_ID or --file.")
    store = get_cli_context(ctx).store
    with command_scope("use", konfig_id=konfig_id, file=str(file) if file else None):
        if file is not None:
            konfig = _load_konfig_file(file)
        else:
            found = store.list().get(str(konfig_id))
            if found is None:
                fail_with(NotFoundError(f"konfig {konfig_id!r} not found - run 'list' to see stored konfigs"))
            konfig = found
        try:
            store.use(konfig)
        except KonfigStoreError as exc:
            fail_with(exc)
        click.echo(f"Using konfig {konfig.id()} ({konfig.koding_url()})")


@click.command("read", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option(
    "--env",
    default="production",
    show_default=True,
    help=f"Environment to build defaults for ({', '.join(builtin_environments())})",
)
@click.option("--klient-env", default=None, help="Klient environment; defaults to --env")
@_FORMAT_OPTION
@click.pass_context
def cli_read(ctx: click.Context, env: str, klient_env: str | None, output_format: str) -> None:
    """Show the default konfig for an environment with the legacy konfig merged in."""
    store = get_cli_context(ctx).store
    fmt = OutputFormat(output_format.lower())
    with command_scope("read", env=env, format=fmt.value):
        konfig = store.read(Environments(env=env, klient_env=klient_env))
        click.echo(render_konfig(konfig, fmt))


@click.command("cache-options", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("app")
@_FORMAT_OPTION
@click.pass_context
def cli_cache_options(ctx: click.Context, app: str, output_format: str) -> None:
    """Resolve the cache file for APP, relocating a legacy file when needed."""
    store = get_cli_context(ctx).store
    fmt = OutputFormat(output_format.lower())
    with command_scope("cache-options", app=app, format=fmt.value):
        try:
            options, report = store.resolve_cache_file(app)
        except KonfigStoreError as exc:
            fail_with(exc)
        payload = {
            "file": str(options.file),
            "bucket": options.bucket,
            "timeout": options.timeout,
            "relocation": report.relocation.value,
            "warnings": list(report.warnings),
        }
        if fmt is OutputFormat.JSON:
            click.echo(to_json(payload))
            return
        for key, value in payload.items():
            if key == "warnings":
                for warning in report.warnings:
                    click.echo(f"warning = {warning}")
                continue
            click.echo(f"{key} = {value}")


__all__ = [
    "cli_cache_options",
    "cli_list",
    "cli_read",
    "cli_use",
    "cli_used",
]
