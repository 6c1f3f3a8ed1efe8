"""Root CLI command group and global option handling.

Defines the top-level Click command group that serves as the entry point for
all subcommands. Loads layered configuration, initialises logging and builds
the store client once per invocation.

Contents:
    * :func:`cli` - Root command group with global options.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import rich_click as click
from pydantic import ValidationError as PydanticValidationError

from konfigstore import __init__conf__

from .constants import CLICK_CONTEXT_SETTINGS
from .context import apply_traceback_preferences, store_cli_context
from .exit_codes import ExitCode

if TYPE_CHECKING:
    from konfigstore.composition import AppServices


@click.group(
    help=__init__conf__.title,
    context_settings=CLICK_CONTEXT_SETTINGS,
    invoke_without_command=True,
)
@click.version_option(
    version=__init__conf__.version,
    prog_name=__init__conf__.shell_command,
    message=f"{__init__conf__.shell_command} version {__init__conf__.version}",
)
@click.option(
    "--traceback/--no-traceback",
    is_flag=True,
    default=False,
    help="Show full Python traceback on errors",
)
@click.pass_context
def cli(ctx: click.Context, traceback: bool) -> None:
    """Root command storing global flags and the store client.

    Example:
        >>> from click.testing import CliRunner
        >>> from konfigstore.composition import build_testing
        >>> result = CliRunner().invoke(cli, ["list"], obj=build_testing)
        >>> result.exit_code
        0
    """
    # ctx.obj is always the services factory (production or test)
    if not callable(ctx.obj):
        raise RuntimeError("Services factory not provided. This is a bug.")
    services: AppServices = ctx.obj()  # type: ignore[assignment]  # Click's obj is typed as Any
    config = services.get_config()
    try:
        services.init_logging(config)
        store = services.build_store(config)
    except PydanticValidationError as exc:
        click.echo(f"Error: invalid configuration: {exc}", err=True)
        raise SystemExit(ExitCode.CONFIG_ERROR) from exc
    store_cli_context(
        ctx,
        traceback=traceback,
        config=config,
        services=services,
        store=store,
    )
    apply_traceback_preferences(traceback)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# Deferred import breaks the cycle between this group and the command
# modules that register onto it.
def _register_commands() -> None:
    from .commands import (
        cli_cache_options,
        cli_info,
        cli_list,
        cli_read,
        cli_use,
        cli_used,
    )

    for cmd in (
        cli_cache_options,
        cli_info,
        cli_list,
        cli_read,
        cli_use,
        cli_used,
    ):
        cli.add_command(cmd)


_register_commands()


__all__ = ["cli"]
