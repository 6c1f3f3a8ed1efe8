"""Shared pytest fixtures for store, adapter and CLI tests.

Centralizes test infrastructure following clean architecture principles:
- All shared fixtures live here
- Tests import fixtures implicitly via pytest's conftest discovery
- Fixtures use descriptive names that read as plain English
"""

from __future__ import annotations

import os
import re
from collections.abc import Callable, Iterator
from dataclasses import fields
from pathlib import Path
from typing import TYPE_CHECKING, Any

import lib_cli_exit_tools
import pytest
from click.testing import CliRunner
from lib_layered_config import Config

from konfigstore.adapters.memory import MemoryCacheFactory, prepare_cache_file_in_memory
from konfigstore.application.store import KonfigStore
from konfigstore.domain import CacheOptions, Endpoints, Konfig, new_konfig

if TYPE_CHECKING:
    from konfigstore.composition import AppServices

ANSI_ESCAPE_PATTERN = re.compile(r"\x1B\[[0-?]*[ -/]*[@-~]")
CONFIG_FIELDS: tuple[str, ...] = tuple(field.name for field in fields(type(lib_cli_exit_tools.config)))

STORE_HOME = Path("konfig-home")


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Skip POSIX-only tests on Windows."""
    if os.name != "nt":
        return
    skip_posix = pytest.mark.skip(reason="requires POSIX filesystem semantics")
    for item in items:
        if "posix_only" in item.keywords:
            item.add_marker(skip_posix)


def _remove_ansi_codes(text: str) -> str:
    """Return *text* stripped of ANSI escape sequences."""
    return ANSI_ESCAPE_PATTERN.sub("", text)


def _snapshot_cli_config() -> dict[str, object]:
    """Capture every attribute from ``lib_cli_exit_tools.config``."""
    return {name: getattr(lib_cli_exit_tools.config, name) for name in CONFIG_FIELDS}


def _restore_cli_config(snapshot: dict[str, object]) -> None:
    """Reapply a configuration snapshot captured by ``_snapshot_cli_config``."""
    for name, value in snapshot.items():
        setattr(lib_cli_exit_tools.config, name, value)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a fresh CliRunner per test.

    Click 8.2+ keeps ``result.stdout`` and ``result.stderr`` apart; parse
    JSON from ``result.stdout`` so error lines never leak into it.
    """
    return CliRunner()


@pytest.fixture
def strip_ansi() -> Callable[[str], str]:
    """Return a helper that strips ANSI escape sequences from a string."""

    def _strip(value: str) -> str:
        return _remove_ansi_codes(value)

    return _strip


@pytest.fixture
def managed_traceback_state() -> Iterator[None]:
    """Reset traceback flags to a known baseline and restore after the test.

    Use this whenever a test reads or mutates the global
    ``lib_cli_exit_tools.config`` traceback flags.
    """
    lib_cli_exit_tools.reset_config()
    lib_cli_exit_tools.config.traceback = False
    lib_cli_exit_tools.config.traceback_force_color = False
    snapshot = _snapshot_cli_config()
    try:
        yield
    finally:
        _restore_cli_config(snapshot)


@pytest.fixture
def clear_config_cache() -> Iterator[None]:
    """Clear the get_config lru_cache before each test.

    Only clears before, not after, to avoid errors when the function has been
    monkeypatched during the test (losing cache_clear method).
    """
    from konfigstore.adapters.config import loader as config_mod

    config_mod.get_config.cache_clear()
    yield


@pytest.fixture
def config_factory() -> Callable[[dict[str, Any]], Config]:
    """Create real Config instances from test data dicts.

    Builds actual ``lib_layered_config.Config`` objects without filesystem I/O.

    Example:
        def test_store_section(config_factory: Callable[[dict[str, Any]], Config]) -> None:
            config = config_factory({"konfig_store": {"bucket": "other"}})
            assert config.get("konfig_store.bucket") == "other"
    """

    def _factory(data: dict[str, Any]) -> Config:
        return Config(data, {})

    return _factory


@pytest.fixture
def konfig_factory() -> Callable[..., Konfig]:
    """Create valid konfigs for a Koding base URL, with optional extra fields.

    Example:
        def test_id(konfig_factory: Callable[..., Konfig]) -> None:
            konfig = konfig_factory("https://a.koding.com", debug=True)
            assert konfig.debug is True
    """

    def _factory(url: str = "https://koding.com", **extra: Any) -> Konfig:
        return Konfig(endpoints=Endpoints(koding=url), **extra)

    return _factory


@pytest.fixture
def memory_cache() -> MemoryCacheFactory:
    """Provide an empty in-memory cache factory shared by a store and the test."""
    return MemoryCacheFactory()


@pytest.fixture
def store_options() -> CacheOptions:
    """Cache options the memory-backed ``store`` fixture reads and writes."""
    return CacheOptions(file=STORE_HOME / "konfig.bolt", bucket="konfig")


@pytest.fixture
def store_factory(
    memory_cache: MemoryCacheFactory,
    store_options: CacheOptions,
) -> Callable[[], KonfigStore]:
    """Return a factory building fresh stores over the shared ``memory_cache``.

    Every call yields a store that has not migrated yet, as a new process
    opening the same cache file would.
    """

    def _build() -> KonfigStore:
        return KonfigStore(
            store_options,
            home=STORE_HOME,
            open_cache=memory_cache,
            new_konfig=new_konfig,
            prepare_cache_file=prepare_cache_file_in_memory,
        )

    return _build


@pytest.fixture
def store(store_factory: Callable[[], KonfigStore]) -> KonfigStore:
    """Provide a memory-backed store whose cache starts out empty."""
    return store_factory()


@pytest.fixture
def sqlite_store(tmp_path: Path) -> KonfigStore:
    """Provide a store backed by a real SQLite cache file under ``tmp_path``."""
    from konfigstore.adapters.cache import open_sqlite_cache, prepare_cache_file

    return KonfigStore(
        CacheOptions(file=tmp_path / "konfig.bolt", bucket="konfig", timeout=1.0),
        home=tmp_path,
        open_cache=open_sqlite_cache,
        new_konfig=new_konfig,
        prepare_cache_file=prepare_cache_file,
        dir_mode=0o700,
    )


@pytest.fixture
def testing_services(memory_cache: MemoryCacheFactory) -> Callable[[], AppServices]:
    """Return an in-memory services factory sharing ``memory_cache`` with the test.

    Example:
        def test_list(cli_runner: CliRunner, testing_services: Callable[[], AppServices]) -> None:
            result = cli_runner.invoke(cli, ["list"], obj=testing_services)
            assert result.exit_code == 0
    """
    from konfigstore.composition import build_testing

    services = build_testing(cache=memory_cache, home=STORE_HOME)
    return lambda: services


@pytest.fixture
def inject_config(
    clear_config_cache: None,
    memory_cache: MemoryCacheFactory,
) -> Callable[[Config], Callable[[], AppServices]]:
    """Return a factory that provides in-memory services with an injected Config.

    Only the configuration loader is replaced; the store is built from the
    injected Config exactly as in production, over ``memory_cache``.
    """
    from konfigstore.composition import AppServices, build_testing

    def _inject(config: Config) -> Callable[[], AppServices]:
        def _fake_get_config(**_kwargs: Any) -> Config:
            return config

        base = build_testing(cache=memory_cache, home=STORE_HOME)
        test_services = AppServices(
            get_config=_fake_get_config,
            init_logging=base.init_logging,
            build_store=base.build_store,
        )
        return lambda: test_services

    return _inject
