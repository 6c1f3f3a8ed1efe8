"""Composition root and the package-level convenience functions."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
from lib_layered_config import Config

import konfigstore
from konfigstore import composition
from konfigstore.adapters.cache import open_sqlite_cache
from konfigstore.adapters.memory import MemoryCacheFactory
from konfigstore.application.store import KonfigStore
from konfigstore.domain.models import CacheOptions, Environments, Konfig


@pytest.mark.os_agnostic
def test_build_store_uses_configured_location(
    tmp_path: Path,
    config_factory: Callable[[dict[str, Any]], Config],
) -> None:
    """The production store reads its file, bucket and timeout from configuration."""
    config = config_factory({"konfig_store": {"home": str(tmp_path), "bucket": "b", "lock_timeout": 2}})

    store = composition.build_store(config)

    assert store.options == CacheOptions(file=tmp_path / "konfig.bolt", bucket="b", timeout=2.0)
    assert store.home == tmp_path


@pytest.mark.os_agnostic
def test_build_store_persists_to_sqlite(
    tmp_path: Path,
    config_factory: Callable[[dict[str, Any]], Config],
    konfig_factory: Callable[..., Konfig],
) -> None:
    """Konfigs selected through a production store land in the SQLite file."""
    store = composition.build_store(config_factory({"konfig_store": {"home": str(tmp_path)}}))
    konfig = konfig_factory("https://a.koding.com")

    store.use(konfig)

    cache = open_sqlite_cache(store.options)
    try:
        assert cache.get_value("konfigs.used", dict) == {"id": konfig.id()}
    finally:
        cache.close()


@pytest.mark.os_agnostic
def test_build_production_wires_real_adapters() -> None:
    """Production services use the layered config loader and SQLite store."""
    from konfigstore.adapters.config.loader import get_config
    from konfigstore.adapters.logging.setup import init_logging

    services = composition.build_production()

    assert services.get_config is get_config
    assert services.init_logging is init_logging
    assert services.build_store is composition.build_store


@pytest.mark.os_agnostic
def test_build_testing_shares_the_given_cache(konfig_factory: Callable[..., Konfig]) -> None:
    """Stores from testing services write into the supplied memory cache."""
    cache = MemoryCacheFactory()
    services = composition.build_testing(cache=cache, home=Path("home"))
    store = services.build_store(services.get_config())

    store.use(konfig_factory())

    assert store.options.file == Path("home") / "konfig.bolt"
    assert cache.opens == cache.closes > 0


@pytest.mark.os_agnostic
def test_services_are_immutable() -> None:
    """AppServices is a frozen container."""
    services = composition.build_testing()

    with pytest.raises(AttributeError):
        services.get_config = services.get_config  # type: ignore[misc]


# ======================== Package-level functions ========================


@pytest.fixture
def default_memory_store(monkeypatch: pytest.MonkeyPatch, store: KonfigStore) -> KonfigStore:
    """Route the package-level functions to the memory-backed store."""
    monkeypatch.setattr(konfigstore, "default_store", lambda: store)
    return store


@pytest.mark.os_agnostic
def test_package_functions_delegate_to_the_default_store(
    default_memory_store: KonfigStore,
    konfig_factory: Callable[..., Konfig],
) -> None:
    """use, used, list_konfigs, read and cache_options act on one shared store."""
    konfig = konfig_factory("https://a.koding.com")

    konfigstore.use(konfig)

    assert konfigstore.used() == konfig
    assert konfigstore.list_konfigs() == {konfig.id(): konfig}
    assert konfigstore.read(Environments()).koding_url() == "https://koding.com"
    assert konfigstore.cache_options("kd").file.name == f"kd.{konfig.id()}.bolt"


@pytest.mark.os_agnostic
def test_default_store_is_built_once(monkeypatch: pytest.MonkeyPatch, config_factory: Callable[..., Config]) -> None:
    """The process-wide store is constructed lazily and reused."""
    built: list[Config] = []

    def fake_build_store(config: Config) -> str:
        built.append(config)
        return "store"

    monkeypatch.setattr(composition, "get_config", lambda: config_factory({}))
    monkeypatch.setattr(composition, "build_store", fake_build_store)
    composition.default_store.cache_clear()
    try:
        assert composition.default_store() == "store"
        assert composition.default_store() == "store"
    finally:
        composition.default_store.cache_clear()

    assert len(built) == 1
