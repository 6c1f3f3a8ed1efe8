"""Konfig store client: migration, listing, merge-on-read and selection.

Every public operation first makes sure the one-time migration ran, then
performs its reads and writes inside a single cache transaction
(open → act → close). Persisted keys, scoped to the store's bucket:

* ``konfig`` - legacy single konfig, read-only after migration
* ``konfigs`` - collection of konfigs keyed by ``Konfig.id()``
* ``konfigs.used`` - ``{"id": ...}`` reference to the active konfig

Contents:
    * :class:`KonfigStore` - The store client.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Final, TypeVar

from ..domain.enums import RelocationAction
from ..domain.errors import (
    KonfigStoreError,
    NotFoundError,
    NotUsedError,
    ValidationError,
)
from ..domain.merge import merge_in
from ..domain.models import (
    DEFAULT_LOCK_TIMEOUT,
    CacheFileReport,
    CacheOptions,
    Environments,
    Konfig,
    Konfigs,
    UsedKonfig,
)
from .ports import KeyValueCache, NewKonfig, OpenCache, PrepareCacheFile

logger = logging.getLogger(__name__)

LEGACY_KONFIG_KEY: Final[str] = "konfig"
KONFIGS_KEY: Final[str] = "konfigs"
USED_KONFIG_KEY: Final[str] = "konfigs.used"

CACHE_FILE_SUFFIX: Final[str] = ".bolt"
DEFAULT_DIR_MODE: Final[int] = 0o755

T = TypeVar("T")


def _get_or_default(cache: KeyValueCache, key: str, kind: type[T], default: T) -> T:
    """Read ``key``, returning ``default`` when it is absent; other errors propagate."""
    try:
        return cache.get_value(key, kind)
    except NotFoundError:
        return default


def _check_app_name(app: str) -> None:
    """Reject application names that would resolve outside the store home.

    Example:
        >>> _check_app_name("kd")
        >>> _check_app_name("../kd")
        Traceback (most recent call last):
        ...
        konfigstore.domain.errors.ValidationError: invalid application name '../kd'
    """
    if not app or app in {".", ".."} or "/" in app or "\\" in app or Path(app).name != app:
        raise ValidationError(f"invalid application name {app!r}")


class KonfigStore:
    """Client for the local konfig store.

    Args:
        cache_options: Cache file holding the konfig keys.
        home: Directory per-application cache files are resolved under.
        open_cache: Opens a locked cache transaction.
        new_konfig: Builds default konfigs for :meth:`read`.
        prepare_cache_file: Best-effort legacy relocation and directory setup.
        dir_mode: Mode used when creating the cache file directory.

    Example:
        >>> from pathlib import Path
        >>> from konfigstore.adapters.memory import MemoryCacheFactory, prepare_cache_file_in_memory
        >>> from konfigstore.domain import CacheOptions, Endpoints, Konfig, new_konfig
        >>> store = KonfigStore(
        ...     CacheOptions(file=Path("konfig.bolt"), bucket="konfig"),
        ...     home=Path("/tmp/konfig"),
        ...     open_cache=MemoryCacheFactory(),
        ...     new_konfig=new_konfig,
        ...     prepare_cache_file=prepare_cache_file_in_memory,
        ... )
        >>> store.list()
        {}
        >>> k = Konfig(endpoints=Endpoints(koding="https://koding.com"))
        >>> store.use(k)
        >>> store.used().id() == k.id()
        True
    """

    def __init__(
        self,
        cache_options: CacheOptions,
        *,
        home: Path,
        open_cache: OpenCache,
        new_konfig: NewKonfig,
        prepare_cache_file: PrepareCacheFile,
        dir_mode: int = DEFAULT_DIR_MODE,
    ) -> None:
        self.options = cache_options
        self.home = home
        self._open_cache = open_cache
        self._new_konfig = new_konfig
        self._prepare_cache_file = prepare_cache_file
        self._dir_mode = dir_mode
        self._migrate_lock = threading.Lock()
        self._migrated = False

    # ------------------------------------------------------------------ public

    def list(self) -> Konfigs:
        """Return every stored konfig; empty when nothing is stored or readable."""
        self._ensure_migrated()
        try:
            with self._transaction() as cache:
                return _get_or_default(cache, KONFIGS_KEY, Konfigs, {})
        except KonfigStoreError as exc:
            logger.warning("Unable to list konfigs from %s: %s", self.options.file, exc)
            return {}

    def read(self, environments: Environments) -> Konfig:
        """Return the default konfig for ``environments`` with the legacy konfig merged in.

        Only the legacy single-konfig key is consulted. A missing, unreadable
        or invalid legacy konfig yields the unmodified default.
        """
        self._ensure_migrated()
        konfig = self._new_konfig(environments)
        try:
            with self._transaction() as cache:
                override = cache.get_value(LEGACY_KONFIG_KEY, Konfig)
        except NotFoundError:
            return konfig
        except KonfigStoreError as exc:
            logger.warning("Unable to read legacy konfig from %s: %s", self.options.file, exc)
            return konfig

        if not override.is_valid():
            logger.debug("Ignoring invalid legacy konfig override")
            return konfig
        try:
            return merge_in(konfig, override)
        except KonfigStoreError as exc:
            logger.warning("Unable to merge legacy konfig: %s", exc)
            return konfig

    def use(self, konfig: Konfig) -> None:
        """Store ``konfig`` and mark it as the one in use.

        Raises:
            ValidationError: If ``konfig`` is not valid; nothing is written.
            StoreError: If the cache cannot be opened, read or written.
        """
        self._ensure_migrated()
        konfig.ensure_valid()
        konfig_id = konfig.id()

        with self._transaction() as cache:
            konfigs = _get_or_default(cache, KONFIGS_KEY, Konfigs, {})
            konfigs[konfig_id] = konfig
            cache.set_value(KONFIGS_KEY, konfigs)
            cache.set_value(USED_KONFIG_KEY, UsedKonfig(id=konfig_id))
        logger.info("Using konfig %s (%s)", konfig_id, konfig.koding_url())

    def used(self) -> Konfig:
        """Return the konfig currently in use.

        Raises:
            NotUsedError: If no konfig was ever marked as used.
            NotFoundError: If the used reference points at a missing konfig.
            StoreError: If the cache cannot be opened or read.
        """
        self._ensure_migrated()
        with self._transaction() as cache:
            try:
                used = cache.get_value(USED_KONFIG_KEY, UsedKonfig)
            except NotFoundError as exc:
                raise NotUsedError("no konfig is in use") from exc
            konfigs = _get_or_default(cache, KONFIGS_KEY, Konfigs, {})

        konfig = konfigs.get(used.id)
        if konfig is None:
            raise NotFoundError("config not found - use one that exists")
        return konfig

    def resolve_cache_file(self, app: str) -> tuple[CacheOptions, CacheFileReport]:
        """Resolve the cache file for ``app`` and prepare its location.

        The file is scoped by the used konfig's id when one exists. A legacy
        unscoped file is relocated to the scoped path when only it exists.
        The store's own cache file is never relocated. Best-effort failures
        are listed in the report.

        Raises:
            ValidationError: If ``app`` is not a single file name component.
        """
        _check_app_name(app)
        self._ensure_migrated()
        legacy_file = self.home / f"{app}{CACHE_FILE_SUFFIX}"
        file = self._cache_file(app)
        if self._is_store_file(legacy_file) or self._is_store_file(file):
            report = CacheFileReport(
                file=file,
                legacy_file=legacy_file,
                relocation=RelocationAction.NONE,
                warnings=(f"{self.options.file} is the konfig store file; not relocated",),
            )
        else:
            report = self._prepare_cache_file(legacy_file, file, dir_mode=self._dir_mode)
        for warning in report.warnings:
            logger.warning("Cache file %s: %s", file, warning)
        options = CacheOptions(file=file, bucket=app, timeout=self.options.timeout)
        return options, report

    def cache_options(self, app: str) -> CacheOptions:
        """Return the cache options for ``app``; see :meth:`resolve_cache_file`."""
        options, _ = self.resolve_cache_file(app)
        return options

    # ----------------------------------------------------------------- private

    def _is_store_file(self, path: Path) -> bool:
        return path == self.options.file or path.resolve() == self.options.file.resolve()

    def _cache_file(self, app: str) -> Path:
        try:
            konfig = self.used()
        except KonfigStoreError:
            return self.home / f"{app}{CACHE_FILE_SUFFIX}"
        return self.home / f"{app}.{konfig.id()}{CACHE_FILE_SUFFIX}"

    @contextmanager
    def _transaction(self) -> Iterator[KeyValueCache]:
        """Open the cache, yield it, and always close it; the first error wins."""
        cache = self._open_cache(self.options)
        try:
            yield cache
        except BaseException:
            try:
                cache.close()
            except KonfigStoreError as close_exc:
                logger.warning("Closing %s after a failed operation: %s", self.options.file, close_exc)
            raise
        cache.close()

    def _ensure_migrated(self) -> None:
        if self._migrated:
            return
        with self._migrate_lock:
            if self._migrated:
                return
            try:
                self._migrate()
            finally:
                self._migrated = True

    def _migrate(self) -> None:
        """Fold the legacy konfig into the collection and pick a default.

        Best-effort: a corrupted cache cannot be repaired from here, so
        failures are logged and dropped.
        """
        try:
            with self._transaction() as cache:
                legacy = _get_or_default(cache, LEGACY_KONFIG_KEY, Konfig, Konfig())
                konfigs = _get_or_default(cache, KONFIGS_KEY, Konfigs, {})
                used = _get_or_default(cache, USED_KONFIG_KEY, UsedKonfig, UsedKonfig())

                if legacy.is_valid():
                    legacy_id = legacy.id()
                    if legacy_id not in konfigs:
                        konfigs[legacy_id] = legacy
                        cache.set_value(KONFIGS_KEY, konfigs)
                        logger.info("Migrated legacy konfig %s", legacy_id)

                if not used.id and len(konfigs) == 1:
                    ((only_id, only_konfig),) = konfigs.items()
                    if only_konfig.is_valid():
                        cache.set_value(USED_KONFIG_KEY, UsedKonfig(id=only_id))
                        logger.info("Defaulted used konfig to %s", only_id)
        except KonfigStoreError as exc:
            logger.warning("Konfig migration of %s failed: %s", self.options.file, exc)


__all__ = [
    "CACHE_FILE_SUFFIX",
    "KONFIGS_KEY",
    "LEGACY_KONFIG_KEY",
    "USED_KONFIG_KEY",
    "KonfigStore",
]
