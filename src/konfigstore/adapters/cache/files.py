"""Best-effort preparation of per-application cache file locations.

Relocates legacy unscoped cache files to their konfig-scoped path (rename,
falling back to a symlink), creates the containing directory and hands it
to the invoking user when running under sudo. Nothing here raises; every
failure is reported in the returned :class:`CacheFileReport`.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from konfigstore.domain.enums import RelocationAction
from konfigstore.domain.models import CacheFileReport

logger = logging.getLogger(__name__)


def relocate_legacy_file(legacy_file: Path, file: Path) -> tuple[RelocationAction, tuple[str, ...]]:
    """Move ``legacy_file`` to ``file``, or symlink ``file`` to it when moving fails.

    Returns:
        The action taken and any warnings. A failed rename that was
        recovered by a symlink is not a warning.

    Example:
        >>> import tempfile
        >>> tmp = Path(tempfile.mkdtemp())
        >>> _ = (tmp / "kd.bolt").write_bytes(b"")
        >>> relocate_legacy_file(tmp / "kd.bolt", tmp / "kd.abc.bolt")
        (<RelocationAction.RENAMED: 'renamed'>, ())
    """
    try:
        legacy_file.rename(file)
    except OSError as rename_exc:
        logger.debug("Rename of %s failed (%s), trying symlink", legacy_file, rename_exc)
        try:
            file.symlink_to(legacy_file)
        except OSError as link_exc:
            message = f"unable to move old cache file to new location {file}: {rename_exc}, {link_exc}"
            return RelocationAction.FAILED, (message,)
        return RelocationAction.SYMLINKED, ()
    return RelocationAction.RENAMED, ()


def chown_to_invoking_user(path: Path) -> bool:
    """Give ``path`` to the user who invoked sudo, when running as root.

    Returns:
        True when ownership was changed, False when there was nothing to do.

    Raises:
        OSError: If changing ownership fails.
        ValueError: If ``SUDO_UID``/``SUDO_GID`` are not integers.
    """
    geteuid = getattr(os, "geteuid", None)
    if geteuid is None or geteuid() != 0:
        return False
    uid = os.environ.get("SUDO_UID")
    if not uid:
        return False
    gid = os.environ.get("SUDO_GID")
    os.chown(path, int(uid), int(gid) if gid else -1)
    return True


def _needs_relocation(legacy_file: Path, file: Path) -> bool:
    if file == legacy_file or file.exists() or file.is_symlink():
        return False
    return legacy_file.exists()


def prepare_cache_file(legacy_file: Path, file: Path, *, dir_mode: int) -> CacheFileReport:
    """Relocate the legacy cache file if needed and prepare the directory.

    Args:
        legacy_file: Unscoped path used by older versions.
        file: Path the cache file should live at now.
        dir_mode: Mode for a newly created directory.

    Returns:
        Report describing the relocation and any best-effort failures.
    """
    warnings: list[str] = []
    relocation = RelocationAction.NONE

    if _needs_relocation(legacy_file, file):
        relocation, relocation_warnings = relocate_legacy_file(legacy_file, file)
        warnings.extend(relocation_warnings)
        logger.info("Legacy cache file %s: %s", legacy_file, relocation.value)

    directory = file.parent
    try:
        directory.mkdir(mode=dir_mode, parents=True, exist_ok=True)
    except OSError as exc:
        warnings.append(f"unable to create directory {directory}: {exc}")
    try:
        chown_to_invoking_user(directory)
    except (OSError, ValueError) as exc:
        warnings.append(f"unable to change owner of {directory}: {exc}")

    return CacheFileReport(
        file=file,
        legacy_file=legacy_file,
        relocation=relocation,
        warnings=tuple(warnings),
    )


__all__ = [
    "chown_to_invoking_user",
    "prepare_cache_file",
    "relocate_legacy_file",
]
