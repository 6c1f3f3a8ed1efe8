"""Store settings loader for the ``[konfig_store]`` configuration section.

Parses the section with Pydantic at the boundary and derives the cache
options, home directory and directory mode the store client is built with.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Final, cast

from lib_layered_config import DEFAULT_USER_DIR_MODE, Config
from pydantic import BaseModel, ConfigDict, Field

from konfigstore.domain.models import DEFAULT_LOCK_TIMEOUT, CacheOptions

logger = logging.getLogger(__name__)

DEFAULT_HOME_DIRNAME: Final[str] = "konfig"


def parse_mode(value: int | str, default: int) -> int:
    """Parse a permission mode value from config.

    Accepts either an integer or an octal string (e.g., "0o755" or "755").

    Args:
        value: Integer mode or octal string.
        default: Fallback value if parsing fails.

    Returns:
        Integer permission mode.

    Example:
        >>> parse_mode(493, 0o700)
        493
        >>> parse_mode("0o755", 0o700)
        493
        >>> parse_mode("755", 0o700)
        493
        >>> parse_mode("rwx", 0o700) == 0o700
        True
    """
    if isinstance(value, int):
        return value
    try:
        if value.startswith("0o"):
            return int(value, 0)
        return int(value, 8)
    except ValueError:
        logger.warning("Invalid directory mode '%s', falling back to default %o", value, default)
        return default


def default_home() -> Path:
    """Return the per-user directory the store lives in when none is configured."""
    return Path.home() / ".config" / DEFAULT_HOME_DIRNAME


class StoreSettings(BaseModel):
    """Pydantic model for [konfig_store] config section validation.

    Example:
        >>> settings = StoreSettings.model_validate({"home": "/srv/konfig", "lock_timeout": 2})
        >>> settings.home_path().as_posix()
        '/srv/konfig'
        >>> settings.cache_options().file.as_posix()
        '/srv/konfig/konfig.bolt'
        >>> settings.cache_options().timeout
        2.0
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    home: str = ""
    file: str = "konfig.bolt"
    bucket: str = "konfig"
    lock_timeout: float = Field(default=DEFAULT_LOCK_TIMEOUT, gt=0)
    directory_mode: int | str = DEFAULT_USER_DIR_MODE

    def home_path(self) -> Path:
        if self.home.strip():
            return Path(self.home).expanduser()
        return default_home()

    def dir_mode(self) -> int:
        return parse_mode(self.directory_mode, DEFAULT_USER_DIR_MODE)

    def cache_options(self) -> CacheOptions:
        return CacheOptions(file=self.home_path() / self.file, bucket=self.bucket, timeout=self.lock_timeout)


def load_store_settings(config: Config) -> StoreSettings:
    """Load :class:`StoreSettings` from the ``[konfig_store]`` section.

    Missing keys fall back to the model defaults.

    Raises:
        pydantic.ValidationError: If a configured value has the wrong type.

    Example:
        >>> from lib_layered_config import Config
        >>> load_store_settings(Config({}, {})).bucket
        'konfig'
    """
    raw: object = config.get("konfig_store", default={})
    return StoreSettings.model_validate(cast("dict[str, object]", raw) if raw else {})


__all__ = [
    "DEFAULT_HOME_DIRNAME",
    "StoreSettings",
    "default_home",
    "load_store_settings",
    "parse_mode",
]
