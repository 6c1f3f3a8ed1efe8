"""Konfig entities, the konfig collection and cache value objects.

Contents:
    * :class:`Endpoints` - Service URLs a konfig points at.
    * :class:`Konfig` - A single environment configuration profile.
    * :data:`Konfigs` - Collection of konfigs keyed by :meth:`Konfig.id`.
    * :class:`UsedKonfig` - Reference to the active konfig.
    * :class:`Environments` - Descriptor used to construct default konfigs.
    * :class:`CacheOptions` - Where and how a cache file is opened.
    * :class:`CacheFileReport` - Outcome of preparing a cache file location.

System Role:
    Pure data with no I/O. Every konfig field is optional and ``None``
    means *unset*, so an override can carry explicit ``False``/``0``/``""``
    values that still win over defaults when merged.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from pathlib import Path
from typing import Final
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from .enums import RelocationAction
from .errors import ValidationError

#: Seconds to wait for the exclusive cache file lock before giving up.
DEFAULT_LOCK_TIMEOUT: Final[float] = 5.0

#: Length of the hex identifier derived from a konfig's Koding endpoint.
KONFIG_ID_LENGTH: Final[int] = 12

_VALID_SCHEMES: Final[frozenset[str]] = frozenset({"http", "https"})


class _KonfigModel(BaseModel):
    """Shared model settings: immutable, camelCase on the wire."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class Endpoints(_KonfigModel):
    """Service URLs for a konfig.

    Example:
        >>> Endpoints(koding="https://koding.com").koding
        'https://koding.com'
        >>> Endpoints.model_validate({"ipCheck": "https://p.koding.com/-/ipcheck"}).ip_check
        'https://p.koding.com/-/ipcheck'
    """

    koding: str | None = None
    tunnel: str | None = None
    ip_check: str | None = None
    klient_latest: str | None = None
    kd_latest: str | None = None


def konfig_id(koding_url: str) -> str:
    """Derive the deterministic konfig identifier from a Koding base URL.

    Only the scheme and network location take part, lower-cased, so trailing
    paths or slashes do not change the identity of an environment.

    Example:
        >>> konfig_id("https://koding.com") == konfig_id("https://Koding.com/")
        True
        >>> len(konfig_id("https://koding.com"))
        12
    """
    raw = koding_url.strip()
    parts = urlsplit(raw)
    normalized = f"{parts.scheme}://{parts.netloc}" if parts.netloc else raw
    return hashlib.sha1(normalized.lower().encode("utf-8")).hexdigest()[:KONFIG_ID_LENGTH]


class Konfig(_KonfigModel):
    """A named environment configuration profile.

    Example:
        >>> k = Konfig(endpoints=Endpoints(koding="https://koding.com"), debug=True)
        >>> k.is_valid()
        True
        >>> k.id() == konfig_id("https://koding.com")
        True
        >>> Konfig().is_valid()
        False
    """

    endpoints: Endpoints | None = None
    kite_key_file: str | None = None
    kite_key: str | None = None
    debug: bool | None = None
    public_bucket_name: str | None = None
    public_bucket_region: str | None = None
    lock_timeout: int | None = None

    def koding_url(self) -> str:
        """Return the Koding base URL or an empty string when unset."""
        if self.endpoints is None or self.endpoints.koding is None:
            return ""
        return self.endpoints.koding

    def id(self) -> str:
        """Return the identifier this konfig is stored under."""
        return konfig_id(self.koding_url())

    def ensure_valid(self) -> None:
        """Raise :class:`ValidationError` unless the konfig is usable.

        Raises:
            ValidationError: When the Koding endpoint is missing or is not an
                absolute http(s) URL.
        """
        if self.endpoints is None:
            raise ValidationError("konfig has no endpoints")
        url = self.endpoints.koding
        if not url:
            raise ValidationError("konfig has no koding endpoint")
        parts = urlsplit(url)
        if parts.scheme not in _VALID_SCHEMES or not parts.hostname:
            raise ValidationError(f"invalid koding endpoint: {url!r}")

    def is_valid(self) -> bool:
        """Return True when :meth:`ensure_valid` would not raise."""
        try:
            self.ensure_valid()
        except ValidationError:
            return False
        return True


Konfigs = dict[str, Konfig]
"""Collection of konfigs; every key equals the ``id()`` of its value."""


class UsedKonfig(BaseModel):
    """Pointer to the identifier of the active konfig."""

    model_config = ConfigDict(frozen=True)

    id: str = ""


class Environments(BaseModel):
    """Descriptor selecting which builtin environment a default konfig targets.

    Example:
        >>> Environments().effective_klient_env
        'production'
        >>> Environments(env="development", klient_env="managed").effective_klient_env
        'managed'
    """

    model_config = ConfigDict(frozen=True)

    env: str = "production"
    klient_env: str | None = None

    @property
    def effective_klient_env(self) -> str:
        return self.klient_env or self.env


@dataclass(frozen=True, slots=True)
class CacheOptions:
    """Location, bucket and lock timeout for one cache file."""

    file: Path
    bucket: str
    timeout: float = DEFAULT_LOCK_TIMEOUT


@dataclass(frozen=True, slots=True)
class CacheFileReport:
    """Structured result of preparing a per-application cache file.

    Attributes:
        file: The resolved cache file path.
        legacy_file: The unscoped path files used to live at.
        relocation: What happened to the legacy file.
        warnings: Best-effort failures (relocation, mkdir, chown).
    """

    file: Path
    legacy_file: Path
    relocation: RelocationAction = RelocationAction.NONE
    warnings: tuple[str, ...] = ()

    @property
    def degraded(self) -> bool:
        return bool(self.warnings)


__all__ = [
    "DEFAULT_LOCK_TIMEOUT",
    "KONFIG_ID_LENGTH",
    "CacheFileReport",
    "CacheOptions",
    "Endpoints",
    "Environments",
    "Konfig",
    "Konfigs",
    "UsedKonfig",
    "konfig_id",
]
