"""Builtin environments and default konfig construction."""

from __future__ import annotations

from types import MappingProxyType
from typing import Final

from .models import DEFAULT_LOCK_TIMEOUT, Endpoints, Environments, Konfig

_BUILTIN_KODING_URLS: Final = MappingProxyType(
    {
        "production": "https://koding.com",
        "sandbox": "https://sandbox.koding.com",
        "development": "https://dev.koding.com",
        "local": "http://127.0.0.1:8090",
    }
)

_BUILTIN_BUCKETS: Final = MappingProxyType(
    {
        "production": "koding-klient",
        "sandbox": "koding-klient-sandbox",
        "development": "koding-klient-development",
    }
)

DEFAULT_KITE_KEY_FILE: Final[str] = "~/.kite/kite.key"
DEFAULT_BUCKET_REGION: Final[str] = "us-east-1"


def builtin_environments() -> tuple[str, ...]:
    """Return the names of environments :func:`new_konfig` knows about."""
    return tuple(_BUILTIN_KODING_URLS)


def new_konfig(environments: Environments) -> Konfig:
    """Construct the default konfig for an environment descriptor.

    Unknown environments fall back to production endpoints so the result is
    always a valid konfig.

    Example:
        >>> k = new_konfig(Environments(env="sandbox"))
        >>> k.endpoints.koding
        'https://sandbox.koding.com'
        >>> k.debug
        False
        >>> new_konfig(Environments(env="nowhere")).endpoints.koding
        'https://koding.com'
    """
    base = _BUILTIN_KODING_URLS.get(environments.env, _BUILTIN_KODING_URLS["production"])
    klient_env = environments.effective_klient_env
    bucket = _BUILTIN_BUCKETS.get(klient_env, _BUILTIN_BUCKETS["production"])
    return Konfig(
        endpoints=Endpoints(
            koding=base,
            tunnel=f"{base}/kontrol/kite",
            ip_check=f"{base}/-/ipcheck",
            klient_latest=f"https://{bucket}.s3.amazonaws.com/{klient_env}/latest-version.txt",
            kd_latest=f"https://{bucket}.s3.amazonaws.com/kd/{klient_env}/latest-version.txt",
        ),
        kite_key_file=DEFAULT_KITE_KEY_FILE,
        debug=False,
        public_bucket_name=bucket,
        public_bucket_region=DEFAULT_BUCKET_REGION,
        lock_timeout=int(DEFAULT_LOCK_TIMEOUT),
    )


__all__ = [
    "DEFAULT_BUCKET_REGION",
    "DEFAULT_KITE_KEY_FILE",
    "builtin_environments",
    "new_konfig",
]
