"""Konfig entity tests: identity, validity and wire format."""

from __future__ import annotations

from pathlib import Path

import pytest

from konfigstore.domain.enums import RelocationAction
from konfigstore.domain.environments import builtin_environments, new_konfig
from konfigstore.domain.errors import ValidationError
from konfigstore.domain.models import (
    KONFIG_ID_LENGTH,
    CacheFileReport,
    Endpoints,
    Environments,
    Konfig,
    konfig_id,
)

# ======================== Identity ========================


@pytest.mark.os_agnostic
def test_id_is_deterministic_for_the_same_koding_url() -> None:
    """Two konfigs with the same Koding endpoint share one identifier."""
    first = Konfig(endpoints=Endpoints(koding="https://koding.com"), debug=True)
    second = Konfig(endpoints=Endpoints(koding="https://koding.com", tunnel="https://t.koding.com"))

    assert first.id() == second.id()


@pytest.mark.os_agnostic
def test_id_differs_between_environments() -> None:
    """Different Koding endpoints yield different identifiers."""
    assert konfig_id("https://koding.com") != konfig_id("https://sandbox.koding.com")


@pytest.mark.os_agnostic
@pytest.mark.parametrize(
    "variant",
    ["https://KODING.com", "https://koding.com/", "https://koding.com/some/path", "  https://koding.com  "],
)
def test_id_ignores_case_path_and_whitespace(variant: str) -> None:
    """Only scheme and host identify an environment."""
    assert konfig_id(variant) == konfig_id("https://koding.com")


@pytest.mark.os_agnostic
def test_id_has_fixed_hex_length() -> None:
    """Identifiers are short lowercase hex strings usable in file names."""
    value = konfig_id("https://koding.com")

    assert len(value) == KONFIG_ID_LENGTH
    assert all(char in "0123456789abcdef" for char in value)


@pytest.mark.os_agnostic
def test_koding_url_is_empty_without_endpoints() -> None:
    """A konfig with no endpoints reports an empty Koding URL."""
    assert Konfig().koding_url() == ""


# ======================== Validity ========================


@pytest.mark.os_agnostic
@pytest.mark.parametrize(
    ("konfig", "message"),
    [
        (Konfig(), "no endpoints"),
        (Konfig(endpoints=Endpoints(tunnel="https://t.koding.com")), "no koding endpoint"),
        (Konfig(endpoints=Endpoints(koding="")), "no koding endpoint"),
        (Konfig(endpoints=Endpoints(koding="koding.com")), "invalid koding endpoint"),
        (Konfig(endpoints=Endpoints(koding="ftp://koding.com")), "invalid koding endpoint"),
        (Konfig(endpoints=Endpoints(koding="https://")), "invalid koding endpoint"),
    ],
)
def test_ensure_valid_rejects_unusable_konfigs(konfig: Konfig, message: str) -> None:
    """Konfigs without an absolute http(s) Koding endpoint are invalid."""
    with pytest.raises(ValidationError, match=message):
        konfig.ensure_valid()
    assert konfig.is_valid() is False


@pytest.mark.os_agnostic
@pytest.mark.parametrize("url", ["https://koding.com", "http://127.0.0.1:8090"])
def test_ensure_valid_accepts_http_and_https(url: str) -> None:
    """Both plain and TLS endpoints are usable."""
    konfig = Konfig(endpoints=Endpoints(koding=url))

    konfig.ensure_valid()
    assert konfig.is_valid() is True


# ======================== Wire format ========================


@pytest.mark.os_agnostic
def test_konfig_accepts_camel_case_keys() -> None:
    """Stored konfigs use camelCase keys."""
    konfig = Konfig.model_validate(
        {
            "endpoints": {"koding": "https://koding.com", "klientLatest": "https://k/latest"},
            "kiteKeyFile": "/etc/kite.key",
            "publicBucketName": "bucket",
            "lockTimeout": 3,
        }
    )

    assert konfig.endpoints is not None
    assert konfig.endpoints.klient_latest == "https://k/latest"
    assert konfig.kite_key_file == "/etc/kite.key"
    assert konfig.public_bucket_name == "bucket"
    assert konfig.lock_timeout == 3


@pytest.mark.os_agnostic
def test_konfig_ignores_unknown_keys() -> None:
    """Fields written by newer versions do not break older readers."""
    konfig = Konfig.model_validate({"endpoints": {"koding": "https://koding.com"}, "mountEnabled": True})

    assert konfig.koding_url() == "https://koding.com"


@pytest.mark.os_agnostic
def test_konfig_dump_uses_camel_case_aliases() -> None:
    """Dumping by alias reproduces the stored key names."""
    konfig = Konfig(endpoints=Endpoints(koding="https://koding.com", ip_check="https://ip"), kite_key="secret")

    dumped = konfig.model_dump(by_alias=True, exclude_none=True)

    assert dumped == {"endpoints": {"koding": "https://koding.com", "ipCheck": "https://ip"}, "kiteKey": "secret"}


@pytest.mark.os_agnostic
def test_konfig_is_immutable() -> None:
    """Konfigs are frozen value objects."""
    konfig = Konfig(debug=True)

    with pytest.raises(Exception, match="frozen"):
        konfig.debug = False  # type: ignore[misc]


# ======================== Environments and defaults ========================


@pytest.mark.os_agnostic
def test_klient_env_defaults_to_env() -> None:
    """Without an explicit klient environment the main environment is used."""
    assert Environments(env="sandbox").effective_klient_env == "sandbox"


@pytest.mark.os_agnostic
@pytest.mark.parametrize("env", builtin_environments())
def test_new_konfig_is_valid_for_every_builtin_environment(env: str) -> None:
    """Default konfigs are always usable."""
    konfig = new_konfig(Environments(env=env))

    assert konfig.is_valid()
    assert konfig.debug is False


@pytest.mark.os_agnostic
def test_new_konfig_uses_klient_env_for_download_urls() -> None:
    """Klient download URLs follow the klient environment, not the main one."""
    konfig = new_konfig(Environments(env="production", klient_env="development"))

    assert konfig.endpoints is not None
    assert konfig.endpoints.koding == "https://koding.com"
    assert konfig.endpoints.klient_latest is not None
    assert "/development/" in konfig.endpoints.klient_latest
    assert konfig.public_bucket_name == "koding-klient-development"


@pytest.mark.os_agnostic
def test_new_konfig_falls_back_to_production_for_unknown_env() -> None:
    """Unknown environments get production endpoints."""
    konfig = new_konfig(Environments(env="staging-42"))

    assert konfig.koding_url() == "https://koding.com"


# ======================== CacheFileReport ========================


@pytest.mark.os_agnostic
def test_cache_file_report_is_degraded_only_with_warnings() -> None:
    """Warnings mark a report as degraded; relocation alone does not."""
    clean = CacheFileReport(file=Path("a.x.bolt"), legacy_file=Path("a.bolt"), relocation=RelocationAction.RENAMED)
    degraded = CacheFileReport(
        file=Path("a.x.bolt"),
        legacy_file=Path("a.bolt"),
        relocation=RelocationAction.FAILED,
        warnings=("unable to move old cache file to new location",),
    )

    assert clean.degraded is False
    assert degraded.degraded is True
