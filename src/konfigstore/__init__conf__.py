"""Static package metadata surfaced to CLI commands and documentation.

Keep these values in sync with ``pyproject.toml``; ``tests/test_metadata.py``
checks that they agree.
"""

from __future__ import annotations

#: Distribution name declared in ``pyproject.toml``.
name = "konfigstore"
#: Human-readable summary shown in CLI help output.
title = "Local multi-profile konfig store for the client agent"
#: Current release version pulled from ``pyproject.toml``.
version = "1.0.0"
#: Repository homepage.
homepage = "https://koding.com"
#: Author attribution.
author = "Koding"
#: Contact email.
author_email = "hello@koding.com"
#: Console-script name published by the package.
shell_command = "konfigstore"

#: Vendor, application and slug identifiers used by lib_layered_config.
LAYEREDCONF_VENDOR: str = "Koding"
LAYEREDCONF_APP: str = "Konfig Store"
LAYEREDCONF_SLUG: str = "konfigstore"


def print_info() -> None:
    """Print the summarised metadata block used by the ``info`` command.

    Example:
        >>> print_info()  # doctest: +ELLIPSIS
        Info for konfigstore:
        ...
    """
    fields = [
        ("name", name),
        ("title", title),
        ("version", version),
        ("homepage", homepage),
        ("author", author),
        ("author_email", author_email),
        ("shell_command", shell_command),
    ]
    pad = max(len(label) for label, _ in fields)
    lines = [f"Info for {name}:", ""]
    lines.extend(f"    {label.ljust(pad)} = {value}" for label, value in fields)
    print("\n".join(lines))
