"""JSON value codec shared by every cache adapter.

Values are dumped through pydantic (camelCase aliases, unset fields
omitted) and encoded with orjson; reads validate back into the requested
type with a cached :class:`pydantic.TypeAdapter`.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, TypeVar

import orjson
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import PydanticSerializationError, to_jsonable_python

from konfigstore.domain.errors import StoreError

T = TypeVar("T")


@lru_cache(maxsize=16)
def _adapter(kind: Any) -> TypeAdapter[Any]:
    return TypeAdapter(kind)


def encode_value(key: str, value: Any) -> bytes:
    """Encode ``value`` for storage under ``key``.

    Raises:
        StoreError: If the value cannot be represented as JSON.

    Example:
        >>> from konfigstore.domain.models import UsedKonfig
        >>> encode_value("konfigs.used", UsedKonfig(id="abc"))
        b'{"id":"abc"}'
    """
    try:
        return orjson.dumps(to_jsonable_python(value, by_alias=True, exclude_none=True))
    except (PydanticSerializationError, TypeError) as exc:
        raise StoreError(f"unable to encode value for {key!r}: {exc}") from exc


def decode_value(key: str, raw: bytes, kind: type[T]) -> T:
    """Decode the stored bytes of ``key`` into ``kind``.

    Raises:
        StoreError: If the bytes are not JSON or do not validate as ``kind``.

    Example:
        >>> from konfigstore.domain.models import UsedKonfig
        >>> decode_value("konfigs.used", b'{"id":"abc"}', UsedKonfig).id
        'abc'
    """
    try:
        return _adapter(kind).validate_python(orjson.loads(raw))
    except (orjson.JSONDecodeError, PydanticValidationError) as exc:
        raise StoreError(f"corrupted value for {key!r}: {exc}") from exc


__all__ = ["decode_value", "encode_value"]
