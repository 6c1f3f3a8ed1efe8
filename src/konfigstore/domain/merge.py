"""Override merge for konfig models.

A field counts as *set* when it is not ``None``. Explicit zero values such
as ``False``, ``0`` or ``""`` are set and win over the base, so a legacy
override that turns ``debug`` off is honoured instead of letting the
default leak through.
"""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import PydanticSerializationError

from .errors import MergeError

ModelT = TypeVar("ModelT", bound=BaseModel)


def _overlay(base: BaseModel, override: BaseModel) -> dict[str, Any]:
    """Return base's field values with override's set fields laid on top."""
    merged: dict[str, Any] = {}
    for name in type(base).model_fields:
        base_value = getattr(base, name)
        override_value = getattr(override, name, None)
        if override_value is None:
            merged[name] = base_value
        elif isinstance(base_value, BaseModel) and isinstance(override_value, BaseModel):
            merged[name] = _overlay(base_value, override_value)
        else:
            merged[name] = override_value
    return merged


def merge_in(base: ModelT, override: BaseModel) -> ModelT:
    """Merge ``override`` into ``base`` and return a new model of base's type.

    Args:
        base: Freshly constructed defaults.
        override: Previously stored konfig whose set fields take precedence.

    Returns:
        A new instance of ``type(base)``; neither input is modified.

    Raises:
        MergeError: If the combined values cannot be serialized or do not
            validate as ``type(base)``.

    Example:
        >>> from konfigstore.domain.models import Endpoints, Konfig
        >>> base = Konfig(endpoints=Endpoints(koding="https://koding.com", tunnel="t"), debug=True)
        >>> out = merge_in(base, Konfig(debug=False, endpoints=Endpoints(tunnel="u")))
        >>> (out.debug, out.endpoints.koding, out.endpoints.tunnel)
        (False, 'https://koding.com', 'u')
    """
    try:
        combined = _overlay(base, override)
        plain = type(base).model_validate(combined).model_dump(by_alias=True)
        return type(base).model_validate(plain)
    except (PydanticValidationError, PydanticSerializationError) as exc:
        raise MergeError(f"unable to merge {type(override).__name__} into {type(base).__name__}: {exc}") from exc


__all__ = ["merge_in"]
