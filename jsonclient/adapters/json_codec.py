"""Default JSON codec backed by ``pydantic`` type adapters.

Any type pydantic understands can be used as a target: ``BaseModel``
subclasses, dataclasses, ``TypedDict`` definitions and plain containers such
as ``dict`` or ``List[int]``.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Optional, Type, TypeVar

from pydantic import TypeAdapter, ValidationError
from pydantic.errors import PydanticSchemaGenerationError
from pydantic_core import PydanticSerializationError

from jsonclient.domain.errors import CodecError

T = TypeVar("T")


@lru_cache(maxsize=256)
def _type_adapter(target: Any) -> TypeAdapter:
    return TypeAdapter(target)


def _adapter_for(target: Any) -> TypeAdapter:
    try:
        hash(target)
    except TypeError:
        # Unhashable type expressions skip the cache.
        return TypeAdapter(target)
    return _type_adapter(target)


class PydanticJsonCodec:
    """``JsonCodec`` implementation using pydantic validation/serialization."""

    def from_json(self, text: str, expected_type: Type[T]) -> T:
        try:
            adapter = _adapter_for(expected_type)
            return adapter.validate_json(text)
        except PydanticSchemaGenerationError as exc:
            raise CodecError(
                f"Unsupported target type {expected_type!r}",
                target=expected_type,
                cause=exc,
            ) from exc
        except ValidationError as exc:
            raise CodecError(
                f"JSON does not match {expected_type!r}: {exc.error_count()} error(s)",
                target=expected_type,
                cause=exc,
            ) from exc

    def to_json(self, value: Any, value_type: Optional[Any] = None) -> str:
        target = value_type if value_type is not None else type(value)
        try:
            adapter = _adapter_for(target)
            validated = adapter.validate_python(value)
            return adapter.dump_json(validated).decode("utf-8")
        except PydanticSchemaGenerationError as exc:
            raise CodecError(
                f"Unsupported value type {target!r}", target=target, cause=exc
            ) from exc
        except (ValidationError, PydanticSerializationError) as exc:
            raise CodecError(
                f"Value cannot be represented as {target!r}", target=target, cause=exc
            ) from exc


__all__ = ["PydanticJsonCodec"]
