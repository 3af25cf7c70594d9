from __future__ import annotations

from typing import Any, Iterable, Optional, Protocol, Type, TypeVar

from .models import HeaderLike

T = TypeVar("T")


# ---- Ports (Hexagonal boundaries) ----
class JsonCodec(Protocol):
    """Encode values to JSON text and decode JSON text into typed values.

    Implementations raise :class:`jsonclient.domain.errors.CodecError` when a
    value cannot be represented in, or the text does not match, the target
    type.
    """

    def to_json(self, value: Any, value_type: Optional[Any] = None) -> str: ...
    def from_json(self, text: str, expected_type: Type[T]) -> T: ...


class NetworkClient(Protocol):
    """Synchronous request/response exchange returning decoded objects."""

    def execute(
        self,
        url: str,
        method: str,
        headers: Optional[Iterable[HeaderLike]],
        payload: Optional[bytes],
        expected_type: Type[T],
    ) -> T: ...
