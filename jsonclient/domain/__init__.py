"""Domain package exports for value objects, ports and errors."""

from .errors import (
    ClientRuntimeError,
    CodecError,
    ErrorKind,
    NetworkError,
    NoConnectionError,
    NotInitializedError,
    ResponseStatusError,
)
from .models import Header, HeaderLike, Settings, normalize_headers
from .ports import JsonCodec, NetworkClient

__all__ = [
    "ClientRuntimeError",
    "CodecError",
    "ErrorKind",
    "Header",
    "HeaderLike",
    "JsonCodec",
    "NetworkClient",
    "NetworkError",
    "NoConnectionError",
    "NotInitializedError",
    "ResponseStatusError",
    "Settings",
    "normalize_headers",
]
