"""Error taxonomy surfaced by :class:`JsonNetworkClient`.

Every failure carries an :class:`ErrorKind` tag, and each class defines
``__match_args__`` so callers can either catch by type or pattern match::

    try:
        user = client.execute(url, "GET", [], None, User)
    except NetworkError as err:
        match err:
            case ResponseStatusError(404, _):
                ...
            case NoConnectionError(cause):
                ...
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    RESPONSE_STATUS = "response_status"
    NO_CONNECTION = "no_connection"
    RUNTIME = "runtime"
    INVALID_ARGUMENT = "invalid_argument"


class NetworkError(RuntimeError):
    """Base class for failures raised by ``execute``."""

    kind: ErrorKind = ErrorKind.RUNTIME

    def __init__(
        self,
        message: str,
        *,
        cause: Optional[BaseException] = None,
        context: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.cause = cause
        self.context = context


class ResponseStatusError(NetworkError):
    """A response arrived with a non-2xx status."""

    kind = ErrorKind.RESPONSE_STATUS
    __match_args__ = ("status", "reason")

    def __init__(
        self,
        status: int,
        reason: str,
        *,
        context: Optional[str] = None,
    ) -> None:
        label = f"HTTP {status} {reason}".rstrip()
        message = f"{context}: {label}" if context else label
        super().__init__(message, context=context)
        self.status = status
        self.reason = reason


class NoConnectionError(NetworkError):
    """No response could be obtained (DNS, connect, timeout, TLS, I/O)."""

    kind = ErrorKind.NO_CONNECTION
    __match_args__ = ("cause",)


class ClientRuntimeError(NetworkError):
    """Programming or state error, e.g. a call executed twice."""

    kind = ErrorKind.RUNTIME
    __match_args__ = ("cause",)


class NotInitializedError(ClientRuntimeError):
    """``execute`` was called before the shared engine was initialized."""


class CodecError(ValueError):
    """A value cannot be encoded to, or decoded from, the target shape."""

    kind = ErrorKind.INVALID_ARGUMENT
    __match_args__ = ("target",)

    def __init__(
        self,
        message: str,
        *,
        target: object = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.target = target
        self.cause = cause


__all__ = [
    "ClientRuntimeError",
    "CodecError",
    "ErrorKind",
    "NetworkError",
    "NoConnectionError",
    "NotInitializedError",
    "ResponseStatusError",
]
