"""Synchronous JSON request executor.

``JsonNetworkClient.execute`` builds one request, runs it on the shared
engine owned by a :class:`ClientLifecycle`, and either decodes the body of a
2xx response into the requested type or raises one error from
:mod:`jsonclient.domain.errors`.

Call context:
    - Application code calls ``execute`` directly; callers wanting
      concurrency run several calls on their own threads.
    - The lifecycle must be initialized first (``NotInitializedError``
      otherwise).
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional, Type, TypeVar

from jsonclient.domain.errors import (
    ClientRuntimeError,
    NoConnectionError,
    ResponseStatusError,
)
from jsonclient.domain.models import HeaderLike, normalize_headers
from jsonclient.domain.ports import JsonCodec, NetworkClient

from .http_engine import JSON_CONTENT_TYPE, CallStateError, EngineRequest
from .json_codec import PydanticJsonCodec

T = TypeVar("T")

log = logging.getLogger(__name__)


class JsonNetworkClient(NetworkClient):
    """Execute HTTP requests and deliver objects parsed from JSON bodies."""

    def __init__(self, lifecycle=None, codec: Optional[JsonCodec] = None) -> None:
        """Create an executor bound to an engine owner and a codec.

        Args:
            lifecycle: Owner of the shared engine. ``None`` selects the
                process-wide default lifecycle.
            codec: JSON codec used to decode responses and encode payloads.
                ``None`` selects :class:`PydanticJsonCodec`.
        """
        if lifecycle is None:
            from jsonclient.app.lifecycle import default_lifecycle

            lifecycle = default_lifecycle()
        self.lifecycle = lifecycle
        self.codec: JsonCodec = codec if codec is not None else PydanticJsonCodec()

    def encode_payload(self, value: Any, value_type: Optional[Any] = None) -> bytes:
        """Serialize ``value`` with the codec into a UTF-8 request payload.

        Raises:
            CodecError: If the value cannot be represented as JSON.
        """
        return self.codec.to_json(value, value_type).encode("utf-8")

    def execute(
        self,
        url: str,
        method: str,
        headers: Optional[Iterable[HeaderLike]],
        payload: Optional[bytes],
        expected_type: Type[T],
    ) -> T:
        """Synchronously perform a request and decode the JSON response.

        Args:
            url: Absolute request URL.
            method: HTTP verb.
            headers: Ordered ``Header`` objects or ``(key, value)`` pairs;
                duplicates are sent as separate header lines.
            payload: Request body bytes sent as ``application/json``. ``None``
                sends an empty body on methods that carry one.
            expected_type: Type the response JSON is decoded into.

        Returns:
            The decoded response object.

        Raises:
            ResponseStatusError: The response status was not 2xx.
            NoConnectionError: No response could be obtained.
            ClientRuntimeError: The request could not be built, was already
                executed, or the engine is not initialized.
            CodecError: The response body does not match ``expected_type``.
        """
        context = f"{(method or '').upper()} {url}"
        try:
            request = EngineRequest(
                url=url,
                method=method,
                headers=tuple(h.as_tuple() for h in normalize_headers(headers)),
                body=payload,
                content_type=JSON_CONTENT_TYPE,
            )
            engine = self.lifecycle.require_engine()
            call = engine.new_call(request)
        except ValueError as exc:
            raise ClientRuntimeError(
                f"{context}: invalid request: {exc}", cause=exc, context=context
            ) from exc

        try:
            response = call.execute()
        except CallStateError as exc:
            log.info("This request instance has already been executed: %s", url, exc_info=exc)
            raise ClientRuntimeError(str(exc), cause=exc, context=context) from exc
        except OSError as exc:
            log.info(
                "Couldn't execute request due to some connectivity issues: %s",
                url,
                exc_info=exc,
            )
            raise NoConnectionError(
                f"{context}: {exc}", cause=exc, context=context
            ) from exc

        if not response.is_successful:
            raise ResponseStatusError(response.status, response.reason, context=context)
        return self.codec.from_json(response.text, expected_type)


__all__ = ["JsonNetworkClient"]
