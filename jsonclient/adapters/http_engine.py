"""HTTP engine shared by every :class:`JsonNetworkClient` call.

This module wraps ``requests`` into the engine the client layer delegates to:
connection pooling (``HTTPAdapter`` mounts), redirect policy, a worker pool
that runs every exchange, and an optional disk response cache.

Dependencies:
    - ``requests`` / ``urllib3`` for network I/O.
    - ``cachecontrol`` for HTTP caching semantics, stored through
      ``jsonclient.adapters.disk_cache.BoundedDiskCache``.

Call context:
    - Constructed by ``jsonclient.app.lifecycle.ClientLifecycle.initialize``.
    - Used by ``jsonclient.adapters.json_network_client`` through
      ``new_call(...).execute()``; lifecycle code drives ``dispatcher``,
      ``evict_all`` and ``cache`` during forced shutdown.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import MutableMapping
from concurrent.futures import CancelledError, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Optional, Tuple
from urllib.parse import urljoin, urlparse

import requests
from cachecontrol import CacheControlAdapter
from requests.adapters import HTTPAdapter

from jsonclient.domain.models import Settings

from .disk_cache import BoundedDiskCache

JSON_CONTENT_TYPE = "application/json"
BODYLESS_METHODS = frozenset({"GET", "HEAD"})


class CallStateError(RuntimeError):
    """A call was executed twice or dispatched on a shut-down engine."""


class CallCanceledError(OSError):
    """A queued call was abandoned by a forced shutdown."""


class HeaderList(MutableMapping):
    """Case-insensitive header mapping that keeps every line as added.

    ``items()`` returns the ``(name, value)`` lines in insertion order, so
    repeated and interleaved names reach the wire exactly as supplied.
    Lookups join repeated values with ``", "``; assignment replaces the first
    line of that name in place and drops the others.
    """

    def __init__(self, lines: Iterable[Tuple[str, str]] = ()) -> None:
        self._lines: List[Tuple[str, str]] = []
        for key, value in lines:
            self.add(key, value)

    def add(self, key: str, value: str) -> None:
        self._lines.append((key, value))

    def __getitem__(self, key: str) -> str:
        if not isinstance(key, str):
            raise KeyError(key)
        lower = key.lower()
        values = [v for k, v in self._lines if k.lower() == lower]
        if not values:
            raise KeyError(key)
        return ", ".join(values)

    def __setitem__(self, key: str, value: str) -> None:
        lower = key.lower()
        for index, (existing, _) in enumerate(self._lines):
            if existing.lower() == lower:
                rest = [(k, v) for k, v in self._lines[index + 1 :] if k.lower() != lower]
                self._lines[index:] = [(key, value)] + rest
                return
        self._lines.append((key, value))

    def __delitem__(self, key: str) -> None:
        lower = key.lower() if isinstance(key, str) else None
        kept = [(k, v) for k, v in self._lines if k.lower() != lower]
        if len(kept) == len(self._lines):
            raise KeyError(key)
        self._lines = kept

    def __iter__(self) -> Iterator[str]:
        seen = set()
        for key, _ in self._lines:
            if key.lower() not in seen:
                seen.add(key.lower())
                yield key

    def __len__(self) -> int:
        return len({key.lower() for key, _ in self._lines})

    def items(self) -> List[Tuple[str, str]]:  # type: ignore[override]
        return list(self._lines)

    def copy(self) -> "HeaderList":
        return HeaderList(self._lines)

    def __repr__(self) -> str:
        return f"HeaderList({self._lines!r})"


@dataclass(frozen=True)
class EngineRequest:
    """Fully described outgoing request."""

    url: str
    method: str
    headers: Tuple[Tuple[str, str], ...] = ()
    body: Optional[bytes] = None
    content_type: str = JSON_CONTENT_TYPE


@dataclass
class EngineResponse:
    """Response as handed back to the client layer."""

    url: str
    status: int
    reason: str
    headers: List[Tuple[str, str]] = field(default_factory=list)
    content: bytes = b""
    from_cache: bool = False

    @property
    def is_successful(self) -> bool:
        return 200 <= self.status < 300

    def header(self, name: str) -> Optional[str]:
        lower = name.lower()
        for key, value in self.headers:
            if key.lower() == lower:
                return value
        return None

    @property
    def charset(self) -> str:
        content_type = self.header("Content-Type") or ""
        for param in content_type.split(";")[1:]:
            key, _, value = param.strip().partition("=")
            if key.lower() == "charset" and value:
                return value.strip('"')
        return "utf-8"

    @property
    def text(self) -> str:
        try:
            return self.content.decode(self.charset, errors="replace")
        except LookupError:
            return self.content.decode("utf-8", errors="replace")


class _RedirectPolicySession(requests.Session):
    """Session that can refuse redirects switching between http and https."""

    def __init__(self, follow_protocol_redirects: bool = True) -> None:
        super().__init__()
        self.follow_protocol_redirects = follow_protocol_redirects

    def get_redirect_target(self, resp):
        target = super().get_redirect_target(resp)
        if target and not self.follow_protocol_redirects:
            origin = urlparse(resp.url).scheme.lower()
            destination = urlparse(urljoin(resp.url, target)).scheme.lower()
            if origin != destination:
                return None
        return target


class Call:
    """Single-use handle for one prepared exchange."""

    def __init__(self, engine: "HttpEngine", prepared: requests.PreparedRequest) -> None:
        self._engine = engine
        self._prepared = prepared
        self._lock = threading.Lock()
        self._executed = False

    def execute(self) -> EngineResponse:
        """Run the exchange on the engine worker pool and wait for it.

        Raises:
            CallStateError: If this call was already executed or the engine
                worker pool has been shut down.
            OSError: On transport failures (``requests`` exceptions derive
                from it) and on cancellation by a forced shutdown.
        """
        with self._lock:
            if self._executed:
                raise CallStateError("Already Executed")
            self._executed = True
        return self._engine._dispatch(self._prepared)


class HttpEngine:
    """``requests``-based engine configured once from :class:`Settings`."""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self.settings = settings or Settings()
        self._log = logging.getLogger(__name__)
        self.session: requests.Session = _RedirectPolicySession(
            self.settings.follow_protocol_redirects
        )
        pool = {
            "pool_connections": self.settings.max_idle_connections,
            "pool_maxsize": self.settings.max_idle_connections,
        }
        self._cache: Optional[BoundedDiskCache] = None
        if self.settings.cache_enabled:
            self._cache = BoundedDiskCache(
                self.settings.cache_directory, self.settings.max_cache_size_bytes
            )
            self._log.debug("Response cache at %s", self.settings.cache_directory)
        for prefix in ("http://", "https://"):
            if self._cache is not None:
                adapter: HTTPAdapter = CacheControlAdapter(cache=self._cache, **pool)
            else:
                adapter = HTTPAdapter(**pool)
            self.session.mount(prefix, adapter)
        self._dispatcher: Optional[ThreadPoolExecutor] = ThreadPoolExecutor(
            max_workers=self.settings.max_requests,
            thread_name_prefix="jsonclient-dispatcher",
        )

    # ------------------------------------------------------------------
    # Administrative access
    @property
    def dispatcher(self) -> Optional[ThreadPoolExecutor]:
        return self._dispatcher

    @property
    def cache(self) -> Optional[BoundedDiskCache]:
        return self._cache

    def evict_all(self) -> None:
        """Close every pooled connection; pools are rebuilt on next use."""
        for adapter in self.session.adapters.values():
            # CacheControlAdapter.close would also close the cache.
            HTTPAdapter.close(adapter)

    # ------------------------------------------------------------------
    # Calls
    def new_call(self, request: EngineRequest) -> Call:
        """Prepare ``request`` and wrap it into a single-use :class:`Call`.

        Raises:
            ValueError: If the request cannot be built (empty or malformed
                URL, body on a bodyless method).
        """
        return Call(self, self.prepare(request))

    def prepare(self, request: EngineRequest) -> requests.PreparedRequest:
        if not request.url:
            raise ValueError("url must not be empty")
        method = (request.method or "").strip().upper()
        if not method:
            raise ValueError("method must not be empty")
        if method in BODYLESS_METHODS and request.body:
            raise ValueError(f"method {method} must not have a request body")

        prepared = self.session.prepare_request(requests.Request(method, request.url))

        # Supplied header lines go first, as given; session defaults only
        # fill in names the caller did not set.
        headers = HeaderList(request.headers)
        for key, value in prepared.headers.items():
            if key not in headers:
                headers[key] = value

        body: Optional[bytes] = None
        if method not in BODYLESS_METHODS:
            body = bytes(request.body or b"")
            headers["Content-Type"] = request.content_type
            headers["Content-Length"] = str(len(body))
        prepared.headers = headers
        prepared.body = body
        return prepared

    def _dispatch(self, prepared: requests.PreparedRequest) -> EngineResponse:
        dispatcher = self._dispatcher
        if dispatcher is None:
            raise CallStateError("Dispatcher is shut down")
        try:
            future = dispatcher.submit(self._exchange, prepared)
        except RuntimeError as exc:
            raise CallStateError("Dispatcher is shut down") from exc
        try:
            return future.result()
        except CancelledError as exc:
            raise CallCanceledError("Canceled") from exc

    def _exchange(self, prepared: requests.PreparedRequest) -> EngineResponse:
        send_kwargs = self.session.merge_environment_settings(
            prepared.url, {}, None, None, None
        )
        response = self.session.send(
            prepared,
            allow_redirects=self.settings.follow_redirects,
            timeout=self.settings.timeout,
            **send_kwargs,
        )
        try:
            content = response.content
        finally:
            response.close()
        from_cache = bool(getattr(response, "from_cache", False))
        if from_cache:
            self._log.debug("Cache hit: %s", prepared.url)
        return EngineResponse(
            url=response.url or prepared.url,
            status=response.status_code,
            reason=response.reason or "",
            headers=[(str(k), str(v)) for k, v in response.headers.items()],
            content=content or b"",
            from_cache=from_cache,
        )


__all__ = [
    "BODYLESS_METHODS",
    "Call",
    "CallCanceledError",
    "CallStateError",
    "EngineRequest",
    "EngineResponse",
    "HeaderList",
    "HttpEngine",
    "JSON_CONTENT_TYPE",
]
