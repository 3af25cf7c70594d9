"""Value objects shared by the client layers.

``Header`` describes one outgoing header line and ``Settings`` is the read-only
configuration snapshot consumed once when the shared HTTP engine is built.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union


@dataclass(frozen=True)
class Header:
    """Immutable key/value pair attached to an outgoing request."""

    key: str
    value: str

    def as_tuple(self) -> Tuple[str, str]:
        return (self.key, self.value)


HeaderLike = Union[Header, Tuple[str, str]]


def normalize_headers(headers: Optional[Iterable[HeaderLike]]) -> List[Header]:
    """Return ``headers`` as an ordered list of :class:`Header` objects.

    Order and duplicate keys are preserved. Plain ``(key, value)`` tuples are
    accepted for convenience.

    Raises:
        ValueError: If an entry is neither a ``Header`` nor a 2-tuple of strings.
    """
    result: List[Header] = []
    for entry in headers or ():
        if isinstance(entry, Header):
            result.append(entry)
            continue
        if isinstance(entry, tuple) and len(entry) == 2:
            key, value = entry
            if isinstance(key, str) and isinstance(value, str):
                result.append(Header(key, value))
                continue
        raise ValueError(f"Invalid header entry: {entry!r}")
    return result


@dataclass(frozen=True)
class Settings:
    """Configuration snapshot for the shared HTTP engine.

    Attributes:
        follow_redirects: Follow 3xx redirects at all.
        follow_protocol_redirects: Follow redirects that switch between
            ``http`` and ``https``.
        cache_directory: Directory for the disk response cache, ``None``
            disables caching.
        max_cache_size_bytes: Upper bound for the cache size on disk. Only
            meaningful together with ``cache_directory``.
        connect_timeout_s: Socket connect timeout in seconds.
        read_timeout_s: Socket read timeout in seconds.
        max_requests: Size of the engine worker pool.
        max_idle_connections: Pooled connections kept per host.
    """

    follow_redirects: bool = True
    follow_protocol_redirects: bool = True
    cache_directory: Optional[str] = None
    max_cache_size_bytes: int = 0
    connect_timeout_s: float = 10.0
    read_timeout_s: float = 10.0
    max_requests: int = 64
    max_idle_connections: int = 5

    def __post_init__(self) -> None:
        if self.max_cache_size_bytes < 0:
            raise ValueError("max_cache_size_bytes must not be negative")
        if self.connect_timeout_s <= 0 or self.read_timeout_s <= 0:
            raise ValueError("timeouts must be positive")
        if self.max_requests < 1:
            raise ValueError("max_requests must be at least 1")
        if self.max_idle_connections < 1:
            raise ValueError("max_idle_connections must be at least 1")

    @property
    def cache_enabled(self) -> bool:
        return bool(self.cache_directory)

    @property
    def timeout(self) -> Tuple[float, float]:
        """``(connect, read)`` tuple in the form ``requests`` expects."""
        return (self.connect_timeout_s, self.read_timeout_s)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Settings":
        """Build settings from a plain mapping.

        Unknown keys are ignored, missing keys keep their defaults and values
        are coerced to the field types.
        """
        known = {f.name for f in fields(cls)}
        data = {k: v for k, v in dict(payload or {}).items() if k in known}
        for key in ("follow_redirects", "follow_protocol_redirects"):
            if key in data:
                data[key] = _coerce_bool(data[key])
        if "cache_directory" in data:
            value = data["cache_directory"]
            data["cache_directory"] = str(value) if value else None
        for key in ("max_cache_size_bytes", "max_requests", "max_idle_connections"):
            if key in data:
                data[key] = int(data[key])
        for key in ("connect_timeout_s", "read_timeout_s"):
            if key in data:
                data[key] = float(data[key])
        return cls(**data)


def _coerce_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


__all__ = ["Header", "HeaderLike", "Settings", "normalize_headers"]
