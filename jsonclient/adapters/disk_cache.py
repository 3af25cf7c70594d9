"""Size-bounded disk storage for the ``cachecontrol`` HTTP cache.

``cachecontrol`` decides what is cacheable, keys entries, honors ``Vary`` and
revalidates with ``ETag``/``Last-Modified``. This module only gives it a place
to keep the serialized responses: a ``diskcache`` store that evicts the least
recently used entries once ``max_size_bytes`` is exceeded.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional, Union

import diskcache
from cachecontrol.cache import BaseCache

log = logging.getLogger(__name__)


def _seconds_until(expires: Union[int, float, datetime, None]) -> Optional[float]:
    if expires is None:
        return None
    if isinstance(expires, datetime):
        if expires.tzinfo is None:
            now = datetime.now(timezone.utc).replace(tzinfo=None)
        else:
            now = datetime.now(expires.tzinfo)
        seconds = (expires - now).total_seconds()
    else:
        seconds = float(expires)
    return seconds if seconds > 0 else None


class BoundedDiskCache(BaseCache):
    """``cachecontrol`` storage kept in ``directory``, capped at ``max_size_bytes``."""

    def __init__(self, directory: str, max_size_bytes: int) -> None:
        self.directory = directory
        self.max_size_bytes = max_size_bytes
        self._store = diskcache.Cache(
            directory,
            size_limit=max_size_bytes,
            eviction_policy="least-recently-used",
        )
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def get(self, key: str) -> Optional[bytes]:
        if self._closed:
            return None
        return self._store.get(key)

    def set(
        self,
        key: str,
        value: bytes,
        expires: Union[int, float, datetime, None] = None,
    ) -> None:
        if self._closed:
            return
        self._store.set(key, value, expire=_seconds_until(expires))

    def delete(self, key: str) -> None:
        if self._closed:
            return
        self._store.delete(key)

    def volume(self) -> int:
        """Approximate bytes used on disk."""
        return self._store.volume()

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        log.debug("Closing response cache at %s", self.directory)
        self._store.close()


__all__ = ["BoundedDiskCache"]
