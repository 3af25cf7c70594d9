"""Ownership of the shared :class:`HttpEngine`.

``ClientLifecycle`` is the single owner of the engine instance: it builds it
lazily from :class:`Settings`, hands it to executors and tears it down with
``shutdown_now``. Applications either create their own lifecycle and pass it
to :class:`JsonNetworkClient`, or use the module-level ``initialize`` /
``shutdown_now`` helpers which operate on one default lifecycle.

Concurrency:
    ``initialize`` and ``shutdown_now`` mutate the owned engine reference
    without locking. Callers must not run them concurrently with each other
    or with in-flight ``execute`` calls; touch the lifecycle only during
    startup and teardown windows.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from ..adapters.http_engine import HttpEngine
from ..domain.errors import NotInitializedError
from ..domain.models import Settings

EngineFactory = Callable[[Settings], HttpEngine]


class ClientLifecycle:
    """Create, share and forcibly release one HTTP engine.

    States: uninitialized -> initialized -> shut down (which is again
    uninitialized, so a later ``initialize`` builds a fresh engine).
    """

    def __init__(self, engine_factory: Optional[EngineFactory] = None) -> None:
        """Create an uninitialized lifecycle.

        Args:
            engine_factory: Builds the engine from settings. Defaults to
                :class:`HttpEngine`; tests inject recording factories.
        """
        self._log = logging.getLogger(__name__)
        self._engine_factory: EngineFactory = engine_factory or HttpEngine
        self._engine: Optional[HttpEngine] = None

    @property
    def engine(self) -> Optional[HttpEngine]:
        """Return the shared engine or ``None`` when not initialized."""
        return self._engine

    @property
    def is_initialized(self) -> bool:
        return self._engine is not None

    def initialize(self, settings: Optional[Settings] = None) -> HttpEngine:
        """Build the shared engine unless one already exists.

        A second call while initialized is a silent no-op: the existing
        engine is kept and ``settings`` are ignored. Call ``shutdown_now``
        first to apply new settings.

        Returns:
            The shared engine.
        """
        if self._engine is None:
            effective = settings or Settings()
            self._engine = self._engine_factory(effective)
            self._log.debug(
                "HTTP engine initialized (cache=%s, follow_redirects=%s)",
                effective.cache_directory or "off",
                effective.follow_redirects,
            )
        return self._engine

    def require_engine(self) -> HttpEngine:
        """Return the shared engine.

        Raises:
            NotInitializedError: If ``initialize`` has not been called.
        """
        engine = self._engine
        if engine is None:
            raise NotInitializedError(
                "HTTP engine is not initialized; call initialize() first"
            )
        return engine

    def shutdown_now(self) -> None:
        """Aggressively release the engine and reset to uninitialized.

        Steps, each skipped when its resource is missing and each ignoring
        its own failure: stop the worker pool (queued calls are abandoned),
        evict pooled connections, close the disk cache. The engine reference
        is always cleared.
        """
        engine = self._engine
        if engine is None:
            return
        try:
            dispatcher = engine.dispatcher
            if dispatcher is not None:
                try:
                    dispatcher.shutdown(wait=False, cancel_futures=True)
                except Exception as exc:
                    self._log.debug("Worker pool shutdown failed: %s", exc)

            try:
                engine.evict_all()
            except Exception as exc:
                self._log.debug("Connection eviction failed: %s", exc)

            cache = engine.cache
            if cache is not None:
                try:
                    cache.close()
                except Exception as exc:
                    self._log.debug("Cache close failed: %s", exc)
        finally:
            self._engine = None
            self._log.debug("HTTP engine shut down")


_DEFAULT_LIFECYCLE = ClientLifecycle()


def default_lifecycle() -> ClientLifecycle:
    """Return the process-wide default lifecycle."""
    return _DEFAULT_LIFECYCLE


def initialize(settings: Optional[Settings] = None) -> HttpEngine:
    """Initialize the default lifecycle (no-op when already initialized)."""
    return _DEFAULT_LIFECYCLE.initialize(settings)


def shutdown_now() -> None:
    """Forcibly shut down the default lifecycle (no-op when uninitialized)."""
    _DEFAULT_LIFECYCLE.shutdown_now()


__all__ = [
    "ClientLifecycle",
    "EngineFactory",
    "default_lifecycle",
    "initialize",
    "shutdown_now",
]
