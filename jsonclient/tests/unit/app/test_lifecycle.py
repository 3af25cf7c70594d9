from __future__ import annotations

from typing import List

import pytest

from jsonclient.adapters.http_engine import HttpEngine
from jsonclient.app import lifecycle as lifecycle_module
from jsonclient.app.lifecycle import ClientLifecycle
from jsonclient.domain.errors import NotInitializedError
from jsonclient.domain.models import Settings


class _CountingFactory:
    def __init__(self) -> None:
        self.built: List[HttpEngine] = []

    def __call__(self, settings: Settings) -> HttpEngine:
        engine = HttpEngine(settings)
        self.built.append(engine)
        return engine


@pytest.fixture
def lifecycle():
    factory = _CountingFactory()
    owner = ClientLifecycle(engine_factory=factory)
    owner.factory = factory  # type: ignore[attr-defined]
    yield owner
    owner.shutdown_now()


def test_initialize_twice_builds_one_engine(lifecycle, tmp_path) -> None:
    first = lifecycle.initialize()
    second = lifecycle.initialize(
        Settings(cache_directory=str(tmp_path / "cache"), max_cache_size_bytes=1024)
    )

    assert first is second
    assert len(lifecycle.factory.built) == 1
    assert second.cache is None


def test_initialize_without_settings_uses_defaults(lifecycle) -> None:
    engine = lifecycle.initialize()

    assert engine.settings == Settings()
    assert engine.settings.follow_redirects is True
    assert engine.settings.follow_protocol_redirects is True


def test_shutdown_allows_fresh_initialize(lifecycle, tmp_path) -> None:
    lifecycle.initialize()
    lifecycle.shutdown_now()

    assert lifecycle.engine is None
    cache_dir = tmp_path / "cache"
    engine = lifecycle.initialize(
        Settings(cache_directory=str(cache_dir), max_cache_size_bytes=4096)
    )

    assert len(lifecycle.factory.built) == 2
    assert engine.cache is not None
    assert engine.cache.directory == str(cache_dir)
    assert cache_dir.is_dir()


def test_shutdown_without_initialize_is_noop() -> None:
    owner = ClientLifecycle()

    owner.shutdown_now()

    assert owner.is_initialized is False


def test_shutdown_releases_engine_resources(lifecycle, tmp_path) -> None:
    engine = lifecycle.initialize(
        Settings(cache_directory=str(tmp_path / "cache"), max_cache_size_bytes=4096)
    )
    evicted: List[bool] = []
    engine.evict_all = lambda: evicted.append(True)  # type: ignore[assignment]

    lifecycle.shutdown_now()

    assert evicted == [True]
    assert engine.cache.closed is True
    with pytest.raises(RuntimeError):
        engine.dispatcher.submit(lambda: None)


def test_shutdown_ignores_step_failures_and_clears_reference(lifecycle, tmp_path) -> None:
    engine = lifecycle.initialize(
        Settings(cache_directory=str(tmp_path / "cache"), max_cache_size_bytes=4096)
    )

    def _boom() -> None:
        raise OSError("pool already closed")

    engine.evict_all = _boom  # type: ignore[assignment]
    engine.cache.close = _boom  # type: ignore[assignment]

    lifecycle.shutdown_now()

    assert lifecycle.engine is None


def test_require_engine_before_initialize_raises() -> None:
    with pytest.raises(NotInitializedError):
        ClientLifecycle().require_engine()


def test_module_level_helpers_share_default_lifecycle() -> None:
    default = lifecycle_module.default_lifecycle()
    try:
        engine = lifecycle_module.initialize()

        assert default.engine is engine
        assert lifecycle_module.initialize(Settings(follow_redirects=False)) is engine
    finally:
        lifecycle_module.shutdown_now()

    assert default.engine is None
