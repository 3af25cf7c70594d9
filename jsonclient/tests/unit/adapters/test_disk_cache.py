from datetime import datetime, timedelta, timezone

import pytest

from jsonclient.adapters.disk_cache import BoundedDiskCache


@pytest.fixture
def cache(tmp_path):
    store = BoundedDiskCache(str(tmp_path / "cache"), 1 << 20)
    yield store
    store.close()


def test_set_get_delete(cache):
    cache.set("http://api.local/items", b"serialized")

    assert cache.get("http://api.local/items") == b"serialized"

    cache.delete("http://api.local/items")

    assert cache.get("http://api.local/items") is None


def test_set_accepts_seconds_and_datetime_expiry(cache):
    later = datetime.now(timezone.utc) + timedelta(hours=1)

    cache.set("seconds", b"a", expires=3600)
    cache.set("aware", b"b", expires=later)
    cache.set("naive", b"c", expires=later.replace(tzinfo=None))
    cache.set("past", b"d", expires=datetime.now(timezone.utc) - timedelta(hours=1))

    assert [cache.get(k) for k in ("seconds", "aware", "naive", "past")] == [
        b"a",
        b"b",
        b"c",
        b"d",
    ]


def test_least_recently_used_entries_are_evicted_over_bound(tmp_path):
    cache = BoundedDiskCache(str(tmp_path / "cache"), 1)
    try:
        for index in range(20):
            cache.set(f"k{index}", b"x" * 1024)

        assert cache.get("k0") is None
    finally:
        cache.close()


def test_closed_cache_ignores_reads_and_writes(tmp_path):
    cache = BoundedDiskCache(str(tmp_path / "cache"), 1 << 20)
    cache.set("k", b"v")

    cache.close()
    cache.close()
    cache.set("other", b"v")

    assert cache.closed is True
    assert cache.get("k") is None
    assert (tmp_path / "cache").is_dir()
