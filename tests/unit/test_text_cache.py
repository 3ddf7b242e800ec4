"""Unit tests for ExtractedTextCache."""

from kbsync.application.services.text_cache import ExtractedTextCache


def test_put_and_get() -> None:
    cache = ExtractedTextCache(max_size=2)
    cache.put("kb/a", "A")
    assert cache.get("kb/a") == "A"
    assert "kb/a" in cache
    assert cache.get("kb/missing") is None


def test_evicts_least_recently_used() -> None:
    cache = ExtractedTextCache(max_size=2)
    cache.put("kb/a", "A")
    cache.put("kb/b", "B")
    cache.get("kb/a")
    cache.put("kb/c", "C")
    assert "kb/b" not in cache
    assert "kb/a" in cache
    assert len(cache) == 2


def test_discard_and_clear() -> None:
    cache = ExtractedTextCache()
    cache.put("kb/a", "A")
    cache.put("kb/b", "B")
    cache.discard("kb/a")
    cache.discard("kb/never")
    assert "kb/a" not in cache
    cache.clear()
    assert len(cache) == 0


def test_zero_size_disables_cache() -> None:
    cache = ExtractedTextCache(max_size=0)
    cache.put("kb/a", "A")
    assert cache.get("kb/a") is None
