"""Unit tests for site2epub.cache.PageCache."""

import json
import time
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from site2epub.cache import CACHE_FILENAME, CACHE_VERSION, PageCache
from tests.helpers import make_record


class TestLookup:
    def test_get_missing_returns_none(self, cache: PageCache) -> None:
        assert cache.get("https://example.com/nope") is None

    def test_set_and_get(self, cache: PageCache) -> None:
        record = make_record()
        cache.set(record.url, record)
        assert cache.get(record.url) == record
        assert cache.has(record.url)
        assert record.url in cache

    def test_set_overwrites(self, cache: PageCache) -> None:
        cache.set("u", make_record("u", title="old"))
        cache.set("u", make_record("u", title="new"))
        assert cache.get("u").title == "new"
        assert len(cache) == 1

    def test_set_does_not_persist(self, cache: PageCache) -> None:
        cache.set("u", make_record("u"))
        assert not cache.cache_file.exists()


class TestPartition:
    def test_splits_and_preserves_order(self, cache: PageCache) -> None:
        for url in ("b", "d"):
            cache.set(url, make_record(url))
        uncached, cached = cache.partition(["a", "b", "c", "d", "e"])
        assert uncached == ["a", "c", "e"]
        assert [r.url for r in cached] == ["b", "d"]

    def test_empty_input(self, cache: PageCache) -> None:
        assert cache.partition([]) == ([], [])


class TestPersistence:
    def test_round_trip_through_fresh_instance(self, cache: PageCache, cache_dir: Path) -> None:
        record = make_record(
            "https://example.com/x",
            title="Заголовок",
            author="Someone",
            lead_image_url="https://example.com/i.png",
        )
        cache.set(record.url, record)
        cache.flush()

        fresh = PageCache(cache_dir, logger=MagicMock())
        assert fresh.get(record.url) == record

    def test_flush_writes_version_timestamp_and_pages(self, cache: PageCache, cache_dir: Path) -> None:
        cache.set("u", make_record("u"))
        cache.flush()
        raw = json.loads((cache_dir / CACHE_FILENAME).read_text(encoding="utf-8"))
        assert raw["version"] == CACHE_VERSION
        assert raw["timestamp"] > 0
        assert list(raw["pages"]) == ["u"]

    def test_flush_is_idempotent(self, cache: PageCache, cache_dir: Path) -> None:
        cache.set("u", make_record("u"))
        cache.flush()
        cache.flush()
        fresh = PageCache(cache_dir, logger=MagicMock())
        assert len(fresh) == 1

    def test_flush_overwrites_previous_state(self, cache: PageCache, cache_dir: Path) -> None:
        cache.set("a", make_record("a"))
        cache.flush()
        cache.clear()
        cache.set("b", make_record("b"))
        cache.flush()
        fresh = PageCache(cache_dir, logger=MagicMock())
        assert fresh.get("a") is None
        assert fresh.get("b") is not None

    def test_failed_write_leaves_no_temp_file(self, cache: PageCache, cache_dir: Path,
                                              monkeypatch: pytest.MonkeyPatch) -> None:
        cache.set("a", make_record("a"))

        def failing_replace(self, target):
            raise OSError("disk full")

        monkeypatch.setattr(Path, "replace", failing_replace)
        with pytest.raises(OSError, match="disk full"):
            cache.flush()
        assert list(cache_dir.iterdir()) == []

    def test_version_mismatch_treated_as_empty(self, cache_dir: Path) -> None:
        old = PageCache(cache_dir, version="0.9.0", logger=MagicMock())
        old.set("u", make_record("u"))
        old.flush()
        current = PageCache(cache_dir, logger=MagicMock())
        assert current.get("u") is None
        assert len(current) == 0

    def test_corrupt_file_treated_as_empty(self, cache_dir: Path) -> None:
        cache_dir.mkdir(parents=True)
        (cache_dir / CACHE_FILENAME).write_text("{not json", encoding="utf-8")
        cache = PageCache(cache_dir, logger=MagicMock())
        assert cache.get("u") is None

    def test_wrong_shape_treated_as_empty(self, cache_dir: Path) -> None:
        cache_dir.mkdir(parents=True)
        (cache_dir / CACHE_FILENAME).write_text("[1, 2, 3]", encoding="utf-8")
        assert len(PageCache(cache_dir, logger=MagicMock())) == 0

    def test_load_is_lazy(self, cache_dir: Path) -> None:
        cache = PageCache(cache_dir, logger=MagicMock())
        writer = PageCache(cache_dir, logger=MagicMock())
        writer.set("u", make_record("u"))
        writer.flush()
        # first access happens after the file was written
        assert cache.has("u")


class TestStatsAndClear:
    def test_stats_counts_pages(self, cache: PageCache) -> None:
        cache.set("a", make_record("a"))
        cache.set("b", make_record("b"))
        stats = cache.stats()
        assert stats.count == 2
        assert stats.age_seconds >= 0

    def test_clear_removes_file_and_entries(self, cache: PageCache) -> None:
        cache.set("a", make_record("a"))
        cache.flush()
        cache.clear()
        assert not cache.cache_file.exists()
        assert cache.get("a") is None
        assert cache.stats().count == 0

    def test_clear_keeps_last_flush_time(self, cache_dir: Path) -> None:
        cache_dir.mkdir(parents=True)
        payload = {"version": CACHE_VERSION, "timestamp": time.time() - 3600, "pages": {}}
        (cache_dir / CACHE_FILENAME).write_text(json.dumps(payload), encoding="utf-8")
        cache = PageCache(cache_dir, logger=MagicMock())
        cache.clear()
        assert cache.stats().age_seconds >= 3600

    def test_clear_without_file_is_silent(self, cache: PageCache) -> None:
        cache.clear()
        cache.clear()
        assert len(cache) == 0
