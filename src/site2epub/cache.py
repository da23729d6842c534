"""Durable URL -> PageRecord cache backed by a single JSON file.

The whole store lives in memory once loaded and is written back in one
piece by :meth:`PageCache.flush`. A missing, corrupt or version-mismatched
file is treated as an empty cache; the worst outcome is re-fetching.
"""

import json
import time
from pathlib import Path
from typing import Iterable, Optional, Union

from .logging import get_logger
from .models import CacheStats, PageRecord

CACHE_VERSION = "1.0.0"
CACHE_FILENAME = "parsed-pages.json"


class PageCache:
    """Lazily loaded page cache with explicit, full-overwrite flushes.

    Parameters
    ----------
    cache_dir:
        Directory holding the cache file. Created on flush.
    version:
        Schema tag written to, and required from, the cache file.
    """

    def __init__(
        self,
        cache_dir: Union[str, Path] = "./cache",
        version: str = CACHE_VERSION,
        logger=None,
    ):
        self.cache_file = Path(cache_dir) / CACHE_FILENAME
        self.version = version
        self._log = logger or get_logger(__name__)
        self._pages: Optional[dict[str, PageRecord]] = None
        self._timestamp = 0.0

    # ------------------------------------------------------------------
    # Loading / persistence
    # ------------------------------------------------------------------

    def _ensure_loaded(self) -> dict[str, PageRecord]:
        if self._pages is None:
            self._load()
        return self._pages

    def _load(self) -> None:
        try:
            raw = json.loads(self.cache_file.read_text(encoding="utf-8"))
            if raw.get("version") != self.version:
                self._log.debug(
                    "cache_version_mismatch",
                    found=raw.get("version"),
                    expected=self.version,
                )
                self._reset()
                return
            self._pages = {
                url: PageRecord.from_dict(data) for url, data in raw["pages"].items()
            }
            self._timestamp = float(raw.get("timestamp", time.time()))
            self._log.debug("cache_loaded", pages=len(self._pages))
        except FileNotFoundError:
            self._log.debug("cache_not_found", path=str(self.cache_file))
            self._reset()
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
            self._log.debug("cache_corrupt", path=str(self.cache_file), error=str(e))
            self._reset()

    def _reset(self) -> None:
        self._pages = {}
        self._timestamp = time.time()

    def flush(self) -> None:
        """Write the whole in-memory store to disk, replacing the old file."""
        pages = self._ensure_loaded()
        self._timestamp = time.time()
        payload = {
            "version": self.version,
            "timestamp": self._timestamp,
            "pages": {url: record.to_dict() for url, record in pages.items()},
        }
        self.cache_file.parent.mkdir(parents=True, exist_ok=True)
        tmp_file = self.cache_file.with_suffix(".json.tmp")
        try:
            tmp_file.write_text(
                json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8"
            )
            tmp_file.replace(self.cache_file)
        finally:
            tmp_file.unlink(missing_ok=True)
        self._log.debug("cache_flushed", pages=len(pages))

    def clear(self) -> None:
        """Drop every entry and delete the cache file if present.

        The last-flush time is left alone; nothing was written.
        """
        self._ensure_loaded()
        self._pages = {}
        try:
            self.cache_file.unlink()
            self._log.info("cache_cleared", path=str(self.cache_file))
        except FileNotFoundError:
            pass

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get(self, url: str) -> Optional[PageRecord]:
        return self._ensure_loaded().get(url)

    def set(self, url: str, record: PageRecord) -> None:
        """Insert or replace an entry in memory; call flush() to persist."""
        self._ensure_loaded()[url] = record

    def has(self, url: str) -> bool:
        return url in self._ensure_loaded()

    __contains__ = has

    def __len__(self) -> int:
        return len(self._ensure_loaded())

    def partition(self, urls: Iterable[str]) -> tuple[list[str], list[PageRecord]]:
        """Split urls into (uncached urls, cached records), keeping input order."""
        pages = self._ensure_loaded()
        uncached: list[str] = []
        cached: list[PageRecord] = []
        for url in urls:
            record = pages.get(url)
            if record is None:
                uncached.append(url)
            else:
                cached.append(record)
        return uncached, cached

    def stats(self) -> CacheStats:
        pages = self._ensure_loaded()
        return CacheStats(count=len(pages), age_seconds=max(0.0, time.time() - self._timestamp))
