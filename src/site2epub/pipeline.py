"""End-to-end run: cookies + CSV -> cached pages -> EPUB parts."""

import time

from .cache import PageCache
from .config import Config
from .exceptions import BatchError
from .extractors import get_extractor
from .fetcher import PageFetcher
from .filters import create_fastfounder_filter
from .logging import get_logger
from .models import PartResult
from .sources import read_cookies, read_pages_from_csv
from .utils import format_bytes, format_duration
from .writer import write_multipart_epub


def run_pipeline(config: Config, logger=None, extractor=None) -> list[PartResult]:
    """Run the whole pipeline and return the written EPUB parts.

    Raises:
        BatchError: if no page could be obtained from cache or network.
        Site2EpubError: for unreadable inputs or EPUB write failures.
    """
    log = logger or get_logger(__name__)
    started = time.monotonic()
    log.info("pipeline_started", mode="dev" if config.dev else "full")

    cookies = read_cookies(config.cookies_file, logger=log)
    rows = read_pages_from_csv(config.csv_file, limit=config.pages_limit, logger=log)
    log.info("urls_loaded", count=len(rows))

    cache = PageCache(config.cache_dir, logger=log)
    stats = cache.stats()
    log.info("cache_opened", pages=stats.count, age=format_duration(stats.age_seconds))

    extractor = extractor or get_extractor(config)
    fetcher = PageFetcher(
        extractor=extractor,
        cache=cache,
        content_filter=create_fastfounder_filter(logger=log),
        cookies=cookies,
        user_agent=config.user_agent,
        retry_attempts=config.retry_attempts,
        retry_base_delay=config.retry_base_delay,
        request_delay=config.request_delay,
        flush_every=config.flush_every,
        fallback_domain=config.fallback_domain,
        logger=log,
    )
    try:
        pages = fetcher.fetch_batch([row.url for row in rows])
    finally:
        extractor.close()

    if not pages:
        raise BatchError("No pages could be fetched")
    log.info("pages_ready", count=len(pages))

    parts = write_multipart_epub(
        pages, config.book, config.output_path, config.epub_parts, logger=log
    )

    log.info(
        "pipeline_finished",
        duration=format_duration(time.monotonic() - started),
        pages=len(pages),
        parts=len(parts),
        size=format_bytes(sum(p.file_size for p in parts)),
    )
    return parts


def clear_cache(config: Config, logger=None) -> None:
    """Delete the durable page cache without running the pipeline."""
    PageCache(config.cache_dir, logger=logger).clear()
