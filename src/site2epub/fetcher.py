"""Cache-aware, paced, retrying page fetcher."""

import html
import re
import time
from typing import Callable, Optional, TypeVar

from .cache import PageCache
from .extractors.base import ArticleExtractor
from .filters import ContentFilter
from .logging import get_logger
from .models import ExtractedArticle, PageRecord

T = TypeVar("T")

_SCRIPT_RE = re.compile(r"<script[^>]*>.*?</script>", re.IGNORECASE | re.DOTALL)
_STYLE_RE = re.compile(r"<style[^>]*>.*?</style>", re.IGNORECASE | re.DOTALL)
_COMMENT_RE = re.compile(r"<!--.*?-->", re.DOTALL)
_WHITESPACE_RE = re.compile(r"\s+")


def retry(
    func: Callable[[], T],
    max_attempts: int = 3,
    base_delay: float = 1.0,
    sleep: Callable[[float], None] = time.sleep,
    on_retry: Optional[Callable[[int, Exception, float], None]] = None,
) -> T:
    """Execute func with exponential backoff retry.

    Waits ``base_delay * 2**attempt`` between attempts and re-raises the
    last error once ``max_attempts`` have failed.
    """
    last_error: Optional[Exception] = None
    for attempt in range(max_attempts):
        try:
            return func()
        except Exception as e:
            last_error = e
            if attempt < max_attempts - 1:
                delay = base_delay * (2 ** attempt)
                if on_retry is not None:
                    on_retry(attempt + 1, e, delay)
                sleep(delay)
    raise last_error


def clean_html_content(content: str) -> str:
    """Drop scripts, styles and comments; keep the rest of the markup."""
    content = _SCRIPT_RE.sub("", content)
    content = _STYLE_RE.sub("", content)
    content = _COMMENT_RE.sub("", content)
    return _WHITESPACE_RE.sub(" ", content).strip()


def normalize_article(
    article: ExtractedArticle,
    requested_url: str,
    content_filter: ContentFilter,
    fallback_domain: str,
) -> PageRecord:
    """Turn raw extractor output into a PageRecord.

    All defaulting lives here: missing text fields become ``""``, a missing
    word count becomes 0, a missing domain becomes ``fallback_domain`` and
    missing author/date/image stay ``None``.
    """
    content = clean_html_content(html.unescape(article.content or ""))
    content = content_filter.filter_content(content)

    return PageRecord(
        url=article.url or requested_url,
        title=html.unescape(article.title or ""),
        content=content,
        excerpt=html.unescape(article.excerpt or ""),
        domain=article.domain or fallback_domain,
        word_count=max(0, int(article.word_count or 0)),
        date_published=article.date_published or None,
        author=article.author or None,
        lead_image_url=article.lead_image_url or None,
    )


class PageFetcher:
    """Fetches a batch of URLs one at a time, skipping cached ones.

    Successful fetches are written to the cache immediately and the cache
    is flushed every ``flush_every`` new pages and once more at the end,
    so an interrupted run loses at most ``flush_every - 1`` pages.
    """

    def __init__(
        self,
        extractor: ArticleExtractor,
        cache: PageCache,
        content_filter: ContentFilter,
        cookies: str,
        user_agent: str,
        retry_attempts: int = 3,
        retry_base_delay: float = 1.0,
        request_delay: float = 1.0,
        flush_every: int = 5,
        fallback_domain: str = "fastfounder.ru",
        logger=None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.extractor = extractor
        self.cache = cache
        self.content_filter = content_filter
        self.cookies = cookies
        self.user_agent = user_agent
        self.retry_attempts = retry_attempts
        self.retry_base_delay = retry_base_delay
        self.request_delay = request_delay
        self.flush_every = flush_every
        self.fallback_domain = fallback_domain
        self._log = logger or get_logger(__name__)
        self._sleep = sleep

    @property
    def headers(self) -> dict[str, str]:
        return {"Cookie": self.cookies, "User-Agent": self.user_agent}

    def fetch_page(self, url: str) -> PageRecord:
        """Extract and normalize a single page, retrying on failure."""

        def attempt() -> PageRecord:
            self._log.debug("page_fetch_attempt", url=url, extractor=self.extractor.name)
            article = self.extractor.extract(url, self.headers)
            return normalize_article(article, url, self.content_filter, self.fallback_domain)

        def on_retry(attempt_no: int, error: Exception, delay: float) -> None:
            self._log.warning(
                "page_fetch_retry", url=url, attempt=attempt_no, delay=delay, error=str(error)
            )

        return retry(
            attempt,
            max_attempts=self.retry_attempts,
            base_delay=self.retry_base_delay,
            sleep=self._sleep,
            on_retry=on_retry,
        )

    def fetch_batch(self, urls: list[str]) -> list[PageRecord]:
        """Return cached pages followed by freshly fetched ones.

        URLs that keep failing after all retries are logged and left out.
        Repeated URLs are handled once, at their first position. The result
        is in cached-then-fetched order, not chronological.
        """
        unique = list(dict.fromkeys(urls))
        if len(unique) < len(urls):
            self._log.info("duplicate_urls_skipped", count=len(urls) - len(unique))
        uncached, cached = self.cache.partition(unique)
        self._log.info("cache_partitioned", cached=len(cached), to_fetch=len(uncached))

        if not uncached:
            return cached

        results = list(cached)
        fetched = 0
        failed = 0
        total = len(uncached)

        for i, url in enumerate(uncached):
            try:
                record = self.fetch_page(url)
            except Exception as e:
                failed += 1
                self._log.error("page_fetch_failed", url=url, error=str(e))
                continue

            results.append(record)
            self.cache.set(url, record)
            fetched += 1
            self._log.info("page_fetched", index=i + 1, total=total, title=record.title)

            if fetched % self.flush_every == 0:
                self._safe_flush()

            if i < total - 1:
                self._sleep(self.request_delay)

        self._safe_flush()
        self._log.info("batch_complete", fetched=fetched, failed=failed, total=len(results))
        return results

    def _safe_flush(self) -> None:
        try:
            self.cache.flush()
        except OSError as e:
            self._log.warning("cache_flush_failed", error=str(e))
