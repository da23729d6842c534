"""Test doubles and record builders shared across the test modules."""

from typing import Optional

from site2epub.exceptions import ExtractionError
from site2epub.extractors.base import ArticleExtractor
from site2epub.models import Chapter, ExtractedArticle, PageRecord


class FakeExtractor(ArticleExtractor):
    """In-memory extractor that records every call.

    ``failures`` maps a URL to the number of calls that fail before it
    succeeds; use a large number for a URL that never succeeds.
    """

    def __init__(self, failures: Optional[dict[str, int]] = None):
        self.failures = dict(failures or {})
        self.calls: list[tuple[str, dict]] = []

    @property
    def name(self) -> str:
        return "fake"

    def extract(self, url: str, headers: dict[str, str]) -> ExtractedArticle:
        self.calls.append((url, dict(headers)))
        if self.failures.get(url, 0) > 0:
            self.failures[url] -= 1
            raise ExtractionError(f"boom: {url}")
        slug = url.rstrip("/").rsplit("/", 1)[-1]
        return ExtractedArticle(
            title=f"Title {slug}",
            content=f"<p>Body of {slug}</p>",
            excerpt=f"About {slug}",
            url=url,
            domain="example.com",
            word_count=3,
            date_published="2023-01-01T00:00:00Z",
        )

    @property
    def called_urls(self) -> list[str]:
        return [url for url, _ in self.calls]


def make_record(url: str = "https://example.com/a", **overrides) -> PageRecord:
    defaults = {
        "url": url,
        "title": "A title",
        "content": "<p>Body</p>",
        "excerpt": "Body",
        "domain": "example.com",
        "word_count": 1,
        "date_published": "2023-01-01T00:00:00Z",
        "author": None,
        "lead_image_url": None,
    }
    defaults.update(overrides)
    return PageRecord(**defaults)


def make_chapter(title: str, date: Optional[str] = None) -> Chapter:
    return Chapter(title=title, content=f"<p>{title}</p>", url=f"https://example.com/{title}", date=date)
