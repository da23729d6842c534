"""Data models for site2epub."""

import re
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class PageRecord:
    """An extracted article, keyed by its source URL."""

    url: str
    title: str
    content: str  # HTML body, markup preserved
    excerpt: str
    domain: str
    word_count: int = 0
    date_published: Optional[str] = None
    author: Optional[str] = None
    lead_image_url: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "url": self.url,
            "title": self.title,
            "content": self.content,
            "excerpt": self.excerpt,
            "domain": self.domain,
            "word_count": self.word_count,
            "date_published": self.date_published,
            "author": self.author,
            "lead_image_url": self.lead_image_url,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PageRecord":
        return cls(
            url=data["url"],
            title=data.get("title", ""),
            content=data.get("content", ""),
            excerpt=data.get("excerpt", ""),
            domain=data.get("domain", ""),
            word_count=int(data.get("word_count") or 0),
            date_published=data.get("date_published"),
            author=data.get("author"),
            lead_image_url=data.get("lead_image_url"),
        )


@dataclass
class ExtractedArticle:
    """Raw extractor output; any field may be missing."""

    title: Optional[str] = None
    content: Optional[str] = None
    excerpt: Optional[str] = None
    url: Optional[str] = None
    domain: Optional[str] = None
    word_count: Optional[int] = None
    date_published: Optional[str] = None
    author: Optional[str] = None
    lead_image_url: Optional[str] = None


@dataclass(frozen=True)
class Chapter:
    """The part of a page that goes into a book."""

    title: str
    content: str
    url: Optional[str] = None
    date: Optional[str] = None

    @classmethod
    def from_page(cls, page: PageRecord) -> "Chapter":
        return cls(
            title=page.title,
            content=page.content,
            url=page.url,
            date=page.date_published or None,
        )


@dataclass(frozen=True)
class FilterRule:
    """A single content scrubbing rule."""

    kind: str  # "text" or "regex"
    pattern: str
    description: str
    flags: int = re.IGNORECASE


@dataclass
class BookMetadata:
    """Book-level EPUB metadata."""

    title: str
    author: str
    language: str = "ru"
    description: Optional[str] = None
    publisher: Optional[str] = None
    cover: Optional[str] = None  # path to a cover image


@dataclass
class PartResult:
    """One written EPUB file of a (possibly multi-part) book."""

    part_number: int
    output_path: str
    file_size: int
    chapter_count: int
    title: str


@dataclass
class CSVRow:
    """A row of the input URL list."""

    url: str
    timestamp: str


@dataclass
class CacheStats:
    """Summary of the page cache."""

    count: int
    age_seconds: float
