"""Abstract base class for article extractors."""

from abc import ABC, abstractmethod

from ..models import ExtractedArticle


class ArticleExtractor(ABC):
    """Abstract article extractor interface."""

    @abstractmethod
    def extract(self, url: str, headers: dict[str, str]) -> ExtractedArticle:
        """Fetch url and extract its main article.

        Args:
            url: Absolute URL of the page.
            headers: Request headers, including ``Cookie`` and ``User-Agent``.

        Raises ExtractionError on network or parse failure. Implementations
        make a single attempt; retrying is the caller's job.
        """

    @property
    @abstractmethod
    def name(self) -> str:
        """Short extractor name used in logs."""

    def close(self) -> None:
        """Release any network resources."""
