"""Article extractor factory."""

from ..config import Config
from .base import ArticleExtractor
from .firecrawl import FirecrawlExtractor
from .trafilatura import TrafilaturaExtractor


def get_extractor(config: Config) -> ArticleExtractor:
    """Create and return the configured article extractor."""
    if config.extractor == "firecrawl":
        return FirecrawlExtractor(api_key=config.firecrawl_api_key)
    return TrafilaturaExtractor()


__all__ = ["ArticleExtractor", "FirecrawlExtractor", "TrafilaturaExtractor", "get_extractor"]
