"""Hosted article extraction through the Firecrawl API."""

from firecrawl import FirecrawlApp

from ..exceptions import ExtractionError
from ..models import ExtractedArticle
from ..utils import count_words, extract_domain
from .base import ArticleExtractor


def _metadata_dict(result) -> dict:
    """Firecrawl returns either pydantic models or plain dicts."""
    metadata_obj = result.metadata if hasattr(result, "metadata") else result.get("metadata", {})
    if hasattr(metadata_obj, "model_dump"):
        return metadata_obj.model_dump()
    if hasattr(metadata_obj, "dict"):
        return metadata_obj.dict()
    return metadata_obj if isinstance(metadata_obj, dict) else {}


def _first(metadata: dict, *keys: str):
    for key in keys:
        value = metadata.get(key)
        if isinstance(value, list):
            value = value[0] if value else None
        if value:
            return value
    return None


class FirecrawlExtractor(ArticleExtractor):
    def __init__(self, api_key: str):
        self._app = FirecrawlApp(api_key=api_key)

    @property
    def name(self) -> str:
        return "firecrawl"

    def extract(self, url: str, headers: dict[str, str]) -> ExtractedArticle:
        try:
            result = self._app.scrape(
                url,
                formats=["html"],
                only_main_content=True,
                headers=headers,
            )
        except Exception as e:
            raise ExtractionError(f"Failed to scrape {url}: {e}") from e

        if not result:
            raise ExtractionError(f"Empty response from Firecrawl for {url}")

        content = result.html if hasattr(result, "html") else result.get("html", "")
        if not content:
            raise ExtractionError(f"No html content returned for {url}")

        metadata = _metadata_dict(result)
        page_url = _first(metadata, "source_url", "sourceURL", "url") or url

        return ExtractedArticle(
            title=_first(metadata, "title", "og_title", "ogTitle"),
            content=content,
            excerpt=_first(metadata, "description", "og_description", "ogDescription"),
            url=page_url,
            domain=extract_domain(page_url) or None,
            word_count=count_words(content),
            date_published=_first(
                metadata, "published_time", "publishedTime", "article:published_time"
            ),
            author=_first(metadata, "author", "article:author"),
            lead_image_url=_first(metadata, "og_image", "ogImage"),
        )
