"""Local article extraction with httpx + trafilatura."""

from typing import Optional

import httpx
import trafilatura
from trafilatura.metadata import extract_metadata

from ..exceptions import ExtractionError
from ..models import ExtractedArticle
from ..utils import extract_domain
from .base import ArticleExtractor

_DEFAULT_TIMEOUT = 30.0
_ACCEPT_HEADERS = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
    "Accept-Language": "ru,en;q=0.9",
    "DNT": "1",
    "Upgrade-Insecure-Requests": "1",
}


class TrafilaturaExtractor(ArticleExtractor):
    """Fetches raw HTML with httpx and pulls the article out with trafilatura."""

    def __init__(self, client: Optional[httpx.Client] = None, timeout: float = _DEFAULT_TIMEOUT):
        self._owns_client = client is None
        self._client = client or httpx.Client(
            timeout=httpx.Timeout(timeout),
            headers=_ACCEPT_HEADERS,
            follow_redirects=True,
        )

    @property
    def name(self) -> str:
        return "trafilatura"

    def extract(self, url: str, headers: dict[str, str]) -> ExtractedArticle:
        try:
            response = self._client.get(url, headers=headers)
            response.raise_for_status()
        except httpx.TimeoutException as e:
            raise ExtractionError(f"Timeout fetching {url}: {e}") from e
        except httpx.HTTPStatusError as e:
            raise ExtractionError(f"HTTP {e.response.status_code} for {url}") from e
        except httpx.HTTPError as e:
            raise ExtractionError(f"HTTP error fetching {url}: {e}") from e

        html = response.text
        final_url = str(response.url)

        content = trafilatura.extract(
            html,
            url=final_url,
            output_format="html",
            include_comments=False,
            include_tables=True,
            include_images=True,
            include_links=True,
        )
        if not content:
            raise ExtractionError(f"No article content found at {url}")

        text = trafilatura.extract(html, url=final_url, include_comments=False) or ""
        meta = extract_metadata(html, default_url=final_url)

        return ExtractedArticle(
            title=getattr(meta, "title", None),
            content=content,
            excerpt=getattr(meta, "description", None),
            url=final_url,
            domain=getattr(meta, "hostname", None) or extract_domain(final_url) or None,
            word_count=len(text.split()),
            date_published=getattr(meta, "date", None),
            author=getattr(meta, "author", None),
            lead_image_url=getattr(meta, "image", None),
        )

    def close(self) -> None:
        if self._owns_client:
            self._client.close()
