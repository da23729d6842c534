"""Chapter HTML formatting for EPUB output."""

import html
import re

from .models import Chapter
from .partition import parse_date

_IMG_RE = re.compile(r"<img[^>]*/?>", re.IGNORECASE)
_MULTI_SPACE_RE = re.compile(r"\s{2,}")


def strip_images(content: str) -> str:
    """Remove <img> tags; remote images are not embedded in the book."""
    return _MULTI_SPACE_RE.sub(" ", _IMG_RE.sub("", content)).strip()


def format_chapter_meta(chapter: Chapter) -> str:
    """Render the date/source line shown under a chapter title."""
    parts = []
    parsed = parse_date(chapter.date)
    if parsed is not None:
        parts.append(parsed.strftime("%Y-%m-%d"))
    elif chapter.date:
        parts.append(html.escape(chapter.date))
    if chapter.url:
        parts.append(f'<span class="chapter-url">{html.escape(chapter.url)}</span>')
    if not parts:
        return ""
    return f'<div class="chapter-meta">{" &#8226; ".join(parts)}</div>'


def format_chapter_content(chapter: Chapter) -> str:
    """Format a chapter body: title heading, meta line, then content."""
    heading = f"<h1>{html.escape(chapter.title or 'Untitled')}</h1>"
    return f"{heading}{format_chapter_meta(chapter)}{strip_images(chapter.content)}"
