"""Utility functions for site2epub."""

import re
from urllib.parse import urlparse

_TAG_RE = re.compile(r"<[^>]+>")


def extract_domain(url: str) -> str:
    """Extract the domain from a URL."""
    parsed = urlparse(url)
    domain = parsed.netloc
    if domain.startswith("www."):
        domain = domain[4:]
    return domain


def sanitize_filename(name: str) -> str:
    """Remove characters that are invalid in filenames."""
    name = re.sub(r'[<>:"/\\|?*]', "", name)
    name = name.strip(". ")
    return name or "untitled"


def is_absolute_url(url: str) -> bool:
    """Check that a URL has both a scheme and a host."""
    parsed = urlparse(url)
    return bool(parsed.scheme and parsed.netloc)


def count_words(markup: str) -> int:
    """Rough word count of an HTML fragment."""
    return len(_TAG_RE.sub(" ", markup).split())


def format_bytes(size: int) -> str:
    """Format a byte count for humans, e.g. ``1.5 KB``."""
    if size <= 0:
        return "0 Bytes"
    units = ["Bytes", "KB", "MB", "GB"]
    value = float(size)
    i = 0
    while value >= 1024 and i < len(units) - 1:
        value /= 1024
        i += 1
    return f"{round(value, 2):g} {units[i]}"


def format_duration(seconds: float) -> str:
    """Format a duration as ``1h 2m 3s``, dropping leading zero units."""
    total = int(seconds)
    hours, rem = divmod(total, 3600)
    minutes, secs = divmod(rem, 60)
    if hours:
        return f"{hours}h {minutes}m {secs}s"
    if minutes:
        return f"{minutes}m {secs}s"
    return f"{secs}s"
