"""Configuration loading and validation."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import find_dotenv, load_dotenv

from .exceptions import ConfigError
from .models import BookMetadata
from .utils import sanitize_filename

EXTRACTORS = ("trafilatura", "firecrawl")

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)


def _default_book() -> BookMetadata:
    return BookMetadata(
        title="Fast Founder - Full article collection",
        author="Fast Founder",
        description="Full collection of articles from fastfounder.ru",
        language="ru",
        publisher="fastfounder.ru",
    )


@dataclass
class Config:
    """Application configuration."""

    cookies_file: Path = Path("./fastfounder.ru_cookies.txt")
    csv_file: Path = Path("./1.csv")
    output_dir: Path = Path("./output")
    output_name: str = "fastfounder"
    cache_dir: Path = Path("./cache")
    dev: bool = False
    dev_pages_limit: int = 3
    epub_parts: int = 50
    request_delay: float = 1.0
    retry_attempts: int = 3
    retry_base_delay: float = 1.0
    flush_every: int = 5
    user_agent: str = DEFAULT_USER_AGENT
    fallback_domain: str = "fastfounder.ru"
    extractor: str = "trafilatura"
    firecrawl_api_key: str = ""
    log_level: str = "INFO"
    json_logs: bool = False
    book: BookMetadata = field(default_factory=_default_book)

    @property
    def output_path(self) -> Path:
        """Base path of the generated book."""
        mode = "dev" if self.dev else "full"
        return self.output_dir / f"{sanitize_filename(self.output_name)}-{mode}.epub"

    @property
    def pages_limit(self) -> Optional[int]:
        return self.dev_pages_limit if self.dev else None

    def validate(self) -> None:
        """Validate configuration values."""
        if self.extractor not in EXTRACTORS:
            raise ConfigError(
                f"Unknown extractor: {self.extractor}. Use one of: {', '.join(EXTRACTORS)}."
            )
        if self.extractor == "firecrawl" and not self.firecrawl_api_key:
            raise ConfigError(
                "FIRECRAWL_API_KEY is required when using the firecrawl extractor."
            )
        if self.request_delay < 0 or self.retry_base_delay < 0:
            raise ConfigError("Delays cannot be negative.")
        if self.retry_attempts < 1:
            raise ConfigError("retry_attempts must be at least 1.")
        if self.epub_parts < 1:
            raise ConfigError("epub_parts must be at least 1.")
        if self.flush_every < 1:
            raise ConfigError("flush_every must be at least 1.")
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ConfigError(f"Unknown log level: {self.log_level}")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from None


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from None


def load_config(
    cookies_file: Optional[str] = None,
    csv_file: Optional[str] = None,
    output_dir: Optional[str] = None,
    cache_dir: Optional[str] = None,
    parts: Optional[int] = None,
    extractor: Optional[str] = None,
    dev: bool = False,
    verbose: bool = False,
    json_logs: bool = False,
) -> Config:
    """Load config from .env and apply CLI overrides."""
    load_dotenv(find_dotenv(usecwd=True))

    defaults = Config()
    default_book = _default_book()
    book = BookMetadata(
        title=os.getenv("BOOK_TITLE", default_book.title),
        author=os.getenv("BOOK_AUTHOR", default_book.author),
        description=os.getenv("BOOK_DESCRIPTION", default_book.description),
        language=os.getenv("BOOK_LANGUAGE", default_book.language),
        publisher=os.getenv("BOOK_PUBLISHER", default_book.publisher),
        cover=os.getenv("BOOK_COVER") or None,
    )

    config = Config(
        cookies_file=Path(cookies_file or os.getenv("COOKIES_FILE", str(defaults.cookies_file))),
        csv_file=Path(csv_file or os.getenv("CSV_FILE", str(defaults.csv_file))),
        output_dir=Path(output_dir or os.getenv("OUTPUT_DIR", str(defaults.output_dir))),
        output_name=os.getenv("OUTPUT_NAME") or defaults.output_name,
        cache_dir=Path(cache_dir or os.getenv("CACHE_DIR", str(defaults.cache_dir))),
        dev=dev or os.getenv("APP_ENV") == "development",
        dev_pages_limit=_env_int("PAGES_LIMIT", defaults.dev_pages_limit),
        epub_parts=parts if parts is not None else _env_int("EPUB_PARTS", defaults.epub_parts),
        request_delay=_env_float("REQUEST_DELAY", defaults.request_delay),
        retry_attempts=_env_int("RETRY_ATTEMPTS", defaults.retry_attempts),
        retry_base_delay=_env_float("RETRY_DELAY", defaults.retry_base_delay),
        flush_every=_env_int("CACHE_FLUSH_EVERY", defaults.flush_every),
        user_agent=os.getenv("USER_AGENT") or defaults.user_agent,
        fallback_domain=os.getenv("FALLBACK_DOMAIN") or defaults.fallback_domain,
        extractor=extractor or os.getenv("EXTRACTOR", defaults.extractor),
        firecrawl_api_key=os.getenv("FIRECRAWL_API_KEY", ""),
        log_level="DEBUG" if verbose else os.getenv("LOG_LEVEL", defaults.log_level),
        json_logs=json_logs,
        book=book,
    )

    config.validate()
    return config
