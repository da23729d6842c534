"""Custom exceptions for site2epub."""


class Site2EpubError(Exception):
    """Base exception for site2epub."""


class ConfigError(Site2EpubError):
    """Raised when configuration is missing or invalid."""


class CookiesError(Site2EpubError):
    """Raised when the cookies file cannot be read or parsed."""


class CSVError(Site2EpubError):
    """Raised when the URL list CSV is missing or malformed."""


class ExtractionError(Site2EpubError):
    """Raised when fetching or extracting a single page fails."""


class BatchError(Site2EpubError):
    """Raised when a batch produced no pages at all."""


class PartitionError(Site2EpubError):
    """Raised when chapters cannot be split into parts (e.g. none given)."""


class EpubError(Site2EpubError):
    """Raised when writing an EPUB file fails."""
