"""Readers for the URL list CSV and the session cookies file."""

import csv
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from .exceptions import CookiesError, CSVError
from .logging import get_logger
from .models import CSVRow
from .partition import parse_date
from .utils import is_absolute_url

NETSCAPE_HEADER = "# Netscape HTTP Cookie File"


def _parse_netscape_cookies(content: str) -> list[tuple[str, str]]:
    """Return (name, value) pairs from a Netscape cookies.txt body."""
    lines = [
        line.strip()
        for line in content.splitlines()
        if line.strip() and not line.strip().startswith("#")
    ]
    cookies = []
    for index, line in enumerate(lines, start=1):
        fields = line.split("\t")
        if len(fields) != 7:
            raise CookiesError(
                f"Invalid cookie on line {index}: expected 7 fields, got {len(fields)}"
            )
        cookies.append((fields[5], fields[6]))
    return cookies


def read_cookies(path: Union[str, Path], logger=None) -> str:
    """Read a cookies file and return a ``Cookie`` header value.

    Netscape-format files are converted to ``name=value; ...``; anything
    else is assumed to already be a header string.
    """
    try:
        content = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise CookiesError(f"Could not read cookies file {path}: {e}") from e

    if not content.strip():
        raise CookiesError(f"Cookies file {path} is empty")

    log = logger or get_logger(__name__)
    if NETSCAPE_HEADER in content:
        pairs = _parse_netscape_cookies(content)
        log.debug("cookies_parsed", format="netscape", count=len(pairs))
        return "; ".join(f"{name}={value}" for name, value in pairs)

    log.debug("cookies_parsed", format="header", length=len(content.strip()))
    return content.strip()


def _parse_timestamp(value: str) -> Optional[datetime]:
    parsed = parse_date(value)
    if parsed is not None:
        return parsed
    try:
        return parse_date(datetime.strptime(value, "%d.%m.%Y").isoformat())
    except ValueError:
        return None


def read_pages_from_csv(
    path: Union[str, Path], limit: Optional[int] = None, logger=None
) -> list[CSVRow]:
    """Read ``url,timestamp`` rows, sorted oldest first.

    Raises CSVError for an empty file or any malformed row.
    """
    try:
        with open(path, newline="", encoding="utf-8") as f:
            raw_rows = [row for row in csv.reader(f) if any(cell.strip() for cell in row)]
    except OSError as e:
        raise CSVError(f"Could not read CSV file {path}: {e}") from e

    if not raw_rows:
        raise CSVError(f"CSV file {path} is empty")

    rows = []
    for index, raw in enumerate(raw_rows, start=1):
        if len(raw) < 2:
            raise CSVError(f"Invalid row {index}: {','.join(raw)}")
        url, timestamp = raw[0].strip(), raw[1].strip()
        if not is_absolute_url(url):
            raise CSVError(f"Invalid URL on row {index}: {url}")
        parsed = _parse_timestamp(timestamp)
        if parsed is None:
            raise CSVError(f"Invalid date on row {index}: {timestamp}")
        rows.append((parsed, CSVRow(url=url, timestamp=timestamp)))

    rows.sort(key=lambda pair: pair[0])
    result = [row for _, row in rows]
    if limit and limit > 0:
        result = result[:limit]

    log = logger or get_logger(__name__)
    log.debug("csv_parsed", rows=len(result))
    return result
