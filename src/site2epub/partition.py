"""Chronological ordering and balanced splitting of chapters into parts."""

import math
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Sequence, Union

from .exceptions import PartitionError
from .models import Chapter


def parse_date(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601-ish date; naive values are taken as UTC.

    Returns None for missing or unparseable values.
    """
    if not value:
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def sort_chapters_by_date(chapters: Sequence[Chapter]) -> list[Chapter]:
    """Stable sort, oldest first; undated chapters go last in input order."""

    def key(chapter: Chapter):
        parsed = parse_date(chapter.date)
        if parsed is None:
            return (1, 0.0)
        return (0, parsed.timestamp())

    return sorted(chapters, key=key)


def split_into_parts(chapters: Sequence[Chapter], part_count: int) -> list[list[Chapter]]:
    """Sort chapters by date and cut them into contiguous, ordered parts.

    Each part holds ``ceil(len(chapters) / part_count)`` chapters except
    possibly the last. Empty parts are never produced, so asking for more
    parts than there are chapters yields one chapter per part. Exactly
    ``min(part_count, len(chapters))`` parts come back: when fixed-size
    windows would run out early (5 chapters into 4 parts), sizes are
    spread evenly instead, larger parts first.

    Raises:
        PartitionError: if ``chapters`` is empty.
    """
    if not chapters:
        raise PartitionError("No chapters to split into parts")

    ordered = sort_chapters_by_date(chapters)
    if part_count <= 1:
        return [ordered]

    total = len(ordered)
    wanted = min(part_count, total)
    per_part = math.ceil(total / part_count)
    if math.ceil(total / per_part) == wanted:
        sizes = [per_part] * (wanted - 1) + [total - per_part * (wanted - 1)]
    else:
        base, extra = divmod(total, wanted)
        sizes = [base + 1 if i < extra else base for i in range(wanted)]

    parts = []
    start = 0
    for size in sizes:
        parts.append(ordered[start:start + size])
        start += size
    return parts


def part_title(base_title: str, part_number: int) -> str:
    return f"{base_title} - Part {part_number}"


def part_description(base_description: Optional[str], part_number: int, total_parts: int) -> str:
    suffix = f"(Part {part_number} of {total_parts})"
    return f"{base_description} {suffix}" if base_description else suffix


def part_output_path(base_path: Union[str, Path], part_number: int) -> Path:
    """``out/book.epub`` -> ``out/book-part-3.epub``."""
    base_path = Path(base_path)
    stem = base_path.stem if base_path.suffix == ".epub" else base_path.name
    return base_path.with_name(f"{stem}-part-{part_number}.epub")
