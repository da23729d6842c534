"""Write chapters to one or more EPUB files with ebooklib."""

import uuid
from pathlib import Path
from typing import Sequence, Union

from ebooklib import epub

from .exceptions import EpubError, PartitionError
from .formatter import format_chapter_content
from .logging import get_logger
from .models import BookMetadata, Chapter, PageRecord, PartResult
from .partition import (
    part_description,
    part_output_path,
    part_title,
    sort_chapters_by_date,
    split_into_parts,
)
from .utils import format_bytes

DEFAULT_CSS = """
body { font-family: Georgia, serif; line-height: 1.6; margin: 0; padding: 20px; color: #333; }
h1, h2, h3, h4, h5, h6 { color: #2c3e50; margin-top: 1.5em; margin-bottom: 0.5em; font-weight: bold; }
h1 { font-size: 1.8em; border-bottom: 2px solid #3498db; padding-bottom: 0.3em; }
h2 { font-size: 1.5em; }
h3 { font-size: 1.3em; }
p { margin-bottom: 1em; text-align: justify; }
blockquote { margin: 1.5em 0; padding: 1em; background-color: #f8f9fa; border-left: 4px solid #3498db; font-style: italic; }
code { background-color: #f4f4f4; padding: 2px 4px; border-radius: 3px; font-family: "Courier New", monospace; }
pre { background-color: #f4f4f4; padding: 1em; border-radius: 5px; overflow-x: auto; }
.chapter-meta { color: #7f8c8d; font-size: 0.9em; margin-bottom: 1.5em; border-bottom: 1px solid #ecf0f1; padding-bottom: 0.5em; }
.chapter-url { word-break: break-all; }
"""


def build_book(chapters: Sequence[Chapter], metadata: BookMetadata) -> epub.EpubBook:
    """Assemble an in-memory EpubBook; chapters are used in the order given."""
    book = epub.EpubBook()
    book.set_identifier(f"urn:uuid:{uuid.uuid4()}")
    book.set_title(metadata.title)
    book.set_language(metadata.language)
    book.add_author(metadata.author)
    if metadata.description:
        book.add_metadata("DC", "description", metadata.description)
    if metadata.publisher:
        book.add_metadata("DC", "publisher", metadata.publisher)
    if metadata.cover:
        cover_path = Path(metadata.cover)
        book.set_cover(f"cover{cover_path.suffix or '.jpg'}", cover_path.read_bytes())

    style = epub.EpubItem(
        uid="style_default", file_name="style.css", media_type="text/css", content=DEFAULT_CSS
    )
    book.add_item(style)

    items = []
    for index, chapter in enumerate(chapters, start=1):
        item = epub.EpubHtml(
            title=chapter.title or f"Chapter {index}",
            file_name=f"chapter-{index}.xhtml",
            lang=metadata.language,
        )
        item.content = format_chapter_content(chapter)
        item.add_item(style)
        book.add_item(item)
        items.append(item)

    book.toc = tuple(items)
    book.add_item(epub.EpubNcx())
    book.add_item(epub.EpubNav())
    book.spine = ["nav", *items]
    return book


def write_epub(
    chapters: Sequence[Chapter],
    metadata: BookMetadata,
    output_path: Union[str, Path],
    part_number: int = 1,
    logger=None,
) -> PartResult:
    """Sort chapters chronologically and write them as one EPUB file."""
    log = logger or get_logger(__name__)
    if not chapters:
        raise EpubError("No chapters to include in EPUB")

    output_path = Path(output_path)
    ordered = sort_chapters_by_date(chapters)
    log.info("epub_building", title=metadata.title, chapters=len(ordered), path=str(output_path))

    try:
        book = build_book(ordered, metadata)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        epub.write_epub(str(output_path), book, {})
        file_size = output_path.stat().st_size
    except Exception as e:
        raise EpubError(f"Failed to write {output_path}: {e}") from e

    log.info("epub_written", path=str(output_path), size=format_bytes(file_size))
    return PartResult(
        part_number=part_number,
        output_path=str(output_path),
        file_size=file_size,
        chapter_count=len(ordered),
        title=metadata.title,
    )


def write_multipart_epub(
    pages: Sequence[PageRecord],
    metadata: BookMetadata,
    base_path: Union[str, Path],
    part_count: int,
    logger=None,
) -> list[PartResult]:
    """Write pages as a book split into up to part_count EPUB files.

    With ``part_count <= 1`` a single file is written at ``base_path``.
    Otherwise part N goes to ``<base>-part-N.epub`` with title
    ``"<title> - Part N"`` and a description ending in ``(Part N of M)``,
    where M is the number of parts actually produced.
    """
    log = logger or get_logger(__name__)
    chapters = [Chapter.from_page(page) for page in pages]
    if not chapters:
        raise PartitionError("No pages to include in EPUB")

    if part_count <= 1:
        return [write_epub(chapters, metadata, base_path, logger=log)]

    parts = split_into_parts(chapters, part_count)
    total_parts = len(parts)
    log.info("epub_split", chapters=len(chapters), requested=part_count, parts=total_parts)

    results = []
    for part_number, part_chapters in enumerate(parts, start=1):
        part_metadata = BookMetadata(
            title=part_title(metadata.title, part_number),
            author=metadata.author,
            language=metadata.language,
            description=part_description(metadata.description, part_number, total_parts),
            publisher=metadata.publisher,
            cover=metadata.cover,
        )
        results.append(
            write_epub(
                part_chapters,
                part_metadata,
                part_output_path(base_path, part_number),
                part_number=part_number,
                logger=log,
            )
        )

    total_size = sum(r.file_size for r in results)
    log.info("epub_parts_written", parts=len(results), size=format_bytes(total_size))
    return results
