"""CLI entry point for site2epub."""

import sys

import click

from .config import EXTRACTORS, load_config
from .exceptions import ConfigError, Site2EpubError
from .logging import configure_logging, get_logger
from .pipeline import clear_cache, run_pipeline


@click.command()
@click.option(
    "--dev",
    is_flag=True,
    default=False,
    help="Development run: only the first PAGES_LIMIT pages (default: 3)",
)
@click.option(
    "--parts",
    type=int,
    default=None,
    help="Number of EPUB parts to split the book into (default: 50, or EPUB_PARTS env var)",
)
@click.option(
    "--csv",
    "csv_file",
    type=click.Path(dir_okay=False),
    default=None,
    help="CSV file with url,timestamp rows (default: ./1.csv or CSV_FILE env var)",
)
@click.option(
    "--cookies",
    "cookies_file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Cookies file, Netscape format or raw header (default: COOKIES_FILE env var)",
)
@click.option(
    "--output-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory for generated EPUB files (default: ./output or OUTPUT_DIR env var)",
)
@click.option(
    "--cache-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory for the page cache (default: ./cache or CACHE_DIR env var)",
)
@click.option(
    "--extractor",
    type=click.Choice(list(EXTRACTORS)),
    default=None,
    help="Article extractor (default: trafilatura, or EXTRACTOR env var)",
)
@click.option(
    "--clear-cache",
    "clear_cache_flag",
    is_flag=True,
    default=False,
    help="Delete the page cache and exit",
)
@click.option(
    "--json-logs",
    is_flag=True,
    default=False,
    help="Emit JSON log lines",
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    default=False,
    help="Enable debug logging",
)
def main(dev, parts, csv_file, cookies_file, output_dir, cache_dir, extractor,
         clear_cache_flag, json_logs, verbose):
    """Scrape the pages listed in a CSV and compile them into EPUB books.

    Pages already in the cache are not fetched again, so an interrupted
    run can simply be restarted.

    Example: site2epub --csv 1.csv --cookies cookies.txt --parts 10
    """
    try:
        config = load_config(
            cookies_file=cookies_file,
            csv_file=csv_file,
            output_dir=output_dir,
            cache_dir=cache_dir,
            parts=parts,
            extractor=extractor,
            dev=dev,
            verbose=verbose,
            json_logs=json_logs,
        )
    except ConfigError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(2)

    configure_logging(config.log_level, json_output=config.json_logs)
    log = get_logger("site2epub")

    if clear_cache_flag:
        clear_cache(config, logger=log)
        click.echo(f"Cache cleared: {config.cache_dir}")
        sys.exit(0)

    try:
        results = run_pipeline(config, logger=log)
    except Site2EpubError as e:
        log.error("pipeline_failed", error=str(e))
        sys.exit(1)

    for part in results:
        click.echo(f"  {part.output_path} ({part.chapter_count} chapters)")
    click.echo("\nDone!")
    sys.exit(0)
