"""structlog setup for the command line run.

Events go to stderr so that ``click.echo`` output on stdout stays clean.
The console renderer is used unless ``json_output`` is set or
``APP_ENV=production``.

httpx and trafilatura log through the standard library. Their records are
rendered by the same processor chain, but they are held at WARNING unless
the run is in debug mode: one request line and several extraction notes
per page would otherwise drown out the pipeline's own progress events.

Components accept an optional ``logger`` argument and only fall back to
:func:`get_logger` when none is given.
"""

import logging
import os
import sys

import structlog

# stdlib loggers used by the fetch and extraction stack
THIRD_PARTY_LOGGERS = (
    "httpx",
    "httpcore",
    "trafilatura",
    "htmldate",
    "courlan",
    "charset_normalizer",
)


def _level_number(log_level: str) -> int:
    level = logging.getLevelName(log_level.upper())
    return level if isinstance(level, int) else logging.INFO


def _quiet_third_party(level: int) -> None:
    third_party_level = level if level <= logging.DEBUG else max(level, logging.WARNING)
    for name in THIRD_PARTY_LOGGERS:
        logging.getLogger(name).setLevel(third_party_level)


def configure_logging(log_level: str = "INFO", json_output: bool = False) -> structlog.BoundLogger:
    """Configure structlog and route stdlib records through it.

    Args:
        log_level: Level name; unknown names fall back to INFO.
        json_output: Force JSON lines regardless of ``APP_ENV``.

    Returns:
        The ``site2epub`` logger.
    """
    level = _level_number(log_level)
    use_json = json_output or os.environ.get("APP_ENV") == "production"

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if use_json:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer(ensure_ascii=False)
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[*shared_processors, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        # the stream is looked up per configure call, so never cache
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                *shared_processors,
                renderer,
            ],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)
    _quiet_third_party(level)

    return structlog.get_logger(logger_name="site2epub")


def get_logger(name: str) -> structlog.BoundLogger:
    """Named logger; configures from ``LOG_LEVEL`` if nothing has yet."""
    if not structlog.is_configured():
        configure_logging(os.environ.get("LOG_LEVEL", "INFO"))
    return structlog.get_logger(logger_name=name)
