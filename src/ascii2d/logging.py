"""Logging for the ascii2d client with structlog.

Every line logged while a search runs carries the search's context: the
flow (``file`` or ``url``), the FlareSolverr session once one is open, and
the result page being extracted. Lines go to stderr, and as JSON lines to
the log file when one is configured.
"""

import logging
import sys
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator

import structlog
from structlog.contextvars import bound_contextvars


def setup_logging(level: str | None = "INFO", log_file: Path | None = None) -> None:
    """Configure structlog for console and optional JSON file output.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR), or None to use INFO
        log_file: Optional file path to write JSON logs to
    """
    log_level = getattr(logging, (level or "INFO").upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(level=log_level, handlers=handlers, format="%(message)s", force=True)

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
    ]

    if log_file:
        # JSON lines so a search can be followed by session or result_url
        processors += [
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors += [
            structlog.processors.TimeStamper(fmt="%H:%M:%S", utc=False),
            structlog.dev.set_exc_info,
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
        ]

    # stdlib factory so records reach the file handler as well as stderr
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a logger for a module.

    Args:
        name: Module name (e.g., "ascii2d.client")

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)


@contextmanager
def search_context(flow: str, **fields: Any) -> Iterator[None]:
    """Bind a search's context to every log line inside the block and time it.

    Logs the start at debug, the outcome with ``elapsed_s`` at info, or at
    warning when the block raises. The exception is always re-raised.

    Args:
        flow: Search flow name ("file" or "url")
        **fields: Extra context, such as the searched image URL
    """
    logger = get_logger("ascii2d.search")
    start = time.perf_counter()

    with bound_contextvars(flow=flow, **fields):
        logger.debug("Search started")
        try:
            yield
        except Exception as e:
            logger.warning(f"Search failed: {e}", elapsed_s=round(time.perf_counter() - start, 3))
            raise
        logger.info("Search finished", elapsed_s=round(time.perf_counter() - start, 3))
