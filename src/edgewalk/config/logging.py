"""Logging for edgewalk: structlog rendering over the stdlib ``logging`` tree.

Library modules log through ``logging.getLogger(__name__)``; a single
stderr handler renders every record with structlog, as console text or
(``--log-json``) one JSON object per line.  Values bound with
:func:`traversal_context` are merged into each record, so pager lines
carry the index, match key and page number they belong to.

SQLAlchemy's engine and pool loggers stay at WARNING even under ``-v``:
every page is a query, and echoing them would bury the pager output.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import structlog

NOISY_LOGGERS = ("sqlalchemy.engine", "sqlalchemy.pool")


def configure_logging(*, verbose: bool = False, log_json: bool = False) -> None:
    """Install the stderr handler and set edgewalk's level.

    Safe to call more than once; the previous handler is replaced.

    Args:
        verbose: Let edgewalk's DEBUG records through (per-page fetches,
            seeding progress).  Otherwise only WARNING and above.
        log_json: Render JSON lines instead of console text.
    """
    shared: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    renderer: structlog.types.Processor = (
        structlog.processors.JSONRenderer()
        if log_json
        else structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    )

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(logging.WARNING)

    logging.getLogger("edgewalk").setLevel(logging.DEBUG if verbose else logging.WARNING)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


@contextmanager
def traversal_context(index: str, key: Any = None, **extra: Any) -> Iterator[None]:
    """Bind *index* and *key* (plus *extra*) to every record logged inside."""
    with structlog.contextvars.bound_contextvars(index=index, key=key, **extra):
        yield
