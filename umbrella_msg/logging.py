"""Structured logging setup for hosts embedding the MSG parser.

The parser modules only call ``structlog.get_logger()`` and emit
``msg_*`` events (debug for skipped streams and attachments, warning for
an unreadable container), each carrying a ``msg_digest`` context variable
that identifies the file being parsed.  :func:`setup_logging` renders those
events and stdlib records alike as JSON or console lines, and keeps
olefile's per-defect warnings for malformed containers at a separate,
quieter level.
"""

from __future__ import annotations

import logging
import sys

import structlog

# olefile reports every tolerated container defect through stdlib logging.
_CONTAINER_LOGGERS = ("olefile",)


def _processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]


def setup_logging(
    *,
    json: bool = True,
    level: str = "INFO",
    container_level: str = "ERROR",
) -> None:
    """Configure structlog and the stdlib root logger.

    Parameters
    ----------
    json:
        Emit JSON lines when *True*, otherwise use the console renderer.
    level:
        Root log level name, case-insensitive.
    container_level:
        Level for the compound-file reader's own loggers.  Malformed
        ``.msg`` files make olefile very chatty at WARNING.
    """
    renderer: structlog.types.Processor = (
        structlog.processors.JSONRenderer() if json else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[*_processors(), structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=_processors(),
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level.upper())

    for name in _CONTAINER_LOGGERS:
        logging.getLogger(name).setLevel(container_level.upper())
