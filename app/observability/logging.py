from __future__ import annotations

import logging
import sys
from typing import IO, Any

import structlog

from app.config import get_settings
from app.observability.spans import add_span_context


_CONFIGURED = False


def configure_logging(
    level: int | None = None,
    *,
    json_logs: bool | None = None,
    stream: IO[str] | None = None,
    force: bool = False,
) -> None:
    """Configure structlog + stdlib logging, one JSON object per line.

    Each line carries the source file and line number of the call site plus
    the active span context. Safe to call multiple times (no-op after the
    first call unless ``force`` is set).
    """

    global _CONFIGURED
    if _CONFIGURED and not force:
        return

    settings = get_settings()
    if level is None:
        level = settings.log_level_number
    if json_logs is None:
        json_logs = settings.log_json

    pre_chain: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.CallsiteParameterAdder(
            {
                structlog.processors.CallsiteParameter.FILENAME,
                structlog.processors.CallsiteParameter.LINENO,
            }
        ),
        add_span_context,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *pre_chain,
            # Let ProcessorFormatter render JSON for stdlib log records too.
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    renderer: Any = structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer()
    formatter = structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=pre_chain,
    )

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)

    # Keep uvicorn's own loggers consistent with our handler.
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logger = logging.getLogger(name)
        logger.handlers = [handler]
        logger.propagate = False
        logger.setLevel(level)

    _CONFIGURED = True
