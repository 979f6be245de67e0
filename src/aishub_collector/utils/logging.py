"""Logging configuration for the collector."""

import logging
import structlog
from typing import Optional
from pathlib import Path

# Applied to every event before it is rendered
_EVENT_PROCESSORS = (
    structlog.stdlib.filter_by_level,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.processors.TimeStamper(fmt="iso", utc=True),
    structlog.processors.format_exc_info,
)


def _renderer(json_logs: bool):
    if json_logs:
        return structlog.processors.JSONRenderer(sort_keys=True)
    return structlog.dev.ConsoleRenderer(colors=False)


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    json_logs: bool = True
) -> None:
    """
    Setup structured logging for the collector.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional file to write logs to, in addition to stderr
        json_logs: Whether to render events as JSON lines
    """
    handlers = [logging.StreamHandler()]
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, level.upper()),
        handlers=handlers,
        force=True,
    )

    # httpx logs every request at INFO, which would leak the credential
    logging.getLogger("httpx").setLevel(logging.WARNING)

    structlog.configure(
        processors=[*_EVENT_PROCESSORS, _renderer(json_logs)],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
