"""
Structured logging configuration using structlog.

JSON lines by default, colored console output when running at DEBUG. Stdlib
loggers (our modules, uvicorn, httpx) are rendered through the same chain,
and any occurrence of the indexer API key is masked before rendering.
"""

import logging
import sys
from typing import Any, Optional

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from .config import settings

REDACTED = "***"

# Transport loggers would otherwise log every token URI request
_QUIET_LOGGERS = ("uvicorn.access", "httpcore", "httpx")


def redact_secrets(_: WrappedLogger, __: str, event_dict: EventDict) -> EventDict:
    """Mask the Moralis API key wherever it shows up in an event."""

    secret = settings.moralis_api_key
    if not secret:
        return event_dict
    for key, value in event_dict.items():
        if isinstance(value, str) and secret in value:
            event_dict[key] = value.replace(secret, REDACTED)
    return event_dict


def _shared_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _renderer(console: bool) -> Any:
    if console:
        return structlog.dev.ConsoleRenderer()
    return structlog.processors.JSONRenderer()


def setup_logging(log_level: Optional[str] = None, console: Optional[bool] = None) -> None:
    """Configure structlog and route stdlib logging through it.

    Args:
        log_level: Override log level (default: from settings.log_level)
        console: Force console (True) or JSON (False) output; defaults to
            console only at DEBUG.
    """
    level = getattr(logging, (log_level or settings.log_level).upper(), logging.INFO)
    if console is None:
        console = level == logging.DEBUG

    shared = _shared_processors()
    if not console:
        shared.append(structlog.processors.format_exc_info)

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=[*shared, structlog.stdlib.ExtraAdder()],
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                redact_secrets,
                _renderer(console),
            ],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
