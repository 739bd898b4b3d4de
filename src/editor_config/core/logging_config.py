"""
Logging setup for the editor config runtime.

Evaluations log through structlog. Fields bound with ``LogContext`` inside a
worker thread (the operation name, for instance) are merged into every event
emitted by that worker. Everything goes to stderr, which keeps the CLI's JSON
output on stdout parseable.
"""

import logging
import sys
from typing import IO, TYPE_CHECKING, Any

import structlog
from pythonjsonlogger import jsonlogger

if TYPE_CHECKING:
    from .config import Settings

TEXT_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
JSON_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def _resolve_level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    # Unknown names come back as "Level <name>"
    return resolved if isinstance(resolved, int) else logging.INFO


def _root_handler(json_logs: bool, stream: IO[str]) -> logging.Handler:
    handler = logging.StreamHandler(stream)
    if json_logs:
        handler.setFormatter(jsonlogger.JsonFormatter(JSON_FORMAT))
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))
    return handler


def configure_logging(level: str | int = "INFO", json_logs: bool = False, stream: IO[str] | None = None) -> None:
    """
    Install the root handler and the structlog pipeline.

    Args:
        level: Level name or number; unknown names fall back to INFO
        json_logs: Render events as JSON instead of console lines
        stream: Where log lines go (default: stderr)
    """
    log_level = _resolve_level(level)
    handler = _root_handler(json_logs, stream if stream is not None else sys.stderr)
    logging.basicConfig(level=log_level, handlers=[handler], force=True)

    renderer: Any = structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer(colors=False)
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_logging_from_settings(
    settings: "Settings", level: str | None = None, json_logs: bool | None = None
) -> None:
    """Configure logging from settings; explicit arguments win over them."""
    configure_logging(
        level if level is not None else settings.log_level,
        json_logs if json_logs is not None else settings.json_logs,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    return structlog.get_logger(name)


class LogContext:
    """Bind fields to every event logged in this context (contextvars, so per thread)."""

    def __init__(self, **fields: Any):
        self.fields = fields
        self._tokens: dict[str, Any] = {}

    def __enter__(self) -> "LogContext":
        self._tokens = structlog.contextvars.bind_contextvars(**self.fields)
        return self

    def __exit__(self, *exc_info: Any) -> None:
        structlog.contextvars.reset_contextvars(**self._tokens)
