"""Core utilities and infrastructure."""

from .config import Settings, get_settings
from .errors import (
    EditorConfigError,
    ThreadSpawnError,
    ScriptEvaluationError,
    SerializationError,
    ThreadPanicError,
    ScriptTimeoutError,
)
from .logging_config import configure_logging, configure_logging_from_settings, get_logger, LogContext
from .json import safe_json_dumps, js_string_literal, load_json, JSONParseError

__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Errors
    "EditorConfigError",
    "ThreadSpawnError",
    "ScriptEvaluationError",
    "SerializationError",
    "ThreadPanicError",
    "ScriptTimeoutError",
    # Logging
    "configure_logging",
    "configure_logging_from_settings",
    "get_logger",
    "LogContext",
    # JSON
    "safe_json_dumps",
    "js_string_literal",
    "load_json",
    "JSONParseError",
]
