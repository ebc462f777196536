"""
Structured logging helpers.

Context values are rendered to short strings (collections as their size,
enums as their value, long text truncated) and appended to the message as
key=value pairs, so plain-text handlers keep them. They are also attached
to the record; keys that clash with LogRecord attributes get a ctx_
prefix.

Dependencies: logging (stdlib)
System role: Logging helper functions
"""

import enum
import logging
from typing import Any

MAX_VALUE_CHARS = 300

_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


def safe_log_value(value: Any, max_length: int = MAX_VALUE_CHARS) -> str:
    """Render value for a log line without raising."""
    if value is None:
        return "None"
    if isinstance(value, enum.Enum):
        return str(value.value)
    if isinstance(value, (list, tuple, set, frozenset)):
        return f"{type(value).__name__}[{len(value)}]"
    if isinstance(value, dict):
        return f"dict[{len(value)}]"
    try:
        text = value if isinstance(value, str) else str(value)
    except Exception as e:
        return f"<unrenderable {type(e).__name__}>"
    if len(text) > max_length:
        return f"{text[:max_length]}... ({len(text)} chars)"
    return text


def _context(values: dict[str, Any]) -> dict[str, str]:
    return {
        (f"ctx_{key}" if key in _RECORD_ATTRS else key): safe_log_value(val)
        for key, val in values.items()
    }


def _with_pairs(message: str, context: dict[str, str]) -> str:
    if not context:
        return message
    pairs = " ".join(f"{key}={val}" for key, val in context.items())
    return f"{message} {pairs}"


def log_with_context(logger: logging.Logger, level: int, message: str, **context) -> None:
    """Log message at level with key=value context."""
    rendered = _context(context)
    logger.log(level, _with_pairs(message, rendered), extra=rendered)


def log_exception_with_context(
    logger: logging.Logger,
    message: str,
    exc: BaseException,
    **context,
) -> None:
    """Log exc at ERROR with its traceback, type and message plus context."""
    rendered = _context(context)
    rendered["error_type"] = type(exc).__name__
    rendered["error_msg"] = safe_log_value(str(exc))
    logger.error(_with_pairs(message, rendered), exc_info=exc, extra=rendered)
