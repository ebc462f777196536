"""
Observability module.

Provides structured logging helpers, correlation ID tracking and
request logging middleware.
"""

from legal_pipeline.observability.logger import configure_logging, get_logger
from legal_pipeline.observability.log_utils import (
    log_exception_with_context,
    log_with_context,
)

__all__ = [
    "configure_logging",
    "get_logger",
    "log_with_context",
    "log_exception_with_context",
]
