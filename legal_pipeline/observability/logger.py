"""
Root logging setup for the API and the Celery workers.

Lines carry the correlation id of the request or job being handled ("-"
outside of one).

Dependencies: logging (stdlib)
System role: Centralized logging configuration
"""

import logging
import sys

from legal_pipeline.observability.correlation import get_correlation_id

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s [%(correlation_id)s] %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"

# Libraries that log every statement or request at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "sqlalchemy.engine", "celery.worker.strategy")


class CorrelationIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id() or "-"
        return True


def configure_logging(level: str = "INFO") -> None:
    """
    Replace root handlers with one stdout handler.

    Args:
        level: Root log level name, case-insensitive
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(CorrelationIdFilter())
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level.upper())

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
