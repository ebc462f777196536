"""
Correlation ids carried through contextvars.

HTTP requests use the X-Request-ID value; worker jobs use "job-<id>" so
every log line written while a job is processed can be traced back to it.
asyncio tasks copy the context, so ids set inside gathered jobs stay
separate.

Dependencies: contextvars
System role: Request and job tracing in logs
"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
import uuid

correlation_id_ctx: ContextVar[str] = ContextVar("correlation_id", default="")


def set_correlation_id(correlation_id: str | None = None) -> str:
    """Set the id for the current context, generating one when absent."""
    value = correlation_id or uuid.uuid4().hex
    correlation_id_ctx.set(value)
    return value


def get_correlation_id() -> str:
    return correlation_id_ctx.get()


@contextmanager
def correlation_scope(correlation_id: str) -> Iterator[str]:
    """Use correlation_id inside the block and restore the outer id afterwards."""
    token = correlation_id_ctx.set(correlation_id)
    try:
        yield correlation_id
    finally:
        correlation_id_ctx.reset(token)
