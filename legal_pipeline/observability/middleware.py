"""
Request logging middleware.

Every request runs under a correlation id taken from X-Request-ID (or
generated) and echoed back on the response. Health probes are logged at
DEBUG so load-balancer polling does not flood the log.

Dependencies: starlette, legal_pipeline.observability
System role: Request/response observability injection
"""

import logging
import time

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from legal_pipeline.observability.correlation import correlation_scope, set_correlation_id
from legal_pipeline.observability.log_utils import log_exception_with_context, log_with_context

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Request-ID"
QUIET_PATH_PREFIX = "/api/v1/health"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log method, path, status and duration under a request correlation id."""

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get(CORRELATION_HEADER) or set_correlation_id()
        path = request.url.path
        level = logging.DEBUG if path.startswith(QUIET_PATH_PREFIX) else logging.INFO
        started = time.perf_counter()

        with correlation_scope(request_id):
            try:
                response: Response = await call_next(request)
            except Exception as e:
                log_exception_with_context(
                    logger,
                    "Request failed",
                    e,
                    method=request.method,
                    path=path,
                    duration_ms=round((time.perf_counter() - started) * 1000, 2),
                )
                raise

            log_with_context(
                logger,
                level,
                "Request handled",
                method=request.method,
                path=path,
                status_code=response.status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )

        response.headers[CORRELATION_HEADER] = request_id
        return response
