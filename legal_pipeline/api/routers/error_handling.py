"""
Pipeline error handling for API endpoints.

Maps the pipeline exception hierarchy onto HTTP status codes in one
decorator shared by all routers.
"""

import functools
import logging
from typing import Any, Callable, TypeVar

from fastapi import HTTPException, status

from legal_pipeline.core.exceptions import (
    AuthenticationError,
    DocumentNotFoundError,
    InputValidationError,
    LegalPipelineException,
    NormalizationValidationError,
    PayloadTooLargeError,
    QAValidationError,
)
from legal_pipeline.observability import get_logger, log_with_context

logger = get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def to_http_exception(exc: LegalPipelineException) -> HTTPException:
    """HTTPException equivalent of a pipeline error."""
    if isinstance(exc, PayloadTooLargeError):
        return HTTPException(status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail=exc.message)
    if isinstance(exc, InputValidationError):
        return HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": exc.message, "details": exc.details},
        )
    if isinstance(exc, NormalizationValidationError):
        return HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"error": exc.message, "details": exc.issues},
        )
    if isinstance(exc, QAValidationError):
        return HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"error": exc.message, "details": exc.errors},
        )
    if isinstance(exc, DocumentNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=exc.message)
    if isinstance(exc, AuthenticationError):
        return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=exc.message)


def handle_pipeline_errors(func: F) -> F:
    """
    Decorator translating pipeline exceptions into HTTPExceptions.

    Client errors log at WARNING, server errors at ERROR.
    """

    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)
        except LegalPipelineException as e:
            http_exc = to_http_exception(e)
            level = logging.ERROR if http_exc.status_code >= 500 else logging.WARNING
            log_with_context(
                logger,
                level,
                "Request failed",
                endpoint=func.__name__,
                status_code=http_exc.status_code,
                error=str(e),
            )
            raise http_exc from e

    return wrapper  # type: ignore[return-value]
