"""HTTP middleware."""

from collabportal.infrastructure.api.middleware.correlation_middleware import (
    CORRELATION_HEADER,
    CorrelationMiddleware,
)

__all__ = ["CORRELATION_HEADER", "CorrelationMiddleware"]
