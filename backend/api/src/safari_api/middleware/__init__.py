"""HTTP middleware for the safari booking API."""

from .correlation import CORRELATION_ID_HEADER, CorrelationIdMiddleware

__all__ = ["CORRELATION_ID_HEADER", "CorrelationIdMiddleware"]
