"""Correlation ID middleware for request tracing.

Each request runs under one correlation ID: the caller's X-Correlation-ID when
it is a plausible token, otherwise a fresh UUID. The ID prefixes every log
line written while the request is handled, is forwarded to the booking
backend by BookingApiClient, and is echoed on the response.
"""

import re
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from safari_shared.utils.logging import clear_correlation_id, get_logger, set_correlation_id

CORRELATION_ID_HEADER = "X-Correlation-ID"

# The ID is copied into outgoing headers and log lines
_VALID_CORRELATION_ID = re.compile(r"[A-Za-z0-9._:-]{1,128}")

logger = get_logger(__name__)


def accepted_correlation_id(value: str | None) -> str | None:
    """Return the incoming ID if it is safe to reuse, else None."""
    if value and _VALID_CORRELATION_ID.fullmatch(value):
        return value
    return None


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Binds a correlation ID to the request and logs its outcome."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        incoming = request.headers.get(CORRELATION_ID_HEADER)
        correlation_id = set_correlation_id(accepted_correlation_id(incoming))
        started = time.perf_counter()
        try:
            response = await call_next(request)
            response.headers[CORRELATION_ID_HEADER] = correlation_id
            logger.info(
                "%s %s -> %d (%.1f ms)",
                request.method,
                request.url.path,
                response.status_code,
                (time.perf_counter() - started) * 1000,
            )
            return response
        finally:
            clear_correlation_id()
