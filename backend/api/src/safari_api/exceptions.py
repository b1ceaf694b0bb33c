"""FastAPI exception handlers for converting BookingError to HTTP responses.

Domain errors are returned with the ErrorResponse JSON body. The
ErrorCode-to-HTTP status mapping:
- 400 Bad Request: invalid date ranges or parameters
- 404 Not Found: unknown booking or cancellation request
- 409 Conflict: state conflicts (not cancellable, wrong request state,
  nothing free in the search window)
- 422 Unprocessable Entity: the policy table has no matching tier
- 502 Bad Gateway: the booking backend failed

Usage:
    from safari_api.exceptions import register_exception_handlers
    register_exception_handlers(app)
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_404_NOT_FOUND,
    HTTP_409_CONFLICT,
    HTTP_500_INTERNAL_SERVER_ERROR,
    HTTP_502_BAD_GATEWAY,
)

from safari_shared.config import ConfigurationError
from safari_shared.models import BookingError, ErrorCode
from safari_shared.utils.logging import get_logger

logger = get_logger(__name__)

# Starlette has renamed its 422 constant across releases
HTTP_422_UNPROCESSABLE_CONTENT = 422

ERROR_CODE_TO_HTTP_STATUS: dict[ErrorCode, int] = {
    ErrorCode.INVALID_RANGE: HTTP_400_BAD_REQUEST,
    # Not found
    ErrorCode.BOOKING_NOT_FOUND: HTTP_404_NOT_FOUND,
    ErrorCode.CANCELLATION_REQUEST_NOT_FOUND: HTTP_404_NOT_FOUND,
    # State conflicts
    ErrorCode.NO_AVAILABILITY_FOUND: HTTP_409_CONFLICT,
    ErrorCode.INVALID_REQUEST_STATE: HTTP_409_CONFLICT,
    ErrorCode.BOOKING_NOT_CANCELLABLE: HTTP_409_CONFLICT,
    ErrorCode.POLICY_NOT_APPLICABLE: HTTP_422_UNPROCESSABLE_CONTENT,
    ErrorCode.BOOKING_BACKEND_UNAVAILABLE: HTTP_502_BAD_GATEWAY,
}


def get_http_status_for_error(code: ErrorCode) -> int:
    """Get HTTP status code for an ErrorCode, defaulting to 400."""
    return ERROR_CODE_TO_HTTP_STATUS.get(code, HTTP_400_BAD_REQUEST)


async def booking_error_handler(request: Request, exc: BookingError) -> JSONResponse:
    """Convert a BookingError into its JSON error response.

    Args:
        request: The incoming request
        exc: The BookingError exception

    Returns:
        JSONResponse with the ErrorResponse body and mapped status code.
    """
    status_code = get_http_status_for_error(exc.code)
    if status_code >= HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)

    return JSONResponse(
        status_code=status_code,
        content=exc.to_error_response().model_dump(mode="json"),
    )


async def configuration_error_handler(
    request: Request, exc: ConfigurationError
) -> JSONResponse:
    """Report a broken deployment configuration without leaking details."""
    logger.error("Configuration error: %s", exc)
    return JSONResponse(
        status_code=HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "success": False,
            "error_code": "ERR_CONFIG",
            "message": "The service is misconfigured",
            "recovery": "Contact the site administrator",
            "details": None,
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI app."""
    app.add_exception_handler(BookingError, booking_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(ConfigurationError, configuration_error_handler)  # type: ignore[arg-type]
