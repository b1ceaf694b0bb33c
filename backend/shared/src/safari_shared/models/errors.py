"""Standard error codes for the safari booking engine.

All services raise BookingError subclasses carrying one of these codes so
callers (the REST API, scripts) get a consistent error shape.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class ErrorCode(str, Enum):
    """Standard error codes."""

    # Availability errors
    INVALID_RANGE = "ERR_001"
    NO_AVAILABILITY_FOUND = "ERR_002"

    # Cancellation errors
    POLICY_NOT_APPLICABLE = "ERR_003"
    INVALID_REQUEST_STATE = "ERR_004"
    BOOKING_NOT_CANCELLABLE = "ERR_005"

    # Lookup errors
    BOOKING_NOT_FOUND = "ERR_006"
    CANCELLATION_REQUEST_NOT_FOUND = "ERR_007"

    # Booking backend errors
    BOOKING_BACKEND_UNAVAILABLE = "ERR_008"


# Human-readable error messages
ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.INVALID_RANGE: "Check-out date must be after check-in date",
    ErrorCode.NO_AVAILABILITY_FOUND: "No available date found within the search window",
    ErrorCode.POLICY_NOT_APPLICABLE: "No cancellation policy applies to this booking",
    ErrorCode.INVALID_REQUEST_STATE: "Cancellation request is not in the required state",
    ErrorCode.BOOKING_NOT_CANCELLABLE: "This booking cannot be cancelled",
    ErrorCode.BOOKING_NOT_FOUND: "Booking not found",
    ErrorCode.CANCELLATION_REQUEST_NOT_FOUND: "Cancellation request not found",
    ErrorCode.BOOKING_BACKEND_UNAVAILABLE: "The booking service could not be reached",
}

# Recovery suggestions for callers
ERROR_RECOVERY: dict[ErrorCode, str] = {
    ErrorCode.INVALID_RANGE: "Choose a check-out date later than the check-in date",
    ErrorCode.NO_AVAILABILITY_FOUND: "Try a different property or a later start date",
    ErrorCode.POLICY_NOT_APPLICABLE: "Add a catch-all tier to the cancellation policy table",
    ErrorCode.INVALID_REQUEST_STATE: "Reload the request and check its current status",
    ErrorCode.BOOKING_NOT_CANCELLABLE: "Bookings can only be cancelled before check-in",
    ErrorCode.BOOKING_NOT_FOUND: "Verify the booking ID",
    ErrorCode.CANCELLATION_REQUEST_NOT_FOUND: "Verify the cancellation request ID",
    ErrorCode.BOOKING_BACKEND_UNAVAILABLE: "Try again later",
}


class ErrorResponse(BaseModel):
    """Standard error body returned for failed operations."""

    model_config = ConfigDict(strict=True)

    success: bool = False
    error_code: ErrorCode
    message: str
    recovery: str
    details: Optional[dict[str, str]] = None

    @classmethod
    def from_code(
        cls,
        code: ErrorCode,
        details: Optional[dict[str, str]] = None,
    ) -> "ErrorResponse":
        """Create an ErrorResponse from an error code.

        Args:
            code: The error code
            details: Optional additional context about the error

        Returns:
            An ErrorResponse with the message and recovery hint for the code.
        """
        return cls(
            error_code=code,
            message=ERROR_MESSAGES[code],
            recovery=ERROR_RECOVERY[code],
            details=details,
        )


class BookingError(Exception):
    """Base exception raised by booking engine operations.

    Can be caught and converted to an ErrorResponse for API responses.
    """

    code: ErrorCode = ErrorCode.BOOKING_NOT_FOUND

    def __init__(
        self,
        code: Optional[ErrorCode] = None,
        details: Optional[dict[str, str]] = None,
    ):
        if code is not None:
            self.code = code
        self.message = ERROR_MESSAGES[self.code]
        self.recovery = ERROR_RECOVERY[self.code]
        self.details = details
        super().__init__(self.message)

    def to_error_response(self) -> ErrorResponse:
        """Convert this exception to an ErrorResponse."""
        return ErrorResponse.from_code(self.code, self.details)


class InvalidRangeError(BookingError):
    """Check-out is not after check-in."""

    code = ErrorCode.INVALID_RANGE


class NoAvailabilityFoundError(BookingError):
    """Forward scan for a free date exceeded its bound."""

    code = ErrorCode.NO_AVAILABILITY_FOUND


class PolicyNotApplicableError(BookingError):
    """Policy table has no tier matching the cancellation."""

    code = ErrorCode.POLICY_NOT_APPLICABLE


class InvalidRequestStateError(BookingError):
    """Cancellation request transition from the wrong state."""

    code = ErrorCode.INVALID_REQUEST_STATE


class BookingNotCancellableError(BookingError):
    code = ErrorCode.BOOKING_NOT_CANCELLABLE


class BookingNotFoundError(BookingError):
    code = ErrorCode.BOOKING_NOT_FOUND


class CancellationRequestNotFoundError(BookingError):
    code = ErrorCode.CANCELLATION_REQUEST_NOT_FOUND


class BookingBackendError(BookingError):
    """The REST booking backend failed or returned an unusable response."""

    code = ErrorCode.BOOKING_BACKEND_UNAVAILABLE
