"""Pydantic models for safari booking data entities."""

from .availability import (
    AlternativeDateRange,
    CalendarDay,
    PropertyCalendar,
    SelectionState,
)
from .booking import Booking, DateRange
from .cancellation import CancellationPolicy, CancellationRequest, RefundQuote
from .enums import (
    BookingStatus,
    CancellationRequestStatus,
    DayStatus,
    SelectionPhase,
    status_from_backend,
    status_to_backend,
)
from .errors import (
    BookingBackendError,
    BookingError,
    BookingNotCancellableError,
    BookingNotFoundError,
    CancellationRequestNotFoundError,
    ErrorCode,
    ErrorResponse,
    InvalidRangeError,
    InvalidRequestStateError,
    NoAvailabilityFoundError,
    PolicyNotApplicableError,
)

__all__ = [
    # Enums
    "BookingStatus",
    "CancellationRequestStatus",
    "DayStatus",
    "SelectionPhase",
    "status_from_backend",
    "status_to_backend",
    # Booking
    "Booking",
    "DateRange",
    # Availability
    "AlternativeDateRange",
    "CalendarDay",
    "PropertyCalendar",
    "SelectionState",
    # Cancellation
    "CancellationPolicy",
    "CancellationRequest",
    "RefundQuote",
    # Errors
    "BookingBackendError",
    "BookingError",
    "BookingNotCancellableError",
    "BookingNotFoundError",
    "CancellationRequestNotFoundError",
    "ErrorCode",
    "ErrorResponse",
    "InvalidRangeError",
    "InvalidRequestStateError",
    "NoAvailabilityFoundError",
    "PolicyNotApplicableError",
]
