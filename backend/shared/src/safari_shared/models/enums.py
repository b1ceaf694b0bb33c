"""Enumeration types for safari booking data models."""

from enum import Enum


class BookingStatus(str, Enum):
    """Lifecycle status of a booking as seen by the engines."""

    INQUIRY = "inquiry"
    CONFIRMED = "confirmed"
    DEPOSIT_PAID = "deposit-paid"
    FULLY_PAID = "fully-paid"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class CancellationRequestStatus(str, Enum):
    """Status of a cancellation request.

    pending -> approved -> processed, or pending -> rejected.
    """

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    PROCESSED = "processed"


class SelectionPhase(str, Enum):
    """Which end of the stay the next calendar click selects."""

    AWAITING_CHECK_IN = "awaiting_check_in"
    AWAITING_CHECK_OUT = "awaiting_check_out"


class DayStatus(str, Enum):
    """Calendar status of a single day for a property."""

    AVAILABLE = "available"
    BOOKED = "booked"


# Booking backend status values -> canonical BookingStatus.
# This is the only place backend spellings are translated.
BACKEND_STATUS_MAP: dict[str, BookingStatus] = {
    "pending": BookingStatus.INQUIRY,
    "inquiry": BookingStatus.INQUIRY,
    "confirmed": BookingStatus.CONFIRMED,
    "deposit_paid": BookingStatus.DEPOSIT_PAID,
    "fully_paid": BookingStatus.FULLY_PAID,
    "completed": BookingStatus.COMPLETED,
    "cancelled": BookingStatus.CANCELLED,
}

# Canonical BookingStatus -> backend status value
STATUS_TO_BACKEND: dict[BookingStatus, str] = {
    BookingStatus.INQUIRY: "pending",
    BookingStatus.CONFIRMED: "confirmed",
    BookingStatus.DEPOSIT_PAID: "deposit_paid",
    BookingStatus.FULLY_PAID: "fully_paid",
    BookingStatus.COMPLETED: "completed",
    BookingStatus.CANCELLED: "cancelled",
}


def status_from_backend(value: object) -> BookingStatus:
    """Translate a backend status value into a BookingStatus.

    Accepts both the backend's underscore spelling and the hyphenated
    canonical spelling.

    Raises:
        ValueError: If the value is not a known status
    """
    if not isinstance(value, str):
        raise ValueError(f"Booking status must be a string, got {value!r}")
    normalized = value.strip().lower()
    if normalized in BACKEND_STATUS_MAP:
        return BACKEND_STATUS_MAP[normalized]
    return BookingStatus(normalized.replace("_", "-"))


def status_to_backend(status: BookingStatus) -> str:
    """Translate a BookingStatus into the backend's status value."""
    return STATUS_TO_BACKEND[status]
