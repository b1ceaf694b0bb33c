"""Booking engine services."""

from .availability import AvailabilityService
from .booking_api_client import BookingApiClient
from .calendar_selection import CalendarSelection
from .cancellation_service import CancellationService
from .cancellation_store import DynamoDBCancellationRequestRepository
from .refund_policy_service import DEFAULT_POLICIES, RefundPolicyService
from .repositories import (
    BookingRepository,
    CancellationRequestRepository,
    InMemoryBookingRepository,
    InMemoryCancellationRequestRepository,
)

__all__ = [
    "AvailabilityService",
    "BookingApiClient",
    "BookingRepository",
    "CalendarSelection",
    "CancellationRequestRepository",
    "CancellationService",
    "DEFAULT_POLICIES",
    "DynamoDBCancellationRequestRepository",
    "InMemoryBookingRepository",
    "InMemoryCancellationRequestRepository",
    "RefundPolicyService",
]
