"""Storage capabilities the booking services depend on.

Services receive repositories through their constructors. Production wiring
uses BookingApiClient (REST booking backend) and
DynamoDBCancellationRequestRepository; the in-memory versions here back local
development and tests.
"""

from __future__ import annotations

import threading
from typing import Iterable, Protocol

from safari_shared.models import (
    Booking,
    BookingNotFoundError,
    BookingStatus,
    CancellationRequest,
    CancellationRequestStatus,
)


class BookingRepository(Protocol):
    """Read bookings and change their status."""

    def list(self, property_id: str) -> list[Booking]:
        """All bookings for a property, any status."""
        ...

    def get(self, booking_id: str) -> Booking | None:
        ...

    def update_status(self, booking_id: str, status: BookingStatus) -> Booking:
        """Change a booking's status and return the updated booking."""
        ...


class CancellationRequestRepository(Protocol):
    """Persist cancellation requests.

    Writes are conditional: ``add`` fails if the ID is taken, and ``save``
    fails unless the stored request still has ``expected_status``. Both return
    False rather than overwrite.
    """

    def add(self, request: CancellationRequest) -> bool:
        ...

    def save(
        self,
        request: CancellationRequest,
        expected_status: CancellationRequestStatus,
    ) -> bool:
        ...

    def get(self, request_id: str) -> CancellationRequest | None:
        ...

    def list(
        self,
        status: CancellationRequestStatus | None = None,
        requested_by: str | None = None,
    ) -> list[CancellationRequest]:
        ...


class InMemoryBookingRepository:
    """BookingRepository backed by a dict keyed on booking ID."""

    def __init__(self, bookings: Iterable[Booking] = ()) -> None:
        self._bookings: dict[str, Booking] = {b.id: b for b in bookings}

    def add(self, booking: Booking) -> Booking:
        self._bookings[booking.id] = booking
        return booking

    def list(self, property_id: str) -> list[Booking]:
        return [b for b in self._bookings.values() if b.property_id == property_id]

    def get(self, booking_id: str) -> Booking | None:
        return self._bookings.get(booking_id)

    def update_status(self, booking_id: str, status: BookingStatus) -> Booking:
        booking = self._bookings.get(booking_id)
        if booking is None:
            raise BookingNotFoundError(details={"booking_id": booking_id})
        updated = booking.model_copy(update={"status": status})
        self._bookings[booking_id] = updated
        return updated


class InMemoryCancellationRequestRepository:
    """CancellationRequestRepository kept in process memory, in insertion order."""

    def __init__(self) -> None:
        self._requests: dict[str, CancellationRequest] = {}
        self._lock = threading.Lock()

    def add(self, request: CancellationRequest) -> bool:
        with self._lock:
            if request.request_id in self._requests:
                return False
            self._requests[request.request_id] = request
            return True

    def save(
        self,
        request: CancellationRequest,
        expected_status: CancellationRequestStatus,
    ) -> bool:
        with self._lock:
            current = self._requests.get(request.request_id)
            if current is None or current.status != expected_status:
                return False
            self._requests[request.request_id] = request
            return True

    def get(self, request_id: str) -> CancellationRequest | None:
        return self._requests.get(request_id)

    def list(
        self,
        status: CancellationRequestStatus | None = None,
        requested_by: str | None = None,
    ) -> list[CancellationRequest]:
        return [
            r
            for r in self._requests.values()
            if (status is None or r.status == status)
            and (requested_by is None or r.requested_by == requested_by)
        ]
