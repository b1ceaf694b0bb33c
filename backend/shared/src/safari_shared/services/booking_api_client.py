"""REST client for the external booking backend.

Implements the BookingRepository capability over HTTP:

- ``GET  /bookings/admin/bookings?propertyId=...``   list bookings
- ``GET  /bookings/admin/bookings/{id}``              one booking
- ``POST /bookings/admin/bookings/{id}/{action}``     status transitions

The backend speaks camelCase (``checkInDate``, ``costs.total``) with older
records in snake_case; both are accepted. Backend status spellings are
translated only through ``status_from_backend``.
"""

import datetime as dt
from decimal import Decimal, InvalidOperation
from typing import Any

import httpx
from pydantic import ValidationError

from safari_shared.models import (
    Booking,
    BookingBackendError,
    BookingNotFoundError,
    BookingStatus,
    status_from_backend,
)
from safari_shared.utils.logging import get_correlation_id, get_logger

logger = get_logger(__name__)

CORRELATION_ID_HEADER = "X-Correlation-ID"

# Admin endpoint action for each target status
STATUS_ACTIONS: dict[BookingStatus, str] = {
    BookingStatus.INQUIRY: "reopen",
    BookingStatus.CONFIRMED: "confirm",
    BookingStatus.DEPOSIT_PAID: "deposit",
    BookingStatus.FULLY_PAID: "paid",
    BookingStatus.COMPLETED: "complete",
    BookingStatus.CANCELLED: "cancel",
}


def _first(payload: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        value = payload.get(key)
        if value is not None:
            return value
    return None


def _parse_day(value: Any) -> dt.date:
    # "2024-02-15" or "2024-02-15T00:00:00.000Z"
    if not isinstance(value, str):
        raise ValueError(f"expected a date string, got {value!r}")
    return dt.date.fromisoformat(value[:10])


def _parse_timestamp(value: Any) -> dt.datetime:
    if not isinstance(value, str):
        raise ValueError(f"expected a timestamp string, got {value!r}")
    parsed = dt.datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=dt.UTC)
    return parsed


def _to_decimal(value: Any) -> Decimal:
    return Decimal(str(value)) if value is not None else Decimal("0")


def booking_from_backend(payload: dict[str, Any]) -> Booking:
    """Map a booking backend record to a Booking.

    Raises:
        BookingBackendError: If required fields are missing or malformed
    """
    booking_id = _first(payload, "_id", "id", "bookingId")
    try:
        prop = payload.get("property")
        if isinstance(prop, dict):
            property_id = _first(prop, "_id", "id")
        else:
            property_id = prop or _first(payload, "propertyId", "property_id")
        if booking_id is None or property_id is None:
            raise ValueError("record has no booking or property id")

        costs = payload.get("costs") or {}
        total = _first(costs, "total")
        if total is None:
            total = _first(payload, "total", "total_amount")

        return Booking(
            id=str(booking_id),
            property_id=str(property_id),
            check_in=_parse_day(_first(payload, "checkInDate", "check_in")),
            check_out=_parse_day(_first(payload, "checkOutDate", "check_out")),
            created_at=_parse_timestamp(_first(payload, "createdAt", "created_at")),
            total_amount=_to_decimal(total),
            amount_paid=_to_decimal(_first(payload, "amountPaid", "deposit_paid")),
            status=status_from_backend(payload["status"]),
            guest_name=_first(payload, "customerName", "guest_name"),
            guest_email=_first(payload, "customerEmail", "guest_email"),
        )
    except (KeyError, TypeError, ValueError, InvalidOperation, ValidationError) as e:
        logger.warning("Unusable booking record %s from backend: %s", booking_id, e)
        raise BookingBackendError(
            details={"booking_id": str(booking_id), "error": str(e)}
        ) from e


class BookingApiClient:
    """BookingRepository backed by the booking backend's REST API."""

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Booking backend base URL
            token: Optional bearer token for the admin endpoints
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = httpx.Client(
            base_url=base_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def list(self, property_id: str) -> list[Booking]:
        """Fetch all bookings for a property.

        Raises:
            BookingBackendError: If the backend fails or returns bad data
        """
        payload = self._request(
            "GET", "/bookings/admin/bookings", params={"propertyId": property_id}
        )
        records = payload.get("data", []) if isinstance(payload, dict) else payload
        if not isinstance(records, list):
            raise BookingBackendError(details={"error": "unexpected list payload"})

        bookings = [booking_from_backend(record) for record in records]
        # Older backends ignore the filter
        return [b for b in bookings if b.property_id == property_id]

    def get(self, booking_id: str) -> Booking | None:
        """Fetch one booking, or None if the backend has no such booking.

        Raises:
            BookingBackendError: If the backend fails or returns bad data
        """
        try:
            payload = self._request("GET", f"/bookings/admin/bookings/{booking_id}")
        except BookingNotFoundError:
            return None
        return booking_from_backend(payload)

    def update_status(self, booking_id: str, status: BookingStatus) -> Booking:
        """Move a booking to a new status through the admin action endpoint.

        Raises:
            BookingNotFoundError: If the backend has no such booking
            BookingBackendError: If the backend fails or returns bad data
        """
        action = STATUS_ACTIONS[status]
        payload = self._request("POST", f"/bookings/admin/bookings/{booking_id}/{action}")
        logger.info("Booking %s moved to %s via %s", booking_id, status.value, action)

        record = payload.get("booking", payload) if isinstance(payload, dict) else None
        if isinstance(record, dict) and "status" in record:
            return booking_from_backend(record)

        booking = self.get(booking_id)
        if booking is None:
            raise BookingNotFoundError(details={"booking_id": booking_id})
        return booking

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        headers = {}
        correlation_id = get_correlation_id()
        if correlation_id:
            headers[CORRELATION_ID_HEADER] = correlation_id

        try:
            response = self._client.request(method, path, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            logger.error("Booking backend request failed: %s %s: %s", method, path, e)
            raise BookingBackendError(details={"path": path, "error": str(e)}) from e

        if response.status_code == httpx.codes.NOT_FOUND:
            raise BookingNotFoundError(details={"path": path})
        if response.is_error:
            logger.error(
                "Booking backend returned %d for %s %s", response.status_code, method, path
            )
            raise BookingBackendError(
                details={"path": path, "status_code": str(response.status_code)}
            )

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            raise BookingBackendError(details={"path": path, "error": "invalid JSON"}) from e
