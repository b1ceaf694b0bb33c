"""Unit tests for the booking backend REST client.

The backend is simulated with httpx.MockTransport.
"""

import datetime as dt
import json
from decimal import Decimal
from typing import Any, Callable

import httpx
import pytest

from safari_shared.models import (
    BookingBackendError,
    BookingNotFoundError,
    BookingStatus,
)
from safari_shared.services.booking_api_client import BookingApiClient, booking_from_backend
from safari_shared.utils.logging import clear_correlation_id, set_correlation_id

BASE_URL = "https://bookings.example.com/api"


def backend_record(**overrides: Any) -> dict[str, Any]:
    record: dict[str, Any] = {
        "_id": "BK001",
        "property": {"_id": "P1", "name": "Mara Tented Camp"},
        "checkInDate": "2024-02-15T00:00:00.000Z",
        "checkOutDate": "2024-02-20T00:00:00.000Z",
        "createdAt": "2024-01-10T10:30:00.000Z",
        "costs": {"total": 1437.5, "nightly": 287.5},
        "amountPaid": 500,
        "status": "deposit_paid",
        "customerName": "Amina Njoroge",
        "customerEmail": "amina@example.com",
    }
    record.update(overrides)
    return record


def make_client(handler: Callable[[httpx.Request], httpx.Response]) -> BookingApiClient:
    return BookingApiClient(BASE_URL, token="secret", transport=httpx.MockTransport(handler))


class TestBookingFromBackend:
    def test_maps_camel_case_record(self) -> None:
        booking = booking_from_backend(backend_record())

        assert booking.id == "BK001"
        assert booking.property_id == "P1"
        assert booking.check_in == dt.date(2024, 2, 15)
        assert booking.check_out == dt.date(2024, 2, 20)
        assert booking.created_at == dt.datetime(2024, 1, 10, 10, 30, tzinfo=dt.UTC)
        assert booking.total_amount == Decimal("1437.5")
        assert booking.amount_paid == Decimal("500")
        assert booking.balance_due == Decimal("937.5")
        assert booking.status == BookingStatus.DEPOSIT_PAID
        assert booking.guest_email == "amina@example.com"

    def test_maps_snake_case_record(self) -> None:
        booking = booking_from_backend(
            {
                "id": "BK002",
                "property_id": "P2",
                "check_in": "2024-04-01",
                "check_out": "2024-04-03",
                "created_at": "2024-03-01T08:00:00",
                "total_amount": "800.00",
                "status": "pending",
            }
        )

        assert booking.property_id == "P2"
        assert booking.total_amount == Decimal("800.00")
        assert booking.status == BookingStatus.INQUIRY
        assert booking.created_at.tzinfo == dt.UTC

    def test_property_given_as_id_string(self) -> None:
        booking = booking_from_backend(backend_record(property="P7"))
        assert booking.property_id == "P7"

    @pytest.mark.parametrize(
        "overrides",
        [
            {"status": "archived"},
            {"checkInDate": None, "check_in": None},
            {"checkOutDate": "2024-02-10"},
            {"property": None},
            {"createdAt": "yesterday"},
            {"createdAt": None},
            {"createdAt": None, "created_at": None},
            {"status": None},
            {"checkInDate": 20240215},
        ],
    )
    def test_unusable_record(self, overrides) -> None:
        with pytest.raises(BookingBackendError):
            booking_from_backend(backend_record(**overrides))


class TestList:
    def test_lists_bookings_for_property(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(
                200,
                json={
                    "data": [
                        backend_record(),
                        backend_record(_id="BK009", property={"_id": "P9"}),
                    ]
                },
            )

        bookings = make_client(handler).list("P1")

        assert [b.id for b in bookings] == ["BK001"]
        assert seen[0].url.path == "/api/bookings/admin/bookings"
        assert seen[0].url.params["propertyId"] == "P1"
        assert seen[0].headers["Authorization"] == "Bearer secret"

    def test_accepts_bare_list(self) -> None:
        client = make_client(lambda request: httpx.Response(200, json=[backend_record()]))
        assert len(client.list("P1")) == 1

    def test_forwards_correlation_id(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=[])

        set_correlation_id("cid-123")
        try:
            make_client(handler).list("P1")
        finally:
            clear_correlation_id()

        assert seen[0].headers["X-Correlation-ID"] == "cid-123"

    def test_server_error(self) -> None:
        client = make_client(lambda request: httpx.Response(503))

        with pytest.raises(BookingBackendError) as exc_info:
            client.list("P1")

        assert exc_info.value.details["status_code"] == "503"

    def test_network_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(BookingBackendError):
            make_client(handler).list("P1")

    def test_invalid_json(self) -> None:
        client = make_client(lambda request: httpx.Response(200, content=b"<html>"))

        with pytest.raises(BookingBackendError):
            client.list("P1")

    def test_unexpected_payload(self) -> None:
        client = make_client(lambda request: httpx.Response(200, json={"data": "nope"}))

        with pytest.raises(BookingBackendError):
            client.list("P1")

    def test_record_without_status_or_created_at(self) -> None:
        records = [backend_record(), backend_record(_id="BK002", status=None, createdAt=None)]
        client = make_client(lambda request: httpx.Response(200, json=records))

        with pytest.raises(BookingBackendError) as exc_info:
            client.list("P1")

        assert exc_info.value.details["booking_id"] == "BK002"


class TestGet:
    def test_get_booking(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/api/bookings/admin/bookings/BK001"
            return httpx.Response(200, json=backend_record())

        booking = make_client(handler).get("BK001")

        assert booking is not None
        assert booking.id == "BK001"

    def test_missing_booking_is_none(self) -> None:
        client = make_client(lambda request: httpx.Response(404, json={"error": "not found"}))
        assert client.get("BK404") is None


class TestUpdateStatus:
    def test_posts_cancel_action(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"booking": backend_record(status="cancelled")})

        booking = make_client(handler).update_status("BK001", BookingStatus.CANCELLED)

        assert booking.status == BookingStatus.CANCELLED
        assert seen[0].method == "POST"
        assert seen[0].url.path == "/api/bookings/admin/bookings/BK001/cancel"

    @pytest.mark.parametrize(
        "status,action",
        [
            (BookingStatus.INQUIRY, "reopen"),
            (BookingStatus.CONFIRMED, "confirm"),
            (BookingStatus.DEPOSIT_PAID, "deposit"),
            (BookingStatus.FULLY_PAID, "paid"),
            (BookingStatus.COMPLETED, "complete"),
        ],
    )
    def test_action_per_status(self, status, action) -> None:
        seen: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.url.path)
            return httpx.Response(200, json=backend_record(status=status.value))

        make_client(handler).update_status("BK001", status)

        assert seen == [f"/api/bookings/admin/bookings/BK001/{action}"]

    def test_refetches_when_action_returns_no_booking(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.method == "POST":
                return httpx.Response(200, json={"success": True})
            return httpx.Response(200, json=backend_record(status="cancelled"))

        booking = make_client(handler).update_status("BK001", BookingStatus.CANCELLED)

        assert booking.status == BookingStatus.CANCELLED

    def test_unknown_booking(self) -> None:
        client = make_client(lambda request: httpx.Response(404))

        with pytest.raises(BookingNotFoundError):
            client.update_status("BK404", BookingStatus.CANCELLED)

    def test_request_body_is_empty(self) -> None:
        bodies: list[bytes] = []

        def handler(request: httpx.Request) -> httpx.Response:
            bodies.append(request.content)
            return httpx.Response(200, content=json.dumps(backend_record()).encode())

        make_client(handler).update_status("BK001", BookingStatus.CONFIRMED)

        assert bodies == [b""]
