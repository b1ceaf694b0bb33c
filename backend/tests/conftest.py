"""Pytest configuration and fixtures for the safari booking backend tests.

This module provides reusable fixtures for testing:
- DynamoDB mocking with moto
- Sample bookings (the reference booking BK001 and a booked March week)
- In-memory repositories and wired services
"""

import datetime as dt
import os
from decimal import Decimal
from typing import Any, Callable, Generator

import boto3
import pytest
from moto import mock_aws

# === Environment Setup ===

# Set environment variables for testing before imports
os.environ.setdefault("AWS_DEFAULT_REGION", "eu-west-1")
os.environ.setdefault("DYNAMODB_TABLE_PREFIX", "test-safari")

if not os.environ.get("AWS_PROFILE") and not os.environ.get("AWS_ACCESS_KEY_ID"):
    os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
    os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")

from safari_shared.models import Booking, BookingStatus  # noqa: E402
from safari_shared.services.availability import AvailabilityService  # noqa: E402
from safari_shared.services.cancellation_service import CancellationService  # noqa: E402
from safari_shared.services.cancellation_store import table_definition  # noqa: E402
from safari_shared.services.refund_policy_service import RefundPolicyService  # noqa: E402
from safari_shared.services.repositories import (  # noqa: E402
    InMemoryBookingRepository,
    InMemoryCancellationRequestRepository,
)

TABLE_PREFIX = "test-safari"


@pytest.fixture(autouse=True)
def reset_service_singletons() -> Generator[None, None, None]:
    """Reset cached settings, services and the DynamoDB singleton.

    Tests using mock_aws get fresh clients inside the mock context rather
    than reusing ones built in a previous test.
    """
    from safari_api.dependencies import reset_services

    reset_services()
    yield
    reset_services()


# === Sample Data ===


@pytest.fixture
def make_booking() -> Callable[..., Booking]:
    """Factory for bookings with sensible defaults."""

    def _make(**overrides: Any) -> Booking:
        values: dict[str, Any] = {
            "id": "BK100",
            "property_id": "P1",
            "check_in": dt.date(2024, 3, 1),
            "check_out": dt.date(2024, 3, 5),
            "created_at": dt.datetime(2024, 1, 5, 9, 0, tzinfo=dt.UTC),
            "total_amount": Decimal("1000.00"),
            "status": BookingStatus.CONFIRMED,
        }
        values.update(overrides)
        return Booking(**values)

    return _make


@pytest.fixture
def reference_booking() -> Booking:
    """BK001: booked 2024-01-10 10:30 UTC for 2024-02-15..2024-02-20."""
    return Booking(
        id="BK001",
        property_id="P1",
        check_in=dt.date(2024, 2, 15),
        check_out=dt.date(2024, 2, 20),
        created_at=dt.datetime(2024, 1, 10, 10, 30, tzinfo=dt.UTC),
        total_amount=Decimal("1437.50"),
        status=BookingStatus.CONFIRMED,
        guest_name="Amina Njoroge",
        guest_email="amina@example.com",
        amount_paid=Decimal("500.00"),
    )


@pytest.fixture
def march_bookings(make_booking: Callable[..., Booking]) -> list[Booking]:
    """P1 bookings: 03-01..03-05, 03-10..03-17, plus a cancelled 03-20..03-25."""
    return [
        make_booking(id="BK101"),
        make_booking(
            id="BK102",
            check_in=dt.date(2024, 3, 10),
            check_out=dt.date(2024, 3, 17),
        ),
        make_booking(
            id="BK103",
            check_in=dt.date(2024, 3, 20),
            check_out=dt.date(2024, 3, 25),
            status=BookingStatus.CANCELLED,
        ),
        make_booking(
            id="BK200",
            property_id="P2",
            check_in=dt.date(2024, 3, 1),
            check_out=dt.date(2024, 3, 31),
        ),
    ]


@pytest.fixture
def booking_repository(
    reference_booking: Booking, march_bookings: list[Booking]
) -> InMemoryBookingRepository:
    return InMemoryBookingRepository([reference_booking, *march_bookings])


@pytest.fixture
def request_repository() -> InMemoryCancellationRequestRepository:
    return InMemoryCancellationRequestRepository()


@pytest.fixture
def availability_service(booking_repository: InMemoryBookingRepository) -> AvailabilityService:
    return AvailabilityService(bookings=booking_repository)


@pytest.fixture
def cancellation_service(
    booking_repository: InMemoryBookingRepository,
    request_repository: InMemoryCancellationRequestRepository,
) -> CancellationService:
    return CancellationService(
        bookings=booking_repository,
        requests=request_repository,
        policy=RefundPolicyService(),
    )


# === DynamoDB Fixtures ===


@pytest.fixture
def aws_credentials() -> None:
    """Mocked AWS Credentials for moto."""
    if not os.environ.get("AWS_PROFILE"):
        os.environ["AWS_ACCESS_KEY_ID"] = "testing"
        os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
        os.environ["AWS_SECURITY_TOKEN"] = "testing"
        os.environ["AWS_SESSION_TOKEN"] = "testing"
    os.environ["AWS_DEFAULT_REGION"] = "eu-west-1"


@pytest.fixture
def dynamodb_client(aws_credentials: None) -> Generator[Any, None, None]:
    """Create a mocked DynamoDB client."""
    with mock_aws():
        client = boto3.client("dynamodb", region_name="eu-west-1")
        yield client


@pytest.fixture
def create_tables(dynamodb_client: Any) -> None:
    """Create the cancellation requests table with its indexes."""
    dynamodb_client.create_table(**table_definition(TABLE_PREFIX))
