"""FastAPI dependency injection providers for shared services.

Services are built lazily from Settings and cached with @lru_cache, so each
process wires its repositories once.

Usage in routes:
    from safari_api.dependencies import get_availability_service

    @router.get("/properties/{property_id}/availability")
    def check_availability(
        availability: AvailabilityService = Depends(get_availability_service),
    ):
        ...

Service Dependency Graph:
    Settings
        ├── BookingRepository (BookingApiClient or in-memory)
        │       ├── AvailabilityService
        │       └── CancellationService
        ├── CancellationRequestRepository (DynamoDB or in-memory)
        │       └── CancellationService
        └── RefundPolicyService
                └── CancellationService

Testing:
    Override providers via app.dependency_overrides, and call
    reset_services() to clear cached instances between tests.
"""

from functools import lru_cache

from safari_shared.config import ConfigurationError, StoreKind, get_settings
from safari_shared.services.availability import AvailabilityService
from safari_shared.services.booking_api_client import BookingApiClient
from safari_shared.services.cancellation_service import CancellationService
from safari_shared.services.cancellation_store import DynamoDBCancellationRequestRepository
from safari_shared.services.dynamodb import get_dynamodb_service
from safari_shared.services.refund_policy_service import RefundPolicyService
from safari_shared.services.repositories import (
    BookingRepository,
    CancellationRequestRepository,
    InMemoryBookingRepository,
    InMemoryCancellationRequestRepository,
)
from safari_shared.services.ssm_service import get_ssm_service, resolve_booking_api_token
from safari_shared.utils.logging import get_logger

logger = get_logger(__name__)


@lru_cache
def get_booking_repository() -> BookingRepository:
    """Get cached BookingRepository.

    Returns:
        BookingApiClient when BOOKING_STORE=api, otherwise an empty
        in-memory repository.
    """
    settings = get_settings()
    if settings.booking_store == StoreKind.API:
        if not settings.booking_api_base_url:
            raise ConfigurationError("BOOKING_API_BASE_URL is required when BOOKING_STORE=api")
        logger.info("Using booking backend at %s", settings.booking_api_base_url)
        return BookingApiClient(
            base_url=settings.booking_api_base_url,
            token=resolve_booking_api_token(settings),
            timeout=settings.booking_api_timeout,
        )
    logger.info("Using in-memory booking repository")
    return InMemoryBookingRepository()


@lru_cache
def get_cancellation_request_repository() -> CancellationRequestRepository:
    """Get cached CancellationRequestRepository.

    Returns:
        DynamoDB-backed store when CANCELLATION_STORE=dynamodb, otherwise
        an in-memory store.
    """
    settings = get_settings()
    if settings.cancellation_store == StoreKind.DYNAMODB:
        db = get_dynamodb_service(settings.environment, settings.table_prefix)
        return DynamoDBCancellationRequestRepository(db=db)
    return InMemoryCancellationRequestRepository()


@lru_cache
def get_refund_policy_service() -> RefundPolicyService:
    """Get cached RefundPolicyService with the default policy table."""
    return RefundPolicyService()


@lru_cache
def get_availability_service() -> AvailabilityService:
    """Get cached AvailabilityService instance."""
    return AvailabilityService(
        bookings=get_booking_repository(),
        max_scan_days=get_settings().availability_max_scan_days,
    )


@lru_cache
def get_cancellation_service() -> CancellationService:
    """Get cached CancellationService instance."""
    return CancellationService(
        bookings=get_booking_repository(),
        requests=get_cancellation_request_repository(),
        policy=get_refund_policy_service(),
    )


def reset_services() -> None:
    """Clear all cached service instances.

    Call this in test fixtures to ensure clean state between tests.
    Also resets settings, the DynamoDB singleton and the SSM client.
    """
    from safari_shared.services.dynamodb import reset_dynamodb_service

    get_cancellation_service.cache_clear()
    get_availability_service.cache_clear()
    get_refund_policy_service.cache_clear()
    get_cancellation_request_repository.cache_clear()
    get_booking_repository.cache_clear()
    get_ssm_service.cache_clear()
    get_settings.cache_clear()

    reset_dynamodb_service()
