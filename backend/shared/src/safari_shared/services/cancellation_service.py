"""Cancellation request workflow.

A customer request is quoted once and stored as ``pending``. An admin then
approves or rejects it; approved requests are later processed, which is when
the booking itself is cancelled in the booking backend.

    pending -> approved -> processed
    pending -> rejected

Every write is conditional on the status the request was read in. If another
admin moved the request first, the write fails with InvalidRequestStateError.
"""

import datetime as dt
import uuid
from decimal import Decimal

from safari_shared.models import (
    BookingNotCancellableError,
    BookingNotFoundError,
    BookingStatus,
    CancellationRequest,
    CancellationRequestNotFoundError,
    CancellationRequestStatus,
    InvalidRequestStateError,
    RefundQuote,
)
from safari_shared.services.refund_policy_service import RefundPolicyService
from safari_shared.services.repositories import (
    BookingRepository,
    CancellationRequestRepository,
)
from safari_shared.utils.dates import to_utc_datetime
from safari_shared.utils.logging import get_logger, log_booking_operation

logger = get_logger(__name__)


def _generate_request_id(now: dt.datetime) -> str:
    """Generate a unique cancellation request ID."""
    return f"CXL-{now.year}-{uuid.uuid4().hex[:8].upper()}"


class CancellationService:
    """Service driving cancellation requests through their lifecycle."""

    def __init__(
        self,
        bookings: BookingRepository,
        requests: CancellationRequestRepository,
        policy: RefundPolicyService,
    ) -> None:
        """Initialize cancellation service.

        Args:
            bookings: Booking source, also used to flip status on processing
            requests: Store for cancellation requests
            policy: Refund policy used to quote new requests
        """
        self.bookings = bookings
        self.requests = requests
        self.policy = policy

    def quote(self, booking_id: str, as_of: dt.datetime) -> RefundQuote:
        """Quote the refund for cancelling a booking at ``as_of``.

        Raises:
            BookingNotFoundError: If the booking does not exist
        """
        booking = self.bookings.get(booking_id)
        if booking is None:
            raise BookingNotFoundError(details={"booking_id": booking_id})
        return self.policy.calculate_refund(booking, as_of)

    def can_cancel(self, booking_id: str, as_of: dt.datetime) -> bool:
        """Check whether a booking may still be cancelled.

        Raises:
            BookingNotFoundError: If the booking does not exist
        """
        booking = self.bookings.get(booking_id)
        if booking is None:
            raise BookingNotFoundError(details={"booking_id": booking_id})
        return self.policy.can_cancel(booking, as_of)

    def request_cancellation(
        self,
        booking_id: str,
        reason: str,
        requested_by: str,
        as_of: dt.datetime,
    ) -> CancellationRequest:
        """Create a pending cancellation request with a frozen refund quote.

        Args:
            booking_id: Booking to cancel
            reason: Customer's reason for cancelling
            requested_by: Identity of the requester
            as_of: Time of the request, used for the quote

        Returns:
            The stored pending CancellationRequest

        Raises:
            BookingNotFoundError: If the booking does not exist
            BookingNotCancellableError: If the booking is cancelled or has started
        """
        booking = self.bookings.get(booking_id)
        if booking is None:
            raise BookingNotFoundError(details={"booking_id": booking_id})

        if not self.policy.can_cancel(booking, as_of):
            log_booking_operation(
                logger,
                "request_cancellation",
                booking_id=booking_id,
                error="booking not cancellable",
            )
            raise BookingNotCancellableError(
                details={"booking_id": booking_id, "status": booking.status.value}
            )

        quote = self.policy.calculate_refund(booking, as_of)
        now = to_utc_datetime(as_of)

        request = CancellationRequest(
            request_id=_generate_request_id(now),
            booking_id=booking_id,
            reason=reason,
            requested_by=requested_by,
            cancellation_date=now,
            refund_amount=quote.refund_amount,
            processing_fee=quote.processing_fee,
            total_refund=quote.total_refund,
            policy_id=quote.applied_policy.id,
            status=CancellationRequestStatus.PENDING,
            created_at=now,
            updated_at=now,
        )
        if not self.requests.add(request):
            raise InvalidRequestStateError(
                details={"request_id": request.request_id, "error": "request ID already in use"}
            )

        log_booking_operation(
            logger,
            "request_cancellation",
            booking_id=booking_id,
            request_id=request.request_id,
            status=request.status.value,
            policy_id=request.policy_id,
            total_refund=str(request.total_refund),
        )
        return request

    def get_request(self, request_id: str) -> CancellationRequest:
        """Get a cancellation request by ID.

        Raises:
            CancellationRequestNotFoundError: If no such request exists
        """
        request = self.requests.get(request_id)
        if request is None:
            raise CancellationRequestNotFoundError(details={"request_id": request_id})
        return request

    def list_requests(
        self,
        status: CancellationRequestStatus | None = None,
    ) -> list[CancellationRequest]:
        """All cancellation requests, optionally filtered by status."""
        return self.requests.list(status=status)

    def history_for(self, requested_by: str) -> list[CancellationRequest]:
        """Cancellation requests made by one requester."""
        return self.requests.list(requested_by=requested_by)

    def approve(
        self,
        request_id: str,
        as_of: dt.datetime,
        admin_notes: str | None = None,
    ) -> CancellationRequest:
        """Approve a pending request. The frozen refund is kept.

        Raises:
            CancellationRequestNotFoundError: If no such request exists
            InvalidRequestStateError: If the request is not pending
        """
        request = self._require_status(request_id, CancellationRequestStatus.PENDING)
        return self._transition(
            request,
            CancellationRequestStatus.APPROVED,
            as_of,
            admin_notes=request.admin_notes if admin_notes is None else admin_notes,
        )

    def reject(
        self,
        request_id: str,
        as_of: dt.datetime,
        admin_notes: str | None = None,
    ) -> CancellationRequest:
        """Reject a pending request; nothing will be refunded.

        Raises:
            CancellationRequestNotFoundError: If no such request exists
            InvalidRequestStateError: If the request is not pending
        """
        request = self._require_status(request_id, CancellationRequestStatus.PENDING)
        return self._transition(
            request,
            CancellationRequestStatus.REJECTED,
            as_of,
            admin_notes=request.admin_notes if admin_notes is None else admin_notes,
            total_refund=Decimal("0"),
        )

    def process(
        self,
        request_id: str,
        as_of: dt.datetime,
        admin_notes: str | None = None,
    ) -> CancellationRequest:
        """Cancel the booking behind an approved request and mark it processed.

        Raises:
            CancellationRequestNotFoundError: If no such request exists
            InvalidRequestStateError: If the request is not approved
            BookingNotFoundError: If the booking no longer exists
        """
        request = self._require_status(request_id, CancellationRequestStatus.APPROVED)

        self.bookings.update_status(request.booking_id, BookingStatus.CANCELLED)

        notes = request.admin_notes
        if admin_notes:
            note = f"Processing Note: {admin_notes}"
            notes = f"{notes}\n\n{note}" if notes else note
        return self._transition(
            request,
            CancellationRequestStatus.PROCESSED,
            as_of,
            admin_notes=notes,
        )

    def update_admin_notes(
        self,
        request_id: str,
        admin_notes: str,
        as_of: dt.datetime,
    ) -> CancellationRequest:
        """Replace the admin notes of a request in any state.

        Raises:
            CancellationRequestNotFoundError: If no such request exists
        """
        request = self.get_request(request_id)
        updated = request.model_copy(
            update={"admin_notes": admin_notes, "updated_at": to_utc_datetime(as_of)}
        )
        self._store(updated, expected=request.status)
        return updated

    def _require_status(
        self,
        request_id: str,
        expected: CancellationRequestStatus,
    ) -> CancellationRequest:
        request = self.get_request(request_id)
        if request.status != expected:
            log_booking_operation(
                logger,
                "cancellation_transition",
                request_id=request_id,
                status=request.status.value,
                error=f"expected {expected.value}",
            )
            raise InvalidRequestStateError(
                details={
                    "request_id": request_id,
                    "status": request.status.value,
                    "expected": expected.value,
                }
            )
        return request

    def _transition(
        self,
        request: CancellationRequest,
        status: CancellationRequestStatus,
        as_of: dt.datetime,
        **changes: object,
    ) -> CancellationRequest:
        updated = request.model_copy(
            update={"status": status, "updated_at": to_utc_datetime(as_of), **changes}
        )
        self._store(updated, expected=request.status)
        log_booking_operation(
            logger,
            "cancellation_transition",
            booking_id=updated.booking_id,
            request_id=updated.request_id,
            status=status.value,
        )
        return updated

    def _store(
        self,
        updated: CancellationRequest,
        expected: CancellationRequestStatus,
    ) -> None:
        # Another writer moved the request on since it was read
        if not self.requests.save(updated, expected_status=expected):
            current = self.requests.get(updated.request_id)
            log_booking_operation(
                logger,
                "cancellation_transition",
                request_id=updated.request_id,
                error=f"concurrent update, expected {expected.value}",
            )
            raise InvalidRequestStateError(
                details={
                    "request_id": updated.request_id,
                    "status": current.status.value if current else "missing",
                    "expected": expected.value,
                }
            )
