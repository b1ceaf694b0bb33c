"""Cancellation endpoints: policies, refund quotes and request workflow.

Provides REST endpoints for:
- Listing the active cancellation policy tiers
- Quoting the refund for cancelling a booking
- Creating cancellation requests (customer)
- Listing, approving, rejecting and processing requests (admin)

Timestamps default to the current UTC time when ``as_of`` is omitted.
Amounts are decimal strings in the booking's currency.
"""

import datetime as dt

from fastapi import APIRouter, Depends, Query
from starlette.status import HTTP_201_CREATED

from safari_api.dependencies import get_cancellation_service, get_refund_policy_service
from safari_api.models.cancellations import (
    AdminAction,
    AdminNotesUpdate,
    CancellableResponse,
    CancellationRequestCreate,
    CancellationRequestListResponse,
    PolicyListResponse,
)
from safari_shared.models import (
    CancellationRequest,
    CancellationRequestStatus,
    RefundQuote,
)
from safari_shared.services.cancellation_service import CancellationService
from safari_shared.services.refund_policy_service import RefundPolicyService
from safari_shared.utils.dates import utc_now

router = APIRouter(tags=["cancellations"])

REQUEST_EXAMPLE = {
    "request_id": "CXL-2024-1A2B3C4D",
    "booking_id": "BK001",
    "reason": "Change of travel plans",
    "requested_by": "guest@example.com",
    "cancellation_date": "2024-01-20T10:00:00Z",
    "refund_amount": "1078.125",
    "processing_fee": "25",
    "total_refund": "1053.125",
    "policy_id": "standard-7d",
    "status": "pending",
    "admin_notes": "",
    "created_at": "2024-01-20T10:00:00Z",
    "updated_at": "2024-01-20T10:00:00Z",
}


@router.get(
    "/cancellation-policies",
    summary="List cancellation policies",
    response_model=PolicyListResponse,
)
def list_policies(
    policy: RefundPolicyService = Depends(get_refund_policy_service),
) -> PolicyListResponse:
    """Return the active policy tiers and a readable summary."""
    return PolicyListResponse(
        policies=policy.active_policies,
        description=policy.get_policy_description(),
    )


@router.get(
    "/bookings/{booking_id}/refund-quote",
    summary="Quote a cancellation refund",
    description="""
Compute what the guest would get back if the booking were cancelled at
``as_of``. Nothing is stored.

**Notes:**
- Cancelling within 24 hours of booking is always free
- Otherwise the tier depends on whole days left before check-in (rounded up)
""",
    response_model=RefundQuote,
    responses={
        200: {
            "description": "Refund quote",
            "content": {
                "application/json": {
                    "example": {
                        "refund_amount": "1078.125",
                        "processing_fee": "25",
                        "total_refund": "1053.125",
                        "applied_policy": {"id": "standard-7d", "refund_percentage": 75},
                        "days_until_check_in": 26,
                        "hours_since_booking": 239.5,
                    }
                }
            },
        },
        404: {"description": "Booking not found"},
    },
)
def refund_quote(
    booking_id: str,
    as_of: dt.datetime | None = Query(None, description="Cancellation time (default: now)"),
    service: CancellationService = Depends(get_cancellation_service),
) -> RefundQuote:
    return service.quote(booking_id, as_of or utc_now())


@router.get(
    "/bookings/{booking_id}/cancellable",
    summary="Check whether a booking can be cancelled",
    response_model=CancellableResponse,
    responses={404: {"description": "Booking not found"}},
)
def cancellable(
    booking_id: str,
    as_of: dt.datetime | None = Query(None, description="Time to check (default: now)"),
    service: CancellationService = Depends(get_cancellation_service),
) -> CancellableResponse:
    when = as_of or utc_now()
    return CancellableResponse(
        booking_id=booking_id,
        as_of=when,
        can_cancel=service.can_cancel(booking_id, when),
    )


@router.post(
    "/bookings/{booking_id}/cancellation-requests",
    summary="Request a cancellation",
    description="""
Create a pending cancellation request. The refund is quoted now and stored
with the request; an admin approves or rejects it later.
""",
    response_model=CancellationRequest,
    status_code=HTTP_201_CREATED,
    responses={
        201: {
            "description": "Cancellation request created",
            "content": {"application/json": {"example": REQUEST_EXAMPLE}},
        },
        404: {"description": "Booking not found"},
        409: {"description": "Booking is already cancelled or has started"},
    },
)
def create_cancellation_request(
    booking_id: str,
    body: CancellationRequestCreate,
    service: CancellationService = Depends(get_cancellation_service),
) -> CancellationRequest:
    return service.request_cancellation(
        booking_id,
        reason=body.reason,
        requested_by=body.requested_by,
        as_of=body.as_of or utc_now(),
    )


@router.get(
    "/cancellation-requests",
    summary="List cancellation requests",
    description="List requests oldest first, optionally filtered by status or requester.",
    response_model=CancellationRequestListResponse,
)
def list_cancellation_requests(
    status: CancellationRequestStatus | None = Query(None, description="Filter by status"),
    requested_by: str | None = Query(None, description="Filter by requester"),
    service: CancellationService = Depends(get_cancellation_service),
) -> CancellationRequestListResponse:
    if requested_by is not None:
        requests = service.history_for(requested_by)
        if status is not None:
            requests = [r for r in requests if r.status == status]
    else:
        requests = service.list_requests(status)
    return CancellationRequestListResponse(requests=requests, count=len(requests))


@router.get(
    "/cancellation-requests/{request_id}",
    summary="Get a cancellation request",
    response_model=CancellationRequest,
    responses={404: {"description": "Cancellation request not found"}},
)
def get_cancellation_request(
    request_id: str,
    service: CancellationService = Depends(get_cancellation_service),
) -> CancellationRequest:
    return service.get_request(request_id)


@router.post(
    "/cancellation-requests/{request_id}/approve",
    summary="Approve a cancellation request",
    response_model=CancellationRequest,
    responses={409: {"description": "Request is not pending"}},
)
def approve_cancellation_request(
    request_id: str,
    body: AdminAction | None = None,
    service: CancellationService = Depends(get_cancellation_service),
) -> CancellationRequest:
    action = body or AdminAction()
    return service.approve(request_id, action.as_of or utc_now(), action.admin_notes)


@router.post(
    "/cancellation-requests/{request_id}/reject",
    summary="Reject a cancellation request",
    description="Reject a pending request. The stored total refund becomes zero.",
    response_model=CancellationRequest,
    responses={409: {"description": "Request is not pending"}},
)
def reject_cancellation_request(
    request_id: str,
    body: AdminAction | None = None,
    service: CancellationService = Depends(get_cancellation_service),
) -> CancellationRequest:
    action = body or AdminAction()
    return service.reject(request_id, action.as_of or utc_now(), action.admin_notes)


@router.post(
    "/cancellation-requests/{request_id}/process",
    summary="Process an approved cancellation",
    description="""
Cancel the booking in the booking backend and mark the request processed.
Notes given here are appended to the existing admin notes.
""",
    response_model=CancellationRequest,
    responses={
        409: {"description": "Request is not approved"},
        502: {"description": "Booking backend failed"},
    },
)
def process_cancellation_request(
    request_id: str,
    body: AdminAction | None = None,
    service: CancellationService = Depends(get_cancellation_service),
) -> CancellationRequest:
    action = body or AdminAction()
    return service.process(request_id, action.as_of or utc_now(), action.admin_notes)


@router.patch(
    "/cancellation-requests/{request_id}/notes",
    summary="Replace admin notes",
    response_model=CancellationRequest,
    responses={404: {"description": "Cancellation request not found"}},
)
def update_notes(
    request_id: str,
    body: AdminNotesUpdate,
    service: CancellationService = Depends(get_cancellation_service),
) -> CancellationRequest:
    return service.update_admin_notes(request_id, body.admin_notes, utc_now())
