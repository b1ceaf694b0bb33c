"""Refund quote and cancellation request API models."""

import datetime as dt

from pydantic import BaseModel, ConfigDict, Field

from safari_shared.models import CancellationPolicy, CancellationRequest


class CancellationRequestCreate(BaseModel):
    """Customer request to cancel a booking."""

    model_config = ConfigDict(strict=False)

    reason: str = Field(
        ...,
        min_length=1,
        max_length=1000,
        description="Why the booking is being cancelled",
        examples=["Change of travel plans"],
    )
    requested_by: str = Field(
        ...,
        min_length=1,
        description="Requester identity, usually the guest email",
        examples=["guest@example.com"],
    )
    as_of: dt.datetime | None = Field(
        default=None,
        description="Time of the request (defaults to now)",
    )


class AdminAction(BaseModel):
    """Admin decision on a cancellation request."""

    model_config = ConfigDict(strict=False)

    admin_notes: str | None = Field(default=None, max_length=2000)
    as_of: dt.datetime | None = Field(default=None, description="Defaults to now")


class AdminNotesUpdate(BaseModel):
    """Replacement admin notes for a cancellation request."""

    model_config = ConfigDict(strict=False)

    admin_notes: str = Field(..., max_length=2000)


class CancellableResponse(BaseModel):
    model_config = ConfigDict(strict=True)

    booking_id: str
    as_of: dt.datetime
    can_cancel: bool


class PolicyListResponse(BaseModel):
    """Active cancellation policy tiers and their customer-facing summary."""

    model_config = ConfigDict(strict=True)

    policies: list[CancellationPolicy]
    description: str


class CancellationRequestListResponse(BaseModel):
    model_config = ConfigDict(strict=True)

    requests: list[CancellationRequest]
    count: int = Field(..., ge=0)
