"""Cancellation policy, refund quote and cancellation request models."""

import datetime as dt
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .enums import CancellationRequestStatus


class CancellationPolicy(BaseModel):
    """One tier of the cancellation policy table.

    A tier is either a grace tier (``hours_since_booking`` set: applies when
    the booking was made at most that many hours before cancelling) or a
    day-based tier (applies when at least ``days_before_check_in`` whole
    days remain). A day-based tier with ``days_before_check_in=None`` has
    no minimum and catches every remaining cancellation.
    """

    model_config = ConfigDict(strict=True, frozen=True)

    id: str = Field(..., description="Policy identifier", examples=["standard-7d"])
    name: str = Field(..., description="Display name")
    description: str = Field(..., description="Customer-facing explanation")
    days_before_check_in: int | None = Field(
        default=None,
        ge=0,
        description="Minimum days until check-in for this tier (None = no minimum)",
    )
    hours_since_booking: int | None = Field(
        default=None,
        ge=0,
        description="Grace window after booking creation, in hours",
    )
    refund_percentage: int = Field(..., ge=0, le=100, description="Refund percent")
    processing_fee: Decimal = Field(
        default=Decimal("0"), ge=0, description="Flat fee deducted after the percentage"
    )
    is_active: bool = Field(default=True)

    @model_validator(mode="after")
    def _check_threshold_kind(self) -> "CancellationPolicy":
        if self.hours_since_booking is not None and self.days_before_check_in is not None:
            raise ValueError(
                "a policy tier is either hours_since_booking or days_before_check_in based"
            )
        return self

    @property
    def is_grace_tier(self) -> bool:
        return self.hours_since_booking is not None

    @property
    def is_catch_all(self) -> bool:
        return not self.is_grace_tier and self.days_before_check_in is None


class RefundQuote(BaseModel):
    """Refund computed for cancelling a booking at a given moment."""

    model_config = ConfigDict(strict=True)

    refund_amount: Decimal = Field(..., description="Percentage share of the total")
    processing_fee: Decimal = Field(..., description="Fee of the applied tier")
    total_refund: Decimal = Field(..., ge=0, description="max(0, refund - fee)")
    applied_policy: CancellationPolicy
    days_until_check_in: int = Field(..., description="Whole days left, rounded up")
    hours_since_booking: float = Field(..., description="Hours since the booking was made")


class CancellationRequest(BaseModel):
    """A customer's request to cancel a booking, pending admin review.

    The refund figures are frozen when the request is created and are not
    recomputed if the policy table changes later.
    """

    model_config = ConfigDict(strict=True)

    request_id: str = Field(..., description="Request identifier", examples=["CXL-2024-1A2B3C4D"])
    booking_id: str = Field(..., description="Booking to cancel")
    reason: str = Field(..., description="Customer's reason")
    requested_by: str = Field(..., description="Who asked for the cancellation")
    cancellation_date: dt.datetime = Field(..., description="As-of time of the quote")
    refund_amount: Decimal = Field(..., ge=0)
    processing_fee: Decimal = Field(..., ge=0)
    total_refund: Decimal = Field(..., ge=0)
    policy_id: str = Field(..., description="Policy tier applied to the quote")
    status: CancellationRequestStatus = Field(default=CancellationRequestStatus.PENDING)
    admin_notes: str = Field(default="")
    created_at: dt.datetime
    updated_at: dt.datetime
