"""Refund policy service for calculating cancellation refunds.

Implements the default cancellation policy:
- Free (100%, no fee): cancelled within 24 hours of making the booking,
  however close check-in is
- Standard (75%, fee 25): 7+ days before check-in
- Late (50%, fee 50): 2+ days before check-in
- No refund (0%, fee 100): anything later

The refund is ``total * pct / 100`` minus the flat fee, never below zero.
Amounts are Decimals so fractional shares such as 1078.125 stay exact.
"""

import datetime as dt
import math
from collections.abc import Sequence
from decimal import Decimal

from safari_shared.models import (
    Booking,
    CancellationPolicy,
    PolicyNotApplicableError,
    RefundQuote,
)
from safari_shared.utils.dates import to_utc_datetime

SECONDS_PER_HOUR = 60 * 60
SECONDS_PER_DAY = 24 * SECONDS_PER_HOUR

FREE_CANCELLATION_HOURS = 24

DEFAULT_POLICIES: tuple[CancellationPolicy, ...] = (
    CancellationPolicy(
        id="free-24h",
        name="Free Cancellation (24 hours)",
        description="Cancel within 24 hours of booking for full refund",
        hours_since_booking=FREE_CANCELLATION_HOURS,
        refund_percentage=100,
        processing_fee=Decimal("0"),
    ),
    CancellationPolicy(
        id="standard-7d",
        name="Standard Cancellation (7+ days)",
        description="Cancel 7 or more days before check-in for 75% refund",
        days_before_check_in=7,
        refund_percentage=75,
        processing_fee=Decimal("25"),
    ),
    CancellationPolicy(
        id="late-2d",
        name="Late Cancellation (2-7 days)",
        description="Cancel 2-7 days before check-in for 50% refund",
        days_before_check_in=2,
        refund_percentage=50,
        processing_fee=Decimal("50"),
    ),
    CancellationPolicy(
        id="no-refund-48h",
        name="No Refund (Less than 48 hours)",
        description="Cancel less than 48 hours before check-in - no refund",
        days_before_check_in=None,
        refund_percentage=0,
        processing_fee=Decimal("100"),
    ),
)


class RefundPolicyService:
    """Service for calculating refunds based on cancellation timing.

    The policy table is injected; callers may substitute their own tiers
    without changing the selection rules:

    1. An active grace tier applies when the booking was made at most
       ``hours_since_booking`` hours before the cancellation.
    2. Otherwise active day-based tiers are tried from the largest
       ``days_before_check_in`` down to the catch-all tier, and the first
       whose threshold is met applies.
    """

    def __init__(self, policies: Sequence[CancellationPolicy] = DEFAULT_POLICIES) -> None:
        self.policies = tuple(policies)

    @property
    def active_policies(self) -> list[CancellationPolicy]:
        return [p for p in self.policies if p.is_active]

    def select_policy(
        self,
        hours_since_booking: float,
        days_until_check_in: int,
    ) -> CancellationPolicy:
        """Pick the tier that applies to a cancellation.

        Args:
            hours_since_booking: Hours between booking creation and cancellation
            days_until_check_in: Whole days left before check-in (rounded up)

        Returns:
            The applicable CancellationPolicy

        Raises:
            PolicyNotApplicableError: If no active tier matches
        """
        active = self.active_policies

        for policy in active:
            if policy.is_grace_tier and hours_since_booking <= policy.hours_since_booking:
                return policy

        day_tiers = sorted(
            (p for p in active if not p.is_grace_tier),
            key=lambda p: -1 if p.days_before_check_in is None else p.days_before_check_in,
            reverse=True,
        )
        for policy in day_tiers:
            threshold = policy.days_before_check_in
            if threshold is None or days_until_check_in >= threshold:
                return policy

        raise PolicyNotApplicableError(
            details={
                "days_until_check_in": str(days_until_check_in),
                "hours_since_booking": f"{hours_since_booking:.2f}",
            }
        )

    def calculate_refund(
        self,
        booking: Booking,
        cancellation_date: dt.date | dt.datetime,
    ) -> RefundQuote:
        """Calculate the refund for cancelling a booking at a given moment.

        Args:
            booking: Booking being cancelled
            cancellation_date: When the cancellation happens (naive = UTC)

        Returns:
            RefundQuote with the applied tier and amounts

        Raises:
            PolicyNotApplicableError: If the policy table has no matching tier
        """
        cancelled_at = to_utc_datetime(cancellation_date)
        booked_at = to_utc_datetime(booking.created_at)
        check_in_at = to_utc_datetime(booking.check_in)

        hours_since_booking = (cancelled_at - booked_at).total_seconds() / SECONDS_PER_HOUR
        days_until_check_in = math.ceil(
            (check_in_at - cancelled_at).total_seconds() / SECONDS_PER_DAY
        )

        policy = self.select_policy(hours_since_booking, days_until_check_in)

        refund_amount = booking.total_amount * Decimal(policy.refund_percentage) / Decimal(100)
        total_refund = max(Decimal("0"), refund_amount - policy.processing_fee)

        return RefundQuote(
            refund_amount=refund_amount,
            processing_fee=policy.processing_fee,
            total_refund=total_refund,
            applied_policy=policy,
            days_until_check_in=days_until_check_in,
            hours_since_booking=hours_since_booking,
        )

    def can_cancel(
        self,
        booking: Booking,
        current_date: dt.date | dt.datetime,
    ) -> bool:
        """Check whether a booking may still be cancelled.

        A booking cannot be cancelled once it is cancelled, or once its
        check-in (or check-out) moment has been reached.
        """
        if booking.is_cancelled:
            return False

        now = to_utc_datetime(current_date)
        if now >= to_utc_datetime(booking.check_in):
            return False
        if now >= to_utc_datetime(booking.check_out):
            return False

        return True

    def get_policy_description(self) -> str:
        """Get human-readable description of the active policy tiers."""
        lines = ["Cancellation Policy:"]
        for policy in self.active_policies:
            fee = f", processing fee {policy.processing_fee}" if policy.processing_fee else ""
            lines.append(f"• {policy.name}: {policy.refund_percentage}% refund{fee}")
        return "\n".join(lines)
