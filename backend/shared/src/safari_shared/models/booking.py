"""Booking and date-range models."""

import datetime as dt
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

from safari_shared.utils.dates import iter_dates

from .enums import BookingStatus


class DateRange(BaseModel):
    """Half-open calendar range ``[start, end)``."""

    model_config = ConfigDict(strict=True, frozen=True)

    start: dt.date
    end: dt.date

    @model_validator(mode="after")
    def _check_order(self) -> "DateRange":
        if self.end <= self.start:
            raise ValueError("end must be after start")
        return self

    @property
    def nights(self) -> int:
        return (self.end - self.start).days

    def overlaps(self, other: "DateRange") -> bool:
        """Two ranges conflict iff each starts before the other ends."""
        return self.start < other.end and other.start < self.end

    def contains(self, day: dt.date) -> bool:
        return self.start <= day < self.end

    def dates(self) -> list[dt.date]:
        """Every date the range occupies (end excluded)."""
        return list(iter_dates(self.start, self.end))


class Booking(BaseModel):
    """A stay at a property.

    Read-only input to the availability and cancellation engines. Status
    changes happen through a BookingRepository, never on this object.
    """

    model_config = ConfigDict(strict=True)

    id: str = Field(..., description="Booking identifier")
    property_id: str = Field(..., description="Owning property reference")
    check_in: dt.date = Field(..., description="First night of the stay")
    check_out: dt.date = Field(..., description="Departure date (exclusive)")
    created_at: dt.datetime = Field(..., description="When the booking was made")
    total_amount: Decimal = Field(..., ge=0, description="Total for the stay")
    status: BookingStatus = Field(..., description="Booking status")
    guest_name: str | None = Field(default=None, description="Lead guest name")
    guest_email: str | None = Field(default=None, description="Lead guest email")
    amount_paid: Decimal = Field(
        default=Decimal("0"), ge=0, description="Deposit and payments received"
    )

    @model_validator(mode="after")
    def _check_dates(self) -> "Booking":
        if self.check_out <= self.check_in:
            raise ValueError("check_out must be after check_in")
        return self

    @computed_field  # type: ignore[prop-decorator]
    @property
    def balance_due(self) -> Decimal:
        return max(Decimal("0"), self.total_amount - self.amount_paid)

    @property
    def stay(self) -> DateRange:
        return DateRange(start=self.check_in, end=self.check_out)

    @property
    def nights(self) -> int:
        return (self.check_out - self.check_in).days

    @property
    def is_cancelled(self) -> bool:
        return self.status == BookingStatus.CANCELLED
