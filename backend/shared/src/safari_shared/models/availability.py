"""Availability models: calendar views, suggestions and date selection."""

import datetime as dt

from pydantic import BaseModel, ConfigDict, Field

from .enums import DayStatus, SelectionPhase


class CalendarDay(BaseModel):
    """Availability of one calendar day for a property."""

    model_config = ConfigDict(strict=True)

    date: dt.date
    status: DayStatus


class PropertyCalendar(BaseModel):
    """One month of day-by-day availability for a property."""

    model_config = ConfigDict(strict=True)

    property_id: str
    month: str = Field(..., pattern=r"^\d{4}-\d{2}$")
    days: list[CalendarDay]
    available_count: int = Field(..., ge=0)
    booked_count: int = Field(..., ge=0)


class AlternativeDateRange(BaseModel):
    """A free stay of the requested length near the requested dates."""

    model_config = ConfigDict(strict=True)

    check_in: dt.date
    check_out: dt.date
    nights: int = Field(..., ge=1)
    offset_days: int = Field(
        ..., description="Shift from the requested check-in (negative = earlier)"
    )
    direction: str = Field(..., description="'earlier' or 'later'")


class SelectionState(BaseModel):
    """Snapshot of an in-progress check-in/check-out selection."""

    model_config = ConfigDict(strict=True)

    property_id: str | None = None
    phase: SelectionPhase = SelectionPhase.AWAITING_CHECK_IN
    check_in: dt.date | None = None
    check_out: dt.date | None = None

    @property
    def is_complete(self) -> bool:
        return self.check_in is not None and self.check_out is not None
