"""Availability and calendar selection request/response models."""

import datetime as dt

from pydantic import BaseModel, ConfigDict, Field

from safari_shared.models import AlternativeDateRange, SelectionPhase, SelectionState


class RangeAvailabilityResponse(BaseModel):
    """Whether a stay can be booked."""

    model_config = ConfigDict(strict=True)

    property_id: str
    check_in: dt.date
    check_out: dt.date
    nights: int = Field(..., ge=1)
    is_available: bool


class NextAvailableResponse(BaseModel):
    """First free date on or after the requested date."""

    model_config = ConfigDict(strict=True)

    property_id: str
    from_date: dt.date
    next_available_date: dt.date


class OccupiedDatesResponse(BaseModel):
    """Every occupied date of a property, sorted ascending."""

    model_config = ConfigDict(strict=True)

    property_id: str
    dates: list[dt.date]
    count: int = Field(..., ge=0)


class AlternativesResponse(BaseModel):
    """Free stays of the same length near a requested stay."""

    model_config = ConfigDict(strict=True)

    property_id: str
    requested_check_in: dt.date
    requested_check_out: dt.date
    is_available: bool = Field(..., description="Whether the requested stay itself is free")
    alternatives: list[AlternativeDateRange]


class CalendarSelectRequest(BaseModel):
    """One calendar click applied to a previously returned selection.

    Clients send back the state from the last response together with the
    clicked day; the server keeps no selection state between requests.
    """

    # JSON dates arrive as strings
    model_config = ConfigDict(strict=False)

    day: dt.date = Field(..., description="Clicked day", examples=["2024-03-10"])
    phase: SelectionPhase = Field(
        default=SelectionPhase.AWAITING_CHECK_IN,
        description="Phase from the previous response",
    )
    check_in: dt.date | None = Field(default=None, description="Current check-in")
    check_out: dt.date | None = Field(default=None, description="Current check-out")

    def to_state(self, property_id: str) -> SelectionState:
        return SelectionState(
            property_id=property_id,
            phase=self.phase,
            check_in=self.check_in,
            check_out=self.check_out,
        )


class CalendarSelectResponse(BaseModel):
    """Selection after applying a click."""

    model_config = ConfigDict(strict=True)

    property_id: str
    phase: SelectionPhase
    check_in: dt.date | None = None
    check_out: dt.date | None = None
    is_complete: bool

    @classmethod
    def from_state(cls, state: SelectionState) -> "CalendarSelectResponse":
        return cls(
            property_id=state.property_id or "",
            phase=state.phase,
            check_in=state.check_in,
            check_out=state.check_out,
            is_complete=state.is_complete,
        )
