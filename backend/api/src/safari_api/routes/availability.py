"""Availability endpoints for a property's calendar.

Provides REST endpoints for:
- Checking whether a stay can be booked
- Finding the next free date and listing occupied dates
- Monthly calendar views and nearby alternative stays
- Applying calendar clicks to a check-in/check-out selection

All dates are in YYYY-MM-DD format. Check-out dates are exclusive.
"""

import datetime as dt

from fastapi import APIRouter, Depends, HTTPException, Query
from starlette.status import HTTP_400_BAD_REQUEST

from safari_api.dependencies import get_availability_service
from safari_api.models.availability import (
    AlternativesResponse,
    CalendarSelectRequest,
    CalendarSelectResponse,
    NextAvailableResponse,
    OccupiedDatesResponse,
    RangeAvailabilityResponse,
)
from safari_shared.models import PropertyCalendar
from safari_shared.services.availability import AvailabilityService
from safari_shared.services.calendar_selection import CalendarSelection

router = APIRouter(prefix="/properties/{property_id}", tags=["availability"])


@router.get(
    "/availability",
    summary="Check date availability",
    description="""
Check whether a stay can be booked at a property.

**Notes:**
- check_out is exclusive (the last night is check_out - 1 day)
- A stay ending on the day another booking starts is available
""",
    response_model=RangeAvailabilityResponse,
    responses={
        200: {
            "description": "Availability check completed",
            "content": {
                "application/json": {
                    "example": {
                        "property_id": "P1",
                        "check_in": "2024-03-05",
                        "check_out": "2024-03-10",
                        "nights": 5,
                        "is_available": True,
                    }
                }
            },
        },
        400: {"description": "check_out is not after check_in"},
    },
)
def check_availability(
    property_id: str,
    check_in: dt.date = Query(..., description="Check-in date", examples=["2024-03-05"]),
    check_out: dt.date = Query(..., description="Check-out date", examples=["2024-03-10"]),
    service: AvailabilityService = Depends(get_availability_service),
) -> RangeAvailabilityResponse:
    """Check availability for a date range."""
    is_available = service.is_range_available(property_id, check_in, check_out)
    return RangeAvailabilityResponse(
        property_id=property_id,
        check_in=check_in,
        check_out=check_out,
        nights=(check_out - check_in).days,
        is_available=is_available,
    )


@router.get(
    "/availability/next",
    summary="Find next free date",
    description="Return the first date on or after from_date that no booking occupies.",
    response_model=NextAvailableResponse,
    responses={409: {"description": "Nothing free within the search window"}},
)
def next_available(
    property_id: str,
    from_date: dt.date = Query(..., description="First candidate date", examples=["2024-03-01"]),
    service: AvailabilityService = Depends(get_availability_service),
) -> NextAvailableResponse:
    return NextAvailableResponse(
        property_id=property_id,
        from_date=from_date,
        next_available_date=service.next_available_date(property_id, from_date),
    )


@router.get(
    "/availability/occupied",
    summary="List occupied dates",
    response_model=OccupiedDatesResponse,
)
def occupied(
    property_id: str,
    service: AvailabilityService = Depends(get_availability_service),
) -> OccupiedDatesResponse:
    """List every date covered by a non-cancelled booking."""
    dates = sorted(service.get_occupied_dates(property_id))
    return OccupiedDatesResponse(property_id=property_id, dates=dates, count=len(dates))


@router.get(
    "/availability/calendar/{month}",
    summary="Get monthly calendar",
    description="""
Get the availability calendar of a property for one month.

**Notes:**
- Month format: YYYY-MM (e.g., 2024-03)
- Days are returned in chronological order
""",
    response_model=PropertyCalendar,
    responses={400: {"description": "Invalid month format (expected YYYY-MM)"}},
)
def get_calendar(
    property_id: str,
    month: str,
    service: AvailabilityService = Depends(get_availability_service),
) -> PropertyCalendar:
    try:
        return service.get_calendar(property_id, month)
    except ValueError as e:
        raise HTTPException(status_code=HTTP_400_BAD_REQUEST, detail=str(e)) from e


@router.get(
    "/availability/alternatives",
    summary="Suggest alternative dates",
    description="""
Suggest free stays of the same length near the requested dates, closest
first. Earlier and later shifts alternate.
""",
    response_model=AlternativesResponse,
    responses={400: {"description": "check_out is not after check_in"}},
)
def alternatives(
    property_id: str,
    check_in: dt.date = Query(..., description="Requested check-in"),
    check_out: dt.date = Query(..., description="Requested check-out"),
    search_window_days: int = Query(14, ge=1, le=90, description="Days to search each way"),
    max_suggestions: int = Query(3, ge=1, le=10),
    earliest: dt.date | None = Query(None, description="Earliest acceptable check-in"),
    service: AvailabilityService = Depends(get_availability_service),
) -> AlternativesResponse:
    is_available = service.is_range_available(property_id, check_in, check_out)
    suggestions = service.suggest_alternative_dates(
        property_id,
        check_in,
        check_out,
        search_window_days=search_window_days,
        max_suggestions=max_suggestions,
        earliest=earliest,
    )
    return AlternativesResponse(
        property_id=property_id,
        requested_check_in=check_in,
        requested_check_out=check_out,
        is_available=is_available,
        alternatives=suggestions,
    )


@router.post(
    "/calendar/select",
    summary="Apply a calendar click",
    description="""
Apply one click to a check-in/check-out selection and return the new
selection. The server keeps no state: send back the phase and dates from
the previous response with the next click.

**Notes:**
- A click on a booked day as check-in moves to the next free day
- A check-out that would overlap a booking moves to the next free day
  after the click
- A click on or before check-in while picking check-out restarts the stay
""",
    response_model=CalendarSelectResponse,
)
def select_dates(
    property_id: str,
    body: CalendarSelectRequest,
    service: AvailabilityService = Depends(get_availability_service),
) -> CalendarSelectResponse:
    selection = CalendarSelection.resume(service, body.to_state(property_id))
    return CalendarSelectResponse.from_state(selection.click(body.day))
