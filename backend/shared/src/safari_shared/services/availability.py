"""Availability service for date management.

Occupancy is derived from a property's bookings: every non-cancelled booking
occupies the dates ``[check_in, check_out)``. The module-level functions are
pure and work on an already computed occupied-date set; AvailabilityService
fetches bookings from a BookingRepository and delegates to them.
"""

import datetime as dt
from collections.abc import Iterable

from safari_shared.models import (
    AlternativeDateRange,
    Booking,
    CalendarDay,
    DayStatus,
    InvalidRangeError,
    NoAvailabilityFoundError,
    PropertyCalendar,
)
from safari_shared.services.repositories import BookingRepository
from safari_shared.utils.dates import iter_dates, parse_month, to_date
from safari_shared.utils.logging import get_logger

logger = get_logger(__name__)

# Roughly two years of forward search before giving up
DEFAULT_MAX_SCAN_DAYS = 730


def occupied_dates(bookings: Iterable[Booking]) -> set[dt.date]:
    """Dates taken by non-cancelled bookings (check-out day excluded)."""
    dates: set[dt.date] = set()
    for booking in bookings:
        if booking.is_cancelled:
            continue
        dates.update(iter_dates(booking.check_in, booking.check_out))
    return dates


def is_range_free(
    occupied: set[dt.date],
    check_in: dt.date | dt.datetime,
    check_out: dt.date | dt.datetime,
) -> bool:
    """Check that no date of ``[check_in, check_out)`` is occupied.

    Raises:
        InvalidRangeError: If check_out is not after check_in
    """
    start, end = to_date(check_in), to_date(check_out)
    if end <= start:
        raise InvalidRangeError(
            details={"check_in": start.isoformat(), "check_out": end.isoformat()}
        )
    return not any(d in occupied for d in iter_dates(start, end))


def first_free_date(
    occupied: set[dt.date],
    from_date: dt.date | dt.datetime,
    max_scan_days: int = DEFAULT_MAX_SCAN_DAYS,
) -> dt.date:
    """First unoccupied date on or after ``from_date``.

    Raises:
        NoAvailabilityFoundError: If nothing is free within max_scan_days
    """
    start = to_date(from_date)
    for offset in range(max_scan_days + 1):
        candidate = start + dt.timedelta(days=offset)
        if candidate not in occupied:
            return candidate

    raise NoAvailabilityFoundError(
        details={"from_date": start.isoformat(), "max_scan_days": str(max_scan_days)}
    )


class AvailabilityService:
    """Service for availability checking against a property's bookings."""

    def __init__(
        self,
        bookings: BookingRepository,
        max_scan_days: int = DEFAULT_MAX_SCAN_DAYS,
    ) -> None:
        """Initialize availability service.

        Args:
            bookings: Source of bookings per property
            max_scan_days: Forward search bound for next_available_date
        """
        self.bookings = bookings
        self.max_scan_days = max_scan_days

    def get_occupied_dates(self, property_id: str) -> set[dt.date]:
        """Get every occupied date for a property.

        Args:
            property_id: Property to inspect

        Returns:
            Set of dates covered by non-cancelled bookings
        """
        return occupied_dates(self.bookings.list(property_id))

    def is_range_available(
        self,
        property_id: str,
        check_in: dt.date | dt.datetime,
        check_out: dt.date | dt.datetime,
    ) -> bool:
        """Check whether a stay can be booked.

        Args:
            property_id: Property to check
            check_in: Check-in date
            check_out: Check-out date (exclusive)

        Returns:
            True if no night of the stay is taken

        Raises:
            InvalidRangeError: If check_out is not after check_in
        """
        if to_date(check_out) <= to_date(check_in):
            raise InvalidRangeError(
                details={
                    "check_in": to_date(check_in).isoformat(),
                    "check_out": to_date(check_out).isoformat(),
                }
            )
        available = is_range_free(self.get_occupied_dates(property_id), check_in, check_out)
        logger.debug(
            "Range check for %s %s..%s: %s",
            property_id,
            to_date(check_in),
            to_date(check_out),
            "available" if available else "conflict",
        )
        return available

    def next_available_date(
        self,
        property_id: str,
        from_date: dt.date | dt.datetime,
    ) -> dt.date:
        """Find the first free date on or after from_date.

        Args:
            property_id: Property to check
            from_date: First candidate date (inclusive)

        Returns:
            First unoccupied date

        Raises:
            NoAvailabilityFoundError: If the search bound is exceeded
        """
        try:
            return first_free_date(
                self.get_occupied_dates(property_id), from_date, self.max_scan_days
            )
        except NoAvailabilityFoundError:
            logger.warning(
                "No free date for property %s within %d days of %s",
                property_id,
                self.max_scan_days,
                to_date(from_date),
            )
            raise

    def get_calendar(self, property_id: str, month: str) -> PropertyCalendar:
        """Build a month view of booked and available days.

        Args:
            property_id: Property to inspect
            month: Month in YYYY-MM format

        Returns:
            PropertyCalendar with one entry per day

        Raises:
            ValueError: If month is not a valid YYYY-MM string
        """
        first_day, next_month = parse_month(month)
        occupied = self.get_occupied_dates(property_id)

        days = [
            CalendarDay(
                date=d,
                status=DayStatus.BOOKED if d in occupied else DayStatus.AVAILABLE,
            )
            for d in iter_dates(first_day, next_month)
        ]
        booked_count = sum(1 for day in days if day.status == DayStatus.BOOKED)

        return PropertyCalendar(
            property_id=property_id,
            month=month,
            days=days,
            available_count=len(days) - booked_count,
            booked_count=booked_count,
        )

    def suggest_alternative_dates(
        self,
        property_id: str,
        requested_check_in: dt.date,
        requested_check_out: dt.date,
        search_window_days: int = 14,
        max_suggestions: int = 3,
        earliest: dt.date | None = None,
    ) -> list[AlternativeDateRange]:
        """Find free stays of the same length near the requested dates.

        Tries shifting the check-in one day earlier, then one day later, then
        two days, and so on, so the closest alternatives come first.

        Args:
            property_id: Property to search
            requested_check_in: Originally requested check-in date
            requested_check_out: Originally requested check-out date
            search_window_days: How many days before/after to search
            max_suggestions: Maximum number of alternatives to return
            earliest: Earliest acceptable check-in (e.g. today); no limit if None

        Returns:
            Alternatives ordered by distance from the requested check-in

        Raises:
            InvalidRangeError: If the requested check-out is not after check-in
        """
        if requested_check_out <= requested_check_in:
            raise InvalidRangeError(
                details={
                    "check_in": requested_check_in.isoformat(),
                    "check_out": requested_check_out.isoformat(),
                }
            )

        nights = (requested_check_out - requested_check_in).days
        occupied = self.get_occupied_dates(property_id)
        suggestions: list[AlternativeDateRange] = []

        def window_is_free(start: dt.date) -> bool:
            return all(
                start + dt.timedelta(days=i) not in occupied for i in range(nights)
            )

        for offset in range(1, search_window_days + 1):
            for signed_offset, direction in ((-offset, "earlier"), (offset, "later")):
                if len(suggestions) >= max_suggestions:
                    break

                start = requested_check_in + dt.timedelta(days=signed_offset)
                if earliest is not None and start < earliest:
                    continue
                if window_is_free(start):
                    suggestions.append(
                        AlternativeDateRange(
                            check_in=start,
                            check_out=start + dt.timedelta(days=nights),
                            nights=nights,
                            offset_days=signed_offset,
                            direction=direction,
                        )
                    )

        return suggestions
