"""Unit tests for occupancy and availability checks.

Test categories:
- Occupied dates (half-open ranges, cancelled bookings)
- Range checks, including back-to-back stays
- Next free date search and its scan bound
- Monthly calendar and alternative date suggestions
"""

import datetime as dt

import pytest

from safari_shared.models import (
    BookingStatus,
    DayStatus,
    InvalidRangeError,
    NoAvailabilityFoundError,
)
from safari_shared.services.availability import (
    AvailabilityService,
    first_free_date,
    is_range_free,
    occupied_dates,
)
from safari_shared.services.repositories import InMemoryBookingRepository


class TestOccupiedDates:
    """Tests for occupancy derived from bookings."""

    def test_check_in_included_check_out_excluded(self, make_booking) -> None:
        """Every night of the stay is occupied, the departure day is not."""
        booking = make_booking(check_in=dt.date(2024, 3, 1), check_out=dt.date(2024, 3, 5))

        dates = occupied_dates([booking])

        assert dates == {
            dt.date(2024, 3, 1),
            dt.date(2024, 3, 2),
            dt.date(2024, 3, 3),
            dt.date(2024, 3, 4),
        }
        assert dt.date(2024, 3, 5) not in dates

    def test_cancelled_booking_contributes_nothing(self, make_booking) -> None:
        booking = make_booking(status=BookingStatus.CANCELLED)
        assert occupied_dates([booking]) == set()

    @pytest.mark.parametrize(
        "status",
        [
            BookingStatus.INQUIRY,
            BookingStatus.CONFIRMED,
            BookingStatus.DEPOSIT_PAID,
            BookingStatus.FULLY_PAID,
            BookingStatus.COMPLETED,
        ],
    )
    def test_non_cancelled_statuses_occupy(self, make_booking, status) -> None:
        """Inquiries hold dates just like confirmed bookings."""
        booking = make_booking(status=status)
        assert len(occupied_dates([booking])) == 4

    def test_service_only_uses_property_bookings(self, availability_service) -> None:
        """P2 is booked all March; P1 only has its own stays."""
        dates = availability_service.get_occupied_dates("P1")

        assert dt.date(2024, 3, 7) not in dates
        assert dt.date(2024, 3, 10) in dates
        # BK103 is cancelled
        assert dt.date(2024, 3, 21) not in dates

    def test_unknown_property_has_no_occupied_dates(self, availability_service) -> None:
        assert availability_service.get_occupied_dates("P404") == set()


class TestRangeAvailability:
    """Tests for is_range_available."""

    def test_back_to_back_stay_is_available(self, availability_service) -> None:
        """A stay starting on another stay's check-out day does not conflict."""
        assert availability_service.is_range_available(
            "P1", dt.date(2024, 3, 5), dt.date(2024, 3, 8)
        )

    def test_overlapping_stay_is_unavailable(self, availability_service) -> None:
        assert not availability_service.is_range_available(
            "P1", dt.date(2024, 3, 4), dt.date(2024, 3, 6)
        )

    def test_stay_ending_on_check_in_day_is_available(self, availability_service) -> None:
        assert availability_service.is_range_available(
            "P1", dt.date(2024, 3, 7), dt.date(2024, 3, 10)
        )

    def test_stay_surrounding_a_booking_is_unavailable(self, availability_service) -> None:
        assert not availability_service.is_range_available(
            "P1", dt.date(2024, 3, 8), dt.date(2024, 3, 19)
        )

    def test_cancelled_dates_are_bookable(self, availability_service) -> None:
        assert availability_service.is_range_available(
            "P1", dt.date(2024, 3, 20), dt.date(2024, 3, 25)
        )

    def test_datetime_arguments_use_calendar_date(self, availability_service) -> None:
        assert availability_service.is_range_available(
            "P1",
            dt.datetime(2024, 3, 5, 15, 0, tzinfo=dt.UTC),
            dt.datetime(2024, 3, 8, 10, 0, tzinfo=dt.UTC),
        )

    @pytest.mark.parametrize(
        "check_in,check_out",
        [
            (dt.date(2024, 3, 8), dt.date(2024, 3, 8)),
            (dt.date(2024, 3, 8), dt.date(2024, 3, 6)),
        ],
    )
    def test_empty_or_reversed_range_rejected(
        self, availability_service, check_in, check_out
    ) -> None:
        with pytest.raises(InvalidRangeError) as exc_info:
            availability_service.is_range_available("P1", check_in, check_out)
        assert exc_info.value.details == {
            "check_in": check_in.isoformat(),
            "check_out": check_out.isoformat(),
        }

    def test_range_check_matches_occupied_dates(self, availability_service) -> None:
        """A range is free exactly when none of its dates is occupied."""
        occupied = availability_service.get_occupied_dates("P1")
        start = dt.date(2024, 2, 25)
        for offset in range(30):
            check_in = start + dt.timedelta(days=offset)
            for nights in (1, 3, 6):
                check_out = check_in + dt.timedelta(days=nights)
                expected = not any(
                    check_in + dt.timedelta(days=i) in occupied for i in range(nights)
                )
                assert (
                    availability_service.is_range_available("P1", check_in, check_out)
                    is expected
                )


class TestNextAvailableDate:
    """Tests for next_available_date and first_free_date."""

    def test_free_date_is_returned_unchanged(self, availability_service) -> None:
        assert availability_service.next_available_date(
            "P1", dt.date(2024, 3, 7)
        ) == dt.date(2024, 3, 7)

    def test_skips_to_end_of_booked_block(self, availability_service) -> None:
        """Clicking inside a booked week lands on the first day after it."""
        result = availability_service.next_available_date("P1", dt.date(2024, 3, 12))
        assert result == dt.date(2024, 3, 17)

    def test_skips_adjacent_bookings(self, make_booking) -> None:
        repo = InMemoryBookingRepository(
            [
                make_booking(id="A", check_in=dt.date(2024, 5, 1), check_out=dt.date(2024, 5, 4)),
                make_booking(id="B", check_in=dt.date(2024, 5, 4), check_out=dt.date(2024, 5, 9)),
            ]
        )
        service = AvailabilityService(bookings=repo)

        assert service.next_available_date("P1", dt.date(2024, 5, 2)) == dt.date(2024, 5, 9)

    def test_result_is_first_free_date(self, availability_service) -> None:
        """No date between the start and the result is free."""
        occupied = availability_service.get_occupied_dates("P1")
        start = dt.date(2024, 3, 1)

        result = availability_service.next_available_date("P1", start)

        assert result >= start
        assert result not in occupied
        day = start
        while day < result:
            assert day in occupied
            day += dt.timedelta(days=1)

    def test_scan_bound_raises(self) -> None:
        occupied = {dt.date(2024, 1, 1) + dt.timedelta(days=i) for i in range(20)}

        with pytest.raises(NoAvailabilityFoundError) as exc_info:
            first_free_date(occupied, dt.date(2024, 1, 1), max_scan_days=10)

        assert exc_info.value.details["max_scan_days"] == "10"

    def test_date_at_scan_bound_is_found(self) -> None:
        occupied = {dt.date(2024, 1, 1) + dt.timedelta(days=i) for i in range(10)}
        assert first_free_date(occupied, dt.date(2024, 1, 1), max_scan_days=10) == dt.date(
            2024, 1, 11
        )

    def test_service_uses_configured_scan_bound(self, booking_repository) -> None:
        service = AvailabilityService(bookings=booking_repository, max_scan_days=5)

        with pytest.raises(NoAvailabilityFoundError):
            service.next_available_date("P2", dt.date(2024, 3, 1))


class TestIsRangeFree:
    def test_pure_function_rejects_bad_range(self) -> None:
        with pytest.raises(InvalidRangeError):
            is_range_free(set(), dt.date(2024, 1, 2), dt.date(2024, 1, 1))


class TestCalendar:
    """Tests for the monthly calendar view."""

    def test_march_calendar(self, availability_service) -> None:
        calendar = availability_service.get_calendar("P1", "2024-03")

        assert calendar.month == "2024-03"
        assert len(calendar.days) == 31
        assert calendar.days[0].date == dt.date(2024, 3, 1)
        assert calendar.days[-1].date == dt.date(2024, 3, 31)
        # 03-01..03-04 and 03-10..03-16
        assert calendar.booked_count == 11
        assert calendar.available_count == 20

    def test_day_statuses(self, availability_service) -> None:
        calendar = availability_service.get_calendar("P1", "2024-03")
        by_date = {day.date: day.status for day in calendar.days}

        assert by_date[dt.date(2024, 3, 4)] == DayStatus.BOOKED
        assert by_date[dt.date(2024, 3, 5)] == DayStatus.AVAILABLE
        assert by_date[dt.date(2024, 3, 22)] == DayStatus.AVAILABLE

    def test_december_rolls_over_year(self, availability_service) -> None:
        calendar = availability_service.get_calendar("P1", "2024-12")
        assert len(calendar.days) == 31
        assert calendar.booked_count == 0

    @pytest.mark.parametrize("month", ["2024-13", "2024-3", "March", "2024/03"])
    def test_invalid_month(self, availability_service, month) -> None:
        with pytest.raises(ValueError):
            availability_service.get_calendar("P1", month)


class TestAlternativeDates:
    """Tests for suggest_alternative_dates."""

    def test_closest_alternatives_first(self, availability_service) -> None:
        """Requested 03-03..03-06 overlaps BK101; shifts alternate earlier and later."""
        suggestions = availability_service.suggest_alternative_dates(
            "P1", dt.date(2024, 3, 3), dt.date(2024, 3, 6)
        )

        assert [(s.check_in, s.offset_days) for s in suggestions] == [
            (dt.date(2024, 3, 5), 2),
            (dt.date(2024, 3, 6), 3),
            (dt.date(2024, 3, 7), 4),
        ]
        assert all(s.nights == 3 for s in suggestions)

    def test_alternatives_respect_earliest(self, availability_service) -> None:
        suggestions = availability_service.suggest_alternative_dates(
            "P1",
            dt.date(2024, 3, 3),
            dt.date(2024, 3, 6),
            earliest=dt.date(2024, 3, 1),
        )
        assert all(s.check_in >= dt.date(2024, 3, 1) for s in suggestions)
        assert all(s.direction == "later" for s in suggestions)

    def test_fully_booked_window_has_no_alternatives(self, availability_service) -> None:
        suggestions = availability_service.suggest_alternative_dates(
            "P2",
            dt.date(2024, 3, 10),
            dt.date(2024, 3, 14),
            search_window_days=5,
        )
        assert suggestions == []

    def test_invalid_range(self, availability_service) -> None:
        with pytest.raises(InvalidRangeError):
            availability_service.suggest_alternative_dates(
                "P1", dt.date(2024, 3, 6), dt.date(2024, 3, 3)
            )
