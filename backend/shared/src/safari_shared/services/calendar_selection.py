"""Two-click check-in/check-out selection against a property's occupancy.

The first click picks check-in (moved forward to the next free day if the
clicked day is taken), the second picks check-out. If the second click would
make the stay overlap an existing booking, check-out moves to the next free
day from the click. Clicking on or before the current check-in restarts the
stay from that day.
"""

import datetime as dt

from safari_shared.models import SelectionPhase, SelectionState
from safari_shared.services.availability import (
    AvailabilityService,
    first_free_date,
    is_range_free,
)
from safari_shared.utils.dates import to_date
from safari_shared.utils.logging import get_logger

logger = get_logger(__name__)


class CalendarSelection:
    """Selection session for one property at a time.

    Occupied dates are fetched once per selected property and reused for
    every click until another property is selected.
    """

    def __init__(self, availability: AvailabilityService) -> None:
        self.availability = availability
        self._state = SelectionState()
        self._occupied: set[dt.date] = set()

    @classmethod
    def resume(
        cls,
        availability: AvailabilityService,
        state: SelectionState,
    ) -> "CalendarSelection":
        """Rebuild a session from a previously returned state."""
        selection = cls(availability)
        if state.property_id is not None:
            selection.select_property(state.property_id)
        selection._state = state.model_copy()
        return selection

    @property
    def state(self) -> SelectionState:
        return self._state.model_copy()

    @property
    def occupied(self) -> frozenset[dt.date]:
        return frozenset(self._occupied)

    def select_property(self, property_id: str) -> SelectionState:
        """Start a fresh selection for a property."""
        self._occupied = self.availability.get_occupied_dates(property_id)
        self._state = SelectionState(property_id=property_id)
        return self.state

    def click(self, day: dt.date | dt.datetime) -> SelectionState:
        """Apply one calendar click and return the new selection.

        Clicks before a property is selected leave the selection unchanged.

        Raises:
            NoAvailabilityFoundError: If no free day exists within the scan bound
        """
        if self._state.property_id is None:
            logger.debug("Ignoring calendar click with no property selected")
            return self.state

        clicked = to_date(day)
        if self._state.phase == SelectionPhase.AWAITING_CHECK_OUT and self._state.check_in:
            self._state = self._pick_check_out(self._state.check_in, clicked)
        else:
            self._state = self._pick_check_in(clicked)
        return self.state

    def _pick_check_in(self, clicked: dt.date) -> SelectionState:
        check_in = clicked
        if clicked in self._occupied:
            check_in = first_free_date(
                self._occupied, clicked, self.availability.max_scan_days
            )
        return SelectionState(
            property_id=self._state.property_id,
            phase=SelectionPhase.AWAITING_CHECK_OUT,
            check_in=check_in,
        )

    def _pick_check_out(self, check_in: dt.date, clicked: dt.date) -> SelectionState:
        if clicked <= check_in:
            # An earlier or equal day replaces check-in, not check-out
            return SelectionState(
                property_id=self._state.property_id,
                phase=SelectionPhase.AWAITING_CHECK_OUT,
                check_in=clicked,
            )

        check_out = clicked
        if not is_range_free(self._occupied, check_in, clicked):
            check_out = first_free_date(
                self._occupied, clicked, self.availability.max_scan_days
            )
        return SelectionState(
            property_id=self._state.property_id,
            phase=SelectionPhase.AWAITING_CHECK_IN,
            check_in=check_in,
            check_out=check_out,
        )
