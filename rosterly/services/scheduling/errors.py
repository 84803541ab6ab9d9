"""
Exceptions raised by the scheduling service.

Business-state problems (empty roster, no open day) are not exceptions; they
travel back to the caller as warnings on the generation result.
"""


class SchedulingError(Exception):
    pass


class ScheduleInputError(SchedulingError, ValueError):
    """Structurally invalid input, rejected before any generation or validation."""
    pass


class EstablishmentNotFoundError(SchedulingError):
    pass


class ScheduleNotFoundError(SchedulingError):
    pass


class ShiftNotFoundError(SchedulingError):
    pass


class InvalidScheduleTransitionError(SchedulingError):
    pass


class ScheduleConflictError(SchedulingError):
    """A non-archived schedule already exists for the establishment and week."""

    def __init__(self, establishment_id: int, week_start_date):
        self.establishment_id = establishment_id
        self.week_start_date = week_start_date
        super().__init__(
            f"Schedule already exists for establishment {establishment_id} "
            f"and week {week_start_date}"
        )
