"""
Weekly shift assignment.

Strategy (deterministic):
1. Walk the 7 dates of the week in order, skipping closed weekdays
2. For each open date, keep the employees the availability check allows
3. Order them by hours already assigned this run (stable, so ties keep roster order)
4. Give the first `min_employees_per_shift` of them a shift spanning the whole opening
"""

import logging
from collections import defaultdict
from datetime import date
from typing import Protocol

from .availability import AvailabilityCheck, get_available_employees, is_employee_available
from .types import (
    Employee,
    GeneratedSchedule,
    OperatingWeek,
    Shift,
    ShiftStatus,
    Weekday,
)
from .timeutils import week_dates


logger = logging.getLogger(__name__)

NO_EMPLOYEES_WARNING = "No employees registered"
NO_OPEN_DAYS_WARNING = "No open days this week"


class ShiftAssignmentStrategy(Protocol):
    """Interface shared by every weekly assignment strategy."""

    def generate(
        self,
        week_start: date,
        operating_week: OperatingWeek,
        roster: list[Employee],
        min_employees_per_shift: int,
    ) -> GeneratedSchedule:
        """
        Produce a week of shifts.

        Implementations must attempt to staff every open day with at least
        `min_employees_per_shift` people and return the GeneratedSchedule shape.
        """
        ...


class ShiftAssigner:
    """
    Hour-balancing greedy assigner. Holds no state between calls.
    """

    def __init__(self, is_available: AvailabilityCheck = is_employee_available):
        self.is_available = is_available

    def generate(
        self,
        week_start: date,
        operating_week: OperatingWeek,
        roster: list[Employee],
        min_employees_per_shift: int,
    ) -> GeneratedSchedule:
        dates = week_dates(week_start)

        if not roster:
            return GeneratedSchedule(success=False, warnings=[NO_EMPLOYEES_WARNING])

        open_dates = [(d, wd) for d, wd in dates if operating_week[wd].is_open]
        if not open_dates:
            return GeneratedSchedule(success=True, warnings=[NO_OPEN_DAYS_WARNING])

        shifts: list[Shift] = []
        warnings: list[str] = []
        hours_assigned: dict[int, float] = defaultdict(float)
        required = max(min_employees_per_shift, 1)

        for day, weekday in open_dates:
            hours = operating_week[weekday]
            duration = hours.duration_hours

            available = get_available_employees(roster, day, weekday, self.is_available)

            if len(available) < min_employees_per_shift:
                warnings.append(
                    f"{Weekday(weekday).short_name} ({day.isoformat()}): only "
                    f"{len(available)} available, {min_employees_per_shift} required"
                )

            # sorted() is stable: equal hours keep roster order
            ordered = sorted(available, key=lambda e: hours_assigned[e.id])

            for emp in ordered[:min(required, len(ordered))]:
                shifts.append(Shift(
                    id=f"shift-{len(shifts) + 1}",
                    employee_id=emp.id,
                    employee_name=emp.name,
                    date=day,
                    day_of_week=weekday,
                    start_time=hours.opens_at,
                    end_time=hours.closes_at,
                    status=ShiftStatus.SCHEDULED,
                ))
                hours_assigned[emp.id] += duration

        logger.debug(
            f"Assigned {len(shifts)} shifts over {len(open_dates)} open days "
            f"for week of {week_start.isoformat()}"
        )
        return GeneratedSchedule(success=True, shifts=shifts, warnings=warnings)


def generate_shifts(
    week_start: date,
    operating_week: OperatingWeek,
    roster: list[Employee],
    min_employees_per_shift: int,
) -> GeneratedSchedule:
    """Convenience wrapper around ShiftAssigner with the default availability check."""
    return ShiftAssigner().generate(week_start, operating_week, roster, min_employees_per_shift)
