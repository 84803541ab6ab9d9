"""
Availability checking utilities.
Determines if an employee can be scheduled on a given calendar day.

Three layered sources are consulted, first match wins:
1. temporary date-range exceptions, in list order
2. the recurring weekly pattern
3. the legacy list of unavailable weekdays
Anything not covered by those is available.
"""

from datetime import date
from typing import Callable, Optional

from .types import (
    Employee,
    TemporaryAvailability,
    TemporaryAvailabilityType,
)


AvailabilityCheck = Callable[[Employee, date, int], bool]


def find_temporary_override(employee: Employee, on_date: date) -> Optional[TemporaryAvailability]:
    """
    First temporary availability entry whose range contains on_date.
    Later overlapping entries are ignored.
    """
    for entry in employee.temporary_availability:
        if entry.covers(on_date):
            return entry
    return None


def is_employee_available(employee: Employee, on_date: date, day_of_week: int) -> bool:
    override = find_temporary_override(employee, on_date)
    if override is not None:
        # custom hours still count as available for the day
        return override.type != TemporaryAvailabilityType.UNAVAILABLE

    recurring = employee.recurring_availability.get(day_of_week)
    if recurring is not None:
        return recurring.available

    if day_of_week in employee.unavailable_days:
        return False

    return True


def get_available_employees(
    roster: list[Employee],
    on_date: date,
    day_of_week: int,
    is_available: AvailabilityCheck = is_employee_available,
) -> list[Employee]:
    """Employees from the roster who may work on_date, in roster order."""
    return [emp for emp in roster if is_available(emp, on_date, day_of_week)]
