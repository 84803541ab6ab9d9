import pytest
from datetime import date, time, timedelta

from rosterly.services.scheduling.types import (
    Employee,
    OperatingHours,
    OperatingWeek,
    Shift,
    CLOSED,
)
from rosterly.services.scheduling.timeutils import weekday_of


def get_test_monday() -> date:
    # returns a fixed Monday for deterministic tests
    return date(2025, 1, 6)


def make_shift(
    shift_id: str,
    employee_id: int,
    day: date,
    start: time = time(9, 0),
    end: time = time(18, 0),
    name: str = None,
) -> Shift:
    return Shift(
        id=shift_id,
        employee_id=employee_id,
        employee_name=name or f"Employee {employee_id}",
        date=day,
        day_of_week=weekday_of(day),
        start_time=start,
        end_time=end,
    )


def shifts_every_day(employee_id: int, days: int, start_day: date = None) -> list[Shift]:
    # one 09:00-18:00 shift per day for `days` consecutive days
    start_day = start_day or get_test_monday()
    return [
        make_shift(f"shift-{employee_id}-{i}", employee_id, start_day + timedelta(days=i))
        for i in range(days)
    ]


@pytest.fixture
def weekday_hours() -> OperatingWeek:
    # open Monday-Friday 09:00-18:00, closed weekends
    open_day = OperatingHours(is_open=True, open_time=time(9, 0), close_time=time(18, 0))
    return OperatingWeek(days=(CLOSED,) + (open_day,) * 5 + (CLOSED,))


@pytest.fixture
def all_week_hours() -> OperatingWeek:
    open_day = OperatingHours(is_open=True, open_time=time(9, 0), close_time=time(18, 0))
    return OperatingWeek(days=(open_day,) * 7)


@pytest.fixture
def three_employees() -> list[Employee]:
    return [
        Employee(id=1, name="Ana"),
        Employee(id=2, name="Bruno"),
        Employee(id=3, name="Carla"),
    ]
