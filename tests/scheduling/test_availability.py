import pytest
from datetime import date, time, timedelta

from rosterly.services.scheduling.types import (
    Employee,
    RecurringDayAvailability,
    TemporaryAvailability,
    TemporaryAvailabilityType,
)
from rosterly.services.scheduling.availability import (
    find_temporary_override,
    is_employee_available,
    get_available_employees,
)
from rosterly.services.scheduling.data_loader import parse_recurring_availability
from rosterly.services.scheduling.errors import ScheduleInputError

from conftest import get_test_monday


MONDAY = 1


def temporary(start: date, end: date, kind: TemporaryAvailabilityType, **kwargs) -> TemporaryAvailability:
    return TemporaryAvailability(start_date=start, end_date=end, type=kind, **kwargs)


class TestDefaults:
    def test_no_restrictions_is_available(self):
        emp = Employee(id=1, name="Ana")
        assert is_employee_available(emp, get_test_monday(), MONDAY) is True

    def test_legacy_unavailable_day(self):
        emp = Employee(id=1, name="Ana", unavailable_days=frozenset({MONDAY}))
        assert is_employee_available(emp, get_test_monday(), MONDAY) is False

    def test_legacy_other_day_unaffected(self):
        emp = Employee(id=1, name="Ana", unavailable_days=frozenset({0, 6}))
        assert is_employee_available(emp, get_test_monday(), MONDAY) is True


class TestRecurringAvailability:
    def test_recurring_unavailable(self):
        emp = Employee(
            id=1, name="Ana",
            recurring_availability={MONDAY: RecurringDayAvailability(available=False)},
        )
        assert is_employee_available(emp, get_test_monday(), MONDAY) is False

    def test_recurring_overrides_legacy(self):
        emp = Employee(
            id=1, name="Ana",
            recurring_availability={MONDAY: RecurringDayAvailability(available=True)},
            unavailable_days=frozenset({MONDAY}),
        )
        assert is_employee_available(emp, get_test_monday(), MONDAY) is True

    def test_recurring_for_other_day_falls_through_to_legacy(self):
        emp = Employee(
            id=1, name="Ana",
            recurring_availability={2: RecurringDayAvailability(available=True)},
            unavailable_days=frozenset({MONDAY}),
        )
        assert is_employee_available(emp, get_test_monday(), MONDAY) is False

    def test_parse_stored_mapping(self):
        parsed = parse_recurring_availability({
            "1": {"available": False},
            "2": {"available": True, "startTime": "10:00", "endTime": "16:00"},
        })
        assert parsed[1] == RecurringDayAvailability(available=False)
        assert parsed[2].start_time == time(10, 0)

    @pytest.mark.parametrize("flag", ["false", 0, None])
    def test_parse_rejects_non_boolean_flag(self, flag):
        with pytest.raises(ScheduleInputError):
            parse_recurring_availability({"1": {"available": flag}})


class TestTemporaryAvailability:
    def test_unavailable_range_blocks_day(self):
        monday = get_test_monday()
        emp = Employee(
            id=1, name="Ana",
            temporary_availability=[
                temporary(monday - timedelta(days=2), monday + timedelta(days=2), TemporaryAvailabilityType.UNAVAILABLE),
            ],
        )
        assert is_employee_available(emp, monday, MONDAY) is False

    def test_range_bounds_are_inclusive(self):
        monday = get_test_monday()
        emp = Employee(
            id=1, name="Ana",
            temporary_availability=[temporary(monday, monday, TemporaryAvailabilityType.UNAVAILABLE)],
        )
        assert is_employee_available(emp, monday, MONDAY) is False
        assert is_employee_available(emp, monday + timedelta(days=1), 2) is True

    def test_available_overrides_recurring_and_legacy(self):
        monday = get_test_monday()
        emp = Employee(
            id=1, name="Ana",
            recurring_availability={MONDAY: RecurringDayAvailability(available=False)},
            temporary_availability=[temporary(monday, monday, TemporaryAvailabilityType.AVAILABLE)],
            unavailable_days=frozenset({MONDAY}),
        )
        assert is_employee_available(emp, monday, MONDAY) is True

    def test_custom_counts_as_available(self):
        monday = get_test_monday()
        emp = Employee(
            id=1, name="Ana",
            recurring_availability={MONDAY: RecurringDayAvailability(available=False)},
            temporary_availability=[
                temporary(monday, monday, TemporaryAvailabilityType.CUSTOM,
                          start_time=time(14, 0), end_time=time(18, 0)),
            ],
        )
        assert is_employee_available(emp, monday, MONDAY) is True

    def test_first_overlapping_entry_wins(self):
        monday = get_test_monday()
        emp = Employee(
            id=1, name="Ana",
            temporary_availability=[
                temporary(monday, monday + timedelta(days=3), TemporaryAvailabilityType.AVAILABLE),
                temporary(monday, monday, TemporaryAvailabilityType.UNAVAILABLE),
            ],
        )
        assert is_employee_available(emp, monday, MONDAY) is True
        assert find_temporary_override(emp, monday).type == TemporaryAvailabilityType.AVAILABLE

    def test_outside_range_is_ignored(self):
        monday = get_test_monday()
        emp = Employee(
            id=1, name="Ana",
            temporary_availability=[
                temporary(monday + timedelta(days=7), monday + timedelta(days=9), TemporaryAvailabilityType.UNAVAILABLE),
            ],
        )
        assert find_temporary_override(emp, monday) is None
        assert is_employee_available(emp, monday, MONDAY) is True

    def test_inverted_range_rejected(self):
        monday = get_test_monday()
        with pytest.raises(ScheduleInputError):
            temporary(monday, monday - timedelta(days=1), TemporaryAvailabilityType.UNAVAILABLE)


class TestGetAvailableEmployees:
    def test_keeps_roster_order(self, three_employees):
        three_employees[1].unavailable_days = frozenset({MONDAY})
        result = get_available_employees(three_employees, get_test_monday(), MONDAY)
        assert [e.id for e in result] == [1, 3]

    def test_custom_check(self, three_employees):
        only_odd = lambda emp, day, weekday: emp.id % 2 == 1
        result = get_available_employees(three_employees, get_test_monday(), MONDAY, only_odd)
        assert [e.id for e in result] == [1, 3]
