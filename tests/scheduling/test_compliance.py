import pytest
from datetime import date, time, timedelta

from rosterly.services.scheduling.types import (
    ComplianceRule,
    ComplianceRules,
    IssueSeverity,
)
from rosterly.services.scheduling.compliance import (
    ComplianceValidator,
    group_shifts_by_employee,
    longest_consecutive_run,
    rest_gaps,
    validate_schedule,
)

from conftest import get_test_monday, make_shift, shifts_every_day


def kinds(issues) -> list[ComplianceRule]:
    return [issue.kind for issue in issues]


class TestHelpers:
    def test_longest_run_empty(self):
        assert longest_consecutive_run([]) == 0

    def test_longest_run_with_gap(self):
        monday = get_test_monday()
        dates = [monday, monday + timedelta(days=1), monday + timedelta(days=3),
                 monday + timedelta(days=4), monday + timedelta(days=5)]
        assert longest_consecutive_run(dates) == 3

    def test_group_by_employee_keeps_first_appearance(self):
        monday = get_test_monday()
        shifts = [make_shift("a", 2, monday), make_shift("b", 1, monday), make_shift("c", 2, monday + timedelta(days=1))]
        grouped = group_shifts_by_employee(shifts)
        assert list(grouped) == [2, 1]
        assert [s.id for s in grouped[2].shifts] == ["a", "c"]
        assert grouped[2].hours_worked == 18.0

    def test_rest_gaps_sorted_chronologically(self):
        monday = get_test_monday()
        later = make_shift("later", 1, monday + timedelta(days=1))
        earlier = make_shift("earlier", 1, monday)
        gaps = rest_gaps([later, earlier])
        assert len(gaps) == 1
        prev, curr, hours = gaps[0]
        assert (prev.id, curr.id, hours) == ("earlier", "later", 15.0)


class TestUnderstaffed:
    def test_counts_distinct_employees(self, weekday_hours):
        monday = get_test_monday()
        shifts = [
            make_shift("a", 1, monday, time(9, 0), time(12, 0)),
            make_shift("b", 1, monday, time(13, 0), time(18, 0)),
        ]
        result = validate_schedule(shifts, weekday_hours, 2)
        assert kinds(result.errors) == [ComplianceRule.UNDERSTAFFED]
        assert result.errors[0].message == "Monday (2025-01-06): needs 2 employee(s), has only 1"

    def test_closed_day_ignored(self, weekday_hours):
        saturday = get_test_monday() + timedelta(days=5)
        result = validate_schedule([make_shift("a", 1, saturday)], weekday_hours, 2)
        assert result.errors == []

    def test_only_dates_with_shifts_without_week(self, weekday_hours):
        monday = get_test_monday()
        shifts = [make_shift("a", 1, monday), make_shift("b", 2, monday)]
        result = validate_schedule(shifts, weekday_hours, 2)
        assert result.is_valid is True

    def test_whole_week_checked_with_week_start(self, weekday_hours):
        monday = get_test_monday()
        shifts = [make_shift("a", 1, monday), make_shift("b", 2, monday)]
        result = validate_schedule(shifts, weekday_hours, 2, week_start=monday)
        assert result.is_valid is False
        assert [e.on_date for e in result.errors] == [monday + timedelta(days=i) for i in range(1, 5)]
        assert "has only 0" in result.errors[0].message


class TestWeeklyRestAndConsecutiveDays:
    def test_scenario_c_seven_days(self, all_week_hours):
        result = validate_schedule(shifts_every_day(1, 7), all_week_hours, 1)
        assert kinds(result.errors) == [
            ComplianceRule.NO_WEEKLY_REST,
            ComplianceRule.EXCESSIVE_CONSECUTIVE_DAYS,
        ]
        assert all(e.employee_id == 1 for e in result.errors)
        assert result.errors[0].message == "Employee 1 has no weekly rest day (works 7 days)"
        assert ComplianceRule.MAX_CONSECUTIVE_DAYS not in kinds(result.warnings)

    def test_six_consecutive_days_is_warning_only(self, all_week_hours):
        result = validate_schedule(shifts_every_day(1, 6), all_week_hours, 1)
        assert result.is_valid is True
        assert ComplianceRule.MAX_CONSECUTIVE_DAYS in kinds(result.warnings)
        assert result.warnings[0].severity == IssueSeverity.WARNING

    def test_five_days_no_issue(self, all_week_hours):
        result = validate_schedule(shifts_every_day(1, 5), all_week_hours, 1)
        assert result.is_valid is True
        assert ComplianceRule.MAX_CONSECUTIVE_DAYS not in kinds(result.warnings)

    def test_run_spanning_week_boundary(self, all_week_hours):
        # Wednesday to the following Tuesday is seven calendar-consecutive days
        start = get_test_monday() + timedelta(days=2)
        result = validate_schedule(shifts_every_day(1, 7, start_day=start), all_week_hours, 1)
        assert ComplianceRule.EXCESSIVE_CONSECUTIVE_DAYS in kinds(result.errors)

    def test_custom_thresholds(self, all_week_hours):
        rules = ComplianceRules(max_work_days=5, max_consecutive_days=5)
        result = ComplianceValidator(rules).validate(shifts_every_day(1, 6), all_week_hours, 1)
        assert kinds(result.errors) == [
            ComplianceRule.NO_WEEKLY_REST,
            ComplianceRule.EXCESSIVE_CONSECUTIVE_DAYS,
        ]


class TestInterShiftRest:
    def test_exactly_eleven_hours_is_fine(self, all_week_hours):
        monday = get_test_monday()
        shifts = [
            make_shift("a", 1, monday, time(9, 0), time(22, 0)),
            make_shift("b", 1, monday + timedelta(days=1), time(9, 0), time(18, 0)),
        ]
        result = validate_schedule(shifts, all_week_hours, 1)
        assert ComplianceRule.INSUFFICIENT_INTER_SHIFT_REST not in kinds(result.warnings)

    def test_just_under_eleven_hours_warns(self, all_week_hours):
        monday = get_test_monday()
        shifts = [
            make_shift("a", 1, monday, time(9, 0), time(22, 1)),
            make_shift("b", 1, monday + timedelta(days=1), time(9, 0), time(18, 0)),
        ]
        result = validate_schedule(shifts, all_week_hours, 1)
        assert kinds(result.warnings) == [ComplianceRule.INSUFFICIENT_INTER_SHIFT_REST]
        assert result.is_valid is True

    def test_scenario_d_overnight_shift(self, all_week_hours):
        friday = get_test_monday() + timedelta(days=4)
        saturday = friday + timedelta(days=1)
        shifts = [
            make_shift("fri", 1, friday, time(18, 0), time(2, 0), name="Ana"),
            make_shift("sat", 1, saturday, time(10, 0), time(18, 0), name="Ana"),
        ]
        result = validate_schedule(shifts, all_week_hours, 1)
        rest = [w for w in result.warnings if w.kind == ComplianceRule.INSUFFICIENT_INTER_SHIFT_REST]
        assert len(rest) == 1
        assert rest[0].message == (
            "Ana: only 8h rest between shifts on 2025-01-10 and 2025-01-11 (minimum 11h)"
        )
        assert rest[0].on_date == saturday

    def test_overlapping_shifts_not_flagged(self, all_week_hours):
        monday = get_test_monday()
        shifts = [
            make_shift("a", 1, monday, time(9, 0), time(14, 0)),
            make_shift("b", 1, monday, time(12, 0), time(18, 0)),
        ]
        result = validate_schedule(shifts, all_week_hours, 1)
        assert ComplianceRule.INSUFFICIENT_INTER_SHIFT_REST not in kinds(result.warnings)


class TestWeeklyHours:
    def test_over_limit_warns(self, all_week_hours):
        # 5 x 9h = 45h
        result = validate_schedule(shifts_every_day(1, 5), all_week_hours, 1)
        assert kinds(result.warnings) == [ComplianceRule.EXCESSIVE_WEEKLY_HOURS]
        assert result.warnings[0].message == "Employee 1 works 45h this week (limit 44h)"
        assert result.is_valid is True

    def test_overnight_hours_counted(self, all_week_hours):
        # 4 x 11h overnight = 44h, then 1h more
        monday = get_test_monday()
        shifts = [
            make_shift(f"s{i}", 1, monday + timedelta(days=i), time(20, 0), time(7, 0))
            for i in (0, 2, 4, 6)
        ] + [make_shift("extra", 1, monday + timedelta(days=1), time(12, 0), time(13, 0))]
        result = validate_schedule(shifts, all_week_hours, 1)
        assert ComplianceRule.EXCESSIVE_WEEKLY_HOURS in kinds(result.warnings)

    def test_exactly_limit_is_fine(self, all_week_hours):
        monday = get_test_monday()
        shifts = [
            make_shift(f"s{i}", 1, monday + timedelta(days=i), time(8, 0), time(19, 0))
            for i in range(4)
        ]
        result = validate_schedule(shifts, all_week_hours, 1)
        assert ComplianceRule.EXCESSIVE_WEEKLY_HOURS not in kinds(result.warnings)


class TestResultShape:
    def test_validate_is_idempotent(self, weekday_hours):
        shifts = shifts_every_day(1, 7) + shifts_every_day(2, 3)
        first = validate_schedule(shifts, weekday_hours, 2)
        second = validate_schedule(shifts, weekday_hours, 2)
        assert first == second
        assert first.to_dict() == second.to_dict()

    def test_issue_ordering(self, all_week_hours):
        monday = get_test_monday()
        shifts = shifts_every_day(1, 7) + [
            make_shift("late", 2, monday, time(12, 0), time(23, 0)),
            make_shift("early", 2, monday + timedelta(days=1), time(6, 0), time(12, 0)),
        ]
        result = validate_schedule(shifts, all_week_hours, 2, week_start=monday)
        assert kinds(result.errors) == [ComplianceRule.UNDERSTAFFED] * 5 + [
            ComplianceRule.NO_WEEKLY_REST,
            ComplianceRule.EXCESSIVE_CONSECUTIVE_DAYS,
        ]
        assert kinds(result.warnings) == [
            ComplianceRule.INSUFFICIENT_INTER_SHIFT_REST,
            ComplianceRule.EXCESSIVE_WEEKLY_HOURS,
        ]
        assert [w.employee_id for w in result.warnings] == [2, 1]

    def test_to_dict(self, weekday_hours):
        monday = get_test_monday()
        result = validate_schedule([make_shift("a", 1, monday)], weekday_hours, 2)
        data = result.to_dict()
        assert data["is_valid"] is False
        assert data["errors"][0]["kind"] == "understaffed"
        assert data["errors"][0]["severity"] == "error"
        assert data["errors"][0]["date"] == "2025-01-06"
        assert data["warnings"] == []

    def test_input_not_mutated(self, weekday_hours):
        monday = get_test_monday()
        shifts = [make_shift("b", 1, monday + timedelta(days=1)), make_shift("a", 1, monday)]
        snapshot = list(shifts)
        validate_schedule(shifts, weekday_hours, 1)
        assert shifts == snapshot
