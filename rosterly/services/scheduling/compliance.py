"""
Labor compliance checks for a week of shifts.
Works on any shift list, generated or manually edited, and never mutates it.

Rules, reported in this order:
- understaffed day (error)
- no weekly rest day (error)
- excessive consecutive days (error) / max consecutive days reached (warning)
- insufficient rest between shifts (warning)
- excessive weekly hours (warning)
"""

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Optional

from .types import (
    ComplianceIssue,
    ComplianceRule,
    ComplianceRules,
    IssueSeverity,
    OperatingWeek,
    Shift,
    ValidationResult,
    Weekday,
)
from .timeutils import week_dates, weekday_of


@dataclass
class EmployeeWeek:
    """Per-employee view of the shift list."""
    employee_id: int
    employee_name: str
    shifts: list[Shift] = field(default_factory=list)
    work_dates: list[date] = field(default_factory=list)  # sorted, distinct
    hours_worked: float = 0.0


def group_shifts_by_employee(shifts: list[Shift]) -> dict[int, EmployeeWeek]:
    """Group by employee in first-appearance order, keeping each employee's shift order."""
    grouped: dict[int, EmployeeWeek] = {}
    for shift in shifts:
        info = grouped.get(shift.employee_id)
        if info is None:
            info = EmployeeWeek(employee_id=shift.employee_id, employee_name=shift.employee_name)
            grouped[shift.employee_id] = info
        info.shifts.append(shift)
        info.hours_worked += shift.duration_hours

    for info in grouped.values():
        info.work_dates = sorted({s.date for s in info.shifts})
    return grouped


def group_shifts_by_date(shifts: list[Shift]) -> dict[date, list[Shift]]:
    grouped: dict[date, list[Shift]] = {}
    for shift in shifts:
        grouped.setdefault(shift.date, []).append(shift)
    return grouped


def longest_consecutive_run(work_dates: list[date]) -> int:
    """Longest run of calendar-consecutive dates in a sorted distinct list."""
    if not work_dates:
        return 0
    longest = current = 1
    for prev, curr in zip(work_dates, work_dates[1:]):
        if curr - prev == timedelta(days=1):
            current += 1
            longest = max(longest, current)
        else:
            current = 1
    return longest


def rest_gaps(shifts: list[Shift]) -> list[tuple[Shift, Shift, float]]:
    """
    (previous, next, hours between) for chronologically adjacent shifts.
    The previous shift's end is pushed a day forward when it crosses midnight.
    """
    ordered = sorted(shifts, key=lambda s: s.start_datetime)
    gaps = []
    for prev, curr in zip(ordered, ordered[1:]):
        hours = (curr.start_datetime - prev.end_datetime).total_seconds() / 3600
        gaps.append((prev, curr, hours))
    return gaps


def check_understaffed_days(
    shifts_by_date: dict[date, list[Shift]],
    operating_week: OperatingWeek,
    min_employees_per_shift: int,
    week_start: Optional[date] = None,
) -> list[ComplianceIssue]:
    if week_start is not None:
        dates = [d for d, _ in week_dates(week_start)]
    else:
        dates = list(shifts_by_date)

    issues = []
    for day in dates:
        weekday = weekday_of(day)
        if not operating_week[weekday].is_open:
            continue

        employee_count = len({s.employee_id for s in shifts_by_date.get(day, [])})
        if employee_count < min_employees_per_shift:
            issues.append(ComplianceIssue(
                kind=ComplianceRule.UNDERSTAFFED,
                severity=IssueSeverity.ERROR,
                message=(
                    f"{Weekday(weekday).name.title()} ({day.isoformat()}): needs "
                    f"{min_employees_per_shift} employee(s), has only {employee_count}"
                ),
                on_date=day,
            ))
    return issues


def check_weekly_rest(employees: list[EmployeeWeek], rules: ComplianceRules) -> list[ComplianceIssue]:
    issues = []
    for info in employees:
        days_worked = len(info.work_dates)
        if days_worked > rules.max_work_days:
            issues.append(ComplianceIssue(
                kind=ComplianceRule.NO_WEEKLY_REST,
                severity=IssueSeverity.ERROR,
                message=f"{info.employee_name} has no weekly rest day (works {days_worked} days)",
                employee_id=info.employee_id,
                employee_name=info.employee_name,
            ))
    return issues


def check_consecutive_days(
    employees: list[EmployeeWeek],
    rules: ComplianceRules,
) -> tuple[list[ComplianceIssue], list[ComplianceIssue]]:
    """Returns (errors, warnings)."""
    errors, warnings = [], []
    limit = rules.max_consecutive_days
    for info in employees:
        run = longest_consecutive_run(info.work_dates)
        if run > limit:
            errors.append(ComplianceIssue(
                kind=ComplianceRule.EXCESSIVE_CONSECUTIVE_DAYS,
                severity=IssueSeverity.ERROR,
                message=f"{info.employee_name} works {run} consecutive days (maximum {limit})",
                employee_id=info.employee_id,
                employee_name=info.employee_name,
            ))
        elif run == limit:
            warnings.append(ComplianceIssue(
                kind=ComplianceRule.MAX_CONSECUTIVE_DAYS,
                severity=IssueSeverity.WARNING,
                message=f"{info.employee_name} works {run} consecutive days (at the limit)",
                employee_id=info.employee_id,
                employee_name=info.employee_name,
            ))
    return errors, warnings


def check_inter_shift_rest(employees: list[EmployeeWeek], rules: ComplianceRules) -> list[ComplianceIssue]:
    issues = []
    minimum = rules.min_inter_shift_rest_hours
    for info in employees:
        for prev, curr, hours in rest_gaps(info.shifts):
            # overlapping or back-to-back shifts are not a rest problem
            if 0 < hours < minimum:
                issues.append(ComplianceIssue(
                    kind=ComplianceRule.INSUFFICIENT_INTER_SHIFT_REST,
                    severity=IssueSeverity.WARNING,
                    message=(
                        f"{info.employee_name}: only {hours:g}h rest between shifts on "
                        f"{prev.date.isoformat()} and {curr.date.isoformat()} (minimum {minimum:g}h)"
                    ),
                    employee_id=info.employee_id,
                    employee_name=info.employee_name,
                    on_date=curr.date,
                ))
    return issues


def check_weekly_hours(employees: list[EmployeeWeek], rules: ComplianceRules) -> list[ComplianceIssue]:
    issues = []
    for info in employees:
        if info.hours_worked > rules.max_weekly_hours:
            issues.append(ComplianceIssue(
                kind=ComplianceRule.EXCESSIVE_WEEKLY_HOURS,
                severity=IssueSeverity.WARNING,
                message=(
                    f"{info.employee_name} works {info.hours_worked:g}h this week "
                    f"(limit {rules.max_weekly_hours:g}h)"
                ),
                employee_id=info.employee_id,
                employee_name=info.employee_name,
            ))
    return issues


class ComplianceValidator:
    """
    Validates a shift list against the labor rules.

    Stateless apart from its thresholds; safe to share between callers.
    """

    def __init__(self, rules: Optional[ComplianceRules] = None):
        self.rules = rules or ComplianceRules()

    def validate(
        self,
        shifts: list[Shift],
        operating_week: OperatingWeek,
        min_employees_per_shift: int,
        week_start: Optional[date] = None,
    ) -> ValidationResult:
        """
        Args:
            shifts: the week's shifts, in any order
            operating_week: opening hours by weekday
            min_employees_per_shift: staffing floor for every open day
            week_start: when given, every date of that week is checked for
                staffing, including open days that have no shifts at all;
                otherwise only dates that appear in `shifts` are checked

        Returns:
            ValidationResult; `is_valid` ignores warnings
        """
        shifts = list(shifts)
        employees = list(group_shifts_by_employee(shifts).values())
        shifts_by_date = group_shifts_by_date(shifts)

        consecutive_errors, consecutive_warnings = check_consecutive_days(employees, self.rules)

        errors = (
            check_understaffed_days(shifts_by_date, operating_week, min_employees_per_shift, week_start)
            + check_weekly_rest(employees, self.rules)
            + consecutive_errors
        )
        warnings = (
            consecutive_warnings
            + check_inter_shift_rest(employees, self.rules)
            + check_weekly_hours(employees, self.rules)
        )

        return ValidationResult(is_valid=not errors, errors=errors, warnings=warnings)


def validate_schedule(
    shifts: list[Shift],
    operating_week: OperatingWeek,
    min_employees_per_shift: int,
    week_start: Optional[date] = None,
    rules: Optional[ComplianceRules] = None,
) -> ValidationResult:
    return ComplianceValidator(rules).validate(
        shifts, operating_week, min_employees_per_shift, week_start
    )
