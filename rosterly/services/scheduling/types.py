"""
Internal data types for scheduling logic.
decoupled from SQLAlchemy models for cleaner logic.
"""

from dataclasses import dataclass, field
from datetime import date, time, datetime, timedelta
from enum import Enum, IntEnum
from typing import Any, Mapping, Optional

from .errors import ScheduleInputError
from .timeutils import format_time, parse_time, span_hours, weekday_of


DEFAULT_OPEN_TIME = time(9, 0)
DEFAULT_CLOSE_TIME = time(18, 0)


class Weekday(IntEnum):
    SUNDAY = 0
    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6

    @property
    def short_name(self) -> str:
        return self.name[:3].title()


class EmployeeStatus(str, Enum):
    PENDING = "pending"
    ACTIVE = "active"
    INACTIVE = "inactive"


ELIGIBLE_EMPLOYEE_STATUSES = (EmployeeStatus.PENDING, EmployeeStatus.ACTIVE)


class TemporaryAvailabilityType(str, Enum):
    UNAVAILABLE = "unavailable"
    AVAILABLE = "available"
    CUSTOM = "custom"  # hours are informational only


class ShiftStatus(str, Enum):
    SCHEDULED = "scheduled"
    SWAP_PENDING = "swap_pending"
    ABSENT = "absent"
    COVERED = "covered"


class ScheduleStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class ScheduleSource(str, Enum):
    ENGINE = "engine"
    MANUAL = "manual"


class ComplianceRule(str, Enum):
    UNDERSTAFFED = "understaffed"
    NO_WEEKLY_REST = "no_weekly_rest"
    EXCESSIVE_CONSECUTIVE_DAYS = "excessive_consecutive_days"
    MAX_CONSECUTIVE_DAYS = "max_consecutive_days"
    INSUFFICIENT_INTER_SHIFT_REST = "insufficient_inter_shift_rest"
    EXCESSIVE_WEEKLY_HOURS = "excessive_weekly_hours"


class IssueSeverity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class OperatingHours:
    is_open: bool
    open_time: Optional[time] = None
    close_time: Optional[time] = None

    @property
    def opens_at(self) -> time:
        return self.open_time or DEFAULT_OPEN_TIME

    @property
    def closes_at(self) -> time:
        return self.close_time or DEFAULT_CLOSE_TIME

    @property
    def duration_hours(self) -> float:
        return span_hours(self.opens_at, self.closes_at)


CLOSED = OperatingHours(is_open=False)


@dataclass(frozen=True)
class OperatingWeek:
    """Opening hours for each weekday, index 0 = Sunday."""
    days: tuple[OperatingHours, ...] = (CLOSED,) * 7

    def __post_init__(self):
        if len(self.days) != 7:
            raise ScheduleInputError(f"Operating week needs 7 days, got {len(self.days)}")

    def __getitem__(self, weekday: int) -> OperatingHours:
        return self.days[weekday]

    @property
    def open_weekdays(self) -> list[int]:
        return [wd for wd, hours in enumerate(self.days) if hours.is_open]

    @classmethod
    def from_mapping(cls, mapping: Optional[Mapping[Any, Any]]) -> "OperatingWeek":
        """
        Build from a weekday-keyed mapping as stored in JSON, e.g.
        {"1": {"isOpen": true, "openTime": "09:00", "closeTime": "18:00"}}.
        Keys must be weekday numbers 0-6; weekdays not present are closed.
        """
        days = [CLOSED] * 7
        for key, value in (mapping or {}).items():
            try:
                weekday = int(key)
            except (TypeError, ValueError):
                raise ScheduleInputError(f"Weekday key must be numeric, got {key!r}")
            if not 0 <= weekday <= 6:
                raise ScheduleInputError(f"Weekday key out of range: {key!r}")

            if isinstance(value, OperatingHours):
                days[weekday] = value
                continue

            if not isinstance(value, dict):
                raise ScheduleInputError(f"Operating hours for weekday {key} must be an object, got {value!r}")
            is_open = value.get("isOpen", value.get("is_open", False))
            if not isinstance(is_open, bool):
                raise ScheduleInputError(f"isOpen for weekday {key} must be true or false, got {is_open!r}")
            open_time = value.get("openTime", value.get("open_time"))
            close_time = value.get("closeTime", value.get("close_time"))
            days[weekday] = OperatingHours(
                is_open=is_open,
                open_time=parse_time(open_time) if open_time else None,
                close_time=parse_time(close_time) if close_time else None,
            )
        return cls(days=tuple(days))

    def to_mapping(self) -> dict[str, dict]:
        result = {}
        for weekday, hours in enumerate(self.days):
            entry: dict[str, Any] = {"isOpen": hours.is_open}
            if hours.open_time:
                entry["openTime"] = format_time(hours.open_time)
            if hours.close_time:
                entry["closeTime"] = format_time(hours.close_time)
            result[str(weekday)] = entry
        return result


@dataclass(frozen=True)
class RecurringDayAvailability:
    available: bool
    start_time: Optional[time] = None
    end_time: Optional[time] = None


@dataclass(frozen=True)
class TemporaryAvailability:
    start_date: date
    end_date: date
    type: TemporaryAvailabilityType
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    reason: Optional[str] = None

    def __post_init__(self):
        if self.end_date < self.start_date:
            raise ScheduleInputError(
                f"Temporary availability ends ({self.end_date}) before it starts ({self.start_date})"
            )

    def covers(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date


@dataclass
class Employee:
    id: int
    name: str
    status: EmployeeStatus = EmployeeStatus.ACTIVE
    recurring_availability: dict[int, RecurringDayAvailability] = field(default_factory=dict)
    temporary_availability: list[TemporaryAvailability] = field(default_factory=list)
    unavailable_days: frozenset[int] = frozenset()  # legacy restriction, weekdays
    phone: Optional[str] = None


@dataclass(frozen=True)
class Shift:
    """A shift assignment (proposed or final)."""
    id: str
    employee_id: int
    employee_name: str
    date: date
    day_of_week: int
    start_time: time
    end_time: time
    status: ShiftStatus = ShiftStatus.SCHEDULED

    def __post_init__(self):
        if self.day_of_week != weekday_of(self.date):
            raise ScheduleInputError(
                f"Shift {self.id}: day_of_week {self.day_of_week} does not match "
                f"{self.date.isoformat()} (weekday {weekday_of(self.date)})"
            )

    @property
    def crosses_midnight(self) -> bool:
        return self.end_time < self.start_time

    @property
    def duration_hours(self) -> float:
        return span_hours(self.start_time, self.end_time)

    @property
    def start_datetime(self) -> datetime:
        return datetime.combine(self.date, self.start_time)

    @property
    def end_datetime(self) -> datetime:
        end = datetime.combine(self.date, self.end_time)
        if self.crosses_midnight:
            end += timedelta(days=1)
        return end


@dataclass(frozen=True)
class ComplianceIssue:
    kind: ComplianceRule
    severity: IssueSeverity
    message: str
    employee_id: Optional[int] = None
    employee_name: Optional[str] = None
    on_date: Optional[date] = None

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "severity": self.severity.value,
            "message": self.message,
            "employee_id": self.employee_id,
            "employee_name": self.employee_name,
            "date": self.on_date.isoformat() if self.on_date else None,
        }


@dataclass(frozen=True)
class ComplianceRules:
    """Labor thresholds evaluated by the compliance validator."""
    max_work_days: int = 6
    max_consecutive_days: int = 6
    min_inter_shift_rest_hours: float = 11.0
    max_weekly_hours: float = 44.0

    @classmethod
    def from_settings(cls, settings) -> "ComplianceRules":
        return cls(
            max_work_days=settings.MAX_WORK_DAYS_PER_WEEK,
            max_consecutive_days=settings.MAX_CONSECUTIVE_DAYS,
            min_inter_shift_rest_hours=settings.MIN_INTER_SHIFT_REST_HOURS,
            max_weekly_hours=settings.MAX_WEEKLY_HOURS,
        )


@dataclass
class ValidationResult:
    """Output of the compliance validator."""
    is_valid: bool
    errors: list[ComplianceIssue] = field(default_factory=list)
    warnings: list[ComplianceIssue] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "is_valid": self.is_valid,
            "errors": [issue.to_dict() for issue in self.errors],
            "warnings": [issue.to_dict() for issue in self.warnings],
        }


@dataclass
class GeneratedSchedule:
    """Output of a shift assignment strategy."""
    success: bool
    shifts: list[Shift] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


@dataclass
class Establishment:
    id: int
    name: str
    operating_week: OperatingWeek
    min_employees_per_shift: int = 1


@dataclass(frozen=True)
class Schedule:
    establishment_id: int
    week_start_date: date
    shifts: tuple[Shift, ...] = ()
    status: ScheduleStatus = ScheduleStatus.DRAFT
    generated_by: ScheduleSource = ScheduleSource.ENGINE
    id: Optional[int] = None
    validation: Optional[dict] = None
    published_at: Optional[datetime] = None

    @property
    def week_end_date(self) -> date:
        return self.week_start_date + timedelta(days=6)

    def shifts_by_employee(self) -> dict[int, list[Shift]]:
        grouped: dict[int, list[Shift]] = {}
        for shift in self.shifts:
            grouped.setdefault(shift.employee_id, []).append(shift)
        return grouped


@dataclass(frozen=True)
class WeekGenerationRequest:
    establishment_id: int
    week_start_date: str  # YYYY-MM-DD
