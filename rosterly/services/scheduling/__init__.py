"""
Scheduling service package.

The engine (availability, assigner, compliance) is pure and importable on its own:
    from datetime import date
    from rosterly.services.scheduling import OperatingWeek, generate_shifts, validate_schedule

    week = OperatingWeek.from_mapping(establishment.operating_hours)
    generated = generate_shifts(date(2025, 1, 6), week, roster, min_employees_per_shift=2)
    result = validate_schedule(generated.shifts, week, 2, week_start=date(2025, 1, 6))

Database-backed workflows live in the submodules and are imported explicitly:
    from rosterly.services.scheduling.generator import ScheduleOrchestrator
    from rosterly.services.scheduling.repository import SqlScheduleStore
    from rosterly.services.scheduling.data_loader import SqlRosterSource
"""

from .errors import (
    SchedulingError,
    ScheduleInputError,
    EstablishmentNotFoundError,
    ScheduleNotFoundError,
    ShiftNotFoundError,
    InvalidScheduleTransitionError,
    ScheduleConflictError,
)
from .types import (
    Weekday,
    EmployeeStatus,
    TemporaryAvailabilityType,
    ShiftStatus,
    ScheduleStatus,
    ScheduleSource,
    ComplianceRule,
    IssueSeverity,
    OperatingHours,
    OperatingWeek,
    RecurringDayAvailability,
    TemporaryAvailability,
    Employee,
    Establishment,
    Shift,
    Schedule,
    ComplianceIssue,
    ComplianceRules,
    ValidationResult,
    GeneratedSchedule,
    WeekGenerationRequest,
)
from .availability import is_employee_available, find_temporary_override, get_available_employees
from .assigner import ShiftAssigner, ShiftAssignmentStrategy, generate_shifts
from .compliance import ComplianceValidator, validate_schedule

__all__ = [
    # Errors
    "SchedulingError",
    "ScheduleInputError",
    "EstablishmentNotFoundError",
    "ScheduleNotFoundError",
    "ShiftNotFoundError",
    "InvalidScheduleTransitionError",
    "ScheduleConflictError",
    # Types
    "Weekday",
    "EmployeeStatus",
    "TemporaryAvailabilityType",
    "ShiftStatus",
    "ScheduleStatus",
    "ScheduleSource",
    "ComplianceRule",
    "IssueSeverity",
    "OperatingHours",
    "OperatingWeek",
    "RecurringDayAvailability",
    "TemporaryAvailability",
    "Employee",
    "Establishment",
    "Shift",
    "Schedule",
    "ComplianceIssue",
    "ComplianceRules",
    "ValidationResult",
    "GeneratedSchedule",
    "WeekGenerationRequest",
    # Engine entry points
    "is_employee_available",
    "find_temporary_override",
    "get_available_employees",
    "ShiftAssigner",
    "ShiftAssignmentStrategy",
    "generate_shifts",
    "ComplianceValidator",
    "validate_schedule",
]
