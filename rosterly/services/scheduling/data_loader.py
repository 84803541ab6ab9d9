"""
Data loader for scheduling service.
Fetches establishments and rosters from the database and converts to internal types.
"""

from datetime import time
from typing import Optional, Protocol

from sqlalchemy import select, and_
from sqlalchemy.orm import Session

from rosterly.db.models.establishments import Establishments
from rosterly.db.models.employees import Employees
from rosterly.db.models.temporary_availability import TemporaryAvailabilities

from .errors import EstablishmentNotFoundError, ScheduleInputError
from .timeutils import parse_time
from .types import (
    ELIGIBLE_EMPLOYEE_STATUSES,
    Employee,
    Establishment,
    OperatingWeek,
    RecurringDayAvailability,
    TemporaryAvailability,
)


class RosterSource(Protocol):
    """Where the orchestrator reads establishment settings and employees from."""

    def load_establishment(self, establishment_id: int) -> Establishment:
        ...

    def load_roster(self, establishment_id: int) -> list[Employee]:
        ...


def _optional_time(value: Optional[str]) -> Optional[time]:
    return parse_time(value) if value else None


def parse_recurring_availability(raw: Optional[dict]) -> dict[int, RecurringDayAvailability]:
    """Convert the stored {"1": {"available": true, ...}} mapping; keys must be weekdays 0-6."""
    result = {}
    for key, value in (raw or {}).items():
        try:
            weekday = int(key)
        except (TypeError, ValueError):
            raise ScheduleInputError(f"Weekday key must be numeric, got {key!r}")
        if not 0 <= weekday <= 6:
            raise ScheduleInputError(f"Weekday key out of range: {key!r}")
        if not isinstance(value, dict):
            raise ScheduleInputError(f"Availability for weekday {key} must be an object, got {value!r}")
        available = value.get("available", True)
        if not isinstance(available, bool):
            raise ScheduleInputError(f"available for weekday {key} must be true or false, got {available!r}")
        result[weekday] = RecurringDayAvailability(
            available=available,
            start_time=_optional_time(value.get("startTime")),
            end_time=_optional_time(value.get("endTime")),
        )
    return result


def to_establishment(row: Establishments) -> Establishment:
    return Establishment(
        id=row.id,
        name=row.name,
        operating_week=OperatingWeek.from_mapping(row.operating_hours),
        min_employees_per_shift=row.min_employees_per_shift,
    )


def to_employee(row: Employees, temporary_rows: list[TemporaryAvailabilities]) -> Employee:
    return Employee(
        id=row.id,
        name=row.name,
        status=row.status,
        recurring_availability=parse_recurring_availability(row.recurring_availability),
        temporary_availability=[
            TemporaryAvailability(
                start_date=t.start_date,
                end_date=t.end_date,
                type=t.type,
                start_time=t.start_time_local,
                end_time=t.end_time_local,
                reason=t.reason,
            )
            for t in temporary_rows
        ],
        unavailable_days=frozenset(int(d) for d in (row.unavailable_days or [])),
        phone=row.phone,
    )


def load_establishment(db: Session, establishment_id: int) -> Establishment:
    row = db.get(Establishments, establishment_id)
    if row is None:
        raise EstablishmentNotFoundError(f"Establishment {establishment_id} not found")
    return to_establishment(row)


def load_roster(db: Session, establishment_id: int) -> list[Employee]:
    """Load schedulable (pending or active) employees in creation order."""

    stmt = select(Employees).where(
        and_(
            Employees.establishment_id == establishment_id,
            Employees.status.in_(ELIGIBLE_EMPLOYEE_STATUSES),
        )
    ).order_by(Employees.id)
    employee_rows = db.execute(stmt).scalars().all()

    if not employee_rows:
        return []

    temp_stmt = select(TemporaryAvailabilities).where(
        TemporaryAvailabilities.employee_id.in_([e.id for e in employee_rows])
    ).order_by(TemporaryAvailabilities.id)
    temporary_by_employee: dict[int, list[TemporaryAvailabilities]] = {}
    for t in db.execute(temp_stmt).scalars().all():
        temporary_by_employee.setdefault(t.employee_id, []).append(t)

    return [to_employee(e, temporary_by_employee.get(e.id, [])) for e in employee_rows]


def load_employee_phones(db: Session, employee_ids: list[int]) -> dict[int, str]:
    """Phone numbers for the given employees, skipping those without one."""
    if not employee_ids:
        return {}
    stmt = select(Employees.id, Employees.phone).where(Employees.id.in_(employee_ids))
    return {emp_id: phone for emp_id, phone in db.execute(stmt).all() if phone}


class SqlRosterSource:
    def __init__(self, db: Session):
        self.db = db

    def load_establishment(self, establishment_id: int) -> Establishment:
        return load_establishment(self.db, establishment_id)

    def load_roster(self, establishment_id: int) -> list[Employee]:
        return load_roster(self.db, establishment_id)
