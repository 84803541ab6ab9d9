"""
Schedule persistence.

The "one live schedule per establishment and week" rule is enforced by a
partial unique index, so `create` is an atomic conditional insert: a losing
concurrent insert surfaces as ScheduleConflictError instead of a duplicate.
"""

import logging
from datetime import date
from typing import Any, Optional, Protocol

from sqlalchemy import select, and_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from rosterly.db.models.schedules import Schedules, ScheduleShifts

from .errors import ScheduleConflictError, ScheduleNotFoundError
from .types import Schedule, ScheduleStatus, Shift


logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = {"status", "shifts", "validation", "published_at"}


class ScheduleStore(Protocol):
    def find_by_week(self, establishment_id: int, week_start_date: date) -> Optional[Schedule]:
        """The non-archived schedule for the week, if any."""
        ...

    def get(self, schedule_id: int) -> Schedule:
        ...

    def create(self, schedule: Schedule) -> int:
        """Insert and return the new id; raises ScheduleConflictError if the week is taken."""
        ...

    def update(self, schedule_id: int, **fields: Any) -> Schedule:
        ...


def _shift_row(shift: Shift, position: int) -> ScheduleShifts:
    return ScheduleShifts(
        position=position,
        shift_key=shift.id,
        employee_id=shift.employee_id,
        employee_name=shift.employee_name,
        shift_date=shift.date,
        day_of_week=shift.day_of_week,
        start_time_local=shift.start_time,
        end_time_local=shift.end_time,
        status=shift.status,
    )


def to_shift(row: ScheduleShifts) -> Shift:
    return Shift(
        id=row.shift_key,
        employee_id=row.employee_id,
        employee_name=row.employee_name,
        date=row.shift_date,
        day_of_week=row.day_of_week,
        start_time=row.start_time_local,
        end_time=row.end_time_local,
        status=row.status,
    )


def to_schedule(row: Schedules) -> Schedule:
    return Schedule(
        id=row.id,
        establishment_id=row.establishment_id,
        week_start_date=row.week_start_date,
        shifts=tuple(to_shift(s) for s in row.shifts),
        status=row.status,
        generated_by=row.generated_by,
        validation=row.validation,
        published_at=row.published_at,
    )


class SqlScheduleStore:
    def __init__(self, db: Session):
        self.db = db

    def _get_row(self, schedule_id: int) -> Schedules:
        row = self.db.get(Schedules, schedule_id)
        if row is None:
            raise ScheduleNotFoundError(f"Schedule {schedule_id} not found")
        return row

    def find_by_week(self, establishment_id: int, week_start_date: date) -> Optional[Schedule]:
        stmt = select(Schedules).where(
            and_(
                Schedules.establishment_id == establishment_id,
                Schedules.week_start_date == week_start_date,
                Schedules.status != ScheduleStatus.ARCHIVED,
            )
        ).limit(1)
        row = self.db.execute(stmt).scalars().first()
        return to_schedule(row) if row else None

    def list_for_establishment(self, establishment_id: int, limit: int = 10) -> list[Schedule]:
        stmt = (
            select(Schedules)
            .where(Schedules.establishment_id == establishment_id)
            .order_by(Schedules.week_start_date.desc(), Schedules.id.desc())
            .limit(limit)
        )
        return [to_schedule(r) for r in self.db.execute(stmt).scalars().all()]

    def get(self, schedule_id: int) -> Schedule:
        return to_schedule(self._get_row(schedule_id))

    def create(self, schedule: Schedule) -> int:
        row = Schedules(
            establishment_id=schedule.establishment_id,
            week_start_date=schedule.week_start_date,
            week_end_date=schedule.week_end_date,
            status=schedule.status,
            generated_by=schedule.generated_by,
            validation=schedule.validation,
            published_at=schedule.published_at,
            shifts=[_shift_row(s, i) for i, s in enumerate(schedule.shifts)],
        )
        self.db.add(row)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.info(
                f"Schedule insert lost the race for establishment {schedule.establishment_id}, "
                f"week {schedule.week_start_date.isoformat()}"
            )
            raise ScheduleConflictError(schedule.establishment_id, schedule.week_start_date) from e
        self.db.refresh(row)
        return row.id

    def update(self, schedule_id: int, **fields: Any) -> Schedule:
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update schedule fields: {sorted(unknown)}")

        row = self._get_row(schedule_id)
        for name, value in fields.items():
            if name == "shifts":
                row.shifts = [_shift_row(s, i) for i, s in enumerate(value)]
            else:
                setattr(row, name, value)

        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise ScheduleConflictError(row.establishment_id, row.week_start_date) from e
        self.db.refresh(row)
        return to_schedule(row)
