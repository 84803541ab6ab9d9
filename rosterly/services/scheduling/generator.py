"""
Schedule generator - main orchestration layer.

Combines data loading, shift assignment, compliance validation and persistence
into the week workflows:
- generate: once per establishment and week, never regenerates a live schedule
- manual edits: replace shifts and re-validate
- publish: draft -> published, then hand the shifts to the notifier
- archive: retire a schedule so the week can be generated again
"""

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime, time, timezone
from typing import Any, Callable, Optional

from rosterly.services.notifications.base import PublishNotifier

from .assigner import ShiftAssigner, ShiftAssignmentStrategy
from .compliance import ComplianceValidator
from .data_loader import RosterSource
from .errors import (
    InvalidScheduleTransitionError,
    ScheduleConflictError,
    ScheduleInputError,
    ShiftNotFoundError,
)
from .repository import ScheduleStore
from .timeutils import parse_date
from .types import (
    Schedule,
    ScheduleSource,
    ScheduleStatus,
    Shift,
    ShiftStatus,
    ValidationResult,
    WeekGenerationRequest,
)


logger = logging.getLogger(__name__)

Dispatch = Callable[..., Any]


@dataclass
class GenerationOutcome:
    success: bool
    schedule: Optional[Schedule] = None
    validation: Optional[ValidationResult] = None  # None when nothing new was validated
    warnings: list[str] = field(default_factory=list)
    already_existed: bool = False


@dataclass
class EditOutcome:
    schedule: Schedule
    validation: ValidationResult


@dataclass
class PublishOutcome:
    schedule: Schedule
    already_published: bool = False
    notified_employees: int = 0


def _run_inline(fn: Callable[..., Any], *args: Any) -> None:
    fn(*args)


class ScheduleOrchestrator:

    def __init__(
        self,
        store: ScheduleStore,
        roster_source: RosterSource,
        assigner: Optional[ShiftAssignmentStrategy] = None,
        validator: Optional[ComplianceValidator] = None,
        notifier: Optional[PublishNotifier] = None,
    ):
        self.store = store
        self.roster_source = roster_source
        self.assigner = assigner or ShiftAssigner()
        self.validator = validator or ComplianceValidator()
        self.notifier = notifier

    def generate(self, request: WeekGenerationRequest) -> GenerationOutcome:
        """
        Generate the draft schedule for an establishment's week.

        An existing non-archived schedule for the week is returned unchanged.
        Compliance errors do not block saving: the draft is stored so a manager
        can fix it, and the issues come back in the outcome.

        Raises:
            ScheduleInputError: malformed week date or stored settings
            EstablishmentNotFoundError: unknown establishment
        """
        week_start = parse_date(request.week_start_date)
        establishment_id = request.establishment_id

        existing = self.store.find_by_week(establishment_id, week_start)
        if existing is not None:
            logger.info(
                f"Schedule {existing.id} already exists for establishment {establishment_id}, "
                f"week {week_start.isoformat()}"
            )
            return GenerationOutcome(success=True, schedule=existing, already_existed=True)

        establishment = self.roster_source.load_establishment(establishment_id)
        roster = self.roster_source.load_roster(establishment_id)

        logger.info(
            f"Generating schedule for establishment {establishment_id}, week {week_start.isoformat()}, "
            f"{len(roster)} employees"
        )

        generated = self.assigner.generate(
            week_start,
            establishment.operating_week,
            roster,
            establishment.min_employees_per_shift,
        )
        if not generated.success:
            logger.warning(
                f"Generation failed for establishment {establishment_id}: {'; '.join(generated.warnings)}"
            )
            return GenerationOutcome(success=False, warnings=list(generated.warnings))

        validation = self.validator.validate(
            generated.shifts,
            establishment.operating_week,
            establishment.min_employees_per_shift,
            week_start=week_start,
        )
        warnings = list(generated.warnings) + [w.message for w in validation.warnings]

        schedule = Schedule(
            establishment_id=establishment_id,
            week_start_date=week_start,
            shifts=tuple(generated.shifts),
            status=ScheduleStatus.DRAFT,
            generated_by=ScheduleSource.ENGINE,
            validation={**validation.to_dict(), "generation_warnings": list(generated.warnings)},
        )

        try:
            schedule_id = self.store.create(schedule)
        except ScheduleConflictError:
            winner = self.store.find_by_week(establishment_id, week_start)
            if winner is None:
                raise
            return GenerationOutcome(success=True, schedule=winner, already_existed=True)

        logger.info(
            f"Schedule {schedule_id} created: {len(schedule.shifts)} shifts, "
            f"{len(validation.errors)} errors, {len(warnings)} warnings"
        )
        return GenerationOutcome(
            success=True,
            schedule=replace(schedule, id=schedule_id),
            validation=validation,
            warnings=warnings,
        )

    def validate(self, schedule_id: int) -> EditOutcome:
        """Re-run compliance on the stored shifts and keep the result with the schedule."""
        schedule = self.store.get(schedule_id)
        return self._save_shifts(schedule, list(schedule.shifts), shifts_changed=False)

    def replace_shifts(self, schedule_id: int, shifts: list[Shift]) -> EditOutcome:
        schedule = self._get_editable(schedule_id)
        roster_ids = {e.id for e in self.roster_source.load_roster(schedule.establishment_id)}
        seen_ids: set[str] = set()
        for shift in shifts:
            if shift.id in seen_ids:
                raise ScheduleInputError(f"Duplicate shift id {shift.id}")
            seen_ids.add(shift.id)
            if shift.employee_id not in roster_ids:
                raise ScheduleInputError(f"Shift {shift.id}: employee {shift.employee_id} is not on the roster")
            if not schedule.week_start_date <= shift.date <= schedule.week_end_date:
                raise ScheduleInputError(
                    f"Shift {shift.id} on {shift.date.isoformat()} is outside the week "
                    f"{schedule.week_start_date.isoformat()} - {schedule.week_end_date.isoformat()}"
                )
        return self._save_shifts(schedule, shifts)

    def update_shift(
        self,
        schedule_id: int,
        shift_id: str,
        employee_id: Optional[int] = None,
        start_time: Optional[time] = None,
        end_time: Optional[time] = None,
        status: Optional[ShiftStatus] = None,
    ) -> EditOutcome:
        schedule = self._get_editable(schedule_id)

        index = next((i for i, s in enumerate(schedule.shifts) if s.id == shift_id), None)
        if index is None:
            raise ShiftNotFoundError(f"Shift {shift_id} not found in schedule {schedule_id}")

        current = schedule.shifts[index]
        changes: dict[str, Any] = {}
        if employee_id is not None and employee_id != current.employee_id:
            roster = {e.id: e for e in self.roster_source.load_roster(schedule.establishment_id)}
            employee = roster.get(employee_id)
            if employee is None:
                raise ScheduleInputError(f"Employee {employee_id} is not on the roster")
            changes["employee_id"] = employee.id
            changes["employee_name"] = employee.name
        if start_time is not None:
            changes["start_time"] = start_time
        if end_time is not None:
            changes["end_time"] = end_time
        if status is not None:
            changes["status"] = status

        shifts = list(schedule.shifts)
        shifts[index] = replace(current, **changes)
        return self._save_shifts(schedule, shifts)

    def publish(self, schedule_id: int, dispatch: Optional[Dispatch] = None) -> PublishOutcome:
        """
        Move a draft to published. Validation is not re-run.

        The notification is handed to `dispatch(fn, *args)` (e.g. a background
        task queue); by default it runs inline. Notifier failures are logged only.
        """
        schedule = self.store.get(schedule_id)
        if schedule.status == ScheduleStatus.PUBLISHED:
            return PublishOutcome(schedule=schedule, already_published=True)
        if schedule.status == ScheduleStatus.ARCHIVED:
            raise InvalidScheduleTransitionError(f"Schedule {schedule_id} is archived")

        published = self.store.update(
            schedule_id,
            status=ScheduleStatus.PUBLISHED,
            published_at=datetime.now(timezone.utc),
        )
        per_employee = published.shifts_by_employee()
        logger.info(f"Schedule {schedule_id} published, {len(per_employee)} employees scheduled")

        if self.notifier is not None and per_employee:
            (dispatch or _run_inline)(self.notify_published, published, per_employee)

        return PublishOutcome(schedule=published, notified_employees=len(per_employee))

    def notify_published(self, schedule: Schedule, per_employee: dict[int, list[Shift]]) -> None:
        try:
            self.notifier.notify_published(schedule, per_employee)
        except Exception:
            logger.exception(f"Publish notification failed for schedule {schedule.id}")

    def archive(self, schedule_id: int) -> Schedule:
        schedule = self.store.get(schedule_id)
        if schedule.status == ScheduleStatus.ARCHIVED:
            raise InvalidScheduleTransitionError(f"Schedule {schedule_id} is already archived")
        logger.info(f"Archiving schedule {schedule_id}")
        return self.store.update(schedule_id, status=ScheduleStatus.ARCHIVED)

    def _get_editable(self, schedule_id: int) -> Schedule:
        schedule = self.store.get(schedule_id)
        if schedule.status == ScheduleStatus.ARCHIVED:
            raise InvalidScheduleTransitionError(f"Schedule {schedule_id} is archived and cannot be edited")
        return schedule

    def _save_shifts(self, schedule: Schedule, shifts: list[Shift], shifts_changed: bool = True) -> EditOutcome:
        establishment = self.roster_source.load_establishment(schedule.establishment_id)
        validation = self.validator.validate(
            shifts,
            establishment.operating_week,
            establishment.min_employees_per_shift,
            week_start=schedule.week_start_date,
        )
        fields: dict[str, Any] = {"validation": validation.to_dict()}
        if shifts_changed:
            fields["shifts"] = tuple(shifts)
        updated = self.store.update(schedule.id, **fields)
        return EditOutcome(schedule=updated, validation=validation)
