from typing import Generator, Optional
from fastapi import Depends, HTTPException, status
from sqlalchemy.orm import Session

from rosterly.core.config import settings
from rosterly.db.database import SessionLocal
from rosterly.db.models.establishments import Establishments
from rosterly.db.models.schedules import Schedules
from rosterly.services.notifications import PublishNotifier, WhatsAppNotifier
from rosterly.services.scheduling import (
    ComplianceRules,
    ComplianceValidator,
    EstablishmentNotFoundError,
    InvalidScheduleTransitionError,
    ScheduleConflictError,
    ScheduleInputError,
    ScheduleNotFoundError,
    SchedulingError,
    ShiftNotFoundError,
)
from rosterly.services.scheduling.data_loader import SqlRosterSource, load_employee_phones
from rosterly.services.scheduling.generator import ScheduleOrchestrator
from rosterly.services.scheduling.repository import SqlScheduleStore


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def build_orchestrator(db: Session, notifier: Optional[PublishNotifier] = None) -> ScheduleOrchestrator:
    return ScheduleOrchestrator(
        store=SqlScheduleStore(db),
        roster_source=SqlRosterSource(db),
        validator=ComplianceValidator(ComplianceRules.from_settings(settings)),
        notifier=notifier,
    )


def get_orchestrator(db: Session = Depends(get_db)) -> ScheduleOrchestrator:
    return build_orchestrator(db)


def get_publish_notifier(schedule_id: int, db: Session = Depends(get_db)) -> WhatsAppNotifier:
    """
    Notifier for one schedule, with phones resolved up front so delivery can run
    as a background task after the request session is closed.
    """
    schedule = db.get(Schedules, schedule_id)
    if not schedule:
        raise HTTPException(status_code=404, detail="Schedule not found")

    establishment = db.get(Establishments, schedule.establishment_id)
    employee_ids = sorted({s.employee_id for s in schedule.shifts})
    return WhatsAppNotifier(
        phones=load_employee_phones(db, employee_ids),
        establishment_name=establishment.name if establishment else "Rosterly",
    )


def to_http_exception(e: SchedulingError) -> HTTPException:
    """Map a scheduling service error onto its HTTP status."""
    if isinstance(e, ScheduleInputError):
        return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    if isinstance(e, (EstablishmentNotFoundError, ScheduleNotFoundError, ShiftNotFoundError)):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    if isinstance(e, (InvalidScheduleTransitionError, ScheduleConflictError)):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))
