import logging
from typing import List
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from rosterly.api.deps import (
    build_orchestrator,
    get_db,
    get_orchestrator,
    get_publish_notifier,
    to_http_exception,
)
from rosterly.db.models.establishments import Establishments
from rosterly.schemas.schedules import (
    GenerateScheduleRequest,
    GenerateScheduleResponse,
    PublishResponse,
    ReplaceShiftsRequest,
    ScheduleEditResponse,
    ScheduleResponse,
    ShiftUpdate,
    ValidationResponse,
)
from rosterly.services.notifications import WhatsAppNotifier
from rosterly.services.scheduling import SchedulingError, Shift, WeekGenerationRequest
from rosterly.services.scheduling.generator import EditOutcome, ScheduleOrchestrator
from rosterly.services.scheduling.repository import SqlScheduleStore
from rosterly.services.scheduling.timeutils import parse_date


logger = logging.getLogger(__name__)

router = APIRouter(tags=["schedules"])


def _edit_response(outcome: EditOutcome) -> ScheduleEditResponse:
    return ScheduleEditResponse(
        schedule=ScheduleResponse.model_validate(outcome.schedule),
        validation=ValidationResponse.model_validate(outcome.validation.to_dict()),
    )


@router.post(
    "/establishments/{establishment_id}/schedules/generate",
    response_model=GenerateScheduleResponse,
    status_code=status.HTTP_201_CREATED,
)
def generate_schedule(
    establishment_id: int,
    payload: GenerateScheduleRequest,
    response: Response,
    orchestrator: ScheduleOrchestrator = Depends(get_orchestrator),
):
    try:
        outcome = orchestrator.generate(
            WeekGenerationRequest(establishment_id=establishment_id, week_start_date=payload.week_start_date)
        )
    except SchedulingError as e:
        raise to_http_exception(e)

    if not outcome.success:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"message": "Could not generate schedule", "warnings": outcome.warnings},
        )

    if outcome.already_existed:
        response.status_code = status.HTTP_200_OK

    return GenerateScheduleResponse(
        success=True,
        already_existed=outcome.already_existed,
        schedule=ScheduleResponse.model_validate(outcome.schedule),
        validation=ValidationResponse.model_validate(outcome.validation.to_dict()) if outcome.validation else None,
        warnings=outcome.warnings,
    )


@router.get("/establishments/{establishment_id}/schedules", response_model=List[ScheduleResponse])
def list_schedules(
    establishment_id: int,
    limit: int = 10,
    db: Session = Depends(get_db),
):
    establishment = db.query(Establishments).filter(Establishments.id == establishment_id).first()
    if not establishment:
        raise HTTPException(status_code=404, detail="Establishment not found")

    schedules = SqlScheduleStore(db).list_for_establishment(establishment_id, limit=limit)
    return [ScheduleResponse.model_validate(s) for s in schedules]


@router.get(
    "/establishments/{establishment_id}/schedules/week/{week_start}",
    response_model=ScheduleResponse,
)
def get_schedule_for_week(
    establishment_id: int,
    week_start: str,
    db: Session = Depends(get_db),
):
    try:
        week_start_date = parse_date(week_start)
    except SchedulingError as e:
        raise to_http_exception(e)

    schedule = SqlScheduleStore(db).find_by_week(establishment_id, week_start_date)
    if not schedule:
        raise HTTPException(status_code=404, detail="No schedule for this week")
    return ScheduleResponse.model_validate(schedule)


@router.get("/schedules/{schedule_id}", response_model=ScheduleResponse)
def get_schedule(
    schedule_id: int,
    db: Session = Depends(get_db),
):
    try:
        schedule = SqlScheduleStore(db).get(schedule_id)
    except SchedulingError as e:
        raise to_http_exception(e)
    return ScheduleResponse.model_validate(schedule)


@router.put("/schedules/{schedule_id}/shifts", response_model=ScheduleEditResponse)
def replace_shifts(
    schedule_id: int,
    payload: ReplaceShiftsRequest,
    orchestrator: ScheduleOrchestrator = Depends(get_orchestrator),
):
    try:
        shifts = [Shift(**s.model_dump()) for s in payload.shifts]
        outcome = orchestrator.replace_shifts(schedule_id, shifts)
    except SchedulingError as e:
        raise to_http_exception(e)
    return _edit_response(outcome)


@router.put("/schedules/{schedule_id}/shifts/{shift_id}", response_model=ScheduleEditResponse)
def update_shift(
    schedule_id: int,
    shift_id: str,
    payload: ShiftUpdate,
    orchestrator: ScheduleOrchestrator = Depends(get_orchestrator),
):
    try:
        outcome = orchestrator.update_shift(schedule_id, shift_id, **payload.model_dump(exclude_unset=True))
    except SchedulingError as e:
        raise to_http_exception(e)
    return _edit_response(outcome)


@router.post("/schedules/{schedule_id}/validate", response_model=ScheduleEditResponse)
def validate_schedule(
    schedule_id: int,
    orchestrator: ScheduleOrchestrator = Depends(get_orchestrator),
):
    try:
        outcome = orchestrator.validate(schedule_id)
    except SchedulingError as e:
        raise to_http_exception(e)
    return _edit_response(outcome)


@router.post("/schedules/{schedule_id}/publish", response_model=PublishResponse)
def publish_schedule(
    schedule_id: int,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    notifier: WhatsAppNotifier = Depends(get_publish_notifier),
):
    orchestrator = build_orchestrator(db, notifier)
    try:
        outcome = orchestrator.publish(schedule_id, dispatch=background_tasks.add_task)
    except SchedulingError as e:
        raise to_http_exception(e)

    return PublishResponse(
        schedule=ScheduleResponse.model_validate(outcome.schedule),
        already_published=outcome.already_published,
        notified_employees=outcome.notified_employees,
    )


@router.post("/schedules/{schedule_id}/archive", response_model=ScheduleResponse)
def archive_schedule(
    schedule_id: int,
    orchestrator: ScheduleOrchestrator = Depends(get_orchestrator),
):
    try:
        schedule = orchestrator.archive(schedule_id)
    except SchedulingError as e:
        raise to_http_exception(e)
    logger.info(f"Schedule {schedule_id} archived via API")
    return ScheduleResponse.model_validate(schedule)
