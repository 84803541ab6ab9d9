from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from rosterly.api.deps import get_db, to_http_exception
from rosterly.db.models.employees import Employees
from rosterly.db.models.establishments import Establishments
from rosterly.db.models.temporary_availability import TemporaryAvailabilities
from rosterly.schemas.employees import (
    EmployeeCreate,
    EmployeeResponse,
    EmployeeUpdate,
    RecurringAvailabilityUpdate,
    TemporaryAvailabilityCreate,
    TemporaryAvailabilityResponse,
)
from rosterly.services.scheduling import ScheduleInputError, TemporaryAvailability
from rosterly.services.scheduling.data_loader import parse_recurring_availability

router = APIRouter(tags=["employees"])


def _check_weekdays(days: list[int]) -> None:
    invalid = [d for d in days if not 0 <= d <= 6]
    if invalid:
        raise HTTPException(status_code=422, detail=f"Weekdays must be 0-6, got {invalid}")


def _get_employee(db: Session, employee_id: int) -> Employees:
    employee = db.query(Employees).filter(Employees.id == employee_id).first()
    if not employee:
        raise HTTPException(status_code=404, detail="Employee not found")
    return employee


@router.post(
    "/establishments/{establishment_id}/employees",
    response_model=EmployeeResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_employee(
    establishment_id: int,
    payload: EmployeeCreate,
    db: Session = Depends(get_db),
):
    establishment = db.query(Establishments).filter(Establishments.id == establishment_id).first()
    if not establishment:
        raise HTTPException(status_code=404, detail="Establishment not found")
    _check_weekdays(payload.unavailable_days)

    employee = Employees(establishment_id=establishment_id, **payload.model_dump())
    db.add(employee)
    db.commit()
    db.refresh(employee)
    return employee


@router.get("/establishments/{establishment_id}/employees", response_model=List[EmployeeResponse])
def list_employees(
    establishment_id: int,
    db: Session = Depends(get_db),
):
    establishment = db.query(Establishments).filter(Establishments.id == establishment_id).first()
    if not establishment:
        raise HTTPException(status_code=404, detail="Establishment not found")

    return db.query(Employees).filter(
        Employees.establishment_id == establishment_id
    ).order_by(Employees.id).all()


@router.patch("/employees/{employee_id}", response_model=EmployeeResponse)
def update_employee(
    employee_id: int,
    payload: EmployeeUpdate,
    db: Session = Depends(get_db),
):
    employee = _get_employee(db, employee_id)

    update_data = payload.model_dump(exclude_unset=True)
    if update_data.get("unavailable_days") is not None:
        _check_weekdays(update_data["unavailable_days"])
    for field, value in update_data.items():
        setattr(employee, field, value)

    db.commit()
    db.refresh(employee)
    return employee


@router.put("/employees/{employee_id}/availability/recurring", response_model=EmployeeResponse)
def set_recurring_availability(
    employee_id: int,
    payload: RecurringAvailabilityUpdate,
    db: Session = Depends(get_db),
):
    employee = _get_employee(db, employee_id)

    raw = {
        key: day.model_dump(by_alias=True, exclude_none=True)
        for key, day in payload.days.items()
    }
    try:
        parse_recurring_availability(raw)
    except ScheduleInputError as e:
        raise to_http_exception(e)

    employee.recurring_availability = raw
    db.commit()
    db.refresh(employee)
    return employee


@router.post(
    "/employees/{employee_id}/availability/temporary",
    response_model=TemporaryAvailabilityResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_temporary_availability(
    employee_id: int,
    payload: TemporaryAvailabilityCreate,
    db: Session = Depends(get_db),
):
    employee = _get_employee(db, employee_id)

    try:
        TemporaryAvailability(
            start_date=payload.start_date,
            end_date=payload.end_date,
            type=payload.type,
        )
    except ScheduleInputError as e:
        raise to_http_exception(e)

    entry = TemporaryAvailabilities(employee_id=employee.id, **payload.model_dump())
    db.add(entry)
    db.commit()
    db.refresh(entry)
    return entry


@router.get(
    "/employees/{employee_id}/availability/temporary",
    response_model=List[TemporaryAvailabilityResponse],
)
def list_temporary_availability(
    employee_id: int,
    db: Session = Depends(get_db),
):
    _get_employee(db, employee_id)
    return db.query(TemporaryAvailabilities).filter(
        TemporaryAvailabilities.employee_id == employee_id
    ).order_by(TemporaryAvailabilities.id).all()


@router.delete(
    "/employees/{employee_id}/availability/temporary/{entry_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
def delete_temporary_availability(
    employee_id: int,
    entry_id: int,
    db: Session = Depends(get_db),
):
    entry = db.query(TemporaryAvailabilities).filter(
        TemporaryAvailabilities.id == entry_id,
        TemporaryAvailabilities.employee_id == employee_id,
    ).first()
    if not entry:
        raise HTTPException(status_code=404, detail="Availability entry not found")

    db.delete(entry)
    db.commit()
