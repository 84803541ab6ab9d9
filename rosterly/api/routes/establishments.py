from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from rosterly.api.deps import get_db, to_http_exception
from rosterly.db.models.establishments import Establishments
from rosterly.schemas.establishments import (
    EstablishmentCreate,
    EstablishmentResponse,
    EstablishmentSettingsUpdate,
    OperatingHoursUpdate,
)
from rosterly.services.scheduling import OperatingWeek, ScheduleInputError

router = APIRouter(prefix="/establishments", tags=["establishments"])


def _normalise_operating_hours(raw: dict) -> dict:
    try:
        return OperatingWeek.from_mapping(raw).to_mapping()
    except ScheduleInputError as e:
        raise to_http_exception(e)


@router.post("", response_model=EstablishmentResponse, status_code=status.HTTP_201_CREATED)
def create_establishment(
    payload: EstablishmentCreate,
    db: Session = Depends(get_db),
):
    establishment = Establishments(
        **payload.model_dump(exclude={"operating_hours"}),
        operating_hours=_normalise_operating_hours(payload.operating_hours),
    )
    db.add(establishment)
    db.commit()
    db.refresh(establishment)
    return establishment


@router.get("", response_model=List[EstablishmentResponse])
def list_establishments(
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
):
    return db.query(Establishments).order_by(Establishments.id).offset(skip).limit(limit).all()


@router.get("/{establishment_id}", response_model=EstablishmentResponse)
def get_establishment(
    establishment_id: int,
    db: Session = Depends(get_db),
):
    establishment = db.query(Establishments).filter(Establishments.id == establishment_id).first()
    if not establishment:
        raise HTTPException(status_code=404, detail="Establishment not found")
    return establishment


@router.put("/{establishment_id}/operating-hours", response_model=EstablishmentResponse)
def update_operating_hours(
    establishment_id: int,
    payload: OperatingHoursUpdate,
    db: Session = Depends(get_db),
):
    establishment = db.query(Establishments).filter(Establishments.id == establishment_id).first()
    if not establishment:
        raise HTTPException(status_code=404, detail="Establishment not found")

    establishment.operating_hours = _normalise_operating_hours(payload.operating_hours)
    db.commit()
    db.refresh(establishment)
    return establishment


@router.patch("/{establishment_id}/settings", response_model=EstablishmentResponse)
def update_settings(
    establishment_id: int,
    payload: EstablishmentSettingsUpdate,
    db: Session = Depends(get_db),
):
    establishment = db.query(Establishments).filter(Establishments.id == establishment_id).first()
    if not establishment:
        raise HTTPException(status_code=404, detail="Establishment not found")

    update_data = payload.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(establishment, field, value)

    db.commit()
    db.refresh(establishment)
    return establishment
