from pydantic import BaseModel, Field, model_validator
from datetime import datetime, date, time
from typing import Optional

from rosterly.services.scheduling.types import EmployeeStatus, TemporaryAvailabilityType


class EmployeeBase(BaseModel):
    name: str
    phone: Optional[str] = None
    status: EmployeeStatus = EmployeeStatus.PENDING
    unavailable_days: list[int] = Field(default_factory=list)  # 0=Sunday


class EmployeeCreate(EmployeeBase):
    pass


class EmployeeUpdate(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None  # null clears the phone
    status: Optional[EmployeeStatus] = None
    unavailable_days: Optional[list[int]] = None

    @model_validator(mode="after")
    def reject_explicit_nulls(self) -> "EmployeeUpdate":
        nulls = sorted(
            name for name in self.model_fields_set - {"phone"} if getattr(self, name) is None
        )
        if nulls:
            raise ValueError(f"Fields cannot be null: {', '.join(nulls)}")
        return self


class EmployeeResponse(EmployeeBase):
    id: int
    establishment_id: int
    recurring_availability: dict[str, dict]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class RecurringDay(BaseModel):
    available: bool = Field(default=True, strict=True)
    start_time: Optional[str] = Field(default=None, alias="startTime")  # HH:MM
    end_time: Optional[str] = Field(default=None, alias="endTime")

    class Config:
        populate_by_name = True


class RecurringAvailabilityUpdate(BaseModel):
    # weekday "0" (Sunday) .. "6"; weekdays left out fall back to the other sources
    days: dict[str, RecurringDay]


class TemporaryAvailabilityBase(BaseModel):
    start_date: date
    end_date: date
    type: TemporaryAvailabilityType
    start_time_local: Optional[time] = None
    end_time_local: Optional[time] = None
    reason: Optional[str] = None


class TemporaryAvailabilityCreate(TemporaryAvailabilityBase):
    pass


class TemporaryAvailabilityResponse(TemporaryAvailabilityBase):
    id: int
    employee_id: int
    created_at: datetime

    class Config:
        from_attributes = True
