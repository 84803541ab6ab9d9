from pydantic import BaseModel, Field, field_serializer
from datetime import datetime, date, time
from typing import Optional

from rosterly.services.scheduling.timeutils import format_time
from rosterly.services.scheduling.types import ScheduleSource, ScheduleStatus, ShiftStatus


class ShiftSchema(BaseModel):
    id: str
    employee_id: int
    employee_name: str
    date: date
    day_of_week: int  # 0=Sunday, must match date
    start_time: time
    end_time: time  # before start_time means the shift ends the next day
    status: ShiftStatus = ShiftStatus.SCHEDULED

    @field_serializer("start_time", "end_time", when_used="json")
    def serialize_time(self, value: time) -> str:
        return format_time(value)

    class Config:
        from_attributes = True


class ShiftUpdate(BaseModel):
    employee_id: Optional[int] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    status: Optional[ShiftStatus] = None


class ReplaceShiftsRequest(BaseModel):
    shifts: list[ShiftSchema]


class ComplianceIssueSchema(BaseModel):
    kind: str
    severity: str
    message: str
    employee_id: Optional[int] = None
    employee_name: Optional[str] = None
    date: Optional[str] = None  # YYYY-MM-DD


class ValidationResponse(BaseModel):
    is_valid: bool
    errors: list[ComplianceIssueSchema] = Field(default_factory=list)
    warnings: list[ComplianceIssueSchema] = Field(default_factory=list)


class ScheduleResponse(BaseModel):
    id: int
    establishment_id: int
    week_start_date: date
    week_end_date: date
    status: ScheduleStatus
    generated_by: ScheduleSource
    shifts: list[ShiftSchema]
    validation: Optional[dict] = None
    published_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class GenerateScheduleRequest(BaseModel):
    week_start_date: str  # YYYY-MM-DD


class GenerateScheduleResponse(BaseModel):
    success: bool
    already_existed: bool = False
    schedule: Optional[ScheduleResponse] = None
    validation: Optional[ValidationResponse] = None
    warnings: list[str] = Field(default_factory=list)


class ScheduleEditResponse(BaseModel):
    schedule: ScheduleResponse
    validation: ValidationResponse


class PublishResponse(BaseModel):
    schedule: ScheduleResponse
    already_published: bool = False
    notified_employees: int = 0
