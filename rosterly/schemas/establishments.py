from pydantic import BaseModel, Field, model_validator
from datetime import datetime
from typing import Optional

from rosterly.core.config import settings


class EstablishmentBase(BaseModel):
    name: str
    type: str = "other"
    # weekday "0" (Sunday) .. "6": {"isOpen": true, "openTime": "09:00", "closeTime": "18:00"}
    operating_hours: dict[str, dict] = Field(default_factory=dict)
    min_employees_per_shift: int = Field(default=settings.DEFAULT_MIN_EMPLOYEES_PER_SHIFT, ge=1)


class EstablishmentCreate(EstablishmentBase):
    pass


class EstablishmentSettingsUpdate(BaseModel):
    name: Optional[str] = None
    type: Optional[str] = None
    min_employees_per_shift: Optional[int] = Field(default=None, ge=1)

    @model_validator(mode="after")
    def reject_explicit_nulls(self) -> "EstablishmentSettingsUpdate":
        # every settings column is NOT NULL; omit a field to leave it unchanged
        nulls = sorted(name for name in self.model_fields_set if getattr(self, name) is None)
        if nulls:
            raise ValueError(f"Fields cannot be null: {', '.join(nulls)}")
        return self


class OperatingHoursUpdate(BaseModel):
    operating_hours: dict[str, dict]


class EstablishmentResponse(EstablishmentBase):
    id: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
