from typing import Optional
from sqlalchemy import Integer, String, DateTime, ForeignKey, JSON, Enum as SQLEnum, func
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime

from rosterly.db.database import Base
from rosterly.services.scheduling.types import EmployeeStatus


class Employees(Base):
    __tablename__ = "employees"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    establishment_id: Mapped[int] = mapped_column(Integer, ForeignKey("establishments.id"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    phone: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    status: Mapped[EmployeeStatus] = mapped_column(
        SQLEnum(EmployeeStatus, name="employee_status_enum", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=EmployeeStatus.PENDING,
    )
    # legacy restriction: weekdays (0=Sunday) the employee never works
    unavailable_days: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    # {"1": {"available": true, "startTime": "09:00", "endTime": "17:00"}, ...}
    recurring_availability: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
