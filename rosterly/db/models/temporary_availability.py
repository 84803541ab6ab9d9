from typing import Optional
from datetime import date, datetime, time
from sqlalchemy import Date, DateTime, Enum as SQLEnum, ForeignKey, Integer, String, Time, Index, func
from sqlalchemy.orm import Mapped, mapped_column

from rosterly.db.database import Base
from rosterly.services.scheduling.types import TemporaryAvailabilityType


class TemporaryAvailabilities(Base):
    """Date-range availability exceptions. Creation order (id) is resolution order."""
    __tablename__ = "temporary_availabilities"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    employee_id: Mapped[int] = mapped_column(Integer, ForeignKey("employees.id", ondelete="CASCADE"), nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    type: Mapped[TemporaryAvailabilityType] = mapped_column(
        SQLEnum(TemporaryAvailabilityType, name="temporary_availability_type_enum", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    start_time_local: Mapped[Optional[time]] = mapped_column(Time, nullable=True)
    end_time_local: Mapped[Optional[time]] = mapped_column(Time, nullable=True)
    reason: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        Index("ix_temporary_availabilities_employee_dates", "employee_id", "start_date", "end_date"),
    )
