from typing import Optional
from datetime import date, datetime, time
from sqlalchemy import (
    Date, DateTime, Enum as SQLEnum, ForeignKey, Index, Integer, JSON, String, Time, func, text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rosterly.db.database import Base
from rosterly.services.scheduling.types import ScheduleStatus, ScheduleSource, ShiftStatus


class Schedules(Base):
    __tablename__ = "schedules"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    establishment_id: Mapped[int] = mapped_column(Integer, ForeignKey("establishments.id"), nullable=False)
    week_start_date: Mapped[date] = mapped_column(Date, nullable=False)
    week_end_date: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[ScheduleStatus] = mapped_column(
        SQLEnum(ScheduleStatus, name="schedule_status_enum", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    generated_by: Mapped[ScheduleSource] = mapped_column(
        SQLEnum(ScheduleSource, name="schedule_source_enum", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    # last compliance outcome, as ValidationResult.to_dict()
    validation: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)
    published_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    shifts: Mapped[list["ScheduleShifts"]] = relationship(
        back_populates="schedule",
        cascade="all, delete-orphan",
        order_by="ScheduleShifts.position",
    )

    __table_args__ = (
        # at most one live schedule per establishment and week
        Index(
            "uq_schedules_establishment_week_live",
            "establishment_id",
            "week_start_date",
            unique=True,
            postgresql_where=text("status <> 'archived'"),
            sqlite_where=text("status <> 'archived'"),
        ),
    )


class ScheduleShifts(Base):
    __tablename__ = "schedule_shifts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    schedule_id: Mapped[int] = mapped_column(Integer, ForeignKey("schedules.id", ondelete="CASCADE"), nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    shift_key: Mapped[str] = mapped_column(String(40), nullable=False)
    employee_id: Mapped[int] = mapped_column(Integer, ForeignKey("employees.id"), nullable=False)
    employee_name: Mapped[str] = mapped_column(String(100), nullable=False)
    shift_date: Mapped[date] = mapped_column("date", Date, nullable=False)
    day_of_week: Mapped[int] = mapped_column(Integer, nullable=False)  # 0=Sunday
    start_time_local: Mapped[time] = mapped_column(Time, nullable=False)
    end_time_local: Mapped[time] = mapped_column(Time, nullable=False)
    status: Mapped[ShiftStatus] = mapped_column(
        SQLEnum(ShiftStatus, name="shift_status_enum", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )

    schedule: Mapped["Schedules"] = relationship(back_populates="shifts")

    __table_args__ = (
        Index("ix_schedule_shifts_schedule_position", "schedule_id", "position"),
        Index("ix_schedule_shifts_employee_date", "employee_id", "date"),
    )
