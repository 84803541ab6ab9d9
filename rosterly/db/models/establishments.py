from sqlalchemy import Integer, String, DateTime, JSON, func
from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column
from rosterly.db.database import Base


class Establishments(Base):
    __tablename__ = "establishments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    type: Mapped[str] = mapped_column(String(20), nullable=False, default="other")
    # {"0": {"isOpen": false}, "1": {"isOpen": true, "openTime": "09:00", "closeTime": "18:00"}, ...}
    operating_hours: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    min_employees_per_shift: Mapped[int] = mapped_column(Integer, nullable=False, default=2)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
