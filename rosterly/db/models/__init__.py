from rosterly.db.database import Base

# Import models
from rosterly.db.models.establishments import Establishments
from rosterly.db.models.employees import Employees
from rosterly.db.models.temporary_availability import TemporaryAvailabilities
from rosterly.db.models.schedules import Schedules, ScheduleShifts

__all__ = [
    "Base",
    # Models
    "Establishments",
    "Employees",
    "TemporaryAvailabilities",
    "Schedules",
    "ScheduleShifts",
]
