"""Interface the schedule orchestrator uses to announce a published week."""

from typing import Protocol

from rosterly.services.scheduling.types import Schedule, Shift


class PublishNotifier(Protocol):
    def notify_published(self, schedule: Schedule, per_employee_shifts: dict[int, list[Shift]]) -> None:
        """
        Tell each employee about their shifts in a freshly published schedule.
        Implementations may raise; the orchestrator logs and moves on.
        """
        ...
