"""Interface for weekly schedule repository."""

from abc import ABC, abstractmethod

from ...domain.schedule import DaySchedule, WeeklySchedule


class IScheduleRepository(ABC):
    """Contract for business-hours data access."""

    @abstractmethod
    def get_week(self) -> WeeklySchedule:
        """Gets the weekly schedule (empty days when nothing is stored)."""
        pass

    @abstractmethod
    def save_day(self, day: DaySchedule) -> DaySchedule:
        """Creates or replaces the entry of one weekday."""
        pass
