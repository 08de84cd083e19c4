"""SQLite implementation of ScheduleRepository."""

from ..interfaces.schedule_repository import IScheduleRepository
from ...domain.schedule import DaySchedule, WeeklySchedule
from ...config import logger as log
from .connection import SQLiteConnection


class SQLiteScheduleRepository(IScheduleRepository):
    """SQLite implementation of the weekly schedule repository."""

    def __init__(self, connection: SQLiteConnection):
        self._conn = connection

    def get_week(self) -> WeeklySchedule:
        """Gets the weekly schedule (empty days when nothing is stored)."""
        with self._conn.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT * FROM weekly_schedule ORDER BY day_id")
            days = [DaySchedule.from_dict(dict(row)) for row in cursor.fetchall()]
        log.debug("repo.schedule", "get_week result", days=len(days))
        return WeeklySchedule.from_list(days)

    def save_day(self, day: DaySchedule) -> DaySchedule:
        """Creates or replaces the entry of one weekday."""
        log.info(
            "repo.schedule",
            "save_day",
            day_id=day.day_id,
            is_open=day.is_open,
            hours=f"{day.start_hour}-{day.end_hour}",
        )
        with self._conn.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """INSERT OR REPLACE INTO weekly_schedule (
                    day_id, name, is_open, start_hour, end_hour,
                    has_lunch, lunch_start_hour, lunch_end_hour
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)""",
                (
                    day.day_id,
                    day.name,
                    day.is_open,
                    day.start_hour,
                    day.end_hour,
                    day.has_lunch,
                    day.lunch_start_hour,
                    day.lunch_end_hour,
                ),
            )
        return day
