"""Schedule model - pure lookups over the weekly business hours."""

import calendar
from datetime import date, datetime, time, timedelta
from typing import NamedTuple, Optional

from ..config import logger as log
from ..constants.config_keys import ConfigKeys, ConfigDefaults
from ..domain.schedule import DaySchedule, WeeklySchedule


class HourRange(NamedTuple):
    start: int
    end: int


class Bounds(NamedTuple):
    min_start: int
    max_end: int


class ScheduleModel:
    """Answers open/closed, opening hours and lunch questions per ISO weekday.

    Args:
        week: Weekly schedule entity.
        fallback_start: Viewport start hour when no day is open.
        fallback_end: Viewport end hour when no day is open.
    """

    def __init__(
        self,
        week: WeeklySchedule,
        fallback_start: int = int(ConfigDefaults.FALLBACK_START_HOUR),
        fallback_end: int = int(ConfigDefaults.FALLBACK_END_HOUR),
    ):
        self._week = week
        self._fallback = Bounds(fallback_start, fallback_end)

    @classmethod
    def from_container(cls, container) -> "ScheduleModel":
        """Builds the model from stored schedule and config values."""
        start = container.config.get_value(
            ConfigKeys.FALLBACK_START_HOUR, ConfigDefaults.FALLBACK_START_HOUR
        )
        end = container.config.get_value(
            ConfigKeys.FALLBACK_END_HOUR, ConfigDefaults.FALLBACK_END_HOUR
        )
        return cls(container.schedule.get_week(), int(start), int(end))

    @property
    def week(self) -> WeeklySchedule:
        return self._week

    def day(self, weekday: int) -> Optional[DaySchedule]:
        return self._week.get(weekday)

    def is_open(self, weekday: int) -> bool:
        day = self._week.get(weekday)
        return bool(day and day.is_open)

    def hours_for(self, weekday: int) -> HourRange:
        """Returns the configured hours of a weekday, or the fallback if missing."""
        day = self._week.get(weekday)
        if day is None:
            return HourRange(*self._fallback)
        return HourRange(day.start_hour, day.end_hour)

    def is_within_lunch(self, weekday: int, hour: int) -> bool:
        day = self._week.get(weekday)
        if not day or not day.has_lunch:
            return False
        return day.lunch_start_hour <= hour < day.lunch_end_hour

    def global_bounds(self) -> Bounds:
        """Min start and max end across open days, for sizing a calendar view."""
        open_days = self._week.open_days()
        if not open_days:
            return self._fallback
        return Bounds(
            min(d.start_hour for d in open_days),
            max(d.end_hour for d in open_days),
        )

    def lunch_hours_hit(self, start: datetime, end: datetime) -> list[int]:
        """Hours touched by [start, end) that fall in the lunch window."""
        hits = []
        cursor = start.replace(minute=0, second=0, microsecond=0)
        while cursor < end:
            if self.is_within_lunch(cursor.isoweekday(), cursor.hour):
                hits.append(cursor.hour)
            cursor += timedelta(hours=1)
        return hits

    def is_within_hours(self, start: datetime, end: datetime) -> bool:
        """Checks that [start, end) lies on an open day inside opening hours."""
        weekday = start.isoweekday()
        if not self.is_open(weekday):
            return False
        hours = self.hours_for(weekday)
        opening = datetime.combine(start.date(), time(hours.start))
        closing = datetime.combine(start.date(), time()) + timedelta(hours=hours.end)
        return opening <= start and end <= closing

    def advisories(self, start: datetime, end: datetime) -> list[str]:
        """Non-blocking warnings about a candidate range."""
        notes = []
        weekday = start.isoweekday()
        if not self.is_open(weekday):
            notes.append(f"El local no atiende el día {weekday}")
        elif not self.is_within_hours(start, end):
            hours = self.hours_for(weekday)
            notes.append(f"Fuera del horario de atención ({hours.start}:00-{hours.end}:00)")
        lunch = self.lunch_hours_hit(start, end)
        if lunch:
            notes.append(f"Cruza el horario de refrigerio ({lunch[0]}:00)")
        if notes:
            log.debug("schedule", "advisories", start=start, end=end, notes=notes)
        return notes

    def time_options(self, day: date, step_minutes: int = 30) -> list[time]:
        """Start times offered for a date: the day's hours when open, else the global bounds."""
        weekday = day.isoweekday()
        if self.is_open(weekday):
            start_hour, end_hour = self.hours_for(weekday)
        else:
            start_hour, end_hour = self.global_bounds()

        options = []
        minutes = start_hour * 60
        while minutes < end_hour * 60:
            options.append(time(minutes // 60, minutes % 60))
            minutes += step_minutes
        return options

    def capacity_hours(self, year: int, month: int, week: int = 0, weekday: int = 0) -> int:
        """Bookable hours of one specialist in a month.

        Args:
            year: Calendar year.
            month: Month 1-12.
            week: Week of month (1 = days 1-7, ...); 0 for all.
            weekday: ISO weekday to restrict to; 0 for all.
        """
        total = 0
        days_in_month = calendar.monthrange(year, month)[1]
        for day_number in range(1, days_in_month + 1):
            if week and (day_number - 1) // 7 + 1 != week:
                continue
            current = date(year, month, day_number)
            if weekday and current.isoweekday() != weekday:
                continue
            entry = self._week.get(current.isoweekday())
            if entry:
                total += entry.operational_hours
        return total
