"""Occupancy statistics - booked hours against schedule capacity."""

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional

from ..domain.appointment import Appointment
from .schedule import ScheduleModel


def week_of_month(moment: datetime) -> int:
    """1 for days 1-7, 2 for days 8-14, ..."""
    return (moment.day - 1) // 7 + 1


def select_appointments(
    appointments: Iterable[Appointment],
    year: int,
    month: int,
    specialists: Optional[Iterable[str]] = None,
    week: int = 0,
    weekday: int = 0,
) -> list[Appointment]:
    """Appointments starting in the month, narrowed by specialist, week and ISO weekday."""
    names = set(specialists) if specialists is not None else None
    result = []
    for a in appointments:
        start = a.start_time
        if start.year != year or start.month != month:
            continue
        if names is not None and a.specialist not in names:
            continue
        if week and week_of_month(start) != week:
            continue
        if weekday and start.isoweekday() != weekday:
            continue
        result.append(a)
    return result


def booked_hours(appointments: Iterable[Appointment]) -> float:
    """Cancelled appointments free their slot; completed ones count their actual duration."""
    return sum(a.worked_hours for a in appointments if a.status != "cancelled")


@dataclass
class OccupancyStats:
    hours_available: float
    hours_booked: float
    appointment_count: int
    noshow_count: int

    @property
    def occupancy_rate(self) -> float:
        if self.hours_available <= 0:
            return 0.0
        return self.hours_booked / self.hours_available

    @property
    def noshow_rate(self) -> float:
        if self.appointment_count == 0:
            return 0.0
        return self.noshow_count / self.appointment_count


@dataclass
class SpecialistOccupancy:
    name: str
    hours_booked: float
    rate: float


def occupancy_stats(
    schedule: ScheduleModel,
    appointments: Iterable[Appointment],
    year: int,
    month: int,
    specialists: list[str],
    week: int = 0,
    weekday: int = 0,
) -> OccupancyStats:
    """Capacity is the schedule's monthly hours per specialist times the number of specialists."""
    selected = select_appointments(appointments, year, month, specialists, week, weekday)
    capacity = schedule.capacity_hours(year, month, week, weekday) * len(specialists)
    return OccupancyStats(
        hours_available=capacity,
        hours_booked=booked_hours(selected),
        appointment_count=len(selected),
        noshow_count=sum(1 for a in selected if a.status == "noshow"),
    )


def occupancy_by_specialist(
    schedule: ScheduleModel,
    appointments: Iterable[Appointment],
    year: int,
    month: int,
    specialists: list[str],
    week: int = 0,
    weekday: int = 0,
) -> list[SpecialistOccupancy]:
    capacity = schedule.capacity_hours(year, month, week, weekday)
    selected = select_appointments(appointments, year, month, specialists, week, weekday)
    result = []
    for name in specialists:
        hours = booked_hours(a for a in selected if a.specialist == name)
        result.append(
            SpecialistOccupancy(
                name=name,
                hours_booked=hours,
                rate=hours / capacity if capacity > 0 else 0.0,
            )
        )
    return result


def hourly_demand(
    appointments: Iterable[Appointment], start_hour: int, end_hour: int
) -> list[int]:
    """Count of non-cancelled appointments touching each hour of [start_hour, end_hour)."""
    if end_hour <= start_hour:
        return []
    counts = [0] * (end_hour - start_hour)
    for a in appointments:
        if a.status == "cancelled":
            continue
        begin = a.start_time.hour + a.start_time.minute / 60
        finish = begin + (a.end_time - a.start_time).total_seconds() / 3600
        for hour in range(start_hour, end_hour):
            if begin < hour + 1 and finish > hour:
                counts[hour - start_hour] += 1
    return counts
