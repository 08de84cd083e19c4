"""Slot conflict detection - advisory overlap checks per specialist."""

from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from typing import Iterable, NamedTuple, Optional

from ..config import logger as log
from ..domain.appointment import Appointment
from .schedule import ScheduleModel


class Slot(NamedTuple):
    """A candidate time range for a specialist."""

    specialist: str
    start_time: datetime
    end_time: datetime


def overlaps(
    a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime
) -> bool:
    """Half-open overlap: touching boundaries do not overlap."""
    return a_start < b_end and a_end > b_start


def find_conflict(
    candidate,
    existing: Iterable[Appointment],
    exclude_id: Optional[str] = None,
) -> Optional[Appointment]:
    """Returns the first appointment of the same specialist overlapping the candidate.

    Cancelled and no-show appointments still count as conflict sources.

    Args:
        candidate: Anything with ``specialist``, ``start_time`` and ``end_time``.
        existing: Appointments to check against.
        exclude_id: ID of the appointment being edited, if any.
    """
    for appointment in existing:
        if exclude_id is not None and appointment.id == exclude_id:
            continue
        if appointment.specialist != candidate.specialist:
            continue
        if overlaps(
            candidate.start_time,
            candidate.end_time,
            appointment.start_time,
            appointment.end_time,
        ):
            log.debug(
                "conflicts",
                "Overlap found",
                specialist=candidate.specialist,
                candidate_start=candidate.start_time,
                conflict_id=appointment.id,
                conflict_code=appointment.booking_code,
            )
            return appointment
    return None


@dataclass
class SlotCheck:
    """Result of the check phase; ``ok`` is False only for overlaps."""

    slot: Slot
    conflict: Optional[Appointment] = None
    advisories: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.conflict is None

    @property
    def reason(self) -> Optional[str]:
        if self.conflict is None:
            return None
        c = self.conflict
        return (
            f"Conflicto con la reserva {c.booking_code or c.id} de {c.specialist} "
            f"({c.start_time:%Y-%m-%d %H:%M}-{c.end_time:%H:%M}, {c.client.name})"
        )


def check_slot(
    candidate,
    existing: Iterable[Appointment],
    exclude_id: Optional[str] = None,
    schedule: Optional[ScheduleModel] = None,
) -> SlotCheck:
    """Pure check phase: conflict plus schedule advisories, nothing is written."""
    slot = Slot(candidate.specialist, candidate.start_time, candidate.end_time)
    conflict = find_conflict(slot, existing, exclude_id)
    advisories = schedule.advisories(slot.start_time, slot.end_time) if schedule else []
    return SlotCheck(slot=slot, conflict=conflict, advisories=advisories)


def _availability_blocks(schedule: ScheduleModel, day: date) -> list[tuple[datetime, datetime]]:
    entry = schedule.day(day.isoweekday())
    if not entry or not entry.is_open:
        return []

    midnight = datetime.combine(day, time())
    opening = midnight + timedelta(hours=entry.start_hour)
    closing = midnight + timedelta(hours=entry.end_hour)
    if not entry.has_lunch:
        return [(opening, closing)]
    lunch_start = midnight + timedelta(hours=entry.lunch_start_hour)
    lunch_end = midnight + timedelta(hours=entry.lunch_end_hour)
    return [(opening, lunch_start), (lunch_end, closing)]


def free_start_times(
    schedule: ScheduleModel,
    day: date,
    specialist: str,
    appointments: Iterable[Appointment],
    duration_minutes: int,
    step_minutes: int = 30,
) -> list[time]:
    """Start times on ``day`` where a ``duration_minutes`` slot fits without conflict.

    Slots never cross the lunch window or closing time.
    """
    booked = [a for a in appointments if a.specialist == specialist]
    duration = timedelta(minutes=duration_minutes)
    step = timedelta(minutes=step_minutes)

    available = []
    for block_start, block_end in _availability_blocks(schedule, day):
        current = block_start
        while current + duration <= block_end:
            slot = Slot(specialist, current, current + duration)
            if find_conflict(slot, booked) is None:
                available.append(current.time())
            current += step

    log.debug(
        "conflicts",
        "free_start_times",
        specialist=specialist,
        day=day,
        duration=duration_minutes,
        count=len(available),
    )
    return available
