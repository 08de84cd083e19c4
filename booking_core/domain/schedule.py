"""Weekly schedule entities - business hours per ISO weekday."""

from dataclasses import dataclass, field
from typing import Optional

DAY_NAMES = {
    1: "Lunes",
    2: "Martes",
    3: "Miércoles",
    4: "Jueves",
    5: "Viernes",
    6: "Sábado",
    7: "Domingo",
}


@dataclass
class DaySchedule:
    """Opening hours of one weekday as the half-open range [start_hour, end_hour)."""

    day_id: int
    is_open: bool
    start_hour: int
    end_hour: int
    has_lunch: bool = False
    lunch_start_hour: int = 13
    lunch_end_hour: int = 14
    name: Optional[str] = None

    def __post_init__(self):
        if self.name is None:
            self.name = DAY_NAMES.get(self.day_id, str(self.day_id))

    @classmethod
    def from_dict(cls, data: dict) -> "DaySchedule":
        """Creates a DaySchedule from a dictionary."""
        return cls(
            day_id=data["day_id"],
            is_open=bool(data.get("is_open", 0)),
            start_hour=data["start_hour"],
            end_hour=data["end_hour"],
            has_lunch=bool(data.get("has_lunch", 0)),
            lunch_start_hour=data.get("lunch_start_hour", 13),
            lunch_end_hour=data.get("lunch_end_hour", 14),
            name=data.get("name"),
        )

    def to_dict(self) -> dict:
        """Converts to dictionary."""
        return {
            "day_id": self.day_id,
            "name": self.name,
            "is_open": self.is_open,
            "start_hour": self.start_hour,
            "end_hour": self.end_hour,
            "has_lunch": self.has_lunch,
            "lunch_start_hour": self.lunch_start_hour,
            "lunch_end_hour": self.lunch_end_hour,
        }

    @property
    def lunch_hours(self) -> int:
        if not self.has_lunch:
            return 0
        return max(0, self.lunch_end_hour - self.lunch_start_hour)

    @property
    def operational_hours(self) -> int:
        """Bookable hours in the day, lunch excluded."""
        if not self.is_open:
            return 0
        return max(0, max(0, self.end_hour - self.start_hour) - self.lunch_hours)


@dataclass
class WeeklySchedule:
    """Seven day entries keyed by ISO weekday (1=Monday..7=Sunday)."""

    days: dict[int, DaySchedule] = field(default_factory=dict)

    @classmethod
    def default(cls) -> "WeeklySchedule":
        """Monday to Friday 9-18 with lunch 13-14, Saturday 9-14, Sunday closed."""
        days = {}
        for day_id in range(1, 6):
            days[day_id] = DaySchedule(
                day_id=day_id, is_open=True, start_hour=9, end_hour=18, has_lunch=True
            )
        days[6] = DaySchedule(day_id=6, is_open=True, start_hour=9, end_hour=14)
        days[7] = DaySchedule(day_id=7, is_open=False, start_hour=9, end_hour=18)
        return cls(days=days)

    @classmethod
    def from_list(cls, entries: list[DaySchedule]) -> "WeeklySchedule":
        return cls(days={d.day_id: d for d in entries})

    def get(self, day_id: int) -> Optional[DaySchedule]:
        return self.days.get(day_id)

    def open_days(self) -> list[DaySchedule]:
        return [d for _, d in sorted(self.days.items()) if d.is_open]
