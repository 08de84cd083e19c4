"""
DayScheduleInput - Horario de atención de un día
"""

from pydantic import BaseModel, Field, model_validator

from ..domain.schedule import DaySchedule


class DayScheduleInput(BaseModel):
    """
    Horario semiabierto [start_hour, end_hour) en horas enteras.
    """

    day_id: int = Field(..., ge=1, le=7, description="1=Lunes .. 7=Domingo")
    is_open: bool = True
    start_hour: int = Field(..., ge=0, le=23)
    end_hour: int = Field(..., ge=1, le=24)
    has_lunch: bool = False
    lunch_start_hour: int = Field(default=13, ge=0, le=23)
    lunch_end_hour: int = Field(default=14, ge=1, le=24)

    @model_validator(mode="after")
    def check_bounds(self) -> "DayScheduleInput":
        if self.start_hour >= self.end_hour:
            raise ValueError("La hora de apertura debe ser menor a la de cierre")
        if self.has_lunch and not (
            self.start_hour <= self.lunch_start_hour < self.lunch_end_hour <= self.end_hour
        ):
            raise ValueError("El refrigerio debe estar dentro del horario de atención")
        return self

    def to_domain(self) -> DaySchedule:
        return DaySchedule(
            day_id=self.day_id,
            is_open=self.is_open,
            start_hour=self.start_hour,
            end_hour=self.end_hour,
            has_lunch=self.has_lunch,
            lunch_start_hour=self.lunch_start_hour,
            lunch_end_hour=self.lunch_end_hour,
        )
