from datetime import datetime, timedelta

import pytest

from booking_core.core.occupancy import (
    hourly_demand,
    occupancy_by_specialist,
    occupancy_stats,
    select_appointments,
)
from booking_core.core.schedule import ScheduleModel
from booking_core.domain.appointment import Appointment
from booking_core.domain.client import Client
from booking_core.domain.schedule import WeeklySchedule

MONDAY = datetime(2025, 3, 10)


def booked(id, hour, hours=1, status="scheduled", specialist="Julissa", actual=None, day=MONDAY):
    start = day.replace(hour=hour)
    return Appointment(
        id=id,
        specialist=specialist,
        service_type="Cejas",
        procedure="Microblading",
        start_time=start,
        end_time=start + timedelta(hours=hours),
        client=Client(dni="12345678", name="Ana Garcia"),
        status=status,
        actual_duration=actual,
    )


@pytest.fixture
def schedule():
    return ScheduleModel(WeeklySchedule.default())


@pytest.fixture
def appointments():
    return [
        booked("done", 10, status="completed", actual=90),
        booked("next", 14),
        booked("cancel", 15, hours=2, status="cancelled"),
        booked("absent", 16, status="noshow"),
        booked("april", 10, day=datetime(2025, 4, 7)),
    ]


def test_occupancy_stats(schedule, appointments):
    stats = occupancy_stats(schedule, appointments, 2025, 3, ["Julissa", "Laura"])

    assert stats.hours_available == 386
    assert stats.hours_booked == pytest.approx(3.5)
    assert stats.occupancy_rate == pytest.approx(3.5 / 386)
    assert stats.appointment_count == 4
    assert stats.noshow_rate == pytest.approx(0.25)


def test_occupancy_by_specialist(schedule, appointments):
    julissa, laura = occupancy_by_specialist(schedule, appointments, 2025, 3, ["Julissa", "Laura"])
    assert julissa.hours_booked == pytest.approx(3.5)
    assert julissa.rate == pytest.approx(3.5 / 193)
    assert laura.hours_booked == 0
    assert laura.rate == 0


def test_week_and_weekday_filters(schedule, appointments):
    # March 10th is in the second week of the month
    assert len(select_appointments(appointments, 2025, 3, week=2)) == 4
    assert select_appointments(appointments, 2025, 3, week=1) == []
    assert select_appointments(appointments, 2025, 3, weekday=2) == []

    stats = occupancy_stats(schedule, appointments, 2025, 3, ["Julissa"], weekday=1)
    assert stats.hours_available == 40


def test_empty_month(schedule):
    stats = occupancy_stats(schedule, [], 2025, 3, [])
    assert stats.occupancy_rate == 0.0
    assert stats.noshow_rate == 0.0


def test_hourly_demand(appointments):
    march = [a for a in appointments if a.start_time.month == 3]
    assert hourly_demand(march, 9, 18) == [0, 1, 0, 0, 0, 1, 0, 1, 0]
    assert hourly_demand(march, 18, 9) == []


def test_half_hour_appointments_touch_both_hours():
    start = MONDAY.replace(hour=10, minute=30)
    appointment = Appointment(
        id="x",
        specialist="Laura",
        service_type="Remoción",
        procedure="Laser 1",
        start_time=start,
        end_time=start + timedelta(minutes=60),
        client=Client(dni="12345678", name="Ana"),
    )
    assert hourly_demand([appointment], 9, 13) == [0, 1, 1, 0]


def test_appointment_ending_at_midnight_counts():
    start = MONDAY.replace(hour=22)
    late = Appointment(
        id="late",
        specialist="Laura",
        service_type="Cejas",
        procedure="Microblading",
        start_time=start,
        end_time=start + timedelta(hours=2),
        client=Client(dni="12345678", name="Ana"),
    )
    assert hourly_demand([late], 20, 24) == [0, 0, 1, 1]
