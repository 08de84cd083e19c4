"""Shared fixtures: a SQLite-backed container per test."""

from datetime import datetime
from itertools import count

import pytest

from booking_core.config import logger as log
from booking_core.container import reset_container, set_container
from booking_core.core.lifecycle import BookingLifecycleManager
from booking_core.domain.actor import Actor
from booking_core.domain.schedule import WeeklySchedule
from booking_core.domain.specialist import Specialist
from booking_core.repositories.sqlite.factory import create_sqlite_container

# A Monday
MONDAY = datetime(2025, 3, 10)

log.set_level("error")


class FakeClock:
    """Fixed instant that tests can move forward."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def container(tmp_path):
    c = create_sqlite_container(str(tmp_path / "booking.db"))
    for day in WeeklySchedule.default().days.values():
        c.schedule.save_day(day)
    for name in ("Julissa", "Laura", "Evaluación"):
        c.specialists.save(Specialist(name=name))
    set_container(c)
    yield c
    reset_container()


@pytest.fixture
def clock():
    return FakeClock(MONDAY.replace(hour=8))


@pytest.fixture
def manager(container, clock):
    ids = count(1)
    return BookingLifecycleManager(
        container, clock=clock, id_factory=lambda: f"id-{next(ids)}"
    )


@pytest.fixture
def staff():
    return Actor(id="u-staff", name="Recepción", role="staff")


@pytest.fixture
def admin():
    return Actor(id="u-admin", name="Administración", role="admin")


def booking_payload(**overrides) -> dict:
    payload = {
        "specialist": "Julissa",
        "service_type": "Cejas",
        "procedure": "Microblading",
        "start_time": MONDAY.replace(hour=10),
        "duration_minutes": 60,
        "client": {
            "dni": "12345678",
            "name": "Ana Garcia",
            "phone": "987654321",
            "source": "IG",
        },
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def payload():
    return booking_payload
