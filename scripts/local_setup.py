#!/usr/bin/env python3
"""Local Setup - Seeds the booking database with defaults.

This script is for LOCAL USE ONLY. It:
1. Seeds system configuration (follow-up windows, evaluation specialists)
2. Seeds the specialist roster
3. Seeds the weekly schedule (Mon-Fri 9-18 with lunch, Sat 9-14, Sun closed)
4. Optionally books a few demo appointments

Usage:
    python scripts/local_setup.py           # Seed only
    python scripts/local_setup.py --demo    # Seed + demo appointments
    python scripts/local_setup.py --reset   # Delete the database first
"""

import argparse
from datetime import datetime, timedelta
from pathlib import Path

from dotenv import load_dotenv

# Load .env file from project root
PROJECT_DIR = Path(__file__).parent.parent
load_dotenv(PROJECT_DIR / ".env")

from booking_core.config.env import get_db_path  # noqa: E402
from booking_core.constants.config_keys import ConfigDefaults, ConfigKeys  # noqa: E402
from booking_core.container import Container, set_container  # noqa: E402
from booking_core.core.lifecycle import BookingLifecycleManager  # noqa: E402
from booking_core.domain.actor import Actor  # noqa: E402
from booking_core.domain.schedule import WeeklySchedule  # noqa: E402
from booking_core.domain.specialist import Specialist  # noqa: E402
from booking_core.errors import BookingError  # noqa: E402
from booking_core.models.schedule import DayScheduleInput  # noqa: E402
from booking_core.models.validation import parse_input  # noqa: E402
from booking_core.repositories.sqlite.factory import create_sqlite_container  # noqa: E402


SPECIALISTS = ["Julissa", "Laura", "Evaluación"]

# System configuration defaults
SYSTEM_CONFIG = [
    (
        ConfigKeys.FOLLOW_UP_WINDOW_DAYS,
        ConfigDefaults.FOLLOW_UP_WINDOW_DAYS,
        "Days after a service before the client is due for follow-up",
    ),
    (
        ConfigKeys.REACTIVATION_DAYS,
        ConfigDefaults.REACTIVATION_DAYS,
        "Days after which a client enters the reactivation list",
    ),
    (
        ConfigKeys.RETURN_BUFFER_DAYS,
        ConfigDefaults.RETURN_BUFFER_DAYS,
        "Days after a service before a new appointment counts as a return",
    ),
    (ConfigKeys.FALLBACK_START_HOUR, ConfigDefaults.FALLBACK_START_HOUR, "Calendar start when no day is open"),
    (ConfigKeys.FALLBACK_END_HOUR, ConfigDefaults.FALLBACK_END_HOUR, "Calendar end when no day is open"),
    (
        ConfigKeys.EVALUATION_SPECIALISTS,
        ConfigDefaults.EVALUATION_SPECIALISTS,
        "Specialists whose appointments are evaluations",
    ),
]

DEMO_CLIENTS = [
    {"dni": "12345678", "name": "Ana Garcia", "phone": "987654321", "source": "IG"},
    {"dni": "87654321", "name": "Carlos Rodriguez", "phone": "912345678", "source": "Recomendada"},
]


def seed_system_config(container: Container):
    """Seeds system configuration."""
    print("\n📋 Seeding system configuration...")
    for key, value, description in SYSTEM_CONFIG:
        container.config.set(key, value, description)
        print(f"   ✓ {key} = {value}")


def seed_specialists(container: Container):
    print("\n👩 Seeding specialists...")
    for name in SPECIALISTS:
        container.specialists.save(Specialist(name=name))
        print(f"   ✓ {name}")


def seed_schedule(container: Container):
    print("\n🕘 Seeding weekly schedule...")
    for day in WeeklySchedule.default().days.values():
        entry = parse_input(DayScheduleInput, day.to_dict()).to_domain()
        container.schedule.save_day(entry)
        if entry.is_open:
            lunch = (
                f", refrigerio {entry.lunch_start_hour}-{entry.lunch_end_hour}"
                if entry.has_lunch
                else ""
            )
            print(f"   ✓ {entry.name}: {entry.start_hour}-{entry.end_hour}{lunch}")
        else:
            print(f"   ✓ {entry.name}: cerrado")


def seed_demo_appointments(container: Container):
    """Books one appointment per demo client on the next weekday at 10:00."""
    print("\n📅 Booking demo appointments...")
    manager = BookingLifecycleManager(container)
    actor = Actor(id="setup", name="Local Setup", role="admin")

    day = datetime.now().replace(hour=10, minute=0, second=0, microsecond=0) + timedelta(days=1)
    while day.isoweekday() > 5:
        day += timedelta(days=1)

    for index, client in enumerate(DEMO_CLIENTS):
        request = {
            "specialist": SPECIALISTS[index % 2],
            "service_type": "Cejas",
            "procedure": "Microblading",
            "start_time": day,
            "client": client,
        }
        try:
            result = manager.create_booking(request, actor)
            print(f"   ✓ {result.appointment.booking_code} - {client['name']}")
        except BookingError as e:
            print(f"   ✗ {client['name']} - {e}")


def delete_database():
    """Deletes the SQLite database file."""
    db_path = get_db_path()
    if db_path.exists():
        db_path.unlink()
        print(f"\n   ✓ Deleted: {db_path}")
    else:
        print(f"\n   ⚠️  Database not found: {db_path}")


def main():
    parser = argparse.ArgumentParser(description="Local setup")
    parser.add_argument(
        "--demo",
        action="store_true",
        help="Also book demo appointments",
    )
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Delete the database before seeding",
    )
    args = parser.parse_args()

    print("=" * 70)
    print("LOCAL SETUP - Booking Core")
    print("=" * 70)

    if args.reset:
        delete_database()

    container = create_sqlite_container()
    set_container(container)

    seed_system_config(container)
    seed_specialists(container)
    seed_schedule(container)
    if args.demo:
        seed_demo_appointments(container)

    print("\n" + "=" * 70)
    print("SETUP COMPLETE")
    print("=" * 70)
    print(f"\nDatabase: {get_db_path()}")


if __name__ == "__main__":
    main()
