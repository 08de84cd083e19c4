from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from booking_core.domain.appointment import Appointment
from booking_core.domain.client import Client
from booking_core.domain.follow_up import FollowUpState
from booking_core.domain.payment import Payment
from booking_core.domain.schedule import DaySchedule
from booking_core.domain.specialist import Specialist
from booking_core.domain.transaction import Transaction
from booking_core.errors import StorageError

MONDAY = datetime(2025, 3, 10)


def test_client_upsert_last_writer_wins(container):
    container.clients.upsert(Client(dni="12345678", name="Ana Garcia", phone="1", source="IG"))
    container.clients.upsert(Client(dni="12345678", name="Ana G. Ruiz", phone="2", source="FB"))

    stored = container.clients.get_by_dni("12345678")
    assert stored.name == "Ana G. Ruiz"
    assert stored.phone == "2"
    assert stored.created_at is not None


def test_client_search(container):
    container.clients.upsert(Client(dni="12345678", name="Ana Garcia", phone="987654321"))
    container.clients.upsert(Client(dni="87654321", name="Carlos Rodriguez", phone="912345678"))

    assert [c.dni for c in container.clients.search("ana")] == ["12345678"]
    assert [c.dni for c in container.clients.search("9123")] == ["87654321"]
    assert len(container.clients.search("")) == 2


def test_specialist_roster(container):
    container.specialists.save(Specialist(name="Laura", active=False))

    assert [s.name for s in container.specialists.get_active()] == ["Evaluación", "Julissa"]
    assert len(container.specialists.get_all()) == 3


def test_schedule_round_trip(container):
    container.schedule.save_day(
        DaySchedule(day_id=7, is_open=True, start_hour=10, end_hour=14)
    )
    week = container.schedule.get_week()

    assert week.get(7).is_open
    assert week.get(7).name == "Domingo"
    assert week.get(1).has_lunch
    assert len(week.days) == 7


def test_appointment_round_trip_and_queries(container):
    appointment = Appointment(
        id="a1",
        booking_code="0325-001",
        specialist="Julissa",
        service_type="Cejas",
        procedure="Microblading",
        start_time=MONDAY.replace(hour=10),
        end_time=MONDAY.replace(hour=11, minute=30),
        client=Client(dni="12345678", name="Ana Garcia", phone="987654321", source="IG"),
        down_payment=Payment(method="Yape", amount=Decimal("50.50"), code="OP-9"),
        created_at=MONDAY,
    )
    container.appointments.create(appointment)

    assert container.appointments.get_by_id("a1") == appointment
    assert container.appointments.get_by_client("12345678") == [appointment]
    assert container.appointments.get_by_specialist("Laura") == []
    assert container.appointments.get_booking_codes("0325-") == ["0325-001"]
    assert container.appointments.get_booking_codes("0425-") == []
    assert container.appointments.get_in_range(MONDAY, MONDAY + timedelta(days=1)) == [appointment]
    assert container.appointments.get_in_range(MONDAY + timedelta(days=1), MONDAY + timedelta(days=2)) == []

    assert container.appointments.delete("a1")
    assert not container.appointments.delete("a1")


def test_transaction_payments_round_trip(container):
    transaction = Transaction(
        id="t1",
        timestamp=MONDAY,
        client=Client(dni="12345678", name="Ana Garcia"),
        service_type="Cejas",
        procedure="Microblading",
        payments=[
            Payment(method="Cash", amount=Decimal("120.00")),
            Payment(method="Yape", amount=Decimal("35.50"), code="CREMA"),
        ],
        cream_sold=True,
        booking_id="a1",
        kind="cierre",
    )
    container.transactions.create(transaction)

    stored = container.transactions.get_by_id("t1")
    assert stored == transaction
    assert stored.total == Decimal("155.50")
    assert container.transactions.unlink_booking("a1") == 1
    assert container.transactions.get_by_id("t1").booking_id is None
    assert container.transactions.get_by_booking("a1") == []


def test_empty_payment_list_is_legal(container):
    placeholder = Transaction(
        id="t2",
        timestamp=MONDAY,
        client=Client(dni="12345678", name="Ana Garcia"),
        service_type="Cejas",
        procedure="Microblading",
        kind="adelanto",
    )
    container.transactions.create(placeholder)
    assert container.transactions.get_by_id("t2").total == Decimal("0")


def test_follow_up_states(container):
    container.follow_ups.save(
        FollowUpState(event_id="e1", status="CONTACTADO", last_contact_at=MONDAY)
    )
    container.follow_ups.save(FollowUpState(event_id="e1", status="PERDIDO", archived=True))

    states = container.follow_ups.get_all()
    assert list(states) == ["e1"]
    assert states["e1"].status == "PERDIDO"
    assert states["e1"].archived
    assert states["e1"].last_contact_at is None


def test_system_config(container):
    assert container.config.get_value("missing", "7") == "7"
    container.config.set("reactivation_days", "300", "Win-back threshold")
    container.config.set("reactivation_days", "320")

    entry = container.config.get("reactivation_days")
    assert entry.as_int() == 320
    assert entry.description == "Win-back threshold"


def test_duplicate_id_raises_storage_error(container):
    transaction = Transaction(
        id="dup",
        timestamp=MONDAY,
        client=Client(dni="12345678", name="Ana Garcia"),
        service_type="Cejas",
        procedure="Microblading",
    )
    container.transactions.create(transaction)
    with pytest.raises(StorageError):
        container.transactions.create(transaction)
