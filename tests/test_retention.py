from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from booking_core.constants.catalog import Provenance, TransactionKind
from booking_core.core.retention import (
    FollowUpEvent,
    FollowUpQuery,
    RetentionEngine,
    RetentionSettings,
    RetentionStats,
    is_eligible,
)
from booking_core.domain.appointment import Appointment
from booking_core.domain.client import Client
from booking_core.domain.follow_up import FollowUpState
from booking_core.domain.payment import Payment
from booking_core.domain.transaction import Transaction
from booking_core.errors import ValidationError

DAY0 = datetime(2025, 1, 6, 10, 0)


def client(dni="12345678", name="Ana Garcia", phone="987654321"):
    return Client(dni=dni, name=name, phone=phone, source="IG")


def visit(
    id,
    when,
    service="Cejas",
    procedure="Microblading",
    status="completed",
    dni="12345678",
    specialist="Julissa",
    provenance=Provenance.MANUAL,
    name="Ana Garcia",
):
    return Appointment(
        id=id,
        specialist=specialist,
        service_type=service,
        procedure=procedure,
        start_time=when,
        end_time=when + timedelta(hours=1),
        client=client(dni, name),
        booking_code=f"{when:%m%y}-{id}",
        status=status,
        provenance=provenance,
    )


def sale(id, when, service="Remoción", procedure="Laser 1", dni="55555555", **kwargs):
    return Transaction(
        id=id,
        timestamp=when,
        client=client(dni, "Rosa Diaz"),
        service_type=service,
        procedure=procedure,
        payments=[Payment(method="Cash", amount=Decimal("120"))],
        **kwargs,
    )


def engine(appointments=(), transactions=(), states=None, now=DAY0 + timedelta(days=60)):
    return RetentionEngine(list(appointments), list(transactions), states or {}, now=now)


def event(service, procedure, provenance=Provenance.MANUAL):
    return FollowUpEvent(
        id="e1",
        occurred_at=DAY0,
        client=client(),
        service_type=service,
        procedure=procedure,
        provenance=provenance,
    )


# ---------------------------------------------------------------------------
# Eligibility
# ---------------------------------------------------------------------------
def test_touch_up_is_not_eligible():
    assert not is_eligible(event("Cejas", "Retoque"))
    assert not is_eligible(event("cejas", "retoque de microblading"))


@pytest.mark.parametrize("procedure", ["Microblading", "Microshading", "Henna", ""])
def test_first_time_eyebrow_is_eligible(procedure):
    assert is_eligible(event("Cejas", procedure))


@pytest.mark.parametrize("procedure", ["Laser 1", "Laser 5+", "Retoque", ""])
def test_every_laser_event_is_eligible(procedure):
    assert is_eligible(event("Remoción", procedure))


@pytest.mark.parametrize("service", ["Pestañas", "Otro", "Bloqueo"])
def test_other_services_are_not_eligible(service):
    assert not is_eligible(event(service, "Lifting"))


def test_bulk_imports_are_never_eligible():
    assert not is_eligible(event("Remoción", "Laser 1", Provenance.BULK_IMPORT))
    assert not is_eligible(event("Cejas", "Microblading", Provenance.BULK_IMPORT))


def test_only_completed_appointments_become_events():
    result = engine(
        [
            visit("a", DAY0),
            visit("b", DAY0, status="scheduled", dni="11111111"),
            visit("c", DAY0, status="noshow", dni="22222222"),
            visit("d", DAY0, status="cancelled", dni="33333333"),
        ]
    ).candidates()
    assert [c.id for c in result] == ["a"]


def test_standalone_sales_are_events_but_deposits_and_linked_are_not():
    result = engine(
        transactions=[
            sale("s1", DAY0),
            sale("s2", DAY0, kind=TransactionKind.ADELANTO),
            sale("s3", DAY0, booking_id="x", kind=TransactionKind.CIERRE),
            sale("s4", DAY0, provenance=Provenance.BULK_IMPORT),
        ]
    ).candidates()
    assert [c.id for c in result] == ["s1"]
    assert result[0].event.from_sale


# ---------------------------------------------------------------------------
# Target date and return detection
# ---------------------------------------------------------------------------
def test_target_date_is_forty_days_later():
    [candidate] = engine([visit("a", DAY0)]).candidates()
    assert candidate.target_date == DAY0 + timedelta(days=40)
    assert candidate.status == "PENDIENTE"


def test_return_on_day_45_is_agendado_and_counted():
    retention = engine(
        [
            visit("a", DAY0),
            visit("b", DAY0 + timedelta(days=45), status="scheduled"),
        ]
    )

    [candidate] = retention.candidates()
    stats = retention.stats()

    assert candidate.status == "AGENDADO"
    assert candidate.return_appointment.id == "b"
    assert stats.eligible_base == 1
    assert stats.returned_count == 1
    assert stats.pending_count == 0


def test_return_must_be_after_buffer_day():
    [candidate] = engine(
        [visit("a", DAY0), visit("b", DAY0 + timedelta(days=1), status="scheduled")]
    ).candidates()
    assert not candidate.has_return


def test_laser_accepts_eyebrow_return_but_not_the_reverse():
    later = DAY0 + timedelta(days=50)
    laser = engine(
        [
            visit("a", DAY0, service="Remoción", procedure="Laser 2"),
            visit("b", later, status="scheduled"),
        ]
    ).candidate("a")
    eyebrow = engine(
        [
            visit("a", DAY0),
            visit("b", later, service="Remoción", procedure="Laser 1", status="scheduled"),
        ]
    ).candidate("a")

    assert laser.status == "AGENDADO"
    assert eyebrow.status == "PENDIENTE"


def test_return_of_another_client_does_not_count():
    [candidate] = engine(
        [visit("a", DAY0), visit("b", DAY0 + timedelta(days=45), status="scheduled", dni="99999999")]
    ).candidates()
    assert not candidate.has_return


def test_found_return_overrides_manual_status():
    states = {"a": FollowUpState(event_id="a", status="PERDIDO")}
    [candidate] = engine(
        [visit("a", DAY0), visit("b", DAY0 + timedelta(days=45), status="scheduled")],
        states=states,
    ).candidates()
    assert candidate.status == "AGENDADO"


def test_manual_status_used_without_return():
    states = {"a": FollowUpState(event_id="a", status="CONTACTADO", notes="Llamar lunes")}
    [candidate] = engine([visit("a", DAY0)], states=states).candidates()
    assert candidate.status == "CONTACTADO"
    assert candidate.notes == "Llamar lunes"


def test_candidates_sorted_by_target_date():
    result = engine(
        [
            visit("late", DAY0 + timedelta(days=5), dni="11111111"),
            visit("early", DAY0, dni="22222222"),
        ]
    ).candidates()
    assert [c.id for c in result] == ["early", "late"]


# ---------------------------------------------------------------------------
# Cohorts
# ---------------------------------------------------------------------------
def test_return_rate_is_a_fraction():
    assert RetentionStats(eligible_base=10, returned_count=3, pending_count=7).return_rate == pytest.approx(0.30)
    assert RetentionStats().return_rate == 0.0


def test_ten_clients_three_returned():
    appointments = []
    for i in range(10):
        dni = f"1000000{i}"
        appointments.append(visit(f"first-{i}", DAY0, dni=dni))
        if i < 3:
            appointments.append(
                visit(f"touch-{i}", DAY0 + timedelta(days=40), procedure="Retoque", dni=dni)
            )

    stats = engine(appointments, now=DAY0 + timedelta(days=70)).stats()

    assert stats.eligible_base == 10
    assert stats.returned_count == 3
    assert stats.pending_count == 7
    assert stats.return_rate == pytest.approx(0.30)
    assert stats.pending_rate == pytest.approx(0.70)


def test_events_younger_than_window_are_not_scored():
    retention = engine([visit("a", DAY0)], now=DAY0 + timedelta(days=39, hours=23))
    assert len(retention.candidates()) == 1
    assert retention.stats().eligible_base == 0

    assert engine([visit("a", DAY0)], now=DAY0 + timedelta(days=40)).stats().eligible_base == 1


def test_manual_agendado_counts_as_returned():
    states = {"a": FollowUpState(event_id="a", status="AGENDADO")}
    stats = engine([visit("a", DAY0)], states=states).stats()
    assert stats.returned_count == 1


def test_archived_events_still_scored():
    states = {"a": FollowUpState(event_id="a", archived=True)}
    assert engine([visit("a", DAY0)], states=states).stats().eligible_base == 1


def test_reactivation_cohort_is_age_based():
    appointments = [
        visit("old", DAY0, dni="11111111"),
        visit("edge", DAY0 + timedelta(days=1), dni="22222222"),
        visit("new", DAY0 + timedelta(days=200), dni="33333333"),
        visit("back", DAY0 + timedelta(days=250), dni="11111111", status="scheduled"),
    ]
    now = DAY0 + timedelta(days=331, hours=12)

    cohort = engine(appointments, now=now).reactivation()

    # "edge" is exactly 330 whole days old; "old" returned but still qualifies
    assert [c.id for c in cohort] == ["old"]


# ---------------------------------------------------------------------------
# Follow-up list filters
# ---------------------------------------------------------------------------
@pytest.fixture
def listing():
    appointments = [
        visit("ana", DAY0, dni="11111111", name="Ana Garcia"),
        visit("luz", DAY0 + timedelta(days=31), dni="22222222", name="Luz Perez",
              service="Remoción", procedure="Laser 1"),
        visit("eva", DAY0 - timedelta(days=400), dni="33333333", name="Eva Soto"),
        visit("mia", DAY0, dni="44444444", name="Mia Rios"),
    ]
    states = {
        "mia": FollowUpState(event_id="mia", status="CONTACTADO", archived=True),
        "ana": FollowUpState(event_id="ana", status="CONTACTADO"),
    }
    return engine(appointments, states=states)


def ids(items):
    return sorted(c.id for c in items)


def test_default_tab_hides_archived(listing):
    assert ids(listing.follow_up_list()) == ["ana", "eva", "luz"]


def test_archive_tab_shows_only_archived(listing):
    assert ids(listing.follow_up_list(FollowUpQuery(tab="ARCHIVADOS"))) == ["mia"]


def test_status_tab(listing):
    assert ids(listing.follow_up_list(FollowUpQuery(tab="CONTACTADO"))) == ["ana"]
    assert ids(listing.follow_up_list(FollowUpQuery(tab="PENDIENTE"))) == ["eva", "luz"]


def test_reactivation_tab(listing):
    assert ids(listing.follow_up_list(FollowUpQuery(tab="REACTIVACION"))) == ["eva"]


def test_year_month_and_service_filters(listing):
    assert ids(listing.follow_up_list(FollowUpQuery(year=2025))) == ["ana", "luz"]
    assert ids(listing.follow_up_list(FollowUpQuery(year=2025, month=2))) == ["luz"]
    assert ids(listing.follow_up_list(FollowUpQuery(service="LASER"))) == ["luz"]
    assert ids(listing.follow_up_list(FollowUpQuery(service="CEJAS"))) == ["ana", "eva"]


def test_search_by_name_dni_phone_and_code(listing):
    assert ids(listing.follow_up_list(FollowUpQuery(search="luz"))) == ["luz"]
    assert ids(listing.follow_up_list(FollowUpQuery(search="3333"))) == ["eva"]
    assert ids(listing.follow_up_list(FollowUpQuery(search="987654"))) == ["ana", "eva", "luz"]
    assert ids(listing.follow_up_list(FollowUpQuery(search="0225-"))) == ["luz"]


def test_unknown_tab(listing):
    with pytest.raises(ValidationError):
        listing.follow_up_list(FollowUpQuery(tab="OTROS"))


# ---------------------------------------------------------------------------
# Conversion
# ---------------------------------------------------------------------------
def test_conversion_rate():
    later = DAY0 + timedelta(days=10)
    appointments = [
        # converted
        visit("a1", DAY0, dni="11111111", specialist="Evaluación", procedure="Evaluación"),
        visit("a2", later, dni="11111111"),
        # only a cancelled follow-up
        visit("b1", DAY0, dni="22222222", specialist="D.G."),
        visit("b2", later, dni="22222222", status="cancelled"),
        # evaluation not completed: not in the base
        visit("c1", DAY0, dni="33333333", specialist="Evaluación", status="scheduled"),
        visit("c2", later, dni="33333333"),
        # paid service only before the evaluation
        visit("d1", DAY0 - timedelta(days=5), dni="44444444"),
        visit("d2", DAY0, dni="44444444", specialist="Evaluacion"),
        # a second evaluation is not a conversion
        visit("e1", DAY0, dni="55555555", specialist="Evaluación"),
        visit("e2", later, dni="55555555", specialist="D.G."),
    ]

    stats = engine(appointments).conversion()

    assert stats.evaluation_count == 4
    assert stats.converted_count == 1
    assert stats.converted_dnis == ["11111111"]
    assert stats.conversion_rate == pytest.approx(0.25)


def test_conversion_rate_without_evaluations():
    assert engine([visit("a", DAY0)]).conversion().conversion_rate == 0.0


def test_blocks_do_not_convert():
    appointments = [
        visit("a1", DAY0, specialist="Evaluación"),
        visit("a2", DAY0 + timedelta(days=3), service="Bloqueo", procedure="Capacitación"),
    ]
    assert engine(appointments).conversion().converted_count == 0


# ---------------------------------------------------------------------------
# Settings and container wiring
# ---------------------------------------------------------------------------
def test_settings_from_config(container):
    container.config.set("follow_up_window_days", "30")
    container.config.set("evaluation_specialists", "Consulta, Evaluación")

    settings = RetentionSettings.from_config(container.config)

    assert settings.window_days == 30
    assert settings.reactivation_days == 330
    assert settings.evaluation_specialists == ("Consulta", "Evaluación")


def test_engine_from_container(manager, container, staff, payload):
    booked = manager.create_booking(payload(start_time=DAY0), staff).appointment
    manager.complete(booked.id, {"actual_duration": 90}, staff)

    retention = RetentionEngine.from_container(container, now=DAY0 + timedelta(days=41))

    [candidate] = retention.candidates()
    assert candidate.id == booked.id
    assert candidate.event.booking_code == booked.booking_code
    assert retention.stats().pending_count == 1


def test_offset_aware_reference_instant():
    now = (DAY0 + timedelta(days=60)).astimezone(timezone.utc)
    retention = engine([visit("a", DAY0)], now=now)

    assert retention.now.tzinfo is None
    assert retention.now == DAY0 + timedelta(days=60)
    assert retention.stats().eligible_base == 1
