from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from booking_core.constants.catalog import CREAM_CODE, Provenance, ServiceType
from booking_core.core.imports import HistoryImporter, infer_provenance, service_for_procedure
from booking_core.core.retention import RetentionEngine
from booking_core.domain.client import Client
from booking_core.domain.payment import Payment
from booking_core.domain.transaction import Transaction

JAN = datetime(2025, 1, 15)


@pytest.fixture
def importer(container):
    return HistoryImporter(container)


def row(**overrides):
    data = {
        "date": JAN,
        "client_name": "Rosa Diaz",
        "dni": "55555555",
        "phone": "955123456",
        "procedure": "Microblading",
        "total_amount": "350",
    }
    data.update(overrides)
    return data


@pytest.mark.parametrize(
    "source, comments, expected",
    [
        ("Carga masiva", None, Provenance.BULK_IMPORT),
        ("IG", "Generado desde carga histórica", Provenance.BULK_IMPORT),
        ("IG", "CARGA MASIVA enero", Provenance.BULK_IMPORT),
        ("IG", "Cliente frecuente", Provenance.MANUAL),
        (None, None, Provenance.MANUAL),
    ],
)
def test_infer_provenance(source, comments, expected):
    assert infer_provenance(source, comments) == expected


def test_service_for_procedure():
    assert service_for_procedure("laser 3") == ServiceType.REMOCION
    assert service_for_procedure("Lifting") == ServiceType.PESTANAS
    assert service_for_procedure("Tatuaje") == ServiceType.OTRO


def test_import_sales(importer, container):
    result = importer.import_sales(
        [
            row(cash="200", card="150", cream="40"),
            row(total_amount="-1"),
            row(client_name="   "),
            row(dni="66666666", procedure="Laser 1", total_amount="120"),
        ]
    )

    assert len(result.transactions) == 2
    assert len(result.errors) == 2
    assert result.errors[0].startswith("Fila 2:")

    first, second = result.transactions
    assert [p.method for p in first.payments] == ["Cash", "POS", "Cash"]
    assert first.payments[2].code == CREAM_CODE
    assert first.cream_sold
    assert first.cream_amount == Decimal("40")
    assert second.service_type == ServiceType.REMOCION
    assert second.payments[0].amount == Decimal("120")
    assert all(t.provenance == Provenance.BULK_IMPORT for t in container.transactions.get_all())


def test_import_completed_appointments(importer, container):
    result = importer.import_completed_appointments(
        [
            row(specialist="Laura"),
            row(date=JAN.replace(hour=15), procedure="Laser 2", duration_minutes=45),
        ]
    )

    first, second = result.appointments
    assert first.status == "completed"
    assert first.start_time == JAN.replace(hour=9)
    assert first.end_time - first.start_time == timedelta(minutes=90)
    assert first.specialist == "Laura"
    assert first.booking_code == "0125-001"
    # Without a specialist column the first active specialist is used
    assert second.specialist == "Evaluación"
    assert second.booking_code == "0125-002"
    assert second.actual_duration == 45
    assert all(a.provenance == Provenance.BULK_IMPORT for a in container.appointments.get_all())


def test_imported_history_is_excluded_from_follow_up(importer, container):
    importer.import_sales([row()])
    importer.import_completed_appointments([row(specialist="Julissa", dni="66666666")])

    retention = RetentionEngine.from_container(container, now=JAN + timedelta(days=60))

    assert retention.candidates() == []
    assert retention.stats().eligible_base == 0


def test_backfill_provenance(importer, container):
    legacy = Transaction(
        id="legacy-1",
        timestamp=JAN,
        client=Client(dni="55555555", name="Rosa Diaz", source="Carga masiva"),
        service_type="Cejas",
        procedure="Microblading",
        payments=[Payment(method="Cash", amount=Decimal("300"))],
    )
    organic = Transaction(
        id="organic-1",
        timestamp=JAN,
        client=Client(dni="66666666", name="Luz Perez", source="IG"),
        service_type="Cejas",
        procedure="Microblading",
    )
    container.transactions.create(legacy)
    container.transactions.create(organic)

    assert importer.backfill_provenance() == 1
    assert container.transactions.get_by_id("legacy-1").provenance == Provenance.BULK_IMPORT
    assert container.transactions.get_by_id("organic-1").provenance == Provenance.MANUAL
    assert importer.backfill_provenance() == 0
