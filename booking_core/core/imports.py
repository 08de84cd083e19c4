"""Bulk import of historical sales and appointments, tagged as ``bulk_import``.

Imported records feed occupancy and sales totals but never enter the
follow-up cohorts.
"""

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from typing import Callable, Iterable, Optional

from ..config import logger as log
from ..constants.catalog import (
    BULK_IMPORT_MARKERS,
    CREAM_CODE,
    PROCEDURES_BY_SERVICE,
    Provenance,
    ServiceType,
    default_duration,
)
from ..container import Container, get_container
from ..domain.appointment import Appointment
from ..domain.client import Client
from ..domain.payment import Payment
from ..domain.transaction import Transaction
from ..errors import ValidationError
from ..models.history import HistoryRow
from ..models.validation import parse_input
from .booking_codes import code_prefix, next_code

BULK_SOURCE = "Carga masiva"
BULK_COMMENT = "Generado desde carga histórica"
FALLBACK_SPECIALIST = "D.G."
DEFAULT_IMPORT_HOUR = 9


def infer_provenance(source: Optional[str], comments: Optional[str]) -> str:
    """Maps legacy text markers in a client source or comment to a provenance tag."""
    text = f"{source or ''} {comments or ''}".lower()
    if any(marker in text for marker in BULK_IMPORT_MARKERS):
        return Provenance.BULK_IMPORT
    return Provenance.MANUAL


def service_for_procedure(procedure: str) -> str:
    lowered = procedure.strip().lower()
    for service, procedures in PROCEDURES_BY_SERVICE.items():
        if lowered in (p.lower() for p in procedures):
            return service
    return ServiceType.OTRO


@dataclass
class ImportResult:
    transactions: list[Transaction] = field(default_factory=list)
    appointments: list[Appointment] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


class HistoryImporter:
    """Writes validated history rows as bulk-import records.

    Rows that fail validation are reported in ``ImportResult.errors`` by
    row number and skipped; the rest are stored.
    """

    def __init__(
        self,
        container: Optional[Container] = None,
        id_factory: Callable[[], str] = lambda: str(uuid.uuid4()),
    ):
        self._c = container or get_container()
        self._new_id = id_factory

    def _parse(self, rows: Iterable, result: ImportResult) -> list[HistoryRow]:
        parsed = []
        for number, row in enumerate(rows, start=1):
            try:
                parsed.append(parse_input(HistoryRow, row))
            except ValidationError as e:
                result.errors.append(f"Fila {number}: {e}")
        return parsed

    @staticmethod
    def _client(row: HistoryRow) -> Client:
        return Client(dni=row.dni, name=row.client_name, phone=row.phone, source=BULK_SOURCE)

    @staticmethod
    def _payments(row: HistoryRow) -> list[Payment]:
        payments = []
        if row.cash > 0:
            payments.append(Payment(method="Cash", amount=row.cash))
        if row.card > 0:
            payments.append(Payment(method="POS", amount=row.card))
        if not payments:
            payments.append(Payment(method="Cash", amount=row.total_amount))
        if row.cream > 0:
            payments.append(Payment(method="Cash", amount=row.cream, code=CREAM_CODE))
        return payments

    def import_sales(self, rows: Iterable) -> ImportResult:
        """Stores each row as a standalone sale."""
        result = ImportResult()
        for row in self._parse(rows, result):
            transaction = Transaction(
                id=self._new_id(),
                timestamp=row.date,
                client=self._client(row),
                service_type=row.service_type or service_for_procedure(row.procedure),
                procedure=row.procedure,
                payments=self._payments(row),
                cream_sold=row.cream > 0,
                comments=BULK_COMMENT,
                provenance=Provenance.BULK_IMPORT,
            )
            self._c.transactions.create(transaction)
            result.transactions.append(transaction)
        log.info(
            "imports",
            "Sales imported",
            stored=len(result.transactions),
            rejected=len(result.errors),
        )
        return result

    def _specialist(self, row: HistoryRow) -> str:
        if row.specialist and row.specialist.strip():
            return row.specialist.strip()
        roster = self._c.specialists.get_active()
        return roster[0].name if roster else FALLBACK_SPECIALIST

    def import_completed_appointments(self, rows: Iterable) -> ImportResult:
        """Stores each row as a completed appointment with its booking code."""
        result = ImportResult()
        for row in self._parse(rows, result):
            service = row.service_type or service_for_procedure(row.procedure)
            start = row.date
            if start.hour == 0 and start.minute == 0:
                start = start.replace(hour=DEFAULT_IMPORT_HOUR)
            minutes = row.duration_minutes or default_duration(service, row.procedure)

            existing = self._c.appointments.get_booking_codes(code_prefix(start))
            appointment = Appointment(
                id=self._new_id(),
                booking_code=next_code(start, existing),
                specialist=self._specialist(row),
                service_type=service,
                procedure=row.procedure,
                start_time=start,
                end_time=start + timedelta(minutes=minutes),
                client=self._client(row),
                status="completed",
                actual_duration=minutes,
                comments=BULK_COMMENT,
                provenance=Provenance.BULK_IMPORT,
                created_at=row.date,
                updated_at=row.date,
            )
            self._c.appointments.create(appointment)
            result.appointments.append(appointment)
        log.info(
            "imports",
            "Appointments imported",
            stored=len(result.appointments),
            rejected=len(result.errors),
        )
        return result

    def backfill_provenance(self) -> int:
        """Tags legacy records carrying bulk-import text markers. Returns the count updated."""
        updated = 0
        for appointment in self._c.appointments.get_all():
            tag = infer_provenance(appointment.client.source, appointment.comments)
            if tag != appointment.provenance and tag == Provenance.BULK_IMPORT:
                self._c.appointments.update(
                    replace(appointment, provenance=tag, updated_at=datetime.now())
                )
                updated += 1
        for transaction in self._c.transactions.get_all():
            tag = infer_provenance(transaction.client.source, transaction.comments)
            if tag != transaction.provenance and tag == Provenance.BULK_IMPORT:
                self._c.transactions.update(replace(transaction, provenance=tag))
                updated += 1
        log.info("imports", "Provenance backfilled", updated=updated)
        return updated
