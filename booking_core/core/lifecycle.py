"""Booking lifecycle - creation, edits, status transitions and payment linkage.

Every mutating operation validates first and writes last; the writes of
one operation share a single storage transaction. Records handed
in by callers are never mutated; new versions are built with
``dataclasses.replace`` and returned only after storage accepted them.
"""

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Callable, Optional, Union

from ..config import logger as log
from ..constants.catalog import (
    BLOCK_CLIENT_NAME,
    BLOCK_CLIENT_SOURCE,
    ServiceType,
    TransactionKind,
)
from ..container import Container, get_container
from ..domain.actor import Actor
from ..domain.appointment import Appointment
from ..domain.client import Client
from ..domain.payment import Payment
from ..domain.transaction import Transaction
from ..errors import (
    ConfirmationRequiredError,
    IntegrityGuardError,
    InvalidTransitionError,
    NotFoundError,
    SlotConflictError,
    ValidationError,
)
from ..models.booking import BlockRequest, BookingRequest, CompletionRequest
from ..models.payment import PaymentInput
from ..models.validation import parse_input
from .booking_codes import code_prefix, next_code
from .conflicts import SlotCheck, check_slot
from .schedule import ScheduleModel


ALLOWED_TRANSITIONS: dict[str, frozenset] = {
    "scheduled": frozenset({"completed", "cancelled", "noshow"}),
    "completed": frozenset(),
    "cancelled": frozenset(),
    "noshow": frozenset(),
}

RECONFIRMATION_VALUES = (None, "confirmed", "rejected")


def can_transition(current: str, target: str) -> bool:
    return target in ALLOWED_TRANSITIONS.get(current, frozenset())


def ensure_transition(appointment: Appointment, target: str) -> None:
    """Raises InvalidTransitionError unless ``target`` is reachable."""
    label = appointment.booking_code or appointment.id
    if appointment.is_terminal:
        raise InvalidTransitionError(
            f"La reserva {label} ya está cerrada en estado '{appointment.status}' "
            f"y no puede pasar a '{target}'"
        )
    if not can_transition(appointment.status, target):
        raise InvalidTransitionError(
            f"La reserva {label} está en estado '{appointment.status}' "
            f"y no puede pasar a '{target}'"
        )


@dataclass
class BookingResult:
    """An appointment plus the transaction the operation created, if any."""

    appointment: Appointment
    transaction: Optional[Transaction] = None


@dataclass
class DeleteCheck:
    """Check phase of a delete."""

    appointment_id: str
    linked_transaction_ids: list[str] = field(default_factory=list)
    allowed: bool = True
    requires_force: bool = False
    reason: Optional[str] = None


@dataclass
class DeleteResult:
    appointment_id: str
    unlinked_transactions: int = 0


class BookingLifecycleManager:
    """Owns the appointment state machine and its financial side effects.

    Args:
        container: Repositories; the global container when omitted.
        clock: Returns the current instant.
        id_factory: Generates new record identifiers.
    """

    def __init__(
        self,
        container: Optional[Container] = None,
        clock: Callable[[], datetime] = datetime.now,
        id_factory: Callable[[], str] = lambda: str(uuid.uuid4()),
    ):
        self._c = container or get_container()
        self._clock = clock
        self._new_id = id_factory

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def get(self, appointment_id: str) -> Appointment:
        appointment = self._c.appointments.get_by_id(appointment_id)
        if appointment is None:
            raise NotFoundError(f"No se encontró la reserva {appointment_id}")
        return appointment

    def schedule_model(self) -> ScheduleModel:
        return ScheduleModel.from_container(self._c)

    def lookup_client(self, dni: str) -> Optional[Client]:
        """Known client data for autocompletion."""
        return self._c.clients.get_by_dni(dni.strip())

    def linked_transactions(self, appointment_id: str) -> list[Transaction]:
        return self._c.transactions.get_by_booking(appointment_id)

    # ------------------------------------------------------------------
    # Check phase
    # ------------------------------------------------------------------
    def preview_booking(
        self,
        request: Union[BookingRequest, BlockRequest, dict],
        exclude_id: Optional[str] = None,
    ) -> SlotCheck:
        """Conflict and schedule advisories for a candidate, without writing."""
        if isinstance(request, dict):
            model_cls = BlockRequest if "reason" in request else BookingRequest
            request = parse_input(model_cls, request)
        return check_slot(
            request,
            self._c.appointments.get_by_specialist(request.specialist),
            exclude_id=exclude_id,
            schedule=self.schedule_model(),
        )

    def _gate_slot(
        self, request, allow_overlap: bool, exclude_id: Optional[str] = None
    ) -> SlotCheck:
        check = self.preview_booking(request, exclude_id=exclude_id)
        if not check.ok:
            if not allow_overlap:
                log.warn(
                    "lifecycle",
                    "Slot conflict without override",
                    specialist=request.specialist,
                    start=request.start_time,
                    conflict_id=check.conflict.id,
                )
                raise SlotConflictError(
                    f"{check.reason}. Confirme con allow_overlap=True para continuar.",
                    check.conflict,
                )
            log.info(
                "lifecycle",
                "Overlap accepted by staff",
                specialist=request.specialist,
                conflict_id=check.conflict.id,
            )
        return check

    def _check_specialist(self, specialist: str) -> None:
        roster = self._c.specialists.get_active()
        if roster and specialist not in {s.name for s in roster}:
            log.warn("lifecycle", "Unknown specialist", specialist=specialist)
            raise ValidationError(
                f"'{specialist}' no es un especialista activo", field="specialist"
            )

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------
    def create_booking(
        self,
        request: Union[BookingRequest, dict],
        actor: Actor,
        allow_overlap: bool = False,
    ) -> BookingResult:
        """Creates a client appointment, assigning its booking code.

        A deposit in the request spawns exactly one ``adelanto`` transaction.

        Raises:
            ValidationError: Malformed request or inactive specialist.
            SlotConflictError: Overlap and ``allow_overlap`` is False.
        """
        request = parse_input(BookingRequest, request)
        self._check_specialist(request.specialist)
        self._gate_slot(request, allow_overlap)

        now = self._clock()
        client = request.client.to_domain()
        appointment = Appointment(
            id=self._new_id(),
            booking_code=self._allocate_code(request.start_time),
            specialist=request.specialist,
            service_type=request.service_type,
            procedure=request.procedure,
            start_time=request.start_time,
            end_time=request.end_time,
            client=client,
            down_payment=request.deposit.to_domain() if request.deposit else None,
            comments=(request.comments or "").strip() or None,
            created_at=now,
            created_by=actor.id,
            created_by_name=actor.name,
            updated_at=now,
        )

        transaction = None
        with self._c.atomic():
            self._c.clients.upsert(replace(client))
            self._c.appointments.create(appointment)
            if appointment.down_payment is not None:
                transaction = self._post_deposit(appointment, appointment.down_payment, actor)
        log.info(
            "lifecycle",
            "Booking created",
            appointment_id=appointment.id,
            code=appointment.booking_code,
            specialist=appointment.specialist,
            start=appointment.start_time,
        )
        return BookingResult(appointment=appointment, transaction=transaction)

    def create_block(
        self,
        request: Union[BlockRequest, dict],
        actor: Actor,
        allow_overlap: bool = False,
    ) -> Appointment:
        """Reserves a specialist's time without a client."""
        request = parse_input(BlockRequest, request)
        self._check_specialist(request.specialist)
        self._gate_slot(request, allow_overlap)

        now = self._clock()
        appointment = Appointment(
            id=self._new_id(),
            booking_code=self._allocate_code(request.start_time),
            specialist=request.specialist,
            service_type=ServiceType.BLOQUEO,
            procedure=request.reason.strip(),
            start_time=request.start_time,
            end_time=request.end_time,
            client=Client(
                dni=f"BLOCK-{now:%H%M%S}",
                name=BLOCK_CLIENT_NAME,
                phone="000000000",
                source=BLOCK_CLIENT_SOURCE,
            ),
            comments=(request.comments or "").strip() or None,
            created_at=now,
            created_by=actor.id,
            created_by_name=actor.name,
            updated_at=now,
        )
        self._c.appointments.create(appointment)
        log.info(
            "lifecycle",
            "Block created",
            appointment_id=appointment.id,
            specialist=appointment.specialist,
            reason=appointment.procedure,
        )
        return appointment

    def _allocate_code(self, start_time: datetime) -> str:
        # Read-then-write without a lock: two creations in the same month
        # racing here can receive the same code.
        existing = self._c.appointments.get_booking_codes(code_prefix(start_time))
        return next_code(start_time, existing)

    # ------------------------------------------------------------------
    # Edits
    # ------------------------------------------------------------------
    def update_booking(
        self,
        appointment_id: str,
        request: Union[BookingRequest, dict],
        actor: Actor,
        allow_overlap: bool = False,
    ) -> BookingResult:
        """Edits a client appointment.

        ``id``, ``booking_code``, ``created_at``, creator, ``status``,
        ``actual_duration`` and reconfirmation are carried over unchanged.
        A deposit in the request is posted as a new transaction only if the
        appointment has none yet; otherwise only the stored fields change.
        A request without deposit keeps the existing one.
        """
        request = parse_input(BookingRequest, request)
        current = self.get(appointment_id)
        if current.is_block:
            raise ValidationError(
                "Use update_block para editar un bloqueo", field="service_type"
            )
        if request.specialist != current.specialist:
            self._check_specialist(request.specialist)
        self._gate_slot(request, allow_overlap, exclude_id=current.id)

        already_has_deposit = self._has_deposit(current)
        new_deposit = request.deposit.to_domain() if request.deposit else None
        if new_deposit is not None and not already_has_deposit and current.status != "scheduled":
            raise InvalidTransitionError(
                f"Solo se registra pago a cuenta en reservas programadas "
                f"(estado actual '{current.status}')"
            )

        client = request.client.to_domain()
        updated = replace(
            current,
            specialist=request.specialist,
            service_type=request.service_type,
            procedure=request.procedure,
            start_time=request.start_time,
            end_time=request.end_time,
            client=client,
            comments=(request.comments or "").strip() or None,
            down_payment=new_deposit or current.down_payment,
            updated_at=self._clock(),
        )

        transaction = None
        with self._c.atomic():
            self._c.clients.upsert(replace(client))
            self._c.appointments.update(updated)
            if new_deposit is not None and not already_has_deposit:
                transaction = self._post_deposit(updated, new_deposit, actor)
        log.info(
            "lifecycle",
            "Booking updated",
            appointment_id=updated.id,
            code=updated.booking_code,
            deposit_updated=new_deposit is not None and already_has_deposit,
        )
        return BookingResult(appointment=updated, transaction=transaction)

    def update_block(
        self,
        appointment_id: str,
        request: Union[BlockRequest, dict],
        allow_overlap: bool = False,
    ) -> Appointment:
        request = parse_input(BlockRequest, request)
        current = self.get(appointment_id)
        if not current.is_block:
            raise ValidationError("La reserva no es un bloqueo", field="service_type")
        self._gate_slot(request, allow_overlap, exclude_id=current.id)

        updated = replace(
            current,
            specialist=request.specialist,
            procedure=request.reason.strip(),
            start_time=request.start_time,
            end_time=request.end_time,
            comments=(request.comments or "").strip() or None,
            updated_at=self._clock(),
        )
        self._c.appointments.update(updated)
        log.info("lifecycle", "Block updated", appointment_id=updated.id)
        return updated

    # ------------------------------------------------------------------
    # Deposits
    # ------------------------------------------------------------------
    def register_deposit(
        self,
        appointment_id: str,
        payment: Union[PaymentInput, dict],
        actor: Actor,
    ) -> BookingResult:
        """Attaches a deposit to a scheduled appointment.

        The first deposit creates one ``adelanto`` transaction; later calls
        only overwrite the appointment's stored deposit fields.
        """
        payment = parse_input(PaymentInput, payment)
        if payment.amount <= 0:
            raise ValidationError("Ingrese un monto válido para el pago a cuenta", field="amount")

        current = self.get(appointment_id)
        if current.is_block:
            raise ValidationError("Un bloqueo no admite pagos", field="service_type")
        already_has_deposit = self._has_deposit(current)
        if not already_has_deposit and current.status != "scheduled":
            raise InvalidTransitionError(
                f"Solo se registra pago a cuenta en reservas programadas "
                f"(estado actual '{current.status}')"
            )

        deposit = payment.to_domain()
        updated = replace(current, down_payment=deposit, updated_at=self._clock())
        transaction = None
        with self._c.atomic():
            self._c.appointments.update(updated)
            if not already_has_deposit:
                transaction = self._post_deposit(updated, deposit, actor)
        if already_has_deposit:
            log.info(
                "lifecycle",
                "Deposit fields updated, no new transaction",
                appointment_id=updated.id,
                amount=deposit.amount,
            )
        return BookingResult(appointment=updated, transaction=transaction)

    def _has_deposit(self, appointment: Appointment) -> bool:
        if appointment.down_payment is not None:
            return True
        return any(t.is_deposit for t in self.linked_transactions(appointment.id))

    def _post_deposit(
        self, appointment: Appointment, deposit: Payment, actor: Actor
    ) -> Transaction:
        client = replace(appointment.client, source=appointment.client.source or "Reserva")
        transaction = Transaction(
            id=self._new_id(),
            timestamp=self._clock(),
            client=client,
            service_type=appointment.service_type,
            procedure=appointment.procedure,
            payments=[replace(deposit)],
            comments=(
                f"Seña para reserva {appointment.booking_code} "
                f"del {appointment.start_time:%Y-%m-%d %H:%M}"
            ),
            booking_id=appointment.id,
            kind=TransactionKind.ADELANTO,
            created_by=actor.id,
            created_by_name=actor.name,
        )
        self._c.transactions.create(transaction)
        log.info(
            "lifecycle",
            "Deposit posted",
            appointment_id=appointment.id,
            transaction_id=transaction.id,
            amount=deposit.amount,
        )
        return transaction

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------
    def set_reconfirmation(
        self, appointment_id: str, status: Optional[str]
    ) -> Appointment:
        """Sets ``confirmed``, ``rejected`` or ``None`` (unset) on a scheduled appointment."""
        if status not in RECONFIRMATION_VALUES:
            raise ValidationError(
                f"Estado de reconfirmación inválido: {status}",
                field="reconfirmation_status",
            )
        current = self.get(appointment_id)
        if current.status != "scheduled":
            raise InvalidTransitionError(
                "La reconfirmación solo aplica a reservas programadas"
            )
        updated = replace(current, reconfirmation_status=status, updated_at=self._clock())
        self._c.appointments.update(updated)
        log.info("lifecycle", "Reconfirmation set", appointment_id=updated.id, status=status)
        return updated

    def complete(
        self,
        appointment_id: str,
        completion: Union[CompletionRequest, dict],
        actor: Actor,
    ) -> BookingResult:
        """Marks a scheduled appointment as attended.

        The remaining balance and the cream add-on, when given, become two
        separate payments of one ``cierre`` transaction.
        """
        completion = parse_input(CompletionRequest, completion)
        current = self.get(appointment_id)
        ensure_transition(current, "completed")

        updated = replace(
            current,
            status="completed",
            actual_duration=completion.actual_duration,
            updated_at=self._clock(),
        )

        transaction = None
        if completion.has_payment:
            if current.is_block:
                raise ValidationError("Un bloqueo no admite pagos", field="service_type")
            transaction = self._build_closing(updated, completion, actor)

        with self._c.atomic():
            self._c.appointments.update(updated)
            if transaction is not None:
                self._c.transactions.create(transaction)
        log.info(
            "lifecycle",
            "Booking completed",
            appointment_id=updated.id,
            actual_duration=updated.actual_duration,
        )
        if transaction is not None:
            log.info(
                "lifecycle",
                "Closing payment posted",
                appointment_id=updated.id,
                transaction_id=transaction.id,
                total=transaction.total,
                cream=transaction.cream_amount,
            )
        return BookingResult(appointment=updated, transaction=transaction)

    def _build_closing(
        self, appointment: Appointment, completion: CompletionRequest, actor: Actor
    ) -> Transaction:
        payments = []
        if completion.remaining_payment is not None:
            payments.append(completion.remaining_payment.to_domain())
        if completion.cream_payment is not None:
            payments.append(completion.cream_payment.to_domain())

        comments = f"Cierre de reserva {appointment.booking_code}"
        if completion.comments:
            comments += f" - {completion.comments.strip()}"

        return Transaction(
            id=self._new_id(),
            timestamp=self._clock(),
            client=replace(appointment.client),
            service_type=appointment.service_type,
            procedure=appointment.procedure,
            payments=payments,
            cream_sold=completion.cream_payment is not None,
            comments=comments,
            booking_id=appointment.id,
            kind=TransactionKind.CIERRE,
            created_by=actor.id,
            created_by_name=actor.name,
        )

    def mark_no_show(
        self, appointment_id: str, actor: Actor, confirmed: bool = False
    ) -> Appointment:
        """Marks a scheduled appointment as no-show. Idempotent."""
        current = self.get(appointment_id)
        if current.status == "noshow":
            return current
        ensure_transition(current, "noshow")
        if not confirmed:
            raise ConfirmationRequiredError(
                f"Confirme que la reserva {current.booking_code or current.id} "
                "debe marcarse como 'No vino' (confirmed=True)"
            )

        updated = replace(current, status="noshow", updated_at=self._clock())
        self._c.appointments.update(updated)
        log.info("lifecycle", "Booking marked no-show", appointment_id=updated.id, by=actor.id)
        return updated

    def cancel(
        self, appointment_id: str, actor: Actor, reason: Optional[str] = None
    ) -> Appointment:
        current = self.get(appointment_id)
        ensure_transition(current, "cancelled")

        now = self._clock()
        updated = replace(
            current,
            status="cancelled",
            cancellation_reason=reason,
            cancelled_at=now,
            cancelled_by=actor.id,
            updated_at=now,
        )
        self._c.appointments.update(updated)
        log.info("lifecycle", "Booking cancelled", appointment_id=updated.id, reason=reason)
        return updated

    # ------------------------------------------------------------------
    # Deletion
    # ------------------------------------------------------------------
    def check_delete(self, appointment_id: str, actor: Actor) -> DeleteCheck:
        """Check phase of a delete: who may remove this appointment and how."""
        self.get(appointment_id)
        linked = [t.id for t in self.linked_transactions(appointment_id)]
        check = DeleteCheck(appointment_id=appointment_id, linked_transaction_ids=linked)
        if not linked:
            return check

        check.requires_force = True
        if actor.is_privileged:
            check.reason = (
                f"La reserva tiene {len(linked)} venta(s) vinculada(s). "
                "Use force=True para desvincularlas y eliminar la reserva."
            )
        else:
            check.allowed = False
            check.reason = (
                f"La reserva tiene {len(linked)} venta(s) vinculada(s) y no puede "
                "eliminarse. Solo un administrador puede forzar la eliminación "
                "(las ventas se conservan desvinculadas)."
            )
        return check

    def delete(
        self, appointment_id: str, actor: Actor, force: bool = False
    ) -> DeleteResult:
        """Deletes an appointment; linked transactions survive unlinked.

        Raises:
            IntegrityGuardError: Linked transactions exist and the actor is not
                privileged, or is privileged but did not pass ``force=True``.
        """
        check = self.check_delete(appointment_id, actor)
        if check.requires_force and (not check.allowed or not force):
            log.warn(
                "lifecycle",
                "Delete refused by integrity guard",
                appointment_id=appointment_id,
                actor=actor.id,
                privileged=actor.is_privileged,
                linked=len(check.linked_transaction_ids),
            )
            raise IntegrityGuardError(check.reason, check.linked_transaction_ids)

        unlinked = 0
        with self._c.atomic():
            if check.linked_transaction_ids:
                unlinked = self._c.transactions.unlink_booking(appointment_id)
            self._c.appointments.delete(appointment_id)
        log.info(
            "lifecycle",
            "Booking deleted",
            appointment_id=appointment_id,
            actor=actor.id,
            unlinked=unlinked,
        )
        return DeleteResult(appointment_id=appointment_id, unlinked_transactions=unlinked)
