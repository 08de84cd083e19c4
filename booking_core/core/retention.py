"""Retention engine - follow-up eligibility, return detection and cohort metrics.

Everything here is a pure function over a snapshot of appointments,
transactions and follow-up annotations; nothing is cached between calls.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Iterable, Optional

from ..config import logger as log
from ..constants.catalog import Provenance, ServiceType, TOUCH_UP_PROCEDURE
from ..constants.config_keys import ConfigKeys, ConfigDefaults
from ..domain.appointment import Appointment
from ..domain.client import Client
from ..domain.follow_up import FOLLOW_UP_STATUSES, FollowUpState
from ..domain.system_config import SystemConfig
from ..domain.transaction import Transaction
from ..errors import ValidationError
from ..models.validation import to_local_naive


TAB_ALL = "TODOS"
TAB_REACTIVATION = "REACTIVACION"
TAB_ARCHIVED = "ARCHIVADOS"
TABS = (TAB_ALL, *FOLLOW_UP_STATUSES, TAB_REACTIVATION, TAB_ARCHIVED)

CATEGORY_EYEBROWS = "CEJAS"
CATEGORY_LASER = "LASER"


def _norm(value: Optional[str]) -> str:
    return (value or "").strip().lower()


def is_eyebrow_service(service_type: str) -> bool:
    return _norm(service_type) == _norm(ServiceType.CEJAS)


def is_laser_service(service_type: str) -> bool:
    return _norm(service_type) == _norm(ServiceType.REMOCION)


def is_touch_up(procedure: str) -> bool:
    return _norm(TOUCH_UP_PROCEDURE) in _norm(procedure)


@dataclass
class RetentionSettings:
    window_days: int = int(ConfigDefaults.FOLLOW_UP_WINDOW_DAYS)
    reactivation_days: int = int(ConfigDefaults.REACTIVATION_DAYS)
    return_buffer_days: int = int(ConfigDefaults.RETURN_BUFFER_DAYS)
    evaluation_specialists: tuple = tuple(
        s.strip() for s in ConfigDefaults.EVALUATION_SPECIALISTS.split(",")
    )

    @classmethod
    def from_config(cls, repo) -> "RetentionSettings":
        """Reads tunables from the system config repository, with defaults."""

        def _entry(key: str, default: str) -> SystemConfig:
            return repo.get(key) or SystemConfig(key=key, value=default)

        return cls(
            window_days=_entry(
                ConfigKeys.FOLLOW_UP_WINDOW_DAYS, ConfigDefaults.FOLLOW_UP_WINDOW_DAYS
            ).as_int(),
            reactivation_days=_entry(
                ConfigKeys.REACTIVATION_DAYS, ConfigDefaults.REACTIVATION_DAYS
            ).as_int(),
            return_buffer_days=_entry(
                ConfigKeys.RETURN_BUFFER_DAYS, ConfigDefaults.RETURN_BUFFER_DAYS
            ).as_int(),
            evaluation_specialists=tuple(
                _entry(
                    ConfigKeys.EVALUATION_SPECIALISTS, ConfigDefaults.EVALUATION_SPECIALISTS
                ).as_list()
            ),
        )


@dataclass
class FollowUpEvent:
    """A client service occurrence, from either a completed appointment or a standalone sale."""

    id: str
    occurred_at: datetime
    client: Client
    service_type: str
    procedure: str
    booking_code: Optional[str] = None
    from_sale: bool = False
    provenance: str = Provenance.MANUAL

    @property
    def is_laser(self) -> bool:
        return is_laser_service(self.service_type)


def events_from_appointments(appointments: Iterable[Appointment]) -> list[FollowUpEvent]:
    return [
        FollowUpEvent(
            id=a.id,
            occurred_at=a.start_time,
            client=a.client,
            service_type=a.service_type,
            procedure=a.procedure,
            booking_code=a.booking_code,
            provenance=a.provenance,
        )
        for a in appointments
        if a.status == "completed" and not a.is_block
    ]


def events_from_transactions(transactions: Iterable[Transaction]) -> list[FollowUpEvent]:
    """Standalone sales only: deposits and appointment-linked payments are skipped."""
    return [
        FollowUpEvent(
            id=t.id,
            occurred_at=t.timestamp,
            client=t.client,
            service_type=t.service_type,
            procedure=t.procedure,
            from_sale=True,
            provenance=t.provenance,
        )
        for t in transactions
        if t.is_standalone
    ]


def is_eligible(event: FollowUpEvent) -> bool:
    """First-time eyebrow services and every laser service; bulk imports never qualify."""
    if event.provenance == Provenance.BULK_IMPORT:
        return False
    if is_laser_service(event.service_type):
        return True
    return is_eyebrow_service(event.service_type) and not is_touch_up(event.procedure)


def target_date(event: FollowUpEvent, settings: RetentionSettings) -> datetime:
    return event.occurred_at + timedelta(days=settings.window_days)


def days_since(event: FollowUpEvent, now: datetime) -> int:
    """Whole days elapsed, floored."""
    return (now - event.occurred_at).days


def accepts_return(event: FollowUpEvent, service_type: str) -> bool:
    if event.is_laser:
        return is_laser_service(service_type) or is_eyebrow_service(service_type)
    return is_eyebrow_service(service_type)


def find_return(
    event: FollowUpEvent,
    appointments: Iterable[Appointment],
    settings: RetentionSettings,
) -> Optional[Appointment]:
    """First appointment of the same client that counts as a return visit.

    Looks at every appointment regardless of status, starting strictly after
    the event plus the buffer.
    """
    threshold = event.occurred_at + timedelta(days=settings.return_buffer_days)
    for appointment in appointments:
        if appointment.start_time <= threshold:
            continue
        if appointment.client.dni != event.client.dni:
            continue
        if accepts_return(event, appointment.service_type):
            return appointment
    return None


def resolve_status(
    returned: Optional[Appointment], state: Optional[FollowUpState]
) -> str:
    """A booked return wins over any manual status; otherwise the tracked one, else PENDIENTE."""
    if returned is not None:
        return "AGENDADO"
    if state is not None and state.status:
        return state.status
    return "PENDIENTE"


@dataclass
class FollowUpCandidate:
    event: FollowUpEvent
    target_date: datetime
    status: str
    return_appointment: Optional[Appointment] = None
    state: Optional[FollowUpState] = None

    @property
    def id(self) -> str:
        return self.event.id

    @property
    def client(self) -> Client:
        return self.event.client

    @property
    def has_return(self) -> bool:
        return self.return_appointment is not None

    @property
    def archived(self) -> bool:
        return bool(self.state and self.state.archived)

    @property
    def notes(self) -> Optional[str]:
        return self.state.notes if self.state else None


def eligible_candidates(
    appointments: list[Appointment],
    transactions: Iterable[Transaction],
    states: dict[str, FollowUpState],
    settings: RetentionSettings,
) -> list[FollowUpCandidate]:
    """Classifies every eligible event, sorted by target date."""
    events = events_from_appointments(appointments) + events_from_transactions(transactions)
    candidates = []
    for event in events:
        if not is_eligible(event):
            continue
        returned = find_return(event, appointments, settings)
        state = states.get(event.id)
        candidates.append(
            FollowUpCandidate(
                event=event,
                target_date=target_date(event, settings),
                status=resolve_status(returned, state),
                return_appointment=returned,
                state=state,
            )
        )
    candidates.sort(key=lambda c: c.target_date)
    return candidates


@dataclass
class RetentionStats:
    eligible_base: int = 0
    returned_count: int = 0
    pending_count: int = 0

    @property
    def return_rate(self) -> float:
        """Fraction in [0, 1]; 0 when the base is empty."""
        if self.eligible_base == 0:
            return 0.0
        return self.returned_count / self.eligible_base

    @property
    def pending_rate(self) -> float:
        if self.eligible_base == 0:
            return 0.0
        return self.pending_count / self.eligible_base


def retention_stats(
    candidates: Iterable[FollowUpCandidate], now: datetime, settings: RetentionSettings
) -> RetentionStats:
    """Scores candidates at least ``window_days`` old as returned or pending."""
    stats = RetentionStats()
    for candidate in candidates:
        if days_since(candidate.event, now) < settings.window_days:
            continue
        stats.eligible_base += 1
        if candidate.has_return or candidate.status == "AGENDADO":
            stats.returned_count += 1
        else:
            stats.pending_count += 1
    return stats


def reactivation_cohort(
    candidates: Iterable[FollowUpCandidate], now: datetime, settings: RetentionSettings
) -> list[FollowUpCandidate]:
    """Purely age-based: events older than ``reactivation_days``."""
    return [c for c in candidates if days_since(c.event, now) > settings.reactivation_days]


@dataclass
class FollowUpQuery:
    """Filters of the follow-up list.

    ``month`` is 1-12; ``None`` for ``year``/``month`` means no filter.
    """

    tab: str = TAB_ALL
    year: Optional[int] = None
    month: Optional[int] = None
    service: str = TAB_ALL
    search: str = ""


def _matches_search(candidate: FollowUpCandidate, term: str) -> bool:
    term = term.strip().lower()
    if not term:
        return True
    client = candidate.client
    return (
        term in client.name.lower()
        or term in client.dni
        or term in client.phone
        or term in (candidate.event.booking_code or "").lower()
    )


def filter_candidates(
    candidates: Iterable[FollowUpCandidate],
    query: FollowUpQuery,
    now: datetime,
    settings: RetentionSettings,
) -> list[FollowUpCandidate]:
    """Applies the list filters. Archived items only show in the archive tab."""
    if query.tab not in TABS:
        raise ValidationError(f"Pestaña desconocida: {query.tab}", field="tab")

    result = []
    for candidate in candidates:
        if not _matches_search(candidate, query.search):
            continue
        occurred = candidate.event.occurred_at
        if query.year is not None and occurred.year != query.year:
            continue
        if query.month is not None and occurred.month != query.month:
            continue
        if query.service == CATEGORY_EYEBROWS and candidate.event.is_laser:
            continue
        if query.service == CATEGORY_LASER and not candidate.event.is_laser:
            continue

        if query.tab == TAB_ARCHIVED:
            if candidate.archived:
                result.append(candidate)
            continue
        if candidate.archived:
            continue
        if query.tab == TAB_REACTIVATION:
            if days_since(candidate.event, now) > settings.reactivation_days:
                result.append(candidate)
            continue
        if query.tab == TAB_ALL or candidate.status == query.tab:
            result.append(candidate)
    return result


@dataclass
class ConversionStats:
    evaluation_count: int = 0
    converted_count: int = 0
    converted_dnis: list[str] = field(default_factory=list)

    @property
    def conversion_rate(self) -> float:
        if self.evaluation_count == 0:
            return 0.0
        return self.converted_count / self.evaluation_count


def conversion_stats(
    appointments: Iterable[Appointment], settings: RetentionSettings
) -> ConversionStats:
    """Evaluation-to-service funnel, counted per unique client.

    A client converts when, after their first completed evaluation, they
    have a completed appointment that is neither an evaluation nor a block.
    """
    evaluators = set(settings.evaluation_specialists)
    appointments = list(appointments)

    first_evaluation: dict[str, datetime] = {}
    for a in appointments:
        if a.specialist in evaluators and a.status == "completed":
            seen = first_evaluation.get(a.client.dni)
            if seen is None or a.start_time < seen:
                first_evaluation[a.client.dni] = a.start_time

    converted = set()
    for a in appointments:
        evaluated_at = first_evaluation.get(a.client.dni)
        if evaluated_at is None or a.client.dni in converted:
            continue
        if (
            a.status == "completed"
            and not a.is_block
            and a.specialist not in evaluators
            and a.start_time > evaluated_at
        ):
            converted.add(a.client.dni)

    return ConversionStats(
        evaluation_count=len(first_evaluation),
        converted_count=len(converted),
        converted_dnis=sorted(converted),
    )


class RetentionEngine:
    """Snapshot-bound facade over the retention functions.

    Args:
        appointments: All appointments, any status.
        transactions: All transactions.
        states: Follow-up annotations keyed by event ID.
        settings: Window and reactivation tunables.
        now: Reference instant for age computations.
    """

    def __init__(
        self,
        appointments: list[Appointment],
        transactions: list[Transaction],
        states: Optional[dict[str, FollowUpState]] = None,
        settings: Optional[RetentionSettings] = None,
        now: Optional[datetime] = None,
    ):
        self.appointments = list(appointments)
        self.transactions = list(transactions)
        self.states = dict(states or {})
        self.settings = settings or RetentionSettings()
        self.now = to_local_naive(now) or datetime.now()

    @classmethod
    def from_container(cls, container, now: Optional[datetime] = None) -> "RetentionEngine":
        engine = cls(
            appointments=container.appointments.get_all(),
            transactions=container.transactions.get_all(),
            states=container.follow_ups.get_all(),
            settings=RetentionSettings.from_config(container.config),
            now=now,
        )
        log.debug(
            "retention",
            "Snapshot loaded",
            appointments=len(engine.appointments),
            transactions=len(engine.transactions),
            tracked=len(engine.states),
        )
        return engine

    def candidates(self) -> list[FollowUpCandidate]:
        return eligible_candidates(
            self.appointments, self.transactions, self.states, self.settings
        )

    def candidate(self, event_id: str) -> Optional[FollowUpCandidate]:
        return next((c for c in self.candidates() if c.id == event_id), None)

    def stats(self) -> RetentionStats:
        return retention_stats(self.candidates(), self.now, self.settings)

    def reactivation(self) -> list[FollowUpCandidate]:
        return reactivation_cohort(self.candidates(), self.now, self.settings)

    def follow_up_list(self, query: Optional[FollowUpQuery] = None) -> list[FollowUpCandidate]:
        return filter_candidates(
            self.candidates(), query or FollowUpQuery(), self.now, self.settings
        )

    def conversion(self) -> ConversionStats:
        return conversion_stats(self.appointments, self.settings)
