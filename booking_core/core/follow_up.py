"""Follow-up tracking - staff annotations over retention candidates."""

from dataclasses import replace
from datetime import datetime
from typing import Callable, Iterable, Optional

from ..config import logger as log
from ..container import Container, get_container
from ..domain.actor import Actor
from ..domain.follow_up import FOLLOW_UP_STATUSES, FollowUpState
from ..errors import AuthorizationError, ValidationError


class FollowUpTracker:
    """Creates follow-up states lazily on the first change; never deletes them.

    Args:
        container: Repositories; the global container when omitted.
        clock: Returns the current instant.
    """

    def __init__(
        self,
        container: Optional[Container] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._c = container or get_container()
        self._clock = clock

    def get(self, event_id: str) -> FollowUpState:
        """Stored state, or an unsaved default one."""
        return self._c.follow_ups.get(event_id) or FollowUpState(event_id=event_id)

    def _save(self, state: FollowUpState) -> FollowUpState:
        saved = self._c.follow_ups.save(replace(state, updated_at=self._clock()))
        log.info(
            "follow_up",
            "State saved",
            event_id=saved.event_id,
            status=saved.status,
            archived=saved.archived,
        )
        return saved

    def update_status(self, event_id: str, status: str) -> FollowUpState:
        if status not in FOLLOW_UP_STATUSES:
            raise ValidationError(f"Estado de seguimiento inválido: {status}", field="status")
        return self._save(replace(self.get(event_id), status=status))

    def update_notes(self, event_id: str, notes: str) -> FollowUpState:
        return self._save(replace(self.get(event_id), notes=notes.strip() or None))

    def record_contact(
        self, event_id: str, current_status: str, has_return: bool
    ) -> FollowUpState:
        """Stamps an outreach; PENDIENTE becomes CONTACTADO unless a return is booked."""
        state = self.get(event_id)
        status = state.status
        if current_status == "PENDIENTE" and not has_return:
            status = "CONTACTADO"
        return self._save(replace(state, status=status, last_contact_at=self._clock()))

    def _require_privileged(self, actor: Actor, action: str) -> None:
        if not actor.is_privileged:
            log.warn("follow_up", "Archive refused", actor=actor.id, action=action)
            raise AuthorizationError(
                "Solo un administrador puede archivar o restaurar seguimientos"
            )

    def archive(self, event_id: str, actor: Actor) -> FollowUpState:
        self._require_privileged(actor, "archive")
        return self._save(replace(self.get(event_id), archived=True))

    def bulk_archive(self, event_ids: Iterable[str], actor: Actor) -> list[FollowUpState]:
        self._require_privileged(actor, "bulk_archive")
        event_ids = list(dict.fromkeys(event_ids))
        log.info("follow_up", "Bulk archive", count=len(event_ids), actor=actor.id)
        return [self._save(replace(self.get(i), archived=True)) for i in event_ids]

    def unarchive(self, event_id: str, actor: Actor) -> FollowUpState:
        self._require_privileged(actor, "unarchive")
        return self._save(replace(self.get(event_id), archived=False))
