"""FollowUpState entity - staff annotations on a follow-up candidate."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Literal


FollowUpStatus = Literal["PENDIENTE", "CONTACTADO", "AGENDADO", "PERDIDO"]

FOLLOW_UP_STATUSES = ("PENDIENTE", "CONTACTADO", "AGENDADO", "PERDIDO")


@dataclass
class FollowUpState:
    """Keyed by the originating appointment or transaction ID.

    Created lazily on the first change and never deleted, only archived.
    """

    event_id: str
    status: FollowUpStatus = "PENDIENTE"
    notes: Optional[str] = None
    last_contact_at: Optional[datetime] = None
    archived: bool = False
    updated_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: dict) -> "FollowUpState":
        """Creates a FollowUpState from a dictionary."""
        return cls(
            event_id=data["event_id"],
            status=data.get("status") or "PENDIENTE",
            notes=data.get("notes"),
            last_contact_at=data.get("last_contact_at"),
            archived=bool(data.get("archived", 0)),
            updated_at=data.get("updated_at"),
        )

    def to_dict(self) -> dict:
        """Converts to dictionary."""
        return {
            "event_id": self.event_id,
            "status": self.status,
            "notes": self.notes,
            "last_contact_at": self.last_contact_at,
            "archived": self.archived,
            "updated_at": self.updated_at,
        }
