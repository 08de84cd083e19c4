"""Actor - the staff member performing an operation."""

from dataclasses import dataclass
from typing import Literal


ActorRole = Literal["admin", "staff"]


@dataclass(frozen=True)
class Actor:
    """Supplied by the identity collaborator; only the privilege flag matters here."""

    id: str
    name: str
    role: ActorRole = "staff"

    @property
    def is_privileged(self) -> bool:
        return self.role == "admin"
