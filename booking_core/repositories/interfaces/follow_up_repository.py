"""Interface for follow-up tracking repository."""

from abc import ABC, abstractmethod
from typing import Optional

from ...domain.follow_up import FollowUpState


class IFollowUpRepository(ABC):
    """Contract for follow-up annotations."""

    @abstractmethod
    def get(self, event_id: str) -> Optional[FollowUpState]:
        """Gets the state of one event."""
        pass

    @abstractmethod
    def get_all(self) -> dict[str, FollowUpState]:
        """Gets every tracked state keyed by event ID."""
        pass

    @abstractmethod
    def save(self, state: FollowUpState) -> FollowUpState:
        """Creates or updates a state."""
        pass
