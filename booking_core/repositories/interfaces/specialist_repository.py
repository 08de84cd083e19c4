"""Interface for specialist roster repository."""

from abc import ABC, abstractmethod

from ...domain.specialist import Specialist


class ISpecialistRepository(ABC):
    """Contract for the specialist roster."""

    @abstractmethod
    def get_all(self) -> list[Specialist]:
        """Gets every specialist, active or not."""
        pass

    @abstractmethod
    def get_active(self) -> list[Specialist]:
        """Gets active specialists."""
        pass

    @abstractmethod
    def save(self, specialist: Specialist) -> Specialist:
        """Creates or updates a specialist."""
        pass
