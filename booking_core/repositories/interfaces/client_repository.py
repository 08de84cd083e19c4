"""Interface for client repository."""

from abc import ABC, abstractmethod
from typing import Optional

from ...domain.client import Client


class IClientRepository(ABC):
    """Contract for client data access."""

    @abstractmethod
    def get_by_dni(self, dni: str) -> Optional[Client]:
        """Gets a client by national ID."""
        pass

    @abstractmethod
    def search(self, term: str) -> list[Client]:
        """Finds clients whose name, DNI or phone contains the term."""
        pass

    @abstractmethod
    def upsert(self, client: Client) -> Client:
        """Creates or overwrites a client (last writer wins)."""
        pass
