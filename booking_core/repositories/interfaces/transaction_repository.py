"""Interface for transaction (sale) repository."""

from abc import ABC, abstractmethod
from typing import Optional

from ...domain.transaction import Transaction


class ITransactionRepository(ABC):
    """Contract for transaction data access."""

    @abstractmethod
    def get_by_id(self, transaction_id: str) -> Optional[Transaction]:
        """Gets a transaction by ID."""
        pass

    @abstractmethod
    def get_all(self) -> list[Transaction]:
        """Gets every transaction ordered by timestamp."""
        pass

    @abstractmethod
    def get_by_booking(self, booking_id: str) -> list[Transaction]:
        """Gets the transactions linked to an appointment."""
        pass

    @abstractmethod
    def create(self, transaction: Transaction) -> Transaction:
        """Creates a new transaction."""
        pass

    @abstractmethod
    def unlink_booking(self, booking_id: str) -> int:
        """Clears the appointment link of every transaction pointing to it.

        Returns:
            Number of transactions unlinked.
        """
        pass

    @abstractmethod
    def update(self, transaction: Transaction) -> Transaction:
        """Updates an existing transaction."""
        pass
