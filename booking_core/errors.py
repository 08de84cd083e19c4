"""Error taxonomy for booking operations."""

from typing import Optional


class BookingError(RuntimeError):
    """Base class for every refusal raised by the core."""


class ValidationError(BookingError):
    """Raised when incoming data fails validation."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class NotFoundError(BookingError):
    """Raised when a referenced record does not exist."""


class SlotConflictError(BookingError):
    """Raised when a slot overlaps another appointment and no override was given."""

    def __init__(self, message: str, conflict):
        super().__init__(message)
        self.conflict = conflict


class InvalidTransitionError(BookingError):
    """Raised when a status change is not allowed from the current state."""


class ConfirmationRequiredError(BookingError):
    """Raised when an action needs explicit staff confirmation."""


class IntegrityGuardError(BookingError):
    """Raised when a delete would orphan financial history."""

    def __init__(self, message: str, linked_transaction_ids: list[str]):
        super().__init__(message)
        self.linked_transaction_ids = linked_transaction_ids


class AuthorizationError(BookingError):
    """Raised when a user action is not permitted."""


class StorageError(BookingError):
    """Raised when the storage collaborator fails a read or write."""
