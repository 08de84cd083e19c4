"""Interface for appointment repository."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from ...domain.appointment import Appointment


class IAppointmentRepository(ABC):
    """Contract for appointment data access."""

    @abstractmethod
    def get_by_id(self, appointment_id: str) -> Optional[Appointment]:
        """Gets an appointment by ID."""
        pass

    @abstractmethod
    def get_all(self) -> list[Appointment]:
        """Gets every appointment ordered by start time."""
        pass

    @abstractmethod
    def get_by_specialist(self, specialist: str) -> list[Appointment]:
        """Gets all appointments of a specialist."""
        pass

    @abstractmethod
    def get_by_client(self, dni: str) -> list[Appointment]:
        """Gets all appointments of a client."""
        pass

    @abstractmethod
    def get_in_range(self, start: datetime, end: datetime) -> list[Appointment]:
        """Gets appointments starting within [start, end)."""
        pass

    @abstractmethod
    def get_booking_codes(self, prefix: str) -> list[str]:
        """Gets the booking codes that start with a prefix."""
        pass

    @abstractmethod
    def create(self, appointment: Appointment) -> Appointment:
        """Creates a new appointment."""
        pass

    @abstractmethod
    def update(self, appointment: Appointment) -> Appointment:
        """Updates an existing appointment."""
        pass

    @abstractmethod
    def delete(self, appointment_id: str) -> bool:
        """Deletes an appointment."""
        pass
