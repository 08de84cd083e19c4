"""SQLite implementation of AppointmentRepository."""

from datetime import datetime
from typing import Optional

from ..interfaces.appointment_repository import IAppointmentRepository
from ...domain.appointment import Appointment
from ...config import logger as log
from .connection import SQLiteConnection

_COLUMNS = (
    "id",
    "booking_code",
    "specialist",
    "service_type",
    "procedure",
    "start_time",
    "end_time",
    "client_dni",
    "client_name",
    "client_phone",
    "client_source",
    "status",
    "actual_duration",
    "down_payment_method",
    "down_payment_amount",
    "down_payment_code",
    "reconfirmation_status",
    "comments",
    "provenance",
    "cancellation_reason",
    "cancelled_at",
    "cancelled_by",
    "created_at",
    "created_by",
    "created_by_name",
    "updated_at",
)


class SQLiteAppointmentRepository(IAppointmentRepository):
    """SQLite implementation of appointment repository."""

    def __init__(self, connection: SQLiteConnection):
        self._conn = connection

    def _select(self, where: str = "", params: tuple = ()) -> list[Appointment]:
        sql = "SELECT * FROM appointments"
        if where:
            sql += f" WHERE {where}"
        sql += " ORDER BY start_time"
        with self._conn.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(sql, params)
            return [Appointment.from_dict(dict(row)) for row in cursor.fetchall()]

    def get_by_id(self, appointment_id: str) -> Optional[Appointment]:
        """Gets an appointment by ID."""
        log.debug("repo.appointment", "get_by_id", appointment_id=appointment_id)
        results = self._select("id = ?", (appointment_id,))
        result = results[0] if results else None
        log.debug(
            "repo.appointment",
            "get_by_id result",
            found=result is not None,
            status=result.status if result else None,
        )
        return result

    def get_all(self) -> list[Appointment]:
        """Gets every appointment ordered by start time."""
        results = self._select()
        log.debug("repo.appointment", "get_all result", count=len(results))
        return results

    def get_by_specialist(self, specialist: str) -> list[Appointment]:
        """Gets all appointments of a specialist."""
        log.debug("repo.appointment", "get_by_specialist", specialist=specialist)
        results = self._select("specialist = ?", (specialist,))
        log.debug("repo.appointment", "get_by_specialist result", count=len(results))
        return results

    def get_by_client(self, dni: str) -> list[Appointment]:
        """Gets all appointments of a client."""
        log.debug("repo.appointment", "get_by_client", dni=dni)
        results = self._select("client_dni = ?", (dni,))
        log.debug("repo.appointment", "get_by_client result", count=len(results))
        return results

    def get_in_range(self, start: datetime, end: datetime) -> list[Appointment]:
        """Gets appointments starting within [start, end)."""
        log.debug("repo.appointment", "get_in_range", start=start, end=end)
        results = self._select("start_time >= ? AND start_time < ?", (start, end))
        log.debug("repo.appointment", "get_in_range result", count=len(results))
        return results

    def get_booking_codes(self, prefix: str) -> list[str]:
        """Gets the booking codes that start with a prefix."""
        with self._conn.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT booking_code FROM appointments WHERE booking_code LIKE ?",
                (f"{prefix}%",),
            )
            codes = [row["booking_code"] for row in cursor.fetchall()]
        log.debug("repo.appointment", "get_booking_codes", prefix=prefix, count=len(codes))
        return codes

    def create(self, appointment: Appointment) -> Appointment:
        """Creates a new appointment."""
        log.info(
            "repo.appointment",
            "create",
            appointment_id=appointment.id,
            code=appointment.booking_code,
            specialist=appointment.specialist,
            start=appointment.start_time,
        )
        data = appointment.to_dict()
        placeholders = ", ".join("?" for _ in _COLUMNS)
        with self._conn.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"INSERT INTO appointments ({', '.join(_COLUMNS)}) VALUES ({placeholders})",
                tuple(data[col] for col in _COLUMNS),
            )
        log.debug("repo.appointment", "create success", appointment_id=appointment.id)
        return appointment

    def update(self, appointment: Appointment) -> Appointment:
        """Updates an existing appointment."""
        log.info(
            "repo.appointment",
            "update",
            appointment_id=appointment.id,
            status=appointment.status,
        )
        data = appointment.to_dict()
        columns = [col for col in _COLUMNS if col != "id"]
        assignments = ", ".join(f"{col} = ?" for col in columns)
        with self._conn.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"UPDATE appointments SET {assignments} WHERE id = ?",
                tuple(data[col] for col in columns) + (appointment.id,),
            )
            log.debug("repo.appointment", "update result", rows=cursor.rowcount)
        return appointment

    def delete(self, appointment_id: str) -> bool:
        """Deletes an appointment."""
        log.info("repo.appointment", "delete", appointment_id=appointment_id)
        with self._conn.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM appointments WHERE id = ?", (appointment_id,))
            success = cursor.rowcount > 0
        log.debug("repo.appointment", "delete result", success=success)
        return success
