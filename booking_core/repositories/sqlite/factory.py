"""Factory for creating Container with SQLite implementation."""

from typing import Optional

from ...container import Container
from .connection import SQLiteConnection
from .system_config_repository import SQLiteSystemConfigRepository
from .client_repository import SQLiteClientRepository
from .specialist_repository import SQLiteSpecialistRepository
from .schedule_repository import SQLiteScheduleRepository
from .appointment_repository import SQLiteAppointmentRepository
from .transaction_repository import SQLiteTransactionRepository
from .follow_up_repository import SQLiteFollowUpRepository


def create_sqlite_container(db_path: Optional[str] = None) -> Container:
    """Creates a Container with SQLite repository implementations.

    Args:
        db_path: Path to database file. Uses BOOKING_DB_PATH or the default if not specified.

    Returns:
        Container: Configured with SQLite repositories.
    """
    connection = SQLiteConnection(db_path)

    return Container(
        config=SQLiteSystemConfigRepository(connection),
        clients=SQLiteClientRepository(connection),
        specialists=SQLiteSpecialistRepository(connection),
        schedule=SQLiteScheduleRepository(connection),
        appointments=SQLiteAppointmentRepository(connection),
        transactions=SQLiteTransactionRepository(connection),
        follow_ups=SQLiteFollowUpRepository(connection),
        atomic=connection.transaction,
    )
