"""SQLite implementation of SpecialistRepository."""

from ..interfaces.specialist_repository import ISpecialistRepository
from ...domain.specialist import Specialist
from ...config import logger as log
from .connection import SQLiteConnection


class SQLiteSpecialistRepository(ISpecialistRepository):
    """SQLite implementation of the specialist roster."""

    def __init__(self, connection: SQLiteConnection):
        self._conn = connection

    def get_all(self) -> list[Specialist]:
        """Gets every specialist, active or not."""
        with self._conn.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT * FROM specialists ORDER BY name")
            return [Specialist.from_dict(dict(row)) for row in cursor.fetchall()]

    def get_active(self) -> list[Specialist]:
        """Gets active specialists."""
        with self._conn.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT * FROM specialists WHERE active = 1 ORDER BY name")
            results = [Specialist.from_dict(dict(row)) for row in cursor.fetchall()]
        log.debug("repo.specialist", "get_active result", names=[s.name for s in results])
        return results

    def save(self, specialist: Specialist) -> Specialist:
        """Creates or updates a specialist."""
        log.info("repo.specialist", "save", name=specialist.name, active=specialist.active)
        with self._conn.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "INSERT OR REPLACE INTO specialists (name, active) VALUES (?, ?)",
                (specialist.name, specialist.active),
            )
        return specialist
