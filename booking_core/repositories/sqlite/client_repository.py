"""SQLite implementation of ClientRepository."""

from datetime import datetime
from typing import Optional

from ..interfaces.client_repository import IClientRepository
from ...domain.client import Client
from ...config import logger as log
from .connection import SQLiteConnection


class SQLiteClientRepository(IClientRepository):
    """SQLite implementation of client repository."""

    def __init__(self, connection: SQLiteConnection):
        self._conn = connection

    def get_by_dni(self, dni: str) -> Optional[Client]:
        """Gets a client by national ID."""
        log.debug("repo.client", "get_by_dni", dni=dni)
        with self._conn.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT * FROM clients WHERE dni = ?", (dni,))
            row = cursor.fetchone()
            result = Client.from_dict(dict(row)) if row else None
            log.debug(
                "repo.client",
                "get_by_dni result",
                found=result is not None,
                name=result.name if result else None,
            )
            return result

    def search(self, term: str) -> list[Client]:
        """Finds clients whose name, DNI or phone contains the term."""
        log.debug("repo.client", "search", term=term)
        pattern = f"%{term.strip()}%"
        with self._conn.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """SELECT * FROM clients
                   WHERE LOWER(name) LIKE LOWER(?) OR dni LIKE ? OR phone LIKE ?
                   ORDER BY name""",
                (pattern, pattern, pattern),
            )
            results = [Client.from_dict(dict(row)) for row in cursor.fetchall()]
            log.debug("repo.client", "search result", count=len(results))
            return results

    def upsert(self, client: Client) -> Client:
        """Creates or overwrites a client (last writer wins)."""
        log.info("repo.client", "upsert", dni=client.dni, name=client.name)
        now = datetime.now()
        with self._conn.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """INSERT INTO clients (dni, name, phone, source, created_at, updated_at)
                   VALUES (?, ?, ?, ?, ?, ?)
                   ON CONFLICT(dni) DO UPDATE SET
                       name = excluded.name,
                       phone = excluded.phone,
                       source = excluded.source,
                       updated_at = excluded.updated_at""",
                (client.dni, client.name, client.phone, client.source, now, now),
            )
        client.updated_at = now
        if client.created_at is None:
            client.created_at = now
        return client
