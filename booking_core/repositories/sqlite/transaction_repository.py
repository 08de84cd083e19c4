"""SQLite implementation of TransactionRepository."""

import json
from typing import Optional

from ..interfaces.transaction_repository import ITransactionRepository
from ...domain.transaction import Transaction
from ...config import logger as log
from .connection import SQLiteConnection

_COLUMNS = (
    "id",
    "timestamp",
    "client_dni",
    "client_name",
    "client_phone",
    "client_source",
    "service_type",
    "procedure",
    "payments",
    "cream_sold",
    "comments",
    "booking_id",
    "kind",
    "provenance",
    "created_by",
    "created_by_name",
)


def _row_to_transaction(row) -> Transaction:
    data = dict(row)
    data["payments"] = json.loads(data.get("payments") or "[]")
    return Transaction.from_dict(data)


class SQLiteTransactionRepository(ITransactionRepository):
    """SQLite implementation of transaction repository."""

    def __init__(self, connection: SQLiteConnection):
        self._conn = connection

    def get_by_id(self, transaction_id: str) -> Optional[Transaction]:
        """Gets a transaction by ID."""
        log.debug("repo.transaction", "get_by_id", transaction_id=transaction_id)
        with self._conn.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT * FROM transactions WHERE id = ?", (transaction_id,))
            row = cursor.fetchone()
            return _row_to_transaction(row) if row else None

    def get_all(self) -> list[Transaction]:
        """Gets every transaction ordered by timestamp."""
        with self._conn.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT * FROM transactions ORDER BY timestamp")
            results = [_row_to_transaction(row) for row in cursor.fetchall()]
        log.debug("repo.transaction", "get_all result", count=len(results))
        return results

    def get_by_booking(self, booking_id: str) -> list[Transaction]:
        """Gets the transactions linked to an appointment."""
        log.debug("repo.transaction", "get_by_booking", booking_id=booking_id)
        with self._conn.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT * FROM transactions WHERE booking_id = ? ORDER BY timestamp",
                (booking_id,),
            )
            results = [_row_to_transaction(row) for row in cursor.fetchall()]
        log.debug("repo.transaction", "get_by_booking result", count=len(results))
        return results

    def create(self, transaction: Transaction) -> Transaction:
        """Creates a new transaction."""
        log.info(
            "repo.transaction",
            "create",
            transaction_id=transaction.id,
            kind=transaction.kind,
            booking_id=transaction.booking_id,
            total=transaction.total,
        )
        data = transaction.to_dict()
        data["payments"] = json.dumps(data["payments"])
        placeholders = ", ".join("?" for _ in _COLUMNS)
        with self._conn.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"INSERT INTO transactions ({', '.join(_COLUMNS)}) VALUES ({placeholders})",
                tuple(data[col] for col in _COLUMNS),
            )
        return transaction

    def unlink_booking(self, booking_id: str) -> int:
        """Clears the appointment link of every transaction pointing to it."""
        log.info("repo.transaction", "unlink_booking", booking_id=booking_id)
        with self._conn.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "UPDATE transactions SET booking_id = NULL WHERE booking_id = ?",
                (booking_id,),
            )
            count = cursor.rowcount
        log.debug("repo.transaction", "unlink_booking result", rows=count)
        return count

    def update(self, transaction: Transaction) -> Transaction:
        """Updates an existing transaction."""
        log.info("repo.transaction", "update", transaction_id=transaction.id)
        data = transaction.to_dict()
        data["payments"] = json.dumps(data["payments"])
        columns = [col for col in _COLUMNS if col != "id"]
        assignments = ", ".join(f"{col} = ?" for col in columns)
        with self._conn.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"UPDATE transactions SET {assignments} WHERE id = ?",
                tuple(data[col] for col in columns) + (transaction.id,),
            )
        return transaction
