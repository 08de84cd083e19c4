"""SQLite connection management."""

import sqlite3
import threading
from contextlib import contextmanager
from datetime import datetime, date
from decimal import Decimal
from pathlib import Path
from typing import Optional

from ...config import logger as log
from ...config.env import get_db_path
from ...errors import StorageError


def adapt_date(val: date) -> str:
    return val.isoformat()


def adapt_datetime(val: datetime) -> str:
    return val.isoformat()


def adapt_decimal(val: Decimal) -> str:
    return str(val)


def convert_date(val: bytes) -> date:
    return date.fromisoformat(val.decode())


def convert_datetime(val: bytes) -> datetime:
    return datetime.fromisoformat(val.decode())


def convert_decimal(val: bytes) -> Decimal:
    return Decimal(val.decode())


sqlite3.register_adapter(date, adapt_date)
sqlite3.register_adapter(datetime, adapt_datetime)
sqlite3.register_adapter(Decimal, adapt_decimal)
sqlite3.register_converter("DATE", convert_date)
sqlite3.register_converter("DATETIME", convert_datetime)
sqlite3.register_converter("DECIMAL", convert_decimal)


class SQLiteConnection:
    """Manages SQLite connection with transaction context manager."""

    def __init__(self, db_path: Optional[str] = None):
        """Initializes connection.

        Args:
            db_path: Path to database file. Uses BOOKING_DB_PATH or the default if not specified.
        """
        self.db_path = Path(db_path) if db_path else get_db_path()
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._local = threading.local()
        self._init_tables()

    @contextmanager
    def get_connection(self):
        """Context manager for getting a connection with transaction.

        Inside ``transaction()`` the shared connection is returned and the
        commit is left to the outer block.

        Raises:
            StorageError: If SQLite fails; the transaction is rolled back.
        """
        shared = getattr(self._local, "conn", None)
        if shared is not None:
            try:
                yield shared
            except sqlite3.Error as e:
                log.error("db", "SQLite operation failed", error=str(e))
                raise StorageError(f"Error de almacenamiento: {e}") from e
            return

        conn = sqlite3.connect(
            self.db_path,
            detect_types=sqlite3.PARSE_DECLTYPES | sqlite3.PARSE_COLNAMES,
        )
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            log.error("db", "SQLite operation failed", error=str(e))
            raise StorageError(f"Error de almacenamiento: {e}") from e
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    @contextmanager
    def transaction(self):
        """Groups every repository call made inside the block into one commit.

        Any exception rolls back all of them. Nested blocks join the outer one.
        """
        if getattr(self._local, "conn", None) is not None:
            yield
            return
        with self.get_connection() as conn:
            self._local.conn = conn
            try:
                yield
            finally:
                self._local.conn = None

    def _init_tables(self):
        """Initializes all database tables."""
        with self.get_connection() as conn:
            cursor = conn.cursor()

            cursor.execute(
                """
                CREATE TABLE IF NOT EXISTS system_config (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    description TEXT,
                    created_at DATETIME,
                    updated_at DATETIME
                )
            """
            )

            cursor.execute(
                """
                CREATE TABLE IF NOT EXISTS clients (
                    dni TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    phone TEXT,
                    source TEXT,
                    created_at DATETIME,
                    updated_at DATETIME
                )
            """
            )

            cursor.execute(
                """
                CREATE TABLE IF NOT EXISTS specialists (
                    name TEXT PRIMARY KEY,
                    active INTEGER DEFAULT 1
                )
            """
            )

            cursor.execute(
                """
                CREATE TABLE IF NOT EXISTS weekly_schedule (
                    day_id INTEGER PRIMARY KEY,
                    name TEXT,
                    is_open INTEGER DEFAULT 1,
                    start_hour INTEGER NOT NULL,
                    end_hour INTEGER NOT NULL,
                    has_lunch INTEGER DEFAULT 0,
                    lunch_start_hour INTEGER DEFAULT 13,
                    lunch_end_hour INTEGER DEFAULT 14
                )
            """
            )

            # booking_code has no UNIQUE constraint; concurrent creations in the
            # same month can be allocated the same code.
            cursor.execute(
                """
                CREATE TABLE IF NOT EXISTS appointments (
                    id TEXT PRIMARY KEY,
                    booking_code TEXT,
                    specialist TEXT NOT NULL,
                    service_type TEXT NOT NULL,
                    procedure TEXT,
                    start_time DATETIME NOT NULL,
                    end_time DATETIME NOT NULL,
                    client_dni TEXT,
                    client_name TEXT,
                    client_phone TEXT,
                    client_source TEXT,
                    status TEXT DEFAULT 'scheduled',
                    actual_duration INTEGER,
                    down_payment_method TEXT,
                    down_payment_amount DECIMAL,
                    down_payment_code TEXT,
                    reconfirmation_status TEXT,
                    comments TEXT,
                    provenance TEXT DEFAULT 'manual',
                    cancellation_reason TEXT,
                    cancelled_at DATETIME,
                    cancelled_by TEXT,
                    created_at DATETIME,
                    created_by TEXT,
                    created_by_name TEXT,
                    updated_at DATETIME
                )
            """
            )

            cursor.execute(
                """
                CREATE TABLE IF NOT EXISTS transactions (
                    id TEXT PRIMARY KEY,
                    timestamp DATETIME NOT NULL,
                    client_dni TEXT,
                    client_name TEXT,
                    client_phone TEXT,
                    client_source TEXT,
                    service_type TEXT,
                    procedure TEXT,
                    payments TEXT NOT NULL DEFAULT '[]',
                    cream_sold INTEGER DEFAULT 0,
                    comments TEXT,
                    booking_id TEXT,
                    kind TEXT,
                    provenance TEXT DEFAULT 'manual',
                    created_by TEXT,
                    created_by_name TEXT
                )
            """
            )

            cursor.execute(
                """
                CREATE TABLE IF NOT EXISTS follow_up_tracking (
                    event_id TEXT PRIMARY KEY,
                    status TEXT NOT NULL DEFAULT 'PENDIENTE',
                    notes TEXT,
                    last_contact_at DATETIME,
                    archived INTEGER DEFAULT 0,
                    updated_at DATETIME
                )
            """
            )

            cursor.execute(
                "CREATE INDEX IF NOT EXISTS idx_appointments_specialist ON appointments(specialist)"
            )
            cursor.execute(
                "CREATE INDEX IF NOT EXISTS idx_appointments_client ON appointments(client_dni)"
            )
            cursor.execute(
                "CREATE INDEX IF NOT EXISTS idx_appointments_start ON appointments(start_time)"
            )
            cursor.execute(
                "CREATE INDEX IF NOT EXISTS idx_appointments_code ON appointments(booking_code)"
            )
            cursor.execute(
                "CREATE INDEX IF NOT EXISTS idx_transactions_booking ON transactions(booking_id)"
            )
            cursor.execute(
                "CREATE INDEX IF NOT EXISTS idx_transactions_client ON transactions(client_dni)"
            )
