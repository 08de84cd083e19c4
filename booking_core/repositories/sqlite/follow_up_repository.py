"""SQLite implementation of FollowUpRepository."""

from datetime import datetime
from typing import Optional

from ..interfaces.follow_up_repository import IFollowUpRepository
from ...domain.follow_up import FollowUpState
from ...config import logger as log
from .connection import SQLiteConnection


class SQLiteFollowUpRepository(IFollowUpRepository):
    """SQLite implementation of follow-up tracking."""

    def __init__(self, connection: SQLiteConnection):
        self._conn = connection

    def get(self, event_id: str) -> Optional[FollowUpState]:
        """Gets the state of one event."""
        with self._conn.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT * FROM follow_up_tracking WHERE event_id = ?", (event_id,)
            )
            row = cursor.fetchone()
            return FollowUpState.from_dict(dict(row)) if row else None

    def get_all(self) -> dict[str, FollowUpState]:
        """Gets every tracked state keyed by event ID."""
        with self._conn.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT * FROM follow_up_tracking")
            states = [FollowUpState.from_dict(dict(row)) for row in cursor.fetchall()]
        log.debug("repo.follow_up", "get_all result", count=len(states))
        return {s.event_id: s for s in states}

    def save(self, state: FollowUpState) -> FollowUpState:
        """Creates or updates a state."""
        log.info(
            "repo.follow_up",
            "save",
            event_id=state.event_id,
            status=state.status,
            archived=state.archived,
        )
        updated_at = state.updated_at or datetime.now()
        with self._conn.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """INSERT INTO follow_up_tracking (
                    event_id, status, notes, last_contact_at, archived, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT(event_id) DO UPDATE SET
                    status = excluded.status,
                    notes = excluded.notes,
                    last_contact_at = excluded.last_contact_at,
                    archived = excluded.archived,
                    updated_at = excluded.updated_at""",
                (
                    state.event_id,
                    state.status,
                    state.notes,
                    state.last_contact_at,
                    state.archived,
                    updated_at,
                ),
            )
        state.updated_at = updated_at
        return state
