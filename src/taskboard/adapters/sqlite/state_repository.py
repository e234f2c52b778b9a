"""SQLite implementation of StateRepository."""

from __future__ import annotations

import json
import sqlite3
from datetime import UTC, datetime
from pathlib import Path

from pydantic import ValidationError as PydanticValidationError

from taskboard.adapters.sqlite.connection import execute_with_retry, open_connection
from taskboard.models import AppState, PersistenceError
from taskboard.repositories import StateRepository


class SqliteStateRepository(StateRepository):
    """Stores each snapshot as a JSON document in the ``board_state`` table."""

    def __init__(self, db_path: str | Path | None = None):
        """Initialize SQLite state repository.

        Args:
            db_path: Optional database file path. If None, uses default location.
        """
        self.db_path = db_path
        self._connection: sqlite3.Connection | None = None

    @property
    def connection(self) -> sqlite3.Connection:
        """Get or open the database connection."""
        if self._connection is None:
            self._connection = open_connection(self.db_path)
        return self._connection

    async def load(self, key: str) -> AppState | None:
        try:
            row = execute_with_retry(
                self.connection,
                "SELECT payload FROM board_state WHERE key = ?",
                (key,),
            ).fetchone()
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to load state '{key}': {e}") from e
        if row is None:
            return None
        try:
            return AppState.from_document(json.loads(row["payload"]))
        except (json.JSONDecodeError, PydanticValidationError) as e:
            raise PersistenceError(f"Stored state '{key}' is corrupt: {e}") from e

    async def save(self, key: str, state: AppState) -> None:
        payload = json.dumps(state.to_document())
        try:
            execute_with_retry(
                self.connection,
                """
                INSERT INTO board_state (key, payload, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    payload = excluded.payload,
                    updated_at = excluded.updated_at
                """,
                (key, payload, datetime.now(UTC).isoformat()),
            )
            self.connection.commit()
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to save state '{key}': {e}") from e

    async def close(self) -> None:
        """Commit and close the connection."""
        if self._connection is not None:
            try:
                self._connection.commit()
                self._connection.close()
            finally:
                self._connection = None
