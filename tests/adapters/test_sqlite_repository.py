"""Unit tests for SqliteStateRepository."""

from __future__ import annotations

import sqlite3
import stat

import pytest

from taskboard.adapters.sqlite import SqliteStateRepository
from taskboard.adapters.sqlite.connection import execute_with_retry, open_connection
from taskboard.models import AppState, PersistenceError, initial_state

KEY = "kanban-board-data"


@pytest.fixture()
def db_path(tmp_path):
    return tmp_path / "data" / "taskboard.db"


@pytest.fixture()
def repository(db_path):
    repo = SqliteStateRepository(db_path=db_path)
    yield repo
    if repo._connection is not None:
        repo._connection.close()


class TestConnection:
    def test_creates_schema_and_private_file(self, db_path):
        connection = open_connection(db_path)
        try:
            tables = {
                row["name"]
                for row in connection.execute(
                    "SELECT name FROM sqlite_master WHERE type = 'table'"
                )
            }
            assert "board_state" in tables
            mode = connection.execute("PRAGMA journal_mode").fetchone()[0]
            assert mode == "wal"
        finally:
            connection.close()
        assert stat.S_IMODE(db_path.stat().st_mode) == 0o600

    def test_execute_with_retry_gives_up(self):
        calls = []

        class Locked:
            def execute(self, sql, *args):
                calls.append(sql)
                raise sqlite3.OperationalError("database is locked")

        with pytest.raises(sqlite3.OperationalError, match="locked"):
            execute_with_retry(Locked(), "SELECT 1", max_retries=2)
        assert len(calls) == 2

    def test_execute_with_retry_reraises_other_errors(self):
        connection = sqlite3.connect(":memory:")
        with pytest.raises(sqlite3.OperationalError, match="no such table"):
            execute_with_retry(connection, "SELECT * FROM missing")
        connection.close()


class TestRepository:
    @pytest.mark.asyncio
    async def test_missing_key_loads_none(self, repository):
        assert await repository.load(KEY) is None

    @pytest.mark.asyncio
    async def test_round_trip(self, repository, seeded_state):
        await repository.save(KEY, seeded_state)
        assert await repository.load(KEY) == seeded_state

    @pytest.mark.asyncio
    async def test_save_replaces(self, repository, seeded_state):
        await repository.save(KEY, seeded_state)
        await repository.save(KEY, AppState())

        assert await repository.load(KEY) == AppState()
        count = repository.connection.execute(
            "SELECT COUNT(*) FROM board_state"
        ).fetchone()[0]
        assert count == 1

    @pytest.mark.asyncio
    async def test_keys_are_independent(self, repository, seeded_state):
        await repository.save("a", seeded_state)
        await repository.save("b", AppState())

        assert await repository.load("a") == seeded_state
        assert await repository.load("b") == AppState()

    @pytest.mark.asyncio
    async def test_survives_reopen(self, db_path, seeded_state):
        first = SqliteStateRepository(db_path=db_path)
        await first.save(KEY, seeded_state)
        await first.close()

        second = SqliteStateRepository(db_path=db_path)
        try:
            assert await second.load(KEY) == initial_state()
        finally:
            await second.close()

    @pytest.mark.asyncio
    async def test_stored_document_uses_camel_case(self, repository, seeded_state):
        await repository.save(KEY, seeded_state)
        payload = repository.connection.execute(
            "SELECT payload FROM board_state WHERE key = ?", (KEY,)
        ).fetchone()["payload"]
        assert '"boardsOrder"' in payload
        assert '"taskIds"' in payload

    @pytest.mark.asyncio
    async def test_corrupt_payload_raises(self, repository):
        repository.connection.execute(
            "INSERT INTO board_state (key, payload, updated_at) VALUES (?, ?, ?)",
            (KEY, "{broken", "2024-01-01T00:00:00"),
        )
        with pytest.raises(PersistenceError, match="corrupt"):
            await repository.load(KEY)

    @pytest.mark.asyncio
    async def test_invalid_document_raises(self, repository):
        repository.connection.execute(
            "INSERT INTO board_state (key, payload, updated_at) VALUES (?, ?, ?)",
            (KEY, '{"boardsOrder": ["x"], "boards": {}}', "2024-01-01T00:00:00"),
        )
        with pytest.raises(PersistenceError):
            await repository.load(KEY)

    @pytest.mark.asyncio
    async def test_close_is_idempotent(self, repository, seeded_state):
        await repository.save(KEY, seeded_state)
        await repository.close()
        await repository.close()
        assert repository._connection is None
