"""Unit tests for JsonFileStateRepository."""

from __future__ import annotations

import json

import pytest

from taskboard.adapters.json_file import JsonFileStateRepository
from taskboard.models import AppState, PersistenceError

KEY = "kanban-board-data"


@pytest.fixture()
def repository(tmp_path):
    return JsonFileStateRepository(directory=tmp_path / "states")


@pytest.mark.asyncio
async def test_missing_file_loads_none(repository):
    assert await repository.load(KEY) is None


@pytest.mark.asyncio
async def test_round_trip(repository, seeded_state):
    await repository.save(KEY, seeded_state)

    assert repository.path_for(KEY).exists()
    assert await repository.load(KEY) == seeded_state


@pytest.mark.asyncio
async def test_document_shape(repository, seeded_state):
    await repository.save(KEY, seeded_state)

    document = json.loads(repository.path_for(KEY).read_text())
    assert document["boardsOrder"] == ["board-1"]
    column = document["boards"]["board-1"]["columns"]["column-1"]
    assert column["taskIds"] == ["task-1", "task-2", "task-3", "task-4"]


@pytest.mark.asyncio
async def test_save_leaves_no_temp_files(repository, seeded_state):
    await repository.save(KEY, seeded_state)
    await repository.save(KEY, AppState())

    assert [p.name for p in repository.directory.iterdir()] == [f"{KEY}.json"]
    assert await repository.load(KEY) == AppState()


@pytest.mark.asyncio
async def test_corrupt_file_raises(repository):
    repository.directory.mkdir(parents=True)
    repository.path_for(KEY).write_text("{not json")

    with pytest.raises(PersistenceError, match="corrupt"):
        await repository.load(KEY)


@pytest.mark.asyncio
async def test_unwritable_directory_raises(tmp_path, seeded_state):
    blocker = tmp_path / "blocker"
    blocker.write_text("a file, not a directory")
    repository = JsonFileStateRepository(directory=blocker / "states")

    with pytest.raises(PersistenceError, match="Failed to write"):
        await repository.save(KEY, seeded_state)
