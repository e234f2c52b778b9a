"""Unit tests for the presentation adapter."""

from __future__ import annotations

from datetime import datetime
from unittest.mock import patch

import pytest
import pytest_asyncio

from taskboard.adapters.memory import InMemoryBroadcaster, InMemoryStateRepository
from taskboard.models import ChangeKind, NotFoundError, Priority, TaskPatch, ValidationError
from taskboard.services.auth_service import StaticIdentity
from taskboard.services.change_notifier import ChangeNotifier
from taskboard.store import EntityStore
from taskboard.ui.presentation import (
    BoardView,
    DragGesture,
    DropLocation,
    PresentationAdapter,
    gesture_to_command,
    render_board,
)


def _gesture(task_id, source, destination):
    return DragGesture(
        draggable_id=task_id,
        source=DropLocation(droppable_id=source[0], index=source[1]),
        destination=(
            DropLocation(droppable_id=destination[0], index=destination[1])
            if destination
            else None
        ),
    )


def _order(adapter, column_id):
    return [t.id for t in adapter.view("board-1").column(column_id).tasks]


@pytest_asyncio.fixture()
async def notifier(id_factory):
    notifier = ChangeNotifier(
        InMemoryStateRepository(),
        InMemoryBroadcaster(),
        state_key="test",
        id_factory=id_factory,
    )
    await notifier.open()
    yield notifier
    await notifier.close()


@pytest.fixture()
def adapter(notifier):
    return PresentationAdapter(notifier, StaticIdentity("alice"))


# ---------------------------------------------------------------------------
# Gesture translation
# ---------------------------------------------------------------------------


class TestGestureToCommand:
    def test_cancelled_drop(self):
        assert gesture_to_command("board-1", _gesture("task-1", ("column-1", 0), None)) is None

    def test_drop_in_place(self):
        gesture = _gesture("task-1", ("column-1", 0), ("column-1", 0))
        assert gesture_to_command("board-1", gesture) is None

    def test_cross_column(self):
        command = gesture_to_command(
            "board-1", _gesture("task-2", ("column-1", 1), ("column-3", 0))
        )

        assert command.board_id == "board-1"
        assert command.task_id == "task-2"
        assert command.from_column_id == "column-1"
        assert command.from_index == 1
        assert command.to_column_id == "column-3"
        assert command.to_index == 0

    def test_same_column_new_index(self):
        command = gesture_to_command(
            "board-1", _gesture("task-1", ("column-1", 0), ("column-1", 3))
        )
        assert command.to_column_id == "column-1"
        assert command.to_index == 3


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


class TestRenderBoard:
    def test_columns_and_tasks_in_order(self, seeded_state):
        view = render_board(EntityStore(seeded_state), "board-1")

        assert isinstance(view, BoardView)
        assert view.title == "My Task Board"
        assert [c.title for c in view.columns] == ["To Do", "In Progress", "Done"]
        todo = view.column("column-1")
        assert [t.id for t in todo.tasks] == ["task-1", "task-2", "task-3", "task-4"]
        assert [t.index for t in todo.tasks] == [0, 1, 2, 3]
        assert todo.tasks[2].priority == Priority.HIGH
        assert view.column("column-2").tasks == []

    def test_unknown_column_in_view(self, seeded_state):
        view = render_board(EntityStore(seeded_state), "board-1")
        with pytest.raises(KeyError):
            view.column("column-9")

    def test_unknown_board(self, seeded_state):
        with pytest.raises(NotFoundError):
            render_board(EntityStore(seeded_state), "board-9")


# ---------------------------------------------------------------------------
# Adapter
# ---------------------------------------------------------------------------


class TestHandleDrop:
    @pytest.mark.asyncio
    async def test_drop_moves_task(self, adapter):
        result = await adapter.handle_drop(
            "board-1", _gesture("task-1", ("column-1", 0), ("column-2", 0))
        )

        assert result.changed
        assert result.change.actor_id == "alice"
        assert _order(adapter, "column-1") == ["task-2", "task-3", "task-4"]
        assert _order(adapter, "column-2") == ["task-1"]

    @pytest.mark.asyncio
    async def test_reorder_within_column(self, adapter):
        await adapter.handle_drop(
            "board-1", _gesture("task-1", ("column-1", 0), ("column-1", 2))
        )
        assert _order(adapter, "column-1") == ["task-2", "task-3", "task-1", "task-4"]

    @pytest.mark.asyncio
    async def test_ignored_drop_dispatches_nothing(self, adapter, notifier):
        before = notifier.state

        assert await adapter.handle_drop(
            "board-1", _gesture("task-1", ("column-1", 0), None)
        ) is None
        assert notifier.state is before

    @pytest.mark.asyncio
    async def test_stale_drop_is_surfaced(self, adapter, notifier):
        before = notifier.state
        with patch("taskboard.ui.presentation.format_error") as mock_error:
            result = await adapter.handle_drop(
                "board-1", _gesture("task-1", ("column-2", 0), ("column-3", 0))
            )

        assert isinstance(result.error, NotFoundError)
        mock_error.assert_called_once_with(str(result.error))
        assert notifier.state is before

    @pytest.mark.asyncio
    async def test_errors_can_be_left_to_caller(self, notifier):
        adapter = PresentationAdapter(notifier, StaticIdentity(), surface_errors=False)
        with patch("taskboard.ui.presentation.format_error") as mock_error:
            result = await adapter.delete_task("task-9")

        assert not result.ok
        mock_error.assert_not_called()


class TestMoveTask:
    @pytest.mark.asyncio
    async def test_defaults_to_end_of_destination(self, adapter):
        await adapter.move_task("task-1", "column-2")
        await adapter.move_task("task-2", "column-2")

        assert _order(adapter, "column-2") == ["task-1", "task-2"]

    @pytest.mark.asyncio
    async def test_explicit_index(self, adapter):
        result = await adapter.move_task("task-4", "column-1", 0)

        assert result.changed
        assert _order(adapter, "column-1") == ["task-4", "task-1", "task-2", "task-3"]

    @pytest.mark.asyncio
    async def test_same_place_is_noop(self, adapter):
        result = await adapter.move_task("task-4", "column-1")

        assert result.ok
        assert not result.changed

    @pytest.mark.asyncio
    async def test_unknown_task(self, adapter):
        with patch("taskboard.ui.presentation.format_error") as mock_error:
            result = await adapter.move_task("task-9", "column-2")

        assert isinstance(result.error, NotFoundError)
        assert str(result.error) == "Task 'task-9' not found"
        mock_error.assert_called_once()

    @pytest.mark.asyncio
    async def test_unknown_destination(self, adapter):
        with patch("taskboard.ui.presentation.format_error"):
            result = await adapter.move_task("task-1", "column-9")

        assert isinstance(result.error, NotFoundError)


class TestTaskOperations:
    @pytest.mark.asyncio
    async def test_add_task(self, adapter):
        due = datetime(2024, 2, 1)
        result = await adapter.add_task(
            "board-1",
            "column-3",
            "Water plants",
            priority=Priority.LOW,
            tags=["home", "garden"],
            due_date=due,
        )

        assert result.change.kind == ChangeKind.CREATE
        task = adapter.view("board-1").column("column-3").tasks[0]
        assert task.id == "task-new-1"
        assert task.title == "Water plants"
        assert task.priority == Priority.LOW
        assert task.tags == ["garden", "home"]
        assert task.due_date == due

    @pytest.mark.asyncio
    async def test_add_task_defaults_priority(self, adapter):
        await adapter.add_task("board-1", "column-3", "Water plants")
        task = adapter.view("board-1").column("column-3").tasks[0]
        assert task.priority == Priority.MEDIUM

    @pytest.mark.asyncio
    async def test_edit_task(self, adapter):
        result = await adapter.edit_task(
            "task-2", TaskPatch(title="Watch the finale", priority=Priority.HIGH)
        )

        assert result.changed
        task = adapter.view("board-1").column("column-1").tasks[1]
        assert task.title == "Watch the finale"
        assert task.priority == Priority.HIGH

    @pytest.mark.asyncio
    async def test_edit_rejects_blank_title(self, adapter):
        with patch("taskboard.ui.presentation.format_error") as mock_error:
            result = await adapter.edit_task("task-2", TaskPatch(title="  "))

        assert isinstance(result.error, ValidationError)
        mock_error.assert_called_once()
        assert adapter.view("board-1").column("column-1").tasks[1].title == (
            "Watch my favorite show"
        )

    @pytest.mark.asyncio
    async def test_delete_task(self, adapter):
        result = await adapter.delete_task("task-3")

        assert result.change.kind == ChangeKind.DELETE
        assert _order(adapter, "column-1") == ["task-1", "task-2", "task-4"]
