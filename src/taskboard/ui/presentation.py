"""Presentation adapter: drag gestures in, ordered board views out.

Gestures use the drag-and-drop vocabulary of the web client: the dragged
card is the ``draggable_id``, columns are droppable containers and
positions are indexes inside them.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from taskboard.models import (
    CreateTask,
    DeleteTask,
    EditTask,
    MoveTask,
    MutationError,
    MutationResult,
    NotFoundError,
    Priority,
    TaskPatch,
)
from taskboard.repositories import IdentityProvider
from taskboard.services.change_notifier import ChangeNotifier
from taskboard.store import EntityStore
from taskboard.utils.logger import get_logger
from taskboard.utils.ui.formatters import format_error


class DropLocation(BaseModel):
    """A position inside a droppable container (a column)."""

    droppable_id: str
    index: int


class DragGesture(BaseModel):
    """A completed drag: where the card came from and where it landed.

    ``destination`` is None when the drag was cancelled or dropped outside
    every column.
    """

    draggable_id: str
    source: DropLocation
    destination: DropLocation | None = None


def gesture_to_command(board_id: str, gesture: DragGesture) -> MoveTask | None:
    """Translate a drop into a MoveTask command.

    Returns:
        The command, or None for a cancelled drop or a drop onto the
        card's own position
    """
    destination = gesture.destination
    if destination is None:
        return None
    if (
        destination.droppable_id == gesture.source.droppable_id
        and destination.index == gesture.source.index
    ):
        return None
    return MoveTask(
        board_id=board_id,
        task_id=gesture.draggable_id,
        from_column_id=gesture.source.droppable_id,
        to_column_id=destination.droppable_id,
        from_index=gesture.source.index,
        to_index=destination.index,
    )


# ---------------------------------------------------------------------------
# View models
# ---------------------------------------------------------------------------


class TaskView(BaseModel):
    """View model for a task card."""

    id: str
    title: str
    description: str = ""
    priority: Priority
    tags: list[str] = []
    due_date: datetime | None = None
    index: int


class ColumnView(BaseModel):
    """View model for a column and its ordered cards."""

    id: str
    title: str
    tasks: list[TaskView]


class BoardView(BaseModel):
    """View model for a board: columns in display order."""

    id: str
    title: str
    columns: list[ColumnView]

    def column(self, column_id: str) -> ColumnView:
        for column in self.columns:
            if column.id == column_id:
                return column
        raise KeyError(column_id)


def render_board(store: EntityStore, board_id: str) -> BoardView:
    """Build the ordered visual lists for one board."""
    board = store.get_board(board_id)
    columns = []
    for column in board.ordered_columns():
        tasks = [
            TaskView(
                id=task.id,
                title=task.title,
                description=task.description,
                priority=task.priority,
                tags=sorted(task.tags),
                due_date=task.due_date,
                index=index,
            )
            for index, task in enumerate(store.tasks_in_column(board_id, column.id))
        ]
        columns.append(ColumnView(id=column.id, title=column.title, tasks=tasks))
    return BoardView(id=board.id, title=board.title, columns=columns)


# ---------------------------------------------------------------------------
# Adapter
# ---------------------------------------------------------------------------


class PresentationAdapter:
    """Turns user interactions into commands for the change notifier.

    A rejected command is surfaced as an error message; the notifier keeps
    the previous snapshot, which is what the next render shows.
    """

    def __init__(
        self,
        notifier: ChangeNotifier,
        identity: IdentityProvider,
        *,
        surface_errors: bool = True,
    ):
        self.notifier = notifier
        self.identity = identity
        self.surface_errors = surface_errors
        self.logger = get_logger("presentation")

    def view(self, board_id: str) -> BoardView:
        return render_board(self.notifier.store, board_id)

    async def handle_drop(
        self, board_id: str, gesture: DragGesture
    ) -> MutationResult | None:
        """Apply a drag gesture. Returns None when the drop was ignored."""
        command = gesture_to_command(board_id, gesture)
        if command is None:
            self.logger.debug("ignored drop of '%s'", gesture.draggable_id)
            return None
        return await self._submit(command)

    async def move_task(
        self, task_id: str, to_column_id: str, to_index: int | None = None
    ) -> MutationResult:
        """Move a task by id, locating its current position first.

        ``to_index`` defaults to the end of the destination column.
        """
        store = self.notifier.store
        location = store.locate_task(task_id)
        if location is None:
            detail = "not on any board" if task_id in store.state.tasks else None
            return self._reject(NotFoundError("task", task_id, detail))
        board_id, column_id, index = location
        if to_index is None:
            destination = store.state.boards[board_id].columns.get(to_column_id)
            to_index = len(destination.task_ids) if destination else 0
        return await self._submit(
            MoveTask(
                board_id=board_id,
                task_id=task_id,
                from_column_id=column_id,
                to_column_id=to_column_id,
                from_index=index,
                to_index=to_index,
            )
        )

    async def add_task(
        self,
        board_id: str,
        column_id: str,
        title: str,
        *,
        priority: Priority | None = None,
        description: str | None = None,
        tags: list[str] | None = None,
        due_date: datetime | None = None,
    ) -> MutationResult:
        return await self._submit(
            CreateTask(
                board_id=board_id,
                column_id=column_id,
                title=title,
                priority=priority,
                description=description,
                tags=frozenset(tags or ()),
                due_date=due_date,
            )
        )

    async def edit_task(self, task_id: str, patch: TaskPatch) -> MutationResult:
        return await self._submit(EditTask(task_id=task_id, patch=patch))

    async def delete_task(self, task_id: str) -> MutationResult:
        return await self._submit(DeleteTask(task_id=task_id))

    async def _submit(self, command) -> MutationResult:
        result = await self.notifier.dispatch(
            command, actor=self.identity.current_actor()
        )
        if not result.ok and self.surface_errors:
            format_error(str(result.error))
        return result

    def _reject(self, error: MutationError) -> MutationResult:
        if self.surface_errors:
            format_error(str(error))
        return MutationResult.failure(error)
