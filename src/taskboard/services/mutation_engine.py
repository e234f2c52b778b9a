"""Mutation engine - pure state transitions for the task board.

Every function here takes an ``AppState`` snapshot and returns a new one;
nothing is mutated in place. Only the columns a command touches are
rebuilt, every other board, column and task object is shared with the
input snapshot so callers can detect changes by identity.

``apply_command`` is the public entry point. It never raises for a
rejected command: ``NotFoundError``, ``ValidationError`` and
``IdCollisionError`` come back inside the ``MutationResult``.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable
from datetime import UTC, datetime

from pydantic import ValidationError as PydanticValidationError

from taskboard.models import (
    AppState,
    Board,
    ChangeDescriptor,
    ChangeKind,
    Column,
    Command,
    CreateTask,
    DeleteTask,
    EditTask,
    IdCollisionError,
    MoveTask,
    MutationError,
    MutationResult,
    NotFoundError,
    Priority,
    Task,
    ValidationError,
)
from taskboard.store import locate_task

# Ids are random, so one retry is already astronomically unlikely.
MAX_ID_ATTEMPTS = 3

IdFactory = Callable[[], str]
Clock = Callable[[], datetime]


def generate_task_id() -> str:
    """Generate a new task id (e.g., "task-3f2a9c0d41be")."""
    return f"task-{uuid.uuid4().hex[:12]}"


def utc_now() -> datetime:
    return datetime.now(UTC)


def apply_command(
    state: AppState,
    command: Command,
    *,
    id_factory: IdFactory = generate_task_id,
    clock: Clock = utc_now,
) -> MutationResult:
    """Apply a mutation command to a snapshot.

    Args:
        state: Current snapshot
        command: Command to apply
        id_factory: Task id generator (used by CreateTask)
        clock: Timestamp source (used by CreateTask)

    Returns:
        MutationResult holding the new snapshot and its change descriptor,
        the unchanged snapshot for a no-op, or the rejection error
    """
    try:
        match command:
            case MoveTask():
                new_state, change = move_task(state, command)
            case CreateTask():
                new_state, change = create_task(
                    state, command, id_factory=id_factory, clock=clock
                )
            case EditTask():
                new_state, change = edit_task(state, command)
            case DeleteTask():
                new_state, change = delete_task(state, command)
            case _:
                raise TypeError(f"Unsupported command: {type(command).__name__}")
    except MutationError as e:
        return MutationResult.failure(e)
    return MutationResult.success(new_state, change)


def target_board_id(state: AppState, command: Command) -> str | None:
    """Return the board a command operates on, if it can be determined."""
    if isinstance(command, (MoveTask, CreateTask)):
        return command.board_id
    location = locate_task(state, command.task_id)
    return location[0] if location else None


# ---------------------------------------------------------------------------
# Move
# ---------------------------------------------------------------------------


def move_task(
    state: AppState, command: MoveTask
) -> tuple[AppState, ChangeDescriptor | None]:
    """Reorder a task within a column or transfer it to another column.

    The id is removed from the source first and ``to_index`` is applied to
    the shortened sequence, clamped to ``[0, len]`` so a stale drop index
    appends instead of failing.

    Raises:
        NotFoundError: If the board or a column is missing, or the task is
            not at ``from_index`` in the source column
    """
    board = _get_board(state, command.board_id)
    source = _get_column(board, command.from_column_id)
    destination = _get_column(board, command.to_column_id)

    index = command.from_index
    if not 0 <= index < len(source.task_ids) or source.task_ids[index] != command.task_id:
        raise NotFoundError(
            "task",
            command.task_id,
            f"not at index {index} of column '{source.id}'",
        )

    if source.id == destination.id:
        if command.from_index == command.to_index:
            return state, None
        task_ids = list(source.task_ids)
        task_ids.pop(index)
        task_ids.insert(_clamp(command.to_index, len(task_ids)), command.task_id)
        if tuple(task_ids) == source.task_ids:
            return state, None
        touched = [source.model_copy(update={"task_ids": tuple(task_ids)})]
    else:
        source_ids = list(source.task_ids)
        source_ids.pop(index)
        destination_ids = list(destination.task_ids)
        destination_ids.insert(
            _clamp(command.to_index, len(destination_ids)), command.task_id
        )
        touched = [
            source.model_copy(update={"task_ids": tuple(source_ids)}),
            destination.model_copy(update={"task_ids": tuple(destination_ids)}),
        ]

    change = ChangeDescriptor(
        kind=ChangeKind.MOVE,
        board_id=board.id,
        affected_column_ids=tuple(column.id for column in touched),
        task_id=command.task_id,
    )
    return _replace_columns(state, board, touched), change


# ---------------------------------------------------------------------------
# Create
# ---------------------------------------------------------------------------


def create_task(
    state: AppState,
    command: CreateTask,
    *,
    id_factory: IdFactory = generate_task_id,
    clock: Clock = utc_now,
) -> tuple[AppState, ChangeDescriptor]:
    """Create a task and append its id to the target column.

    Raises:
        NotFoundError: If the board or column is missing
        ValidationError: If the title is blank
        IdCollisionError: If no unused id was produced in MAX_ID_ATTEMPTS
    """
    board = _get_board(state, command.board_id)
    column = _get_column(board, command.column_id)

    if not command.title or not command.title.strip():
        raise ValidationError("title", "cannot be empty")

    task_id = _new_task_id(state, id_factory)
    task = _build_task(
        {
            "id": task_id,
            "title": command.title,
            "description": command.description or "",
            "priority": command.priority or Priority.MEDIUM,
            "tags": command.tags,
            "created_at": clock(),
            "due_date": command.due_date,
        }
    )

    new_column = column.model_copy(update={"task_ids": (*column.task_ids, task_id)})
    new_state = _replace_columns(state, board, [new_column])
    new_state = new_state.model_copy(update={"tasks": {**state.tasks, task_id: task}})

    change = ChangeDescriptor(
        kind=ChangeKind.CREATE,
        board_id=board.id,
        affected_column_ids=(column.id,),
        task_id=task_id,
    )
    return new_state, change


def _new_task_id(state: AppState, id_factory: IdFactory) -> str:
    for _ in range(MAX_ID_ATTEMPTS):
        candidate = id_factory()
        if candidate not in state.tasks:
            return candidate
    raise IdCollisionError(MAX_ID_ATTEMPTS)


# ---------------------------------------------------------------------------
# Edit
# ---------------------------------------------------------------------------


def edit_task(
    state: AppState, command: EditTask
) -> tuple[AppState, ChangeDescriptor | None]:
    """Merge a patch into an existing task. Containership never changes.

    Raises:
        NotFoundError: If the task does not exist
        ValidationError: If the patch sets a blank title or an invalid value
    """
    task = state.tasks.get(command.task_id)
    if task is None:
        raise NotFoundError("task", command.task_id)

    changes = command.patch.changes()
    if not changes:
        return state, None

    if "title" in changes:
        title = changes["title"]
        if title is None or not title.strip():
            raise ValidationError("title", "cannot be empty")
    if "priority" in changes and changes["priority"] is None:
        raise ValidationError("priority", "cannot be cleared")
    if "description" in changes and changes["description"] is None:
        changes["description"] = ""
    if "tags" in changes and changes["tags"] is None:
        changes["tags"] = frozenset()

    updated = _build_task({**task.model_dump(), **changes})
    if updated == task:
        return state, None

    location = locate_task(state, task.id)
    change = ChangeDescriptor(
        kind=ChangeKind.EDIT,
        board_id=location[0] if location else None,
        affected_column_ids=(location[1],) if location else (),
        task_id=task.id,
    )
    new_state = state.model_copy(update={"tasks": {**state.tasks, task.id: updated}})
    return new_state, change


# ---------------------------------------------------------------------------
# Delete
# ---------------------------------------------------------------------------


def delete_task(
    state: AppState, command: DeleteTask
) -> tuple[AppState, ChangeDescriptor]:
    """Remove a task and the column reference to it in one new snapshot.

    A task listed by no column is still removed from ``tasks``.

    Raises:
        NotFoundError: If the task does not exist
    """
    if command.task_id not in state.tasks:
        raise NotFoundError("task", command.task_id)

    tasks = {
        task_id: task
        for task_id, task in state.tasks.items()
        if task_id != command.task_id
    }
    location = locate_task(state, command.task_id)

    if location is None:
        new_state = state.model_copy(update={"tasks": tasks})
        affected: tuple[str, ...] = ()
        board_id = None
    else:
        board_id, column_id, _ = location
        board = state.boards[board_id]
        column = board.columns[column_id]
        new_column = column.model_copy(
            update={
                "task_ids": tuple(
                    task_id for task_id in column.task_ids if task_id != command.task_id
                )
            }
        )
        new_state = _replace_columns(state, board, [new_column], tasks=tasks)
        affected = (column_id,)

    change = ChangeDescriptor(
        kind=ChangeKind.DELETE,
        board_id=board_id,
        affected_column_ids=affected,
        task_id=command.task_id,
    )
    return new_state, change


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _get_board(state: AppState, board_id: str) -> Board:
    board = state.boards.get(board_id)
    if board is None:
        raise NotFoundError("board", board_id)
    return board


def _get_column(board: Board, column_id: str) -> Column:
    column = board.columns.get(column_id)
    if column is None:
        raise NotFoundError("column", column_id, f"not on board '{board.id}'")
    return column


def _clamp(index: int, length: int) -> int:
    return max(0, min(index, length))


def _build_task(data: dict) -> Task:
    """Validate task fields, translating pydantic errors to ValidationError."""
    try:
        return Task.model_validate(data)
    except PydanticValidationError as e:
        error = e.errors()[0]
        field = ".".join(str(part) for part in error["loc"]) or "task"
        raise ValidationError(field, error["msg"]) from e


def _replace_columns(
    state: AppState,
    board: Board,
    columns: list[Column],
    *,
    tasks: dict[str, Task] | None = None,
) -> AppState:
    """Return a snapshot with the given columns swapped into ``board``."""
    new_board = board.model_copy(
        update={"columns": {**board.columns, **{c.id: c for c in columns}}}
    )
    update: dict = {"boards": {**state.boards, board.id: new_board}}
    if tasks is not None:
        update["tasks"] = tasks
    return state.model_copy(update=update)
