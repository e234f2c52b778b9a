"""Initial board contents used when no state has been stored yet."""

from __future__ import annotations

from .core import AppState, Board, Column, Priority, Task

DEFAULT_BOARD_ID = "board-1"


def initial_state() -> AppState:
    """Return the demo board: three columns and four tasks in "To Do"."""
    tasks = [
        Task(
            id="task-1",
            title="Take out the garbage",
            description="Separate recyclables",
            priority=Priority.LOW,
        ),
        Task(
            id="task-2",
            title="Watch my favorite show",
            description="New episode out today",
            priority=Priority.MEDIUM,
        ),
        Task(
            id="task-3",
            title="Charge my phone",
            description="Battery is low",
            priority=Priority.HIGH,
        ),
        Task(
            id="task-4",
            title="Cook dinner",
            description="Pasta night",
            priority=Priority.MEDIUM,
        ),
    ]
    columns = [
        Column(
            id="column-1",
            title="To Do",
            task_ids=tuple(task.id for task in tasks),
        ),
        Column(id="column-2", title="In Progress"),
        Column(id="column-3", title="Done"),
    ]
    board = Board(
        id=DEFAULT_BOARD_ID,
        title="My Task Board",
        columns_order=tuple(column.id for column in columns),
        columns={column.id: column for column in columns},
    )
    return AppState(
        boards_order=(board.id,),
        boards={board.id: board},
        tasks={task.id: task for task in tasks},
    )
