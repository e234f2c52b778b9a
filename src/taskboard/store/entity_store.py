"""Read-only access to one board state snapshot."""

from __future__ import annotations

from taskboard.models import (
    AppState,
    Board,
    Column,
    DanglingReferenceError,
    NotFoundError,
    Task,
)


class EntityStore:
    """Holds one immutable ``AppState`` snapshot and resolves lookups.

    The store exposes no mutators: a mutation yields a new snapshot and a
    new store is built around it, so older stores stay valid for readers.
    """

    def __init__(self, state: AppState):
        self._state = state

    @property
    def state(self) -> AppState:
        return self._state

    def boards(self) -> list[Board]:
        """Return boards in display order."""
        return [self._state.boards[board_id] for board_id in self._state.boards_order]

    def get_board(self, board_id: str) -> Board:
        board = self._state.boards.get(board_id)
        if board is None:
            raise NotFoundError("board", board_id)
        return board

    def get_column(self, board_id: str, column_id: str) -> Column:
        board = self.get_board(board_id)
        column = board.columns.get(column_id)
        if column is None:
            raise NotFoundError("column", column_id, f"not on board '{board_id}'")
        return column

    def columns_in_board(self, board_id: str) -> list[Column]:
        """Return a board's columns in display order."""
        return self.get_board(board_id).ordered_columns()

    def get_task(self, task_id: str) -> Task:
        task = self._state.tasks.get(task_id)
        if task is None:
            raise NotFoundError("task", task_id)
        return task

    def tasks_in_column(self, board_id: str, column_id: str) -> list[Task]:
        """Resolve a column's task ids to tasks, preserving order.

        Raises:
            NotFoundError: If the board or column does not exist
            DanglingReferenceError: If the column lists an unknown task id
        """
        column = self.get_column(board_id, column_id)
        tasks = []
        for task_id in column.task_ids:
            task = self._state.tasks.get(task_id)
            if task is None:
                raise DanglingReferenceError(
                    f"column '{column_id}' on board '{board_id}' references "
                    f"missing task '{task_id}'"
                )
            tasks.append(task)
        return tasks

    def locate_task(self, task_id: str) -> tuple[str, str, int] | None:
        """Find the (board_id, column_id, index) that lists a task."""
        return locate_task(self._state, task_id)


def locate_task(state: AppState, task_id: str) -> tuple[str, str, int] | None:
    """Find the (board_id, column_id, index) that lists a task, if any."""
    for board_id in state.boards_order:
        board = state.boards[board_id]
        for column_id in board.columns_order:
            task_ids = board.columns[column_id].task_ids
            if task_id in task_ids:
                return board_id, column_id, task_ids.index(task_id)
    return None


def check_integrity(state: AppState) -> None:
    """Verify every column reference resolves and no task is listed twice.

    Orphan tasks (in ``tasks`` but listed by no column) are tolerated.

    Raises:
        DanglingReferenceError: On the first violation found
    """
    seen: dict[str, tuple[str, str]] = {}
    for board_id in state.boards_order:
        board = state.boards[board_id]
        for column_id in board.columns_order:
            for task_id in board.columns[column_id].task_ids:
                if task_id not in state.tasks:
                    raise DanglingReferenceError(
                        f"column '{column_id}' on board '{board_id}' references "
                        f"missing task '{task_id}'"
                    )
                if task_id in seen:
                    other_board, other_column = seen[task_id]
                    raise DanglingReferenceError(
                        f"task '{task_id}' listed by both '{other_board}/{other_column}' "
                        f"and '{board_id}/{column_id}'"
                    )
                seen[task_id] = (board_id, column_id)
