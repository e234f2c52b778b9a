"""Board commands - show the board and move, add, edit and delete tasks."""

from datetime import datetime

import typer
from rich.console import Console

from taskboard.models import Priority, TaskPatch, initial_state
from taskboard.services.board_context import board_session
from taskboard.services.config_service import get_config_service
from taskboard.store import EntityStore
from taskboard.ui.presentation import DragGesture, DropLocation
from taskboard.utils.exit_codes import ERROR_NOT_FOUND
from taskboard.utils.ui.board_view import print_board
from taskboard.utils.ui.console import get_console
from taskboard.utils.ui.formatters import format_info, format_success

from .decorators import AppError, command_wrapper, raise_for_result

console = get_console()

DATE_FORMATS = ["%Y-%m-%d", "%Y-%m-%dT%H:%M", "%Y-%m-%dT%H:%M:%S"]


def resolve_board(store: EntityStore, board: str | None) -> str:
    """Return the requested board id, or the first board in display order."""
    if board is not None:
        return store.get_board(board).id
    boards = store.boards()
    if not boards:
        raise AppError("No boards exist; run 'taskboard init'", ERROR_NOT_FOUND)
    return boards[0].id


def resolve_column(store: EntityStore, board_id: str, column: str) -> str:
    """Resolve a column reference given as an id or a (case-insensitive) title.

    Unknown references are returned unchanged so the mutation is rejected
    with the usual not-found error.
    """
    board = store.get_board(board_id)
    if column in board.columns:
        return column
    wanted = column.casefold()
    for candidate in board.ordered_columns():
        if candidate.title.casefold() == wanted:
            return candidate.id
    return column


@command_wrapper
async def init(
    force: bool = typer.Option(
        False, "--force", "-f", help="Replace any existing board state"
    ),
) -> None:
    """Create the board state, seeded with the demo board.

    Existing state is kept unless --force is given, which overwrites it
    without reading it, so a corrupt store can be recovered.
    """
    replace = initial_state() if force else None
    async with board_session(surface_errors=False, replace=replace) as adapter:
        notifier = adapter.notifier
        state = notifier.state
    format_success(
        f"Board state '{notifier.state_key}' ready "
        f"({len(state.boards)} boards, {len(state.tasks)} tasks)"
    )


@command_wrapper
async def show(
    board: str | None = typer.Option(None, "--board", "-b", help="Board ID"),
    output: str = typer.Option(
        "pretty", "--output", "-o", help="Output format (pretty/json)"
    ),
    descriptions: bool = typer.Option(
        False, "--descriptions", "-d", help="Show task descriptions"
    ),
) -> None:
    """Show a board with its columns and tasks in order."""
    async with board_session(surface_errors=False) as adapter:
        board_id = resolve_board(adapter.notifier.store, board)
        view = adapter.view(board_id)

    if output == "json":
        console.print_json(view.model_dump_json())
        return

    color = get_config_service().config.output.color
    target = console if color else Console(no_color=True, highlight=False)
    print_board(view, show_descriptions=descriptions, console=target)


@command_wrapper
async def add(
    column: str = typer.Argument(..., help="Column ID or title"),
    title: str = typer.Argument(..., help="Task title"),
    board: str | None = typer.Option(None, "--board", "-b", help="Board ID"),
    priority: Priority | None = typer.Option(
        None, "--priority", "-p", help="Task priority (defaults to medium)"
    ),
    description: str | None = typer.Option(
        None, "--description", "-d", help="Task description"
    ),
    tags: list[str] | None = typer.Option(
        None, "--tag", "-t", help="Tag (repeat for several)"
    ),
    due: datetime | None = typer.Option(
        None, "--due", help="Due date (YYYY-MM-DD)", formats=DATE_FORMATS
    ),
) -> None:
    """Add a task to the end of a column."""
    async with board_session(surface_errors=False) as adapter:
        store = adapter.notifier.store
        board_id = resolve_board(store, board)
        result = await adapter.add_task(
            board_id,
            resolve_column(store, board_id, column),
            title,
            priority=priority,
            description=description,
            tags=tags,
            due_date=due,
        )
    raise_for_result(result)
    format_success(f"Task created: {result.change.task_id}")


@command_wrapper
async def edit(
    task_id: str = typer.Argument(..., help="Task ID"),
    title: str | None = typer.Option(None, "--title", help="New title"),
    description: str | None = typer.Option(
        None, "--description", "-d", help="New description"
    ),
    priority: Priority | None = typer.Option(
        None, "--priority", "-p", help="New priority"
    ),
    tags: list[str] | None = typer.Option(
        None, "--tag", "-t", help="Replace tags (repeat for several)"
    ),
    clear_tags: bool = typer.Option(False, "--clear-tags", help="Remove all tags"),
    due: datetime | None = typer.Option(
        None, "--due", help="New due date (YYYY-MM-DD)", formats=DATE_FORMATS
    ),
) -> None:
    """Edit a task's fields. Only the given options are changed."""
    changes: dict = {}
    if title is not None:
        changes["title"] = title
    if description is not None:
        changes["description"] = description
    if priority is not None:
        changes["priority"] = priority
    if clear_tags:
        changes["tags"] = frozenset()
    elif tags:
        changes["tags"] = frozenset(tags)
    if due is not None:
        changes["due_date"] = due

    if not changes:
        format_info("Nothing to change")
        return

    async with board_session(surface_errors=False) as adapter:
        result = await adapter.edit_task(task_id, TaskPatch(**changes))
    raise_for_result(result)
    if result.changed:
        format_success(f"Task updated: {task_id}")
    else:
        format_info(f"Task {task_id} already has those values")


@command_wrapper
async def move(
    task_id: str = typer.Argument(..., help="Task ID"),
    to: str = typer.Option(..., "--to", help="Destination column ID or title"),
    index: int | None = typer.Option(
        None, "--index", "-i", help="Position in the destination (default: end)"
    ),
) -> None:
    """Move a task to another column or position."""
    async with board_session(surface_errors=False) as adapter:
        store = adapter.notifier.store
        location = store.locate_task(task_id)
        to_column = resolve_column(store, location[0], to) if location else to
        result = await adapter.move_task(task_id, to_column, index)
    raise_for_result(result)
    if result.changed:
        format_success(f"Task moved: {task_id}")
    else:
        format_info(f"Task {task_id} is already there")


@command_wrapper
async def drag(
    task_id: str = typer.Argument(..., help="Task ID being dragged"),
    from_column: str = typer.Argument(..., help="Source column ID"),
    from_index: int = typer.Argument(..., help="Source index"),
    to_column: str = typer.Argument(..., help="Destination column ID"),
    to_index: int = typer.Argument(..., help="Destination index"),
    board: str | None = typer.Option(None, "--board", "-b", help="Board ID"),
) -> None:
    """Apply a raw drag-and-drop gesture, exactly as a board client reports it."""
    gesture = DragGesture(
        draggable_id=task_id,
        source=DropLocation(droppable_id=from_column, index=from_index),
        destination=DropLocation(droppable_id=to_column, index=to_index),
    )
    async with board_session(surface_errors=False) as adapter:
        board_id = resolve_board(adapter.notifier.store, board)
        result = await adapter.handle_drop(board_id, gesture)
    if result is None:
        format_info("Dropped in place; nothing to do")
        return
    raise_for_result(result)
    if result.changed:
        format_success(f"Task moved: {task_id}")
    else:
        format_info(f"Task {task_id} is already there")


@command_wrapper
async def delete(
    task_id: str = typer.Argument(..., help="Task ID"),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation"),
) -> None:
    """Delete a task."""
    async with board_session(surface_errors=False) as adapter:
        task = adapter.notifier.store.get_task(task_id)
        if not force:
            confirm = typer.confirm(f"Delete task '{task.title}'?")
            if not confirm:
                format_info("Cancelled")
                raise typer.Exit(0)
        result = await adapter.delete_task(task_id)
    raise_for_result(result)
    format_success(f"Task deleted: {task_id}")
