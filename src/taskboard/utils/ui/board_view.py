"""Terminal rendering of a board view."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.text import Text

from taskboard.models import Priority
from taskboard.ui.presentation import BoardView, TaskView
from taskboard.utils.ui.console import get_console

PRIORITY_COLORS = {
    Priority.LOW: "green",
    Priority.MEDIUM: "yellow",
    Priority.HIGH: "red",
}


def format_task_line(task: TaskView, indent: str = "  ") -> Text:
    """Format a single task card as one line."""
    color = PRIORITY_COLORS[task.priority]
    line_str = (
        f"{indent}[dim]{task.index}.[/dim] "
        f"[{color}]●[/{color}] "
        f"{escape(task.title)} [dim]({task.id})[/dim]"
    )
    if task.due_date is not None:
        line_str += f" [cyan]• {task.due_date:%Y-%m-%d}[/cyan]"
    for tag in task.tags:
        line_str += f" [blue]#{escape(tag)}[/blue]"
    return Text.from_markup(line_str)


def print_board(
    view: BoardView,
    *,
    show_descriptions: bool = False,
    console: Console | None = None,
) -> None:
    """Print a board column by column, cards in their stored order."""
    console = console or get_console()
    console.print(Text(view.title, style="bold magenta"))
    console.print()

    for column in view.columns:
        console.print(f"[bold]{escape(column.title)}[/bold] ({len(column.tasks)})")
        if not column.tasks:
            console.print("  [dim]No tasks[/dim]")
        for task in column.tasks:
            console.print(format_task_line(task))
            if show_descriptions and task.description:
                console.print(Text(f"       {task.description}", style="dim"))
        console.print()
