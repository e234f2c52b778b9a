"""Presentation layer: gesture translation and board view models."""

from .presentation import (
    BoardView,
    ColumnView,
    DragGesture,
    DropLocation,
    PresentationAdapter,
    TaskView,
    gesture_to_command,
    render_board,
)

__all__ = [
    "BoardView",
    "ColumnView",
    "DragGesture",
    "DropLocation",
    "PresentationAdapter",
    "TaskView",
    "gesture_to_command",
    "render_board",
]
