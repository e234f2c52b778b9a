"""Mutation commands.

A command describes an intended change to the board state. Commands are
plain frozen values; the mutation engine decides whether they apply.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Literal, Union

from pydantic import ConfigDict, Field

from .core import FrozenModel, Priority


class MoveTask(FrozenModel):
    """Reposition a task within a column or transfer it to another column.

    Attributes:
        board_id: Board holding both columns
        task_id: Task being moved, expected at from_index
        from_column_id: Source column
        to_column_id: Destination column (may equal the source)
        from_index: Current position of the task in the source column
        to_index: Requested position in the destination column
    """

    kind: Literal["move"] = "move"
    board_id: str
    task_id: str
    from_column_id: str
    to_column_id: str
    from_index: int
    to_index: int


class CreateTask(FrozenModel):
    """Create a task and append it to a column."""

    kind: Literal["create"] = "create"
    board_id: str
    column_id: str
    title: str
    priority: Priority | None = None
    description: str | None = None
    tags: frozenset[str] = Field(default_factory=frozenset)
    due_date: datetime | None = None


class TaskPatch(FrozenModel):
    """Partial task update.

    Only fields explicitly set are merged into the task, so ``None`` can be
    used to clear ``due_date``. ``id`` and ``created_at`` cannot be patched.
    """

    model_config = ConfigDict(extra="forbid")

    title: str | None = None
    description: str | None = None
    priority: Priority | None = None
    tags: frozenset[str] | None = None
    due_date: datetime | None = None

    def changes(self) -> dict:
        """Return only the explicitly set fields, keyed by field name."""
        return {name: getattr(self, name) for name in self.model_fields_set}


class EditTask(FrozenModel):
    """Update fields of an existing task."""

    kind: Literal["edit"] = "edit"
    task_id: str
    patch: TaskPatch


class DeleteTask(FrozenModel):
    """Remove a task and its column reference."""

    kind: Literal["delete"] = "delete"
    task_id: str


Command = Annotated[
    Union[MoveTask, CreateTask, EditTask, DeleteTask],
    Field(discriminator="kind"),
]
