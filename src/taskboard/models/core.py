"""Board state data models.

Every model is frozen: a change to the board always produces a new
snapshot built with ``model_copy``, which shares every untouched child
object with the previous snapshot.

Field aliases are camelCase so a serialised ``AppState`` has the same
shape as the document the web client keeps in browser storage
(``boardsOrder``, ``columnsOrder``, ``taskIds``, ``createdAt``...).
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class Priority(str, Enum):
    """Task priority levels."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class FrozenModel(BaseModel):
    """Base for immutable snapshot models."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )


class Task(FrozenModel):
    """A single unit of work.

    Attributes:
        id: Unique identifier, immutable after creation
        title: Short title, never blank
        description: Optional free-form description
        priority: Priority level (defaults to medium)
        tags: Set of free-form tags
        created_at: Creation timestamp
        due_date: Optional due date
    """

    id: str
    title: str
    description: str = ""
    priority: Priority = Priority.MEDIUM
    tags: frozenset[str] = Field(default_factory=frozenset)
    created_at: datetime | None = None
    due_date: datetime | None = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        """Strip the title and reject blank values."""
        if not v or not v.strip():
            raise ValueError("title cannot be empty")
        return v.strip()

    @field_validator("description", mode="before")
    @classmethod
    def coerce_description(cls, v: object) -> object:
        return "" if v is None else v


class Column(FrozenModel):
    """An ordered bucket of task references."""

    id: str
    title: str
    task_ids: tuple[str, ...] = ()


class Board(FrozenModel):
    """A board: an ordered set of columns."""

    id: str
    title: str
    columns_order: tuple[str, ...] = ()
    columns: dict[str, Column] = Field(default_factory=dict)

    @model_validator(mode="after")
    def check_columns_order(self) -> Board:
        """Ensure columns_order is a permutation of the column ids."""
        if len(set(self.columns_order)) != len(self.columns_order):
            raise ValueError(f"board '{self.id}' has duplicate ids in columns_order")
        if set(self.columns_order) != set(self.columns):
            missing = set(self.columns) - set(self.columns_order)
            foreign = set(self.columns_order) - set(self.columns)
            raise ValueError(
                f"board '{self.id}' columns_order does not match columns "
                f"(missing={sorted(missing)}, foreign={sorted(foreign)})"
            )
        for key, column in self.columns.items():
            if column.id != key:
                raise ValueError(
                    f"column stored under '{key}' has id '{column.id}'"
                )
        return self

    def ordered_columns(self) -> list[Column]:
        return [self.columns[column_id] for column_id in self.columns_order]


class AppState(FrozenModel):
    """One complete snapshot of every board and task.

    Referential integrity between columns and ``tasks`` is checked by
    ``taskboard.store.check_integrity`` rather than here, so a corrupt
    stored document surfaces as a ``DanglingReferenceError``.
    """

    boards_order: tuple[str, ...] = ()
    boards: dict[str, Board] = Field(default_factory=dict)
    tasks: dict[str, Task] = Field(default_factory=dict)

    @model_validator(mode="after")
    def check_boards_order(self) -> AppState:
        """Ensure boards_order is a permutation of the board ids."""
        if len(set(self.boards_order)) != len(self.boards_order) or set(
            self.boards_order
        ) != set(self.boards):
            raise ValueError("boards_order does not match boards")
        for key, board in self.boards.items():
            if board.id != key:
                raise ValueError(f"board stored under '{key}' has id '{board.id}'")
        return self

    def to_document(self) -> dict:
        """Serialise to a JSON-compatible dict using camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def from_document(cls, document: dict) -> AppState:
        """Build a snapshot from a serialised document."""
        return cls.model_validate(document)
