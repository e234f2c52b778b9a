"""Change descriptors and mutation results."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .core import AppState, FrozenModel
from .errors import MutationError


class ChangeKind(str, Enum):
    """Kind of committed mutation."""

    MOVE = "move"
    CREATE = "create"
    EDIT = "edit"
    DELETE = "delete"


class ChangeDescriptor(FrozenModel):
    """Minimal description of a committed mutation, used for broadcast.

    Attributes:
        kind: Mutation kind
        board_id: Board the change happened on (None for an orphan task)
        affected_column_ids: Columns whose task_ids changed
        task_id: Task the command targeted
        actor_id: Actor that issued the command, if authenticated
    """

    kind: ChangeKind
    board_id: str | None
    affected_column_ids: tuple[str, ...] = ()
    task_id: str
    actor_id: str | None = None


@dataclass(frozen=True)
class MutationResult:
    """Outcome of applying a command: a new snapshot or a rejection.

    ``state`` is the input snapshot itself when the command was a no-op,
    in which case ``change`` is None.
    """

    state: AppState | None = None
    error: MutationError | None = None
    change: ChangeDescriptor | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def changed(self) -> bool:
        return self.ok and self.change is not None

    @classmethod
    def success(
        cls, state: AppState, change: ChangeDescriptor | None
    ) -> MutationResult:
        return cls(state=state, change=change)

    @classmethod
    def failure(cls, error: MutationError) -> MutationResult:
        return cls(error=error)
