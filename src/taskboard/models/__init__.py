"""taskboard domain models.

This package contains the Pydantic models for the board state snapshot,
the mutation commands, change descriptors and configuration, plus the
error taxonomy shared by every layer.
"""

from .changes import ChangeDescriptor, ChangeKind, MutationResult
from .commands import Command, CreateTask, DeleteTask, EditTask, MoveTask, TaskPatch
from .config_models import AppConfig
from .core import AppState, Board, Column, Priority, Task
from .errors import (
    DanglingReferenceError,
    IdCollisionError,
    MutationError,
    NotFoundError,
    PersistenceError,
    TaskBoardError,
    ValidationError,
)
from .seed import DEFAULT_BOARD_ID, initial_state

__all__ = [
    # State models
    "AppState",
    "Board",
    "Column",
    "Task",
    "Priority",
    # Commands
    "Command",
    "MoveTask",
    "CreateTask",
    "EditTask",
    "DeleteTask",
    "TaskPatch",
    # Results
    "ChangeDescriptor",
    "ChangeKind",
    "MutationResult",
    # Errors
    "TaskBoardError",
    "MutationError",
    "NotFoundError",
    "ValidationError",
    "IdCollisionError",
    "DanglingReferenceError",
    "PersistenceError",
    # Config
    "AppConfig",
    # Seed
    "DEFAULT_BOARD_ID",
    "initial_state",
]
