"""SQLite persistence adapter."""

from .state_repository import SqliteStateRepository

__all__ = ["SqliteStateRepository"]
