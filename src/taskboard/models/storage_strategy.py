"""
Strategy Pattern: storage and transport selection

A StorageStrategy encapsulates the state repository for one backend. The
configured strategy is created once at startup and injected into the
change notifier, which never knows which backend it is talking to.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from taskboard.models.config_models import AppConfig, TransportConfig
from taskboard.repositories import ChangePublisher, StateRepository


class StorageStrategy(ABC):
    """Abstract base class for storage strategies."""

    @abstractmethod
    def get_state_repository(self) -> StateRepository:
        """Get the state repository implementation for this strategy."""

    @property
    @abstractmethod
    def storage_type(self) -> str:
        """Get storage type identifier (for logging/debugging)."""


class SqliteStorageStrategy(StorageStrategy):
    """Local SQLite storage strategy."""

    def __init__(self, db_path: str | Path):
        """
        Initialize SQLite strategy.

        Args:
            db_path: Path to SQLite database file
        """
        from taskboard.adapters.sqlite import SqliteStateRepository

        self.db_path = db_path
        self._repository = SqliteStateRepository(db_path=db_path)

    def get_state_repository(self) -> StateRepository:
        return self._repository

    @property
    def storage_type(self) -> str:
        return "sqlite"


class JsonFileStorageStrategy(StorageStrategy):
    """One JSON file per state key."""

    def __init__(self, directory: str | Path):
        from taskboard.adapters.json_file import JsonFileStateRepository

        self.directory = directory
        self._repository = JsonFileStateRepository(directory=directory)

    def get_state_repository(self) -> StateRepository:
        return self._repository

    @property
    def storage_type(self) -> str:
        return "json"


class MemoryStorageStrategy(StorageStrategy):
    """Process-local storage; nothing survives the process."""

    def __init__(self):
        from taskboard.adapters.memory import InMemoryStateRepository

        self._repository = InMemoryStateRepository()

    def get_state_repository(self) -> StateRepository:
        return self._repository

    @property
    def storage_type(self) -> str:
        return "memory"


def create_storage_strategy(config: AppConfig, location: Path) -> StorageStrategy:
    """Instantiate the strategy selected by ``storage.backend``.

    Args:
        config: Application configuration
        location: Resolved database file or directory for the backend
    """
    backend = config.storage.backend
    if backend == "sqlite":
        return SqliteStorageStrategy(db_path=location)
    if backend == "json":
        return JsonFileStorageStrategy(directory=location)
    if backend == "memory":
        return MemoryStorageStrategy()
    raise ValueError(f"Unknown storage backend: {backend}")


def create_publisher(transport: TransportConfig) -> ChangePublisher:
    """Instantiate the change publisher selected by ``transport.kind``.

    Raises:
        ValueError: If the webhook transport has no URL configured
    """
    from taskboard.adapters.memory import LoggingChangePublisher, NullChangePublisher

    if transport.kind == "none":
        return NullChangePublisher()
    if transport.kind == "log":
        return LoggingChangePublisher()
    if transport.kind == "webhook":
        if not transport.url:
            raise ValueError("transport.url is required for the webhook transport")
        from taskboard.adapters.webhook import WebhookChangePublisher

        return WebhookChangePublisher(
            transport.url, timeout=transport.timeout, token=transport.token
        )
    raise ValueError(f"Unknown transport kind: {transport.kind}")
