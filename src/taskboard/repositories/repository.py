"""Collaborator interfaces for the task board.

This module defines the abstract base classes (ports) the change notifier
and presentation layer depend on, following the Ports & Adapters pattern.

Implementations (adapters) are in:
- taskboard.adapters.sqlite (SQLite document table)
- taskboard.adapters.json_file (one JSON file per state key)
- taskboard.adapters.memory (in-process storage and broadcast)
- taskboard.adapters.webhook (HTTP broadcast)
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from taskboard.models import AppState, ChangeDescriptor


class StateRepository(ABC):
    """Abstract base class for board state persistence.

    The whole ``AppState`` is stored as one document under a single key.
    Implementations must round-trip a snapshot to a structurally equal one.
    """

    @abstractmethod
    async def load(self, key: str) -> AppState | None:
        """Load the snapshot stored under ``key``.

        Args:
            key: State key

        Returns:
            The stored AppState, or None if nothing is stored under the key

        Raises:
            NotImplementedError: Must be implemented by concrete adapter
            PersistenceError: If the stored document cannot be read or parsed
        """
        raise NotImplementedError(
            "StateRepository.load() must be implemented by adapter"
        )

    @abstractmethod
    async def save(self, key: str, state: AppState) -> None:
        """Store ``state`` under ``key``, replacing any previous snapshot.

        Args:
            key: State key
            state: Snapshot to store

        Raises:
            NotImplementedError: Must be implemented by concrete adapter
            PersistenceError: If the write fails
        """
        raise NotImplementedError(
            "StateRepository.save() must be implemented by adapter"
        )

    async def close(self) -> None:
        """Release any resources held by the repository."""


class ChangePublisher(ABC):
    """Abstract base class for change broadcast (fire-and-forget)."""

    async def open(self) -> None:
        """Acquire transport resources. Called once before publishing."""

    @abstractmethod
    async def publish(self, change: ChangeDescriptor) -> None:
        """Deliver a change descriptor to other clients.

        No acknowledgment is expected. Failures may raise; the caller logs
        them and carries on.

        Raises:
            NotImplementedError: Must be implemented by concrete adapter
        """
        raise NotImplementedError(
            "ChangePublisher.publish() must be implemented by adapter"
        )

    async def close(self) -> None:
        """Release transport resources."""


class IdentityProvider(ABC):
    """Resolves the actor issuing commands."""

    @abstractmethod
    def current_actor(self) -> str | None:
        """Return the authenticated actor id, or None when anonymous."""
        raise NotImplementedError(
            "IdentityProvider.current_actor() must be implemented by adapter"
        )
