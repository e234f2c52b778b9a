"""In-process adapters: state storage and change broadcast."""

from __future__ import annotations

import asyncio
import json

from taskboard.models import AppState, ChangeDescriptor
from taskboard.repositories import ChangePublisher, StateRepository
from taskboard.utils.logger import get_logger


class InMemoryStateRepository(StateRepository):
    """Keeps serialised snapshots in a dict.

    Snapshots are stored as JSON text, so a load goes through the same
    parse path as the durable adapters.
    """

    def __init__(self):
        self._documents: dict[str, str] = {}

    async def load(self, key: str) -> AppState | None:
        payload = self._documents.get(key)
        if payload is None:
            return None
        return AppState.from_document(json.loads(payload))

    async def save(self, key: str, state: AppState) -> None:
        self._documents[key] = json.dumps(state.to_document())

    def keys(self) -> list[str]:
        return list(self._documents)


class InMemoryBroadcaster(ChangePublisher):
    """Fans each change out to every subscribed queue."""

    def __init__(self):
        self._subscribers: list[asyncio.Queue[ChangeDescriptor]] = []
        self._open = False

    @property
    def is_open(self) -> bool:
        return self._open

    async def open(self) -> None:
        self._open = True

    def subscribe(self) -> asyncio.Queue[ChangeDescriptor]:
        """Register a new subscriber and return its queue."""
        queue: asyncio.Queue[ChangeDescriptor] = asyncio.Queue()
        self._subscribers.append(queue)
        return queue

    def unsubscribe(self, queue: asyncio.Queue[ChangeDescriptor]) -> None:
        if queue in self._subscribers:
            self._subscribers.remove(queue)

    async def publish(self, change: ChangeDescriptor) -> None:
        if not self._open:
            raise RuntimeError("Broadcaster is closed")
        for queue in self._subscribers:
            queue.put_nowait(change)

    async def close(self) -> None:
        self._open = False
        self._subscribers.clear()


class LoggingChangePublisher(ChangePublisher):
    """Writes every change to the application log."""

    def __init__(self):
        self.logger = get_logger("transport")

    async def publish(self, change: ChangeDescriptor) -> None:
        self.logger.info("change: %s", change.model_dump_json(by_alias=True))


class NullChangePublisher(ChangePublisher):
    """Discards every change."""

    async def publish(self, change: ChangeDescriptor) -> None:
        return None
