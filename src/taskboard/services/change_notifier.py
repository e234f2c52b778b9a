"""Change notifier - sequences mutations, persistence and broadcast.

The notifier owns the authoritative in-memory snapshot for the process.
For each command it reads the latest snapshot, runs the mutation engine,
commits the result in memory, then hands the snapshot to the state
repository and the change descriptor to the publisher.

Mutations on the same board are serialised by a per-board lock. The
read-compute-commit step never awaits, so commands on different boards
cannot overwrite each other's commits either.
"""

from __future__ import annotations

import asyncio
from collections import defaultdict

from taskboard.models import (
    AppState,
    ChangeDescriptor,
    Command,
    MutationResult,
    initial_state,
)
from taskboard.repositories import ChangePublisher, StateRepository
from taskboard.services.mutation_engine import (
    Clock,
    IdFactory,
    apply_command,
    generate_task_id,
    target_board_id,
    utc_now,
)
from taskboard.store import EntityStore, check_integrity
from taskboard.utils.logger import get_logger

# Lock key for commands whose board cannot be determined (orphan tasks).
_NO_BOARD = ""


class ChangeNotifier:
    """Applies commands to the latest snapshot and propagates the results."""

    def __init__(
        self,
        repository: StateRepository,
        publisher: ChangePublisher,
        *,
        state_key: str,
        seed: AppState | None = None,
        id_factory: IdFactory = generate_task_id,
        clock: Clock = utc_now,
    ):
        """Initialize the change notifier.

        Args:
            repository: Persistence collaborator
            publisher: Transport collaborator
            state_key: Key the snapshot is stored under
            seed: Snapshot used when nothing is stored yet
                (defaults to the demo board)
            id_factory: Task id generator passed to the mutation engine
            clock: Timestamp source passed to the mutation engine
        """
        self.repository = repository
        self.publisher = publisher
        self.state_key = state_key
        self.seed = seed
        self.id_factory = id_factory
        self.clock = clock
        self.logger = get_logger("notifier")

        self._store: EntityStore | None = None
        self._locks: defaultdict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    # -------------------- lifecycle --------------------

    @property
    def is_open(self) -> bool:
        return self._store is not None

    async def open(self, *, replace: AppState | None = None) -> None:
        """Load (or seed) the snapshot and open the publisher.

        Args:
            replace: Snapshot saved over whatever is stored. The stored
                document is not read, so a corrupt one can be replaced.

        Raises:
            PersistenceError: If the stored snapshot cannot be loaded, or
                the replacement cannot be saved
            DanglingReferenceError: If the snapshot is inconsistent
        """
        if self._store is not None:
            return
        try:
            state = await self._load_or_replace(replace)
            check_integrity(state)
            await self.publisher.open()
        except Exception:
            await self.repository.close()
            raise
        self._store = EntityStore(state)
        self.logger.info(
            "opened state '%s' (%d boards, %d tasks)",
            self.state_key,
            len(state.boards),
            len(state.tasks),
        )

    async def _load_or_replace(self, replace: AppState | None) -> AppState:
        if replace is not None:
            check_integrity(replace)
            await self.repository.save(self.state_key, replace)
            self.logger.info("replaced state '%s'", self.state_key)
            return replace
        state = await self.repository.load(self.state_key)
        if state is None:
            state = self.seed if self.seed is not None else initial_state()
            self.logger.info("no stored state under '%s', seeding", self.state_key)
            await self.repository.save(self.state_key, state)
        return state

    async def close(self) -> None:
        """Close the publisher and repository and drop the snapshot."""
        if self._store is None:
            return
        try:
            await self.publisher.close()
        finally:
            await self.repository.close()
            self._store = None
            self._locks.clear()
            self.logger.info("closed state '%s'", self.state_key)

    async def __aenter__(self) -> ChangeNotifier:
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    # -------------------- reads --------------------

    @property
    def store(self) -> EntityStore:
        """Entity store around the latest committed snapshot."""
        if self._store is None:
            raise RuntimeError("ChangeNotifier is not open")
        return self._store

    @property
    def state(self) -> AppState:
        return self.store.state

    # -------------------- writes --------------------

    async def dispatch(
        self, command: Command, *, actor: str | None = None
    ) -> MutationResult:
        """Apply a command, then persist and broadcast the result.

        A rejected command leaves the snapshot untouched and nothing is
        persisted or published. A no-op is neither persisted nor published.

        Args:
            command: Mutation command
            actor: Authenticated actor id, recorded on the change descriptor

        Returns:
            MutationResult from the mutation engine (with actor attached)
        """
        board_id = target_board_id(self.state, command) or _NO_BOARD
        async with self._locks[board_id]:
            result = self._commit(command, actor)
            if result.changed:
                assert result.state is not None and result.change is not None
                await self._persist(result.state)
                await self._publish(result.change)
            return result

    def _commit(self, command: Command, actor: str | None) -> MutationResult:
        """Compute against the latest snapshot and commit it in memory."""
        current = self.store.state
        result = apply_command(
            current, command, id_factory=self.id_factory, clock=self.clock
        )
        if not result.ok:
            self.logger.warning(
                "rejected %s command: %s", command.kind, result.error
            )
            return result
        if not result.changed:
            self.logger.debug("%s command was a no-op", command.kind)
            return result

        assert result.state is not None and result.change is not None
        change = result.change.model_copy(update={"actor_id": actor})
        self._store = EntityStore(result.state)
        self.logger.info(
            "applied %s on task '%s' (board=%s, columns=%s)",
            change.kind.value,
            change.task_id,
            change.board_id,
            ",".join(change.affected_column_ids),
        )
        return MutationResult.success(result.state, change)

    async def _persist(self, state: AppState) -> None:
        # The in-memory snapshot stays authoritative when the write fails.
        try:
            await self.repository.save(self.state_key, state)
        except Exception:
            self.logger.exception("failed to persist state '%s'", self.state_key)

    async def _publish(self, change: ChangeDescriptor) -> None:
        try:
            await self.publisher.publish(change)
        except Exception:
            self.logger.exception(
                "failed to publish %s change for task '%s'",
                change.kind.value,
                change.task_id,
            )
