"""
Navigation over a notebook's ordered concepts.

The cursor's position is a structural identity (shard id, local offset)
plus the id of the concept found there. The global index is derived from
the current snapshot every time one arrives and is never carried across
snapshots.
"""

from collections.abc import Callable
from dataclasses import dataclass

import structlog

from conceptdeck.application.common.result import Failure, Result, Success
from conceptdeck.application.notebooks.services.prefetch_cache import PrefetchCache
from conceptdeck.application.notebooks.services.shard_aggregator import (
    ShardAggregator,
    SnapshotStream,
)
from conceptdeck.domain.common.value_objects import (
    ConceptAddress,
    ConceptId,
    ConceptIdentity,
    NotebookId,
)
from conceptdeck.domain.notebooks.entities.concept import Concept
from conceptdeck.domain.notebooks.value_objects.snapshot import ConceptSnapshot, GlobalIndexEntry
from conceptdeck.exceptions import ConceptNotFoundError

logger = structlog.get_logger(__name__)

NavigateCallback = Callable[[ConceptAddress], None]


@dataclass(frozen=True)
class NavigationState:
    """Where the cursor stands in the current snapshot."""

    identity: ConceptIdentity | None
    global_index: int | None
    total_count: int
    loaded: bool
    in_flight: bool

    @property
    def at_start(self) -> bool:
        return self.global_index == 0

    @property
    def at_end(self) -> bool:
        return self.global_index is not None and self.global_index == self.total_count - 1


class NavigationCursor:
    """
    Current position in a notebook, kept valid across live snapshots.

    Reconciliation on every snapshot:
    - the concept is still at the same identity: stay
    - the concept moved inside its shard (an earlier sibling was deleted): follow it
    - the concept is gone: repair to the first entry, log a warning and
      report the repair as a navigation

    Only one move may be in flight; further move requests are dropped.
    """

    def __init__(
        self,
        aggregator: ShardAggregator,
        prefetch_cache: PrefetchCache,
        notebook_id: NotebookId,
        on_navigate: NavigateCallback | None = None,
    ) -> None:
        self.aggregator = aggregator
        self.prefetch_cache = prefetch_cache
        self.notebook_id = notebook_id
        self.on_navigate = on_navigate
        self._snapshot = ConceptSnapshot.empty(notebook_id)
        self._stream: SnapshotStream | None = None
        self._remove_listener: Callable[[], None] | None = None
        self._attached = False
        self._identity: ConceptIdentity | None = None
        self._concept_id: ConceptId | None = None
        self._global_index: int | None = None
        self._in_flight = False

    @property
    def snapshot(self) -> ConceptSnapshot:
        return self._snapshot

    @property
    def state(self) -> NavigationState:
        return NavigationState(
            identity=self._identity,
            global_index=self._global_index,
            total_count=self._snapshot.total_count,
            loaded=self._snapshot.loaded,
            in_flight=self._in_flight,
        )

    @property
    def address(self) -> ConceptAddress | None:
        """Routable address of the current position."""
        if self._identity is None or self._global_index is None:
            return None
        return ConceptAddress.at(self.notebook_id, self._identity)

    @property
    def current_entry(self) -> GlobalIndexEntry | None:
        if self._global_index is None:
            return None
        return self._snapshot.entry_at(self._global_index)

    @property
    def current_concept(self) -> Concept | None:
        entry = self.current_entry
        return entry.concept if entry is not None else None

    async def open(
        self, initial: ConceptIdentity | ConceptAddress | None = None
    ) -> NavigationState:
        """
        Subscribe to the notebook, wait for the first snapshot and attach.

        Args:
            initial: Starting position, typically parsed from the route

        Returns:
            State after the first snapshot has been resolved
        """
        if self._stream is not None:
            raise RuntimeError("NavigationCursor is already open")
        if isinstance(initial, ConceptAddress):
            initial = initial.identity
        self._stream = self.aggregator.subscribe(self.notebook_id)
        self._remove_listener = self._stream.add_listener(self._on_snapshot)
        self.attach(initial)
        await self._stream.wait_until_loaded()
        return self.state

    def attach(self, initial: ConceptIdentity | None = None) -> NavigationState:
        """
        Start tracking a position.

        Resolves ``initial`` against the current snapshot, falling back to
        the first entry (and logging the repair) when it does not resolve.
        Before the first snapshot has loaded, resolution is deferred.
        """
        self._attached = True
        self._identity = initial
        self._concept_id = None
        self._global_index = None
        if self._snapshot.loaded:
            self._reconcile(self._snapshot)
        return self.state

    async def move_next(self) -> Result[NavigationState, ConceptNotFoundError]:
        """Step to the next entry; a no-op at the last entry."""
        return await self._move(1)

    async def move_previous(self) -> Result[NavigationState, ConceptNotFoundError]:
        """Step to the previous entry; a no-op at the first entry."""
        return await self._move(-1)

    def resolve(self, address: ConceptAddress) -> Result[GlobalIndexEntry, ConceptNotFoundError]:
        return self.aggregator.resolve(self._snapshot, address)

    async def detach(self) -> None:
        """Unsubscribe and drop pending prefetches. No work continues afterwards."""
        self._attached = False
        if self._remove_listener is not None:
            self._remove_listener()
            self._remove_listener = None
        if self._stream is not None:
            await self._stream.close()
            self._stream = None
        await self.prefetch_cache.close()
        logger.info("cursor_detached", notebook_id=str(self.notebook_id))

    async def _move(self, step: int) -> Result[NavigationState, ConceptNotFoundError]:
        snapshot = self._snapshot
        stream = self._stream
        if self._in_flight or not snapshot.loaded or self._global_index is None:
            return Success(self.state)
        target = snapshot.entry_at(self._global_index + step)
        if target is None:
            return Success(self.state)

        self._in_flight = True
        try:
            concept = self.prefetch_cache.get(target.identity)
            if concept is None:
                concept = await self.prefetch_cache.load(target.identity, snapshot.generation)
        finally:
            self._in_flight = False

        if not self._attached or self._stream is not stream:
            return Success(self.state)

        if self._snapshot is not snapshot:
            # Offsets may have shifted while the target was loading
            entry = self._snapshot.locate(target.concept.id)
        elif concept is not None and concept.id == target.concept.id:
            entry = target
        else:
            entry = None
        if entry is None:
            logger.info(
                "navigation_target_missing",
                notebook_id=str(self.notebook_id),
                identity=str(target.identity),
            )
            return Failure(ConceptNotFoundError(target.shard_id, target.local_offset))

        self._land(entry, navigated=True)
        return Success(self.state)

    def _on_snapshot(self, snapshot: ConceptSnapshot) -> None:
        self._snapshot = snapshot
        self.prefetch_cache.invalidate(snapshot.generation)
        if self._attached:
            self._reconcile(snapshot)

    def _reconcile(self, snapshot: ConceptSnapshot) -> None:
        entry = self._find(snapshot)
        if entry is not None:
            self._land(entry, navigated=entry.identity != self._identity)
            return

        if self._identity is not None:
            logger.warning(
                "cursor_identity_repaired",
                notebook_id=str(self.notebook_id),
                lost_identity=str(self._identity),
                generation=snapshot.generation,
            )
        self._land(snapshot.first, navigated=True)

    def _find(self, snapshot: ConceptSnapshot) -> GlobalIndexEntry | None:
        if self._identity is None:
            return None
        entry = snapshot.entry_for(self._identity)
        if entry is not None and self._concept_id in (None, entry.concept.id):
            return entry
        if self._concept_id is not None:
            return snapshot.locate(self._concept_id)
        return None

    def _land(self, entry: GlobalIndexEntry | None, *, navigated: bool) -> None:
        if entry is None:
            self._identity = None
            self._concept_id = None
            self._global_index = None
            return

        self._identity = entry.identity
        self._concept_id = entry.concept.id
        self._global_index = entry.global_index
        self.prefetch_cache.warm_neighbours(self._snapshot, entry.identity)
        if navigated and self.on_navigate is not None:
            self.on_navigate(ConceptAddress.at(self.notebook_id, entry.identity))
