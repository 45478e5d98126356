"""Dict-backed concept shard store for tests and local runs."""

from collections.abc import AsyncIterator, Sequence
from dataclasses import replace
from datetime import UTC, datetime

import structlog

from conceptdeck.domain.common.value_objects import MaterialId, NotebookId, ShardId, UserId
from conceptdeck.domain.notebooks.entities.concept import Concept
from conceptdeck.domain.notebooks.entities.concept_shard import ConceptShard
from conceptdeck.infrastructure.notebooks.stores.subscription_hub import SubscriptionHub

logger = structlog.get_logger(__name__)


class InMemoryShardStore:
    """
    Concept shard store holding records in a dict.

    Reads hand out copies, so callers can never change stored arrays in
    place. Every write publishes the notebook's full result set to its
    subscribers.
    """

    def __init__(self) -> None:
        self._shards: dict[ShardId, ConceptShard] = {}
        self.hub = SubscriptionHub(self.list_shards)

    def __len__(self) -> int:
        return len(self._shards)

    def subscribe(self, notebook_id: NotebookId) -> AsyncIterator[list[ConceptShard]]:
        return self.hub.subscribe(notebook_id)

    async def get_shard(self, shard_id: ShardId) -> ConceptShard | None:
        shard = self._shards.get(shard_id)
        return self._copy(shard) if shard else None

    async def list_shards(self, notebook_id: NotebookId) -> list[ConceptShard]:
        shards = [shard for shard in self._shards.values() if shard.notebook_id == notebook_id]
        shards.sort(key=lambda shard: (shard.created_at, str(shard.id)))
        return [self._copy(shard) for shard in shards]

    async def find_shards_by_material(self, material_id: MaterialId) -> list[ConceptShard]:
        return [
            self._copy(shard)
            for shard in self._shards.values()
            if any(concept.came_from(material_id) for concept in shard.concepts)
        ]

    async def create_shard(
        self,
        notebook_id: NotebookId,
        owner_id: UserId,
        concepts: Sequence[Concept],
        created_at: datetime | None = None,
    ) -> ShardId:
        shard = ConceptShard(
            id=ShardId.generate(),
            notebook_id=notebook_id,
            owner_id=owner_id,
            concepts=list(concepts),
            created_at=created_at or datetime.now(UTC),
        )
        self._shards[shard.id] = shard
        logger.debug("shard_created", shard_id=str(shard.id), notebook_id=str(notebook_id))
        await self.hub.publish(notebook_id)
        return shard.id

    async def rewrite_shard_concepts(self, shard_id: ShardId, concepts: Sequence[Concept]) -> bool:
        shard = self._shards.get(shard_id)
        if shard is None:
            return False
        # Goes through ConceptShard validation, so an empty array is rejected
        self._shards[shard_id] = replace(shard, concepts=list(concepts))
        await self.hub.publish(shard.notebook_id)
        return True

    async def delete_shard(self, shard_id: ShardId) -> bool:
        shard = self._shards.pop(shard_id, None)
        if shard is None:
            return False
        logger.debug("shard_deleted", shard_id=str(shard_id), notebook_id=str(shard.notebook_id))
        await self.hub.publish(shard.notebook_id)
        return True

    def fail_subscription(self, notebook_id: NotebookId, error: BaseException) -> None:
        """Make the notebook's live subscriptions fail with ``error``."""
        self.hub.fail(notebook_id, error)

    @staticmethod
    def _copy(shard: ConceptShard) -> ConceptShard:
        return replace(shard, concepts=list(shard.concepts))
