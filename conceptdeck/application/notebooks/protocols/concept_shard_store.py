"""Protocol for the concept shard store."""

from collections.abc import AsyncIterator, Sequence
from typing import Protocol

from conceptdeck.domain.common.value_objects import MaterialId, NotebookId, ShardId, UserId
from conceptdeck.domain.notebooks.entities.concept import Concept
from conceptdeck.domain.notebooks.entities.concept_shard import ConceptShard


class ConceptShardStoreProtocol(Protocol):
    """
    Store holding a notebook's concepts as shard records.

    The only mutation primitives are "create a shard", "replace a shard's
    whole concept array" and "delete a shard". There is no element-level
    patch.
    """

    def subscribe(self, notebook_id: NotebookId) -> AsyncIterator[list[ConceptShard]]:
        """
        Live subscription to every shard of a notebook.

        Each item is the full, self-consistent result set for the notebook
        (never a per-shard delta). The first item is the current state.
        Closing the iterator unsubscribes.
        """
        ...

    async def get_shard(self, shard_id: ShardId) -> ConceptShard | None:
        """Point read of one shard; None if it does not exist."""
        ...

    async def list_shards(self, notebook_id: NotebookId) -> list[ConceptShard]:
        """Every shard of a notebook, oldest first."""
        ...

    async def find_shards_by_material(self, material_id: MaterialId) -> list[ConceptShard]:
        """Every shard, across notebooks, holding at least one concept from the material."""
        ...

    async def create_shard(
        self, notebook_id: NotebookId, owner_id: UserId, concepts: Sequence[Concept]
    ) -> ShardId:
        """Create a shard holding ``concepts`` and return its id."""
        ...

    async def rewrite_shard_concepts(self, shard_id: ShardId, concepts: Sequence[Concept]) -> bool:
        """
        Replace a shard's whole concept array.

        Returns:
            True if the shard existed and was rewritten, False otherwise
        """
        ...

    async def delete_shard(self, shard_id: ShardId) -> bool:
        """
        Delete a shard record.

        Returns:
            True if deleted, False if not found
        """
        ...
