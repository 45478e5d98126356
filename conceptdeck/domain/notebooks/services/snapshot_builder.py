"""Domain service that turns a notebook's shards into one ordered snapshot."""

from collections.abc import Iterable

from conceptdeck.domain.common.value_objects import ConceptIdentity, NotebookId
from conceptdeck.domain.notebooks.entities.concept import Concept
from conceptdeck.domain.notebooks.entities.concept_shard import ConceptShard
from conceptdeck.domain.notebooks.services.concept_ordering import concept_sort_key
from conceptdeck.domain.notebooks.value_objects.snapshot import ConceptSnapshot, GlobalIndexEntry


class SnapshotBuilder:
    """Stateless domain service for flattening and ordering shards."""

    @staticmethod
    def flatten(shards: Iterable[ConceptShard]) -> list[tuple[ConceptIdentity, Concept]]:
        """
        Every concept of every shard paired with its structural identity.

        Args:
            shards: Full result set of shard records for one notebook

        Returns:
            (identity, concept) pairs in store order
        """
        return [
            (ConceptIdentity(shard.id, offset), concept)
            for shard in shards
            for offset, concept in enumerate(shard.concepts)
        ]

    @staticmethod
    def build(
        notebook_id: NotebookId,
        shards: Iterable[ConceptShard],
        generation: int,
    ) -> ConceptSnapshot:
        """
        Build a brand-new snapshot from a full result set.

        Never patches a previous snapshot: a deletion inside one shard moves
        the local offsets and global positions of unrelated entries.

        Args:
            notebook_id: Notebook the shards belong to
            shards: Full result set of shard records for the notebook
            generation: Generation number to stamp on the snapshot

        Returns:
            Loaded snapshot with entries sorted by the global concept order
        """
        triples = SnapshotBuilder.flatten(shards)
        triples.sort(key=lambda pair: concept_sort_key(pair[1].term, pair[0]))
        entries = tuple(
            GlobalIndexEntry(global_index=index, identity=identity, concept=concept)
            for index, (identity, concept) in enumerate(triples)
        )
        return ConceptSnapshot(
            notebook_id=notebook_id,
            entries=entries,
            loaded=True,
            generation=generation,
        )
