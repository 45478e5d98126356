"""Snapshot value objects - one generation of a notebook's ordered concepts.

A snapshot is recomputed wholesale from the store's full result set every
time any shard of the notebook changes. Global indexes inside it are only
meaningful against this snapshot; only ConceptIdentity may be carried from
one snapshot generation to the next.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from conceptdeck.domain.common.value_objects import (
    ConceptId,
    ConceptIdentity,
    NotebookId,
    ShardId,
)
from conceptdeck.domain.notebooks.entities.concept import Concept


@dataclass(frozen=True)
class GlobalIndexEntry:
    """A concept with its position in one snapshot and its structural identity."""

    global_index: int
    identity: ConceptIdentity
    concept: Concept

    @property
    def shard_id(self) -> ShardId:
        return self.identity.shard_id

    @property
    def local_offset(self) -> int:
        return self.identity.local_offset


@dataclass(frozen=True)
class ConceptSnapshot:
    """Globally ordered view of every concept of a notebook.

    Attributes:
        notebook_id: Notebook the snapshot was built for
        entries: Entries sorted by the global concept order; entry i has global_index i
        loaded: False only for the placeholder that exists before the first store event
        generation: Monotonic counter of the stream that produced the snapshot
    """

    notebook_id: NotebookId
    entries: tuple[GlobalIndexEntry, ...] = ()
    loaded: bool = False
    generation: int = 0
    _by_identity: dict[ConceptIdentity, int] = field(
        init=False, repr=False, compare=False, hash=False
    )
    _by_concept_id: dict[ConceptId, int] = field(
        init=False, repr=False, compare=False, hash=False
    )

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "_by_identity", {entry.identity: entry.global_index for entry in self.entries}
        )
        object.__setattr__(
            self, "_by_concept_id", {entry.concept.id: entry.global_index for entry in self.entries}
        )

    @classmethod
    def empty(cls, notebook_id: NotebookId) -> ConceptSnapshot:
        """Placeholder used before the store has delivered anything."""
        return cls(notebook_id=notebook_id)

    @property
    def total_count(self) -> int:
        return len(self.entries)

    @property
    def is_empty(self) -> bool:
        return not self.entries

    @property
    def first(self) -> GlobalIndexEntry | None:
        return self.entries[0] if self.entries else None

    def entry_at(self, global_index: int) -> GlobalIndexEntry | None:
        if 0 <= global_index < len(self.entries):
            return self.entries[global_index]
        return None

    def index_of(self, identity: ConceptIdentity) -> int | None:
        """Global index of the concept currently at ``identity``, if any."""
        return self._by_identity.get(identity)

    def entry_for(self, identity: ConceptIdentity) -> GlobalIndexEntry | None:
        index = self.index_of(identity)
        return None if index is None else self.entries[index]

    def locate(self, concept_id: ConceptId) -> GlobalIndexEntry | None:
        """Find a concept by id, wherever its shard currently puts it."""
        index = self._by_concept_id.get(concept_id)
        return None if index is None else self.entries[index]

    def neighbours(
        self, identity: ConceptIdentity
    ) -> tuple[GlobalIndexEntry | None, GlobalIndexEntry | None]:
        """The entries immediately before and after ``identity`` in global order."""
        index = self.index_of(identity)
        if index is None:
            return None, None
        return self.entry_at(index - 1), self.entry_at(index + 1)

    def concepts(self) -> list[Concept]:
        return [entry.concept for entry in self.entries]

    def concept_ids(self) -> list[ConceptId]:
        return [entry.concept.id for entry in self.entries]
