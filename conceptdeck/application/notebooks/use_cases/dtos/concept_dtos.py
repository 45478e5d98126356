"""DTOs for concept mutations."""

from dataclasses import dataclass, field

from conceptdeck.domain.common.value_objects import (
    ConceptIdentity,
    MaterialId,
    NotebookId,
    ShardId,
)
from conceptdeck.domain.notebooks.entities.concept import Concept
from conceptdeck.domain.notebooks.entities.concept_shard import ShardWriteAction


@dataclass(frozen=True)
class ConceptDraft:
    """Fields of a concept that does not exist yet."""

    term: str
    definition: str
    source: str | None = None
    notes: str | None = None
    material_id: MaterialId | None = None


@dataclass(frozen=True)
class ConceptChanges:
    """Fields to merge into an existing concept; None leaves a field as is."""

    term: str | None = None
    definition: str | None = None
    source: str | None = None
    notes: str | None = None

    @property
    def is_empty(self) -> bool:
        return all(
            value is None for value in (self.term, self.definition, self.source, self.notes)
        )


@dataclass(frozen=True)
class ShardWriteOutcome:
    """What one mutation did to one shard."""

    shard_id: ShardId
    action: ShardWriteAction
    concepts: tuple[Concept, ...] = ()
    first_offset: int | None = None

    @property
    def concept(self) -> Concept | None:
        return self.concepts[0] if self.concepts else None

    @property
    def identity(self) -> ConceptIdentity | None:
        """Identity of the first affected concept right after the write."""
        if self.first_offset is None:
            return None
        return ConceptIdentity(self.shard_id, self.first_offset)


@dataclass
class MaterialCascadeOutcome:
    """Summary of removing a material's concepts from every shard."""

    material_id: MaterialId
    rewritten_shards: list[ShardId] = field(default_factory=list)
    deleted_shards: list[ShardId] = field(default_factory=list)
    removed_concepts: int = 0
    deleted_mastery_records: int = 0


@dataclass
class NotebookDeletionOutcome:
    """Summary of a notebook deletion cascade."""

    notebook_id: NotebookId
    deleted_shards: int = 0
    deleted_concepts: int = 0
    deleted_mastery_records: int = 0
