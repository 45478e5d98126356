"""
ConceptShard aggregate - one store record holding many concepts.

A notebook's concepts are packed into variable-length shard records. The
store can only replace a shard's whole concept array or delete the record,
so every change is planned here as a full replacement array
(``ShardRewritePlan``) and then applied by the coordinator in one write.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum

from conceptdeck.domain.common.entity import Entity
from conceptdeck.domain.common.exceptions import EntityNotFoundError, InvariantViolationError
from conceptdeck.domain.common.value_objects import (
    ConceptIdentity,
    NotebookId,
    ShardId,
    UserId,
)
from conceptdeck.domain.notebooks.entities.concept import Concept


class ShardWriteAction(StrEnum):
    """What a planned change does to the shard record."""

    CREATED = "created"
    REWRITTEN = "rewritten"
    DELETED = "deleted"
    UNCHANGED = "unchanged"


@dataclass(frozen=True)
class ShardRewritePlan:
    """Full replacement array for one shard, plus what it removes."""

    shard_id: ShardId
    action: ShardWriteAction
    concepts: tuple[Concept, ...]
    removed: tuple[Concept, ...] = ()


@dataclass
class ConceptShard(Entity[ShardId]):
    """
    Ordered list of concepts stored as a single record.

    Business Rules:
    - A shard never holds zero concepts; removing the last one deletes the record
    - Concepts are addressed by local offset, which shifts down after a removal
    """

    id: ShardId
    notebook_id: NotebookId
    owner_id: UserId
    concepts: list[Concept]
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        """Validate invariants."""
        if not self.concepts:
            raise InvariantViolationError("ConceptShard", "a shard must hold at least one concept")

    def __len__(self) -> int:
        return len(self.concepts)

    def identity_of(self, local_offset: int) -> ConceptIdentity:
        return ConceptIdentity(self.id, local_offset)

    def concept_at(self, local_offset: int) -> Concept:
        """
        Get the concept stored at a local offset.

        Raises:
            EntityNotFoundError: If the offset is outside the current array
        """
        self._check_offset(local_offset)
        return self.concepts[local_offset]

    def has_offset(self, local_offset: int) -> bool:
        return 0 <= local_offset < len(self.concepts)

    def offset_of(self, concept: Concept) -> int | None:
        """Current local offset of a concept, matched by id."""
        for offset, candidate in enumerate(self.concepts):
            if candidate.id == concept.id:
                return offset
        return None

    def plan_append(self, new_concepts: Sequence[Concept]) -> ShardRewritePlan:
        """Replacement array with ``new_concepts`` added at the end."""
        return ShardRewritePlan(
            shard_id=self.id,
            action=ShardWriteAction.REWRITTEN,
            concepts=(*self.concepts, *new_concepts),
        )

    def plan_replace(self, local_offset: int, concept: Concept) -> ShardRewritePlan:
        """Replacement array with the element at ``local_offset`` swapped for ``concept``."""
        self._check_offset(local_offset)
        updated = list(self.concepts)
        updated[local_offset] = concept
        return ShardRewritePlan(
            shard_id=self.id,
            action=ShardWriteAction.REWRITTEN,
            concepts=tuple(updated),
        )

    def plan_remove_at(self, local_offset: int) -> ShardRewritePlan:
        """
        Plan removal of one concept.

        A single-element shard is deleted outright; otherwise the remaining
        array is rewritten and every later offset shifts down by one.
        """
        self._check_offset(local_offset)
        return self.plan_remove_where(lambda _, offset: offset == local_offset)

    def plan_remove_where(self, predicate: Callable[[Concept, int], bool]) -> ShardRewritePlan:
        """Plan removal of every concept for which ``predicate(concept, offset)`` holds."""
        kept: list[Concept] = []
        removed: list[Concept] = []
        for offset, concept in enumerate(self.concepts):
            (removed if predicate(concept, offset) else kept).append(concept)

        if not removed:
            action = ShardWriteAction.UNCHANGED
        elif not kept:
            action = ShardWriteAction.DELETED
        else:
            action = ShardWriteAction.REWRITTEN
        return ShardRewritePlan(
            shard_id=self.id,
            action=action,
            concepts=tuple(kept),
            removed=tuple(removed),
        )

    def _check_offset(self, local_offset: int) -> None:
        if not self.has_offset(local_offset):
            raise EntityNotFoundError("Concept", f"{self.id}/{local_offset}")
