"""ConceptIdentity value object - structural identity of a concept.

A concept is identified inside a notebook by (shard_id, local_offset): the
shard record holding it and its position in that shard's concept array.
The local offset is only meaningful against the shard's current array; it
shifts for every later element when an earlier one is deleted.

Supports natural ordering via @dataclass(order=True), which is the
tie-breaker of the global concept order.
"""

from __future__ import annotations

from dataclasses import dataclass

from conceptdeck.domain.common.exceptions import ValidationError
from conceptdeck.domain.common.value_objects.ids import ShardId


@dataclass(frozen=True, order=True)
class ConceptIdentity:
    """Where a concept lives right now, comparable by (shard id, offset)."""

    shard_id: ShardId
    local_offset: int

    def __post_init__(self) -> None:
        if self.local_offset < 0:
            raise ValidationError(
                "local_offset must be non-negative", field="local_offset", value=self.local_offset
            )

    def shifted_after_removal(self, removed_offset: int) -> ConceptIdentity | None:
        """Identity of the same element after ``removed_offset`` is removed from the shard.

        Returns None when this identity is the removed element itself.
        """
        if self.local_offset == removed_offset:
            return None
        if self.local_offset > removed_offset:
            return ConceptIdentity(self.shard_id, self.local_offset - 1)
        return self

    def __str__(self) -> str:
        return f"{self.shard_id}/{self.local_offset}"
