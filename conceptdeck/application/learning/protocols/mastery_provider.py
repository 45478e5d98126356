"""Protocol for the spaced-repetition scheduler's output."""

from collections.abc import Sequence
from typing import Protocol

from conceptdeck.domain.common.value_objects import ConceptId


class MasteryProviderProtocol(Protocol):
    """Read side of the scheduler: a repetition counter per concept."""

    async def get_repetition_counts(self, concept_ids: Sequence[ConceptId]) -> dict[ConceptId, int]:
        """
        Look up repetition counts.

        Concepts without a mastery record are absent from the result.
        """
        ...
