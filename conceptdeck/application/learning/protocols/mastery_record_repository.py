"""Protocol for mastery record lifecycle."""

from collections.abc import Sequence
from typing import Protocol

from conceptdeck.domain.common.value_objects import ConceptId, NotebookId, UserId


class MasteryRecordRepositoryProtocol(Protocol):
    """Creates and removes mastery records alongside concepts."""

    async def initialize_records(
        self, notebook_id: NotebookId, owner_id: UserId, concept_ids: Sequence[ConceptId]
    ) -> int:
        """
        Create a zero-repetition record for each concept that has none.

        Returns:
            Number of records created
        """
        ...

    async def delete_records(self, concept_ids: Sequence[ConceptId]) -> int:
        """
        Delete the records of the given concepts.

        Returns:
            Number of records deleted
        """
        ...
