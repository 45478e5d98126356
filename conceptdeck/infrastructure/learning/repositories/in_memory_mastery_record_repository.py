"""Dict-backed mastery records for tests and local runs."""

from collections.abc import Sequence

from conceptdeck.domain.common.value_objects import ConceptId, NotebookId, UserId


class InMemoryMasteryRecordRepository:
    """Mastery provider and record repository over a plain dict."""

    def __init__(self) -> None:
        self.repetitions: dict[ConceptId, int] = {}
        self.lookups: list[list[ConceptId]] = []

    async def get_repetition_counts(self, concept_ids: Sequence[ConceptId]) -> dict[ConceptId, int]:
        self.lookups.append(list(concept_ids))
        return {cid: self.repetitions[cid] for cid in concept_ids if cid in self.repetitions}

    async def initialize_records(
        self, notebook_id: NotebookId, owner_id: UserId, concept_ids: Sequence[ConceptId]
    ) -> int:
        created = 0
        for concept_id in concept_ids:
            if concept_id not in self.repetitions:
                self.repetitions[concept_id] = 0
                created += 1
        return created

    async def delete_records(self, concept_ids: Sequence[ConceptId]) -> int:
        return sum(self.repetitions.pop(cid, None) is not None for cid in concept_ids)

    async def set_repetitions(self, concept_id: ConceptId, repetitions: int) -> bool:
        if repetitions < 0:
            raise ValueError("repetitions must be non-negative")
        if concept_id not in self.repetitions:
            return False
        self.repetitions[concept_id] = repetitions
        return True
