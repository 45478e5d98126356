"""Repository for mastery records."""

from collections.abc import Sequence

import structlog
from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from conceptdeck.domain.common.value_objects import ConceptId, NotebookId, UserId
from conceptdeck.models import MasteryRecord as MasteryRecordORM

logger = structlog.get_logger(__name__)


class MasteryRecordRepository:
    """
    Mastery records stored one row per concept.

    Serves both as the mastery provider (repetition counts) and as the
    repository that creates and removes records alongside concepts.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    async def get_repetition_counts(self, concept_ids: Sequence[ConceptId]) -> dict[ConceptId, int]:
        if not concept_ids:
            return {}
        stmt = select(MasteryRecordORM.concept_id, MasteryRecordORM.repetitions).where(
            MasteryRecordORM.concept_id.in_([cid.value for cid in concept_ids])
        )
        return {ConceptId(concept_id): reps for concept_id, reps in self.db.execute(stmt).all()}

    async def initialize_records(
        self, notebook_id: NotebookId, owner_id: UserId, concept_ids: Sequence[ConceptId]
    ) -> int:
        existing = await self.get_repetition_counts(concept_ids)
        created = 0
        for concept_id in concept_ids:
            if concept_id in existing:
                continue
            self.db.add(
                MasteryRecordORM(
                    concept_id=concept_id.value,
                    notebook_id=notebook_id.value,
                    owner_id=owner_id.value,
                    repetitions=0,
                )
            )
            created += 1
        self.db.commit()
        logger.debug("mastery_records_initialized", notebook_id=str(notebook_id), count=created)
        return created

    async def delete_records(self, concept_ids: Sequence[ConceptId]) -> int:
        if not concept_ids:
            return 0
        stmt = delete(MasteryRecordORM).where(
            MasteryRecordORM.concept_id.in_([cid.value for cid in concept_ids])
        )
        result = self.db.execute(stmt)
        self.db.commit()
        return result.rowcount or 0

    async def set_repetitions(self, concept_id: ConceptId, repetitions: int) -> bool:
        """
        Store the scheduler's counter for a concept.

        Returns:
            True if the record exists and was updated, False otherwise
        """
        if repetitions < 0:
            raise ValueError("repetitions must be non-negative")
        orm_model = self.db.get(MasteryRecordORM, concept_id.value)
        if not orm_model:
            return False
        orm_model.repetitions = repetitions
        self.db.commit()
        return True
