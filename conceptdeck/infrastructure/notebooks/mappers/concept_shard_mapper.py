"""Mapper for ConceptShard ORM ↔ Domain conversion."""

from collections.abc import Sequence
from typing import Any

from conceptdeck.domain.common.value_objects import (
    ConceptId,
    MaterialId,
    NotebookId,
    ShardId,
    UserId,
)
from conceptdeck.domain.notebooks.entities.concept import Concept
from conceptdeck.domain.notebooks.entities.concept_shard import ConceptShard
from conceptdeck.infrastructure.notebooks.schemas import ConceptRecord, ConceptRecordList
from conceptdeck.models import ConceptShard as ConceptShardORM


class ConceptShardMapper:
    """Mapper for ConceptShard ORM ↔ Domain conversion."""

    def to_domain(self, orm_model: ConceptShardORM) -> ConceptShard:
        """
        Convert ORM model to domain entity.

        Raises:
            pydantic.ValidationError: If the stored concept array is malformed
        """
        return ConceptShard(
            id=ShardId(orm_model.id),
            notebook_id=NotebookId(orm_model.notebook_id),
            owner_id=UserId(orm_model.owner_id),
            concepts=self.concepts_from_json(orm_model.concepts),
            created_at=orm_model.created_at,
        )

    def to_orm(
        self, domain_entity: ConceptShard, orm_model: ConceptShardORM | None = None
    ) -> ConceptShardORM:
        """Convert domain entity to ORM model."""
        if orm_model:
            orm_model.concepts = self.concepts_to_json(domain_entity.concepts)
            return orm_model

        return ConceptShardORM(
            id=domain_entity.id.value,
            notebook_id=domain_entity.notebook_id.value,
            owner_id=domain_entity.owner_id.value,
            concepts=self.concepts_to_json(domain_entity.concepts),
            created_at=domain_entity.created_at,
        )

    @staticmethod
    def concepts_from_json(raw: list[dict[str, Any]]) -> list[Concept]:
        return [
            Concept(
                id=ConceptId(record.id),
                term=record.term,
                definition=record.definition,
                source=record.source,
                notes=record.notes,
                material_id=MaterialId(record.material_id) if record.material_id else None,
            )
            for record in ConceptRecordList.validate_python(raw)
        ]

    @staticmethod
    def concepts_to_json(concepts: Sequence[Concept]) -> list[dict[str, Any]]:
        return [
            ConceptRecord(
                id=concept.id.value,
                term=concept.term,
                definition=concept.definition,
                source=concept.source,
                notes=concept.notes,
                material_id=concept.material_id.value if concept.material_id else None,
            ).model_dump(mode="json")
            for concept in concepts
        ]
