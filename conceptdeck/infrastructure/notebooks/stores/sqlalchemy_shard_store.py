"""Concept shard store backed by a relational table."""

from collections.abc import AsyncIterator, Sequence
from dataclasses import replace
from datetime import UTC, datetime

import structlog
from sqlalchemy import select
from sqlalchemy.orm import Session

from conceptdeck.domain.common.value_objects import MaterialId, NotebookId, ShardId, UserId
from conceptdeck.domain.notebooks.entities.concept import Concept
from conceptdeck.domain.notebooks.entities.concept_shard import ConceptShard
from conceptdeck.infrastructure.notebooks.mappers.concept_shard_mapper import ConceptShardMapper
from conceptdeck.infrastructure.notebooks.stores.subscription_hub import SubscriptionHub
from conceptdeck.models import ConceptShard as ConceptShardORM

logger = structlog.get_logger(__name__)


class SqlAlchemyShardStore:
    """
    Concept shard store with one row per shard.

    The concept array lives in a single JSON column; a rewrite replaces the
    column value. Subscribers of a notebook receive its full result set
    after every committed write made through this store.
    """

    def __init__(self, db: Session) -> None:
        self.db = db
        self.mapper = ConceptShardMapper()
        self.hub = SubscriptionHub(self.list_shards)

    def subscribe(self, notebook_id: NotebookId) -> AsyncIterator[list[ConceptShard]]:
        return self.hub.subscribe(notebook_id)

    async def get_shard(self, shard_id: ShardId) -> ConceptShard | None:
        orm_model = self.db.get(ConceptShardORM, shard_id.value)
        return self.mapper.to_domain(orm_model) if orm_model else None

    async def list_shards(self, notebook_id: NotebookId) -> list[ConceptShard]:
        """
        Every shard of a notebook.

        Returns:
            Shards ordered by created_at ASC, then id
        """
        stmt = (
            select(ConceptShardORM)
            .where(ConceptShardORM.notebook_id == notebook_id.value)
            .order_by(ConceptShardORM.created_at.asc(), ConceptShardORM.id.asc())
        )
        orm_models = self.db.execute(stmt).scalars().all()
        return [self.mapper.to_domain(orm) for orm in orm_models]

    async def find_shards_by_material(self, material_id: MaterialId) -> list[ConceptShard]:
        """
        Every shard holding a concept from the material.

        The JSON column is not queried portably across backends, so shards
        are filtered after mapping.
        """
        orm_models = self.db.execute(select(ConceptShardORM)).scalars().all()
        shards = [self.mapper.to_domain(orm) for orm in orm_models]
        return [
            shard
            for shard in shards
            if any(concept.came_from(material_id) for concept in shard.concepts)
        ]

    async def create_shard(
        self, notebook_id: NotebookId, owner_id: UserId, concepts: Sequence[Concept]
    ) -> ShardId:
        shard = ConceptShard(
            id=ShardId.generate(),
            notebook_id=notebook_id,
            owner_id=owner_id,
            concepts=list(concepts),
            created_at=datetime.now(UTC),
        )
        self.db.add(self.mapper.to_orm(shard))
        self.db.commit()
        logger.debug("shard_created", shard_id=str(shard.id), notebook_id=str(notebook_id))
        await self.hub.publish(notebook_id)
        return shard.id

    async def rewrite_shard_concepts(self, shard_id: ShardId, concepts: Sequence[Concept]) -> bool:
        orm_model = self.db.get(ConceptShardORM, shard_id.value)
        if not orm_model:
            return False
        # Rebuilding the entity rejects an empty array before anything is written
        shard = replace(self.mapper.to_domain(orm_model), concepts=list(concepts))
        self.mapper.to_orm(shard, orm_model)
        self.db.commit()
        await self.hub.publish(shard.notebook_id)
        return True

    async def delete_shard(self, shard_id: ShardId) -> bool:
        orm_model = self.db.get(ConceptShardORM, shard_id.value)
        if not orm_model:
            return False
        notebook_id = NotebookId(orm_model.notebook_id)
        self.db.delete(orm_model)
        self.db.commit()
        logger.debug("shard_deleted", shard_id=str(shard_id), notebook_id=str(notebook_id))
        await self.hub.publish(notebook_id)
        return True
