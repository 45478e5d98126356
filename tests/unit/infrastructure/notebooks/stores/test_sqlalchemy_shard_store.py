"""Tests for SqlAlchemyShardStore."""

import asyncio

import pytest
import pytest_asyncio
from sqlalchemy.orm import Session

from conceptdeck.domain.common.exceptions import InvariantViolationError
from conceptdeck.domain.common.value_objects import MaterialId, ShardId
from conceptdeck.domain.notebooks.entities import Concept, Notebook
from conceptdeck.infrastructure.notebooks.repositories import NotebookRepository
from conceptdeck.infrastructure.notebooks.stores import SqlAlchemyShardStore
from conceptdeck.models import ConceptShard as ConceptShardORM


@pytest.fixture
def sql_store(db_session: Session) -> SqlAlchemyShardStore:
    return SqlAlchemyShardStore(db_session)


@pytest_asyncio.fixture
async def saved_notebook(db_session: Session, notebook: Notebook) -> Notebook:
    return await NotebookRepository(db_session).save(notebook)


class TestSqlAlchemyShardStore:
    @pytest.mark.asyncio
    async def test_concepts_round_trip_through_json_column(
        self, sql_store: SqlAlchemyShardStore, saved_notebook: Notebook
    ) -> None:
        material_id = MaterialId.generate()
        concepts = [
            Concept.create("Mitosis", "Cell division", source="Chapter 3", material_id=material_id),
            Concept.create("Gene", "Unit of heredity", notes="See chapter 5"),
        ]

        shard_id = await sql_store.create_shard(
            saved_notebook.id, saved_notebook.owner_id, concepts
        )
        shard = await sql_store.get_shard(shard_id)

        assert shard.concepts == concepts
        assert shard.notebook_id == saved_notebook.id
        assert await sql_store.get_shard(ShardId.generate()) is None

    @pytest.mark.asyncio
    async def test_list_in_creation_order(
        self, sql_store: SqlAlchemyShardStore, saved_notebook: Notebook
    ) -> None:
        owner_id = saved_notebook.owner_id
        first = await sql_store.create_shard(
            saved_notebook.id, owner_id, [Concept.create("A", "a")]
        )
        second = await sql_store.create_shard(
            saved_notebook.id, owner_id, [Concept.create("B", "b")]
        )

        shards = await sql_store.list_shards(saved_notebook.id)

        assert {shard.id for shard in shards} == {first, second}
        assert shards[0].created_at <= shards[1].created_at

    @pytest.mark.asyncio
    async def test_rewrite_and_delete(
        self, sql_store: SqlAlchemyShardStore, saved_notebook: Notebook
    ) -> None:
        shard_id = await sql_store.create_shard(
            saved_notebook.id,
            saved_notebook.owner_id,
            [Concept.create("A", "a"), Concept.create("B", "b")],
        )
        shard = await sql_store.get_shard(shard_id)

        assert await sql_store.rewrite_shard_concepts(shard_id, shard.concepts[1:]) is True
        assert [c.term for c in (await sql_store.get_shard(shard_id)).concepts] == ["B"]

        assert await sql_store.delete_shard(shard_id) is True
        assert await sql_store.get_shard(shard_id) is None
        assert await sql_store.delete_shard(shard_id) is False
        assert await sql_store.rewrite_shard_concepts(shard_id, shard.concepts) is False

    @pytest.mark.asyncio
    async def test_rewrite_to_empty_leaves_row_untouched(
        self, sql_store: SqlAlchemyShardStore, saved_notebook: Notebook, db_session: Session
    ) -> None:
        shard_id = await sql_store.create_shard(
            saved_notebook.id, saved_notebook.owner_id, [Concept.create("A", "a")]
        )

        with pytest.raises(InvariantViolationError):
            await sql_store.rewrite_shard_concepts(shard_id, [])

        assert len(db_session.get(ConceptShardORM, shard_id.value).concepts) == 1

    @pytest.mark.asyncio
    async def test_find_by_material(
        self, sql_store: SqlAlchemyShardStore, saved_notebook: Notebook
    ) -> None:
        material_id = MaterialId.generate()
        owner_id = saved_notebook.owner_id
        generated = await sql_store.create_shard(
            saved_notebook.id, owner_id, [Concept.create("A", "a", material_id=material_id)]
        )
        await sql_store.create_shard(saved_notebook.id, owner_id, [Concept.create("B", "b")])

        shards = await sql_store.find_shards_by_material(material_id)

        assert [shard.id for shard in shards] == [generated]

    @pytest.mark.asyncio
    async def test_subscribers_see_committed_writes(
        self, sql_store: SqlAlchemyShardStore, saved_notebook: Notebook
    ) -> None:
        subscription = sql_store.subscribe(saved_notebook.id)
        try:
            assert await asyncio.wait_for(anext(subscription), 1) == []

            shard_id = await sql_store.create_shard(
                saved_notebook.id, saved_notebook.owner_id, [Concept.create("A", "a")]
            )

            shards = await asyncio.wait_for(anext(subscription), 1)
            assert [shard.id for shard in shards] == [shard_id]
        finally:
            await subscription.aclose()
