"""End-to-end notebook scenarios over the in-memory backend."""

import asyncio

import pytest
from dependency_injector import providers

from conceptdeck.application.notebooks.use_cases.dtos import ConceptDraft
from conceptdeck.config import Settings
from conceptdeck.core import Container
from conceptdeck.domain.common.value_objects import ConceptAddress, UserId
from conceptdeck.domain.learning.services.mastery_classifier import MasteryTier
from conceptdeck.domain.notebooks.entities import ShardWriteAction


@pytest.fixture
def container() -> Container:
    container = Container()
    container.settings.override(
        providers.Object(Settings(_env_file=None, SHARD_STORE_BACKEND="memory"))
    )
    return container


async def _terms_in_order(stream, generation: int) -> list[str]:
    snapshot = await asyncio.wait_for(
        stream.wait_for(lambda s: s.generation >= generation), 1
    )
    return [entry.concept.term for entry in snapshot.entries]


class TestNotebookScenarios:
    @pytest.mark.asyncio
    async def test_deleting_from_a_multi_concept_shard(self, container: Container) -> None:
        notebook = await container.notebook_use_case().create_notebook("Fruit", UserId("user-1"))
        coordinator = container.mutation_coordinator()
        shard_a = (
            await coordinator.add_batch(
                notebook.id, [ConceptDraft("Banana", "Yellow"), ConceptDraft("Apple", "Red")]
            )
        ).unwrap()
        shard_b = (
            await coordinator.add_batch(notebook.id, [ConceptDraft("Cherry", "Small")])
        ).unwrap()

        stream = container.shard_aggregator().subscribe(notebook.id)
        try:
            assert await _terms_in_order(stream, 1) == ["Apple", "Banana", "Cherry"]

            outcome = (await coordinator.delete_concept(shard_a.shard_id, 0)).unwrap()

            assert outcome.action == ShardWriteAction.REWRITTEN
            assert await _terms_in_order(stream, 2) == ["Apple", "Cherry"]
            snapshot = stream.current
            apple = snapshot.locate(shard_a.concepts[1].id)
            assert apple.identity.shard_id == shard_a.shard_id
            assert apple.local_offset == 0
            assert snapshot.locate(shard_b.concept.id).local_offset == 0
        finally:
            await stream.close()

    @pytest.mark.asyncio
    async def test_added_concept_resolves_in_next_snapshot(self, container: Container) -> None:
        notebook = await container.notebook_use_case().create_notebook("Biology", UserId("user-1"))
        coordinator = container.mutation_coordinator()
        await coordinator.add_batch(notebook.id, [ConceptDraft("Cell", "Unit of life")])
        aggregator = container.shard_aggregator()
        stream = aggregator.subscribe(notebook.id)
        try:
            await asyncio.wait_for(stream.wait_until_loaded(), 1)

            added = (
                await coordinator.add_manual(notebook.id, ConceptDraft("Gene", "Unit of heredity"))
            ).unwrap()
            snapshot = await asyncio.wait_for(
                stream.wait_for(lambda s: s.locate(added.concept.id) is not None), 1
            )

            entry = aggregator.locate(snapshot, added.concept.id).unwrap()
            assert entry.identity == added.identity
            stored = await container.shard_store().get_shard(entry.shard_id)
            assert stored.concept_at(entry.local_offset) == added.concept
            address = ConceptAddress.at(notebook.id, entry.identity)
            assert aggregator.resolve(snapshot, ConceptAddress.parse(address.to_path())).is_success
        finally:
            await stream.close()

    @pytest.mark.asyncio
    async def test_cursor_walks_every_entry_once(self, container: Container) -> None:
        notebook = await container.notebook_use_case().create_notebook("Words", UserId("user-1"))
        coordinator = container.mutation_coordinator()
        drafts = [ConceptDraft(term, "definition") for term in ("Unit 10", "unit 2", "Éclair")]
        await coordinator.add_batch(notebook.id, drafts)
        await coordinator.add_manual(notebook.id, ConceptDraft("Apple", "definition"))
        await coordinator.add_batch(notebook.id, [ConceptDraft("Zebra", "definition")])

        addresses: list[ConceptAddress] = []
        cursor = container.navigation_cursor(notebook_id=notebook.id, on_navigate=addresses.append)
        try:
            state = await asyncio.wait_for(cursor.open(), 1)
            entries = cursor.snapshot.entries
            assert state.total_count == 5
            assert len({entry.identity for entry in entries}) == 5

            while not state.at_end:
                previous = state.global_index
                state = (await cursor.move_next()).unwrap()
                assert state.global_index == previous + 1
                assert state.identity == entries[state.global_index].identity

            assert (await cursor.move_next()).unwrap() == state
            assert [a.identity for a in addresses] == [e.identity for e in entries]
            assert [e.concept.term for e in entries] == [
                "Apple", "Éclair", "unit 2", "Unit 10", "Zebra"
            ]
        finally:
            await cursor.detach()

    @pytest.mark.asyncio
    async def test_mastered_filter_and_breakdown(self, container: Container) -> None:
        notebook = await container.notebook_use_case().create_notebook("Verbs", UserId("user-1"))
        drafts = [ConceptDraft(f"Verb {i:02d}", "definition") for i in range(10)]
        batch = (await container.mutation_coordinator().add_batch(notebook.id, drafts)).unwrap()
        repetitions = [0, 3, 1, 2, 0, 1, 5, 0, 2, 0]
        mastery = container.mastery_record_repository()
        for concept, count in zip(batch.concepts, repetitions, strict=True):
            await mastery.set_repetitions(concept.id, count)

        stream = container.shard_aggregator().subscribe(notebook.id)
        try:
            snapshot = await asyncio.wait_for(stream.wait_until_loaded(), 1)
            progress = await container.notebook_progress_service().compute(
                snapshot, MasteryTier.MASTERED
            )
        finally:
            await stream.close()

        assert [entry.concept.term for entry in progress.entries] == [
            "Verb 01", "Verb 03", "Verb 06", "Verb 08"
        ]
        assert progress.breakdown.mastered == 4
        assert progress.breakdown.learning == 2
        assert progress.breakdown.new == 4
        assert progress.breakdown.total == 10
