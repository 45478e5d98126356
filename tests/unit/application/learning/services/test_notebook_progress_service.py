"""Tests for NotebookProgressService and summarize."""

from datetime import UTC, datetime

import pytest

from conceptdeck.application.learning.services import NotebookProgressService, summarize
from conceptdeck.domain.common.value_objects import NotebookId, ShardId, UserId
from conceptdeck.domain.learning.services.mastery_classifier import ALL, MasteryTier
from conceptdeck.domain.notebooks.entities import Concept, ConceptShard
from conceptdeck.domain.notebooks.services.snapshot_builder import SnapshotBuilder
from conceptdeck.domain.notebooks.value_objects.snapshot import ConceptSnapshot
from conceptdeck.infrastructure.learning.repositories import InMemoryMasteryRecordRepository


def _snapshot(*terms: str) -> ConceptSnapshot:
    notebook_id = NotebookId.generate()
    shard = ConceptShard(
        id=ShardId.generate(),
        notebook_id=notebook_id,
        owner_id=UserId("user-1"),
        concepts=[Concept.create(term, f"{term} definition") for term in terms],
        created_at=datetime(2024, 1, 1, tzinfo=UTC),
    )
    return SnapshotBuilder.build(notebook_id, [shard], generation=1)


def _by_term(snapshot: ConceptSnapshot) -> dict[str, Concept]:
    return {concept.term: concept for concept in snapshot.concepts()}


class TestSummarize:
    def test_breakdown_and_tiers(self) -> None:
        snapshot = _snapshot("Apple", "Banana", "Cherry", "Date")
        concepts = _by_term(snapshot)
        counts = {concepts["Banana"].id: 1, concepts["Cherry"].id: 2, concepts["Date"].id: 7}

        progress = summarize(snapshot, counts)

        assert progress.breakdown.new == 1
        assert progress.breakdown.learning == 1
        assert progress.breakdown.mastered == 2
        assert progress.breakdown.percentage(MasteryTier.MASTERED) == 50.0
        assert progress.tiers[concepts["Apple"].id] == MasteryTier.NEW
        assert progress.tier_filter == ALL
        assert [e.concept.term for e in progress.entries] == ["Apple", "Banana", "Cherry", "Date"]

    def test_filter_keeps_global_order(self) -> None:
        snapshot = _snapshot("Date", "Apple", "Cherry", "Banana")
        concepts = _by_term(snapshot)
        counts = {concepts["Date"].id: 3, concepts["Apple"].id: 2, concepts["Banana"].id: 1}

        progress = summarize(snapshot, counts, MasteryTier.MASTERED)

        assert [entry.concept.term for entry in progress.entries] == ["Apple", "Date"]
        assert [entry.global_index for entry in progress.entries] == [0, 3]
        assert progress.breakdown.total == 4

    def test_empty_snapshot(self) -> None:
        progress = summarize(ConceptSnapshot.empty(NotebookId.generate()), {})

        assert progress.breakdown.total == 0
        assert progress.breakdown.percentage(MasteryTier.NEW) == 0.0
        assert progress.entries == []


class TestNotebookProgressService:
    def test_rejects_non_positive_batch_size(self) -> None:
        with pytest.raises(ValueError):
            NotebookProgressService(InMemoryMasteryRecordRepository(), batch_size=0)

    @pytest.mark.asyncio
    async def test_looks_up_counts_in_batches(self) -> None:
        snapshot = _snapshot(*(f"Term {i}" for i in range(7)))
        provider = InMemoryMasteryRecordRepository()
        for concept in snapshot.concepts():
            provider.repetitions[concept.id] = 2
        service = NotebookProgressService(provider, batch_size=3)

        progress = await service.compute(snapshot)

        assert [len(batch) for batch in provider.lookups] == [3, 3, 1]
        assert progress.breakdown.mastered == 7

    @pytest.mark.asyncio
    async def test_concepts_without_records_are_new(self) -> None:
        snapshot = _snapshot("Apple", "Banana")
        provider = InMemoryMasteryRecordRepository()
        provider.repetitions[_by_term(snapshot)["Banana"].id] = 1
        service = NotebookProgressService(provider)

        progress = await service.compute(snapshot, MasteryTier.NEW)

        assert [entry.concept.term for entry in progress.entries] == ["Apple"]
        assert progress.breakdown.learning == 1

    @pytest.mark.asyncio
    async def test_empty_snapshot_needs_no_lookup(self) -> None:
        provider = InMemoryMasteryRecordRepository()
        service = NotebookProgressService(provider)

        progress = await service.compute(ConceptSnapshot.empty(NotebookId.generate()))

        assert provider.lookups == []
        assert progress.breakdown.total == 0
