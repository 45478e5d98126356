"""Application service for notebook progress and tier filtering."""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass

import structlog

from conceptdeck.application.learning.protocols.mastery_provider import MasteryProviderProtocol
from conceptdeck.domain.common.value_objects import ConceptId
from conceptdeck.domain.learning.services.mastery_classifier import (
    ALL,
    MasteryBreakdown,
    MasteryClassifier,
    MasteryTier,
    TierFilter,
)
from conceptdeck.domain.notebooks.value_objects.snapshot import ConceptSnapshot, GlobalIndexEntry

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class NotebookProgress:
    """Progress view of one snapshot under one tier filter."""

    breakdown: MasteryBreakdown
    entries: list[GlobalIndexEntry]
    tiers: dict[ConceptId, MasteryTier]
    tier_filter: TierFilter = ALL


def summarize(
    snapshot: ConceptSnapshot,
    repetition_counts: Mapping[ConceptId, int],
    tier: TierFilter = ALL,
) -> NotebookProgress:
    """
    Progress as a pure function of the snapshot and the repetition counts.

    Recompute whenever either input changes instead of patching a previous
    result.
    """
    tiers = {
        concept_id: MasteryClassifier.tier_of(concept_id, repetition_counts)
        for concept_id in snapshot.concept_ids()
    }
    return NotebookProgress(
        breakdown=MasteryClassifier.aggregate(snapshot.concepts(), repetition_counts),
        entries=MasteryClassifier.filter(snapshot.entries, tier, repetition_counts),
        tiers=tiers,
        tier_filter=tier,
    )


class NotebookProgressService:
    """Fetches repetition counts for a snapshot and summarizes them."""

    def __init__(self, mastery_provider: MasteryProviderProtocol, batch_size: int = 30) -> None:
        if batch_size < 1:
            raise ValueError("batch_size must be positive")
        self.mastery_provider = mastery_provider
        self.batch_size = batch_size

    async def fetch_counts(self, concept_ids: Sequence[ConceptId]) -> dict[ConceptId, int]:
        """Look up repetition counts in batches of ``batch_size`` ids."""
        counts: dict[ConceptId, int] = {}
        for start in range(0, len(concept_ids), self.batch_size):
            batch = concept_ids[start : start + self.batch_size]
            counts.update(await self.mastery_provider.get_repetition_counts(batch))
        return counts

    async def compute(
        self, snapshot: ConceptSnapshot, tier: TierFilter = ALL
    ) -> NotebookProgress:
        """
        Progress for a snapshot.

        Args:
            snapshot: Snapshot to summarize
            tier: Tier to keep in ``entries``, or ALL

        Returns:
            Breakdown over every concept plus the filtered entries in global order
        """
        counts = await self.fetch_counts(snapshot.concept_ids())
        progress = summarize(snapshot, counts, tier)
        logger.debug(
            "computed_notebook_progress",
            notebook_id=str(snapshot.notebook_id),
            generation=snapshot.generation,
            total=progress.breakdown.total,
            mastered=progress.breakdown.mastered,
        )
        return progress
