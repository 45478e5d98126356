"""Mastery tiers derived from the scheduler's repetition counter."""

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import Final, Literal

from conceptdeck.domain.common.exceptions import ValidationError
from conceptdeck.domain.common.value_objects import ConceptId
from conceptdeck.domain.notebooks.entities.concept import Concept
from conceptdeck.domain.notebooks.value_objects.snapshot import GlobalIndexEntry


class MasteryTier(StrEnum):
    """How well a concept is known."""

    NEW = "new"
    LEARNING = "learning"
    MASTERED = "mastered"


ALL: Final = "all"
TierFilter = MasteryTier | Literal["all"]

# Repetition count from which a concept counts as mastered
MASTERED_THRESHOLD: Final = 2


@dataclass(frozen=True)
class MasteryBreakdown:
    """Tier counts for a set of concepts."""

    new: int = 0
    learning: int = 0
    mastered: int = 0

    @property
    def total(self) -> int:
        return self.new + self.learning + self.mastered

    def count(self, tier: MasteryTier) -> int:
        return {
            MasteryTier.NEW: self.new,
            MasteryTier.LEARNING: self.learning,
            MasteryTier.MASTERED: self.mastered,
        }[tier]

    def percentage(self, tier: MasteryTier) -> float:
        """Share of ``tier`` in percent, rounded to one decimal; 0.0 for an empty set."""
        if self.total == 0:
            return 0.0
        return round(self.count(tier) * 100 / self.total, 1)

    @property
    def percentages(self) -> dict[MasteryTier, float]:
        return {tier: self.percentage(tier) for tier in MasteryTier}

    def to_dict(self) -> dict[str, object]:
        return {
            "new": self.new,
            "learning": self.learning,
            "mastered": self.mastered,
            "total": self.total,
            "percentages": {tier.value: value for tier, value in self.percentages.items()},
        }


class MasteryClassifier:
    """Stateless domain service mapping repetition counts to tiers."""

    @staticmethod
    def classify(repetition_count: int) -> MasteryTier:
        """
        Classify a repetition count.

        0 is NEW, 1 is LEARNING, 2 and above is MASTERED.

        Raises:
            ValidationError: If the count is negative
        """
        if repetition_count < 0:
            raise ValidationError(
                "Repetition count cannot be negative",
                field="repetition_count",
                value=repetition_count,
            )
        if repetition_count == 0:
            return MasteryTier.NEW
        if repetition_count < MASTERED_THRESHOLD:
            return MasteryTier.LEARNING
        return MasteryTier.MASTERED

    @staticmethod
    def tier_of(concept_id: ConceptId, repetition_counts: Mapping[ConceptId, int]) -> MasteryTier:
        """Tier of a concept; concepts without a mastery record are NEW."""
        return MasteryClassifier.classify(repetition_counts.get(concept_id, 0))

    @staticmethod
    def aggregate(
        concepts: Iterable[Concept], repetition_counts: Mapping[ConceptId, int]
    ) -> MasteryBreakdown:
        """
        Count concepts per tier.

        Args:
            concepts: Concepts to classify
            repetition_counts: Scheduler output keyed by concept id

        Returns:
            Breakdown whose counts sum to the number of concepts
        """
        counts = dict.fromkeys(MasteryTier, 0)
        for concept in concepts:
            counts[MasteryClassifier.tier_of(concept.id, repetition_counts)] += 1
        return MasteryBreakdown(
            new=counts[MasteryTier.NEW],
            learning=counts[MasteryTier.LEARNING],
            mastered=counts[MasteryTier.MASTERED],
        )

    @staticmethod
    def filter(
        entries: Sequence[GlobalIndexEntry],
        tier: TierFilter,
        repetition_counts: Mapping[ConceptId, int],
    ) -> list[GlobalIndexEntry]:
        """
        Entries of one tier, in their original global order.

        ``ALL`` returns every entry unchanged.
        """
        if tier == ALL:
            return list(entries)
        return [
            entry
            for entry in entries
            if MasteryClassifier.tier_of(entry.concept.id, repetition_counts) == tier
        ]
