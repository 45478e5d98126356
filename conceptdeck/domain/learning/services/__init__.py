from .mastery_classifier import (
    ALL,
    MasteryBreakdown,
    MasteryClassifier,
    MasteryTier,
    TierFilter,
)

__all__ = ["ALL", "MasteryBreakdown", "MasteryClassifier", "MasteryTier", "TierFilter"]
