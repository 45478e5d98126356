from .concept_dtos import (
    ConceptChanges,
    ConceptDraft,
    MaterialCascadeOutcome,
    NotebookDeletionOutcome,
    ShardWriteOutcome,
)

__all__ = [
    "ConceptChanges",
    "ConceptDraft",
    "MaterialCascadeOutcome",
    "NotebookDeletionOutcome",
    "ShardWriteOutcome",
]
