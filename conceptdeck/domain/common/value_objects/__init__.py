"""Common value objects shared across all domain modules."""

from .concept_address import ConceptAddress
from .concept_identity import ConceptIdentity
from .ids import ConceptId, MaterialId, NotebookId, ShardId, UserId

__all__ = [
    # IDs
    "ConceptId",
    "MaterialId",
    "NotebookId",
    "ShardId",
    "UserId",
    # Addressing
    "ConceptAddress",
    "ConceptIdentity",
]
