from .concept_shard_mapper import ConceptShardMapper
from .notebook_mapper import NotebookMapper

__all__ = ["ConceptShardMapper", "NotebookMapper"]
