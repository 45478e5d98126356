from .concept import Concept
from .concept_shard import ConceptShard, ShardRewritePlan, ShardWriteAction
from .notebook import Notebook

__all__ = [
    "Concept",
    "ConceptShard",
    "Notebook",
    "ShardRewritePlan",
    "ShardWriteAction",
]
