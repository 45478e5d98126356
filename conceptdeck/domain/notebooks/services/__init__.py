from .concept_ordering import compare_terms, concept_sort_key, term_collation_key
from .snapshot_builder import SnapshotBuilder

__all__ = ["SnapshotBuilder", "compare_terms", "concept_sort_key", "term_collation_key"]
