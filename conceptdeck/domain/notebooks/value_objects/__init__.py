from .snapshot import ConceptSnapshot, GlobalIndexEntry

__all__ = ["ConceptSnapshot", "GlobalIndexEntry"]
