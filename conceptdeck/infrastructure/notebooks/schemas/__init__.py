from .concept_record import ConceptRecord, ConceptRecordList

__all__ = ["ConceptRecord", "ConceptRecordList"]
