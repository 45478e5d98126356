from .in_memory_mastery_record_repository import InMemoryMasteryRecordRepository
from .mastery_record_repository import MasteryRecordRepository

__all__ = ["InMemoryMasteryRecordRepository", "MasteryRecordRepository"]
