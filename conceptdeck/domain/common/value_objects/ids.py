from dataclasses import dataclass
from typing import Self
from uuid import UUID

from ..entity import EntityId


@dataclass(frozen=True)
class NotebookId(EntityId):
    """Strongly-typed notebook identifier."""

    value: UUID

    def __post_init__(self) -> None:
        if not isinstance(self.value, UUID):
            raise ValueError("NotebookId must wrap a UUID")


@dataclass(frozen=True)
class ShardId(EntityId):
    """Strongly-typed concept shard identifier."""

    value: UUID

    def __post_init__(self) -> None:
        if not isinstance(self.value, UUID):
            raise ValueError("ShardId must wrap a UUID")


@dataclass(frozen=True)
class ConceptId(EntityId):
    """Strongly-typed concept identifier, generated when the concept is created."""

    value: UUID

    def __post_init__(self) -> None:
        if not isinstance(self.value, UUID):
            raise ValueError("ConceptId must wrap a UUID")


@dataclass(frozen=True)
class MaterialId(EntityId):
    """Strongly-typed identifier of the uploaded material a concept came from."""

    value: UUID

    def __post_init__(self) -> None:
        if not isinstance(self.value, UUID):
            raise ValueError("MaterialId must wrap a UUID")


@dataclass(frozen=True)
class UserId(EntityId):
    """Opaque user identifier issued by the identity provider."""

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str) or not self.value.strip():
            raise ValueError("UserId must be a non-empty string")

    @classmethod
    def parse(cls, raw: str) -> Self:
        return cls(raw)
