"""
Base classes for Entities and their identifiers.

Entities have a distinct identity that runs through time. Concepts,
shards and notebooks are all entities; their identifiers are generated
outside the database (concept ids by the client that creates the
concept, shard ids by the store), so ids here wrap UUIDs or opaque
strings rather than autoincrement integers.

Example:
    @dataclass
    class Notebook(Entity[NotebookId]):
        id: NotebookId
        title: str

        def rename(self, title: str) -> None:
            self.title = title
"""

from abc import ABC
from dataclasses import dataclass
from typing import Generic, Self, TypeVar
from uuid import UUID, uuid4


@dataclass(frozen=True)
class EntityId:
    """
    Base class for strongly-typed entity identifiers.

    Subclasses narrow ``value`` to ``UUID`` or ``str``. Ordering compares
    the canonical string form so that ids sort identically whichever
    adapter produced them.

    Example:
        @dataclass(frozen=True)
        class ShardId(EntityId):
            value: UUID

        ShardId(uuid4()) != ConceptId(uuid4())  # different types never compare equal
    """

    value: UUID | str

    def __str__(self) -> str:
        return str(self.value)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, EntityId):
            return NotImplemented
        return str(self.value) < str(other.value)

    @classmethod
    def generate(cls) -> Self:
        """Create a fresh random identifier."""
        return cls(uuid4())

    @classmethod
    def parse(cls, raw: str) -> Self:
        """Build an identifier from its string form."""
        try:
            return cls(UUID(raw))
        except (TypeError, ValueError, AttributeError) as e:
            raise ValueError(f"Invalid {cls.__name__}: {raw!r}") from e

    def to_primitive(self) -> str:
        """Convert to primitive for serialization."""
        return str(self.value)


IdType = TypeVar("IdType", bound=EntityId)


class Entity(ABC, Generic[IdType]):
    """
    Base class for Entities in the domain model.

    Subclasses must have an 'id' attribute of type IdType. Dataclass
    subclasses that keep the generated ``__eq__`` compare by field values;
    the helpers below always compare by identity.
    """

    id: IdType

    def same_identity_as(self, other: "Entity[IdType]") -> bool:
        """Whether both entities carry the same id, regardless of state."""
        return type(self) is type(other) and self.id == other.id
