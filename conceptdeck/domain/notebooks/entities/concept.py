"""
Concept entity - the atomic learning unit stored inside a shard.
"""

from dataclasses import dataclass, replace

from conceptdeck.domain.common.entity import Entity
from conceptdeck.domain.common.exceptions import ValidationError
from conceptdeck.domain.common.value_objects import ConceptId, MaterialId


@dataclass(frozen=True)
class Concept(Entity[ConceptId]):
    """
    A term with its definition and source.

    Concepts are immutable: an edit produces a new Concept with the same id,
    which the coordinator writes back as part of the shard's whole array.

    Business Rules:
    - Term and definition cannot be empty
    - Source falls back to "Manual" when blank
    - Notes are optional; blank notes are stored as None
    """

    id: ConceptId
    term: str
    definition: str
    source: str = "Manual"
    notes: str | None = None
    material_id: MaterialId | None = None

    def __post_init__(self) -> None:
        """Validate invariants."""
        if not self.term or not self.term.strip():
            raise ValidationError("Term cannot be empty", field="term")
        if not self.definition or not self.definition.strip():
            raise ValidationError("Definition cannot be empty", field="definition")

    def merged(
        self,
        *,
        term: str | None = None,
        definition: str | None = None,
        source: str | None = None,
        notes: str | None = None,
    ) -> "Concept":
        """
        Return a copy with the given fields replaced.

        Fields left as None keep their current value. An empty ``notes``
        string clears the notes.

        Raises:
            ValidationError: If the merged term or definition is empty
        """
        changes: dict[str, object] = {}
        if term is not None:
            changes["term"] = term.strip()
        if definition is not None:
            changes["definition"] = definition.strip()
        if source is not None:
            changes["source"] = source.strip() or self.source
        if notes is not None:
            changes["notes"] = notes.strip() or None
        return replace(self, **changes)

    def came_from(self, material_id: MaterialId) -> bool:
        return self.material_id == material_id

    @classmethod
    def create(
        cls,
        term: str,
        definition: str,
        source: str | None = None,
        notes: str | None = None,
        material_id: MaterialId | None = None,
        default_source: str = "Manual",
    ) -> "Concept":
        """Create a new concept with a freshly generated id."""
        return cls(
            id=ConceptId.generate(),
            term=term.strip(),
            definition=definition.strip(),
            source=(source or "").strip() or default_source,
            notes=(notes or "").strip() or None,
            material_id=material_id,
        )
