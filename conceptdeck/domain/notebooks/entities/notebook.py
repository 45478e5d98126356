"""
Notebook entity - the container a user studies from.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime

from conceptdeck.domain.common.entity import Entity
from conceptdeck.domain.common.exceptions import BusinessRuleViolationError, ValidationError
from conceptdeck.domain.common.value_objects import NotebookId, UserId


@dataclass
class Notebook(Entity[NotebookId]):
    """
    A titled collection of concepts owned by one user.

    Business Rules:
    - Title cannot be empty
    - A frozen notebook accepts no concept mutations
    - Deleting a notebook deletes all of its shards
    """

    id: NotebookId
    title: str
    owner_id: UserId
    color: str | None = None
    frozen: bool = False
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        """Validate invariants."""
        if not self.title or not self.title.strip():
            raise ValidationError("Title cannot be empty", field="title")

    def rename(self, title: str) -> None:
        if not title or not title.strip():
            raise ValidationError("Title cannot be empty", field="title")
        self.title = title.strip()

    def ensure_mutable(self) -> None:
        """
        Raises:
            BusinessRuleViolationError: If the notebook is frozen
        """
        if self.frozen:
            raise BusinessRuleViolationError(
                "Frozen notebooks cannot be modified", {"notebook_id": str(self.id)}
            )

    def freeze(self) -> None:
        self.frozen = True

    def unfreeze(self) -> None:
        self.frozen = False

    @classmethod
    def create(cls, title: str, owner_id: UserId, color: str | None = None) -> "Notebook":
        """Create a new notebook with a fresh id."""
        return cls(
            id=NotebookId.generate(),
            title=title.strip(),
            owner_id=owner_id,
            color=color,
        )
