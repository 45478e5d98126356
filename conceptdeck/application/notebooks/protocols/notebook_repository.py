"""Protocol for Notebook repository."""

from typing import Protocol

from conceptdeck.domain.common.value_objects import NotebookId, UserId
from conceptdeck.domain.notebooks.entities.notebook import Notebook


class NotebookRepositoryProtocol(Protocol):
    """Protocol for Notebook repository operations."""

    async def find_by_id(self, notebook_id: NotebookId) -> Notebook | None: ...

    async def find_by_owner(self, owner_id: UserId) -> list[Notebook]: ...

    async def save(self, notebook: Notebook) -> Notebook:
        """Create or update a notebook."""
        ...

    async def delete(self, notebook_id: NotebookId) -> bool:
        """
        Delete a notebook record (shards are deleted separately).

        Returns:
            True if deleted, False if not found
        """
        ...
