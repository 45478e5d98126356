"""Dict-backed Notebook repository for tests and local runs."""

from dataclasses import replace

from conceptdeck.domain.common.value_objects import NotebookId, UserId
from conceptdeck.domain.notebooks.entities.notebook import Notebook


class InMemoryNotebookRepository:
    """Notebook repository holding copies of the saved entities."""

    def __init__(self) -> None:
        self._notebooks: dict[NotebookId, Notebook] = {}

    async def find_by_id(self, notebook_id: NotebookId) -> Notebook | None:
        notebook = self._notebooks.get(notebook_id)
        return replace(notebook) if notebook else None

    async def find_by_owner(self, owner_id: UserId) -> list[Notebook]:
        notebooks = [nb for nb in self._notebooks.values() if nb.owner_id == owner_id]
        return [replace(nb) for nb in sorted(notebooks, key=lambda nb: nb.created_at)]

    async def save(self, notebook: Notebook) -> Notebook:
        self._notebooks[notebook.id] = replace(notebook)
        return replace(notebook)

    async def delete(self, notebook_id: NotebookId) -> bool:
        return self._notebooks.pop(notebook_id, None) is not None
