from .in_memory_notebook_repository import InMemoryNotebookRepository
from .notebook_repository import NotebookRepository

__all__ = ["InMemoryNotebookRepository", "NotebookRepository"]
