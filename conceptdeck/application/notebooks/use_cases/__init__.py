from .mutation_coordinator import MutationCoordinator
from .notebook_use_case import NotebookUseCase

__all__ = ["MutationCoordinator", "NotebookUseCase"]
