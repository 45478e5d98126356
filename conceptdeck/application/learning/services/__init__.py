from .notebook_progress_service import NotebookProgress, NotebookProgressService, summarize

__all__ = ["NotebookProgress", "NotebookProgressService", "summarize"]
