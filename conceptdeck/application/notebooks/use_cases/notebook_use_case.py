"""Use case for notebook lifecycle operations."""

import structlog

from conceptdeck.application.common.result import Failure, Result, Success
from conceptdeck.application.common.timeouts import bounded
from conceptdeck.application.learning.protocols.mastery_record_repository import (
    MasteryRecordRepositoryProtocol,
)
from conceptdeck.application.notebooks.protocols.concept_shard_store import (
    ConceptShardStoreProtocol,
)
from conceptdeck.application.notebooks.protocols.notebook_repository import (
    NotebookRepositoryProtocol,
)
from conceptdeck.application.notebooks.use_cases.dtos import NotebookDeletionOutcome
from conceptdeck.domain.common.value_objects import NotebookId, UserId
from conceptdeck.domain.notebooks.entities.notebook import Notebook
from conceptdeck.exceptions import NotebookNotFoundError

logger = structlog.get_logger(__name__)


class NotebookUseCase:
    """Create, freeze and delete notebooks."""

    def __init__(
        self,
        notebook_repository: NotebookRepositoryProtocol,
        shard_store: ConceptShardStoreProtocol,
        mastery_record_repository: MasteryRecordRepositoryProtocol,
        *,
        call_timeout: float | None = None,
    ) -> None:
        """Initialize use case with repository protocols."""
        self.notebook_repository = notebook_repository
        self.shard_store = shard_store
        self.mastery_record_repository = mastery_record_repository
        self.call_timeout = call_timeout

    async def create_notebook(
        self, title: str, owner_id: UserId, color: str | None = None
    ) -> Notebook:
        """
        Create an empty notebook.

        Raises:
            conceptdeck.domain.common.exceptions.ValidationError: If the title is empty
        """
        notebook = await self.notebook_repository.save(Notebook.create(title, owner_id, color))
        logger.info("created_notebook", notebook_id=str(notebook.id), owner_id=str(owner_id))
        return notebook

    async def get_notebook(self, notebook_id: NotebookId) -> Result[Notebook, NotebookNotFoundError]:
        notebook = await self.notebook_repository.find_by_id(notebook_id)
        if notebook is None:
            return Failure(NotebookNotFoundError(notebook_id))
        return Success(notebook)

    async def set_frozen(
        self, notebook_id: NotebookId, frozen: bool
    ) -> Result[Notebook, NotebookNotFoundError]:
        """Freeze or unfreeze a notebook."""
        notebook = await self.notebook_repository.find_by_id(notebook_id)
        if notebook is None:
            return Failure(NotebookNotFoundError(notebook_id))
        if frozen:
            notebook.freeze()
        else:
            notebook.unfreeze()
        notebook = await self.notebook_repository.save(notebook)
        logger.info("set_notebook_frozen", notebook_id=str(notebook_id), frozen=frozen)
        return Success(notebook)

    async def delete_notebook(
        self, notebook_id: NotebookId
    ) -> Result[NotebookDeletionOutcome, NotebookNotFoundError]:
        """
        Delete a notebook with its shards and their mastery records.

        Shards go first so that subscribers see the notebook empty out
        before it disappears.

        Args:
            notebook_id: Notebook to delete

        Returns:
            Success with deletion counts, or Failure if the notebook does not exist
        """
        notebook = await self.notebook_repository.find_by_id(notebook_id)
        if notebook is None:
            return Failure(NotebookNotFoundError(notebook_id))

        outcome = NotebookDeletionOutcome(notebook_id=notebook_id)
        shards = await bounded(
            "list_shards", self.shard_store.list_shards(notebook_id), self.call_timeout
        )
        concept_ids = []
        for shard in shards:
            if await bounded(
                "delete_shard", self.shard_store.delete_shard(shard.id), self.call_timeout
            ):
                outcome.deleted_shards += 1
                concept_ids.extend(concept.id for concept in shard.concepts)
        outcome.deleted_concepts = len(concept_ids)

        if concept_ids:
            outcome.deleted_mastery_records = await self.mastery_record_repository.delete_records(
                concept_ids
            )
        await self.notebook_repository.delete(notebook_id)

        logger.info(
            "deleted_notebook",
            notebook_id=str(notebook_id),
            deleted_shards=outcome.deleted_shards,
            deleted_concepts=outcome.deleted_concepts,
        )
        return Success(outcome)
