"""
Use case for adding, editing and deleting concepts.

The store can only replace a shard's whole concept array or delete the
shard record, so every operation here is read, modify, rewrite on whole
arrays. Concurrent writers to the same shard are not detected: the later
rewrite wins.
"""

from collections.abc import Sequence

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
from conceptdeck.application.notebooks.use_cases.dtos import (
    ConceptChanges,
    ConceptDraft,
    MaterialCascadeOutcome,
    ShardWriteOutcome,
)
from conceptdeck.domain.common.exceptions import BusinessRuleViolationError
from conceptdeck.domain.common.value_objects import MaterialId, NotebookId, ShardId
from conceptdeck.domain.notebooks.entities.concept import Concept
from conceptdeck.domain.notebooks.entities.concept_shard import (
    ConceptShard,
    ShardRewritePlan,
    ShardWriteAction,
)
from conceptdeck.domain.notebooks.entities.notebook import Notebook
from conceptdeck.exceptions import (
    ConceptNotFoundError,
    NotebookFrozenError,
    NotebookNotFoundError,
    NotFoundError,
    ShardNotFoundError,
    ValidationError,
)

logger = structlog.get_logger(__name__)


class MutationCoordinator:
    """Concept mutations that keep shards non-empty and rewritten as a whole."""

    def __init__(
        self,
        shard_store: ConceptShardStoreProtocol,
        notebook_repository: NotebookRepositoryProtocol,
        mastery_record_repository: MasteryRecordRepositoryProtocol,
        *,
        default_source: str = "Manual",
        call_timeout: float | None = None,
    ) -> None:
        self.shard_store = shard_store
        self.notebook_repository = notebook_repository
        self.mastery_record_repository = mastery_record_repository
        self.default_source = default_source
        self.call_timeout = call_timeout

    async def add_manual(
        self, notebook_id: NotebookId, draft: ConceptDraft
    ) -> Result[ShardWriteOutcome, NotebookNotFoundError]:
        """
        Add one concept typed in by the user.

        The concept is appended to the notebook's oldest shard; a notebook
        without shards gets a new shard holding just this concept.

        Args:
            notebook_id: Notebook to add to
            draft: Fields of the new concept

        Returns:
            Success with the outcome (its ``concept`` carries the generated id),
            or Failure if the notebook does not exist

        Raises:
            NotebookFrozenError: If the notebook is frozen
        """
        notebook_result = await self._mutable_notebook(notebook_id)
        if isinstance(notebook_result, Failure):
            return notebook_result
        notebook = notebook_result.value
        concept = self._new_concept(draft)

        shards = await bounded(
            "list_shards", self.shard_store.list_shards(notebook_id), self.call_timeout
        )
        outcome: ShardWriteOutcome | None = None
        if shards:
            target = min(shards, key=lambda shard: (shard.created_at, str(shard.id)))
            plan = target.plan_append([concept])
            if await self._apply(plan):
                outcome = ShardWriteOutcome(
                    shard_id=target.id,
                    action=plan.action,
                    concepts=(concept,),
                    first_offset=len(target),
                )
            else:
                logger.warning(
                    "append_target_vanished", notebook_id=str(notebook_id), shard_id=str(target.id)
                )
        if outcome is None:
            shard_id = await bounded(
                "create_shard",
                self.shard_store.create_shard(notebook_id, notebook.owner_id, [concept]),
                self.call_timeout,
            )
            outcome = ShardWriteOutcome(
                shard_id=shard_id,
                action=ShardWriteAction.CREATED,
                concepts=(concept,),
                first_offset=0,
            )

        await self._initialize_mastery(notebook, [concept])
        logger.info(
            "added_concept",
            notebook_id=str(notebook_id),
            shard_id=str(outcome.shard_id),
            concept_id=str(concept.id),
            action=outcome.action.value,
        )
        return Success(outcome)

    async def add_batch(
        self, notebook_id: NotebookId, drafts: Sequence[ConceptDraft]
    ) -> Result[ShardWriteOutcome, NotebookNotFoundError]:
        """
        Add a generated batch of concepts as one new shard.

        Raises:
            ValidationError: If the batch is empty
            NotebookFrozenError: If the notebook is frozen
        """
        if not drafts:
            raise ValidationError("A concept batch must contain at least one concept")
        notebook_result = await self._mutable_notebook(notebook_id)
        if isinstance(notebook_result, Failure):
            return notebook_result
        notebook = notebook_result.value

        concepts = [self._new_concept(draft) for draft in drafts]
        shard_id = await bounded(
            "create_shard",
            self.shard_store.create_shard(notebook_id, notebook.owner_id, concepts),
            self.call_timeout,
        )
        await self._initialize_mastery(notebook, concepts)
        logger.info(
            "added_concept_batch",
            notebook_id=str(notebook_id),
            shard_id=str(shard_id),
            count=len(concepts),
        )
        return Success(
            ShardWriteOutcome(
                shard_id=shard_id,
                action=ShardWriteAction.CREATED,
                concepts=tuple(concepts),
                first_offset=0,
            )
        )

    async def edit_concept(
        self, shard_id: ShardId, local_offset: int, changes: ConceptChanges
    ) -> Result[ShardWriteOutcome, NotFoundError]:
        """
        Merge ``changes`` into the concept at (shard, offset) and rewrite the shard.

        Last writer wins: a concurrent rewrite of the same shard is overwritten.

        Returns:
            Success with the outcome, or Failure if the shard, notebook or
            offset does not resolve

        Raises:
            NotebookFrozenError: If the notebook is frozen
            conceptdeck.domain.common.exceptions.ValidationError: If the merge
                empties the term or definition
        """
        shard_result = await self._addressed_shard(shard_id, local_offset)
        if isinstance(shard_result, Failure):
            return shard_result
        shard = shard_result.value

        current = shard.concept_at(local_offset)
        updated = current.merged(
            term=changes.term,
            definition=changes.definition,
            source=changes.source,
            notes=changes.notes,
        )
        if updated == current:
            return Success(
                ShardWriteOutcome(
                    shard_id=shard_id,
                    action=ShardWriteAction.UNCHANGED,
                    concepts=(current,),
                    first_offset=local_offset,
                )
            )

        plan = shard.plan_replace(local_offset, updated)
        if not await self._apply(plan):
            return Failure(ShardNotFoundError(shard_id))
        logger.info(
            "edited_concept",
            shard_id=str(shard_id),
            local_offset=local_offset,
            concept_id=str(updated.id),
        )
        return Success(
            ShardWriteOutcome(
                shard_id=shard_id,
                action=plan.action,
                concepts=(updated,),
                first_offset=local_offset,
            )
        )

    async def update_notes(
        self, shard_id: ShardId, local_offset: int, notes: str
    ) -> Result[ShardWriteOutcome, NotFoundError]:
        """Replace the personal notes of one concept; an empty string clears them."""
        return await self.edit_concept(shard_id, local_offset, ConceptChanges(notes=notes))

    async def delete_concept(
        self, shard_id: ShardId, local_offset: int
    ) -> Result[ShardWriteOutcome, NotFoundError]:
        """
        Delete the concept at (shard, offset).

        The last concept of a shard takes the shard record with it. Otherwise
        the remaining array is rewritten and every later offset in the shard
        shifts down by one.

        Raises:
            NotebookFrozenError: If the notebook is frozen
        """
        shard_result = await self._addressed_shard(shard_id, local_offset)
        if isinstance(shard_result, Failure):
            return shard_result
        shard = shard_result.value

        plan = shard.plan_remove_at(local_offset)
        if not await self._apply(plan):
            return Failure(ShardNotFoundError(shard_id))
        logger.info(
            "deleted_concept",
            shard_id=str(shard_id),
            local_offset=local_offset,
            concept_id=str(plan.removed[0].id),
            action=plan.action.value,
        )
        return Success(
            ShardWriteOutcome(
                shard_id=shard_id,
                action=plan.action,
                concepts=plan.removed,
                first_offset=local_offset,
            )
        )

    async def delete_material_cascade(self, material_id: MaterialId) -> MaterialCascadeOutcome:
        """
        Remove every concept that came from a material, in every notebook.

        Each affected shard is rewritten without those concepts, or deleted
        if none remain. Mastery records of the removed concepts go too.
        Runs when the material itself is deleted, so frozen notebooks are
        not exempt.
        """
        outcome = MaterialCascadeOutcome(material_id=material_id)
        shards = await bounded(
            "find_shards_by_material",
            self.shard_store.find_shards_by_material(material_id),
            self.call_timeout,
        )
        removed: list[Concept] = []
        for shard in shards:
            plan = shard.plan_remove_where(lambda concept, _: concept.came_from(material_id))
            if plan.action == ShardWriteAction.UNCHANGED or not await self._apply(plan):
                continue
            if plan.action == ShardWriteAction.DELETED:
                outcome.deleted_shards.append(shard.id)
            else:
                outcome.rewritten_shards.append(shard.id)
            removed.extend(plan.removed)

        outcome.removed_concepts = len(removed)
        if removed:
            outcome.deleted_mastery_records = await self.mastery_record_repository.delete_records(
                [concept.id for concept in removed]
            )
        logger.info(
            "deleted_material_concepts",
            material_id=str(material_id),
            removed_concepts=outcome.removed_concepts,
            rewritten_shards=len(outcome.rewritten_shards),
            deleted_shards=len(outcome.deleted_shards),
        )
        return outcome

    def _new_concept(self, draft: ConceptDraft) -> Concept:
        return Concept.create(
            term=draft.term,
            definition=draft.definition,
            source=draft.source,
            notes=draft.notes,
            material_id=draft.material_id,
            default_source=self.default_source,
        )

    async def _mutable_notebook(
        self, notebook_id: NotebookId
    ) -> Result[Notebook, NotebookNotFoundError]:
        notebook = await self.notebook_repository.find_by_id(notebook_id)
        if notebook is None:
            return Failure(NotebookNotFoundError(notebook_id))
        try:
            notebook.ensure_mutable()
        except BusinessRuleViolationError as e:
            raise NotebookFrozenError(notebook_id) from e
        return Success(notebook)

    async def _addressed_shard(
        self, shard_id: ShardId, local_offset: int
    ) -> Result[ConceptShard, NotFoundError]:
        """Read a shard for mutation and check its notebook and the offset."""
        shard = await bounded("get_shard", self.shard_store.get_shard(shard_id), self.call_timeout)
        if shard is None:
            return Failure(ShardNotFoundError(shard_id))
        notebook_result = await self._mutable_notebook(shard.notebook_id)
        if isinstance(notebook_result, Failure):
            return notebook_result
        if not shard.has_offset(local_offset):
            return Failure(ConceptNotFoundError(shard_id, local_offset))
        return Success(shard)

    async def _apply(self, plan: ShardRewritePlan) -> bool:
        """Write a plan to the store; False if the shard disappeared in between."""
        if plan.action == ShardWriteAction.DELETED:
            return await bounded(
                "delete_shard", self.shard_store.delete_shard(plan.shard_id), self.call_timeout
            )
        if plan.action == ShardWriteAction.REWRITTEN:
            return await bounded(
                "rewrite_shard_concepts",
                self.shard_store.rewrite_shard_concepts(plan.shard_id, plan.concepts),
                self.call_timeout,
            )
        return True

    async def _initialize_mastery(self, notebook: Notebook, concepts: Sequence[Concept]) -> None:
        # Concepts without a record count as NEW
        try:
            await self.mastery_record_repository.initialize_records(
                notebook.id, notebook.owner_id, [concept.id for concept in concepts]
            )
        except Exception:
            logger.exception(
                "mastery_initialization_failed",
                notebook_id=str(notebook.id),
                count=len(concepts),
            )
