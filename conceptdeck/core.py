from dependency_injector import containers, providers
from sqlalchemy.orm import Session

from conceptdeck.application.learning.services.notebook_progress_service import (
    NotebookProgressService,
)
from conceptdeck.application.notebooks.services.navigation_cursor import NavigationCursor
from conceptdeck.application.notebooks.services.prefetch_cache import PrefetchCache
from conceptdeck.application.notebooks.services.shard_aggregator import ShardAggregator
from conceptdeck.application.notebooks.use_cases.mutation_coordinator import MutationCoordinator
from conceptdeck.application.notebooks.use_cases.notebook_use_case import NotebookUseCase
from conceptdeck.config import get_settings
from conceptdeck.infrastructure.learning.repositories import (
    InMemoryMasteryRecordRepository,
    MasteryRecordRepository,
)
from conceptdeck.infrastructure.notebooks.repositories import (
    InMemoryNotebookRepository,
    NotebookRepository,
)
from conceptdeck.infrastructure.notebooks.stores import InMemoryShardStore, SqlAlchemyShardStore


class Container(containers.DeclarativeContainer):
    """Dependency injection container."""

    settings = providers.Singleton(get_settings)

    # Only needed by the "sql" backend; provided at runtime
    db = providers.Dependency(instance_of=Session)

    # Stores and repositories. The shard store is a singleton so that writers
    # and subscribers share one subscription hub.
    shard_store = providers.Selector(
        settings.provided.SHARD_STORE_BACKEND,
        memory=providers.Singleton(InMemoryShardStore),
        sql=providers.Singleton(SqlAlchemyShardStore, db=db),
    )
    notebook_repository = providers.Selector(
        settings.provided.SHARD_STORE_BACKEND,
        memory=providers.Singleton(InMemoryNotebookRepository),
        sql=providers.Factory(NotebookRepository, db=db),
    )
    mastery_record_repository = providers.Selector(
        settings.provided.SHARD_STORE_BACKEND,
        memory=providers.Singleton(InMemoryMasteryRecordRepository),
        sql=providers.Factory(MasteryRecordRepository, db=db),
    )

    # Navigation
    shard_aggregator = providers.Factory(ShardAggregator, shard_store=shard_store)
    prefetch_cache = providers.Factory(
        PrefetchCache,
        shard_store=shard_store,
        enabled=settings.provided.PREFETCH_ENABLED,
        call_timeout=settings.provided.STORE_CALL_TIMEOUT_SECONDS,
    )
    # Call with notebook_id=... (and optionally on_navigate=...)
    navigation_cursor = providers.Factory(
        NavigationCursor,
        aggregator=shard_aggregator,
        prefetch_cache=prefetch_cache,
    )

    # Use cases
    mutation_coordinator = providers.Factory(
        MutationCoordinator,
        shard_store=shard_store,
        notebook_repository=notebook_repository,
        mastery_record_repository=mastery_record_repository,
        default_source=settings.provided.DEFAULT_CONCEPT_SOURCE,
        call_timeout=settings.provided.STORE_CALL_TIMEOUT_SECONDS,
    )
    notebook_use_case = providers.Factory(
        NotebookUseCase,
        notebook_repository=notebook_repository,
        shard_store=shard_store,
        mastery_record_repository=mastery_record_repository,
        call_timeout=settings.provided.STORE_CALL_TIMEOUT_SECONDS,
    )
    notebook_progress_service = providers.Factory(
        NotebookProgressService,
        mastery_provider=mastery_record_repository,
        batch_size=settings.provided.MASTERY_LOOKUP_BATCH_SIZE,
    )


# Initialize container
container = Container()
