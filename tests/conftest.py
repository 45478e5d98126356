"""Pytest configuration and fixtures."""

from collections.abc import Awaitable, Callable, Generator, Sequence
from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from conceptdeck.database import Base, create_schema
from conceptdeck.domain.common.value_objects import ShardId, UserId
from conceptdeck.domain.notebooks.entities import Concept, Notebook
from conceptdeck.infrastructure.learning.repositories import InMemoryMasteryRecordRepository
from conceptdeck.infrastructure.notebooks.repositories import InMemoryNotebookRepository
from conceptdeck.infrastructure.notebooks.stores import InMemoryShardStore

# Test database URL (in-memory SQLite)
TEST_DATABASE_URL = "sqlite:///:memory:"

# Create test engine
test_engine = create_engine(
    TEST_DATABASE_URL, connect_args={"check_same_thread": False}, poolclass=StaticPool
)

# Create test session factory
TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


@pytest.fixture
def db_session() -> Generator[Session, None, None]:
    """Create a fresh database session for each test."""
    create_schema(test_engine)

    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def owner_id() -> UserId:
    return UserId("user-1")


@pytest.fixture
def shard_store() -> InMemoryShardStore:
    return InMemoryShardStore()


@pytest.fixture
def notebook_repository() -> InMemoryNotebookRepository:
    return InMemoryNotebookRepository()


@pytest.fixture
def mastery_repository() -> InMemoryMasteryRecordRepository:
    return InMemoryMasteryRecordRepository()


@pytest.fixture
def notebook(owner_id: UserId) -> Notebook:
    return Notebook.create("Biology", owner_id)


SeedShards = Callable[..., Awaitable[list[ShardId]]]


@pytest.fixture
def seed_shards(
    shard_store: InMemoryShardStore,
    notebook_repository: InMemoryNotebookRepository,
    notebook: Notebook,
) -> SeedShards:
    """
    Save the notebook and create one shard per list of terms.

    Shards get increasing creation times in argument order, so the first
    argument is the notebook's oldest shard.
    """

    async def seed(*shards: Sequence[str]) -> list[ShardId]:
        await notebook_repository.save(notebook)
        base = datetime(2024, 1, 1, tzinfo=UTC)
        shard_ids = []
        for position, terms in enumerate(shards):
            concepts = [Concept.create(term, f"{term} definition") for term in terms]
            shard_ids.append(
                await shard_store.create_shard(
                    notebook.id,
                    notebook.owner_id,
                    concepts,
                    created_at=base + timedelta(minutes=position),
                )
            )
        return shard_ids

    return seed
