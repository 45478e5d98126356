"""Tests for the SQL notebook repository."""

from datetime import UTC, datetime

import pytest
from sqlalchemy.orm import Session

from conceptdeck.domain.common.value_objects import NotebookId, UserId
from conceptdeck.domain.notebooks.entities import Notebook
from conceptdeck.infrastructure.notebooks.repositories import NotebookRepository


@pytest.fixture
def repository(db_session: Session) -> NotebookRepository:
    return NotebookRepository(db_session)


class TestNotebookRepository:
    @pytest.mark.asyncio
    async def test_save_and_find(self, repository: NotebookRepository, notebook: Notebook) -> None:
        await repository.save(notebook)

        found = await repository.find_by_id(notebook.id)

        assert found.id == notebook.id
        assert found.title == "Biology"
        assert found.owner_id == notebook.owner_id
        assert found.frozen is False

    @pytest.mark.asyncio
    async def test_find_missing(self, repository: NotebookRepository) -> None:
        assert await repository.find_by_id(NotebookId.generate()) is None

    @pytest.mark.asyncio
    async def test_save_updates_existing(
        self, repository: NotebookRepository, notebook: Notebook
    ) -> None:
        await repository.save(notebook)
        notebook.rename("Cell Biology")
        notebook.freeze()

        saved = await repository.save(notebook)

        assert saved.title == "Cell Biology"
        assert saved.frozen is True
        assert (await repository.find_by_id(notebook.id)).frozen is True

    @pytest.mark.asyncio
    async def test_find_by_owner_in_creation_order(
        self, repository: NotebookRepository, owner_id: UserId
    ) -> None:
        newer = Notebook.create("Physics", owner_id)
        newer.created_at = datetime(2024, 3, 1, tzinfo=UTC)
        older = Notebook.create("Chemistry", owner_id)
        older.created_at = datetime(2024, 1, 1, tzinfo=UTC)
        for notebook in (newer, older, Notebook.create("History", UserId("user-2"))):
            await repository.save(notebook)

        notebooks = await repository.find_by_owner(owner_id)

        assert [nb.title for nb in notebooks] == ["Chemistry", "Physics"]

    @pytest.mark.asyncio
    async def test_delete(self, repository: NotebookRepository, notebook: Notebook) -> None:
        await repository.save(notebook)

        assert await repository.delete(notebook.id) is True
        assert await repository.find_by_id(notebook.id) is None
        assert await repository.delete(notebook.id) is False
