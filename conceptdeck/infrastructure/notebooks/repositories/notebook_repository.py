"""Repository for Notebook domain entities."""

from sqlalchemy import select
from sqlalchemy.orm import Session

from conceptdeck.domain.common.value_objects import NotebookId, UserId
from conceptdeck.domain.notebooks.entities.notebook import Notebook
from conceptdeck.infrastructure.notebooks.mappers.notebook_mapper import NotebookMapper
from conceptdeck.models import Notebook as NotebookORM


class NotebookRepository:
    """Repository for Notebook domain entities."""

    def __init__(self, db: Session) -> None:
        self.db = db
        self.mapper = NotebookMapper()

    async def find_by_id(self, notebook_id: NotebookId) -> Notebook | None:
        orm_model = self.db.get(NotebookORM, notebook_id.value)
        return self.mapper.to_domain(orm_model) if orm_model else None

    async def find_by_owner(self, owner_id: UserId) -> list[Notebook]:
        """
        Get all notebooks of a user.

        Returns:
            List of notebook entities ordered by created_at ASC
        """
        stmt = (
            select(NotebookORM)
            .where(NotebookORM.owner_id == owner_id.value)
            .order_by(NotebookORM.created_at.asc())
        )
        orm_models = self.db.execute(stmt).scalars().all()
        return [self.mapper.to_domain(orm) for orm in orm_models]

    async def save(self, notebook: Notebook) -> Notebook:
        """
        Save a notebook entity (create or update).

        Returns:
            Saved notebook entity
        """
        orm_model = self.db.get(NotebookORM, notebook.id.value)
        if orm_model:
            self.mapper.to_orm(notebook, orm_model)
        else:
            orm_model = self.mapper.to_orm(notebook)
            self.db.add(orm_model)
        self.db.commit()
        self.db.refresh(orm_model)
        return self.mapper.to_domain(orm_model)

    async def delete(self, notebook_id: NotebookId) -> bool:
        orm_model = self.db.get(NotebookORM, notebook_id.value)
        if not orm_model:
            return False
        self.db.delete(orm_model)
        self.db.commit()
        return True
