"""Mapper for Notebook ORM ↔ Domain conversion."""

from conceptdeck.domain.common.value_objects import NotebookId, UserId
from conceptdeck.domain.notebooks.entities.notebook import Notebook
from conceptdeck.models import Notebook as NotebookORM


class NotebookMapper:
    """Mapper for Notebook ORM ↔ Domain conversion."""

    def to_domain(self, orm_model: NotebookORM) -> Notebook:
        return Notebook(
            id=NotebookId(orm_model.id),
            title=orm_model.title,
            owner_id=UserId(orm_model.owner_id),
            color=orm_model.color,
            frozen=orm_model.frozen,
            created_at=orm_model.created_at,
        )

    def to_orm(self, domain_entity: Notebook, orm_model: NotebookORM | None = None) -> NotebookORM:
        if orm_model:
            orm_model.title = domain_entity.title
            orm_model.color = domain_entity.color
            orm_model.frozen = domain_entity.frozen
            return orm_model

        return NotebookORM(
            id=domain_entity.id.value,
            title=domain_entity.title,
            owner_id=domain_entity.owner_id.value,
            color=domain_entity.color,
            frozen=domain_entity.frozen,
            created_at=domain_entity.created_at,
        )
