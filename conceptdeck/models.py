"""Database models."""

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Integer, String, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from conceptdeck.database import Base


class Notebook(Base):
    """A user's notebook."""

    __tablename__ = "notebooks"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    owner_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    color: Mapped[str | None] = mapped_column(String(32), nullable=True)
    frozen: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    def __repr__(self) -> str:
        """String representation of Notebook."""
        return f"<Notebook(id={self.id}, title='{self.title}')>"


class ConceptShard(Base):
    """
    One shard record: an ordered array of concepts stored in a single JSON column.

    Rewriting a shard replaces the column value as a whole.
    """

    __tablename__ = "concept_shards"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)
    notebook_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("notebooks.id", ondelete="CASCADE"), nullable=False, index=True
    )
    owner_id: Mapped[str] = mapped_column(String(128), nullable=False)
    concepts: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    def __repr__(self) -> str:
        """String representation of ConceptShard."""
        return f"<ConceptShard(id={self.id}, notebook_id={self.notebook_id})>"


class MasteryRecord(Base):
    """Spaced-repetition counter for one concept."""

    __tablename__ = "mastery_records"

    concept_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)
    notebook_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)
    owner_id: Mapped[str] = mapped_column(String(128), nullable=False)
    repetitions: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    def __repr__(self) -> str:
        """String representation of MasteryRecord."""
        return f"<MasteryRecord(concept_id={self.concept_id}, repetitions={self.repetitions})>"
