"""Pydantic schema for a concept as stored inside a shard's JSON column."""

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class ConceptRecord(BaseModel):
    """One element of a shard's concept array."""

    model_config = ConfigDict(extra="ignore")

    id: UUID
    term: str = Field(..., min_length=1)
    definition: str = Field(..., min_length=1)
    source: str = "Manual"
    notes: str | None = None
    material_id: UUID | None = None


ConceptRecordList = TypeAdapter(list[ConceptRecord])
