"""
ConceptAddress value object - the routable location of a concept.

Address = (notebook_id, shard_id, local_offset), exposed to routing as
three path segments:

    /notebooks/{notebook_id}/concepts/{shard_id}/{local_offset}

Navigation produces new addresses; reflecting them in a URL or any other
location mechanism is up to the caller.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, TypedDict

if TYPE_CHECKING:
    from typing import Self

from conceptdeck.domain.common.value_objects.concept_identity import ConceptIdentity
from conceptdeck.domain.common.value_objects.ids import NotebookId, ShardId
from conceptdeck.exceptions import AddressParseError


class ConceptAddressDict(TypedDict):
    """Dictionary representation of ConceptAddress for JSON serialization."""

    notebook_id: str
    shard_id: str
    local_offset: int


# /notebooks/<uuid>/concepts/<uuid>/<offset>, trailing slash optional
_ADDRESS_PATTERN = re.compile(
    r"^/?notebooks/(?P<notebook>[^/]+)/concepts/(?P<shard>[^/]+)/(?P<offset>[^/]+)/?$"
)


@dataclass(frozen=True)
class ConceptAddress:
    """Logical address of a concept inside a notebook.

    Attributes:
        notebook_id: Notebook the concept belongs to
        shard_id: Shard record currently holding the concept
        local_offset: 0-based position inside the shard's concept array
    """

    notebook_id: NotebookId
    shard_id: ShardId
    local_offset: int

    @property
    def identity(self) -> ConceptIdentity:
        return ConceptIdentity(self.shard_id, self.local_offset)

    @classmethod
    def at(cls, notebook_id: NotebookId, identity: ConceptIdentity) -> Self:
        return cls(notebook_id, identity.shard_id, identity.local_offset)

    def to_segments(self) -> tuple[str, str, str]:
        """The three path segments (notebook id, shard id, local offset)."""
        return str(self.notebook_id), str(self.shard_id), str(self.local_offset)

    def to_path(self) -> str:
        notebook, shard, offset = self.to_segments()
        return f"/notebooks/{notebook}/concepts/{shard}/{offset}"

    def to_dict(self) -> ConceptAddressDict:
        notebook, shard, _ = self.to_segments()
        return {"notebook_id": notebook, "shard_id": shard, "local_offset": self.local_offset}

    @classmethod
    def from_segments(cls, notebook_segment: str, shard_segment: str, offset_segment: str) -> Self:
        """Parse the three path segments produced by ``to_segments``.

        Raises:
            AddressParseError: If a segment is not a valid id or offset
        """
        raw = f"{notebook_segment}/{shard_segment}/{offset_segment}"
        try:
            notebook_id = NotebookId.parse(notebook_segment)
            shard_id = ShardId.parse(shard_segment)
        except ValueError as e:
            raise AddressParseError(raw, str(e)) from e

        if not offset_segment.isascii() or not offset_segment.isdigit():
            raise AddressParseError(raw, f"local offset {offset_segment!r} is not a non-negative integer")

        return cls(notebook_id, shard_id, int(offset_segment))

    @classmethod
    def parse(cls, path: str) -> Self:
        """Parse a ``/notebooks/{id}/concepts/{shard}/{offset}`` path.

        Raises:
            AddressParseError: If the path does not have that shape
        """
        match = _ADDRESS_PATTERN.match(path.strip())
        if not match:
            raise AddressParseError(path, "expected /notebooks/{id}/concepts/{shard}/{offset}")
        return cls.from_segments(match.group("notebook"), match.group("shard"), match.group("offset"))

    def __str__(self) -> str:
        return self.to_path()
