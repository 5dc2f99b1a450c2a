"""Code relationship data models for static analysis."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .entities import CodeEntity, EntityType


class RelationshipType(Enum):
    """Types of relationships between graph nodes. Values are the edge types."""

    CONTAINS_FILE = "CONTAINS_FILE"
    CONTAINS = "CONTAINS"
    CALLS = "CALLS"
    INSTANTIATES = "INSTANTIATES"
    IMPLEMENTS = "IMPLEMENTS"


# Allowed (source, target) node types per relationship
_ENDPOINTS: dict[RelationshipType, tuple[set[EntityType], set[EntityType]]] = {
    RelationshipType.CONTAINS_FILE: ({EntityType.PROJECT}, {EntityType.FILE}),
    RelationshipType.CONTAINS: (
        {EntityType.FILE},
        {EntityType.FUNCTION, EntityType.STRUCT, EntityType.TRAIT},
    ),
    RelationshipType.CALLS: ({EntityType.FUNCTION}, {EntityType.FUNCTION}),
    RelationshipType.INSTANTIATES: ({EntityType.FUNCTION}, {EntityType.STRUCT}),
    RelationshipType.IMPLEMENTS: ({EntityType.STRUCT}, {EntityType.TRAIT}),
}


@dataclass(frozen=True)
class Relationship:
    """A directed edge between two entities, identified by (type, source, target)."""

    relationship_type: RelationshipType
    source: CodeEntity
    target: CodeEntity

    def __post_init__(self) -> None:
        sources, targets = _ENDPOINTS[self.relationship_type]
        if self.source.type not in sources or self.target.type not in targets:
            raise ValueError(
                f"{self.relationship_type.value} cannot link "
                f"{self.source.label} to {self.target.label}"
            )

    def to_dict(self) -> dict:
        """Convert to dictionary for export and logging."""
        return {
            "type": self.relationship_type.value,
            "source": self.source.to_dict(),
            "target": self.target.to_dict(),
        }
