"""Code entity data models for static analysis."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class EntityType(Enum):
    """Types of graph nodes we extract. Values are the graph labels."""

    PROJECT = "Project"
    FILE = "File"
    FUNCTION = "Function"
    STRUCT = "Struct"
    TRAIT = "Trait"

    @property
    def key_fields(self) -> tuple[str, ...]:
        """Property names that identify a node of this type."""
        if self is EntityType.PROJECT:
            return ("name",)
        if self is EntityType.FILE:
            return ("path",)
        return ("name", "project")


@dataclass(frozen=True)
class CodeEntity:
    """
    A graph node, identified only by its key.

    Functions, structs and traits are keyed by (name, project): two
    declarations with the same name anywhere in a project are one entity.
    """

    type: EntityType
    name: str  # Path for FILE entities
    project: Optional[str] = None  # None for PROJECT and FILE

    @classmethod
    def project_node(cls, name: str) -> CodeEntity:
        return cls(EntityType.PROJECT, name)

    @classmethod
    def file(cls, path: str) -> CodeEntity:
        return cls(EntityType.FILE, path)

    @classmethod
    def function(cls, name: str, project: str) -> CodeEntity:
        return cls(EntityType.FUNCTION, name, project)

    @classmethod
    def struct(cls, name: str, project: str) -> CodeEntity:
        return cls(EntityType.STRUCT, name, project)

    @classmethod
    def trait(cls, name: str, project: str) -> CodeEntity:
        return cls(EntityType.TRAIT, name, project)

    @property
    def label(self) -> str:
        return self.type.value

    def key(self) -> dict[str, str]:
        """Key fields of this node, e.g. {"name": "main", "project": "demo"}."""
        values = (self.name, self.project)
        return {field: value for field, value in zip(self.type.key_fields, values)}

    def to_dict(self) -> dict:
        """Convert to dictionary for export and logging."""
        return {"label": self.label, **self.key()}
