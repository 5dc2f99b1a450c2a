"""Abstract graph sink interface: idempotent node and edge upserts."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Protocol, runtime_checkable

from rustmap.analysis.entities import CodeEntity
from rustmap.analysis.relationships import Relationship
from rustmap.storage.models import GraphStats


class SinkError(Exception):
    """The graph store rejected or failed an operation."""


@runtime_checkable
class GraphSink(Protocol):
    """Protocol for graph backends (memory, SQLite, Neo4j)."""

    def upsert_node(self, entity: CodeEntity) -> CodeEntity:
        """Create the node if absent (merge by key). Return the stored entity."""
        ...

    def upsert_edge(self, relationship: Relationship) -> None:
        """Upsert both endpoints, then create the edge if absent."""
        ...

    def get_stats(self) -> GraphStats:
        """Return node counts per label and edge counts per type."""
        ...

    def close(self) -> None:
        """Release any connection held by the sink."""
        ...


class GraphSinkBase(ABC):
    """Abstract base class for graph sink implementations."""

    @abstractmethod
    def upsert_node(self, entity: CodeEntity) -> CodeEntity:
        """Create the node if absent (merge by key). Return the stored entity."""
        ...

    @abstractmethod
    def upsert_edge(self, relationship: Relationship) -> None:
        """Upsert both endpoints, then create the edge if absent."""
        ...

    @abstractmethod
    def get_stats(self) -> GraphStats:
        """Return node counts per label and edge counts per type."""
        ...

    def close(self) -> None:
        """Release any connection held by the sink. No-op by default."""

    def __enter__(self) -> GraphSinkBase:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()
