"""In-memory graph sink, deduplicating nodes and edges by key."""

from __future__ import annotations

from collections import Counter

from rustmap.analysis.entities import CodeEntity, EntityType
from rustmap.analysis.relationships import Relationship
from rustmap.storage.base import GraphSinkBase
from rustmap.storage.models import GraphStats


class InMemoryGraph(GraphSinkBase):
    """Graph kept in a dict of nodes and a set of edges. Nothing is persisted."""

    def __init__(self) -> None:
        self._nodes: dict[tuple[EntityType, tuple[str, ...]], CodeEntity] = {}
        self._edges: set[Relationship] = set()

    @staticmethod
    def _node_key(entity: CodeEntity) -> tuple[EntityType, tuple[str, ...]]:
        return entity.type, tuple(entity.key().values())

    @property
    def nodes(self) -> set[CodeEntity]:
        return set(self._nodes.values())

    @property
    def edges(self) -> set[Relationship]:
        return set(self._edges)

    def upsert_node(self, entity: CodeEntity) -> CodeEntity:
        return self._nodes.setdefault(self._node_key(entity), entity)

    def upsert_edge(self, relationship: Relationship) -> None:
        self.upsert_node(relationship.source)
        self.upsert_node(relationship.target)
        self._edges.add(relationship)

    def get_stats(self) -> GraphStats:
        node_counts = Counter(entity.label for entity in self._nodes.values())
        edge_counts = Counter(rel.relationship_type.value for rel in self._edges)
        return GraphStats(node_counts=dict(node_counts), edge_counts=dict(edge_counts))
