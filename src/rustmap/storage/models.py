"""Data models for storage results."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class GraphStats:
    """Aggregated counts from a graph store."""

    node_counts: dict[str, int] = field(default_factory=dict)  # label -> n
    edge_counts: dict[str, int] = field(default_factory=dict)  # edge type -> n

    @property
    def total_nodes(self) -> int:
        return sum(self.node_counts.values())

    @property
    def total_edges(self) -> int:
        return sum(self.edge_counts.values())
