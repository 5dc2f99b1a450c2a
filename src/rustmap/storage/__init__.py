"""Graph storage layer (in-memory, SQLite and Neo4j sinks, abstract interface, models)."""

from rustmap.storage.base import GraphSink, GraphSinkBase, SinkError
from rustmap.storage.memory import InMemoryGraph
from rustmap.storage.models import GraphStats
from rustmap.storage.sqlite import SQLiteGraph

__all__ = [
    "GraphSink",
    "GraphSinkBase",
    "GraphStats",
    "InMemoryGraph",
    "SQLiteGraph",
    "SinkError",
]
