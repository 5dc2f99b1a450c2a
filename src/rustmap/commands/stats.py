"""Show graph statistics."""

from __future__ import annotations

import sys
from argparse import Namespace
from pathlib import Path

from rustmap.analysis import EntityType, RelationshipType
from rustmap.commands.analyze import open_sink
from rustmap.config import get_project_root, graph_db_path, load_config
from rustmap.storage import GraphStats, SinkError, SQLiteGraph


def _print_stats(stats: GraphStats, scope_label: str, analyzed_at: str | None) -> None:
    """Print stats to stdout."""
    print(f"Graph statistics {scope_label}")
    print()
    print("  Nodes:")
    for entity_type in EntityType:
        print(f"    {entity_type.value + ':':<15}{stats.node_counts.get(entity_type.value, 0)}")
    print(f"    {'total:':<15}{stats.total_nodes}")
    print()
    print("  Edges:")
    for rel_type in RelationshipType:
        print(f"    {rel_type.value + ':':<15}{stats.edge_counts.get(rel_type.value, 0)}")
    print(f"    {'total:':<15}{stats.total_edges}")
    if analyzed_at is not None:
        print()
        print(f"  Last analysis: {analyzed_at.replace('T', ' ')[:19]}")


def run(args: Namespace) -> None:
    """Run the stats command."""
    path: Path = Path(getattr(args, "path", Path("."))).resolve()
    project_root = get_project_root(path)
    config = load_config(project_root)
    backend = getattr(args, "backend", None) or config.get("backend") or "sqlite"

    if backend == "memory":
        print("Error: the memory backend keeps nothing to report on.", file=sys.stderr)
        sys.exit(1)
    if backend == "sqlite" and not graph_db_path(project_root).is_file():
        print(
            "No graph found. Run 'rustmap analyze' in the project directory first.",
            file=sys.stderr,
        )
        sys.exit(1)

    try:
        sink = open_sink(backend, project_root, config, args)
        try:
            stats = sink.get_stats()
            analyzed_at = (
                sink.get_metadata("analysis_timestamp") if isinstance(sink, SQLiteGraph) else None
            )
        finally:
            sink.close()
    except SinkError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    _print_stats(stats, f"(project: {project_root.as_posix()}, backend: {backend})", analyzed_at)
