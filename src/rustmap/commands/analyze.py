"""Analyze command: extract the code graph of a Rust project into a graph store."""

from __future__ import annotations

import logging
import sys
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import NoReturn

from rustmap.analysis import CodeEntity, ParseError, Relationship, RelationshipType, RustParser
from rustmap.analysis.extractor import extract_declarations
from rustmap.config import (
    BACKENDS,
    get_project_root,
    load_config,
    neo4j_settings,
    project_name,
)
from rustmap.storage import GraphSink, InMemoryGraph, SinkError, SQLiteGraph
from rustmap.utils.ignore import build_spec, collect_source_files, load_patterns

logger = logging.getLogger(__name__)


def _fail(message: str) -> NoReturn:
    print(f"Error: {message}", file=sys.stderr)
    sys.exit(1)


def open_sink(backend: str, project_root: Path, config: dict, args) -> GraphSink:
    """Open the graph sink for the chosen backend. Exits on configuration errors."""
    if backend == "memory":
        return InMemoryGraph()
    if backend == "sqlite":
        return SQLiteGraph(project_root)
    if backend == "neo4j":
        # Imported lazily so the neo4j driver is only loaded when used
        from rustmap.storage.neo4j import Neo4jGraph

        settings = neo4j_settings(
            config,
            uri=getattr(args, "uri", None),
            user=getattr(args, "user", None),
            password=getattr(args, "password", None),
            database=getattr(args, "database", None),
        )
        if not settings.get("uri"):
            _fail("Neo4j URI not set (use --uri, NEO4J_URI, or neo4j.uri in config).")
        if not settings.get("password"):
            _fail("Neo4j password not set (use --password, NEO4J_PASS, or neo4j.password in config).")
        return Neo4jGraph(
            uri=settings["uri"],
            user=settings.get("user") or "neo4j",
            password=settings["password"],
            database=settings.get("database"),
        )
    _fail(f"Unknown backend {backend!r} (choose from {', '.join(BACKENDS)}).")


def analyze_file(
    sink: GraphSink,
    parser: RustParser,
    file_path: Path,
    project: str,
) -> int:
    """
    Analyze one file into the sink. Returns the number of records written.

    The file is linked to its project before parsing, so a file that fails to
    parse still appears in the graph. ParseError and OSError propagate after
    that link; SinkError propagates from any upsert.
    """
    file_path_str = file_path.resolve().as_posix()
    sink.upsert_edge(
        Relationship(
            relationship_type=RelationshipType.CONTAINS_FILE,
            source=CodeEntity.project_node(project),
            target=CodeEntity.file(file_path_str),
        )
    )
    root, source_code = parser.parse_file(file_path)
    records = extract_declarations(root, source_code, file_path_str, project)
    for record in records:
        logger.debug("upsert %s", record.to_dict())
        sink.upsert_edge(record)
    return len(records) + 1


def run(args) -> None:
    """Run the analyze command."""
    path = Path(getattr(args, "path", Path("."))).resolve()
    dry_run = getattr(args, "dry_run", False)

    if not path.exists():
        _fail(f"Path does not exist: {path.as_posix()}")
    project_root = get_project_root(path)

    project = getattr(args, "project", None) or project_name(project_root)
    if not project:
        _fail("Project path must have a valid directory name (or pass --project).")

    config = load_config(project_root)
    backend = getattr(args, "backend", None) or config.get("backend") or "sqlite"
    patterns = [p for p, _ in load_patterns(project_root, config)]
    spec = build_spec(patterns)
    extensions = list(config.get("extensions") or [".rs"])

    files = collect_source_files(path, project_root, spec, extensions)
    total = len(files)
    if total == 0:
        print("No Rust files found.", file=sys.stderr)

    if dry_run:
        print(f"Would analyze {total} file(s) into project {project!r}.", file=sys.stderr)
        for f in files:
            print(f"  {f.as_posix()}", file=sys.stderr)
        return

    parser = RustParser()
    start = time.perf_counter()
    records_written = 0
    errors = 0

    try:
        sink = open_sink(backend, project_root, config, args)
    except SinkError as e:
        _fail(str(e))

    try:
        print(f"Indexing project: {project} ({backend})", file=sys.stderr)
        sink.upsert_node(CodeEntity.project_node(project))
        for i, file_path in enumerate(files):
            logger.debug("[%d/%d] %s", i + 1, total, file_path.as_posix())
            try:
                records_written += analyze_file(sink, parser, file_path, project)
            except ParseError as e:
                logger.warning("Skipping %s", e)
                errors += 1
            except OSError as e:
                logger.warning("Cannot read %s: %s", file_path.as_posix(), e)
                errors += 1
        if isinstance(sink, SQLiteGraph):
            sink.set_metadata("analysis_timestamp", datetime.now(timezone.utc).isoformat())
            sink.set_metadata("project_name", project)
        stats = sink.get_stats()
    except SinkError as e:
        _fail(f"graph store failed, aborting run: {e}")
    finally:
        sink.close()

    elapsed = time.perf_counter() - start
    print(
        f"Analyzed {total - errors} file(s) in {elapsed:.1f}s: {records_written} record(s); "
        f"graph has {stats.total_nodes} node(s), {stats.total_edges} edge(s).",
        file=sys.stderr,
    )
    if errors:
        print(f"  ({errors} file(s) skipped with parse or read errors)", file=sys.stderr)
