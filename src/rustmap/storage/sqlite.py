"""SQLite implementation of the graph sink."""

from __future__ import annotations

import sqlite3
from datetime import datetime, timezone
from pathlib import Path

from rustmap import config as rustmap_config
from rustmap.analysis.entities import CodeEntity, EntityType
from rustmap.analysis.relationships import Relationship, RelationshipType
from rustmap.storage.base import GraphSinkBase, SinkError
from rustmap.storage.models import GraphStats

SCHEMA_VERSION_CURRENT = "1"


class SQLiteGraph(GraphSinkBase):
    """Graph backend using SQLite in project_root/.rustmap/graph.db."""

    def __init__(self, project_root: Path, db_path: Path | None = None) -> None:
        self._project_root = Path(project_root).resolve()
        self._db_path = db_path or rustmap_config.graph_db_path(self._project_root)
        self._conn: sqlite3.Connection | None = None

    @property
    def db_path(self) -> Path:
        return self._db_path

    def _connect(self) -> sqlite3.Connection:
        if self._conn is not None:
            return self._conn
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(str(self._db_path))
            self._conn.row_factory = sqlite3.Row
            self._ensure_schema()
        except (sqlite3.Error, OSError) as e:
            raise SinkError(f"Cannot open graph database {self._db_path}: {e}") from e
        return self._conn

    def _ensure_schema(self) -> None:
        conn = self._conn
        if conn is None:
            return
        conn.executescript(_SCHEMA_SQL)
        conn.commit()
        # Set initial metadata if missing (new DB)
        cur = conn.execute("SELECT value FROM metadata WHERE key = ?", ("project_root",))
        if cur.fetchone() is None:
            now = datetime.now(timezone.utc).isoformat()
            conn.execute(
                "INSERT OR REPLACE INTO metadata (key, value) VALUES (?, ?), (?, ?), (?, ?)",
                (
                    "project_root",
                    self._project_root.as_posix(),
                    "created_at",
                    now,
                    "schema_version",
                    SCHEMA_VERSION_CURRENT,
                ),
            )
            conn.commit()

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def __enter__(self) -> SQLiteGraph:
        self._connect()
        return self

    def get_metadata(self, key: str) -> str | None:
        conn = self._connect()
        row = conn.execute("SELECT value FROM metadata WHERE key = ?", (key,)).fetchone()
        return row["value"] if row is not None else None

    def set_metadata(self, key: str, value: str) -> None:
        conn = self._connect()
        try:
            conn.execute("INSERT OR REPLACE INTO metadata (key, value) VALUES (?, ?)", (key, value))
            conn.commit()
        except sqlite3.Error as e:
            raise SinkError(f"Failed to set metadata {key!r}: {e}") from e

    # --- graph ---

    def _upsert_node_id(self, conn: sqlite3.Connection, entity: CodeEntity) -> int:
        # project is '' rather than NULL so that UNIQUE treats missing projects as equal
        params = (entity.label, entity.name, entity.project or "")
        conn.execute(
            "INSERT INTO nodes (label, name, project) VALUES (?, ?, ?) "
            "ON CONFLICT(label, name, project) DO NOTHING",
            params,
        )
        row = conn.execute(
            "SELECT id FROM nodes WHERE label = ? AND name = ? AND project = ?",
            params,
        ).fetchone()
        return row["id"]

    def upsert_node(self, entity: CodeEntity) -> CodeEntity:
        conn = self._connect()
        try:
            self._upsert_node_id(conn, entity)
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise SinkError(f"Failed to upsert {entity.label} {entity.key()}: {e}") from e
        return entity

    def upsert_edge(self, relationship: Relationship) -> None:
        conn = self._connect()
        try:
            source_id = self._upsert_node_id(conn, relationship.source)
            target_id = self._upsert_node_id(conn, relationship.target)
            conn.execute(
                "INSERT INTO edges (type, source_id, target_id) VALUES (?, ?, ?) "
                "ON CONFLICT(type, source_id, target_id) DO NOTHING",
                (relationship.relationship_type.value, source_id, target_id),
            )
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise SinkError(
                f"Failed to upsert {relationship.relationship_type.value} edge: {e}"
            ) from e

    def list_nodes(self, entity_type: EntityType | None = None) -> list[CodeEntity]:
        """Return stored nodes, optionally of one type, ordered by label and name."""
        conn = self._connect()
        if entity_type is None:
            rows = conn.execute(
                "SELECT label, name, project FROM nodes ORDER BY label, name, project"
            ).fetchall()
        else:
            rows = conn.execute(
                "SELECT label, name, project FROM nodes WHERE label = ? ORDER BY name, project",
                (entity_type.value,),
            ).fetchall()
        return [_row_to_entity(row) for row in rows]

    def list_edges(
        self, relationship_type: RelationshipType | None = None
    ) -> list[Relationship]:
        """Return stored edges, optionally of one type."""
        conn = self._connect()
        query = """
            SELECT e.type,
                   s.label AS s_label, s.name AS s_name, s.project AS s_project,
                   t.label AS t_label, t.name AS t_name, t.project AS t_project
            FROM edges e
            JOIN nodes s ON s.id = e.source_id
            JOIN nodes t ON t.id = e.target_id
        """
        if relationship_type is None:
            rows = conn.execute(query + " ORDER BY e.id").fetchall()
        else:
            rows = conn.execute(
                query + " WHERE e.type = ? ORDER BY e.id", (relationship_type.value,)
            ).fetchall()
        return [
            Relationship(
                relationship_type=RelationshipType(row["type"]),
                source=_make_entity(row["s_label"], row["s_name"], row["s_project"]),
                target=_make_entity(row["t_label"], row["t_name"], row["t_project"]),
            )
            for row in rows
        ]

    def get_stats(self) -> GraphStats:
        conn = self._connect()
        node_rows = conn.execute(
            "SELECT label, COUNT(*) AS cnt FROM nodes GROUP BY label"
        ).fetchall()
        edge_rows = conn.execute(
            "SELECT type, COUNT(*) AS cnt FROM edges GROUP BY type"
        ).fetchall()
        return GraphStats(
            node_counts={row["label"]: row["cnt"] for row in node_rows},
            edge_counts={row["type"]: row["cnt"] for row in edge_rows},
        )


def _make_entity(label: str, name: str, project: str) -> CodeEntity:
    return CodeEntity(type=EntityType(label), name=name, project=project or None)


def _row_to_entity(row: sqlite3.Row) -> CodeEntity:
    return _make_entity(row["label"], row["name"], row["project"])


_SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS nodes (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    label TEXT NOT NULL,
    name TEXT NOT NULL,
    project TEXT NOT NULL DEFAULT '',
    created_at TEXT DEFAULT (datetime('now')),
    UNIQUE (label, name, project)
);
CREATE INDEX IF NOT EXISTS idx_nodes_label ON nodes(label);

CREATE TABLE IF NOT EXISTS edges (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    type TEXT NOT NULL,
    source_id INTEGER NOT NULL,
    target_id INTEGER NOT NULL,
    created_at TEXT DEFAULT (datetime('now')),
    UNIQUE (type, source_id, target_id),
    FOREIGN KEY (source_id) REFERENCES nodes(id) ON DELETE CASCADE,
    FOREIGN KEY (target_id) REFERENCES nodes(id) ON DELETE CASCADE
);
CREATE INDEX IF NOT EXISTS idx_edges_type ON edges(type);
CREATE INDEX IF NOT EXISTS idx_edges_source ON edges(source_id);
CREATE INDEX IF NOT EXISTS idx_edges_target ON edges(target_id);

-- Project metadata
CREATE TABLE IF NOT EXISTS metadata (
    key TEXT PRIMARY KEY,
    value TEXT
);
"""
