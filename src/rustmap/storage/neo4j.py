"""Neo4j implementation of the graph sink."""

from __future__ import annotations

import logging
from typing import Any

from neo4j import GraphDatabase
from neo4j.exceptions import DriverError, Neo4jError

from rustmap.analysis.entities import CodeEntity, EntityType
from rustmap.analysis.relationships import Relationship
from rustmap.storage.base import GraphSinkBase, SinkError
from rustmap.storage.models import GraphStats

logger = logging.getLogger(__name__)

_CONSTRAINTS = [
    "CREATE CONSTRAINT project_name_unique IF NOT EXISTS FOR (p:Project) REQUIRE p.name IS UNIQUE",
    "CREATE CONSTRAINT file_path_unique IF NOT EXISTS FOR (f:File) REQUIRE f.path IS UNIQUE",
    "CREATE CONSTRAINT function_key_unique IF NOT EXISTS FOR (f:Function) REQUIRE (f.name, f.project) IS UNIQUE",
    "CREATE CONSTRAINT struct_key_unique IF NOT EXISTS FOR (s:Struct) REQUIRE (s.name, s.project) IS UNIQUE",
    "CREATE CONSTRAINT trait_key_unique IF NOT EXISTS FOR (t:Trait) REQUIRE (t.name, t.project) IS UNIQUE",
]


def _node_pattern(var: str, entity: CodeEntity) -> tuple[str, dict[str, Any]]:
    """
    Cypher pattern and parameters matching an entity by its key,
    e.g. ("(s:Function {name: $s_name, project: $s_project})", {...}).

    Labels come from EntityType and are never user input.
    """
    key = entity.key()
    props = ", ".join(f"{field}: ${var}_{field}" for field in key)
    params = {f"{var}_{field}": value for field, value in key.items()}
    return f"({var}:{entity.label} {{{props}}})", params


class Neo4jGraph(GraphSinkBase):
    """Graph backend writing MERGE statements to a Neo4j database."""

    def __init__(
        self,
        uri: str,
        user: str,
        password: str,
        database: str | None = None,
    ) -> None:
        self._uri = uri
        self._database = database
        try:
            self._driver = GraphDatabase.driver(uri, auth=(user, password))
            self._driver.verify_connectivity()
        except (Neo4jError, DriverError) as e:
            raise SinkError(f"Failed to connect to Neo4j at {uri}: {e}") from e
        logger.info("Connected to Neo4j at %s", uri)
        self._ensure_constraints()

    def _ensure_constraints(self) -> None:
        """
        Create uniqueness constraints for node keys.

        A rejected constraint is logged, not raised. A failure to reach the
        server closes the driver and raises SinkError.
        """
        try:
            with self._driver.session(database=self._database) as session:
                for constraint in _CONSTRAINTS:
                    try:
                        session.run(constraint).consume()
                        logger.debug("Ensured constraint: %s", constraint)
                    except Neo4jError as e:
                        logger.warning("Failed to create constraint %s: %s", constraint, e)
        except (Neo4jError, DriverError) as e:
            self._driver.close()
            raise SinkError(f"Failed to set up Neo4j constraints at {self._uri}: {e}") from e

    def _run(self, query: str, params: dict[str, Any]) -> list[dict[str, Any]]:
        try:
            with self._driver.session(database=self._database) as session:
                result = session.run(query, params)
                return [record.data() for record in result]
        except (Neo4jError, DriverError) as e:
            raise SinkError(f"Neo4j query failed: {e}") from e

    def close(self) -> None:
        self._driver.close()
        logger.info("Disconnected from Neo4j")

    def upsert_node(self, entity: CodeEntity) -> CodeEntity:
        pattern, params = _node_pattern("n", entity)
        self._run(f"MERGE {pattern}", params)
        return entity

    def upsert_edge(self, relationship: Relationship) -> None:
        source, source_params = _node_pattern("s", relationship.source)
        target, target_params = _node_pattern("t", relationship.target)
        query = (
            f"MERGE {source}\n"
            f"MERGE {target}\n"
            f"MERGE (s)-[:{relationship.relationship_type.value}]->(t)"
        )
        self._run(query, {**source_params, **target_params})

    def get_stats(self) -> GraphStats:
        """Counts over the whole database, restricted to rustmap labels."""
        labels = [entity_type.value for entity_type in EntityType]
        node_rows = self._run(
            "MATCH (n) UNWIND labels(n) AS label WITH label WHERE label IN $labels "
            "RETURN label, count(*) AS cnt",
            {"labels": labels},
        )
        edge_rows = self._run(
            "MATCH (a)-[r]->(b) WHERE any(l IN labels(a) WHERE l IN $labels) "
            "RETURN type(r) AS type, count(*) AS cnt",
            {"labels": labels},
        )
        return GraphStats(
            node_counts={row["label"]: row["cnt"] for row in node_rows},
            edge_counts={row["type"]: row["cnt"] for row in edge_rows},
        )
