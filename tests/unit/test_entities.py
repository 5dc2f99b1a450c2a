"""Unit tests for the entity and relationship models."""

from __future__ import annotations

import pytest

from rustmap.analysis import CodeEntity, EntityType, Relationship, RelationshipType


def test_entity_keys() -> None:
    assert CodeEntity.project_node("demo").key() == {"name": "demo"}
    assert CodeEntity.file("/src/main.rs").key() == {"path": "/src/main.rs"}
    assert CodeEntity.function("main", "demo").key() == {"name": "main", "project": "demo"}
    assert CodeEntity.struct("Point", "demo").key() == {"name": "Point", "project": "demo"}
    assert CodeEntity.trait("Greet", "demo").key() == {"name": "Greet", "project": "demo"}


def test_entity_labels() -> None:
    assert [t.value for t in EntityType] == ["Project", "File", "Function", "Struct", "Trait"]
    assert CodeEntity.struct("Point", "demo").label == "Struct"


def test_entities_with_same_key_are_equal() -> None:
    a = CodeEntity.function("foo", "demo")
    b = CodeEntity.function("foo", "demo")
    assert a == b
    assert len({a, b}) == 1
    assert CodeEntity.function("foo", "other") != a


def test_relationship_to_dict() -> None:
    rel = Relationship(
        RelationshipType.CALLS,
        CodeEntity.function("main", "demo"),
        CodeEntity.function("run", "demo"),
    )
    assert rel.to_dict() == {
        "type": "CALLS",
        "source": {"label": "Function", "name": "main", "project": "demo"},
        "target": {"label": "Function", "name": "run", "project": "demo"},
    }


@pytest.mark.parametrize(
    "rel_type, source, target",
    [
        (RelationshipType.CALLS, CodeEntity.function("a", "p"), CodeEntity.struct("B", "p")),
        (RelationshipType.IMPLEMENTS, CodeEntity.trait("T", "p"), CodeEntity.struct("S", "p")),
        (RelationshipType.CONTAINS, CodeEntity.project_node("p"), CodeEntity.file("/x.rs")),
    ],
)
def test_relationship_rejects_wrong_endpoints(rel_type, source, target) -> None:
    with pytest.raises(ValueError, match="cannot link"):
        Relationship(rel_type, source, target)
