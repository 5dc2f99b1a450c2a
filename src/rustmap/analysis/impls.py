"""Detect `impl Trait for Type` blocks."""

from __future__ import annotations

from typing import Optional

from tree_sitter import Node

from .entities import CodeEntity
from .parser import node_text
from .relationships import Relationship, RelationshipType

# Target types that are a single unqualified, non-generic name
_BARE_TYPE_NODES = {"type_identifier", "primitive_type"}


def _last_segment(type_node: Node, source_code: bytes) -> Optional[str]:
    """Simple name of a trait reference: `fmt::Display` -> `Display`, `From<u8>` -> `From`."""
    if type_node.type == "type_identifier":
        return node_text(type_node, source_code)
    if type_node.type == "scoped_type_identifier":
        name = type_node.child_by_field_name("name")
        return node_text(name, source_code) if name is not None else None
    if type_node.type == "generic_type":
        base = type_node.child_by_field_name("type")
        return _last_segment(base, source_code) if base is not None else None
    return None


def link_implementation(
    node: Node, source_code: bytes, project: str
) -> Optional[Relationship]:
    """
    Return `Struct IMPLEMENTS Trait` for a trait impl block, else None.

    Inherent impls (`impl Person {}`) and impls whose target is not a bare
    identifier (`impl<T> Trait for Vec<T>`, `impl Trait for &Foo`,
    `impl Trait for a::Foo`) produce nothing.
    """
    trait_node = node.child_by_field_name("trait")
    if trait_node is None:
        return None
    target = node.child_by_field_name("type")
    if target is None or target.type not in _BARE_TYPE_NODES:
        return None
    trait_name = _last_segment(trait_node, source_code)
    if trait_name is None:
        return None
    return Relationship(
        relationship_type=RelationshipType.IMPLEMENTS,
        source=CodeEntity.struct(node_text(target, source_code), project),
        target=CodeEntity.trait(trait_name, project),
    )
