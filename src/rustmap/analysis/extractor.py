"""Turn the top-level declarations of one Rust file into graph records."""

from __future__ import annotations

import logging
from typing import List

from tree_sitter import Node

from .entities import CodeEntity
from .impls import link_implementation
from .interactions import InteractionKind, find_interactions
from .parser import node_text
from .relationships import Relationship, RelationshipType

logger = logging.getLogger(__name__)


def extract_declarations(
    root: Node, source_code: bytes, file_path: str, project: str
) -> List[Relationship]:
    """
    Extract records for functions, structs, traits and trait impls in a file.

    Only top-level declarations are considered; everything else (mod, const,
    static, type, enum, union, use, macros) is skipped. Records are returned
    in source order.

    Args:
        root: The source_file node of a successfully parsed file.
        source_code: Source bytes the tree was parsed from.
        file_path: Key of the File node (normalized posix path).
        project: Project name that scopes function/struct/trait keys.
    """
    file_entity = CodeEntity.file(file_path)
    records: List[Relationship] = []

    for item in root.named_children:
        if item.type == "function_item":
            records.extend(_extract_function(item, source_code, file_entity, project))
        elif item.type == "struct_item":
            name = _item_name(item, source_code)
            if name:
                records.append(_contains(file_entity, CodeEntity.struct(name, project)))
        elif item.type == "trait_item":
            name = _item_name(item, source_code)
            if name:
                records.append(_contains(file_entity, CodeEntity.trait(name, project)))
        elif item.type == "impl_item":
            link = link_implementation(item, source_code, project)
            if link is not None:
                records.append(link)

    logger.debug("%s: %d record(s)", file_path, len(records))
    return records


def _item_name(item: Node, source_code: bytes) -> str | None:
    name_node = item.child_by_field_name("name")
    if name_node is None:
        return None
    return node_text(name_node, source_code)


def _contains(file_entity: CodeEntity, entity: CodeEntity) -> Relationship:
    return Relationship(
        relationship_type=RelationshipType.CONTAINS,
        source=file_entity,
        target=entity,
    )


def _extract_function(
    item: Node, source_code: bytes, file_entity: CodeEntity, project: str
) -> List[Relationship]:
    """Function containment plus one CALLS/INSTANTIATES edge per interaction in its body."""
    name = _item_name(item, source_code)
    if not name:
        return []
    caller = CodeEntity.function(name, project)
    records = [_contains(file_entity, caller)]

    body = item.child_by_field_name("body")
    if body is None:
        return records
    for interaction in find_interactions(body, source_code):
        if interaction.kind is InteractionKind.CALL:
            records.append(
                Relationship(
                    relationship_type=RelationshipType.CALLS,
                    source=caller,
                    target=CodeEntity.function(interaction.name, project),
                )
            )
        else:
            records.append(
                Relationship(
                    relationship_type=RelationshipType.INSTANTIATES,
                    source=caller,
                    target=CodeEntity.struct(interaction.name, project),
                )
            )
    return records
