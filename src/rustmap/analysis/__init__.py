"""Static analysis of Rust sources into graph records."""

from .entities import CodeEntity, EntityType
from .extractor import extract_declarations
from .impls import link_implementation
from .interactions import Interaction, InteractionKind, find_interactions
from .parser import ParseError, RustParser
from .relationships import Relationship, RelationshipType

__all__ = [
    "CodeEntity",
    "EntityType",
    "Interaction",
    "InteractionKind",
    "ParseError",
    "Relationship",
    "RelationshipType",
    "RustParser",
    "extract_declarations",
    "find_interactions",
    "link_implementation",
]
