"""Find calls and struct instantiations inside a function body.

The walk covers a fixed subset of Rust syntax: let initializers, expression
statements, block tail expressions, nested blocks and if/else chains. Calls
are recorded only when the callee is a bare identifier and struct literals
only when the type is a bare identifier. Every other node kind contributes
nothing, so interactions inside loops, matches, closures, method calls or
call arguments are not discovered.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, List

from tree_sitter import Node

from .parser import node_text


class InteractionKind(Enum):
    CALL = "call"
    INSTANTIATE = "instantiate"


@dataclass(frozen=True)
class Interaction:
    """A call to a function (`foo()`) or an instantiation of a struct (`Point { .. }`)."""

    kind: InteractionKind
    name: str

    @classmethod
    def call(cls, name: str) -> Interaction:
        return cls(InteractionKind.CALL, name)

    @classmethod
    def instantiate(cls, name: str) -> Interaction:
        return cls(InteractionKind.INSTANTIATE, name)


_Handler = Callable[[Node, bytes, List[Interaction]], None]


def find_interactions(body: Node, source_code: bytes) -> List[Interaction]:
    """
    Return the interactions in a function body block, in pre-order.

    Args:
        body: The `block` node of a function_item.
        source_code: Source bytes the tree was parsed from.
    """
    interactions: List[Interaction] = []
    _visit_block(body, source_code, interactions)
    return interactions


def _visit_block(block: Node, source_code: bytes, out: List[Interaction]) -> None:
    for stmt in block.named_children:
        _visit_statement(stmt, source_code, out)


def _visit_statement(stmt: Node, source_code: bytes, out: List[Interaction]) -> None:
    if stmt.type == "let_declaration":
        value = stmt.child_by_field_name("value")
        if value is not None:
            _visit_expression(value, source_code, out)
    elif stmt.type == "expression_statement":
        for child in stmt.named_children:
            _visit_expression(child, source_code, out)
    else:
        # A block's tail expression is a bare child rather than an
        # expression_statement. Items, attributes and comments fall through
        # to the empty default of the expression dispatch.
        _visit_expression(stmt, source_code, out)


def _visit_expression(expr: Node, source_code: bytes, out: List[Interaction]) -> None:
    handler = _EXPRESSION_HANDLERS.get(expr.type)
    if handler is not None:
        handler(expr, source_code, out)


def _visit_call(expr: Node, source_code: bytes, out: List[Interaction]) -> None:
    func = expr.child_by_field_name("function")
    if func is not None and func.type == "identifier":
        out.append(Interaction.call(node_text(func, source_code)))


def _visit_struct_literal(expr: Node, source_code: bytes, out: List[Interaction]) -> None:
    name = expr.child_by_field_name("name")
    if name is not None and name.type == "type_identifier":
        out.append(Interaction.instantiate(node_text(name, source_code)))


def _visit_if(expr: Node, source_code: bytes, out: List[Interaction]) -> None:
    consequence = expr.child_by_field_name("consequence")
    if consequence is not None:
        _visit_block(consequence, source_code, out)
    alternative = expr.child_by_field_name("alternative")
    if alternative is not None:
        # else_clause wraps either a block or another if_expression
        for child in alternative.named_children:
            _visit_expression(child, source_code, out)


_EXPRESSION_HANDLERS: dict[str, _Handler] = {
    "call_expression": _visit_call,
    "struct_expression": _visit_struct_literal,
    "block": _visit_block,
    "if_expression": _visit_if,
}
