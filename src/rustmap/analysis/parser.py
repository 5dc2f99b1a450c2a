"""Rust parser using tree-sitter."""

from __future__ import annotations

from pathlib import Path
from typing import Tuple

import tree_sitter_rust as tsrust
from tree_sitter import Language, Node, Parser


class ParseError(Exception):
    """The source could not be parsed into an error-free syntax tree."""


def node_text(node: Node, source_code: bytes) -> str:
    """Get text content of a node."""
    return source_code[node.start_byte : node.end_byte].decode("utf-8", errors="replace")


class RustParser:
    """Parse Rust source into a tree-sitter syntax tree."""

    def __init__(self) -> None:
        self._language = Language(tsrust.language())
        self._parser = Parser(self._language)

    def parse(self, source_code: bytes) -> Node:
        """
        Parse Rust source and return the root (source_file) node.

        Raises:
            ParseError: If the tree contains syntax errors. A file that is not
                syntactically valid Rust is never partially analyzed.
        """
        tree = self._parser.parse(source_code)
        root = tree.root_node
        if root is None or root.has_error:
            raise ParseError("syntax error in Rust source")
        return root

    def parse_file(self, file_path: str | Path) -> Tuple[Node, bytes]:
        """
        Read and parse a Rust file.

        Returns:
            Tuple of (root node, source bytes). Identifier text is sliced out of
            the source bytes, so callers need both.

        Raises:
            OSError: If the file cannot be read.
            ParseError: If the file does not parse cleanly.
        """
        source_code = Path(file_path).read_bytes()
        try:
            return self.parse(source_code), source_code
        except ParseError as e:
            raise ParseError(f"{Path(file_path).as_posix()}: {e}") from e
