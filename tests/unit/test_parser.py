"""Unit tests for the tree-sitter Rust parser wrapper."""

from __future__ import annotations

from pathlib import Path

import pytest

from rustmap.analysis import ParseError, RustParser


@pytest.fixture
def parser() -> RustParser:
    return RustParser()


def test_parse_returns_source_file(parser: RustParser) -> None:
    root = parser.parse(b"fn main() {}\nstruct Point;\n")
    assert root.type == "source_file"
    assert [c.type for c in root.named_children] == ["function_item", "struct_item"]


def test_parse_error_raises(parser: RustParser) -> None:
    with pytest.raises(ParseError):
        parser.parse(b"fn broken( {")


def test_parse_empty_source(parser: RustParser) -> None:
    root = parser.parse(b"")
    assert root.named_children == []


def test_parse_file_returns_tree_and_bytes(parser: RustParser, tmp_path: Path) -> None:
    rs = tmp_path / "lib.rs"
    rs.write_text("pub trait Greet {}\n")
    root, source = parser.parse_file(rs)
    assert source == b"pub trait Greet {}\n"
    assert root.named_children[0].type == "trait_item"


def test_parse_file_error_names_file(parser: RustParser, tmp_path: Path) -> None:
    rs = tmp_path / "bad.rs"
    rs.write_text("struct {")
    with pytest.raises(ParseError, match="bad.rs"):
        parser.parse_file(rs)


def test_parse_file_missing_raises_oserror(parser: RustParser, tmp_path: Path) -> None:
    with pytest.raises(OSError):
        parser.parse_file(tmp_path / "missing.rs")
