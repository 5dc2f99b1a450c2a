"""Shared utilities: ignore patterns and source file enumeration."""

from rustmap.utils.ignore import (
    build_spec,
    collect_source_files,
    is_ignored,
    load_patterns,
    parse_ignore_file,
)

__all__ = [
    "build_spec",
    "collect_source_files",
    "is_ignored",
    "load_patterns",
    "parse_ignore_file",
]
