"""rustmap: index the structure of a Rust codebase into a graph store."""

__version__ = "0.1.0"
