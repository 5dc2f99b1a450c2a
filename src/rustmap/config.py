"""Configuration: default paths, constants, and config loading (global + project overrides)."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

# Directory name inside an analyzed project for rustmap storage
RUSTMAP_DIR = ".rustmap"
GRAPH_DB = "graph.db"
CONFIG_FILENAME = "config.json"

BACKENDS = ("memory", "sqlite", "neo4j")

# Environment variables for Neo4j connection settings
_NEO4J_ENV = {
    "uri": "NEO4J_URI",
    "user": "NEO4J_USER",
    "password": "NEO4J_PASS",
}


def _global_config_dir() -> Path:
    return Path.home() / ".rustmap"


def global_config_path() -> Path:
    """Path to global config file (~/.rustmap/config.json)."""
    return _global_config_dir() / CONFIG_FILENAME


def default_config() -> dict[str, Any]:
    """Default configuration."""
    return {
        "backend": "sqlite",
        "extensions": [".rs"],
        "neo4j": {
            "uri": None,
            "user": "neo4j",
            "password": None,
            "database": None,
        },
        "logging": {
            "level": "INFO",
            "file": None,
        },
        "ignore": {
            "use_gitignore": True,
            "builtin_patterns": [".git/", ".rustmap/", "target/"],
            "additional_patterns": [],
        },
    }


def _load_json(path: Path) -> dict[str, Any] | None:
    """Load JSON from path; return None if file missing or invalid."""
    if not path.is_file():
        return None
    try:
        text = path.read_text(encoding="utf-8")
        return json.loads(text)
    except (json.JSONDecodeError, OSError):
        return None


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge override into base recursively. Mutates base; returns base."""
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
    return base


def load_global_config() -> dict[str, Any]:
    """Load global config from ~/.rustmap/config.json. Returns defaults if missing."""
    data = _load_json(global_config_path())
    if data is None:
        return default_config()
    return _deep_merge(default_config(), data)


def project_config_path(project_root: Path) -> Path:
    """Path to project-local config (<project>/.rustmap/config.json)."""
    return project_root / RUSTMAP_DIR / CONFIG_FILENAME


def graph_db_path(project_root: Path) -> Path:
    """Path to the SQLite graph (<project>/.rustmap/graph.db)."""
    return project_root / RUSTMAP_DIR / GRAPH_DB


def load_config(project_root: Path | None = None) -> dict[str, Any]:
    """
    Load merged configuration: defaults + global (~/.rustmap/config.json) + project overrides.

    If project_root is None, only global config (and defaults) are used.
    """
    merged = load_global_config()
    if project_root is not None:
        project_data = _load_json(project_config_path(project_root.resolve()))
        if project_data is not None:
            _deep_merge(merged, project_data)
    return merged


def neo4j_settings(config: dict[str, Any], **overrides: str | None) -> dict[str, Any]:
    """
    Resolve Neo4j connection settings.

    Precedence: explicit overrides (CLI flags) > environment (NEO4J_URI,
    NEO4J_USER, NEO4J_PASS) > config file.
    """
    settings = dict(config.get("neo4j") or {})
    for key, env_name in _NEO4J_ENV.items():
        value = os.environ.get(env_name)
        if value:
            settings[key] = value
    for key, value in overrides.items():
        if value is not None:
            settings[key] = value
    return settings


def get_project_root(path: Path) -> Path:
    """Resolve path to absolute. If it is a file, use its parent."""
    resolved = path.resolve()
    if resolved.is_file():
        return resolved.parent
    return resolved


def resolve_path(path: Path) -> Path:
    """Resolve path to absolute, normalized."""
    return path.resolve()


def project_name(project_root: Path) -> str | None:
    """Name of the analyzed project: the directory name, or None if it has none (e.g. '/')."""
    return project_root.resolve().name or None
