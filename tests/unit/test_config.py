"""Unit tests for config (defaults, merging, Neo4j settings precedence, project name)."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from rustmap.config import (
    RUSTMAP_DIR,
    default_config,
    get_project_root,
    graph_db_path,
    load_config,
    neo4j_settings,
    project_config_path,
    project_name,
    resolve_path,
)


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point HOME at an empty directory so no global config leaks into tests."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    for name in ("NEO4J_URI", "NEO4J_USER", "NEO4J_PASS"):
        monkeypatch.delenv(name, raising=False)
    return home


def test_default_config() -> None:
    cfg = default_config()
    assert cfg["backend"] == "sqlite"
    assert cfg["extensions"] == [".rs"]
    assert "target/" in cfg["ignore"]["builtin_patterns"]
    assert any(RUSTMAP_DIR in p for p in cfg["ignore"]["builtin_patterns"])


def test_resolve_path(tmp_path: Path) -> None:
    p = tmp_path / "sub" / ".." / "sub"
    assert resolve_path(p) == (tmp_path / "sub").resolve()


def test_get_project_root_file(tmp_path: Path) -> None:
    f = tmp_path / "main.rs"
    f.write_text("fn main() {}")
    assert get_project_root(f) == tmp_path.resolve()


def test_get_project_root_dir(tmp_path: Path) -> None:
    d = tmp_path / "crate"
    d.mkdir()
    assert get_project_root(d) == d.resolve()


def test_project_name_is_directory_name(tmp_path: Path) -> None:
    d = tmp_path / "my_crate"
    d.mkdir()
    assert project_name(d) == "my_crate"


def test_project_name_of_filesystem_root_is_none() -> None:
    assert project_name(Path("/")) is None


def test_graph_db_path(tmp_path: Path) -> None:
    assert graph_db_path(tmp_path) == tmp_path / RUSTMAP_DIR / "graph.db"


def test_project_config_overrides_defaults(tmp_path: Path) -> None:
    path = project_config_path(tmp_path)
    path.parent.mkdir(parents=True)
    path.write_text(json.dumps({"backend": "neo4j", "neo4j": {"uri": "bolt://db:7687"}}))
    cfg = load_config(tmp_path)
    assert cfg["backend"] == "neo4j"
    assert cfg["neo4j"]["uri"] == "bolt://db:7687"
    # Untouched nested keys keep their defaults
    assert cfg["neo4j"]["user"] == "neo4j"


def test_global_config_is_merged(isolated_home: Path, tmp_path: Path) -> None:
    (isolated_home / ".rustmap").mkdir()
    (isolated_home / ".rustmap" / "config.json").write_text(json.dumps({"logging": {"level": "DEBUG"}}))
    cfg = load_config(None)
    assert cfg["logging"]["level"] == "DEBUG"
    assert cfg["backend"] == "sqlite"


def test_invalid_project_config_is_ignored(tmp_path: Path) -> None:
    path = project_config_path(tmp_path)
    path.parent.mkdir(parents=True)
    path.write_text("{not json")
    assert load_config(tmp_path) == default_config()


def test_neo4j_settings_precedence(monkeypatch: pytest.MonkeyPatch) -> None:
    cfg = default_config()
    cfg["neo4j"]["uri"] = "bolt://from-config:7687"
    cfg["neo4j"]["password"] = "config-pass"
    assert neo4j_settings(cfg)["uri"] == "bolt://from-config:7687"

    monkeypatch.setenv("NEO4J_URI", "bolt://from-env:7687")
    monkeypatch.setenv("NEO4J_PASS", "env-pass")
    settings = neo4j_settings(cfg)
    assert settings["uri"] == "bolt://from-env:7687"
    assert settings["password"] == "env-pass"

    settings = neo4j_settings(cfg, uri="bolt://from-cli:7687", password=None)
    assert settings["uri"] == "bolt://from-cli:7687"
    assert settings["password"] == "env-pass"
