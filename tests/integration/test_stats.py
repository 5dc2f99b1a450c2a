"""Integration tests: rustmap stats after analyze, and CLI dispatch."""

from __future__ import annotations

import io
import shutil
from pathlib import Path
from unittest.mock import patch

import pytest

from rustmap.cli import build_parser, main
from rustmap.commands.analyze import run as analyze_run
from rustmap.commands.stats import run as stats_run

REPO_ROOT = Path(__file__).resolve().parent.parent.parent
TESTING_GROUNDS = REPO_ROOT / "testing_grounds"


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    for name in ("NEO4J_URI", "NEO4J_USER", "NEO4J_PASS"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def fixture_project(tmp_path: Path) -> Path:
    if not TESTING_GROUNDS.is_dir():
        pytest.skip("testing_grounds not found")
    dest = tmp_path / "demo"
    shutil.copytree(TESTING_GROUNDS, dest, ignore=shutil.ignore_patterns(".rustmap"))
    return dest


def test_stats_after_analyze(fixture_project: Path) -> None:
    analyze_args = type("Args", (), {"path": fixture_project, "backend": "sqlite", "dry_run": False})()
    analyze_run(analyze_args)

    buf = io.StringIO()
    args_stats = type("Args", (), {"path": fixture_project, "backend": "sqlite"})()
    with patch("rustmap.commands.stats.sys.stdout", buf):
        stats_run(args_stats)
    out = buf.getvalue()
    assert "Graph statistics" in out
    assert "Function:      5" in out
    assert "CONTAINS:      9" in out
    assert "IMPLEMENTS:    2" in out
    assert out.count("total:") == 2
    assert "Last analysis:" in out


def test_stats_without_graph(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    args = type("Args", (), {"path": tmp_path, "backend": "sqlite"})()
    with pytest.raises(SystemExit) as exc:
        stats_run(args)
    assert exc.value.code == 1
    assert "No graph found" in capsys.readouterr().err


def test_stats_memory_backend_is_an_error(tmp_path: Path) -> None:
    args = type("Args", (), {"path": tmp_path, "backend": "memory"})()
    with pytest.raises(SystemExit) as exc:
        stats_run(args)
    assert exc.value.code == 1


def test_neo4j_without_uri_is_an_error(fixture_project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    args = type("Args", (), {"path": fixture_project, "backend": "neo4j", "dry_run": False})()
    with pytest.raises(SystemExit) as exc:
        analyze_run(args)
    assert exc.value.code == 1
    assert "Neo4j URI not set" in capsys.readouterr().err


def test_parser_defaults() -> None:
    args = build_parser().parse_args(["analyze"])
    assert args.run == "analyze"
    assert args.path == Path(".")
    assert args.backend is None
    assert args.dry_run is False


def test_parser_rejects_unknown_backend(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exc:
        build_parser().parse_args(["analyze", "--backend", "postgres"])
    assert exc.value.code == 2
    assert "invalid choice: 'postgres'" in capsys.readouterr().err


@pytest.mark.parametrize("command", ["analyze", "stats"])
def test_subcommand_help(command: str, capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exc:
        build_parser().parse_args([command, "--help"])
    assert exc.value.code == 0
    out = capsys.readouterr().out
    assert f"usage: rustmap {command}" in out
    assert "--verbose" in out


def test_verbose_flag_after_subcommand() -> None:
    args = build_parser().parse_args(["stats", ".", "-v"])
    assert args.verbose is True
    assert args.quiet is False


def test_main_analyze_then_stats(fixture_project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    main(["analyze", str(fixture_project), "--project", "demo", "-q"])
    main(["stats", str(fixture_project)])
    out = capsys.readouterr().out
    assert "Struct:        2" in out
    assert "CALLS:         2" in out
