"""CLI entry point: argument parsing and subcommand dispatch."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from rustmap import __version__
from rustmap.config import BACKENDS, load_config, resolve_path


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    """
    Configure the rustmap logger: level from --verbose/--quiet or config, console handler,
    optional file handler from config. No secrets in log format.
    """
    config = load_config(None)
    log_cfg = config.get("logging") or {}
    if verbose:
        level_name = "DEBUG"
    elif quiet:
        level_name = "ERROR"
    else:
        level_name = (log_cfg.get("level") or "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    root = logging.getLogger("rustmap")
    root.setLevel(level)
    if not root.handlers:
        fmt = logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s")
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(fmt)
        root.addHandler(console)
        log_file = log_cfg.get("file")
        if log_file:
            try:
                fh = logging.FileHandler(Path(log_file).expanduser(), encoding="utf-8")
                fh.setFormatter(fmt)
                root.addHandler(fh)
            except OSError:
                root.warning("Cannot open log file %s; logging to console only", log_file)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rustmap",
        description="Index the structure of a Rust codebase into a graph store.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    log_group = parser.add_mutually_exclusive_group()
    log_group.add_argument("-v", "--verbose", action="store_true", help="Verbose (DEBUG) output.")
    log_group.add_argument("-q", "--quiet", action="store_true", help="Quiet (errors only).")

    # Same flags on subparsers so "rustmap analyze . -v" works; exclusivity is checked only at the top level
    global_flags = argparse.ArgumentParser(add_help=False)
    global_flags.add_argument("-v", "--verbose", action="store_true", help="Verbose (DEBUG) output.")
    global_flags.add_argument("-q", "--quiet", action="store_true", help="Quiet (errors only).")

    # Backend and Neo4j connection flags shared by analyze and stats
    store_flags = argparse.ArgumentParser(add_help=False)
    store_flags.add_argument(
        "--backend",
        "-b",
        choices=BACKENDS,
        help="Graph store (default: config 'backend', else sqlite).",
    )
    store_flags.add_argument("--uri", help="Neo4j URI (default: $NEO4J_URI).")
    store_flags.add_argument("--user", "-u", help="Neo4j user (default: $NEO4J_USER).")
    store_flags.add_argument("--password", help="Neo4j password (default: $NEO4J_PASS).")
    store_flags.add_argument("--database", help="Neo4j database name (default: server default).")

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND", required=True)

    # analyze
    p_analyze = subparsers.add_parser(
        "analyze",
        help="Extract files, functions, structs, traits and their relationships.",
        parents=[global_flags, store_flags],
    )
    p_analyze.add_argument("path", type=Path, nargs="?", default=Path("."), help="Rust project directory or file (default: .).")
    p_analyze.add_argument("--project", "-p", type=str, help="Project name (default: directory name).")
    p_analyze.add_argument(
        "--dry-run",
        action="store_true",
        help="List the files that would be analyzed without writing anything.",
    )
    p_analyze.set_defaults(run="analyze")

    # stats
    p_stats = subparsers.add_parser(
        "stats",
        help="Show node and edge counts of the stored graph.",
        parents=[global_flags, store_flags],
    )
    p_stats.add_argument("path", type=Path, nargs="?", default=Path("."), help="Project path (default: .).")
    p_stats.set_defaults(run="stats")

    return parser


def main(argv: list[str] | None = None) -> None:
    # .env supplies NEO4J_* settings when they are not exported
    load_dotenv()
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(
        verbose=getattr(args, "verbose", False),
        quiet=getattr(args, "quiet", False),
    )
    run = getattr(args, "run", None)

    if hasattr(args, "path"):
        args.path = resolve_path(args.path)

    if run == "analyze":
        from rustmap.commands.analyze import run as cmd_run
    elif run == "stats":
        from rustmap.commands.stats import run as cmd_run
    else:
        parser.print_help()
        sys.exit(0)

    cmd_run(args)
