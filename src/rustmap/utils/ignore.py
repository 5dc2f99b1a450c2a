"""Ignore pattern support: .rustmapignore, .gitignore (gitignore syntax), builtin and additional patterns."""

from __future__ import annotations

from pathlib import Path

from pathspec import PathSpec

RUSTMAPIGNORE = ".rustmapignore"
GITIGNORE = ".gitignore"


def parse_ignore_file(path: Path) -> list[str]:
    """
    Read a gitignore-style file and return non-empty pattern lines (strip comments and blanks).
    """
    if not path.is_file():
        return []
    lines = path.read_text(encoding="utf-8").splitlines()
    patterns: list[str] = []
    for line in lines:
        s = line.strip()
        if not s or s.startswith("#"):
            continue
        patterns.append(s)
    return patterns


def load_patterns(project_root: Path, config: dict) -> list[tuple[str, str]]:
    """
    Build combined pattern list from config and files.

    Returns list of (pattern, source) where source is 'builtin', 'file', 'gitignore', or 'additional'.
    Respects ignore.use_gitignore for reading .gitignore.
    """
    project_root = Path(project_root).resolve()
    ignore_cfg = config.get("ignore", {}) or {}
    use_gitignore = ignore_cfg.get("use_gitignore", True)
    builtin = list(ignore_cfg.get("builtin_patterns", []) or [])
    additional = list(ignore_cfg.get("additional_patterns", []) or [])

    result: list[tuple[str, str]] = []
    for p in builtin:
        result.append((p, "builtin"))
    for p in parse_ignore_file(project_root / RUSTMAPIGNORE):
        result.append((p, "file"))
    if use_gitignore:
        for p in parse_ignore_file(project_root / GITIGNORE):
            result.append((p, "gitignore"))
    for p in additional:
        result.append((p, "additional"))
    return result


def build_spec(patterns: list[str]) -> PathSpec:
    """Build a PathSpec from pattern strings (gitignore-style)."""
    return PathSpec.from_lines("gitignore", patterns)


def is_ignored(
    path: Path | str,
    project_root: Path | str,
    spec: PathSpec,
) -> bool:
    """
    Return True if the path is ignored by the given spec.

    path is made relative to project_root and normalised to posix for matching.
    Paths outside project_root are never ignored.
    """
    path = Path(path).resolve()
    root = Path(project_root).resolve()
    try:
        rel = path.relative_to(root)
    except ValueError:
        return False
    rel_str = rel.as_posix()
    if spec.match_file(rel_str):
        return True
    # Directory-only patterns (e.g. "target/") need the trailing slash to match the directory itself
    if not rel_str.endswith("/") and spec.match_file(rel_str + "/"):
        return True
    return False


def collect_source_files(
    path: Path,
    project_root: Path,
    spec: PathSpec,
    extensions: list[str],
) -> list[Path]:
    """
    Collect source files under path with one of the given extensions, skipping ignored paths.

    Returns paths sorted by posix string so runs are deterministic.
    """
    path = path.resolve()
    suffixes = {ext.lower() for ext in extensions}

    if path.is_file():
        if path.suffix.lower() in suffixes and not is_ignored(path, project_root, spec):
            return [path]
        return []
    if not path.is_dir():
        return []

    files: list[Path] = []
    for entry in path.rglob("*"):
        if not entry.is_file() or entry.suffix.lower() not in suffixes:
            continue
        if is_ignored(entry, project_root, spec):
            continue
        files.append(entry)
    return sorted(files, key=lambda p: p.as_posix())
