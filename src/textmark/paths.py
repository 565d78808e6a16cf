"""Project layout discovery and scan eligibility."""

from __future__ import annotations

import json
from pathlib import Path

from textmark.config import Settings

NEXT_CONFIG_FILES = ("next.config.js", "next.config.ts", "next.config.mjs")


def find_project_root(resource_path: Path) -> Path:
    """Nearest ancestor of ``resource_path`` holding a Next.js config, else the cwd."""
    for directory in resource_path.parents:
        if any((directory / name).exists() for name in NEXT_CONFIG_FILES):
            return directory
    return Path.cwd()


def find_monorepo_root(start_dir: Path) -> Path:
    """Nearest workspace root at or above ``start_dir``, else ``start_dir`` itself.

    A workspace root holds ``pnpm-workspace.yaml`` or a ``package.json`` with a
    non-empty ``workspaces`` field.
    """
    for directory in (start_dir, *start_dir.parents):
        if (directory / "pnpm-workspace.yaml").exists():
            return directory
        package_json = directory / "package.json"
        if not package_json.exists():
            continue
        try:
            package = json.loads(package_json.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            continue
        if isinstance(package, dict) and package.get("workspaces"):
            return directory
    return start_dir


def skip_reason(path: Path, config: Settings) -> str | None:
    """Why ``path`` must not be scanned, or ``None`` when it is eligible."""
    if path.suffix.lower() not in config.extensions:
        return "not a markup source"
    if any(part in config.skip_dirs for part in path.parts):
        return "dependency or generated file"
    return None


def relative_source_path(path: Path, root: Path) -> str | None:
    """``path`` relative to ``root`` with forward slashes, or ``None`` if outside it."""
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return None


def iter_source_files(paths: list[Path], config: Settings) -> list[Path]:
    """Expand files and directories into the eligible source files, sorted."""
    found: set[Path] = set()
    for path in paths:
        candidates = path.rglob("*") if path.is_dir() else [path]
        for candidate in candidates:
            if candidate.is_file() and skip_reason(candidate, config) is None:
                found.add(candidate.absolute())
    return sorted(found)
