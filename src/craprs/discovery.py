"""Rust source discovery and module paths."""

from __future__ import annotations

from pathlib import Path


def find_rust_sources(src_dir: Path) -> list[Path]:
    """All ``*.rs`` files under ``src_dir``, recursively, sorted."""
    if not src_dir.is_dir():
        return []
    return sorted(path for path in src_dir.rglob("*.rs") if path.is_file())


def source_to_module_path(path: Path, src_dir: Path) -> str:
    """Convert a source path to a ``::``-joined module path.

    Examples:
        src/foo/bar.rs -> foo::bar
        src/foo/mod.rs -> foo
        src/main.rs -> main
    """
    try:
        relative = path.relative_to(src_dir)
    except ValueError:
        relative = path
    parts = list(relative.with_suffix("").parts) if relative.suffix == ".rs" else list(relative.parts)
    if parts and parts[-1] == "mod":
        parts.pop()
    return "::".join(parts)
