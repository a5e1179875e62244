"""Tree-sitter parsing for Rust sources.

Tree-sitter never rejects input outright: syntax errors surface as ``ERROR``
or missing nodes inside an otherwise complete tree. ``ParseResult`` records
how many such nodes exist so callers can decide whether the file is usable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import tree_sitter
import tree_sitter_rust


@dataclass
class ParseResult:
    """Result of parsing a file."""

    tree: Any  # Tree-sitter Tree (not serializable)
    root_node: Any  # Tree-sitter Node
    error_count: int
    line_count: int
    first_error_line: int | None = None  # 1-based

    @property
    def is_valid(self) -> bool:
        return self.error_count == 0


def _line_count(content: bytes) -> int:
    if not content:
        return 0
    return content.count(b"\n") + (0 if content.endswith(b"\n") else 1)


@dataclass
class RustParser:
    """
    Tree-sitter parser for Rust source files.

    Usage::

        parser = RustParser()
        result = parser.parse(Path("src/lib.rs"))
        if result.is_valid:
            walk(result.root_node)
    """

    _parser: Any = field(default=None, repr=False)
    _language: Any = field(default=None, repr=False)

    def __post_init__(self) -> None:
        """Initialize the parser."""
        self._language = tree_sitter.Language(tree_sitter_rust.language())
        self._parser = tree_sitter.Parser()
        self._parser.language = self._language

    def parse(self, path: Path, content: bytes | None = None) -> ParseResult:
        """
        Parse a Rust file with Tree-sitter.

        Args:
            path: Path to file (read when content is None)
            content: File content as bytes. If None, reads from path.

        Returns:
            ParseResult with tree and error info.
        """
        if content is None:
            content = path.read_bytes()

        tree = self._parser.parse(content)

        error_count = 0
        first_error_line: int | None = None

        stack = [tree.root_node]
        while stack:
            node = stack.pop()
            if node.type == "ERROR" or node.is_missing:
                error_count += 1
                line = node.start_point[0] + 1
                if first_error_line is None or line < first_error_line:
                    first_error_line = line
            stack.extend(node.children)

        return ParseResult(
            tree=tree,
            root_node=tree.root_node,
            error_count=error_count,
            line_count=_line_count(content),
            first_error_line=first_error_line,
        )
