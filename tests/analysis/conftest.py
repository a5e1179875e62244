"""Shared fixtures for analysis tests."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from craprs.analysis import FunctionRecord, ParseResult, RustParser, extract_functions


@pytest.fixture(scope="module")
def rust_parser() -> RustParser:
    return RustParser()


@pytest.fixture
def parse(rust_parser: RustParser) -> Callable[[str], ParseResult]:
    """Parse Rust source text."""

    def _parse(source: str) -> ParseResult:
        return rust_parser.parse(Path("src/lib.rs"), content=source.encode())

    return _parse


@pytest.fixture
def extract(parse: Callable[[str], ParseResult]) -> Callable[..., list[FunctionRecord]]:
    """Extract function records from Rust source text."""

    def _extract(source: str, **kwargs: object) -> list[FunctionRecord]:
        return extract_functions(parse(source), file_path="src/lib.rs", **kwargs)  # type: ignore[arg-type]

    return _extract
