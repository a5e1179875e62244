"""CRAP scoring, filtering and ranking.

CRAP = CC² × (1 − coverage)³ + CC

A fully covered function scores exactly its CC; an uncovered one scores
CC² + CC. Unmeasured coverage (no instrumented lines) is scored as 0%:
code nobody has shown to run is treated as unproven.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from craprs.analysis.functions import FunctionRecord


def crap_score(complexity: int, coverage: float | None) -> float:
    """CRAP score for a complexity and a coverage fraction in [0, 1]."""
    cc = float(complexity)
    uncovered = 1.0 - (coverage if coverage is not None else 0.0)
    return cc * cc * uncovered**3 + cc


@dataclass(frozen=True, slots=True)
class ScoredFunction:
    """A function with its complexity and coverage."""

    record: FunctionRecord
    complexity: int
    coverage: float | None  # None = unmeasured

    @property
    def crap(self) -> float:
        return crap_score(self.complexity, self.coverage)


@dataclass(frozen=True, slots=True)
class ReportRow:
    """One ranked line of the report, ready for rendering."""

    name: str
    scope: str
    file_path: str
    line: int
    complexity: int
    coverage_percent: float | None  # None = unmeasured
    crap: float


def filter_scored(
    functions: Iterable[ScoredFunction], filters: Sequence[str] = ()
) -> list[ScoredFunction]:
    """Keep functions whose scope or file path contains any filter substring.

    Matching is case-sensitive; no filters keeps everything.
    """
    if not filters:
        return list(functions)
    return [
        fn
        for fn in functions
        if any(
            needle in fn.record.qualified_scope or needle in fn.record.file_path
            for needle in filters
        )
    ]


def _rank_key(fn: ScoredFunction) -> tuple[float, int, str, str, str, int]:
    record = fn.record
    return (
        -fn.crap,
        -fn.complexity,
        record.qualified_scope,
        record.name,
        record.file_path,
        record.start_line,
    )


def sort_scored(functions: Iterable[ScoredFunction]) -> list[ScoredFunction]:
    """Riskiest first: CRAP desc, then CC desc, then scope and name."""
    return sorted(functions, key=_rank_key)


def to_rows(functions: Iterable[ScoredFunction]) -> list[ReportRow]:
    return [
        ReportRow(
            name=fn.record.name,
            scope=fn.record.qualified_scope,
            file_path=fn.record.file_path,
            line=fn.record.start_line,
            complexity=fn.complexity,
            coverage_percent=None if fn.coverage is None else fn.coverage * 100.0,
            crap=fn.crap,
        )
        for fn in functions
    ]
