"""Tests for CRAP scoring, filtering and ranking."""

from __future__ import annotations

import pytest

from craprs.analysis import FunctionRecord
from craprs.scoring import ScoredFunction, crap_score, filter_scored, sort_scored, to_rows


def _scored(
    name: str,
    complexity: int,
    coverage: float | None,
    *,
    scope: tuple[str, ...] = (),
    file_path: str = "src/lib.rs",
    line: int = 1,
) -> ScoredFunction:
    record = FunctionRecord(
        name=name, scope=scope, file_path=file_path, start_line=line, end_line=line + 1
    )
    return ScoredFunction(record=record, complexity=complexity, coverage=coverage)


class TestCrapScore:
    def test_fully_covered_equals_complexity(self) -> None:
        assert crap_score(5, 1.0) == 5.0

    def test_uncovered(self) -> None:
        assert crap_score(5, 0.0) == 30.0

    def test_partial(self) -> None:
        assert crap_score(8, 0.45) == pytest.approx(18.648)

    def test_unmeasured_scores_as_uncovered(self) -> None:
        assert crap_score(4, None) == crap_score(4, 0.0) == 20.0

    def test_trivial_function(self) -> None:
        assert crap_score(1, 0.0) == 2.0
        assert crap_score(1, 1.0) == 1.0

    @pytest.mark.parametrize("complexity", [1, 2, 5, 13, 40])
    @pytest.mark.parametrize("coverage", [0.0, 0.25, 0.5, 0.9, 1.0])
    def test_never_below_complexity(self, complexity: int, coverage: float) -> None:
        assert crap_score(complexity, coverage) >= complexity

    def test_monotonic_in_complexity(self) -> None:
        scores = [crap_score(cc, 0.5) for cc in range(1, 20)]
        assert scores == sorted(scores)

    def test_monotonic_in_coverage(self) -> None:
        scores = [crap_score(6, cov / 10) for cov in range(11)]
        assert scores == sorted(scores, reverse=True)

    def test_scored_function_property(self) -> None:
        assert _scored("f", 3, 1.0).crap == 3.0


class TestSortScored:
    def test_crap_descending(self) -> None:
        fns = [_scored("low", 1, 1.0), _scored("high", 5, 0.0), _scored("mid", 3, 0.5)]
        assert [fn.record.name for fn in sort_scored(fns)] == ["high", "mid", "low"]

    def test_equal_crap_orders_by_complexity(self) -> None:
        # 2² × 1 + 2 == 6 and 6 × 0 + 6 == 6
        simple = _scored("simple", 2, 0.0)
        branchy = _scored("branchy", 6, 1.0)
        ranked = sort_scored([simple, branchy])
        assert ranked[0].crap == ranked[1].crap == 6.0
        assert [fn.record.name for fn in ranked] == ["branchy", "simple"]

    def test_full_tie_orders_by_scope_then_name(self) -> None:
        fns = [
            _scored("run", 10, 1.0, scope=("zeta",)),
            _scored("small", 5, 1.0),
            _scored("run", 10, 1.0, scope=("alpha",)),
        ]
        ranked = sort_scored(fns)
        assert [fn.crap for fn in ranked] == [10.0, 10.0, 5.0]
        assert [fn.record.qualified_scope for fn in ranked[:2]] == ["alpha", "zeta"]

    def test_deterministic(self) -> None:
        fns = [_scored(f"f{i}", 2, 0.5, line=i) for i in range(5)]
        assert sort_scored(fns) == sort_scored(list(reversed(fns)))


class TestFilterScored:
    def test_no_filters_keeps_everything(self) -> None:
        fns = [_scored("a", 1, None), _scored("b", 1, None)]
        assert filter_scored(fns, []) == fns

    def test_matches_scope_substring(self) -> None:
        fns = [
            _scored("x", 1, None, scope=("a", "coverage")),
            _scored("y", 1, None, scope=("a", "other")),
        ]
        assert [fn.record.name for fn in filter_scored(fns, ["coverage"])] == ["x"]

    def test_matches_file_path(self) -> None:
        fns = [
            _scored("x", 1, None, file_path="src/net/mod.rs"),
            _scored("y", 1, None, file_path="src/lib.rs"),
        ]
        assert [fn.record.name for fn in filter_scored(fns, ["net/"])] == ["x"]

    def test_any_filter_matches(self) -> None:
        fns = [
            _scored("x", 1, None, scope=("wire",)),
            _scored("y", 1, None, scope=("cli",)),
            _scored("z", 1, None, scope=("db",)),
        ]
        assert [fn.record.name for fn in filter_scored(fns, ["wire", "cli"])] == ["x", "y"]

    def test_case_sensitive(self) -> None:
        fns = [_scored("x", 1, None, scope=("Wire",))]
        assert filter_scored(fns, ["wire"]) == []


class TestToRows:
    def test_row_fields(self) -> None:
        fn = _scored("decode", 3, 0.5, scope=("wire", "Frame"), file_path="src/wire.rs", line=12)
        (row,) = to_rows([fn])
        assert row.name == "decode"
        assert row.scope == "wire::Frame"
        assert row.file_path == "src/wire.rs"
        assert row.line == 12
        assert row.complexity == 3
        assert row.coverage_percent == 50.0
        assert row.crap == pytest.approx(4.125)

    def test_unmeasured_row(self) -> None:
        (row,) = to_rows([_scored("f", 2, None)])
        assert row.coverage_percent is None
        assert row.crap == 6.0
