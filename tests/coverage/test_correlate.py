"""Tests for correlating line coverage with function ranges."""

import pytest

from craprs.coverage import CoverageReport, FileCoverage, coverage_for_range, find_file_coverage
from craprs.coverage.correlate import _path_matches


class TestPathMatches:
    def test_exact_match(self) -> None:
        assert _path_matches("src/lib.rs", "src/lib.rs")

    def test_no_match(self) -> None:
        assert not _path_matches("src/lib.rs", "src/main.rs")

    def test_leading_dot_slash_ignored(self) -> None:
        assert _path_matches("./src/lib.rs", "src/lib.rs")
        assert _path_matches("src/lib.rs", "./src/lib.rs")

    def test_suffix_match_with_slash(self) -> None:
        # Absolute report path against relative source path
        assert _path_matches("/work/crate/src/lib.rs", "src/lib.rs")
        assert _path_matches("src/lib.rs", "/work/crate/src/lib.rs")

    def test_partial_name_is_not_suffix(self) -> None:
        assert not _path_matches("src/mylib.rs", "lib.rs")


class TestFindFileCoverage:
    def test_exact(self) -> None:
        fc = FileCoverage(path="src/lib.rs")
        report = CoverageReport(source_format="lcov", files={"src/lib.rs": fc})
        assert find_file_coverage(report, "src/lib.rs") is fc

    def test_dot_slash_source_path(self) -> None:
        fc = FileCoverage(path="src/lib.rs")
        report = CoverageReport(source_format="lcov", files={"src/lib.rs": fc})
        assert find_file_coverage(report, "./src/lib.rs") is fc

    def test_absolute_report_path(self) -> None:
        fc = FileCoverage(path="/home/ci/crate/src/net/mod.rs")
        report = CoverageReport(
            source_format="lcov", files={"/home/ci/crate/src/net/mod.rs": fc}
        )
        assert find_file_coverage(report, "src/net/mod.rs") is fc

    def test_longest_suffix_wins(self) -> None:
        short = FileCoverage(path="lib.rs")
        long = FileCoverage(path="/ci/crate/src/lib.rs")
        report = CoverageReport(
            source_format="lcov", files={"lib.rs": short, "/ci/crate/src/lib.rs": long}
        )
        assert find_file_coverage(report, "src/lib.rs") is long

    def test_no_match(self) -> None:
        report = CoverageReport(
            source_format="lcov", files={"src/lib.rs": FileCoverage(path="src/lib.rs")}
        )
        assert find_file_coverage(report, "src/main.rs") is None


class TestCoverageForRange:
    def test_partial(self) -> None:
        fc = FileCoverage(path="src/lib.rs", lines={10: 1, 11: 0, 12: 3})
        assert coverage_for_range(fc, 10, 12) == pytest.approx(0.6667, abs=1e-4)

    def test_full(self) -> None:
        fc = FileCoverage(path="src/lib.rs", lines={1: 1, 2: 1})
        assert coverage_for_range(fc, 1, 2) == 1.0

    def test_none_hit(self) -> None:
        fc = FileCoverage(path="src/lib.rs", lines={1: 0, 2: 0})
        assert coverage_for_range(fc, 1, 2) == 0.0

    def test_lines_outside_range_ignored(self) -> None:
        fc = FileCoverage(path="src/lib.rs", lines={1: 0, 5: 1, 9: 0})
        assert coverage_for_range(fc, 4, 6) == 1.0

    def test_range_without_instrumented_lines_is_unmeasured(self) -> None:
        fc = FileCoverage(path="src/lib.rs", lines={1: 1})
        assert coverage_for_range(fc, 10, 20) is None

    def test_missing_file_is_unmeasured(self) -> None:
        assert coverage_for_range(None, 1, 10) is None

    def test_single_line_range(self) -> None:
        fc = FileCoverage(path="src/lib.rs", lines={3: 2})
        assert coverage_for_range(fc, 3, 3) == 1.0
