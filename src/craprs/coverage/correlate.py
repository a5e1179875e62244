"""Correlate line coverage with function line ranges.

Coverage is attributed by line range, not by statement: every instrumented
line between a function's first and last line counts toward it. Lines of a
nested function therefore also count toward its parent. This is an accepted
approximation; it only needs file and line identity from the report.
"""

from __future__ import annotations

from craprs.coverage.lcov import normalize_path
from craprs.coverage.models import CoverageReport, FileCoverage


def _path_matches(report_path: str, source_path: str) -> bool:
    """Exact match, or one path is a suffix of the other on a ``/`` boundary."""
    a = normalize_path(report_path)
    b = normalize_path(source_path)
    if a == b:
        return True
    return a.endswith("/" + b) or b.endswith("/" + a)


def find_file_coverage(report: CoverageReport, file_path: str) -> FileCoverage | None:
    """Find the coverage entry for a source file.

    Tries the normalized path first, then a suffix match to bridge absolute
    report paths and project-relative source paths.
    """
    exact = report.files.get(normalize_path(file_path))
    if exact is not None:
        return exact

    # Longest report path first so `src/a/lib.rs` beats `lib.rs`
    for report_path in sorted(report.files, key=len, reverse=True):
        if _path_matches(report_path, file_path):
            return report.files[report_path]
    return None


def coverage_for_range(file_cov: FileCoverage | None, start: int, end: int) -> float | None:
    """Fraction (0.0-1.0) of instrumented lines in ``[start, end]`` that were hit.

    Returns None when no line in the range is instrumented: such a function is
    unmeasured, which is different from 0% covered.
    """
    if file_cov is None:
        return None

    instrumented = 0
    hit = 0
    for line in range(start, end + 1):
        count = file_cov.lines.get(line)
        if count is None:
            continue
        instrumented += 1
        if count > 0:
            hit += 1

    if instrumented == 0:
        return None
    return hit / instrumented
