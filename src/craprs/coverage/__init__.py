"""LCOV coverage loading, generation and per-function correlation.

Usage:
    from craprs.coverage import load_coverage_map, find_file_coverage, coverage_for_range

    report = load_coverage_map(Path("lcov.info"), base_path=project_dir)
    file_cov = find_file_coverage(report, "src/lib.rs")
    fraction = coverage_for_range(file_cov, 10, 24)  # None when unmeasured
"""

from craprs.coverage.correlate import coverage_for_range, find_file_coverage
from craprs.coverage.lcov import LcovParser, load_coverage_map, normalize_path
from craprs.coverage.models import CoverageReport, FileCoverage
from craprs.coverage.runner import generate_coverage

__all__ = [
    # Models
    "CoverageReport",
    "FileCoverage",
    # Loading
    "LcovParser",
    "load_coverage_map",
    "normalize_path",
    # Correlation
    "coverage_for_range",
    "find_file_coverage",
    # Generation
    "generate_coverage",
]
