"""CRAP analysis pipeline.

Usage::

    config = load_config(project_dir, coverage={"skip": True})
    result = run_analysis(project_dir, config, filters=["parser"])
    print(format_report(result.rows))

Order of work:
1. Check the source directory (SourceNotFound aborts before anything runs)
2. Regenerate the LCOV report unless skipped
3. Load the coverage map
4. Parse, extract and score every source file; unparseable files are
   skipped and reported as warnings, unless none parses at all
5. Filter, rank and limit
"""

from __future__ import annotations

import time
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

import structlog

from craprs.analysis import RustParser, compute_complexity, extract_functions
from craprs.config.models import CrapConfig
from craprs.core.errors import ParseFailure, SourceNotFound
from craprs.coverage import (
    CoverageReport,
    coverage_for_range,
    find_file_coverage,
    generate_coverage,
    load_coverage_map,
    normalize_path,
)
from craprs.discovery import find_rust_sources, source_to_module_path
from craprs.scoring import ReportRow, ScoredFunction, filter_scored, sort_scored, to_rows

log = structlog.get_logger()


@dataclass
class AnalysisResult:
    """Ranked rows plus everything needed to explain them."""

    rows: list[ReportRow] = field(default_factory=list)
    warnings: list[ParseFailure] = field(default_factory=list)
    files_analyzed: int = 0
    functions_scored: int = 0  # before filters and limit
    coverage_lines_found: int = 0
    coverage_lines_hit: int = 0
    elapsed_sec: float = 0.0


def score_file(
    parser: RustParser,
    path: Path,
    *,
    file_path: str,
    module_path: Sequence[str],
    coverage: CoverageReport,
    include_tests: bool = False,
) -> list[ScoredFunction]:
    """Score every function of one source file.

    Raises:
        ParseFailure: The file cannot be read or has syntax errors.
    """
    try:
        result = parser.parse(path)
    except OSError as e:
        raise ParseFailure.in_file(file_path, str(e)) from e

    if not result.is_valid:
        raise ParseFailure.in_file(
            file_path,
            f"{result.error_count} syntax error(s)",
            line=result.first_error_line,
        )

    records = extract_functions(
        result, file_path=file_path, module_path=module_path, include_tests=include_tests
    )
    file_cov = find_file_coverage(coverage, file_path)
    if file_cov is None and records:
        log.debug("coverage_file_missing", path=file_path)

    scored = [
        ScoredFunction(
            record=record,
            complexity=compute_complexity(record.body),
            coverage=coverage_for_range(file_cov, record.start_line, record.end_line),
        )
        for record in records
    ]
    log.debug("file_scored", path=file_path, functions=len(scored))
    return scored


def run_analysis(
    project_dir: Path,
    config: CrapConfig,
    filters: Sequence[str] = (),
) -> AnalysisResult:
    """Run the full pipeline for one Cargo project.

    Args:
        project_dir: Project root; source and report paths are relative to it.
        config: Resolved configuration.
        filters: Module/file substrings; empty keeps every function.

    Raises:
        SourceNotFound: The source directory does not exist.
        ManifestNotFound: Coverage generation requested without a Cargo.toml.
        CoverageToolFailure: The coverage tool failed.
        CoverageReportMissing: No LCOV report to read.
        MalformedCoverageReport: The LCOV report cannot be parsed.
        ParseFailure: There were source files and none of them parsed.
    """
    start = time.perf_counter()
    project_dir = project_dir.resolve()

    src_dir = project_dir / config.analysis.src_dir
    if not src_dir.is_dir():
        raise SourceNotFound.at(str(src_dir))

    cov = config.coverage
    if cov.skip:
        report_path = project_dir / cov.lcov_path
    else:
        report_path = generate_coverage(
            project_dir, tool=cov.tool, lcov_path=cov.lcov_path, timeout_sec=cov.timeout_sec
        )
    coverage = load_coverage_map(report_path, base_path=project_dir, skipped=cov.skip)

    parser = RustParser()
    result = AnalysisResult(
        coverage_lines_found=coverage.lines_found,
        coverage_lines_hit=coverage.lines_hit,
    )
    scored: list[ScoredFunction] = []

    sources = find_rust_sources(src_dir)
    for path in sources:
        file_path = normalize_path(str(path), project_dir)
        module_path = [seg for seg in source_to_module_path(path, src_dir).split("::") if seg]
        try:
            scored.extend(
                score_file(
                    parser,
                    path,
                    file_path=file_path,
                    module_path=module_path,
                    coverage=coverage,
                    include_tests=config.analysis.include_tests,
                )
            )
        except ParseFailure as failure:
            log.info("parse_failure", path=file_path, reason=failure.message)
            result.warnings.append(failure)
            continue
        result.files_analyzed += 1

    if sources and result.files_analyzed == 0:
        raise ParseFailure.whole_tree(str(src_dir), result.warnings)


    ranked = sort_scored(filter_scored(scored, filters))
    if config.report.limit is not None:
        ranked = ranked[: config.report.limit]

    result.rows = to_rows(ranked)
    result.functions_scored = len(scored)
    result.elapsed_sec = time.perf_counter() - start

    log.info(
        "analysis_done",
        files=result.files_analyzed,
        functions=result.functions_scored,
        rows=len(result.rows),
        warnings=len(result.warnings),
        elapsed_s=round(result.elapsed_sec, 3),
    )
    return result
