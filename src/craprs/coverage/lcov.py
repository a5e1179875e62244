"""LCOV format parser.

LCOV format is a plain text format with records like:
- SF:<source file path>
- DA:<line>,<hit count>[,<checksum>]
- end_of_record

Other records (TN, FN, FNDA, FNF, FNH, BRDA, BRF, BRH, LF, LH, VER) are
accepted and ignored: only line hits feed the CRAP computation.

Used by: cargo-tarpaulin (--out lcov), cargo-llvm-cov (--lcov)
"""

import contextlib
import re
from pathlib import Path

import structlog

from craprs.core.errors import CoverageReportMissing, MalformedCoverageReport
from craprs.coverage.models import CoverageReport, FileCoverage

log = structlog.get_logger()

_RECORD = re.compile(r"^([A-Z]+):(.*)$")
_END_OF_RECORD = "end_of_record"


def normalize_path(raw: str, base_path: Path | None = None) -> str:
    """Canonical form of a source path for coverage lookups.

    Relative to ``base_path`` when the path lies under it, forward slashes,
    no leading ``./``.
    """
    path = raw.strip().replace("\\", "/")
    if base_path is not None:
        # Path not under base_path -> use as-is
        with contextlib.suppress(ValueError):
            path = Path(path).relative_to(base_path).as_posix()
    while path.startswith("./"):
        path = path[2:]
    return path


class LcovParser:
    """Parser for LCOV format coverage files."""

    @property
    def format_id(self) -> str:
        return "lcov"

    def parse(self, path: Path, *, base_path: Path | None = None) -> CoverageReport:
        """Parse LCOV file into CoverageReport.

        Raises:
            MalformedCoverageReport: On unreadable content or a record that
                does not fit the SF/DA/end_of_record structure.
        """
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise MalformedCoverageReport.unreadable(str(path), str(e)) from e

        report = CoverageReport(source_format=self.format_id)
        current_file: FileCoverage | None = None

        for line_no, raw_line in enumerate(content.splitlines(), start=1):
            line = raw_line.strip()
            if not line:
                continue

            if line == _END_OF_RECORD:
                current_file = None
                continue

            match = _RECORD.match(line)
            if match is None:
                raise MalformedCoverageReport.at_line(
                    str(path), line_no, line, "expected KEY:value record"
                )
            key, value = match.groups()

            if key == "SF":
                file_path = normalize_path(value, base_path)
                if not file_path:
                    raise MalformedCoverageReport.at_line(
                        str(path), line_no, line, "empty source file path"
                    )
                # Repeated sections for one file (several test binaries) merge
                current_file = report.files.setdefault(file_path, FileCoverage(path=file_path))

            elif key == "DA":
                if current_file is None:
                    raise MalformedCoverageReport.at_line(
                        str(path), line_no, line, "line record outside SF section"
                    )
                line_num, hits = self._parse_line_data(value)
                if line_num is None or hits is None:
                    raise MalformedCoverageReport.at_line(
                        str(path), line_no, line, "expected DA:<line>,<hits>"
                    )
                current_file.record(line_num, hits)

        if not report.files:
            log.warning("coverage_report_empty", path=str(path))

        return report

    @staticmethod
    def _parse_line_data(value: str) -> tuple[int | None, int | None]:
        parts = value.split(",")
        if len(parts) < 2:
            return None, None
        try:
            line_num = int(parts[0])
            # Handle '-' as 0 (some tools use this)
            hits = 0 if parts[1] == "-" else int(parts[1])
        except ValueError:
            return None, None
        if line_num < 1 or hits < 0:
            return None, None
        return line_num, hits


def load_coverage_map(
    path: Path, *, base_path: Path | None = None, skipped: bool = False
) -> CoverageReport:
    """Load the project's LCOV report.

    Args:
        path: Report location.
        base_path: Project directory; report paths under it become relative.
        skipped: Whether generation was skipped (only changes the error hint).

    Raises:
        CoverageReportMissing: The report file does not exist.
        MalformedCoverageReport: The report cannot be parsed.
    """
    if not path.is_file():
        raise CoverageReportMissing.at(str(path), skipped=skipped)

    report = LcovParser().parse(path, base_path=base_path)
    log.info(
        "coverage_loaded",
        path=str(path),
        files=len(report.files),
        lines_found=report.lines_found,
        lines_hit=report.lines_hit,
    )
    return report
