"""Report rendering.

Text layout::

    CRAP Report
    ===========
    Function                       Module                                CC       Cov%     CRAP
    -------------------------------------------------------------------------------------------
    parse_args                     cli                                    8      45.0%     18.6
    decode                         wire::Frame                            3 unmeasured     12.0

JSON output schema for build_summary:
{
    "rows": [
        {"function": str, "module": str, "file": str, "line": int,
         "complexity": int, "coverage_percent": float | null, "crap": float},
        ...
    ],
    "warnings": [<error dict>, ...],
    "files_analyzed": int,
    "functions_scored": int,
    "coverage_lines_found": int,
    "coverage_lines_hit": int
}
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from craprs.core.formatting import format_coverage
from craprs.scoring import ReportRow

if TYPE_CHECKING:
    from craprs.ops import AnalysisResult

_HEADER = f"{'Function':<30} {'Module':<35} {'CC':>4} {'Cov%':>10} {'CRAP':>8}"


def format_row(row: ReportRow) -> str:
    return (
        f"{row.name:<30} {row.scope:<35} {row.complexity:>4} "
        f"{format_coverage(row.coverage_percent):>10} {row.crap:>8.1f}"
    )


def format_report(rows: Sequence[ReportRow]) -> str:
    """Render rows as a fixed-width text table with title, header and rule."""
    lines = ["CRAP Report", "===========", _HEADER, "-" * len(_HEADER)]
    lines.extend(format_row(row) for row in rows)
    lines.append("")
    return "\n".join(lines)


def row_to_dict(row: ReportRow) -> dict[str, Any]:
    return {
        "function": row.name,
        "module": row.scope,
        "file": row.file_path,
        "line": row.line,
        "complexity": row.complexity,
        "coverage_percent": (
            round(row.coverage_percent, 2) if row.coverage_percent is not None else None
        ),
        "crap": round(row.crap, 3),
    }


def build_summary(result: AnalysisResult) -> dict[str, Any]:
    """Structured form of an analysis result for JSON output."""
    return {
        "rows": [row_to_dict(row) for row in result.rows],
        "warnings": [warning.to_dict() for warning in result.warnings],
        "files_analyzed": result.files_analyzed,
        "functions_scored": result.functions_scored,
        "coverage_lines_found": result.coverage_lines_found,
        "coverage_lines_hit": result.coverage_lines_hit,
    }
