"""Regenerate the LCOV report with a cargo coverage subcommand.

The tool is a black box: given the project directory it writes an LCOV file.
A stale report is deleted first so a failed run can never be mistaken for a
fresh one.
"""

from __future__ import annotations

import subprocess
from pathlib import Path

import structlog

from craprs.config.models import CoverageToolName
from craprs.core.errors import CoverageToolFailure, ManifestNotFound
from craprs.core.progress import spinner

log = structlog.get_logger()

# Keep the tail of stderr in error details; cargo output can be very long
_STDERR_TAIL = 2000


def coverage_command(tool: CoverageToolName, lcov_path: str) -> list[str]:
    """Command line that makes ``tool`` write an LCOV report to ``lcov_path``."""
    if tool == "tarpaulin":
        # tarpaulin always names its LCOV output lcov.info in --output-dir
        output_dir = str(Path(lcov_path).parent)
        return ["cargo", "tarpaulin", "--out", "lcov", "--output-dir", output_dir]
    if tool == "llvm-cov":
        return ["cargo", "llvm-cov", "--lcov", "--output-path", lcov_path]
    raise ValueError(f"Unknown coverage tool: {tool}")


def expected_report(tool: CoverageToolName, lcov_path: str) -> Path:
    """Where ``tool`` actually writes its report for a configured ``lcov_path``."""
    if tool == "tarpaulin":
        return Path(lcov_path).parent / "lcov.info"
    return Path(lcov_path)


def check_manifest(project_dir: Path) -> None:
    """Require a Cargo.toml in ``project_dir``.

    Raises:
        ManifestNotFound: With a hint when the parent directory has one.
    """
    if (project_dir / "Cargo.toml").is_file():
        return
    parent = project_dir.resolve().parent
    suggestion = str(parent) if (parent / "Cargo.toml").is_file() else None
    raise ManifestNotFound.at(str(project_dir), suggestion)


def delete_stale_report(report_path: Path) -> None:
    if report_path.exists():
        report_path.unlink()
        log.debug("coverage_stale_report_deleted", path=str(report_path))


def generate_coverage(
    project_dir: Path,
    *,
    tool: CoverageToolName,
    lcov_path: str,
    timeout_sec: int | None = None,
) -> Path:
    """Run the coverage tool and wait for it.

    Args:
        project_dir: Cargo project root (working directory of the tool).
        tool: Which cargo subcommand to run.
        lcov_path: Report path relative to ``project_dir``.
        timeout_sec: Kill the tool after this long. None waits forever.

    Returns:
        Path of the report the tool wrote.

    Raises:
        ManifestNotFound: No Cargo.toml in ``project_dir``.
        CoverageToolFailure: The tool could not start, timed out or failed.
    """
    check_manifest(project_dir)

    report_path = project_dir / expected_report(tool, lcov_path)
    delete_stale_report(report_path)

    command = coverage_command(tool, lcov_path)
    log.info("coverage_generate", command=" ".join(command), cwd=str(project_dir))

    try:
        with spinner(f"Running {' '.join(command[:2])}"):
            result = subprocess.run(
                command,
                cwd=project_dir,
                capture_output=True,
                text=True,
                timeout=timeout_sec,
            )
    except FileNotFoundError as e:
        raise CoverageToolFailure.not_started(command, str(e)) from e
    except subprocess.TimeoutExpired as e:
        raise CoverageToolFailure.timed_out(command, e.timeout) from e

    if result.returncode != 0:
        log.error("coverage_failed", exit_code=result.returncode, command=" ".join(command))
        raise CoverageToolFailure.exited(command, result.returncode, result.stderr[-_STDERR_TAIL:])

    log.info("coverage_generated", path=str(report_path))
    return report_path
