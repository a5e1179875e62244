"""craprs error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Source
- 7xxx: Coverage
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002

    # Source (3xxx)
    SOURCE_NOT_FOUND = 3001
    PARSE_FAILURE = 3002
    MANIFEST_NOT_FOUND = 3003

    # Coverage (7xxx)
    COVERAGE_TOOL_FAILURE = 7001
    COVERAGE_REPORT_MISSING = 7002
    MALFORMED_COVERAGE_REPORT = 7003


@dataclass(frozen=True, slots=True)
class CrapError(Exception):
    """Base error with structured context for CLI and JSON output."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'SOURCE_NOT_FOUND')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(CrapError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )


class SourceNotFound(CrapError):
    """Configured source directory does not exist."""

    @classmethod
    def at(cls, path: str) -> "SourceNotFound":
        return cls(
            code=ErrorCode.SOURCE_NOT_FOUND,
            message=f"Source directory not found: {path}",
            details={"path": path},
        )


class ParseFailure(CrapError):
    """A source file could not be parsed.

    One file is skipped with a warning; the whole tree failing is fatal.
    """

    @classmethod
    def in_file(cls, path: str, reason: str, line: int | None = None) -> "ParseFailure":
        where = f"{path}:{line}" if line is not None else path
        return cls(
            code=ErrorCode.PARSE_FAILURE,
            message=f"Failed to parse {where}: {reason}",
            details={"path": path, "line": line, "reason": reason},
        )

    @classmethod
    def whole_tree(cls, src_dir: str, failures: list["ParseFailure"]) -> "ParseFailure":
        """Every source file failed; the run has nothing to report."""
        paths = [failure.details["path"] for failure in failures]
        return cls(
            code=ErrorCode.PARSE_FAILURE,
            message=f"No source file under {src_dir} could be parsed ({len(paths)} failed)",
            details={"src_dir": src_dir, "paths": paths},
        )


class ManifestNotFound(CrapError):
    """No Cargo.toml where the coverage tool has to run."""

    @classmethod
    def at(cls, project_dir: str, suggestion: str | None = None) -> "ManifestNotFound":
        message = f"No Cargo.toml found in {project_dir}"
        if suggestion is not None:
            message += f" (did you mean {suggestion}?)"
        return cls(
            code=ErrorCode.MANIFEST_NOT_FOUND,
            message=message,
            details={"project_dir": project_dir, "suggestion": suggestion},
        )


class CoverageToolFailure(CrapError):
    """The external coverage tool could not run or exited with failure."""

    @classmethod
    def exited(cls, command: list[str], exit_code: int, stderr: str = "") -> "CoverageToolFailure":
        cmd = " ".join(command)
        return cls(
            code=ErrorCode.COVERAGE_TOOL_FAILURE,
            message=f"Coverage command failed (exit {exit_code}): {cmd}",
            details={"command": cmd, "exit_code": exit_code, "stderr": stderr},
        )

    @classmethod
    def not_started(cls, command: list[str], reason: str) -> "CoverageToolFailure":
        cmd = " ".join(command)
        return cls(
            code=ErrorCode.COVERAGE_TOOL_FAILURE,
            message=f"Failed to run {cmd}: {reason}",
            details={"command": cmd, "reason": reason},
        )

    @classmethod
    def timed_out(cls, command: list[str], timeout_sec: float) -> "CoverageToolFailure":
        cmd = " ".join(command)
        return cls(
            code=ErrorCode.COVERAGE_TOOL_FAILURE,
            message=f"Coverage command timed out after {timeout_sec:g}s: {cmd}",
            details={"command": cmd, "timeout_sec": timeout_sec},
        )


class CoverageReportMissing(CrapError):
    """Expected LCOV report is absent."""

    @classmethod
    def at(cls, path: str, *, skipped: bool) -> "CoverageReportMissing":
        if skipped:
            hint = "coverage generation was skipped; run without --skip-coverage"
        else:
            hint = "did the coverage run succeed?"
        return cls(
            code=ErrorCode.COVERAGE_REPORT_MISSING,
            message=f"Coverage report not found: {path} ({hint})",
            details={"path": path, "skipped": skipped},
        )


class MalformedCoverageReport(CrapError):
    """LCOV report exists but cannot be parsed."""

    @classmethod
    def at_line(
        cls, path: str, line_no: int, text: str, reason: str
    ) -> "MalformedCoverageReport":
        return cls(
            code=ErrorCode.MALFORMED_COVERAGE_REPORT,
            message=f"Malformed coverage report {path}:{line_no}: {reason}: {text!r}",
            details={"path": path, "line": line_no, "text": text, "reason": reason},
        )

    @classmethod
    def unreadable(cls, path: str, reason: str) -> "MalformedCoverageReport":
        return cls(
            code=ErrorCode.MALFORMED_COVERAGE_REPORT,
            message=f"Failed to read coverage report {path}: {reason}",
            details={"path": path, "reason": reason},
        )
