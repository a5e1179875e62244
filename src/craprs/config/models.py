"""Configuration sections and their defaults.

Every scalar is settable from the environment as CRAPRS__<SECTION>__<KEY>
(see ``craprs.config.loader`` for the full precedence order), e.g.:

    CRAPRS__LOGGING__LEVEL=DEBUG
    CRAPRS__COVERAGE__TOOL=llvm-cov
    CRAPRS__ANALYSIS__SRC_DIR=crates/core/src
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
CoverageToolName = Literal["tarpaulin", "llvm-cov"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        CRAPRS__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="WARNING",
        description="Root log level. The report itself is not logged, so WARNING keeps "
        "stderr quiet apart from skipped files.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class AnalysisConfig(BaseModel):
    """Source analysis configuration.

    Env vars:
        CRAPRS__ANALYSIS__SRC_DIR: Source directory relative to the project
        CRAPRS__ANALYSIS__INCLUDE_TESTS: Score #[test] / #[cfg(test)] code too
    """

    src_dir: str = Field(
        default="src",
        description="Directory scanned recursively for *.rs files, relative to the project.",
    )
    include_tests: bool = Field(
        default=False,
        description="Keep test-only functions in the report. Off by default: test code "
        "is not expected to be covered by tests.",
    )


class CoverageConfig(BaseModel):
    """Coverage generation and loading.

    Env vars:
        CRAPRS__COVERAGE__TOOL: tarpaulin or llvm-cov
        CRAPRS__COVERAGE__SKIP: Reuse the existing LCOV report
        CRAPRS__COVERAGE__LCOV_PATH: Report location relative to the project
        CRAPRS__COVERAGE__TIMEOUT_SEC: Kill the coverage tool after this long
    """

    tool: CoverageToolName = Field(
        default="tarpaulin",
        description="Cargo subcommand used to regenerate the LCOV report.",
    )
    skip: bool = Field(
        default=False,
        description="Skip coverage generation and read the existing report.",
    )
    lcov_path: str = Field(
        default="lcov.info",
        description="LCOV report path, relative to the project directory.",
    )
    timeout_sec: int | None = Field(
        default=None,
        description="Coverage tool timeout. None waits for completion.",
    )

    @field_validator("timeout_sec")
    @classmethod
    def validate_timeout(cls, v: int | None) -> int | None:
        if v is not None and v <= 0:
            raise ValueError(f"Timeout must be positive, got {v}")
        return v


class ReportConfig(BaseModel):
    """Report output.

    Env vars:
        CRAPRS__REPORT__FORMAT: table or json
        CRAPRS__REPORT__LIMIT: Show only the N riskiest functions
    """

    format: Literal["table", "json"] = "table"
    limit: int | None = Field(
        default=None,
        description="Maximum rows in the report. None shows all.",
    )

    @field_validator("limit")
    @classmethod
    def validate_limit(cls, v: int | None) -> int | None:
        if v is not None and v <= 0:
            raise ValueError(f"Limit must be positive, got {v}")
        return v


class CrapConfig(BaseModel):
    """Resolved configuration of one craprs run."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    analysis: AnalysisConfig = Field(default_factory=AnalysisConfig)
    coverage: CoverageConfig = Field(default_factory=CoverageConfig)
    report: ReportConfig = Field(default_factory=ReportConfig)
