"""Core module exports."""

from craprs.core.errors import (
    ConfigError,
    CoverageReportMissing,
    CoverageToolFailure,
    CrapError,
    ErrorCode,
    MalformedCoverageReport,
    ManifestNotFound,
    ParseFailure,
    SourceNotFound,
)
from craprs.core.logging import configure_logging
from craprs.core.progress import spinner, status

__all__ = [
    # Errors
    "ConfigError",
    "CoverageReportMissing",
    "CoverageToolFailure",
    "CrapError",
    "ErrorCode",
    "MalformedCoverageReport",
    "ManifestNotFound",
    "ParseFailure",
    "SourceNotFound",
    # Logging
    "configure_logging",
    # Progress
    "spinner",
    "status",
]
