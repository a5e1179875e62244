"""Config module exports."""

from craprs.config.loader import load_config
from craprs.config.models import (
    AnalysisConfig,
    CoverageConfig,
    CrapConfig,
    LoggingConfig,
    ReportConfig,
)

__all__ = [
    "load_config",
    "AnalysisConfig",
    "CoverageConfig",
    "CrapConfig",
    "LoggingConfig",
    "ReportConfig",
]
