"""Rust source analysis: parsing, function extraction, complexity."""

from craprs.analysis.complexity import compute_complexity
from craprs.analysis.functions import FunctionRecord, extract_functions
from craprs.analysis.parser import ParseResult, RustParser

__all__ = [
    "FunctionRecord",
    "ParseResult",
    "RustParser",
    "compute_complexity",
    "extract_functions",
]
