"""
Validation module: run the engine over a batch of filings and compare each
derived line against reference values from prepared returns.
"""

from .comparator import Comparator, ComparisonConfig, ComparisonResults, validate
from .loader import load_filings
from .runners import run_both, run_engine

__all__ = [
    "Comparator",
    "ComparisonConfig",
    "ComparisonResults",
    "validate",
    "load_filings",
    "run_engine",
    "run_both",
]
