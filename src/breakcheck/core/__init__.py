"""Core models and result types for breakcheck."""

from breakcheck.core.models import (
    BreakingChangeEntry,
    BreakingResult,
    DependencyChange,
    Ecosystem,
)
from breakcheck.core.outcome import Err, Ok, Outcome, capture, first_ok

__all__ = [
    "BreakingChangeEntry",
    "BreakingResult",
    "DependencyChange",
    "Ecosystem",
    "Err",
    "Ok",
    "Outcome",
    "capture",
    "first_ok",
]
