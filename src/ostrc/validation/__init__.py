"""Validation layer: structured diagnostics and shared input checks.

Fatal findings raise ValidationError; advisory findings accumulate in a
DiagnosticLog passed through every computation.
"""

from ostrc.validation.diagnostics import (
    Diagnostic,
    DiagnosticCategory,
    DiagnosticLog,
    DiagnosticSeverity,
    ValidationError,
)
from ostrc.validation.report import DiagnosticReport

__all__ = [
    "Diagnostic",
    "DiagnosticCategory",
    "DiagnosticLog",
    "DiagnosticReport",
    "DiagnosticSeverity",
    "ValidationError",
]
