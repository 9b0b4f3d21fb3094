"""Structured diagnostics for OSTRC computations.

Two severities exist. ERROR findings abort the computation by raising
ValidationError; WARNING findings are appended to a DiagnosticLog and the
computation continues with its documented fallback. Every warning is also
written to the loguru logger.
"""

from __future__ import annotations

from enum import StrEnum
from typing import NoReturn

from loguru import logger
from pydantic import BaseModel, Field

# Fatal findings
E_ALL_MISSING = "OSTRC-E001"
E_NOT_NUMERIC = "OSTRC-E002"
E_OUT_OF_DOMAIN = "OSTRC-E003"
E_CODE_CARDINALITY = "OSTRC-E004"
E_ALREADY_STANDARD = "OSTRC-E005"
E_SINGLE_PERIOD = "OSTRC-E006"
E_MISSING_CASE_ID = "OSTRC-E007"
E_MISSING_COLUMN = "OSTRC-E008"
E_UNKNOWN_VERSION = "OSTRC-E009"
E_CI_LEVEL = "OSTRC-E010"
E_LENGTH_MISMATCH = "OSTRC-E011"
E_NOT_DATE = "OSTRC-E012"

# Advisory findings
W_NONSTANDARD_CODES = "OSTRC-W001"
W_NO_PROBLEMS = "OSTRC-W002"
W_ITEM_LOGIC = "OSTRC-W003"
W_CONSTANT_INDICATOR = "OSTRC-W004"
W_DUPLICATE_ROWS = "OSTRC-W005"
W_MISSING_Q1 = "OSTRC-W006"
W_MISSING_FOLLOWUP = "OSTRC-W007"
W_MISSING_PARTICIPANT = "OSTRC-W008"
W_MISSING_DATE = "OSTRC-W009"
W_SUBSTANTIAL_FAILED = "OSTRC-W010"
W_CASE_ID_WITHOUT_PROBLEM = "OSTRC-W011"


class DiagnosticSeverity(StrEnum):
    """Severity classification for diagnostics.

    ERROR: Precondition violated -- the computation is aborted.
    WARNING: Data-quality issue -- the computation proceeds with a fallback.
    """

    ERROR = "ERROR"
    WARNING = "WARNING"

    @property
    def display_name(self) -> str:
        """Human-friendly display name."""
        return self.value.capitalize()


class DiagnosticCategory(StrEnum):
    """What kind of precondition or data-quality issue was found."""

    MISSING = "MISSING"
    TYPE = "TYPE"
    DOMAIN = "DOMAIN"
    CARDINALITY = "CARDINALITY"
    CODING = "CODING"
    CASE_ID = "CASE_ID"
    DUPLICATE = "DUPLICATE"
    ITEM_LOGIC = "ITEM_LOGIC"
    CONSTANT = "CONSTANT"
    SUBSTANTIAL = "SUBSTANTIAL"
    CONFIGURATION = "CONFIGURATION"


class Diagnostic(BaseModel):
    """A single finding raised while validating or transforming responses."""

    code: str = Field(..., description="Diagnostic identifier (e.g., 'OSTRC-W001')")
    category: DiagnosticCategory = Field(..., description="Diagnostic category")
    severity: DiagnosticSeverity = Field(..., description="Finding severity")
    variable: str | None = Field(default=None, description="Offending column or argument")
    message: str = Field(..., description="Detailed finding message")
    affected_count: int = Field(default=0, ge=0, description="Number of affected rows")
    fix_suggestion: str | None = Field(default=None, description="Suggested remediation")


class ValidationError(ValueError):
    """Fatal precondition failure carrying its Diagnostic."""

    def __init__(self, diagnostic: Diagnostic) -> None:
        super().__init__(diagnostic.message)
        self.diagnostic = diagnostic

    @property
    def code(self) -> str:
        return self.diagnostic.code

    @property
    def variable(self) -> str | None:
        return self.diagnostic.variable


def fail(
    code: str,
    category: DiagnosticCategory,
    message: str,
    *,
    variable: str | None = None,
    affected_count: int = 0,
    fix_suggestion: str | None = None,
) -> NoReturn:
    """Raise a ValidationError for a fatal finding."""
    raise ValidationError(
        Diagnostic(
            code=code,
            category=category,
            severity=DiagnosticSeverity.ERROR,
            variable=variable,
            message=message,
            affected_count=affected_count,
            fix_suggestion=fix_suggestion,
        )
    )


class DiagnosticLog(BaseModel):
    """Accumulates every warning raised during one or more computations.

    Pass the same log to several calls to collect all of their warnings.
    """

    entries: list[Diagnostic] = Field(default_factory=list, description="Findings in order")

    def warn(
        self,
        code: str,
        category: DiagnosticCategory,
        message: str,
        *,
        variable: str | None = None,
        affected_count: int = 0,
        fix_suggestion: str | None = None,
    ) -> Diagnostic:
        """Record a WARNING finding and log it."""
        diagnostic = Diagnostic(
            code=code,
            category=category,
            severity=DiagnosticSeverity.WARNING,
            variable=variable,
            message=message,
            affected_count=affected_count,
            fix_suggestion=fix_suggestion,
        )
        self.entries.append(diagnostic)
        logger.warning("{}: {}", code, message)
        return diagnostic

    def record(self, diagnostic: Diagnostic) -> None:
        """Append an already-built finding (e.g., from a caught ValidationError)."""
        self.entries.append(diagnostic)

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self.entries if d.severity == DiagnosticSeverity.WARNING]

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self.entries if d.severity == DiagnosticSeverity.ERROR]

    def codes(self) -> list[str]:
        """Return the codes of all findings, in the order they were raised."""
        return [d.code for d in self.entries]

    def has(self, code: str) -> bool:
        return any(d.code == code for d in self.entries)


def resolve_log(diagnostics: DiagnosticLog | None) -> DiagnosticLog:
    """Return the caller's log, or a private one when none was passed."""
    return diagnostics if diagnostics is not None else DiagnosticLog()
