"""Tests for diagnostics, the diagnostic log and fatal failures."""

from __future__ import annotations

import pytest

from ostrc.validation.diagnostics import (
    E_MISSING_COLUMN,
    W_DUPLICATE_ROWS,
    W_NO_PROBLEMS,
    Diagnostic,
    DiagnosticCategory,
    DiagnosticLog,
    DiagnosticSeverity,
    ValidationError,
    fail,
    resolve_log,
)


class TestDiagnosticSeverity:
    def test_display_name(self) -> None:
        assert DiagnosticSeverity.ERROR.display_name == "Error"
        assert DiagnosticSeverity.WARNING.display_name == "Warning"


class TestFail:
    def test_raises_validation_error(self) -> None:
        with pytest.raises(ValidationError, match="Missing required columns") as exc_info:
            fail(
                E_MISSING_COLUMN,
                DiagnosticCategory.MISSING,
                "Missing required columns: ['q1']",
                variable="q1",
            )
        err = exc_info.value
        assert err.code == E_MISSING_COLUMN
        assert err.variable == "q1"
        assert err.diagnostic.severity == DiagnosticSeverity.ERROR

    def test_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            fail(E_MISSING_COLUMN, DiagnosticCategory.MISSING, "boom")


class TestDiagnosticLog:
    def test_warn_appends(self) -> None:
        log = DiagnosticLog()
        diagnostic = log.warn(
            W_NO_PROBLEMS, DiagnosticCategory.CODING, "no problems", affected_count=3
        )
        assert log.entries == [diagnostic]
        assert diagnostic.severity == DiagnosticSeverity.WARNING
        assert diagnostic.affected_count == 3

    def test_codes_in_order(self) -> None:
        log = DiagnosticLog()
        log.warn(W_DUPLICATE_ROWS, DiagnosticCategory.DUPLICATE, "dup")
        log.warn(W_NO_PROBLEMS, DiagnosticCategory.CODING, "none")
        assert log.codes() == [W_DUPLICATE_ROWS, W_NO_PROBLEMS]
        assert log.has(W_NO_PROBLEMS)
        assert not log.has(E_MISSING_COLUMN)

    def test_record_error(self) -> None:
        log = DiagnosticLog()
        log.warn(W_NO_PROBLEMS, DiagnosticCategory.CODING, "none")
        log.record(
            Diagnostic(
                code=E_MISSING_COLUMN,
                category=DiagnosticCategory.MISSING,
                severity=DiagnosticSeverity.ERROR,
                message="missing",
            )
        )
        assert len(log.warnings) == 1
        assert len(log.errors) == 1


class TestResolveLog:
    def test_returns_given_log(self) -> None:
        log = DiagnosticLog()
        assert resolve_log(log) is log

    def test_private_log_when_none(self) -> None:
        assert isinstance(resolve_log(None), DiagnosticLog)
