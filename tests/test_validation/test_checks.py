"""Tests for the shared input checks."""

from __future__ import annotations

import pandas as pd
import pytest

from ostrc.models.questionnaire import InstrumentVersion
from ostrc.validation.checks import (
    as_series,
    require_columns,
    require_numeric,
    require_values_in,
    require_version,
    warn_if_missing,
)
from ostrc.validation.diagnostics import (
    E_MISSING_COLUMN,
    E_NOT_NUMERIC,
    E_OUT_OF_DOMAIN,
    E_UNKNOWN_VERSION,
    W_MISSING_Q1,
    DiagnosticLog,
    ValidationError,
)


class TestAsSeries:
    def test_list(self) -> None:
        assert as_series([1, 2], "x").tolist() == [1, 2]

    def test_all_none_becomes_float(self) -> None:
        assert as_series([None, None], "x").dtype == "float64"

    def test_series_kept(self) -> None:
        s = pd.Series([1], index=["a"])
        assert as_series(s, "x").index.tolist() == ["a"]

    def test_numbers_with_pd_na_become_nullable_numeric(self) -> None:
        result = as_series([17, pd.NA, 8], "x")
        assert str(result.dtype) == "Int64"
        assert result.isna().tolist() == [False, True, False]

    def test_strings_with_pd_na_stay_non_numeric(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            require_numeric(as_series(["8", pd.NA], "x"), "x")
        assert exc_info.value.code == E_NOT_NUMERIC


class TestRequireColumns:
    def test_present(self) -> None:
        require_columns(pd.DataFrame({"a": [1]}), ["a", None])

    def test_absent(self) -> None:
        with pytest.raises(ValidationError, match=r"\['b'\]") as exc_info:
            require_columns(pd.DataFrame({"a": [1]}), ["a", "b"])
        assert exc_info.value.code == E_MISSING_COLUMN


class TestRequireNumeric:
    def test_nullable_integer_accepted(self) -> None:
        require_numeric(pd.Series([1, None], dtype="Int64"), "x")

    @pytest.mark.parametrize("values", [["a"], [True, False]])
    def test_rejected(self, values: list[object]) -> None:
        with pytest.raises(ValidationError) as exc_info:
            require_numeric(pd.Series(values), "x")
        assert exc_info.value.code == E_NOT_NUMERIC


class TestRequireValuesIn:
    def test_missing_allowed(self) -> None:
        require_values_in(pd.Series([0.0, None, 1.0]), "x", (0, 1))

    def test_message_lists_codes(self) -> None:
        with pytest.raises(ValidationError, match="0, 1, NA") as exc_info:
            require_values_in(pd.Series([0, 2, 2]), "x", (0, 1))
        assert exc_info.value.code == E_OUT_OF_DOMAIN
        assert exc_info.value.diagnostic.affected_count == 2

    def test_fix_suggestion_attached(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            require_values_in(pd.Series([2]), "x", (0, 1), fix_suggestion="Recode x to 0 and 1.")
        assert exc_info.value.diagnostic.fix_suggestion == "Recode x to 0 and 1."
        assert "Recode" not in str(exc_info.value)


class TestRequireVersion:
    def test_parses(self) -> None:
        assert require_version("1.0") is InstrumentVersion.V1
        assert require_version(InstrumentVersion.V2) is InstrumentVersion.V2

    def test_unknown(self) -> None:
        with pytest.raises(ValidationError, match="'2.0'") as exc_info:
            require_version("2")
        assert exc_info.value.code == E_UNKNOWN_VERSION


class TestWarnIfMissing:
    def test_warns_with_count(self) -> None:
        log = DiagnosticLog()
        n = warn_if_missing(pd.Series([True, False, True]), log, W_MISSING_Q1, "missing", variable="q1")
        assert n == 2
        assert log.entries[0].affected_count == 2

    def test_silent_when_none_missing(self) -> None:
        log = DiagnosticLog()
        assert warn_if_missing(pd.Series([False]), log, W_MISSING_Q1, "missing") == 0
        assert log.entries == []
