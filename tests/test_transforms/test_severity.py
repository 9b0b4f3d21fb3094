"""Tests for the OSTRC severity score."""

from __future__ import annotations

import pandas as pd
import pytest

from ostrc.transforms.severity import severity_score
from ostrc.validation.diagnostics import (
    E_LENGTH_MISMATCH,
    E_NOT_NUMERIC,
    E_OUT_OF_DOMAIN,
    ValidationError,
)


class TestSeverityScore:
    def test_sums_questions(self) -> None:
        result = severity_score(
            [17, 8, 8, 0], [25, 17, 17, 0], [25, 8, 17, 0], [25, 8, 0, 0]
        )
        assert result.tolist() == [92, 41, 42, 0]

    def test_maximum_score(self) -> None:
        assert severity_score([25], [25], [25], [25]).tolist() == [100]

    def test_version_1_codes_accepted(self) -> None:
        assert severity_score([8], [13], [19], [6]).tolist() == [46]

    def test_missing_answer_gives_missing_score(self) -> None:
        result = severity_score([8, 8], [8, None], [8, 8], [8, 8])
        assert result.iloc[0] == 32
        assert pd.isna(result.iloc[1])

    def test_pd_na_in_list_gives_missing_score(self) -> None:
        result = severity_score([17, pd.NA], [8, 8], [8, 8], [8, 8])
        assert result.iloc[0] == 41
        assert pd.isna(result.iloc[1])

    def test_returns_int64_indexed_like_q1(self) -> None:
        q1 = pd.Series([8, 17], index=["a", "b"])
        result = severity_score(q1, [0, 0], [0, 0], [0, 0])
        assert str(result.dtype) == "Int64"
        assert result.index.tolist() == ["a", "b"]

    def test_invalid_code_names_variable(self) -> None:
        with pytest.raises(ValidationError, match="q3") as exc_info:
            severity_score([8], [8], [3], [8], names=("q1", "q2", "q3", "q4"))
        assert exc_info.value.code == E_OUT_OF_DOMAIN
        assert exc_info.value.variable == "q3"

    def test_invalid_code_suggests_normalize_codes(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            severity_score([8], [8], [3], [8])
        assert "normalize_codes" in exc_info.value.diagnostic.fix_suggestion

    def test_non_numeric_rejected(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            severity_score(["8"], [8], [8], [8])
        assert exc_info.value.code == E_NOT_NUMERIC

    def test_length_mismatch_rejected(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            severity_score([8, 8], [8], [8, 8], [8, 8])
        assert exc_info.value.code == E_LENGTH_MISMATCH
