"""Tests for time-loss per health problem case."""

from __future__ import annotations

import pandas as pd
import pytest

from ostrc.transforms.timeloss import case_timeloss, count_timeloss
from ostrc.validation.diagnostics import (
    E_MISSING_CASE_ID,
    E_MISSING_COLUMN,
    W_CASE_ID_WITHOUT_PROBLEM,
    DiagnosticLog,
    ValidationError,
)


@pytest.fixture
def responses() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "id": [1, 1, 1, 2, 2],
            "case": [10, 10, 10, 20, None],
            "q1": [25, 25, 8, 17, 0],
        }
    )


class TestCountTimeloss:
    def test_counts_code_25(self) -> None:
        assert count_timeloss(pd.Series([25.0, 8.0, 25.0])) == 2

    def test_missing_not_counted(self) -> None:
        assert count_timeloss(pd.Series([float("nan"), 25.0])) == 1


class TestCaseTimeloss:
    def test_one_row_per_case(self, responses: pd.DataFrame) -> None:
        result = case_timeloss(responses, "id", "case", "q1")
        assert list(result.columns) == ["id", "case", "timeloss"]
        assert result["timeloss"].tolist() == [2, 0]
        assert result["case"].tolist() == [10, 20]

    def test_case_id_without_problem_warns_and_is_dropped(self) -> None:
        data = pd.DataFrame({"id": [1, 1], "case": [5, 5], "q1": [25, 0]})
        log = DiagnosticLog()
        result = case_timeloss(data, "id", "case", "q1", diagnostics=log)
        assert result["timeloss"].tolist() == [1]
        assert log.has(W_CASE_ID_WITHOUT_PROBLEM)

    def test_problem_without_case_id_raises(self) -> None:
        data = pd.DataFrame({"id": [1], "case": [None], "q1": [8]})
        with pytest.raises(ValidationError, match="case ID") as exc_info:
            case_timeloss(data, "id", "case", "q1")
        assert exc_info.value.code == E_MISSING_CASE_ID
        assert "case" in exc_info.value.diagnostic.fix_suggestion

    def test_missing_column_raises(self, responses: pd.DataFrame) -> None:
        with pytest.raises(ValidationError) as exc_info:
            case_timeloss(responses, "id", "case_id", "q1")
        assert exc_info.value.code == E_MISSING_COLUMN
