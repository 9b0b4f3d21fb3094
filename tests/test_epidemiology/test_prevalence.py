"""Tests for per-period prevalence and its summaries."""

from __future__ import annotations

import pandas as pd
import pytest

from ostrc.epidemiology.prevalence import (
    prevalence_all,
    prevalence_per_period,
    prevalence_summary,
)
from ostrc.validation.diagnostics import E_ALL_MISSING, E_SINGLE_PERIOD, ValidationError


@pytest.fixture
def responses() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "id": [1, 1, 1, 1, 2, 2, 2, 3],
            "week": [1, 1, 2, 3, 1, 2, 3, 2],
            "hp": [1, 0, 0, 1, 0, 0, 1, 1],
            "sex": ["f", "f", "f", "f", "m", "m", "m", "m"],
        }
    )


class TestPrevalencePerPeriod:
    def test_rates(self, responses: pd.DataFrame) -> None:
        result = prevalence_per_period(responses, "id", "week", "hp")
        assert list(result.columns) == ["week", "response_count", "case_count", "prevalence_rate"]
        assert result["response_count"].tolist() == [2, 3, 2]
        assert result["case_count"].tolist() == [1, 1, 2]
        assert result["prevalence_rate"].tolist() == pytest.approx([0.5, 1 / 3, 1.0])

    def test_any_problem_in_period_counts(self, responses: pd.DataFrame) -> None:
        # participant 1 answered twice in week 1, once with a problem
        result = prevalence_per_period(responses, "id", "week", "hp")
        assert result["case_count"].iloc[0] == 1

    def test_single_period(self, responses: pd.DataFrame) -> None:
        with pytest.raises(ValidationError) as exc_info:
            prevalence_per_period(responses.assign(week=5), "id", "week", "hp")
        assert exc_info.value.code == E_SINGLE_PERIOD

    @pytest.mark.parametrize("key", ["id", "week", "hp"])
    def test_all_missing_column_names_variable(self, responses: pd.DataFrame, key: str) -> None:
        with pytest.raises(ValidationError) as exc_info:
            prevalence_per_period(responses.assign(**{key: None}), "id", "week", "hp")
        assert exc_info.value.code == E_ALL_MISSING
        assert exc_info.value.variable == key


class TestPrevalenceSummary:
    def test_mean_of_periods(self, responses: pd.DataFrame) -> None:
        result = prevalence_summary(responses, "id", "week", "hp")
        assert list(result.columns) == [
            "prevalence_mean",
            "prevalence_sd",
            "prevalence_ci_lower",
            "prevalence_ci_upper",
        ]
        row = result.iloc[0]
        assert row["prevalence_mean"] == pytest.approx((0.5 + 1 / 3 + 1.0) / 3)
        assert row["prevalence_ci_lower"] < row["prevalence_mean"] < row["prevalence_ci_upper"]


class TestPrevalenceAll:
    def test_grouped(self, responses: pd.DataFrame) -> None:
        result = prevalence_all(responses, "id", "week", ["hp"], group_key="sex")
        assert result["sex"].tolist() == ["f", "m"]
        # f: weeks 1-3 -> 1, 0, 1
        assert result["prevalence_mean"].iloc[0] == pytest.approx(2 / 3)
