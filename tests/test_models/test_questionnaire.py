"""Tests for instrument constants, column roles and summary models."""

import pytest
from pydantic import ValidationError

from ostrc.models import (
    DEFAULT_VERSION,
    RECOGNIZED_NONZERO_CODES,
    SEVERITY_CODES,
    STANDARD_CODES,
    V1_Q23_CODES,
    ColumnRoles,
    IncidenceSummary,
    InstrumentVersion,
    PrevalenceSummary,
)


class TestInstrumentVersion:
    def test_values(self) -> None:
        assert InstrumentVersion("2.0") is InstrumentVersion.V2
        assert InstrumentVersion("1.0") is InstrumentVersion.V1

    def test_default_is_version_2(self) -> None:
        assert DEFAULT_VERSION == "2.0"

    def test_unknown_version(self) -> None:
        with pytest.raises(ValueError):
            InstrumentVersion("3.0")


class TestCodeSets:
    def test_standard_codes_are_severity_codes(self) -> None:
        assert set(STANDARD_CODES) <= SEVERITY_CODES

    def test_version_1_codes_are_recognized_and_scored(self) -> None:
        assert V1_Q23_CODES - {0} <= RECOGNIZED_NONZERO_CODES
        assert V1_Q23_CODES <= SEVERITY_CODES

    def test_derived_code_sets(self) -> None:
        assert RECOGNIZED_NONZERO_CODES == {8, 13, 17, 19, 25}
        assert SEVERITY_CODES == {0, 6, 8, 13, 17, 19, 25}


class TestColumnRoles:
    def test_participant_required(self) -> None:
        with pytest.raises(ValidationError):
            ColumnRoles()

    def test_questions_in_order(self) -> None:
        roles = ColumnRoles(participant="id", q1="a", q2="b", q3="c", q4="d")
        assert roles.questions() == ["a", "b", "c", "d"]
        assert roles.period is None


class TestSummaryModels:
    def test_incidence_row_prefix(self) -> None:
        summary = IncidenceSummary(mean=0.1, sd=0.2, n_periods=3, n_defined=3, ci_level=0.95)
        assert summary.to_row() == {
            "incidence_mean": 0.1,
            "incidence_sd": 0.2,
            "incidence_ci_lower": None,
            "incidence_ci_upper": None,
        }

    def test_prevalence_row_prefix(self) -> None:
        summary = PrevalenceSummary(mean=0.5, n_periods=2, n_defined=2, ci_level=0.9)
        assert "prevalence_mean" in summary.to_row()

    def test_ci_level_bounds(self) -> None:
        with pytest.raises(ValidationError):
            IncidenceSummary(n_periods=1, n_defined=1, ci_level=1.0)
