"""Output-table column names and the per-period summary model."""

from __future__ import annotations

from pydantic import BaseModel, Field

DEFAULT_CI_LEVEL = 0.95

# Per-period tables
RESPONSE_COUNT = "response_count"
NEW_CASE_COUNT = "new_case_count"
INCIDENCE_RATE = "incidence_rate"
CASE_COUNT = "case_count"
PREVALENCE_RATE = "prevalence_rate"

# Fan-out tables
PROBLEM_TYPE = "problem_type"

# Case tables
START_DATE = "start_date"
END_DATE = "end_date"
DURATION = "duration"
TIMELOSS = "timeloss"
SEVERITY_SCORE = "severity_score"
SUBSTANTIAL = "hp_sub"


class PeriodSummary(BaseModel):
    """Mean of a per-period rate with a t-based confidence interval.

    ``n_periods`` counts every period row, including periods whose rate is
    undefined; it is the sample size used for the standard error.
    """

    mean: float | None = Field(default=None, description="Mean rate over defined periods")
    sd: float | None = Field(default=None, description="Sample standard deviation of the rate")
    ci_lower: float | None = Field(default=None, description="Lower confidence bound")
    ci_upper: float | None = Field(default=None, description="Upper confidence bound")
    n_periods: int = Field(..., ge=0, description="Number of period rows")
    n_defined: int = Field(..., ge=0, description="Number of periods with a defined rate")
    ci_level: float = Field(..., gt=0.0, lt=1.0, description="Confidence level")

    def to_row(self, prefix: str) -> dict[str, float | None]:
        """Flatten to ``{prefix}_mean``, ``{prefix}_sd`` and the CI bounds."""
        return {
            f"{prefix}_mean": self.mean,
            f"{prefix}_sd": self.sd,
            f"{prefix}_ci_lower": self.ci_lower,
            f"{prefix}_ci_upper": self.ci_upper,
        }


class IncidenceSummary(PeriodSummary):
    """Summary of per-period incidence rates."""

    def to_row(self, prefix: str = "incidence") -> dict[str, float | None]:
        return super().to_row(prefix)


class PrevalenceSummary(PeriodSummary):
    """Summary of per-period prevalence rates."""

    def to_row(self, prefix: str = "prevalence") -> dict[str, float | None]:
        return super().to_row(prefix)
