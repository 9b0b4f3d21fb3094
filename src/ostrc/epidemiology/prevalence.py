"""Prevalence of health problems per time period.

Prevalence per period is the proportion of responding participants who
reported a problem of the given type in that period. Repeated responses
from one participant within a period count once.
"""

from __future__ import annotations

from collections.abc import Sequence

import pandas as pd
from loguru import logger

from ostrc.epidemiology.summary import (
    PRESENT,
    collapse_per_period,
    fan_out,
    summarize_rates,
    validate_period_inputs,
)
from ostrc.models.incidence import (
    CASE_COUNT,
    DEFAULT_CI_LEVEL,
    PREVALENCE_RATE,
    RESPONSE_COUNT,
    PrevalenceSummary,
)
from ostrc.validation.diagnostics import DiagnosticLog, resolve_log


def prevalence_per_period(
    responses: pd.DataFrame,
    participant_key: str,
    period_key: str,
    indicator_key: str,
    diagnostics: DiagnosticLog | None = None,
) -> pd.DataFrame:
    """Calculate prevalence for each time period.

    Args:
        responses: Response table, one row per questionnaire response.
        participant_key: Participant identifier column.
        period_key: Time period column.
        indicator_key: Binary problem-type column (1/0/NA).
        diagnostics: Log receiving advisory findings.

    Returns:
        DataFrame with columns [period_key, "response_count", "case_count",
        "prevalence_rate"], periods in ascending order.

    Raises:
        ValidationError: Under the same conditions as incidence_per_period().
    """
    log = resolve_log(diagnostics)
    validate_period_inputs(
        responses, participant_key, period_key, indicator_key, log, measure="prevalence"
    )

    collapsed = collapse_per_period(responses, participant_key, period_key, indicator_key)
    result = (
        collapsed.groupby(period_key, sort=True)
        .agg(**{RESPONSE_COUNT: (PRESENT, "size"), CASE_COUNT: (PRESENT, "sum")})
        .reset_index()
    )
    result[RESPONSE_COUNT] = result[RESPONSE_COUNT].astype("int64")
    result[CASE_COUNT] = result[CASE_COUNT].astype("int64")
    result[PREVALENCE_RATE] = result[CASE_COUNT] / result[RESPONSE_COUNT]
    logger.debug("Prevalence of {} over {} periods", indicator_key, len(result))
    return result


def summarize_prevalence(
    per_period: pd.DataFrame,
    ci_level: float = DEFAULT_CI_LEVEL,
) -> PrevalenceSummary:
    """Summarize a table from prevalence_per_period() as a PrevalenceSummary."""
    return summarize_rates(per_period[PREVALENCE_RATE], ci_level, PrevalenceSummary)


def prevalence_summary(
    responses: pd.DataFrame,
    participant_key: str,
    period_key: str,
    indicator_key: str,
    ci_level: float = DEFAULT_CI_LEVEL,
    diagnostics: DiagnosticLog | None = None,
) -> pd.DataFrame:
    """Calculate the mean prevalence per period with a confidence interval.

    Returns:
        One-row DataFrame with columns "prevalence_mean", "prevalence_sd",
        "prevalence_ci_lower", "prevalence_ci_upper".
    """
    per_period = prevalence_per_period(
        responses, participant_key, period_key, indicator_key, diagnostics
    )
    return pd.DataFrame([summarize_prevalence(per_period, ci_level).to_row()], dtype="float64")


def prevalence_all(
    responses: pd.DataFrame,
    participant_key: str,
    period_key: str,
    problem_types: Sequence[str],
    group_key: str | None = None,
    ci_level: float = DEFAULT_CI_LEVEL,
    diagnostics: DiagnosticLog | None = None,
) -> pd.DataFrame:
    """Calculate the mean prevalence for several problem types and subgroups.

    Returns:
        Long DataFrame with columns [group_key (if given), "problem_type",
        "prevalence_mean", "prevalence_sd", "prevalence_ci_lower",
        "prevalence_ci_upper"], sorted by subgroup then problem type.
    """
    log = resolve_log(diagnostics)

    def _summarize(subset: pd.DataFrame, problem_type: str) -> dict[str, float | None]:
        per_period = prevalence_per_period(subset, participant_key, period_key, problem_type, log)
        return summarize_prevalence(per_period, ci_level).to_row()

    return fan_out(responses, problem_types, group_key, _summarize)
