"""Shared building blocks for per-period rate calculations.

Incidence and prevalence share the same input validation, the same
collapse of repeated responses within a period, the same t-based summary
and the same fan-out over problem types and subgroups.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Sequence

import pandas as pd
from loguru import logger
from scipy import stats

from ostrc.models.incidence import PROBLEM_TYPE, PeriodSummary
from ostrc.validation.checks import (
    require_ci_level,
    require_columns,
    require_not_all_missing,
    require_numeric,
    require_values_in,
)
from ostrc.validation.diagnostics import (
    E_SINGLE_PERIOD,
    W_CONSTANT_INDICATOR,
    DiagnosticCategory,
    DiagnosticLog,
    fail,
)

PRESENT = "_present"


def validate_period_inputs(
    responses: pd.DataFrame,
    participant_key: str,
    period_key: str,
    indicator_key: str,
    log: DiagnosticLog,
    measure: str,
) -> None:
    """Check a response table before computing a per-period rate.

    Raises:
        ValidationError: If a key column is absent or entirely missing, the
            indicator is not numeric or not coded 0/1/NA, or the period
            column has a single value.
    """
    require_columns(responses, [participant_key, period_key, indicator_key])
    for key in (participant_key, period_key, indicator_key):
        require_not_all_missing(responses[key], key)

    indicator = responses[indicator_key]
    require_numeric(indicator, indicator_key)
    require_values_in(
        indicator,
        indicator_key,
        (0, 1),
        fix_suggestion=(
            f"Make sure {indicator_key} is a binary variable coded only with 0 and 1, "
            "or with NA for missing."
        ),
    )

    if responses[period_key].nunique(dropna=False) == 1:
        fail(
            E_SINGLE_PERIOD,
            DiagnosticCategory.CARDINALITY,
            f"Variable {period_key} has only one value. "
            "Are you sure this is the time period of interest?",
            variable=period_key,
            affected_count=len(responses),
        )

    if indicator.nunique(dropna=True) == 1:
        log.warn(
            W_CONSTANT_INDICATOR,
            DiagnosticCategory.CONSTANT,
            f"The {measure} of {indicator_key} is constant.",
            variable=indicator_key,
            affected_count=int(indicator.notna().sum()),
        )


def collapse_per_period(
    responses: pd.DataFrame,
    participant_key: str,
    period_key: str,
    indicator_key: str,
) -> pd.DataFrame:
    """Reduce responses to one row per (participant, period).

    Rows with a missing period or indicator are dropped. Several responses
    from one participant in the same period count as one, with a problem
    present if any of them reported one.

    Returns:
        DataFrame with columns [participant_key, period_key, "_present"],
        sorted by participant then period.
    """
    nonmissing = responses.loc[
        responses[period_key].notna() & responses[indicator_key].notna(),
        [participant_key, period_key, indicator_key],
    ]
    collapsed = (
        nonmissing.groupby([participant_key, period_key], sort=True, dropna=False)[indicator_key]
        .sum()
        .gt(0)
        .astype("int64")
        .rename(PRESENT)
        .reset_index()
    )
    logger.debug(
        "Collapsed {} responses to {} participant-periods",
        len(nonmissing),
        len(collapsed),
    )
    return collapsed


def _finite_or_none(value: float) -> float | None:
    return None if math.isnan(value) else float(value)


def summarize_rates(
    rates: pd.Series,
    ci_level: float,
    summary_cls: type[PeriodSummary] = PeriodSummary,
) -> PeriodSummary:
    """Mean, sample SD and t-based confidence interval of per-period rates.

    Mean and SD ignore undefined rates, while the standard error divides
    by the number of ALL period rows (defined or not), with ``n - 1``
    degrees of freedom.

    Args:
        rates: One rate per period; missing for undefined periods.
        ci_level: Confidence level, e.g. 0.95.
        summary_cls: PeriodSummary subclass to build.

    Returns:
        The summary; statistics that cannot be computed are None.
    """
    require_ci_level(ci_level)
    rates = rates.astype("float64")
    count = len(rates)
    defined = rates.dropna()

    mean = defined.mean() if not defined.empty else math.nan
    sd = defined.std(ddof=1) if len(defined) > 1 else math.nan

    if count > 1:
        se = sd / math.sqrt(count)
        t_crit = stats.t.ppf(1 - (1 - ci_level) / 2, count - 1)
        ci_lower = mean - t_crit * se
        ci_upper = mean + t_crit * se
    else:
        ci_lower = ci_upper = math.nan

    return summary_cls(
        mean=_finite_or_none(mean),
        sd=_finite_or_none(sd),
        ci_lower=_finite_or_none(ci_lower),
        ci_upper=_finite_or_none(ci_upper),
        n_periods=count,
        n_defined=len(defined),
        ci_level=ci_level,
    )


def fan_out(
    responses: pd.DataFrame,
    problem_types: Sequence[str],
    group_key: str | None,
    summarize: Callable[[pd.DataFrame, str], dict[str, float | None]],
) -> pd.DataFrame:
    """Apply a per-type summary to every (subgroup, problem type) pair.

    Responses are partitioned by ``group_key`` (when given), each partition
    is summarized once per problem type, and the rows are combined into a
    long table sorted by subgroup value, then problem type in the order given.
    """
    if isinstance(problem_types, str):
        problem_types = [problem_types]
    if group_key is not None:
        require_columns(responses, [group_key])

    rows: list[dict[str, object]] = []
    if group_key is None:
        for problem_type in problem_types:
            rows.append({PROBLEM_TYPE: problem_type, **summarize(responses, problem_type)})
    else:
        for group_value, subset in responses.groupby(group_key, sort=True, dropna=False):
            logger.debug("Summarizing subgroup {}={} ({} rows)", group_key, group_value, len(subset))
            for problem_type in problem_types:
                rows.append(
                    {
                        group_key: group_value,
                        PROBLEM_TYPE: problem_type,
                        **summarize(subset, problem_type),
                    }
                )

    return pd.DataFrame(rows)
