"""Incidence of health problems per time period.

A new case is a participant-period with a health problem where the same
participant had none in their previous observed period. The first period
a participant is observed in has no baseline, so a problem reported there
cannot be classified as new or pre-existing:

    previous=0, current=1   -> new case
    previous=1              -> not new (continuing or resolved)
    current=0               -> not new
    no previous, current=1  -> undetermined

Incidence per period is new cases divided by responses. In the dataset's
first period no incidence can be computed without a baseline: it is 0 if
no new cases were counted and undefined otherwise. In later periods,
undetermined flags (participants entering late) are not counted.
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np
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
    DEFAULT_CI_LEVEL,
    INCIDENCE_RATE,
    NEW_CASE_COUNT,
    RESPONSE_COUNT,
    IncidenceSummary,
)
from ostrc.validation.diagnostics import DiagnosticLog, resolve_log

NEW_CASE = "_new_case"


def flag_new_cases(collapsed: pd.DataFrame, participant_key: str) -> pd.Series:
    """Flag new cases on a table from collapse_per_period().

    Returns:
        float64 Series: 1.0 new case, 0.0 not new, NaN undetermined.
    """
    current = collapsed[PRESENT]
    previous = collapsed.groupby(participant_key, sort=False, dropna=False)[PRESENT].shift(1)
    conditions = [
        (previous == 0) & (current == 1),
        previous == 1,
        current == 0,
        previous.isna() & (current == 1),
    ]
    flags = np.select(conditions, [1.0, 0.0, 0.0, np.nan], default=np.nan)
    return pd.Series(flags, index=collapsed.index, name=NEW_CASE)


def _count_per_period(flagged: pd.DataFrame, period_key: str) -> pd.DataFrame:
    # Undetermined (NaN) flags are not counted as new cases.
    is_new = (flagged[NEW_CASE] == 1).astype("int64")
    return (
        flagged.assign(_is_new=is_new)
        .groupby(period_key, sort=True)
        .agg(**{RESPONSE_COUNT: ("_is_new", "size"), NEW_CASE_COUNT: ("_is_new", "sum")})
        .reset_index()
    )


def incidence_per_period(
    responses: pd.DataFrame,
    participant_key: str,
    period_key: str,
    indicator_key: str,
    diagnostics: DiagnosticLog | None = None,
) -> pd.DataFrame:
    """Calculate incidence for each time period.

    Args:
        responses: Response table, one row per questionnaire response.
        participant_key: Participant identifier column.
        period_key: Time period column (week number, date, ...).
        indicator_key: Binary problem-type column (1 = problem of this type,
            0 = not, NA = missing), e.g. health problem, injury, illness.
        diagnostics: Log receiving advisory findings.

    Returns:
        DataFrame with columns [period_key, "response_count",
        "new_case_count", "incidence_rate"]: the first period's row, then
        the remaining periods in ascending order.

    Raises:
        ValidationError: If a key column is missing or entirely NA, the
            indicator is not a numeric 0/1 variable, or the period column
            has only one value.

    Examples:
        >>> d = pd.DataFrame({
        ...     "id": [1, 1, 1, 1, 2, 2, 2],
        ...     "week": [1, 1, 2, 3, 1, 2, 3],
        ...     "hp": [1, 1, 0, 1, 1, 0, 1],
        ... })
        >>> incidence_per_period(d, "id", "week", "hp")["incidence_rate"].tolist()
        [0.0, 0.0, 1.0]
    """
    log = resolve_log(diagnostics)
    validate_period_inputs(
        responses, participant_key, period_key, indicator_key, log, measure="incidence"
    )

    collapsed = collapse_per_period(responses, participant_key, period_key, indicator_key)
    flagged = collapsed.assign(**{NEW_CASE: flag_new_cases(collapsed, participant_key)})

    first_period = flagged[period_key].min()
    is_first = flagged[period_key] == first_period

    first = _count_per_period(flagged[is_first], period_key)
    first[INCIDENCE_RATE] = np.where(first[NEW_CASE_COUNT] == 0, 0.0, np.nan)

    rest = _count_per_period(flagged[~is_first], period_key)
    rest[INCIDENCE_RATE] = rest[NEW_CASE_COUNT] / rest[RESPONSE_COUNT]

    result = pd.concat([first, rest], ignore_index=True)
    result[RESPONSE_COUNT] = result[RESPONSE_COUNT].astype("int64")
    result[NEW_CASE_COUNT] = result[NEW_CASE_COUNT].astype("int64")
    result[INCIDENCE_RATE] = result[INCIDENCE_RATE].astype("float64")
    logger.debug(
        "Incidence of {} over {} periods ({} participant-periods)",
        indicator_key,
        len(result),
        len(flagged),
    )
    return result


def summarize_incidence(
    per_period: pd.DataFrame,
    ci_level: float = DEFAULT_CI_LEVEL,
) -> IncidenceSummary:
    """Summarize a table from incidence_per_period() as an IncidenceSummary.

    The confidence interval uses every period row as the sample size,
    including the first period when its incidence is undefined.
    """
    return summarize_rates(per_period[INCIDENCE_RATE], ci_level, IncidenceSummary)


def incidence_summary(
    responses: pd.DataFrame,
    participant_key: str,
    period_key: str,
    indicator_key: str,
    ci_level: float = DEFAULT_CI_LEVEL,
    diagnostics: DiagnosticLog | None = None,
) -> pd.DataFrame:
    """Calculate the mean incidence per period with a confidence interval.

    Args:
        responses: Response table.
        participant_key: Participant identifier column.
        period_key: Time period column.
        indicator_key: Binary problem-type column.
        ci_level: Confidence level of the interval. Default 0.95.
        diagnostics: Log receiving advisory findings.

    Returns:
        One-row DataFrame with columns "incidence_mean", "incidence_sd",
        "incidence_ci_lower", "incidence_ci_upper".
    """
    per_period = incidence_per_period(
        responses, participant_key, period_key, indicator_key, diagnostics
    )
    summary = summarize_incidence(per_period, ci_level)
    return pd.DataFrame([summary.to_row()], dtype="float64")


def incidence_all(
    responses: pd.DataFrame,
    participant_key: str,
    period_key: str,
    problem_types: Sequence[str],
    group_key: str | None = None,
    ci_level: float = DEFAULT_CI_LEVEL,
    diagnostics: DiagnosticLog | None = None,
) -> pd.DataFrame:
    """Calculate the mean incidence for several problem types and subgroups.

    For instance the incidence of health problems, substantial health
    problems, injuries and illnesses, optionally per season or sex.

    Args:
        responses: Response table.
        participant_key: Participant identifier column.
        period_key: Time period column.
        problem_types: Names of binary problem-type columns.
        group_key: Optional categorical column; output is computed per value.
        ci_level: Confidence level of the intervals. Default 0.95.
        diagnostics: Log receiving advisory findings from every computation.

    Returns:
        Long DataFrame with columns [group_key (if given), "problem_type",
        "incidence_mean", "incidence_sd", "incidence_ci_lower",
        "incidence_ci_upper"], sorted by subgroup then problem type.
    """
    log = resolve_log(diagnostics)

    def _summarize(subset: pd.DataFrame, problem_type: str) -> dict[str, float | None]:
        per_period = incidence_per_period(subset, participant_key, period_key, problem_type, log)
        return summarize_incidence(per_period, ci_level).to_row()

    return fan_out(responses, problem_types, group_key, _summarize)
