"""Health problem case data.

Turns longitudinal questionnaire responses into one row per health problem
case. Responses sharing a (participant, case ID) pair are the same problem
followed over time; every response with a health problem on question 1 must
carry a case ID.

Derived per case:
    start_date / end_date  first and last questionnaire date
    duration               whole weeks between them, plus one
    timeloss               responses with "could not participate" on Q1
    hp_sub                 substantial health problem (first response)
    severity_score         sum of Q1-Q4 (first response)

The duration assumes each questionnaire was answered on the day it was
sent and covers the week before it, so a single response lasts one week.
"""

from __future__ import annotations

import numpy as np
import pandas as pd
from loguru import logger
from pandas.api.types import is_datetime64_any_dtype, is_numeric_dtype

from ostrc.models.incidence import (
    DURATION,
    END_DATE,
    SEVERITY_SCORE,
    START_DATE,
    SUBSTANTIAL,
    TIMELOSS,
)
from ostrc.models.questionnaire import InstrumentVersion
from ostrc.transforms.coding import classify_problem
from ostrc.transforms.severity import severity_score
from ostrc.transforms.substantial import classify_substantial
from ostrc.transforms.timeloss import (
    count_timeloss,
    require_case_ids,
    warn_case_ids_without_problem,
)
from ostrc.validation.checks import (
    require_columns,
    require_numeric,
    require_version,
    to_float,
    warn_if_missing,
)
from ostrc.validation.diagnostics import (
    E_NOT_DATE,
    W_DUPLICATE_ROWS,
    W_MISSING_DATE,
    W_MISSING_FOLLOWUP,
    W_MISSING_PARTICIPANT,
    W_MISSING_Q1,
    W_SUBSTANTIAL_FAILED,
    DiagnosticCategory,
    DiagnosticLog,
    ValidationError,
    fail,
    resolve_log,
)

_PROBLEM = "_hp"


def _as_dates(values: pd.Series, date_key: str) -> pd.Series:
    """Return datetimes, or numbers for week-numbered data, failing on anything else."""
    if is_datetime64_any_dtype(values) or is_numeric_dtype(values):
        return values
    try:
        return pd.to_datetime(values)
    except (TypeError, ValueError) as exc:
        fail(
            E_NOT_DATE,
            DiagnosticCategory.TYPE,
            f"Variable {date_key} could not be read as dates: {exc}",
            variable=date_key,
        )


def weeks_between(start: pd.Series, end: pd.Series) -> pd.Series:
    """Number of weeks from start to end (dates), or end - start (week numbers)."""
    if is_datetime64_any_dtype(start):
        return (end - start) / pd.Timedelta(weeks=1)
    return (end - start).astype("float64")


def case_duration(start: pd.Series, end: pd.Series) -> pd.Series:
    """Inclusive duration in weeks: a case seen on a single date lasts one week."""
    return (np.round(weeks_between(start, end)) + 1).astype("Int64")


def _aggregate_cases(
    case_rows: pd.DataFrame, keys: list[str], date_key: str, q1_key: str
) -> pd.DataFrame:
    """Collapse the responses of each case to its first row plus case-level columns."""
    grouped = case_rows.groupby(keys, sort=False, dropna=False)
    per_case = pd.DataFrame(
        {
            START_DATE: grouped[date_key].min(),
            END_DATE: grouped[date_key].max(),
            TIMELOSS: grouped[q1_key].agg(lambda q1: count_timeloss(to_float(q1))),
        }
    )
    per_case[DURATION] = case_duration(per_case[START_DATE], per_case[END_DATE])
    per_case[TIMELOSS] = per_case[TIMELOSS].astype("int64")

    first_rows = case_rows.drop_duplicates(subset=keys, keep="first")
    return first_rows.merge(per_case.reset_index(), on=keys, how="left")


def build_cases(
    responses: pd.DataFrame,
    participant_key: str,
    case_key: str,
    date_key: str,
    q1_key: str,
    q2_key: str,
    q3_key: str,
    q4_key: str,
    version: str | InstrumentVersion = InstrumentVersion.V2,
    diagnostics: DiagnosticLog | None = None,
) -> pd.DataFrame:
    """Create health problem case data from OSTRC questionnaire responses.

    Args:
        responses: Response table, one row per questionnaire response.
        participant_key: Participant identifier column.
        case_key: Health problem case identifier column. Rows sharing a
            participant and case ID are one health problem over time;
            different IDs on the same day (e.g. left and right knee) are
            different problems.
        date_key: Questionnaire date column (datetimes, or week numbers).
        q1_key: Question 1 column.
        q2_key: Question 2 column.
        q3_key: Question 3 column.
        q4_key: Question 4 column.
        version: OSTRC questionnaire version for substantiality, "2.0" or "1.0".
        diagnostics: Log receiving advisory findings.

    Returns:
        DataFrame with one row per case and columns [case_key,
        participant_key, "start_date", "end_date", "duration", "timeloss",
        "hp_sub", "severity_score", ...], followed by the remaining input
        columns taken from the case's first response. The question and date
        columns are consumed. "hp_sub" is left out when substantiality
        cannot be determined. Without any health problem cases the table is
        empty but keeps every column.

    Raises:
        ValidationError: If a column is missing, question 1 is not numeric,
            a health problem has no case ID, the dates cannot be read, or a
            question has codes that are not valid OSTRC scores.
    """
    log = resolve_log(diagnostics)
    parsed_version = require_version(version)
    question_keys = [q1_key, q2_key, q3_key, q4_key]
    require_columns(responses, [participant_key, case_key, date_key, *question_keys])
    require_numeric(responses[q1_key], q1_key)

    data = responses.copy()
    data[date_key] = _as_dates(data[date_key], date_key)
    data[_PROBLEM] = classify_problem(data[q1_key], log, name=q1_key)
    is_problem = (data[_PROBLEM] == 1).fillna(False).astype(bool)

    require_case_ids(data, is_problem, case_key)
    has_case = data[case_key].notna()
    warn_case_ids_without_problem(
        has_case & (data[_PROBLEM] == 0).fillna(False).astype(bool), case_key, q1_key, log
    )

    duplicated = has_case & data.duplicated([participant_key, case_key, date_key], keep="first")
    if duplicated.any():
        log.warn(
            W_DUPLICATE_ROWS,
            DiagnosticCategory.DUPLICATE,
            f"The data has {int(duplicated.sum())} duplicate(s) with the same "
            f"{participant_key}, {date_key} and {case_key}. "
            "The first row was chosen for each of these.",
            variable=case_key,
            affected_count=int(duplicated.sum()),
        )
        data = data[~duplicated]
        is_problem = is_problem[~duplicated]

    warn_if_missing(
        data[q1_key].isna(),
        log,
        W_MISSING_Q1,
        f"At least one of the responses to {q1_key} is missing data.",
        variable=q1_key,
    )
    followup_missing = is_problem & data[[q2_key, q3_key, q4_key]].isna().any(axis=1)
    warn_if_missing(
        followup_missing,
        log,
        W_MISSING_FOLLOWUP,
        f"Some {q1_key} responses are above 0 and denote a health problem, "
        "but some of the other questions have missing data.",
        variable=q1_key,
    )
    warn_if_missing(
        data[participant_key].isna(),
        log,
        W_MISSING_PARTICIPANT,
        f"At least one of the participant IDs ({participant_key}) is missing data.",
        variable=participant_key,
    )
    warn_if_missing(
        data[date_key].isna(),
        log,
        W_MISSING_DATE,
        f"At least one of the questionnaire dates ({date_key}) is missing data.",
        variable=date_key,
    )

    case_rows = data[is_problem & data[case_key].notna()].copy()
    keys = [participant_key, case_key]
    case_rows[SEVERITY_SCORE] = severity_score(
        *(case_rows[q] for q in question_keys), names=tuple(question_keys)
    )

    if case_rows.empty:
        cases = case_rows.assign(
            **{
                START_DATE: case_rows[date_key],
                END_DATE: case_rows[date_key],
                DURATION: pd.Series(dtype="Int64"),
                TIMELOSS: pd.Series(dtype="int64"),
                SUBSTANTIAL: pd.Series(dtype="Int64"),
            }
        )
    else:
        cases = _aggregate_cases(case_rows, keys, date_key, q1_key)
        try:
            cases[SUBSTANTIAL] = classify_substantial(
                cases[q1_key],
                cases[q2_key],
                cases[q3_key],
                version=parsed_version,
                diagnostics=log,
                names=(q1_key, q2_key, q3_key),
            )
        except ValidationError as exc:
            log.warn(
                W_SUBSTANTIAL_FAILED,
                DiagnosticCategory.SUBSTANTIAL,
                f"Substantial health problems could not be found: {exc}",
                variable=q1_key,
                affected_count=len(cases),
            )

    derived = [START_DATE, END_DATE, DURATION, TIMELOSS, SUBSTANTIAL, SEVERITY_SCORE]
    leading = [case_key, participant_key] + [c for c in derived if c in cases.columns]
    consumed = set(leading) | set(question_keys) | {date_key, _PROBLEM}
    passthrough = [c for c in cases.columns if c not in consumed]

    logger.info(
        "Built {} health problem cases from {} responses", len(cases), len(responses)
    )
    return cases[leading + passthrough].reset_index(drop=True)
